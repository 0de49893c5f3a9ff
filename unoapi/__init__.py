"""
Генератор TypeScript API функций и интерфейсов из OpenAPI v3 документов
"""

from .config import UnoApiConfig, exists_config, generate_config_file, load_config
from .errors import (
    ConfigLoadError,
    DocumentFetchError,
    DocumentLoadError,
    FileWriteError,
    UnoApiError,
)
from .generator import UnoApiGenerator, generate_api

__version__ = "0.3.0"

__all__ = [
    "UnoApiConfig",
    "UnoApiGenerator",
    "generate_api",
    "exists_config",
    "generate_config_file",
    "load_config",
    "ConfigLoadError",
    "DocumentFetchError",
    "DocumentLoadError",
    "FileWriteError",
    "UnoApiError",
]
