"""
Ошибки генератора
"""

from typing import Optional


class UnoApiError(Exception):
    """Базовая ошибка генератора"""


class DocumentFetchError(UnoApiError):
    def __init__(self, url: str, status_code: Optional[int] = None, message: str = ""):
        self.url = url
        self.status_code = status_code
        self.message = message
        status = f"[{status_code}] " if status_code is not None else ""
        super().__init__(f"{status}{url}: {message}")


class DocumentLoadError(UnoApiError):
    def __init__(self, path: str, message: str = ""):
        self.path = path
        self.message = message
        super().__init__(f"{path}: {message}")


class ConfigLoadError(UnoApiError):
    def __init__(self, path: str, message: str = ""):
        self.path = path
        self.message = message
        super().__init__(f"{path}: {message}")


class FileWriteError(UnoApiError):
    def __init__(self, path: str, message: str = ""):
        self.path = path
        self.message = message
        super().__init__(f"{path}: {message}")
