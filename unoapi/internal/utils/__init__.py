"""Утилиты для генератора"""

from .common import (
    BASE_TYPES,
    TS_BUILTIN_TYPES,
    camel_case,
    is_base_type,
    is_identifier,
    is_similar,
    sanitize_identifier,
    singularize,
    upper_first,
)

__all__ = [
    "BASE_TYPES",
    "TS_BUILTIN_TYPES",
    "camel_case",
    "is_base_type",
    "is_identifier",
    "is_similar",
    "sanitize_identifier",
    "singularize",
    "upper_first",
]
