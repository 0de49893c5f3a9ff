"""Мелкие утилиты для работы со строками и типами"""

import re
from typing import Optional

BASE_TYPES = ("string", "number", "boolean", "object", "any", "unknown")

# Ключевые слова и встроенные типы TypeScript, которые не являются моделями
TS_BUILTIN_TYPES = {
    "Array",
    "Record",
    "Partial",
    "Promise",
    "Blob",
    "File",
    "Date",
    "null",
    "undefined",
    "void",
    "never",
}


def is_base_type(type_name: str) -> bool:
    """Является ли тип базовым типом TypeScript"""
    return type_name in BASE_TYPES


def upper_first(value: str) -> str:
    if not value:
        return value
    return value[0].upper() + value[1:]


def is_similar(str1: Optional[str], str2: Optional[str]) -> bool:
    """Сравнение строк без учета регистра"""
    if str1 is None or str2 is None:
        return str1 is None and str2 is None
    return str1.lower() == str2.lower()


def camel_case(value: str) -> str:
    """kebab-case и snake_case -> camelCase"""
    return re.sub(r"[-_](\w)", lambda m: m.group(1).upper(), value)


def singularize(word: str) -> str:
    """Упрощенное приведение имени коллекции к единственному числу"""
    if len(word) > 3 and word.endswith("ies"):
        return word[:-3] + "y"
    if len(word) > 3 and word.endswith(("ses", "xes", "ches", "shes")):
        return word[:-2]
    if len(word) > 1 and word.endswith("s") and not word.endswith("ss"):
        return word[:-1]
    return word


def sanitize_identifier(name: str) -> str:
    """Удаление символов, недопустимых в имени поля TypeScript"""
    return re.sub(r"[^\w$]", "", name)


def is_identifier(name: str) -> bool:
    return bool(re.fullmatch(r"[A-Za-z_$][A-Za-z0-9_$]*", name or ""))
