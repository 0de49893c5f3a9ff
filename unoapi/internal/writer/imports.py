"""
Разбор и слияние import выражений TypeScript
"""

import re
from typing import List, Sequence, Tuple, Union

from ..types.models import ImportItem

ImportEntry = Union[ImportItem, str]

_NAMED_IMPORT = re.compile(
    r"^import\s+(type\s+)?(?:([\w$]+)\s*,\s*)?\{([^}]*)\}\s*from\s*['\"]([^'\"]+)['\"]\s*;?$"
)
_DEFAULT_IMPORT = re.compile(r"^import\s+(type\s+)?([\w$]+)\s+from\s*['\"]([^'\"]+)['\"]\s*;?$")
_NAMESPACE_IMPORT = re.compile(
    r"^import\s+(type\s+)?\*\s+as\s+([\w$]+)\s+from\s*['\"]([^'\"]+)['\"]\s*;?$"
)
_SIDE_EFFECT_IMPORT = re.compile(r"^import\s*['\"][^'\"]+['\"]\s*;?$")


def _is_complete(statement: str) -> bool:
    return bool(
        re.search(r"\bfrom\s*['\"][^'\"]+['\"]", statement)
        or _SIDE_EFFECT_IMPORT.match(statement)
    )


def parse_import(statement: str) -> ImportEntry:
    """Разбор одного import выражения, нераспознанные возвращаются строкой"""
    text = " ".join(statement.split())

    matched = _NAMED_IMPORT.match(text)
    if matched:
        only_type, default_name, names, path = matched.groups()
        return ImportItem(
            path=path,
            default_name=default_name,
            names=[name.strip() for name in names.split(",") if name.strip()],
            only_type=bool(only_type),
        )

    matched = _NAMESPACE_IMPORT.match(text)
    if matched:
        only_type, as_name, path = matched.groups()
        return ImportItem(path=path, as_name=as_name, only_type=bool(only_type))

    matched = _DEFAULT_IMPORT.match(text)
    if matched:
        only_type, default_name, path = matched.groups()
        if default_name != "type":
            return ImportItem(path=path, default_name=default_name, only_type=bool(only_type))

    return statement


def parse_imports(code: str) -> Tuple[List[ImportEntry], List[str]]:
    """
    Разделение кода на import выражения и остальные строки.

    Многострочные import собираются до строки с from '...'.
    """
    imports: List[ImportEntry] = []
    others: List[str] = []
    buffer: List[str] = []

    for line in (code or "").splitlines():
        stripped = line.strip()
        if not buffer and not re.match(r"import[\s{*'\"]", stripped):
            others.append(line)
            continue

        buffer.append(stripped)
        statement = " ".join(buffer)
        if _is_complete(statement):
            imports.append(_parse_buffer(buffer))
            buffer = []

    if buffer:
        imports.append("\n".join(buffer))

    return imports, others


def _parse_buffer(lines: List[str]) -> ImportEntry:
    result = parse_import(" ".join(lines))
    if isinstance(result, ImportItem) or len(lines) == 1:
        return result
    return "\n".join(lines)


def _is_same_import(item: ImportItem, other: ImportItem) -> bool:
    if item.path != other.path or item.only_type != other.only_type:
        return False
    # Namespace import не объединяется с другими формами
    if item.as_name or other.as_name:
        return item.as_name == other.as_name
    if item.default_name and other.default_name:
        return item.default_name == other.default_name
    return True


def _add_import(result: List[ImportEntry], item: ImportEntry) -> None:
    if isinstance(item, str):
        if item not in result:
            result.append(item)
        return

    for current in result:
        if isinstance(current, ImportItem) and _is_same_import(current, item):
            current.names.extend(item.names)
            current.default_name = current.default_name or item.default_name
            return
    result.append(item.model_copy(deep=True))


def merge_imports(
    existing: Sequence[ImportEntry], incoming: Sequence[ImportEntry]
) -> List[ImportEntry]:
    """
    Слияние списков import.

    Элементы с одинаковым путем объединяются (в том числе повторы внутри existing),
    порядок existing сохраняется, новые пути добавляются в конец.
    Повторы имен убираются при выводе.
    """
    result: List[ImportEntry] = []
    for item in list(existing) + list(incoming):
        _add_import(result, item)
    return result


def stringify_import(item: ImportEntry) -> str:
    if isinstance(item, str):
        return item

    prefix = "type " if item.only_type else ""
    names = list(dict.fromkeys(item.names))

    if names:
        named = f"{{ {', '.join(names)} }}"
        if item.default_name and item.only_type:
            # import type не допускает default и именованные импорты одновременно
            return (
                f"import type {item.default_name} from '{item.path}';\n"
                f"import type {named} from '{item.path}';"
            )
        if item.default_name:
            return f"import {prefix}{item.default_name}, {named} from '{item.path}';"
        return f"import {prefix}{named} from '{item.path}';"

    if item.as_name:
        return f"import {prefix}* as {item.as_name} from '{item.path}';"

    if item.default_name:
        return f"import {prefix}{item.default_name} from '{item.path}';"

    return f"import '{item.path}';"


def stringify_imports(items: Sequence[ImportEntry]) -> str:
    return "\n".join(stringify_import(item) for item in items)
