"""
Разбор имен типов с дженериками.

Грамматика:
    type := name ['<' type (',' type)* '>'] ('[]')*

Скобки «» (экспорт некоторых Java бэкендов) приводятся к <>.
Префиксы пакетов (com.example.dto.) отбрасываются у каждого имени.
"""

import re
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple

LT, GT, COMMA, ARRAY = "<", ">", ",", "[]"

_DELIMITERS = {"<", ">", ","}


@dataclass
class TypeNode:
    name: str
    args: List["TypeNode"] = field(default_factory=list)
    array_depth: int = 0

    def render(self, mapper: Optional[Callable[[str], str]] = None, depth: int = 0) -> str:
        """Сборка TypeScript выражения из дерева"""
        suffix = ARRAY * self.array_depth

        # List<X> -> X[]
        if self.name == "List":
            inner = self.args[0].render(mapper, depth + 1) if self.args else "any"
            return f"{inner}[]{suffix}"

        # Map<K, V> -> Record<K, V>
        if self.name == "Map" and len(self.args) == 2:
            key, value = (arg.render(mapper, depth + 1) for arg in self.args)
            return f"Record<{key}, {value}>{suffix}"

        name = self.name
        if mapper and depth > 0 and not self.args:
            name = mapper(name)

        if self.args:
            args = ", ".join(arg.render(mapper, depth + 1) for arg in self.args)
            return f"{name}<{args}>{suffix}"

        return f"{name}{suffix}"


def tokenize(text: str) -> List[str]:
    text = text.replace("«", "<").replace("»", ">")
    tokens: List[str] = []
    buffer = ""
    i = 0

    def flush():
        nonlocal buffer
        if buffer.strip():
            tokens.append(buffer.strip())
        buffer = ""

    while i < len(text):
        char = text[i]
        if char in _DELIMITERS:
            flush()
            tokens.append(char)
        elif text.startswith(ARRAY, i):
            flush()
            tokens.append(ARRAY)
            i += 1
        else:
            buffer += char
        i += 1

    flush()
    return tokens


def _clean_name(name: str, depth: int) -> str:
    # Убираем префикс пакета: com.example.dto.User -> User
    name = re.sub(r"^.*[./]", "", name)
    if depth == 0:
        return name
    # Внутри скобок оставляем только ASCII буквы и цифры: ItemVO对象 -> ItemVO
    return re.sub(r"[^A-Za-z0-9]", "", name) or name


def _parse(tokens: List[str], pos: int, depth: int) -> Tuple[TypeNode, int]:
    node = TypeNode(name="")

    if pos < len(tokens) and tokens[pos] not in (LT, GT, COMMA, ARRAY):
        node.name = _clean_name(tokens[pos], depth)
        pos += 1

    if pos < len(tokens) and tokens[pos] == LT:
        pos += 1
        while pos < len(tokens) and tokens[pos] != GT:
            if tokens[pos] == COMMA:
                pos += 1
                continue
            child, pos = _parse(tokens, pos, depth + 1)
            node.args.append(child)
        # Незакрытая скобка закрывается неявно
        if pos < len(tokens):
            pos += 1

    while pos < len(tokens) and tokens[pos] == ARRAY:
        node.array_depth += 1
        pos += 1

    return node, pos


def parse_type_expr(text: str) -> TypeNode:
    """Разбор строки в дерево типа, лишние закрывающие скобки игнорируются"""
    node, _ = _parse(tokenize(text or ""), 0, 0)
    return node


def is_plain_type_expr(text: str) -> bool:
    """Строка состоит только из имен, дженериков и массивов"""
    return bool(re.fullmatch(r"[^'\"|&{}();:]*", text or ""))
