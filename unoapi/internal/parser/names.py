"""
Разбор URL, ключей схем и свойств в имена и типы TypeScript
"""

import re
from typing import Any, Dict, List, Optional, Pattern, Sequence, Set, Tuple, Union

from ..types.models import ParsedProperty, ParsedRefKey, ParsedUrl
from ..utils.common import (
    TS_BUILTIN_TYPES,
    camel_case,
    is_base_type,
    upper_first,
)
from .type_expr import is_plain_type_expr, parse_type_expr

SCHEMA_PREFIX = "#/components/schemas/"

BASE_TYPE_MAPPING = {
    "string": "string",
    "integer": "number",
    "int": "number",
    "long": "number",
    "double": "number",
    "float": "number",
    "number": "number",
    "boolean": "boolean",
    "object": "object",
}

Ignore = Union[str, Pattern]


def parse_url(url: str) -> ParsedUrl:
    """
    Разбор URL в имя функции, имя файла, директорию и path параметры.

    Examples:
        /api/user/login        -> login, user, api
        /api/user/{id}         -> userById, api, ""
        /api/v1/user/{id}/info -> info, user, api/v1
    """
    path_str_params: List[str] = []
    segments: List[Tuple[bool, str]] = []

    for segment in url.split("?")[0].strip("/").split("/"):
        if not segment:
            continue
        matched = re.search(r"\{(.+?)\}", segment) or re.fullmatch(r":(.+)", segment)
        if matched:
            path_str_params.append(matched.group(1))
            segments.append((True, matched.group(1)))
        else:
            segments.append((False, camel_case(segment)))

    names = [value for is_param, value in segments if not is_param]

    # Параметры, идущие после последнего значимого сегмента
    trailing: List[str] = []
    for is_param, value in reversed(segments):
        if not is_param:
            break
        trailing.insert(0, value)

    if not names:
        return ParsedUrl(
            func_name="index",
            file_name="index",
            dir_name="",
            path_str_params=path_str_params,
        )

    if trailing:
        suffix = "And".join(upper_first(camel_case(name)) for name in trailing)
        func_name = f"{names[-1]}By{suffix}"
    else:
        func_name = names[-1]
    file_name = names[-2] if len(names) > 1 else "index"
    dir_names = names[:-2]

    return ParsedUrl(
        func_name=func_name,
        file_name=file_name,
        dir_name="/".join(dir_names),
        path_str_params=path_str_params,
    )


def _type_mapper(type_mapping: Optional[Dict[str, str]] = None):
    mapping = {**BASE_TYPE_MAPPING, **(type_mapping or {})}

    def mapper(name: str) -> str:
        return mapping.get(name, name)

    return mapper


def parse_ref_key(
    ref_key: str, type_mapping: Optional[Dict[str, str]] = None
) -> ParsedRefKey:
    """
    Разбор ключа схемы в имя типа и имя файла.

    Examples:
        com.a.b.ResponseDTO«com.a.b.PageResult«ItemVO对象»» -> ResponseDTO<PageResult<ItemVO>>
        Response«List«User»»                               -> Response<User[]>
    """
    key = ref_key.replace(SCHEMA_PREFIX, "")
    type_name = parse_type_expr(key).render(_type_mapper(type_mapping))
    file_name = re.sub(r"<.*$", "", type_name).replace("[]", "")
    return ParsedRefKey(type_name=type_name, file_name=file_name)


def _ref_key(ref: str) -> str:
    return ref.replace(SCHEMA_PREFIX, "")


def flatten_schema(
    schema: Any, schemas: Optional[Dict[str, Any]] = None, seen: Optional[Set[str]] = None
) -> Any:
    """Слияние allOf частей в один объект с properties/required"""
    if not isinstance(schema, dict) or not isinstance(schema.get("allOf"), list):
        return schema
    if len(schema["allOf"]) < 2 and not schema.get("properties"):
        return schema

    seen = seen or set()
    properties: Dict[str, Any] = {}
    required: List[str] = []

    for part in schema["allOf"] + [schema]:
        if part is schema:
            resolved = {k: v for k, v in schema.items() if k != "allOf"}
        elif isinstance(part, dict) and "$ref" in part:
            key = _ref_key(part["$ref"])
            if schemas is None or key in seen or key not in schemas:
                continue
            resolved = flatten_schema(schemas[key], schemas, seen | {key})
        else:
            resolved = flatten_schema(part, schemas, seen)

        if isinstance(resolved, dict):
            properties.update(resolved.get("properties") or {})
            required.extend(resolved.get("required") or [])

    merged = {k: v for k, v in schema.items() if k != "allOf"}
    merged["properties"] = properties
    if required:
        merged["required"] = list(dict.fromkeys(required))
    return merged


def resolve_schema(
    schemas: Dict[str, Any], ref: str
) -> Tuple[Optional[str], Optional[Dict[str, Any]]]:
    """Поиск схемы по ссылке с проходом по цепочке $ref алиасов"""
    key = _ref_key(ref)
    seen: Set[str] = set()

    while key in schemas and key not in seen:
        seen.add(key)
        schema = schemas[key]
        if isinstance(schema, dict) and "$ref" in schema:
            key = _ref_key(schema["$ref"])
            continue
        return key, schema

    return None, None


def is_model_schema(schema: Any, ref_key: str, schemas: Optional[Dict[str, Any]] = None) -> bool:
    """Схема порождает отдельный интерфейс (а не примитивный алиас)"""
    file_name = parse_ref_key(ref_key).file_name
    if not file_name or file_name[0].islower():
        return False
    schema = flatten_schema(schema, schemas)
    return isinstance(schema, dict) and bool(schema.get("properties"))


def _literal(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    if value is None:
        return "null"
    return "'" + str(value).replace("'", "\\'") + "'"


def parse_property(
    schema: Any,
    type_mapping: Optional[Dict[str, str]] = None,
    schemas: Optional[Dict[str, Any]] = None,
) -> ParsedProperty:
    """
    Преобразование схемы свойства в тип TypeScript.

    Возвращает тип, список всех встреченных $ref (в порядке обхода)
    и имя файла первого ссылочного типа.
    """
    mapping = {**BASE_TYPE_MAPPING, **(type_mapping or {})}
    refs: List[str] = []
    file_names: List[str] = []

    def parse_ref(ref: str, seen: Set[str]) -> str:
        key = _ref_key(ref)
        parsed = parse_ref_key(ref, type_mapping)

        # Явное сопоставление пользователя важнее имени схемы
        if type_mapping and parsed.type_name in type_mapping:
            return type_mapping[parsed.type_name]

        # «string» и подобные ссылки на базовые типы
        primitive = mapping.get(parsed.type_name, "any")
        if is_base_type(primitive) and primitive != "any":
            refs.append(ref)
            return primitive

        if schemas is not None and key in schemas and key not in seen:
            target = schemas[key]
            if isinstance(target, dict) and "$ref" in target:
                return parse_ref(target["$ref"], seen | {key})
            if not is_model_schema(target, key, schemas):
                return parse(target, seen | {key})

        refs.append(ref)
        file_names.append(parsed.file_name)
        return parsed.type_name

    def parse(prop: Any, seen: Set[str]) -> str:
        if prop is None:
            return "any"
        if isinstance(prop, str):
            return mapping.get(prop, "any")
        if not isinstance(prop, dict):
            return "any"

        if prop.get("$ref"):
            return parse_ref(prop["$ref"], seen)

        for key, joiner in (("allOf", " & "), ("oneOf", " | "), ("anyOf", " | ")):
            variants = prop.get(key)
            if not isinstance(variants, list) or not variants:
                continue
            types = [
                parse(variant, seen)
                for variant in variants
                if not (isinstance(variant, dict) and variant.get("type") == "null")
            ]
            types = list(dict.fromkeys(types))
            return joiner.join(types) if types else "any"

        prop_type = prop.get("type")

        if prop_type == "array":
            sub_type = parse(prop["items"], seen) if prop.get("items") else "any"
            if " | " in sub_type or " & " in sub_type:
                sub_type = f"({sub_type})"
            return f"{sub_type}[]"

        if prop.get("enum") and prop_type != "object":
            return " | ".join(dict.fromkeys(_literal(value) for value in prop["enum"]))

        if (
            prop_type in ("object", None)
            and not prop.get("properties")
            and isinstance(prop.get("additionalProperties"), dict)
        ):
            return f"Record<string, {parse(prop['additionalProperties'], seen)}>"

        if prop_type is None and prop.get("properties"):
            return "object"

        return mapping.get(prop_type, "any")

    ts_type = parse(schema, set())
    return ParsedProperty(
        ts_type=ts_type,
        refs=refs,
        ts_file_name=file_names[0] if file_names else None,
    )


def is_allow_generate(name: str, ignores: Optional[Sequence[Ignore]] = None) -> bool:
    """Проверка имени (ключ схемы, имя файла или путь) по списку исключений"""
    if not ignores or not name:
        return True

    string_ignores = [item for item in ignores if isinstance(item, str)]

    for ignore in ignores:
        if isinstance(ignore, str):
            if name == ignore:
                return False
        elif ignore.search(name):
            return False

    # Ключ схемы или $ref, а не URL: сравниваем также имя файла
    if not name.startswith(("/", "http://", "https://")):
        if parse_ref_key(name).file_name in string_ignores:
            return False

    return True


def get_allow_type_name(ts_type: str, ignores: Optional[Sequence[Ignore]] = None) -> str:
    """
    Снятие запрещенных оберток с типа.

    Examples:
        Res<User[]> при ignores=['Res'] -> User[]
        Res<Page<User>> при ignores=['Res', 'Page'] -> User
    """
    if not ts_type:
        return ""
    if not ignores or not is_plain_type_expr(ts_type):
        return ts_type

    node = parse_type_expr(ts_type)
    extra_depth = 0

    while True:
        if not node.name or is_base_type(node.name) or is_allow_generate(node.name, ignores):
            node.array_depth += extra_depth
            return node.render()
        if not node.args:
            return ""
        extra_depth += node.array_depth
        node = node.args[0]


def collect_type_names(ts_type: str) -> List[str]:
    """Имена моделей, использованные в выражении типа"""
    if not ts_type:
        return []
    text = re.sub(r"'(?:[^'\\]|\\.)*'", "", ts_type)
    names = []
    for name in re.findall(r"[^\W\d][\w$]*", text):
        if is_base_type(name) or name in TS_BUILTIN_TYPES or name in names:
            continue
        names.append(name)
    return names
