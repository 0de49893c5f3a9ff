"""
Рендеринг TypeScript кода: поля, интерфейсы моделей и query, API функции, index файлы.

Все функции чистые: возвращают текст кода и найденные ссылки, ничего не пишут на диск.
"""

import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, Union

from ..parser.names import (
    SCHEMA_PREFIX,
    Ignore,
    collect_type_names,
    flatten_schema,
    get_allow_type_name,
    parse_property,
    parse_ref_key,
)
from ..parser.type_expr import parse_type_expr
from ..types.models import ApiContext, FieldOption, ImportItem
from ..utils.common import is_base_type, sanitize_identifier
from .templates import templates

logger = logging.getLogger(__name__)

GENERIC_NAMES = ("T", "E", "U", "K", "V")

# Аннотации JSDoc, переносимые из схемы поля
SCHEMA_TAGS = ("minLength", "maxLength", "minimum", "maximum", "pattern", "default")

FuncTpl = Callable[[ApiContext], str]
Substitute = Callable[[str, bool], Optional[str]]


@dataclass
class CodeResult:
    """Фрагмент кода и ссылки, которые он использует"""

    code: str
    refs: List[str] = field(default_factory=list)
    type_names: List[str] = field(default_factory=list)


@dataclass
class ModelCode(CodeResult):
    """Интерфейс модели"""

    type_name: str = ""
    file_name: str = ""
    ref_key: str = ""
    generics: List[str] = field(default_factory=list)


def _doc_comment(lines: Sequence[Optional[str]], indent: str = "") -> str:
    text_lines = []
    for item in lines:
        if not item:
            continue
        for line in str(item).replace("*/", "*\\/").splitlines():
            if line.strip():
                text_lines.append(line.rstrip())

    if not text_lines:
        return ""

    body = "".join(templates.doc_line.format(indent=indent, text=line) for line in text_lines)
    return templates.doc_comment.format(indent=indent, lines=body)


def _tag_value(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False)


def _field_doc_lines(description: Optional[str], schema: Any) -> List[str]:
    lines = [description] if description else []
    if isinstance(schema, dict):
        if schema.get("deprecated"):
            lines.append("@deprecated")
        for tag in SCHEMA_TAGS:
            if tag in schema:
                lines.append(f"@{tag} {_tag_value(schema[tag])}")
    return lines


def _field_line(name: str, required: bool, ts_type: str, indent: str) -> str:
    key = sanitize_identifier(name) or f"'{name}'"
    line = f"{indent}{key}{'' if required else '?'}: {ts_type};"
    if key != name:
        line += f' // WARN: original field name "{name}"'
    return line


def _is_inline_object(schema: Any) -> bool:
    return (
        isinstance(schema, dict)
        and "$ref" not in schema
        and schema.get("type") in ("object", None)
        and isinstance(schema.get("properties"), dict)
        and bool(schema["properties"])
        and not any(key in schema for key in ("allOf", "oneOf", "anyOf"))
    )


def _render_schema_type(
    schema: Any,
    type_mapping: Optional[Dict[str, str]],
    schemas: Optional[Dict[str, Any]],
    indent: str,
    substitute: Optional[Substitute] = None,
    ignores: Optional[Sequence[Ignore]] = None,
) -> CodeResult:
    # Вложенный объект -> анонимный литерал типа
    if _is_inline_object(schema):
        body = _render_fields(schema, indent + "  ", type_mapping, schemas, substitute, ignores)
        return CodeResult("{\n" + body.code + indent + "}", body.refs, body.type_names)

    if (
        isinstance(schema, dict)
        and schema.get("type") == "array"
        and _is_inline_object(schema.get("items"))
    ):
        item = _render_schema_type(
            schema["items"], type_mapping, schemas, indent, substitute, ignores
        )
        return CodeResult(item.code + "[]", item.refs, item.type_names)

    parsed = parse_property(schema, type_mapping, schemas)
    ts_type = parsed.ts_type
    if ignores:
        ts_type = get_allow_type_name(ts_type, ignores) or "any"

    if substitute:
        generic = substitute(ts_type, bool(parsed.refs))
        if generic:
            return CodeResult(generic, parsed.refs)

    return CodeResult(ts_type, parsed.refs, collect_type_names(ts_type))


def _render_fields(
    schema: Dict[str, Any],
    indent: str,
    type_mapping: Optional[Dict[str, str]],
    schemas: Optional[Dict[str, Any]],
    substitute: Optional[Substitute] = None,
    ignores: Optional[Sequence[Ignore]] = None,
) -> CodeResult:
    required = schema.get("required") or []
    result = CodeResult("")

    for name, prop in (schema.get("properties") or {}).items():
        rendered = _render_schema_type(prop, type_mapping, schemas, indent, substitute, ignores)
        description = prop.get("description") if isinstance(prop, dict) else None
        result.code += _doc_comment(_field_doc_lines(description, prop), indent)
        result.code += _field_line(name, name in required, rendered.code, indent) + "\n"
        result.refs.extend(rendered.refs)
        result.type_names.extend(rendered.type_names)

    return result


def transform_type_field_code(
    field_option: Union[FieldOption, Dict[str, Any], str],
    type_mapping: Optional[Dict[str, str]] = None,
    schemas: Optional[Dict[str, Any]] = None,
    indent: str = "  ",
) -> CodeResult:
    """
    Строка объявления поля интерфейса с JSDoc.

    Examples:
        FieldOption(name="age", required=True, schema={"type": "integer"}) -> "  age: number;"
        "email" -> "  email: any;"
    """
    if isinstance(field_option, str):
        field_option = FieldOption(name=field_option, required=True)
    elif isinstance(field_option, dict):
        field_option = FieldOption.model_validate(field_option)

    schema = field_option.schema_
    rendered = _render_schema_type(schema, type_mapping, schemas, indent)
    description = field_option.description
    if not description and isinstance(schema, dict):
        description = schema.get("description")

    code = _doc_comment(_field_doc_lines(description, schema), indent)
    code += _field_line(field_option.name, field_option.required, rendered.code, indent)
    return CodeResult(code, rendered.refs, rendered.type_names)


def transform_query_code(
    params: Sequence[Union[FieldOption, Dict[str, Any]]],
    name: str,
    type_mapping: Optional[Dict[str, str]] = None,
    schemas: Optional[Dict[str, Any]] = None,
) -> CodeResult:
    """Интерфейс query параметров операции"""
    result = CodeResult("")
    fields = ""

    for param in params:
        rendered = transform_type_field_code(param, type_mapping, schemas)
        fields += rendered.code + "\n"
        result.refs.extend(rendered.refs)
        for type_name in rendered.type_names:
            if type_name not in result.type_names:
                result.type_names.append(type_name)

    result.code = templates.query_interface.format(name=name, fields=fields)
    return result


def _generic_substitutor(type_name: str) -> Tuple[Substitute, Dict[str, str]]:
    """Замена аргументов дженерика контейнера на параметры T, E, U, K, V"""
    args = [arg.render() for arg in parse_type_expr(type_name).args]
    assigned: Dict[str, str] = {}

    def substitute(ts_type: str, has_ref: bool) -> Optional[str]:
        if not args:
            return None

        matched = re.fullmatch(r"(.+?)((?:\[\])*)", ts_type)
        if ts_type in args:
            key, suffix = ts_type, ""
        elif matched and matched.group(1) in args:
            key, suffix = matched.group(1), matched.group(2)
        else:
            return None

        # Примитивный аргумент подставляем только по ссылке: «string» и т.п.
        if is_base_type(key.replace("[]", "")) and not has_ref:
            return None

        if key not in assigned:
            if len(assigned) >= len(GENERIC_NAMES):
                return None
            assigned[key] = GENERIC_NAMES[len(assigned)]
        return assigned[key] + suffix

    return substitute, assigned


def transform_model_code(
    schema: Any,
    ref_key: str,
    type_mapping: Optional[Dict[str, str]] = None,
    schemas: Optional[Dict[str, Any]] = None,
    ignores: Optional[Sequence[Ignore]] = None,
) -> ModelCode:
    """
    Интерфейс модели для схемы components.schemas[ref_key].

    Для ключей с дженериками (Response«User») совпадающие с аргументом свойства
    заменяются параметрами: export default interface Response<T> { data?: T; }
    """
    key = ref_key.replace(SCHEMA_PREFIX, "")
    parsed_key = parse_ref_key(key, type_mapping)
    substitute, generics = _generic_substitutor(parsed_key.type_name)

    schema = flatten_schema(schema, schemas)
    if not isinstance(schema, dict):
        schema = {}

    body = _render_fields(schema, "  ", type_mapping, schemas, substitute, ignores)
    generic_names = list(generics.values())

    imports = ""
    imported: List[str] = []
    for type_name in body.type_names:
        if (
            type_name == parsed_key.file_name
            or type_name in generic_names
            or type_name in imported
            or type_name[0].islower()
        ):
            continue
        imported.append(type_name)
        imports += templates.default_import.format(name=type_name, path=f"./{type_name}")
    if imports:
        imports += "\n"

    name = parsed_key.file_name
    if generic_names:
        name = f"{name}<{', '.join(generic_names)}>"

    code = templates.model_interface.format(
        imports=imports,
        comment=_doc_comment([schema.get("description")]),
        name=name,
        ref_key=key,
        fields=body.code,
    )
    return ModelCode(
        code=code,
        refs=body.refs,
        type_names=imported,
        type_name=parsed_key.type_name,
        file_name=parsed_key.file_name,
        ref_key=key,
        generics=generic_names,
    )


def _url_expression(url: str) -> str:
    pattern = r"\{([^}]+)\}|(?<=/):([A-Za-z_]\w*)"
    if not re.search(pattern, url):
        return f"'{url}'"

    expression = re.sub(
        pattern,
        lambda m: "${params.%s}" % sanitize_identifier(m.group(1) or m.group(2)),
        url,
    )
    return f"`{expression}`"


def _default_api_code(ctx: ApiContext, type_mapping: Optional[Dict[str, str]] = None) -> str:
    lines: List[Optional[str]] = [ctx.comment]
    if ctx.operation and ctx.operation.deprecated:
        lines.append("@deprecated")
    for param in ctx.path_params:
        if param.description:
            lines.append(f"@param params.{sanitize_identifier(param.name)} {param.description}")
    lines.append(f"@UNOAPI[{ctx.method}:{ctx.url}]")

    params = []
    if ctx.path_params:
        fields = " ".join(
            _field_line(
                param.name,
                param.required,
                _render_schema_type(param.schema_, type_mapping, None, "").code,
                "",
            )
            for param in ctx.path_params
        )
        params.append(f"params: {{ {fields} }}")
    if ctx.query_type:
        params.append(f"query: {ctx.query_type}")
    if ctx.body_type:
        params.append(f"data: {ctx.body_type}")

    options = [f"url: {_url_expression(ctx.url)}", f"method: '{ctx.method.upper()}'"]
    if ctx.query_type:
        options.append("query")
    if ctx.body_type:
        options.append("data")

    return templates.api_function.format(
        comment=_doc_comment(lines),
        name=ctx.name,
        params=", ".join(params),
        response=f"<{ctx.response_type}>" if ctx.response_type else "",
        options=", ".join(options),
    )


def transform_api_code(
    ctx: ApiContext,
    type_mapping: Optional[Dict[str, str]] = None,
    func_tpl: Optional[FuncTpl] = None,
) -> str:
    """Код API функции: пользовательский шаблон или встроенный"""
    if func_tpl:
        try:
            code = func_tpl(ctx)
        except Exception:
            logger.exception("Ошибка в funcTpl для %s %s", ctx.method.upper(), ctx.url)
        else:
            if isinstance(code, str) and code.strip():
                return code if code.endswith("\n") else code + "\n"
            logger.warning("funcTpl вернул пустой результат для %s, используется шаблон", ctx.url)

    return _default_api_code(ctx, type_mapping)


def transform_type_index_code(items: Sequence[ImportItem], as_global: bool = False) -> str:
    """
    Содержимое index.ts для директории моделей.

    В режиме as_global типы объявляются глобально: declare global { type User = _User; }
    """
    entries: Dict[str, str] = {}
    for item in items:
        if item.default_name and item.default_name not in entries:
            entries[item.default_name] = item.path

    if not entries:
        return ""

    if as_global:
        imports = "".join(
            templates.default_import.format(name=f"_{name}", path=path)
            for name, path in entries.items()
        )
        types = "".join(f"  type {name} = _{name};\n" for name in entries)
        return templates.index_global.format(imports=imports, types=types)

    imports = "".join(
        templates.default_import.format(name=name, path=path) for name, path in entries.items()
    )
    names = "".join(f"  {name},\n" for name in entries)
    return templates.index_export.format(imports=imports, names=names)
