"""
Генерация кода API функций и моделей по операциям OpenAPI
"""

import logging
import posixpath
import re
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional, Sequence

from ..parser.names import (
    SCHEMA_PREFIX,
    Ignore,
    collect_type_names,
    get_allow_type_name,
    is_allow_generate,
    is_model_schema,
    parse_property,
    parse_ref_key,
    parse_url,
    resolve_schema,
)
from ..types.models import (
    ApiContext,
    ApiOperation,
    FieldOption,
    GenerateApi,
    GenerateModel,
    ParsedUrl,
)
from ..utils.common import camel_case, is_identifier, is_similar, singularize, upper_first
from .transform import FuncTpl, transform_api_code, transform_model_code, transform_query_code

logger = logging.getLogger(__name__)


@dataclass
class GenerateOptions:
    """Параметры генерации"""

    func_name: Optional[str] = None
    func_tpl: Optional[FuncTpl] = None
    type_mapping: Optional[Dict[str, str]] = None
    ignores: Sequence[Ignore] = field(default_factory=list)
    only_model: bool = False
    schemas: Optional[Dict[str, Any]] = None


def _param_suffix(name: str, params: List[str]) -> Optional[str]:
    """Суффикс By<Param>[And<Param>] из завершающих параметров, если имя им оканчивается"""
    for start in range(len(params)):
        suffix = "By" + "And".join(upper_first(camel_case(param)) for param in params[start:])
        if name.endswith(suffix) and len(name) > len(suffix):
            return suffix
    return None


def resolve_func_name(
    operation: ApiOperation, parsed: ParsedUrl, func_name: Optional[str] = None
) -> str:
    """
    Имя функции: явное имя -> хвост operationId -> эвристика -> имя из URL.

    Examples:
        GET /pets/{id}           -> getPetById
        DELETE /users/{uid}/{id} -> deleteUserByUidAndId
        POST /user/login         -> login
    """
    if func_name:
        return func_name

    if operation.operation_id:
        tail = re.split(r"[\s\-_]", operation.operation_id.strip())[-1]
        if is_identifier(tail):
            return tail

    name = parsed.func_name

    # Имя получено из завершающих path параметров: petsById
    suffix = _param_suffix(name, parsed.path_str_params)
    if suffix:
        segment = name[: -len(suffix)]
        return f"{operation.method}{upper_first(singularize(segment))}{suffix}"

    if is_similar(name, parsed.file_name) or any(
        is_similar(name, param) for param in parsed.path_str_params
    ):
        return f"{operation.method}{upper_first(name)}"

    return name


def _body_schema(request_body: Optional[Dict[str, Any]]) -> Any:
    if "$ref" in request_body:
        return request_body
    for media in (request_body.get("content") or {}).values():
        return (media or {}).get("schema")
    return None


def _response_schema(responses: Dict[str, Any]) -> Any:
    for code, response in responses.items():
        if not str(code).startswith("2"):
            continue
        if isinstance(response, dict):
            for media in (response.get("content") or {}).values():
                return (media or {}).get("schema")
        return None
    return None


def generate_single_api_code(
    operation: ApiOperation, options: Optional[GenerateOptions] = None
) -> GenerateApi:
    """Генерация API функции и описания ее моделей для одной операции"""
    options = options or GenerateOptions()
    logger.debug("Генерация API: [%s] %s", operation.method.upper(), operation.path)

    parsed = parse_url(operation.path)
    func_name = resolve_func_name(operation, parsed, options.func_name)
    refs: List[str] = []

    def parse_type(schema: Any) -> str:
        result = parse_property(schema, options.type_mapping, options.schemas)
        refs.extend(result.refs)
        return get_allow_type_name(result.ts_type, options.ignores)

    # path параметры из URL, описание и схема из документа
    path_params = [
        FieldOption(name=name, required=True, schema={"type": "string"})
        for name in parsed.path_str_params
    ]
    query_params: List[FieldOption] = []

    for param in operation.parameters:
        if param.get("in") == "path":
            for path_param in path_params:
                if path_param.name == param.get("name"):
                    path_param.schema_ = param.get("schema") or path_param.schema_
                    path_param.description = param.get("description")
        elif param.get("in") == "query":
            query_params.append(
                FieldOption(
                    name=param.get("name", ""),
                    required=bool(param.get("required")),
                    schema=param.get("schema"),
                    description=param.get("description"),
                )
            )
        # header и cookie параметры не генерируются

    query_model = None
    query_type = None
    if query_params:
        query_type = f"{upper_first(parsed.file_name)}{upper_first(func_name)}Query"
        query = transform_query_code(
            query_params, query_type, options.type_mapping, options.schemas
        )
        refs.extend(query.refs)
        query_dir = posixpath.join(parsed.dir_name, "query")
        query_model = GenerateModel(
            source_code=query.code,
            type_name=query_type,
            file_name=query_type,
            file_dir=query_dir,
            file_path=posixpath.join(query_dir, f"{query_type}.ts"),
            type_names=query.type_names,
        )

    body_type = None
    if operation.request_body:
        body_type = parse_type(_body_schema(operation.request_body)) or "any"

    response_type = None
    response_schema = _response_schema(operation.responses)
    if response_schema is not None:
        response_type = parse_type(response_schema) or None

    type_names: List[str] = []
    for ts_type in (body_type, response_type):
        for name in collect_type_names(ts_type or ""):
            if name not in type_names:
                type_names.append(name)

    source_code = ""
    if not options.only_model:
        ctx = ApiContext(
            operation=operation,
            name=func_name,
            url=operation.path,
            method=operation.method,
            comment=operation.summary or operation.description,
            path_params=path_params,
            query_type=query_type,
            body_type=body_type,
            response_type=response_type,
        )
        source_code = transform_api_code(ctx, options.type_mapping, options.func_tpl)

    api_refs = list(dict.fromkeys(refs))

    def get_models(schemas: Dict[str, Any]) -> List[GenerateModel]:
        models = generate_model_code(schemas, api_refs, options.type_mapping, options.ignores)
        for model in models:
            model.file_dir = parsed.dir_name
        return models

    return GenerateApi(
        source_code=source_code,
        func_name=func_name,
        file_name=parsed.file_name,
        file_dir=parsed.dir_name,
        file_path=posixpath.join(parsed.dir_name, f"{parsed.file_name}.ts"),
        method=operation.method,
        url=operation.path,
        type_names=type_names,
        query_model=query_model,
        refs=api_refs,
        get_models=get_models,
    )


def generate_code(
    operations: Sequence[ApiOperation], options: Optional[GenerateOptions] = None
) -> List[GenerateApi]:
    """Генерация кода для списка операций с учетом ignores"""
    options = options or GenerateOptions()
    # Явное имя функции имеет смысл только для одной операции
    single_options = replace(options, func_name=None) if len(operations) > 1 else options

    result = []
    for operation in operations:
        if not is_allow_generate(operation.path, options.ignores):
            logger.info("Пропуск операции %s %s", operation.method.upper(), operation.path)
            continue
        result.append(generate_single_api_code(operation, single_options))
    return result


def generate_model_code(
    schemas: Dict[str, Any],
    refs: Sequence[str],
    type_mapping: Optional[Dict[str, str]] = None,
    ignores: Optional[Sequence[Ignore]] = None,
) -> List[GenerateModel]:
    """
    Транзитивное замыкание ссылок: интерфейс для каждой достижимой модели.

    Модели дедуплицируются по имени файла. Исключенные схемы не генерируются,
    но ссылки их свойств обходятся.
    """
    queue = list(dict.fromkeys(ref.replace(SCHEMA_PREFIX, "") for ref in refs))
    seen = set(queue)
    models: Dict[str, GenerateModel] = {}

    for ref in queue:
        file_name = parse_ref_key(ref, type_mapping).file_name
        if not file_name or file_name[0].islower():
            continue

        key, schema = resolve_schema(schemas, ref)
        if key is None:
            logger.error("Схема не найдена: %s", ref)
            continue
        if not is_model_schema(schema, key, schemas):
            continue

        model = transform_model_code(schema, key, type_mapping, schemas, ignores)
        for child in model.refs:
            child = child.replace(SCHEMA_PREFIX, "")
            if child not in seen:
                seen.add(child)
                queue.append(child)

        if not is_allow_generate(key, ignores):
            continue

        existing = models.get(model.file_name)
        # Дженерик версия заменяет ранее сгенерированную конкретную
        if existing is not None and (existing.generics or not model.generics):
            continue

        models[model.file_name] = GenerateModel(
            source_code=model.code,
            type_name=model.type_name,
            file_name=model.file_name,
            file_path=f"{model.file_name}.ts",
            ref_key=key,
            generics=model.generics,
            type_names=model.type_names,
        )

    return list(models.values())
