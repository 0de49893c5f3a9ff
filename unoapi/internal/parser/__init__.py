from .names import (
    BASE_TYPE_MAPPING,
    SCHEMA_PREFIX,
    collect_type_names,
    flatten_schema,
    get_allow_type_name,
    is_allow_generate,
    is_model_schema,
    parse_property,
    parse_ref_key,
    parse_url,
    resolve_schema,
)
from .openapi import download_doc, filter_api, load_doc, read_doc, search_api, update_doc
from .type_expr import TypeNode, parse_type_expr

__all__ = [
    "BASE_TYPE_MAPPING",
    "SCHEMA_PREFIX",
    "TypeNode",
    "collect_type_names",
    "download_doc",
    "filter_api",
    "flatten_schema",
    "get_allow_type_name",
    "is_allow_generate",
    "is_model_schema",
    "load_doc",
    "parse_property",
    "parse_ref_key",
    "parse_type_expr",
    "parse_url",
    "read_doc",
    "resolve_schema",
    "search_api",
    "update_doc",
]
