from .api_generator import (
    GenerateOptions,
    generate_code,
    generate_model_code,
    generate_single_api_code,
    resolve_func_name,
)
from .transform import (
    CodeResult,
    ModelCode,
    transform_api_code,
    transform_model_code,
    transform_query_code,
    transform_type_field_code,
    transform_type_index_code,
)

__all__ = [
    "GenerateOptions",
    "generate_code",
    "generate_model_code",
    "generate_single_api_code",
    "resolve_func_name",
    "CodeResult",
    "ModelCode",
    "transform_api_code",
    "transform_model_code",
    "transform_query_code",
    "transform_type_field_code",
    "transform_type_index_code",
]
