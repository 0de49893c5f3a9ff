from .models import (
    HTTP_METHODS,
    ApiContext,
    ApiOperation,
    FieldOption,
    GenerateApi,
    GenerateModel,
    ImportItem,
    ParsedProperty,
    ParsedRefKey,
    ParsedUrl,
)

__all__ = [
    "HTTP_METHODS",
    "ApiContext",
    "ApiOperation",
    "FieldOption",
    "GenerateApi",
    "GenerateModel",
    "ImportItem",
    "ParsedProperty",
    "ParsedRefKey",
    "ParsedUrl",
]
