from .files import (
    OutputPaths,
    relative_import_path,
    resolve_output_paths,
    write_all,
    write_api_file,
    write_model_file,
    write_query_file,
    write_to_file,
)
from .imports import (
    merge_imports,
    parse_import,
    parse_imports,
    stringify_import,
    stringify_imports,
)

__all__ = [
    "OutputPaths",
    "relative_import_path",
    "resolve_output_paths",
    "write_all",
    "write_api_file",
    "write_model_file",
    "write_query_file",
    "write_to_file",
    "merge_imports",
    "parse_import",
    "parse_imports",
    "stringify_import",
    "stringify_imports",
]
