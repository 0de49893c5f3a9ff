"""
Запись сгенерированного кода в файлы и поддержка index.ts
"""

import logging
import os
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, Union

from ...errors import FileWriteError
from ..generator.transform import transform_type_index_code
from ..types.models import GenerateApi, GenerateModel, ImportItem
from .imports import ImportEntry, merge_imports, parse_imports, stringify_imports

logger = logging.getLogger(__name__)

Output = Union[str, Sequence[str]]
WriteCallback = Callable[[str], None]


@dataclass
class OutputPaths:
    api_file: str
    model_dir: str
    query_dir: str


def read_file(file_path: str) -> str:
    if not os.path.isfile(file_path):
        return ""
    try:
        with open(file_path, "r", encoding="utf-8") as f:
            return f.read()
    except OSError as e:
        raise FileWriteError(file_path, str(e)) from e


def write_to_file(file_path: str, content: str) -> str:
    """Запись файла целиком с созданием директорий"""
    try:
        os.makedirs(os.path.dirname(os.path.abspath(file_path)), exist_ok=True)
        with open(file_path, "w", encoding="utf-8") as f:
            f.write(content)
    except OSError as e:
        raise FileWriteError(file_path, str(e)) from e

    logger.debug("Записан файл %s", file_path)
    return file_path


def relative_import_path(from_dir: str, target: str) -> str:
    """Относительный путь для import: ./model, ../query/UserQuery"""
    path = os.path.relpath(target, from_dir).replace(os.sep, "/")
    if path.endswith(".ts"):
        path = path[:-3]
    if not path.startswith("."):
        path = f"./{path}"
    return path


def resolve_output_paths(
    api: GenerateApi, output: Output, base_dir: Optional[str] = None
) -> OutputPaths:
    """
    Пути файлов для API.

    output строка: API в <output>/<dir>/<file>.ts, модели в <dir>/model.
    output пара [api, model]: модели в отдельной директории.
    output файл .ts: все функции в нем, модели в соседней директории model.
    """
    if isinstance(output, str):
        api_output, model_output = output, None
    else:
        api_output, model_output = output[0], output[1] if len(output) > 1 else None

    if base_dir:
        api_output = os.path.join(base_dir, api_output)
        if model_output:
            model_output = os.path.join(base_dir, model_output)

    if api_output.endswith(".ts"):
        api_file = api_output
    else:
        api_file = os.path.join(api_output, api.file_path)

    api_dir = os.path.dirname(api_file)
    return OutputPaths(
        api_file=api_file,
        model_dir=model_output or os.path.join(api_dir, "model"),
        query_dir=os.path.join(api_dir, "query"),
    )


def write_api_file(
    api: GenerateApi,
    file_path: str,
    model_dir: Optional[str] = None,
    imports: Optional[Sequence[str]] = None,
    as_global: bool = False,
    query_dir: Optional[str] = None,
) -> bool:
    """
    Дописывание функции в API файл со слиянием import.

    Операция с уже существующей меткой @UNOAPI[method:url] пропускается.
    """
    if not api.source_code:
        return False

    content = read_file(file_path)
    if api.marker in content:
        logger.info("Пропуск %s: уже есть в %s", api.marker, file_path)
        return False

    api_dir = os.path.dirname(file_path)
    new_imports: List[ImportEntry] = []

    for line in imports or []:
        parsed, _ = parse_imports(line)
        new_imports.extend(parsed)

    if api.type_names and model_dir and not as_global:
        new_imports.append(
            ImportItem(
                path=relative_import_path(api_dir, model_dir),
                names=api.type_names,
                only_type=True,
            )
        )

    if api.query_model:
        query_dir = query_dir or os.path.join(api_dir, "query")
        query_file = os.path.join(query_dir, api.query_model.file_name)
        new_imports.append(
            ImportItem(
                path=relative_import_path(api_dir, query_file),
                default_name=api.query_model.type_name,
                only_type=True,
            )
        )

    existing_imports, body_lines = parse_imports(content)
    merged = merge_imports(existing_imports, new_imports)

    parts = []
    if merged:
        parts.append(stringify_imports(merged))
    body = "\n".join(body_lines).strip("\n")
    if body:
        parts.append(body)
    parts.append(api.source_code.strip("\n"))

    write_to_file(file_path, "\n\n".join(parts) + "\n")
    return True


def write_query_file(
    model: GenerateModel, query_dir: str, model_dir: Optional[str] = None, as_global: bool = False
) -> str:
    """Запись интерфейса query параметров (без index.ts)"""
    content = model.source_code
    if model.type_names and model_dir and not as_global:
        item = ImportItem(
            path=relative_import_path(query_dir, model_dir), names=model.type_names, only_type=True
        )
        content = f"{stringify_imports([item])}\n\n{content}"
    return write_to_file(os.path.join(query_dir, f"{model.file_name}.ts"), content)


def write_model_file(
    models: Sequence[GenerateModel], model_dir: str, as_global: bool = False
) -> List[str]:
    """
    Запись моделей и пересборка index.ts.

    index.ts собирается из объединения старых и новых import, поэтому
    повторная запись тех же моделей не меняет его.
    """
    written = []
    for model in models:
        file_path = os.path.join(model_dir, f"{model.file_name}.ts")
        written.append(write_to_file(file_path, model.source_code))

    index_path = os.path.join(model_dir, "index.ts")
    old_imports, _ = parse_imports(read_file(index_path))

    items = [
        ImportItem(path=item.path, default_name=os.path.basename(item.path))
        for item in old_imports
        if isinstance(item, ImportItem) and item.default_name
    ]
    items.extend(
        ImportItem(path=relative_import_path(model_dir, path), default_name=model.file_name)
        for model, path in zip(models, written)
    )

    write_to_file(index_path, transform_type_index_code(items, as_global))
    return written


def write_all(
    apis: Sequence[GenerateApi],
    schemas: Dict[str, Any],
    output: Output,
    imports: Optional[Sequence[str]] = None,
    as_global: bool = False,
    base_dir: Optional[str] = None,
    callback: Optional[WriteCallback] = None,
) -> Tuple[int, int]:
    """
    Запись API функций, query интерфейсов и моделей.

    Returns:
        (количество записанных функций, количество записанных моделей)
    """
    api_count = 0
    model_files: List[str] = []

    for api in apis:
        paths = resolve_output_paths(api, output, base_dir)

        if write_api_file(api, paths.api_file, paths.model_dir, imports, as_global, paths.query_dir):
            api_count += 1
            if callback:
                callback(paths.api_file)

        if api.query_model:
            query_file = write_query_file(api.query_model, paths.query_dir, paths.model_dir, as_global)
            if callback:
                callback(query_file)

        models = api.get_models(schemas)
        if not models:
            continue

        for file_path in write_model_file(models, paths.model_dir, as_global):
            if file_path not in model_files:
                model_files.append(file_path)
            if callback:
                callback(file_path)

    return api_count, len(model_files)
