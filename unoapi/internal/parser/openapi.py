"""
Загрузка OpenAPI документа и поиск операций
"""

import json
import logging
import os
from typing import Any, Callable, Dict, List, Optional, Union

import httpx
import yaml

from ...errors import DocumentFetchError, DocumentLoadError, FileWriteError
from ..types.models import HTTP_METHODS, ApiOperation

logger = logging.getLogger(__name__)

DocInput = Union[str, Callable[[], Dict[str, Any]]]


def fetch_doc(url: str, timeout: float = 30.0) -> Dict[str, Any]:
    """Загрузка документа по HTTP"""
    try:
        response = httpx.get(url, timeout=timeout, follow_redirects=True)
    except httpx.HTTPError as e:
        raise DocumentFetchError(url, message=str(e)) from e

    if not response.is_success:
        raise DocumentFetchError(url, response.status_code, response.reason_phrase)

    try:
        doc = response.json()
    except ValueError as e:
        raise DocumentFetchError(url, response.status_code, f"некорректный JSON: {e}") from e

    if not isinstance(doc, dict):
        raise DocumentFetchError(url, response.status_code, "документ не является объектом")
    return doc


def read_doc(path: str) -> Dict[str, Any]:
    """Чтение локального JSON/YAML документа"""
    if not os.path.isfile(path):
        raise DocumentLoadError(path, "файл не найден")

    try:
        with open(path, "r", encoding="utf-8") as f:
            if path.endswith((".yaml", ".yml")):
                doc = yaml.safe_load(f)
            else:
                doc = json.load(f)
    except (ValueError, yaml.YAMLError) as e:
        raise DocumentLoadError(path, f"не удалось разобрать документ: {e}") from e

    if not isinstance(doc, dict):
        raise DocumentLoadError(path, "документ не является объектом")
    return doc


def load_doc(doc_input: DocInput) -> Dict[str, Any]:
    """Загрузка документа из функции, URL или локального файла"""
    if callable(doc_input):
        return doc_input()

    if doc_input.startswith(("http://", "https://")):
        return fetch_doc(doc_input)

    return read_doc(doc_input)


def save_doc(doc: Dict[str, Any], cache_file: str) -> str:
    try:
        os.makedirs(os.path.dirname(os.path.abspath(cache_file)), exist_ok=True)
        with open(cache_file, "w", encoding="utf-8") as f:
            json.dump(doc, f, ensure_ascii=False, indent=2)
    except OSError as e:
        raise FileWriteError(cache_file, str(e)) from e
    return cache_file


def download_doc(url: str, cache_file: Optional[str] = None) -> Dict[str, Any]:
    """Загрузка документа с сохранением в файл кэша"""
    doc = fetch_doc(url)
    if cache_file:
        save_doc(doc, cache_file)
        logger.info("Документ сохранен в %s", cache_file)
    return doc


def update_doc(config) -> Dict[str, Any]:
    """Обновление кэша документа из config.input"""
    if not config.input:
        raise DocumentLoadError(config.cache_path, "не указан input в конфигурации")

    doc_input = config.input
    if not callable(doc_input) and not doc_input.startswith(("http://", "https://")):
        doc_input = os.path.join(config.cwd, doc_input)

    doc = load_doc(doc_input)
    save_doc(doc, config.cache_path)
    logger.info("Документ сохранен в %s", config.cache_path)
    return doc


def _merge_parameters(
    path_params: List[Dict[str, Any]], op_params: List[Dict[str, Any]]
) -> List[Dict[str, Any]]:
    merged = {(p.get("name"), p.get("in")): p for p in path_params if isinstance(p, dict)}
    for param in op_params:
        if isinstance(param, dict):
            merged[(param.get("name"), param.get("in"))] = param
    return list(merged.values())


def search_api(doc: Dict[str, Any], keywords: Optional[str] = None) -> List[ApiOperation]:
    """Плоский список операций документа с фильтром по ключевому слову"""
    result: List[ApiOperation] = []

    for path, path_item in (doc.get("paths") or {}).items():
        if not isinstance(path_item, dict):
            continue
        common_params = path_item.get("parameters") or []

        for method, operation in path_item.items():
            if method.lower() not in HTTP_METHODS or not isinstance(operation, dict):
                continue
            data = {
                **operation,
                "parameters": _merge_parameters(
                    common_params, operation.get("parameters") or []
                ),
            }
            result.append(ApiOperation(path=path, method=method.lower(), **data))

    if not keywords:
        return result

    return [
        item
        for item in result
        if keywords in item.path
        or (item.summary and keywords in item.summary)
        or (item.description and keywords in item.description)
        or any(keywords in tag for tag in item.tags)
    ]


def filter_api(doc: Dict[str, Any], urls: List[str]) -> List[ApiOperation]:
    """
    Выбор операций по списку URL.

    Элемент списка: "/path" (все методы) или "[GET] /path".
    """
    apis = search_api(doc)
    result: List[ApiOperation] = []

    for url in urls:
        method = None
        path = url.strip()
        parts = path.split()
        if len(parts) > 1:
            method = parts[0].strip("[]").lower()
            path = parts[1]

        matched = [
            item for item in apis if item.path == path and (not method or item.method == method)
        ]
        if not matched:
            logger.warning("Не найден подходящий интерфейс: %s", url)
        result.extend(matched)

    return result
