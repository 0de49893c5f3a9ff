"""
Конфигурация генератора
"""

import importlib
import importlib.util
import json
import logging
import os
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Pattern, Union

import toml

from .errors import ConfigLoadError
from .internal.parser.openapi import DocInput

logger = logging.getLogger(__name__)

CONFIG_FILE = "unoapi.toml"
PACKAGE_FILE = "package.json"
PACKAGE_FIELD = "unoapi"
DEFAULT_OUTPUT = "src/api"
DEFAULT_CACHE_FILE = ".openapi-cache.json"

Output = Union[str, List[str]]


def _normalize_type_mapping(value: Any, config_path: str) -> Dict[str, str]:
    """typeMapping: объект или массив пар [[from, to], ...]"""
    if not value:
        return {}
    if isinstance(value, dict):
        return {str(k): str(v) for k, v in value.items()}
    if isinstance(value, list):
        mapping = {}
        for pair in value:
            if not isinstance(pair, (list, tuple)) or len(pair) != 2:
                raise ConfigLoadError(config_path, f"некорректная пара typeMapping: {pair!r}")
            mapping[str(pair[0])] = str(pair[1])
        return mapping
    raise ConfigLoadError(config_path, "typeMapping должен быть объектом или массивом пар")


def _parse_ignore(value: str) -> Union[str, Pattern]:
    # "/pattern/" -> регулярное выражение
    if len(value) > 2 and value.startswith("/") and value.endswith("/"):
        return re.compile(value[1:-1])
    return value


def _dump_ignore(value: Union[str, Pattern]) -> str:
    if isinstance(value, str):
        return value
    return f"/{value.pattern}/"


def load_func_tpl(entry: str, cwd: str = ".") -> Callable:
    """
    Загрузка пользовательского шаблона функции.

    Examples:
        "my_templates:api_function"
        "scripts/templates.py:api_function"
    """
    module_name, sep, attr = entry.rpartition(":")
    if not sep or not module_name or not attr:
        raise ConfigLoadError(entry, "funcTpl должен иметь вид module:function")

    try:
        if module_name.endswith(".py"):
            path = os.path.join(cwd, module_name)
            spec = importlib.util.spec_from_file_location(
                f"unoapi_func_tpl_{os.path.splitext(os.path.basename(path))[0]}", path
            )
            if spec is None or spec.loader is None:
                raise ConfigLoadError(entry, f"не удалось загрузить {path}")
            module = importlib.util.module_from_spec(spec)
            spec.loader.exec_module(module)
        else:
            module = importlib.import_module(module_name)
    except (ImportError, OSError, SyntaxError) as e:
        raise ConfigLoadError(entry, str(e)) from e

    func = getattr(module, attr, None)
    if not callable(func):
        raise ConfigLoadError(entry, f"функция {attr} не найдена")
    return func


@dataclass
class UnoApiConfig:
    """Конфигурация генератора TypeScript API"""

    input: Optional[DocInput] = None
    output: Output = DEFAULT_OUTPUT
    cache_file: Optional[str] = None
    type_mapping: Dict[str, str] = field(default_factory=dict)
    func_tpl: Optional[str] = None
    only_model: bool = False
    as_global_model: bool = False
    imports: List[str] = field(default_factory=list)
    ignores: List[Union[str, Pattern]] = field(default_factory=list)
    cwd: str = "."

    @property
    def api_output(self) -> str:
        return self.output if isinstance(self.output, str) else self.output[0]

    @property
    def cache_path(self) -> str:
        """Путь к кэшу документа относительно рабочей директории"""
        if self.cache_file:
            return os.path.join(self.cwd, self.cache_file)
        output_dir = self.api_output
        if output_dir.endswith(".ts"):
            output_dir = os.path.dirname(output_dir)
        return os.path.join(self.cwd, output_dir, DEFAULT_CACHE_FILE)

    @classmethod
    def from_dict(
        cls, data: Dict[str, Any], cwd: str = ".", config_path: str = CONFIG_FILE
    ) -> "UnoApiConfig":
        """Создание конфигурации из объекта (ключи в camelCase)"""
        output = data.get("output") or DEFAULT_OUTPUT
        if isinstance(output, (list, tuple)):
            if not 1 <= len(output) <= 2:
                raise ConfigLoadError(config_path, "output: строка или пара [api, model]")
            output = [str(item) for item in output]

        imports = data.get("imports") or []
        if isinstance(imports, str):
            imports = [imports]

        return cls(
            input=data.get("input") or data.get("openapiUrl"),
            output=output,
            cache_file=data.get("cacheFile"),
            type_mapping=_normalize_type_mapping(data.get("typeMapping"), config_path),
            func_tpl=data.get("funcTpl"),
            only_model=bool(data.get("onlyModel", False)),
            as_global_model=bool(data.get("asGlobalModel", False)),
            imports=list(imports),
            ignores=[_parse_ignore(str(item)) for item in data.get("ignores") or []],
            cwd=cwd,
        )

    @classmethod
    def from_file(cls, config_path: str = CONFIG_FILE) -> Optional["UnoApiConfig"]:
        """Загрузка конфигурации из unoapi.toml"""
        if not os.path.exists(config_path):
            return None

        try:
            config_data = toml.load(config_path)
        except (toml.TomlDecodeError, OSError) as e:
            raise ConfigLoadError(config_path, str(e)) from e

        cwd = os.path.dirname(os.path.abspath(config_path))
        return cls.from_dict(config_data, cwd=cwd, config_path=config_path)

    def to_dict(self) -> Dict[str, Any]:
        """Сериализуемое представление (без пустых значений)"""
        data: Dict[str, Any] = {
            "input": None if callable(self.input) else self.input,
            "output": self.output,
            "cacheFile": self.cache_file,
            "typeMapping": self.type_mapping,
            "funcTpl": self.func_tpl,
            "onlyModel": self.only_model,
            "asGlobalModel": self.as_global_model,
            "imports": self.imports,
            "ignores": [_dump_ignore(item) for item in self.ignores],
        }
        return {key: value for key, value in data.items() if value not in (None, [], {})}

    def save_to_file(self, config_path: str = CONFIG_FILE) -> None:
        """Сохранение конфигурации в файл"""
        with open(config_path, "w", encoding="utf-8") as f:
            toml.dump(self.to_dict(), f)

    def merge_with_args(self, args) -> "UnoApiConfig":
        """Объединение с аргументами командной строки"""
        return UnoApiConfig(
            input=getattr(args, "url", None) or self.input,
            output=getattr(args, "output", None) or self.output,
            cache_file=self.cache_file,
            type_mapping=self.type_mapping,
            func_tpl=self.func_tpl,
            only_model=getattr(args, "only_model", False) or self.only_model,
            as_global_model=getattr(args, "global_model", False) or self.as_global_model,
            imports=self.imports,
            ignores=self.ignores,
            cwd=self.cwd,
        )

    def load_func_tpl(self) -> Optional[Callable]:
        if not self.func_tpl:
            return None
        return load_func_tpl(self.func_tpl, self.cwd)


def _read_package_json(path: str) -> Dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (ValueError, OSError) as e:
        raise ConfigLoadError(path, f"не удалось прочитать package.json: {e}") from e
    if not isinstance(data, dict):
        raise ConfigLoadError(path, "package.json не является объектом")
    return data


def load_config(cwd: Optional[str] = None) -> UnoApiConfig:
    """
    Загрузка конфигурации рабочей директории.

    Порядок: поле unoapi в package.json -> unoapi.toml -> значения по умолчанию.
    """
    cwd = cwd or os.getcwd()

    package_path = os.path.join(cwd, PACKAGE_FILE)
    if os.path.isfile(package_path):
        package_config = _read_package_json(package_path).get(PACKAGE_FIELD)
        if isinstance(package_config, dict) and package_config:
            logger.debug("Конфигурация из %s", package_path)
            return UnoApiConfig.from_dict(package_config, cwd=cwd, config_path=package_path)

    config = UnoApiConfig.from_file(os.path.join(cwd, CONFIG_FILE))
    if config:
        logger.debug("Конфигурация из %s", CONFIG_FILE)
        return config

    logger.info("Конфигурация не найдена, используются значения по умолчанию")
    return UnoApiConfig(cwd=cwd)


def exists_config(config_type: str = "toml", cwd: Optional[str] = None) -> bool:
    """Проверка наличия конфигурации: toml или поле в package.json"""
    cwd = cwd or os.getcwd()
    if config_type == "package":
        package_path = os.path.join(cwd, PACKAGE_FILE)
        if not os.path.isfile(package_path):
            return False
        return bool(_read_package_json(package_path).get(PACKAGE_FIELD))
    return os.path.isfile(os.path.join(cwd, CONFIG_FILE))


def generate_config_file(
    url: Optional[str] = None, config_type: str = "toml", cwd: Optional[str] = None
) -> str:
    """Создание конфигурации по умолчанию, возвращает путь к файлу"""
    cwd = cwd or os.getcwd()
    config = UnoApiConfig(input=url, cwd=cwd)

    if config_type == "package":
        package_path = os.path.join(cwd, PACKAGE_FILE)
        data = _read_package_json(package_path) if os.path.isfile(package_path) else {}
        data[PACKAGE_FIELD] = config.to_dict()
        with open(package_path, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)
            f.write("\n")
        return package_path

    config_path = os.path.join(cwd, CONFIG_FILE)
    config.save_to_file(config_path)
    return config_path
