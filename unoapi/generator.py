"""
Главный модуль генератора - чистый интерфейс
"""

import logging
import os
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .config import UnoApiConfig
from .internal.generator import GenerateOptions, generate_code
from .internal.parser import filter_api, read_doc, search_api, update_doc
from .internal.types.models import ApiOperation, GenerateApi
from .internal.writer import write_all
from .internal.writer.files import WriteCallback

logger = logging.getLogger(__name__)


class UnoApiGenerator:
    """Генерация TypeScript API по конфигурации"""

    def __init__(self, config: UnoApiConfig, doc: Optional[Dict[str, Any]] = None):
        self.config = config
        self._doc = doc

    def load_doc(self, refresh: bool = False) -> Dict[str, Any]:
        """Документ из кэша, при отсутствии кэша или refresh загружается из input"""
        if self._doc is not None and not refresh:
            return self._doc

        if not refresh and os.path.isfile(self.config.cache_path):
            logger.debug("Документ из кэша %s", self.config.cache_path)
            self._doc = read_doc(self.config.cache_path)
        else:
            self._doc = update_doc(self.config)
        return self._doc

    @property
    def schemas(self) -> Dict[str, Any]:
        return (self.load_doc().get("components") or {}).get("schemas") or {}

    def search(self, keywords: Optional[str] = None) -> List[ApiOperation]:
        return search_api(self.load_doc(), keywords)

    def select(self, urls: Sequence[str]) -> List[ApiOperation]:
        return filter_api(self.load_doc(), list(urls))

    def generate(
        self, operations: Sequence[ApiOperation], func_name: Optional[str] = None
    ) -> List[GenerateApi]:
        options = GenerateOptions(
            func_name=func_name,
            func_tpl=self.config.load_func_tpl(),
            type_mapping=self.config.type_mapping,
            ignores=self.config.ignores,
            only_model=self.config.only_model,
            schemas=self.schemas,
        )
        return generate_code(operations, options)

    def write(
        self, apis: Sequence[GenerateApi], callback: Optional[WriteCallback] = None
    ) -> Tuple[int, int]:
        return write_all(
            apis,
            self.schemas,
            self.config.output,
            imports=self.config.imports,
            as_global=self.config.as_global_model,
            base_dir=self.config.cwd,
            callback=callback,
        )

    def run(
        self,
        urls: Optional[Sequence[str]] = None,
        func_name: Optional[str] = None,
        callback: Optional[WriteCallback] = None,
    ) -> Tuple[int, int]:
        """Генерация и запись: выбранные URL или все операции документа"""
        operations = self.select(urls) if urls else self.search()
        return self.write(self.generate(operations, func_name), callback)


def generate_api(
    config: UnoApiConfig,
    urls: Optional[Sequence[str]] = None,
    doc: Optional[Dict[str, Any]] = None,
) -> Tuple[int, int]:
    """Генерация TypeScript API: (количество функций, количество моделей)"""
    return UnoApiGenerator(config, doc).run(urls)
