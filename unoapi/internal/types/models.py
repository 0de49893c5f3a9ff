from typing import Any, Callable, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

HTTP_METHODS = ("get", "post", "put", "delete", "patch", "head", "options", "trace")


class ApiOperation(BaseModel):
    """Операция OpenAPI документа (пара метод + путь)"""

    model_config = ConfigDict(populate_by_name=True)

    path: str
    method: str
    summary: Optional[str] = None
    description: Optional[str] = None
    tags: List[str] = []
    operation_id: Optional[str] = Field(default=None, alias="operationId")
    parameters: List[Dict[str, Any]] = []
    request_body: Optional[Dict[str, Any]] = Field(default=None, alias="requestBody")
    responses: Dict[str, Any] = {}
    deprecated: bool = False

    def label(self) -> str:
        text = " - ".join(filter(None, [self.summary, self.description]))
        return f"{('[' + self.method.upper() + ']').ljust(9)}{self.path} {text}".rstrip()


class ParsedUrl(BaseModel):
    func_name: str
    file_name: str
    dir_name: str
    path_str_params: List[str] = []


class ParsedRefKey(BaseModel):
    type_name: str
    file_name: str


class ParsedProperty(BaseModel):
    ts_type: str
    refs: List[str] = []
    ts_file_name: Optional[str] = None


class FieldOption(BaseModel):
    """Описание поля интерфейса (параметр или свойство схемы)"""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    required: bool = False
    schema_: Optional[Any] = Field(default=None, alias="schema")
    description: Optional[str] = None


class ApiContext(BaseModel):
    """Контекст генерации API функции, передается в funcTpl"""

    operation: Optional[ApiOperation] = None
    name: str
    url: str
    method: str
    comment: Optional[str] = None
    path_params: List[FieldOption] = []
    query_type: Optional[str] = None
    body_type: Optional[str] = None
    response_type: Optional[str] = None


class GenerateModel(BaseModel):
    """Сгенерированный интерфейс модели"""

    source_code: str
    type_name: str
    file_name: str
    file_dir: str = ""
    file_path: str = ""
    ref_key: Optional[str] = None
    generics: List[str] = []
    type_names: List[str] = []


class GenerateApi(BaseModel):
    """Сгенерированная API функция"""

    source_code: str = ""
    func_name: str
    file_name: str
    file_dir: str = ""
    file_path: str
    method: str
    url: str
    type_names: List[str] = []
    query_model: Optional[GenerateModel] = None
    refs: List[str] = []
    get_models: Callable[[Dict[str, Any]], List[GenerateModel]]

    @property
    def marker(self) -> str:
        return f"@UNOAPI[{self.method}:{self.url}]"


class ImportItem(BaseModel):
    """Нормализованный import"""

    path: str
    default_name: Optional[str] = None
    as_name: Optional[str] = None
    names: List[str] = []
    only_type: bool = False
