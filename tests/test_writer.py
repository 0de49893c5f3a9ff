"""
Тесты записи файлов и index.ts
"""

import os

import pytest

from unoapi.errors import FileWriteError
from unoapi.internal.generator import GenerateOptions, generate_single_api_code
from unoapi.internal.types.models import ApiOperation, GenerateModel
from unoapi.internal.writer import (
    resolve_output_paths,
    write_all,
    write_api_file,
    write_model_file,
    write_to_file,
)

PET_SCHEMAS = {"Pet": {"type": "object", "properties": {"name": {"type": "string"}}}}

PET_RESPONSE = {
    "200": {"content": {"application/json": {"schema": {"$ref": "#/components/schemas/Pet"}}}}
}


def read(path) -> str:
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def make_model(name: str) -> GenerateModel:
    return GenerateModel(
        source_code=f"export default interface {name} {{\n}}\n", type_name=name, file_name=name
    )


class TestWriteToFile:
    """Тесты записи файла"""

    def test_creates_directories(self, tmp_path):
        """Тест создания вложенных директорий"""
        path = tmp_path / "a" / "b" / "c.ts"
        write_to_file(str(path), "content")
        assert read(path) == "content"

    def test_write_error(self, tmp_path):
        """Тест ошибки записи"""
        blocker = tmp_path / "blocker"
        blocker.write_text("file")

        with pytest.raises(FileWriteError) as exc_info:
            write_to_file(str(blocker / "x.ts"), "content")
        assert exc_info.value.path == str(blocker / "x.ts")


class TestWriteModelFile:
    """Тесты записи моделей и index.ts"""

    def test_index_idempotence(self, tmp_path):
        """Тест повторной записи той же модели"""
        model_dir = str(tmp_path / "model")

        write_model_file([make_model("User")], model_dir)
        first = read(os.path.join(model_dir, "index.ts"))
        write_model_file([make_model("User")], model_dir)
        second = read(os.path.join(model_dir, "index.ts"))

        assert first == second == "import User from './User';\n\nexport {\n  User,\n}\n"

    def test_index_keeps_previous_models(self, tmp_path):
        """Тест сохранения ранее записанных моделей в index.ts"""
        model_dir = str(tmp_path / "model")

        write_model_file([make_model("User")], model_dir)
        write_model_file([make_model("Post")], model_dir)

        assert read(os.path.join(model_dir, "index.ts")) == (
            "import User from './User';\n"
            "import Post from './Post';\n"
            "\n"
            "export {\n"
            "  User,\n"
            "  Post,\n"
            "}\n"
        )
        assert os.path.isfile(os.path.join(model_dir, "Post.ts"))

    def test_global_index(self, tmp_path):
        """Тест глобального index.ts при повторной записи"""
        model_dir = str(tmp_path / "model")

        write_model_file([make_model("User")], model_dir, as_global=True)
        write_model_file([make_model("User")], model_dir, as_global=True)

        assert read(os.path.join(model_dir, "index.ts")) == (
            "import _User from './User';\n\ndeclare global {\n  type User = _User;\n}\n"
        )


class TestResolveOutputPaths:
    """Тесты определения путей"""

    def setup_method(self):
        operation = ApiOperation(path="/api/user/login", method="post")
        self.api = generate_single_api_code(operation)

    def test_single_output(self):
        """Тест общей директории для API и моделей"""
        paths = resolve_output_paths(self.api, "out")
        assert paths.api_file == os.path.join("out", "api", "user.ts")
        assert paths.model_dir == os.path.join("out", "api", "model")
        assert paths.query_dir == os.path.join("out", "api", "query")

    def test_pair_output(self):
        """Тест отдельной директории моделей"""
        paths = resolve_output_paths(self.api, ["out/api", "out/models"])
        assert paths.model_dir == "out/models"

    def test_file_output(self):
        """Тест вывода в один файл"""
        paths = resolve_output_paths(self.api, "src/api.ts")
        assert paths.api_file == "src/api.ts"
        assert paths.model_dir == os.path.join("src", "model")

    def test_base_dir(self):
        """Тест базовой директории"""
        paths = resolve_output_paths(self.api, "out", base_dir="/project")
        assert paths.api_file == os.path.join("/project", "out", "api", "user.ts")


class TestWriteApiFile:
    """Тесты записи API файла"""

    def _api(self, method="get"):
        operation = ApiOperation(path="/pets/{id}", method=method, responses=PET_RESPONSE)
        return generate_single_api_code(operation, GenerateOptions(schemas=PET_SCHEMAS))

    def test_new_file(self, tmp_path):
        """Тест записи нового файла с импортами"""
        api_file = str(tmp_path / "api" / "pets.ts")
        written = write_api_file(
            self._api(),
            api_file,
            model_dir=str(tmp_path / "api" / "model"),
            imports=["import request from '@/utils/request';"],
        )

        assert written
        assert read(api_file) == (
            "import request from '@/utils/request';\n"
            "import type { Pet } from './model';\n"
            "\n"
            "/**\n"
            " * @UNOAPI[get:/pets/{id}]\n"
            " */\n"
            "export function getPetById(params: { id: string; }) {\n"
            "  return request<Pet>({ url: `/pets/${params.id}`, method: 'GET' });\n"
            "}\n"
        )

    def test_skip_existing_marker(self, tmp_path):
        """Тест пропуска уже сгенерированной операции"""
        api_file = str(tmp_path / "pets.ts")
        model_dir = str(tmp_path / "model")

        assert write_api_file(self._api(), api_file, model_dir)
        content = read(api_file)
        assert not write_api_file(self._api(), api_file, model_dir)
        assert read(api_file) == content

    def test_append_to_existing(self, tmp_path):
        """Тест дописывания функции в существующий файл"""
        api_file = str(tmp_path / "pets.ts")
        model_dir = str(tmp_path / "model")

        write_api_file(self._api("get"), api_file, model_dir)
        write_api_file(self._api("delete"), api_file, model_dir)
        content = read(api_file)

        assert content.count("import type { Pet } from './model';") == 1
        assert "export function getPetById" in content
        assert "export function deletePetById" in content
        assert content.index("getPetById") < content.index("deletePetById")

    def test_existing_duplicate_imports(self, tmp_path):
        """Тест одного import на путь после дописывания в файл с повторами"""
        api_file = tmp_path / "pets.ts"
        api_file.write_text(
            "import type { Owner } from './model';\n"
            "import type { Tag } from './model';\n"
            "\n"
            "export const a = 1;\n",
            encoding="utf-8",
        )

        write_api_file(self._api(), str(api_file), str(tmp_path / "model"))
        content = read(api_file)

        assert content.count("from './model'") == 1
        assert "import type { Owner, Tag, Pet } from './model';" in content

    def test_global_model_without_type_import(self, tmp_path):
        """Тест глобальных моделей без import type"""
        api_file = str(tmp_path / "pets.ts")
        write_api_file(self._api(), api_file, str(tmp_path / "model"), as_global=True)
        assert "import type" not in read(api_file)


class TestWriteAll:
    """Тесты полной записи"""

    def test_end_to_end_pet(self, tmp_path):
        """Тест полного сценария /pets/{id}"""
        operation = ApiOperation(path="/pets/{id}", method="get", responses=PET_RESPONSE)
        api = generate_single_api_code(operation, GenerateOptions(schemas=PET_SCHEMAS))
        written_files = []

        counts = write_all(
            [api], PET_SCHEMAS, "src/api", base_dir=str(tmp_path), callback=written_files.append
        )

        api_dir = tmp_path / "src" / "api"
        assert counts == (1, 1)
        assert "export function getPetById" in read(api_dir / "index.ts")
        assert "request<Pet>" in read(api_dir / "index.ts")
        assert read(api_dir / "model" / "Pet.ts") == (
            "export default interface Pet {\n  // @UNOAPI[Pet]\n  name?: string;\n}\n"
        )
        assert read(api_dir / "model" / "index.ts") == (
            "import Pet from './Pet';\n\nexport {\n  Pet,\n}\n"
        )
        assert str(api_dir / "index.ts") in written_files

    def test_query_file(self, tmp_path):
        """Тест записи query интерфейса без index.ts"""
        operation = ApiOperation(
            path="/pets",
            method="get",
            operationId="listPets",
            parameters=[{"name": "limit", "in": "query", "schema": {"type": "integer"}}],
        )
        api = generate_single_api_code(operation)

        write_all([api], {}, "src/api", base_dir=str(tmp_path))

        api_dir = tmp_path / "src" / "api"
        assert read(api_dir / "query" / "IndexListPetsQuery.ts") == (
            "export default interface IndexListPetsQuery {\n  limit?: number;\n}\n"
        )
        assert not (api_dir / "query" / "index.ts").exists()
        assert (
            "import type IndexListPetsQuery from './query/IndexListPetsQuery';"
            in read(api_dir / "index.ts")
        )

    def test_only_model(self, tmp_path):
        """Тест генерации только моделей"""
        operation = ApiOperation(path="/pets/{id}", method="get", responses=PET_RESPONSE)
        api = generate_single_api_code(
            operation, GenerateOptions(schemas=PET_SCHEMAS, only_model=True)
        )

        counts = write_all([api], PET_SCHEMAS, "src/api", base_dir=str(tmp_path))

        assert counts == (0, 1)
        assert not (tmp_path / "src" / "api" / "index.ts").exists()
        assert (tmp_path / "src" / "api" / "model" / "Pet.ts").exists()

    def test_only_model_query_file(self, tmp_path):
        """Тест записи query интерфейса в режиме только моделей"""
        operation = ApiOperation(
            path="/pets",
            method="get",
            operationId="listPets",
            parameters=[{"name": "limit", "in": "query", "schema": {"type": "integer"}}],
        )
        api = generate_single_api_code(operation, GenerateOptions(only_model=True))
        written_files = []

        counts = write_all(
            [api], {}, "src/api", base_dir=str(tmp_path), callback=written_files.append
        )

        api_dir = tmp_path / "src" / "api"
        assert counts == (0, 0)
        assert not (api_dir / "index.ts").exists()
        assert read(api_dir / "query" / "IndexListPetsQuery.ts") == (
            "export default interface IndexListPetsQuery {\n  limit?: number;\n}\n"
        )
        assert written_files == [str(api_dir / "query" / "IndexListPetsQuery.ts")]
