"""
Интеграционные тесты для генератора
"""

import json
import os

from unoapi import UnoApiConfig, UnoApiGenerator, generate_api


def ref(name: str) -> dict:
    return {"$ref": f"#/components/schemas/{name}"}


def json_content(schema: dict) -> dict:
    return {"content": {"application/json": {"schema": schema}}}


COMPLEX_SPEC = {
    "openapi": "3.0.0",
    "info": {"title": "Complex API", "version": "2.0.0"},
    "components": {
        "schemas": {
            "User": {
                "type": "object",
                "description": "Пользователь",
                "required": ["id", "username"],
                "properties": {
                    "id": {"type": "integer"},
                    "username": {"type": "string"},
                    "role": ref("UserRole"),
                    "createdAt": ref("LocalDateTime"),
                },
            },
            "UserRole": {"type": "string", "enum": ["admin", "user"]},
            "CreateUserRequest": {
                "type": "object",
                "required": ["username"],
                "properties": {"username": {"type": "string"}, "password": {"type": "string"}},
            },
            "Result«User»": {
                "type": "object",
                "properties": {"code": {"type": "integer"}, "data": ref("User")},
            },
            "Result«List«User»»": {
                "type": "object",
                "properties": {
                    "code": {"type": "integer"},
                    "data": {"type": "array", "items": ref("User")},
                },
            },
        }
    },
    "paths": {
        "/user/list": {
            "get": {
                "summary": "Список пользователей",
                "parameters": [
                    {"name": "page", "in": "query", "required": True, "schema": {"type": "integer"}}
                ],
                "responses": {"200": json_content(ref("Result«List«User»»"))},
            }
        },
        "/user/create": {
            "post": {
                "operationId": "createUser",
                "requestBody": json_content(ref("CreateUserRequest")),
                "responses": {"200": json_content(ref("Result«User»"))},
            },
        },
        "/user/{id}": {
            "get": {
                "summary": "Получить пользователя",
                "parameters": [
                    {"name": "id", "in": "path", "required": True, "schema": {"type": "integer"}}
                ],
                "responses": {"200": json_content(ref("Result«User»"))},
            }
        },
        "/admin/stats": {"get": {"responses": {"200": json_content({"type": "object"})}}},
    },
}


def read(path) -> str:
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


class TestIntegration:
    """Интеграционные тесты"""

    def _config(self, tmp_path, **kwargs) -> UnoApiConfig:
        return UnoApiConfig(
            output="src/api",
            type_mapping={"LocalDateTime": "string"},
            imports=["import request from '@/utils/request';"],
            cwd=str(tmp_path),
            **kwargs,
        )

    def test_complete_generation_workflow(self, tmp_path):
        """Тест полного процесса генерации"""
        config = self._config(tmp_path, ignores=["/admin/stats"])
        written = []

        counts = UnoApiGenerator(config, COMPLEX_SPEC).run(callback=written.append)

        api_dir = tmp_path / "src" / "api"
        api_code = read(api_dir / "user.ts")
        by_id_code = read(api_dir / "index.ts")
        user_code = read(api_dir / "model" / "User.ts")
        result_code = read(api_dir / "model" / "Result.ts")

        assert counts == (3, 3)
        assert not (api_dir / "admin.ts").exists()

        # Функции API
        assert api_code.startswith("import request from '@/utils/request';\n")
        assert "import type { Result, User, CreateUserRequest } from './model';" in api_code
        assert "import type UserListQuery from './query/UserListQuery';" in api_code
        assert "export function list(query: UserListQuery)" in api_code
        assert "request<Result<User[]>>" in api_code
        assert "export function createUser(data: CreateUserRequest)" in api_code
        assert "export function getUserById" not in api_code

        # /user/{id} пишется в файл по предыдущему сегменту пути
        assert "export function getUserById(params: { id: number; })" in by_id_code
        assert "url: `/user/${params.id}`" in by_id_code
        assert "import type { Result, User } from './model';" in by_id_code

        # Модели
        assert "export default interface Result<T> {" in result_code
        assert "  data?: T;\n" in result_code
        assert "  role?: 'admin' | 'user';\n" in user_code
        assert "  createdAt?: string;\n" in user_code
        assert (api_dir / "query" / "UserListQuery.ts").exists()

        index_code = read(api_dir / "model" / "index.ts")
        for name in ("Result", "User", "CreateUserRequest"):
            assert f"import {name} from './{name}';" in index_code

        assert str(api_dir / "user.ts") in written

    def test_repeated_generation(self, tmp_path):
        """Тест повторной генерации без дублирования"""
        config = self._config(tmp_path)
        generator = UnoApiGenerator(config, COMPLEX_SPEC)

        generator.run(["[GET] /user/{id}"])
        api_file = tmp_path / "src" / "api" / "index.ts"
        first = read(api_file)

        counts = generator.run(["[GET] /user/{id}"])
        assert counts[0] == 0
        assert read(api_file) == first
        assert first.count("export function getUserById") == 1

    def test_ignored_wrapper(self, tmp_path):
        """Тест снятия обертки ответа"""
        config = self._config(tmp_path, ignores=["Result"])

        UnoApiGenerator(config, COMPLEX_SPEC).run(["/user/{id}"])

        model_dir = tmp_path / "src" / "api" / "model"
        assert "request<User>" in read(tmp_path / "src" / "api" / "index.ts")
        assert not (model_dir / "Result.ts").exists()
        assert (model_dir / "User.ts").exists()

    def test_generate_api_from_cache(self, tmp_path):
        """Тест генерации из кэша документа"""
        config = self._config(tmp_path, cache_file="openapi.json")
        with open(config.cache_path, "w", encoding="utf-8") as f:
            json.dump(COMPLEX_SPEC, f)

        counts = generate_api(config, ["[POST] /user/create"])

        assert counts == (1, 3)
        assert os.path.isfile(tmp_path / "src" / "api" / "model" / "CreateUserRequest.ts")
