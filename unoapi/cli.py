import argparse
import logging
import sys
from typing import List, Optional

from unoapi.config import exists_config, generate_config_file, load_config
from unoapi.errors import UnoApiError
from unoapi.generator import UnoApiGenerator
from unoapi.internal.parser import download_doc
from unoapi.internal.types.models import ApiOperation


def confirm_choice(message: str) -> bool:
    """Запрос подтверждения у пользователя"""
    while True:
        choice = input(f"{message} (y/n): ").lower().strip()
        if choice in ["y", "yes", "да", ""]:
            return True
        elif choice in ["n", "no", "нет"]:
            return False
        print("Введите y/n")


def select_from_menu(options: List[str], title: str) -> int:
    """Выбор пункта из меню"""
    print(f"\n{title}")
    for i, option in enumerate(options, 1):
        print(f"[{i}] {option}")

    while True:
        try:
            choice = int(input("\nВыберите пункт: "))
            if 1 <= choice <= len(options):
                return choice - 1
            print(f"Введите число от 1 до {len(options)}")
        except ValueError:
            print("Введите корректное число")


def interactive_search(generator: UnoApiGenerator) -> List[ApiOperation]:
    """Поиск операции по ключевому слову и выбор из списка"""
    keywords = input("🔍 Введите ключевое слово для поиска: ").strip()
    operations = generator.search(keywords or None)

    if not operations:
        print(f"❌ Не найдено ни одного интерфейса по запросу: {keywords}")
        return []

    selected_idx = select_from_menu(
        [operation.label() for operation in operations],
        f"📋 Найдено интерфейсов: {len(operations)}",
    )
    return [operations[selected_idx]]


def init_command(args) -> int:
    """Создание конфигурации"""
    if exists_config(args.type):
        print("⚠️ Конфигурация уже существует")
        if not confirm_choice("Перезаписать?"):
            return 0

    config_path = generate_config_file(args.url, args.type)
    print(f"✅ Конфигурация создана: {config_path}")
    return 0


def download_command(args) -> int:
    """Загрузка документа в файл"""
    output = args.output or load_config().cache_path
    print(f"📥 Загрузка документа {args.url}...")
    download_doc(args.url, output)
    print(f"💾 Документ сохранен в {output}")
    return 0


def api_command(args) -> int:
    """Генерация API функций и моделей"""
    config = load_config().merge_with_args(args)
    if not config.input:
        print("❌ Ошибка: не указан адрес документа (input в конфигурации или -u)")
        return 1

    generator = UnoApiGenerator(config)
    print("📥 Загрузка документа...")
    generator.load_doc(refresh=bool(args.url or args.refresh))

    if args.urls:
        operations = generator.select(args.urls)
    elif args.all:
        operations = generator.search()
    else:
        operations = interactive_search(generator)

    if not operations:
        print("❌ Нет интерфейсов для генерации")
        return 1

    print(f"⚙️ Генерация кода для {len(operations)} интерфейсов...")
    apis = generator.generate(operations, func_name=args.func)
    api_count, model_count = generator.write(apis, callback=lambda path: print(f"   📄 {path}"))

    print("✅ Генерация завершена успешно!")
    print(f"   Функций: {api_count}, моделей: {model_count}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="unoapi", description="Генерация TypeScript API из OpenAPI документа"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Подробный вывод")
    subparsers = parser.add_subparsers(dest="command")

    init_parser = subparsers.add_parser("init", help="Создать конфигурацию")
    init_parser.add_argument("url", nargs="?", help="URL или путь к OpenAPI документу")
    init_parser.add_argument(
        "--type", choices=["package", "toml"], default="toml", help="Формат конфигурации"
    )
    init_parser.set_defaults(handler=init_command)

    download_parser = subparsers.add_parser("download", help="Скачать OpenAPI документ")
    download_parser.add_argument("url", help="URL OpenAPI документа")
    download_parser.add_argument("output", nargs="?", help="Файл для сохранения")
    download_parser.set_defaults(handler=download_command)

    api_parser = subparsers.add_parser("api", help="Сгенерировать API функции и модели")
    api_parser.add_argument("urls", nargs="*", help="Пути операций: /path или '[GET] /path'")
    api_parser.add_argument("-u", "--url", type=str, help="URL или путь к OpenAPI документу")
    api_parser.add_argument("-o", "--output", type=str, help="Директория или файл для API")
    api_parser.add_argument("--func", type=str, help="Имя функции (для одной операции)")
    api_parser.add_argument("--only-model", action="store_true", help="Только модели")
    api_parser.add_argument(
        "--global-model", action="store_true", help="Объявлять модели глобально"
    )
    api_parser.add_argument("--all", action="store_true", help="Все операции документа")
    api_parser.add_argument("--refresh", action="store_true", help="Обновить кэш документа")
    api_parser.set_defaults(handler=api_command)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Точка входа unoapi"""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not args.command:
        parser.print_help()
        return 1

    try:
        return args.handler(args)
    except UnoApiError as e:
        print(f"❌ Ошибка: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
