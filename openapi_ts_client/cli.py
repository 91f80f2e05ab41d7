import argparse
import asyncio
import logging
import os
import sys
from datetime import datetime
from typing import List

from openapi_ts_client.config import CONFIG_FILE_NAME, ApiSourceConfig, OpenApiConfig
from openapi_ts_client.exceptions import ConfigError, DocumentLoadError, SchemaError
from openapi_ts_client.generator import generate_client
from openapi_ts_client.internal.parser.openapi import fetch_openapi_document
from openapi_ts_client.internal.types.models import CodeFile

logger = logging.getLogger(__name__)


def _save_code_file(code_file: CodeFile, path: str) -> str:
    """Запись модуля клиента, файл перезаписывается целиком"""
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)

    with open(path, "w", encoding="utf-8") as f:
        f.write(str(code_file))

    print(f"📦 Клиент создан в: {os.path.abspath(path)}")
    return path


async def generate_source(source: ApiSourceConfig, generated_at: datetime = None) -> str:
    """
    Генерация клиента одного источника API.

    Returns:
        Путь к записанному файлу
    """
    print(f"🚀 Генерация {source.client_name} из {source.open_api_json_document_url}")

    print("📥 Загрузка OpenAPI спецификации...")
    document = await fetch_openapi_document(
        source.open_api_json_document_url, verify_ssl=source.verify_ssl
    )

    print("⚙️ Генерация кода...")
    code_file = generate_client(document, source, generated_at)
    return _save_code_file(code_file, source.output_path)


async def generate_all(sources: List[ApiSourceConfig]) -> int:
    """
    Генерация всех источников строго по очереди.

    Returns:
        Количество источников, которые не удалось сгенерировать
    """
    failed = 0
    for source in sources:
        try:
            await generate_source(source)
        except (DocumentLoadError, SchemaError) as e:
            logger.debug("Generation failed", exc_info=True)
            print(f"❌ Ошибка генерации {source.client_name}: {e}")
            failed += 1

    return failed


def _load_config(args) -> OpenApiConfig:
    file_config = OpenApiConfig.from_file(args.config)

    if file_config is None:
        if args.config != CONFIG_FILE_NAME:
            raise ConfigError(f"Config file {args.config} not found.")
        file_config = OpenApiConfig()
    else:
        print(f"📋 Используется конфиг {args.config}")

    return file_config.merge_with_args(args)


def _init_config(args):
    config = OpenApiConfig(
        defaults={"outputBaseDirectory": args.output_dir or "src/api"},
        apis=[
            {
                "openApiJsonDocumentUrl": args.url
                or "https://localhost:5001/swagger/v1/swagger.json",
                "clientName": args.client_name or "ApiClientGenerated",
                "clientBaseUrlValue": args.base_url or "https://localhost:5001",
                "streamedEndpoints": args.streamed or [],
            }
        ],
    )
    config.save_to_file(args.config)
    print(f"✅ Создан конфиг файл {args.config}")


def generate():
    """Генерация TypeScript клиентов из OpenAPI"""
    parser = argparse.ArgumentParser(
        description="Генерация TypeScript клиента из OpenAPI"
    )
    parser.add_argument(
        "--config", type=str, default=CONFIG_FILE_NAME, help="Путь к openapi.toml"
    )
    parser.add_argument("--url", type=str, help="URL или путь к OpenAPI документу")
    parser.add_argument("--client-name", type=str, help="Имя класса клиента")
    parser.add_argument("--base-url", type=str, help="Базовый URL клиента")
    parser.add_argument("--output-dir", type=str, help="Директория для генерации")
    parser.add_argument(
        "--streamed",
        action="append",
        metavar="ENDPOINT",
        help="Эндпоинт с потоковым ответом (можно указать несколько раз)",
    )
    parser.add_argument(
        "--init-config", action="store_true", help="Создать конфиг файл openapi.toml"
    )
    parser.add_argument("--verbose", action="store_true", help="Подробный лог")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.init_config:
        _init_config(args)
        return

    try:
        sources = _load_config(args).api_sources()
    except ConfigError as e:
        print(f"❌ Ошибка конфигурации: {e.message}")
        sys.exit(1)

    failed = asyncio.run(generate_all(sources))
    if failed:
        print(f"❌ Не удалось сгенерировать {failed} из {len(sources)} клиентов")
        sys.exit(1)

    print("✅ Генерация завершена успешно!")


if __name__ == "__main__":
    generate()
