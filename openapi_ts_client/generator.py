"""
Главный модуль генератора - чистый интерфейс
"""

from datetime import datetime
from typing import Any, Dict

from .config import ApiSourceConfig
from .internal.parser.openapi import OpenApiParser
from .internal.types.models import CodeFile


class ApiClientGenerator:
    """Чистый интерфейс для генерации TypeScript клиентов"""

    def __init__(self, openapi_spec: Dict[str, Any], settings: ApiSourceConfig):
        self.parser = OpenApiParser(openapi_spec, settings)

    def generate(self, generated_at: datetime = None) -> CodeFile:
        """Генерация модуля клиента"""
        return self.parser.parse(generated_at)


def generate_client(
    openapi_spec: Dict[str, Any],
    settings: ApiSourceConfig,
    generated_at: datetime = None,
) -> CodeFile:
    """Создание TypeScript клиента из OpenAPI спецификации"""
    generator = ApiClientGenerator(openapi_spec, settings)
    return generator.generate(generated_at)
