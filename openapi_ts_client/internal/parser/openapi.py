import json
import logging
import os
from datetime import datetime
from typing import Any, Dict

import httpx

from ...config import ApiSourceConfig
from ...exceptions import DocumentLoadError
from ..generator.client_generator import ClientGenerator
from ..types.models import CodeFile

logger = logging.getLogger(__name__)


async def fetch_openapi_document(url: str, verify_ssl: bool = True) -> Dict[str, Any]:
    """
    Загрузка OpenAPI документа по HTTP(S) или из локального JSON файла.

    Args:
        url: Адрес документа или путь к файлу
        verify_ssl: Проверка сертификата (False для самоподписанных)

    Raises:
        DocumentLoadError: Документ недоступен или не является JSON объектом
    """
    if url.startswith(("http://", "https://")):
        return await _fetch_remote(url, verify_ssl)

    return _read_local(url)


async def _fetch_remote(url: str, verify_ssl: bool) -> Dict[str, Any]:
    logger.debug(f"GET {url}")
    try:
        async with httpx.AsyncClient(verify=verify_ssl) as client:
            response = await client.get(url)
    except httpx.HTTPError as e:
        raise DocumentLoadError(str(e) or type(e).__name__, url) from e

    if not response.is_success:
        raise DocumentLoadError(
            "Failed to fetch OpenAPI document", url, status_code=response.status_code
        )

    try:
        document = response.json()
    except ValueError as e:
        raise DocumentLoadError(f"Invalid JSON: {e}", url) from e

    return _ensure_object(document, url)


def _read_local(path: str) -> Dict[str, Any]:
    if not os.path.exists(path):
        raise DocumentLoadError("File not found", path)

    try:
        with open(path, "r", encoding="utf-8") as f:
            document = json.load(f)
    except (OSError, ValueError) as e:
        raise DocumentLoadError(f"Invalid JSON: {e}", path) from e

    return _ensure_object(document, path)


def _ensure_object(document: Any, url: str) -> Dict[str, Any]:
    if not isinstance(document, dict):
        raise DocumentLoadError("OpenAPI document must be a JSON object", url)
    return document


class OpenApiParser:
    """Парсер OpenAPI спецификации"""

    def __init__(self, openapi_dict: Dict[str, Any], settings: ApiSourceConfig):
        self.openapi_dict = openapi_dict
        self.settings = settings

    def parse(self, generated_at: datetime = None) -> CodeFile:
        """Парсинг OpenAPI в CodeFile TypeScript модуля"""
        generator = ClientGenerator(self.openapi_dict, self.settings)
        return generator.generate(generated_at)
