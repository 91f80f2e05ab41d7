"""
Тесты загрузки OpenAPI документа
"""

import json

import httpx
import pytest

from openapi_ts_client.exceptions import DocumentLoadError
from openapi_ts_client.internal.parser.openapi import (
    OpenApiParser,
    fetch_openapi_document,
)

DOCUMENT_URL = "https://api.example.com/swagger/v1/swagger.json"


@pytest.fixture
def mock_transport(monkeypatch):
    """Подмена транспорта httpx: handler задается тестом"""
    real_client = httpx.AsyncClient
    calls = {}

    def install(handler):
        def client_factory(**kwargs):
            calls.update(kwargs)
            return real_client(transport=httpx.MockTransport(handler), **kwargs)

        monkeypatch.setattr(httpx, "AsyncClient", client_factory)
        return calls

    return install


class TestRemoteDocument:
    """Загрузка по HTTP(S)"""

    @pytest.mark.asyncio
    async def test_success(self, mock_transport):
        mock_transport(lambda request: httpx.Response(200, json={"openapi": "3.0.1"}))

        document = await fetch_openapi_document(DOCUMENT_URL)

        assert document == {"openapi": "3.0.1"}

    @pytest.mark.asyncio
    async def test_verify_ssl_is_passed(self, mock_transport):
        calls = mock_transport(lambda request: httpx.Response(200, json={}))

        await fetch_openapi_document(DOCUMENT_URL, verify_ssl=False)

        assert calls["verify"] is False

    @pytest.mark.asyncio
    async def test_http_error_status(self, mock_transport):
        mock_transport(lambda request: httpx.Response(404, text="Not Found"))

        with pytest.raises(DocumentLoadError) as e:
            await fetch_openapi_document(DOCUMENT_URL)

        assert e.value.status_code == 404
        assert e.value.url == DOCUMENT_URL
        assert str(e.value).startswith(f"[404] {DOCUMENT_URL}: ")

    @pytest.mark.asyncio
    async def test_connection_error(self, mock_transport):
        def handler(request):
            raise httpx.ConnectError("Connection refused", request=request)

        mock_transport(handler)

        with pytest.raises(DocumentLoadError) as e:
            await fetch_openapi_document(DOCUMENT_URL)

        assert e.value.status_code is None
        assert "Connection refused" in str(e.value)

    @pytest.mark.asyncio
    async def test_invalid_json(self, mock_transport):
        mock_transport(lambda request: httpx.Response(200, text="<html></html>"))

        with pytest.raises(DocumentLoadError):
            await fetch_openapi_document(DOCUMENT_URL)

    @pytest.mark.asyncio
    async def test_json_array_is_rejected(self, mock_transport):
        mock_transport(lambda request: httpx.Response(200, json=[1, 2]))

        with pytest.raises(DocumentLoadError):
            await fetch_openapi_document(DOCUMENT_URL)


class TestLocalDocument:
    """Загрузка из локального файла"""

    @pytest.mark.asyncio
    async def test_local_file(self, widgets_document_path):
        document = await fetch_openapi_document(widgets_document_path)

        assert document["info"]["title"] == "Widgets API"

    @pytest.mark.asyncio
    async def test_missing_file(self, tmp_path):
        path = str(tmp_path / "missing.json")

        with pytest.raises(DocumentLoadError) as e:
            await fetch_openapi_document(path)

        assert e.value.message == "File not found"

    @pytest.mark.asyncio
    async def test_invalid_json_file(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{ not json", encoding="utf-8")

        with pytest.raises(DocumentLoadError):
            await fetch_openapi_document(str(path))


class TestOpenApiParser:
    def test_parse(self, widgets_settings, widgets_document_path):
        with open(widgets_document_path, "r", encoding="utf-8") as f:
            document = json.load(f)

        code_file = OpenApiParser(document, widgets_settings).parse()

        assert code_file.file_name == "WidgetsClient.ts"
        assert "export class WidgetsClient extends ApiClient" in str(code_file)
