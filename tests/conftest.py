import json
import os

import pytest

from openapi_ts_client.config import ApiSourceConfig

FIXTURES_DIR = os.path.join(os.path.dirname(__file__), "fixtures")
WIDGETS_DOCUMENT_PATH = os.path.join(FIXTURES_DIR, "widgets.json")


@pytest.fixture
def widgets_document():
    """Свежая копия тестового документа для каждого теста"""
    with open(WIDGETS_DOCUMENT_PATH, "r", encoding="utf-8") as f:
        return json.load(f)


@pytest.fixture
def widgets_settings():
    return ApiSourceConfig(
        open_api_json_document_url=WIDGETS_DOCUMENT_PATH,
        client_name="WidgetsClient",
        client_base_url_value="https://api.example.com",
        output_base_directory="src/api",
        streamed_endpoints=["/chat/stream"],
    )


@pytest.fixture
def widgets_document_path():
    return WIDGETS_DOCUMENT_PATH
