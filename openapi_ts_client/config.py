"""
Конфигурация для генерации TypeScript клиентов

Файл openapi.toml:

    [defaults]
    outputBaseDirectory = "src/api"

    [[apis]]
    openApiJsonDocumentUrl = "https://localhost:5001/swagger/v1/swagger.json"
    clientName = "PetsClient"
    clientBaseUrlValue = "https://localhost:5001"
    streamedEndpoints = ["/chat/stream"]
"""

import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import toml

from .exceptions import ConfigError

CONFIG_FILE_NAME = "openapi.toml"

BUILTIN_DEFAULTS: Dict[str, Any] = {
    "outputBaseDirectory": "src/api",
    "streamedEndpoints": [],
    "runtimeImportPath": "apx.rest",
    "verifySsl": True,
}

REQUIRED_KEYS = (
    "openApiJsonDocumentUrl",
    "clientName",
    "clientBaseUrlValue",
    "outputBaseDirectory",
)


@dataclass
class ApiSourceConfig:
    """Настройки одного источника API после слияния с умолчаниями"""

    open_api_json_document_url: str
    client_name: str
    client_base_url_value: str
    output_base_directory: str = "src/api"
    streamed_endpoints: List[str] = field(default_factory=list)
    runtime_import_path: str = "apx.rest"
    verify_ssl: bool = True

    @classmethod
    def from_mapping(cls, values: Dict[str, Any]) -> "ApiSourceConfig":
        for key in REQUIRED_KEYS:
            if not values.get(key):
                raise ConfigError(f"Config key {key} not found.", key=key)

        streamed = values.get("streamedEndpoints") or []
        if not isinstance(streamed, list) or not all(
            isinstance(endpoint, str) for endpoint in streamed
        ):
            raise ConfigError(
                "Config key streamedEndpoints must be a list of strings.",
                key="streamedEndpoints",
            )

        return cls(
            open_api_json_document_url=str(values["openApiJsonDocumentUrl"]),
            client_name=str(values["clientName"]),
            client_base_url_value=str(values["clientBaseUrlValue"]),
            output_base_directory=str(values["outputBaseDirectory"]),
            streamed_endpoints=list(streamed),
            runtime_import_path=str(
                values.get("runtimeImportPath") or BUILTIN_DEFAULTS["runtimeImportPath"]
            ),
            verify_ssl=bool(values.get("verifySsl", True)),
        )

    @property
    def output_path(self) -> str:
        """{outputBaseDirectory}/{clientName}.ts"""
        return os.path.join(self.output_base_directory, f"{self.client_name}.ts")


@dataclass
class OpenApiConfig:
    """Конфигурация генератора: общие умолчания и список API"""

    defaults: Dict[str, Any] = field(default_factory=dict)
    apis: List[Dict[str, Any]] = field(default_factory=list)

    @classmethod
    def from_file(
        cls, config_path: str = CONFIG_FILE_NAME, search_dir: str = None
    ) -> Optional["OpenApiConfig"]:
        """Загрузка конфигурации из файла, None если файла нет"""
        # Если указана директория для поиска, ищем конфиг там
        if search_dir and os.path.isdir(search_dir):
            config_in_dir = os.path.join(search_dir, CONFIG_FILE_NAME)
            if os.path.exists(config_in_dir):
                config_path = config_in_dir

        if not os.path.exists(config_path):
            return None

        try:
            config_data = toml.load(config_path)
        except toml.TomlDecodeError as e:
            raise ConfigError(f"Invalid config file {config_path}: {e}") from e

        apis = config_data.get("apis", [])
        if not isinstance(apis, list):
            raise ConfigError("Config key apis must be an array of tables.", key="apis")

        return cls(defaults=dict(config_data.get("defaults", {})), apis=list(apis))

    def save_to_file(self, config_path: str = CONFIG_FILE_NAME) -> None:
        """Сохранение конфигурации в файл"""
        config_data = {"defaults": self.defaults, "apis": self.apis}

        with open(config_path, "w") as f:
            toml.dump(config_data, f)

    def merge_with_args(self, args) -> "OpenApiConfig":
        """
        Объединение с аргументами командной строки.

        Переданные аргументы переопределяют ключи каждого API,
        без API в файле они описывают единственный источник.
        """
        overrides = {
            key: value
            for key, value in {
                "openApiJsonDocumentUrl": getattr(args, "url", None),
                "clientName": getattr(args, "client_name", None),
                "clientBaseUrlValue": getattr(args, "base_url", None),
                "outputBaseDirectory": getattr(args, "output_dir", None),
                "streamedEndpoints": getattr(args, "streamed", None),
            }.items()
            if value
        }

        if not overrides:
            return OpenApiConfig(defaults=dict(self.defaults), apis=list(self.apis))

        apis = [{**api, **overrides} for api in self.apis] or [overrides]
        return OpenApiConfig(defaults=dict(self.defaults), apis=apis)

    def api_sources(self) -> List[ApiSourceConfig]:
        """
        Настройки всех API: встроенные умолчания < [defaults] < [[apis]].

        Все источники проверяются до начала генерации, поэтому
        ошибка конфигурации не оставляет частично записанных клиентов.
        """
        if not self.apis:
            raise ConfigError("No APIs configured.", key="apis")

        return [
            ApiSourceConfig.from_mapping({**BUILTIN_DEFAULTS, **self.defaults, **api})
            for api in self.apis
        ]
