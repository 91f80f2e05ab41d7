import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from ...config import ApiSourceConfig
from ..types.components import ClassificationContext
from ..types.models import Class, CodeBlock, CodeFile, Function
from ..utils import ts_string
from .classifier import classify_document
from .component_renderer import render_component
from .operation_mapper import ApiOperation, map_operations, render_operation
from .templates import templates

logger = logging.getLogger(__name__)


class ClientGenerator:
    """Генератор TypeScript клиента из OpenAPI"""

    def __init__(self, openapi_dict: Dict[str, Any], settings: ApiSourceConfig):
        self.openapi_dict = openapi_dict
        self.settings = settings

        self.context: Optional[ClassificationContext] = None
        self.operations: List[ApiOperation] = []

    def generate(self, generated_at: datetime = None) -> CodeFile:
        """
        Основная генерация.

        Классификация всех схем завершается до рендера любого объявления.

        Args:
            generated_at: Время генерации для заголовка файла,
                по умолчанию текущее время UTC
        """
        self.context = classify_document(self.openapi_dict)
        self.operations = map_operations(
            self.openapi_dict, self.context, self.settings.streamed_endpoints
        )

        code_file = CodeFile(file_name=f"{self.settings.client_name}.ts")
        self._add_header(code_file, generated_at or datetime.now(timezone.utc))
        self._add_components(code_file)
        self._add_client_class(code_file)

        logger.debug(
            f"{code_file.file_name}: {len(code_file.declarations)} declarations, "
            f"{len(self.operations)} operations"
        )
        return code_file

    def _add_header(self, code_file: CodeFile, generated_at: datetime):
        for line in templates.header:
            code_file.comments.append(
                line.format(
                    generated_at=generated_at.isoformat(),
                    source_url=self.settings.open_api_json_document_url,
                )
            )

        code_file.imports.append(
            templates.runtime_import.format(
                runtime_import_path=self.settings.runtime_import_path
            )
        )

    def _add_components(self, code_file: CodeFile):
        """Requests, Responses, Enums, Models - в этом порядке"""
        request_names = self.context.flat_request_names

        for collection in (
            self.context.requests,
            self.context.responses,
            self.context.enums,
            self.context.models,
        ):
            for component in collection.values():
                for declaration in render_component(component, request_names):
                    code_file.add_declaration(declaration)

    def _add_client_class(self, code_file: CodeFile):
        client = code_file.add_class(self.settings.client_name, inherits="ApiClient")

        client.add_function(
            Function(
                name="constructor",
                code=CodeBlock(
                    code=templates.client_constructor.format(
                        base_url=self._base_url_expression()
                    )
                ),
            )
        )

        for operation in self.operations:
            client.add_function(render_operation(operation))

    def _base_url_expression(self) -> str:
        """URL в кавычках, любое другое значение - выражение TypeScript как есть"""
        base_url = self.settings.client_base_url_value
        if base_url.startswith("http"):
            return ts_string(base_url)
        return base_url
