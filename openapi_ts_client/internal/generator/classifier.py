"""
Классификация схем документа: Enum, Request, Response или Model.

Выполняется в два прохода. Первый собирает имена enum схем и использование
схем в запросах и ответах операций, второй классифицирует каждую схему.
Имена enum должны быть известны до разбора свойств, иначе ссылки на enum
будут приняты за ссылки на объекты.
"""

import logging
from typing import Any, Dict, Optional, Tuple

from ..types.components import (
    ClassificationContext,
    EnumComponent,
    ModelComponent,
    ObjectComponent,
    RequestComponent,
    ResponseComponent,
)
from ..types.schema_resolver import (
    deref,
    iter_operations,
    replace_refs,
    split_reference,
)
from ..utils import capitalize_first, strip_url_chars
from .property_resolver import resolve_property

logger = logging.getLogger(__name__)

FORM_CONTENT_TYPE = "multipart/form-data"


def classify_document(document: Dict[str, Any]) -> ClassificationContext:
    """
    Классификация всех схем документа.

    Args:
        document: Сырой OpenAPI документ (dict из JSON)

    Returns:
        Новый ClassificationContext, общий для рендера компонентов и операций
    """
    document = replace_refs(document)
    context = ClassificationContext()

    schemas = _schemas(document)
    _collect_enum_names(schemas, context)
    _discover_usage(document, context)
    _classify_schemas(schemas, context)

    logger.debug(
        f"Classified {len(context.enums)} enums, {len(context.requests)} requests, "
        f"{len(context.responses)} responses, {len(context.models)} models"
    )
    return context


def form_request_name(endpoint: str, method: str, operation_id: Optional[str]) -> str:
    """Имя синтетического компонента формы для операции"""
    if operation_id:
        return f"{strip_url_chars(operation_id)}RequestFormData"
    return (
        f"{capitalize_first(method)}{strip_url_chars(endpoint.lstrip('/'))}"
        "RequestFormData"
    )


def _schemas(document: Dict[str, Any]) -> Dict[str, Any]:
    schemas = deref(deref(document.get("components")).get("schemas"))
    if not schemas:
        logger.warning("No components found in OpenAPI document")
    return schemas


def _collect_enum_names(schemas: Dict[str, Any], context: ClassificationContext):
    for name, node in schemas.items():
        if deref(node).get("enum"):
            context.enum_names.add(name)


def _discover_usage(document: Dict[str, Any], context: ClassificationContext):
    """Первый проход: схемы запросов и ответов, синтетические формы"""
    for endpoint, method, operation, _ in iter_operations(document):
        for code, response in deref(operation.get("responses")).items():
            for content in deref(deref(response).get("content")).values():
                _, name = split_reference(deref(content).get("schema"))
                if name is not None:
                    logger.debug(
                        f"Response {name} in endpoint {method.upper()} {endpoint}"
                    )
                    context.response_names.add(name)

        request_body = deref(operation.get("requestBody"))
        for content_type, content in deref(request_body.get("content")).items():
            schema = deref(content).get("schema")
            if schema is None:
                continue

            _, name = split_reference(schema)
            if name is not None:
                logger.debug(f"Request {name} in endpoint {method.upper()} {endpoint}")
                context.request_names.add(name)
            elif content_type == FORM_CONTENT_TYPE:
                _synthesize_form_request(
                    endpoint, method, operation, deref(schema), context
                )


def _synthesize_form_request(
    endpoint: str,
    method: str,
    operation: Dict[str, Any],
    schema: Dict[str, Any],
    context: ClassificationContext,
):
    name = form_request_name(endpoint, method, operation.get("operationId"))
    logger.debug(f"Form data {name} in endpoint {method.upper()} {endpoint}")

    required = frozenset(schema.get("required") or ())
    properties = tuple(
        resolve_property(
            prop_name,
            prop,
            required=required,
            enum_names=context.enum_names,
            form_field=True,
        )
        for prop_name, prop in deref(schema.get("properties")).items()
    )

    context.add(
        RequestComponent(name=name, required_properties=required, properties=properties)
    )
    context.form_requests[(endpoint, method)] = name


def _classify_schemas(schemas: Dict[str, Any], context: ClassificationContext):
    """Второй проход: enum > request > response > model"""
    for name, node in schemas.items():
        schema = deref(node)
        if not schema and node:
            logger.warning(f"Schema {name} is not an object, rendered without fields")

        if name in context.enum_names:
            logger.debug(f"Schema {name}: enum")
            context.add(_enum_component(name, schema))
            continue

        if name in context.request_names:
            kind = RequestComponent
        elif name in context.response_names:
            kind = ResponseComponent
        else:
            kind = ModelComponent

        logger.debug(f"Schema {name}: {kind.__name__}")
        context.add(_object_component(kind, name, schema, context))


def _enum_component(name: str, schema: Dict[str, Any]) -> EnumComponent:
    display_names = schema.get("x-enumNames")
    return EnumComponent(
        name=name,
        values=tuple(schema["enum"]),
        display_names=tuple(display_names) if display_names else None,
        value_type=schema.get("type") or "string",
    )


def _object_component(
    kind: type,
    name: str,
    schema: Dict[str, Any],
    context: ClassificationContext,
) -> ObjectComponent:
    required = frozenset(schema.get("required") or ())
    properties: Tuple = tuple(
        resolve_property(
            prop_name, prop, required=required, enum_names=context.enum_names
        )
        for prop_name, prop in deref(schema.get("properties")).items()
    )
    return kind(name=name, required_properties=required, properties=properties)
