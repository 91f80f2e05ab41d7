"""
Операции API: метаданные пары (эндпоинт, метод) и рендер метода клиента.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple

from ..types.components import (
    ClassificationContext,
    RequestComponent,
    ResponseComponent,
)
from ..types.descriptors import FILE_TYPE, ArrayProperty, PropertyDescriptor
from ..types.models import CodeBlock, Function, Parameter, Variable
from ..types.schema_resolver import (
    deref,
    iter_operations,
    replace_refs,
    split_reference,
)
from ..utils import (
    capitalize_first,
    extract_path_parameters,
    lower_first,
    strip_suffix,
    strip_url_chars,
    ts_member_access,
    ts_property_key,
    ts_string,
)
from .templates import templates
from .type_formatter import format_types

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json"

VERB_WORDS = {
    "get": "get",
    "post": "create",
    "put": "replace",
    "patch": "update",
    "delete": "delete",
}


class MethodShape(str, Enum):
    STREAMED = "streamed"
    REQUEST_AND_RESPONSE = "request_and_response"
    REQUEST_ONLY = "request_only"
    RESPONSE_ONLY = "response_only"
    NO_REQUEST_NO_RESPONSE = "no_request_no_response"


def select_method_shape(
    has_request: bool, has_response: bool, is_streamed: bool
) -> MethodShape:
    """Форма метода клиента - чистая функция трех флагов"""
    if has_request and has_response:
        if is_streamed:
            return MethodShape.STREAMED
        return MethodShape.REQUEST_AND_RESPONSE

    if has_request:
        return MethodShape.REQUEST_ONLY

    if has_response:
        return MethodShape.RESPONSE_ONLY

    return MethodShape.NO_REQUEST_NO_RESPONSE


@dataclass(frozen=True)
class OperationParameter:
    name: str
    location: str
    required: bool = False
    type_expr: str = "unknown"
    is_array: bool = False


@dataclass(frozen=True)
class ApiOperation:
    endpoint: str
    method: str
    method_name: str
    operation_id: Optional[str] = None
    parameters: Tuple[OperationParameter, ...] = ()

    request_name: Optional[str] = None
    response_name: Optional[str] = None
    request: Optional[RequestComponent] = None
    response: Optional[ResponseComponent] = None

    is_streamed: bool = False
    is_form_endpoint: bool = False

    @property
    def path_parameters(self) -> List[str]:
        return extract_path_parameters(self.endpoint)

    @property
    def query_parameters(self) -> List[OperationParameter]:
        return [p for p in self.parameters if p.location == "query"]

    @property
    def has_request(self) -> bool:
        """Именованный запрос, path или query параметры"""
        return bool(
            self.request is not None or self.path_parameters or self.query_parameters
        )

    @property
    def has_response(self) -> bool:
        return self.response is not None

    @property
    def shape(self) -> MethodShape:
        return select_method_shape(
            self.has_request, self.has_response, self.is_streamed
        )

    @property
    def uses_form_data(self) -> bool:
        return self.is_form_endpoint and self.shape is not MethodShape.STREAMED

    @property
    def request_type(self) -> Optional[str]:
        """Пересечение path, query и именованного типа запроса"""
        parts = []
        if self.path_parameters:
            fields = ", ".join(
                f"{ts_property_key(name)}: string" for name in self.path_parameters
            )
            parts.append(f"{{ {fields} }}")

        if self.query_parameters:
            fields = ", ".join(
                f"{ts_property_key(p.name)}{'' if p.required else '?'}: {p.type_expr}"
                for p in self.query_parameters
            )
            parts.append(f"{{ {fields} }}")

        if self.request is not None:
            parts.append(self.request.dto_name)

        return " & ".join(parts) or None

    @property
    def skip_request_body(self) -> bool:
        """Все поля запроса уже переданы в пути - тело отправляется пустым"""
        return self.request is not None and all(
            prop.name in self.path_parameters for prop in self.request.properties
        )

    @property
    def built_url(self) -> str:
        url = self.endpoint
        for name in self.path_parameters:
            url = url.replace(
                f"{{{name}}}", f"${{{ts_member_access('request', name)}}}"
            )
        if self.query_parameters:
            url += "?${queryParams}"
        return url


def derive_method_name(
    endpoint: str,
    method: str,
    operation_id: Optional[str] = None,
    request_name: Optional[str] = None,
    response_name: Optional[str] = None,
    is_streamed: bool = False,
) -> str:
    """
    Имя метода клиента.

    Приоритет: operationId, затем имя связанного ответа (GET) или запроса
    (остальные методы) без суффикса, затем {verb}{Resource}.

    Examples:
        >>> derive_method_name("widgets/{id}", "get")
        'getWidgetsId'
        >>> derive_method_name("chat", "post", operation_id="send_message", is_streamed=True)
        'sendMessageStream'
    """
    suffix = "Stream" if is_streamed else ""

    if operation_id:
        return lower_first(strip_url_chars(operation_id)) + suffix

    if method == "get":
        base = strip_suffix(response_name or "", "Response")
    else:
        base = strip_suffix(
            strip_suffix(request_name or "", "RequestFormData"), "Request"
        )

    if not base:
        base = VERB_WORDS[method] + strip_url_chars(endpoint)

    return lower_first(base) + suffix


def map_operations(
    document: Dict[str, Any],
    context: ClassificationContext,
    streamed_endpoints: Iterable[str] = (),
) -> List[ApiOperation]:
    """
    Все операции документа в порядке обхода paths.

    Args:
        document: Сырой OpenAPI документ
        context: Результат classify_document для того же документа
        streamed_endpoints: Эндпоинты, ответы которых читаются потоком

    Returns:
        Список ApiOperation с уникальными именами методов
    """
    document = replace_refs(document)
    streamed = set(streamed_endpoints)
    operations = []
    used_names = set()

    for endpoint, method, operation, path_item in iter_operations(document):
        operation_id = operation.get("operationId")
        is_streamed = endpoint in streamed or endpoint.lstrip("/") in streamed

        request_name = _request_reference(operation)
        form_name = context.form_requests.get((endpoint, method))
        is_form_endpoint = False
        if request_name is None and form_name is not None:
            request_name = form_name
            is_form_endpoint = method == "post"
            if not is_form_endpoint:
                logger.warning(
                    f"{method.upper()} {endpoint}: form data is sent only with POST, "
                    "request is serialized as JSON"
                )

        response_name = _response_reference(operation)
        request = context.request_component(request_name)
        response = context.response_component(response_name)

        method_name = derive_method_name(
            endpoint.lstrip("/"),
            method,
            operation_id,
            request.name if request else None,
            response.name if response else None,
            is_streamed,
        )
        if method_name in used_names:
            unique_name = _unique_name(method_name, used_names)
            logger.warning(
                f"{method.upper()} {endpoint}: method name {method_name} "
                f"is already used, renamed to {unique_name}"
            )
            method_name = unique_name
        used_names.add(method_name)

        api_operation = ApiOperation(
            endpoint=endpoint.lstrip("/"),
            method=method,
            method_name=method_name,
            operation_id=operation_id,
            parameters=_merge_parameters(path_item, operation, context),
            request_name=request_name,
            response_name=response_name,
            request=request,
            response=response,
            is_streamed=is_streamed,
            is_form_endpoint=is_form_endpoint,
        )
        if is_form_endpoint and api_operation.shape is MethodShape.STREAMED:
            logger.warning(
                f"{method.upper()} {endpoint}: streamed endpoint, form data is ignored"
            )

        logger.debug(
            f"Operation {method.upper()} {endpoint} -> {method_name} "
            f"({api_operation.shape.value})"
        )
        operations.append(api_operation)

    return operations


def _unique_name(name: str, used_names: set) -> str:
    index = 2
    while f"{name}{index}" in used_names:
        index += 1
    return f"{name}{index}"


def _request_reference(operation: Dict[str, Any]) -> Optional[str]:
    """Первая $ref схема среди content тела запроса"""
    request_body = deref(operation.get("requestBody"))
    for content in deref(request_body.get("content")).values():
        _, name = split_reference(deref(content).get("schema"))
        if name is not None:
            return name
    return None


def _response_reference(operation: Dict[str, Any]) -> Optional[str]:
    """$ref схема application/json ответа 200, иначе первого 2xx ответа"""
    responses = deref(operation.get("responses"))
    success = [code for code in responses if str(code).startswith("2")]
    # 200 первым, остальные 2xx в порядке документа
    success.sort(key=lambda code: str(code) != "200")

    for code in success:
        response = deref(responses[code])
        content = deref(deref(response.get("content")).get(JSON_CONTENT_TYPE))
        _, name = split_reference(content.get("schema"))
        if name is not None:
            return name
    return None


def _merge_parameters(
    path_item: Dict[str, Any],
    operation: Dict[str, Any],
    context: ClassificationContext,
) -> Tuple[OperationParameter, ...]:
    """Параметры path item и операции, параметр операции переопределяет общий"""
    merged: Dict[Tuple[str, str], OperationParameter] = {}

    for node in list(_iter_list(path_item.get("parameters"))) + list(
        _iter_list(operation.get("parameters"))
    ):
        raw = deref(node)
        name, location = raw.get("name"), raw.get("in")
        if not name or not location:
            continue

        schema = raw.get("schema")
        merged[(name, location)] = OperationParameter(
            name=name,
            location=location,
            required=bool(raw.get("required")) or location == "path",
            type_expr=_parameter_type(schema, context),
            is_array=deref(schema).get("type") == "array",
        )

    return tuple(merged.values())


def _iter_list(node: Any) -> List[Any]:
    if isinstance(node, list):
        return node
    return []


def _parameter_type(schema: Any, context: ClassificationContext) -> str:
    """Тип query параметра: даты строкой, integer как number, массивы с []"""
    raw, name = split_reference(schema)
    if name is not None:
        if name in context.enum_names:
            return capitalize_first(name)
        return "unknown"

    if not isinstance(raw, dict):
        return "unknown"

    raw_type = raw.get("type")
    if raw_type == "string" and raw.get("format") == "date-time":
        return "string"
    if raw_type in ("integer", "number"):
        return "number"
    if raw_type == "array":
        items = raw.get("items")
        if items is None:
            return "unknown[]"
        return f"{_parameter_type(items, context)}[]"
    return raw_type or "unknown"


def render_operation(operation: ApiOperation) -> Function:
    """
    Метод клиента для операции.

    Форма метода выбирается select_method_shape, query параметры
    собираются в URLSearchParams, форма - в FormData.
    """
    shape = operation.shape

    parameters = []
    if operation.has_request:
        parameters.append(Parameter(name="request", var_type=operation.request_type))
    parameters.append(
        Parameter(name="options", var_type="TApiRequestOptions", optional=True)
    )

    lines = _query_lines(operation)
    if operation.uses_form_data:
        lines.extend(_form_lines(operation.request))

    body = _body_argument(operation)
    arguments = ", ".join(
        filter(None, [f"`{operation.built_url}`", body, "options"])
    )
    verb = "postFormData" if operation.uses_form_data else operation.method

    if shape is MethodShape.STREAMED:
        lines.append(
            templates.stream.format(
                verb=operation.method,
                dto_name=operation.response.dto_name,
                arguments=arguments,
                value_class=operation.response.capitalized_name,
            )
        )
        response_type = Variable(
            wrap_name="AsyncGenerator", value=operation.response.capitalized_name
        )

    elif operation.has_response:
        lines.append(
            templates.call_with_data.format(
                verb=verb,
                dto_name=operation.response.dto_name,
                arguments=arguments,
            )
        )
        lines.append(
            templates.result_with_data.format(
                value_class=operation.response.capitalized_name
            )
        )
        response_type = _result_type(operation.response.capitalized_name)

    else:
        lines.append(templates.call_without_data.format(verb=verb, arguments=arguments))
        lines.append(templates.result_without_data)
        response_type = _result_type("null")

    return Function(
        name=operation.method_name,
        parameters=parameters,
        response=response_type,
        async_def=True,
        generator=shape is MethodShape.STREAMED,
        code=CodeBlock(code="\n".join(lines)),
    )


def _result_type(value: str) -> Variable:
    return Variable(
        wrap_name="Promise",
        value=Variable(wrap_name="TApiClientResult", value=value),
    )


def _body_argument(operation: ApiOperation) -> Optional[str]:
    """
    Аргумент тела запроса для вызова базового клиента.

    GET и потоковый DELETE тело не принимают.
    """
    if operation.method == "get":
        return None
    if operation.shape is MethodShape.STREAMED and operation.method == "delete":
        return None
    if operation.uses_form_data:
        return "formData"
    if operation.request is not None:
        return "{}" if operation.skip_request_body else "request"
    return "undefined"


def _query_lines(operation: ApiOperation) -> List[str]:
    if not operation.query_parameters:
        return []

    lines = [templates.query_init]
    for parameter in operation.query_parameters:
        source = ts_member_access("request", parameter.name)
        key = ts_string(parameter.name)
        if parameter.is_array:
            statement = templates.query_append_each.format(
                source=source, key=key, value="String(item)"
            )
        else:
            statement = templates.query_set.format(key=key, value=f"String({source})")

        if not parameter.required:
            statement = templates.optional_guard.format(
                source=source, statement=statement
            )
        lines.append(statement)

    return lines


def _form_lines(request: RequestComponent) -> List[str]:
    lines = [templates.form_init]
    for prop in request.properties:
        source = ts_member_access("request", prop.name)
        key = ts_string(prop.name)
        if isinstance(prop, ArrayProperty):
            statement = templates.form_append_each.format(
                source=source, key=key, value=_form_value(prop.element, "item")
            )
        else:
            statement = templates.form_append.format(
                key=key, value=_form_value(prop, source)
            )

        if prop.nullable:
            statement = templates.optional_guard.format(
                source=source, statement=statement
            )
        lines.append(statement)

    return lines


def _form_value(prop: PropertyDescriptor, source: str) -> str:
    # FormData принимает только строки и Blob
    if format_types(prop).wire in ("string", FILE_TYPE):
        return source
    return f"String({source})"
