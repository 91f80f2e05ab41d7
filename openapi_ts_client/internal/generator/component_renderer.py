"""
Рендер классифицированных схем в TypeScript объявления.

Model и Response компоненты превращаются в DTO тип провода и класс-значение
с конвертирующим конструктором, Request - только в плоский тип,
Enum - в enum.
"""

import json
import logging
import re
from typing import AbstractSet, List, Optional

from ..types.components import (
    Component,
    EnumComponent,
    ObjectComponent,
    RequestComponent,
)
from ..types.descriptors import (
    ArrayProperty,
    DateTimeProperty,
    DictionaryProperty,
    ObjectRefProperty,
    PropertyDescriptor,
)
from ..types.models import (
    Class,
    CodeBlock,
    EnumDeclaration,
    EnumMember,
    Function,
    Parameter,
    PropertySignature,
    TypeAlias,
)
from ..utils import capitalize_first, is_identifier, ts_member_access
from .type_formatter import format_types

logger = logging.getLogger(__name__)


def render_enum(component: EnumComponent) -> EnumDeclaration:
    members = []
    for index, value in enumerate(component.values):
        if value is None:
            logger.warning(f"Enum {component.name}: null value skipped")
            continue
        members.append(
            EnumMember(
                label=_enum_label(component.label(index)),
                value=str(value) if component.is_numeric else json.dumps(value),
            )
        )

    return EnumDeclaration(name=component.capitalized_name, members=members)


def _enum_label(label: str) -> str:
    if is_identifier(label):
        return label
    # имя члена enum не может начинаться с цифры, даже в кавычках
    if label[:1].isdigit() or label[:1] == "-":
        return "_" + re.sub(r"\W", "_", label)
    return json.dumps(label)


def render_dto(
    component: ObjectComponent, request_names: AbstractSet[str] = frozenset()
) -> TypeAlias:
    """DTO тип T{Name}Dto: поля с типами провода"""
    return TypeAlias(
        name=component.dto_name,
        members=[
            PropertySignature(
                name=prop.name,
                type_expr=format_types(prop, request_names).wire,
                optional=prop.nullable,
            )
            for prop in component.properties
        ],
    )


def render_value_class(
    component: ObjectComponent, request_names: AbstractSet[str] = frozenset()
) -> Class:
    """
    Класс-значение с доменными типами и конструктором из DTO.

    Конструктор - единственное место, где данные провода превращаются
    в доменные: даты, вложенные объекты, Map. Необязательные поля
    остаются undefined.
    """
    value_class = Class(name=component.capitalized_name)

    for prop in component.properties:
        value_class.add_member(
            PropertySignature(
                name=prop.name,
                type_expr=format_types(prop, request_names).domain,
                optional=prop.nullable,
                modifier="public",
            )
        )

    value_class.add_function(
        Function(
            name="constructor",
            parameters=[Parameter(name="dto", var_type=component.dto_name)],
            code=CodeBlock(
                code="\n".join(
                    _constructor_line(prop, request_names)
                    for prop in component.properties
                )
            ),
        )
    )
    return value_class


def _constructor_line(
    prop: PropertyDescriptor, request_names: AbstractSet[str] = frozenset()
) -> str:
    target = ts_member_access("this", prop.name)
    source = ts_member_access("dto", prop.name)
    return f"{target} = {_convert(prop, source, request_names)};"


def _convert(
    prop: PropertyDescriptor, source: str, request_names: AbstractSet[str]
) -> str:
    if isinstance(prop, ArrayProperty):
        mapper = _converter(prop.element, "item", request_names)
        if mapper is None:
            return source
        access = "?." if prop.nullable else "."
        return f"{source}{access}map((item) => {mapper})"

    converted = _converter(prop, source, request_names)
    if converted is None:
        return source
    return _guarded(prop, source, converted)


def _converter(
    prop: PropertyDescriptor, var: str, request_names: AbstractSet[str]
) -> Optional[str]:
    """
    Выражение, превращающее значение провода var в доменное.

    None - значение копируется как есть. Для вложенных массивов и словарей
    конвертация повторяется на каждом уровне, чтобы результат совпадал
    с доменным типом из format_types.
    """
    if isinstance(prop, DateTimeProperty):
        return f"new Date({var})"

    if isinstance(prop, ObjectRefProperty):
        if prop.target in request_names:
            return None
        return f"new {capitalize_first(prop.target)}({var})"

    if isinstance(prop, ArrayProperty):
        inner = _converter(prop.element, "item", request_names)
        if inner is None:
            return None
        return f"{var}.map((item) => {inner})"

    if isinstance(prop, DictionaryProperty):
        inner = _converter(prop.values, "value", request_names)
        if inner is None:
            return f"new Map(Object.entries({var}))"
        return (
            f"new Map(Object.entries({var})"
            f".map(([key, value]) => [key, {inner}]))"
        )

    return None


def _guarded(prop: PropertyDescriptor, source: str, expression: str) -> str:
    if prop.nullable:
        return f"{source} ? {expression} : undefined"
    return expression


def render_request(
    component: RequestComponent, request_names: AbstractSet[str] = frozenset()
) -> TypeAlias:
    """Плоский тип T{Name} для данных запроса, без класса-значения"""
    return render_dto(component, request_names)


def render_component(
    component: Component, request_names: AbstractSet[str] = frozenset()
) -> List[object]:
    """
    Все объявления одного компонента в порядке вывода.

    Returns:
        [EnumDeclaration] | [TypeAlias] | [TypeAlias, Class]
    """
    if isinstance(component, EnumComponent):
        return [render_enum(component)]
    if isinstance(component, RequestComponent):
        return [render_request(component, request_names)]
    return [
        render_dto(component, request_names),
        render_value_class(component, request_names),
    ]
