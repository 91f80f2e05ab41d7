from typing import AbstractSet

from ..types.descriptors import (
    UNKNOWN_TYPE,
    ArrayProperty,
    DateTimeProperty,
    DictionaryProperty,
    EnumRefProperty,
    ObjectRefProperty,
    PrimitiveProperty,
    PropertyDescriptor,
    TypePair,
)
from ..utils import capitalize_first


def format_types(
    descriptor: PropertyDescriptor, request_names: AbstractSet[str] = frozenset()
) -> TypePair:
    """
    Типы свойства на проводе и в доменном классе.

    Args:
        descriptor: Нормализованное свойство
        request_names: Имена Request компонентов, они называются
            T{Name} без суффикса Dto и на проводе, и в домене

    Returns:
        TypePair(wire, domain)
    """
    if isinstance(descriptor, DateTimeProperty):
        return TypePair("string", "Date")

    if isinstance(descriptor, PrimitiveProperty) and descriptor.is_numeric:
        return TypePair("number", "number")

    if isinstance(descriptor, EnumRefProperty):
        # у enum нет разделения на провод и домен
        name = capitalize_first(descriptor.target)
        return TypePair(name, name)

    if isinstance(descriptor, ObjectRefProperty):
        name = capitalize_first(descriptor.target)
        if descriptor.target in request_names:
            # запрос без класса-значения, в домене тот же плоский тип
            return TypePair(f"T{name}", f"T{name}")
        return TypePair(f"T{name}Dto", name)

    if isinstance(descriptor, ArrayProperty):
        element = format_types(descriptor.element, request_names)
        return TypePair(f"{element.wire}[]", f"{element.domain}[]")

    if isinstance(descriptor, DictionaryProperty):
        values = format_types(descriptor.values, request_names)
        return TypePair(
            f"Record<string, {values.wire}>", f"Map<string, {values.domain}>"
        )

    raw_type = descriptor.raw_type or UNKNOWN_TYPE
    return TypePair(raw_type, raw_type)
