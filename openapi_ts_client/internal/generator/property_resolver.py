import logging
from typing import AbstractSet, Any

from jsonref import JsonRef

from ..types.descriptors import (
    FILE_TYPE,
    UNKNOWN_TYPE,
    ArrayProperty,
    DateTimeProperty,
    DictionaryProperty,
    EnumRefProperty,
    ObjectRefProperty,
    PrimitiveProperty,
    PropertyDescriptor,
)
from ..types.schema_resolver import is_resolvable, split_reference

logger = logging.getLogger(__name__)


def resolve_property(
    name: str,
    node: Any,
    required: AbstractSet[str] = frozenset(),
    enum_names: AbstractSet[str] = frozenset(),
    form_field: bool = False,
) -> PropertyDescriptor:
    """
    Нормализация одного свойства схемы в PropertyDescriptor.

    Args:
        name: Имя свойства в схеме
        node: Сырой узел свойства (dict или JsonRef)
        required: Список обязательных свойств схемы-владельца
        enum_names: Имена всех enum схем документа (собираются до классификации)
        form_field: Свойство multipart формы

    Returns:
        Дескриптор ровно одной формы: примитив, дата, ссылка, массив или словарь
    """
    raw, ref_name = split_reference(node)
    if not isinstance(raw, dict):
        raw = {}

    raw_type = raw.get("type")
    if "nullable" in raw:
        nullable = bool(raw["nullable"])
    else:
        nullable = ref_name is not None
    # OpenAPI 3.1: "type": ["string", "null"]
    if isinstance(raw_type, list):
        nullable = nullable or "null" in raw_type
        raw_type = next((t for t in raw_type if t != "null"), None)
    if name in required:
        nullable = False

    common = dict(
        name=name,
        nullable=nullable,
        format=raw.get("format"),
        is_form_field=form_field,
    )

    if ref_name is not None:
        if not is_resolvable(node):
            return PrimitiveProperty(**common)
        if ref_name in enum_names:
            return EnumRefProperty(target=ref_name, **common)
        return ObjectRefProperty(target=ref_name, **common)

    if raw_type == "array":
        items = raw.get("items")
        if _is_schema(items):
            element = resolve_property(
                name, items, enum_names=enum_names, form_field=form_field
            )
        else:
            element = PrimitiveProperty(name=name, is_form_field=form_field)
        return ArrayProperty(element=element, **common)

    additional = raw.get("additionalProperties")
    if raw_type == "object" and _is_schema(additional):
        values = resolve_property(name, additional, enum_names=enum_names)
        return DictionaryProperty(values=values, **common)

    if raw_type == "string" and raw.get("format") == "date-time":
        return DateTimeProperty(**common)

    if form_field and raw.get("format") == "binary":
        return PrimitiveProperty(raw_type=FILE_TYPE, **common)

    if raw_type is None and raw.get("oneOf"):
        # Берется только первый вариант объединения - приближение
        _, member_ref = split_reference(raw["oneOf"][0])
        raw_type = member_ref or UNKNOWN_TYPE
        logger.warning(
            f"Property {name}: oneOf reduced to its first member ({raw_type})"
        )

    return PrimitiveProperty(raw_type=raw_type, **common)


def _is_schema(node: Any) -> bool:
    # JsonRef первым: isinstance(proxy, dict) разыменовывает ссылку
    return isinstance(node, JsonRef) or isinstance(node, dict)
