"""
Нормализованное описание свойств схем.

PropertyDescriptor - размеченное объединение: у каждого свойства активна
ровно одна форма (примитив, дата, ссылка на enum, ссылка на объект,
массив, словарь). Форматтер типов и рендерер компонентов ветвятся
по классу дескриптора.
"""

from dataclasses import dataclass
from typing import NamedTuple, Optional, Union

NUMERIC_TYPES = ("number", "integer")
UNKNOWN_TYPE = "unknown"
FILE_TYPE = "File"


@dataclass(frozen=True, kw_only=True)
class BaseProperty:
    name: str
    nullable: bool = False
    format: Optional[str] = None
    raw_type: Optional[str] = None
    is_form_field: bool = False

    @property
    def reference_name(self) -> Optional[str]:
        return None

    @property
    def reference_is_enum(self) -> bool:
        return False

    @property
    def items(self) -> Optional["PropertyDescriptor"]:
        return None

    @property
    def value_type(self) -> Optional["PropertyDescriptor"]:
        return None


@dataclass(frozen=True, kw_only=True)
class PrimitiveProperty(BaseProperty):
    """string / boolean / number / object без additionalProperties и т.п."""

    @property
    def is_numeric(self) -> bool:
        return self.raw_type in NUMERIC_TYPES


@dataclass(frozen=True, kw_only=True)
class DateTimeProperty(BaseProperty):
    raw_type: Optional[str] = "string"
    format: Optional[str] = "date-time"


@dataclass(frozen=True, kw_only=True)
class EnumRefProperty(BaseProperty):
    target: str

    @property
    def reference_name(self) -> Optional[str]:
        return self.target

    @property
    def reference_is_enum(self) -> bool:
        return True


@dataclass(frozen=True, kw_only=True)
class ObjectRefProperty(BaseProperty):
    target: str

    @property
    def reference_name(self) -> Optional[str]:
        return self.target


@dataclass(frozen=True, kw_only=True)
class ArrayProperty(BaseProperty):
    raw_type: Optional[str] = "array"
    element: "PropertyDescriptor"

    @property
    def items(self) -> Optional["PropertyDescriptor"]:
        return self.element

    @property
    def reference_name(self) -> Optional[str]:
        return self.element.reference_name

    @property
    def reference_is_enum(self) -> bool:
        return self.element.reference_is_enum


@dataclass(frozen=True, kw_only=True)
class DictionaryProperty(BaseProperty):
    raw_type: Optional[str] = "object"
    values: "PropertyDescriptor"

    @property
    def value_type(self) -> Optional["PropertyDescriptor"]:
        return self.values


PropertyDescriptor = Union[
    PrimitiveProperty,
    DateTimeProperty,
    EnumRefProperty,
    ObjectRefProperty,
    ArrayProperty,
    DictionaryProperty,
]


class TypePair(NamedTuple):
    """Тип на проводе (DTO) и доменный тип (класс-значение)"""

    wire: str
    domain: str
