"""
Тесты форматирования типов провода и домена
"""

from openapi_ts_client.internal.generator.type_formatter import format_types
from openapi_ts_client.internal.types.descriptors import (
    ArrayProperty,
    DateTimeProperty,
    DictionaryProperty,
    EnumRefProperty,
    ObjectRefProperty,
    PrimitiveProperty,
    TypePair,
)


class TestFormatTypes:
    """Пары (wire, domain) для всех форм свойств"""

    def test_date(self):
        assert format_types(DateTimeProperty(name="at")) == TypePair("string", "Date")

    def test_numeric(self):
        prop = PrimitiveProperty(name="count", raw_type="integer")

        assert format_types(prop) == TypePair("number", "number")

    def test_enum_reference(self):
        """У enum нет разделения на провод и домен"""
        prop = EnumRefProperty(name="color", target="Color")

        assert format_types(prop) == TypePair("Color", "Color")

    def test_object_reference(self):
        prop = ObjectRefProperty(name="tag", target="Tag")

        assert format_types(prop) == TypePair("TTagDto", "Tag")

    def test_request_reference_uses_flat_name(self):
        """Ссылка на Request компонент - плоский T{Name} на проводе и в домене"""
        prop = ObjectRefProperty(name="filter", target="Filter")

        assert format_types(prop, request_names={"Filter"}) == TypePair(
            "TFilter", "TFilter"
        )

    def test_array_of_references(self):
        """Массив ссылок на не-enum объект"""
        prop = ArrayProperty(
            name="tags", element=ObjectRefProperty(name="tags", target="Tag")
        )

        assert format_types(prop) == TypePair("TTagDto[]", "Tag[]")

    def test_array_of_enums(self):
        prop = ArrayProperty(
            name="colors", element=EnumRefProperty(name="colors", target="Color")
        )

        assert format_types(prop) == TypePair("Color[]", "Color[]")

    def test_array_of_primitives(self):
        prop = ArrayProperty(
            name="names", element=PrimitiveProperty(name="names", raw_type="string")
        )

        assert format_types(prop) == TypePair("string[]", "string[]")

    def test_array_of_dates(self):
        prop = ArrayProperty(name="days", element=DateTimeProperty(name="days"))

        assert format_types(prop) == TypePair("string[]", "Date[]")

    def test_nested_arrays(self):
        prop = ArrayProperty(
            name="matrix",
            element=ArrayProperty(
                name="matrix",
                element=PrimitiveProperty(name="matrix", raw_type="number"),
            ),
        )

        assert format_types(prop) == TypePair("number[][]", "number[][]")

    def test_dictionary_of_primitives(self):
        prop = DictionaryProperty(
            name="attributes",
            values=PrimitiveProperty(name="attributes", raw_type="string"),
        )

        assert format_types(prop) == TypePair(
            "Record<string, string>", "Map<string, string>"
        )

    def test_dictionary_of_reference_arrays(self):
        """Словарь массивов ссылок: обертка элемента различается"""
        prop = DictionaryProperty(
            name="related",
            values=ArrayProperty(
                name="related",
                element=ObjectRefProperty(name="related", target="Tag"),
            ),
        )

        assert format_types(prop) == TypePair(
            "Record<string, TTagDto[]>", "Map<string, Tag[]>"
        )

    def test_raw_type_passthrough(self):
        prop = PrimitiveProperty(name="flag", raw_type="boolean")

        assert format_types(prop) == TypePair("boolean", "boolean")

    def test_absent_type_is_unknown(self):
        assert format_types(PrimitiveProperty(name="x")) == TypePair(
            "unknown", "unknown"
        )

    def test_lowercase_reference_is_capitalized(self):
        prop = ObjectRefProperty(name="owner", target="user")

        assert format_types(prop) == TypePair("TUserDto", "User")
