"""
Тесты нормализации свойств схем
"""

import logging

import pytest

from openapi_ts_client.exceptions import SchemaReferenceError
from openapi_ts_client.internal.generator.property_resolver import resolve_property
from openapi_ts_client.internal.types.descriptors import (
    ArrayProperty,
    DateTimeProperty,
    DictionaryProperty,
    EnumRefProperty,
    ObjectRefProperty,
    PrimitiveProperty,
)
from openapi_ts_client.internal.types.schema_resolver import replace_refs


def _properties(properties: dict, extra_schemas: dict = None) -> dict:
    """Свойства схемы Owner после замены $ref на JsonRef"""
    document = {
        "components": {
            "schemas": {
                "Tag": {"type": "object", "properties": {"name": {"type": "string"}}},
                "Color": {"type": "string", "enum": ["red", "green"]},
                "Owner": {"type": "object", "properties": properties},
                **(extra_schemas or {}),
            }
        }
    }
    return replace_refs(document)["components"]["schemas"]["Owner"]["properties"]


class TestShapes:
    """Определение формы свойства"""

    def test_array_of_references(self):
        """Массив ссылок на объект"""
        props = _properties(
            {"tags": {"type": "array", "items": {"$ref": "#/components/schemas/Tag"}}}
        )

        prop = resolve_property("tags", props["tags"])

        assert isinstance(prop, ArrayProperty)
        assert isinstance(prop.items, ObjectRefProperty)
        assert prop.items.target == "Tag"
        assert prop.reference_name == "Tag"
        assert prop.reference_is_enum is False

    def test_array_without_items(self):
        """Массив без items - элемент неизвестного типа"""
        prop = resolve_property("values", {"type": "array"})

        assert isinstance(prop, ArrayProperty)
        assert isinstance(prop.items, PrimitiveProperty)
        assert prop.items.raw_type is None

    def test_dictionary(self):
        """object с additionalProperties-схемой - словарь"""
        props = _properties(
            {
                "byName": {
                    "type": "object",
                    "additionalProperties": {"$ref": "#/components/schemas/Tag"},
                }
            }
        )

        prop = resolve_property("byName", props["byName"])

        assert isinstance(prop, DictionaryProperty)
        assert isinstance(prop.value_type, ObjectRefProperty)
        assert prop.value_type.target == "Tag"

    def test_additional_properties_true_is_not_dictionary(self):
        """additionalProperties: true не описывает тип значений"""
        prop = resolve_property(
            "extra", {"type": "object", "additionalProperties": True}
        )

        assert isinstance(prop, PrimitiveProperty)
        assert prop.raw_type == "object"

    def test_date_time(self):
        """string + date-time - дата"""
        prop = resolve_property("createdAt", {"type": "string", "format": "date-time"})

        assert isinstance(prop, DateTimeProperty)

    def test_date_without_time_is_string(self):
        """format: date остается строкой"""
        prop = resolve_property("day", {"type": "string", "format": "date"})

        assert isinstance(prop, PrimitiveProperty)
        assert prop.raw_type == "string"

    @pytest.mark.parametrize("raw_type", ["integer", "number"])
    def test_numeric_unification(self, raw_type):
        """integer и number - один числовой вид"""
        prop = resolve_property("count", {"type": raw_type})

        assert isinstance(prop, PrimitiveProperty)
        assert prop.is_numeric

    def test_openapi_31_type_list(self):
        """type: [string, null] - nullable строка"""
        prop = resolve_property("note", {"type": ["string", "null"]})

        assert prop.raw_type == "string"
        assert prop.nullable is True


class TestReferences:
    """Ссылки на схемы"""

    def test_enum_reference(self):
        """Ссылка на схему из множества enum имен"""
        props = _properties({"color": {"$ref": "#/components/schemas/Color"}})

        prop = resolve_property("color", props["color"], enum_names={"Color"})

        assert isinstance(prop, EnumRefProperty)
        assert prop.reference_is_enum is True

    def test_enum_reference_without_enum_names(self):
        """Без собранных enum имен ссылка считается объектной"""
        props = _properties({"color": {"$ref": "#/components/schemas/Color"}})

        prop = resolve_property("color", props["color"])

        assert isinstance(prop, ObjectRefProperty)

    def test_array_of_enum_references(self):
        props = _properties(
            {
                "colors": {
                    "type": "array",
                    "items": {"$ref": "#/components/schemas/Color"},
                }
            }
        )

        prop = resolve_property("colors", props["colors"], enum_names={"Color"})

        assert prop.reference_is_enum is True

    def test_reference_name_is_last_pointer_segment(self):
        """Имя схемы - последний сегмент указателя"""
        prop = resolve_property(
            "tag", {"$ref": "#/components/schemas/Tag"}
        )

        assert prop.reference_name == "Tag"

    def test_unresolvable_reference_degrades(self, caplog):
        """Битая ссылка - неизвестный тип без прерывания генерации"""
        props = _properties({"ghost": {"$ref": "#/components/schemas/Missing"}})

        with caplog.at_level(logging.WARNING):
            prop = resolve_property("ghost", props["ghost"])

        assert isinstance(prop, PrimitiveProperty)
        assert prop.raw_type is None
        assert "Missing" in caplog.text

    def test_self_reference_raises(self):
        """Схема-ссылка сама на себя - явная ошибка"""
        props = _properties(
            {"loop": {"$ref": "#/components/schemas/Loop"}},
            extra_schemas={"Loop": {"$ref": "#/components/schemas/Loop"}},
        )

        with pytest.raises(SchemaReferenceError):
            resolve_property("loop", props["loop"])

    def test_recursive_object_is_allowed(self):
        """Обычный цикл объектов не разворачивается и не ломает разбор"""
        props = _properties(
            {"parent": {"$ref": "#/components/schemas/Owner"}},
        )

        prop = resolve_property("parent", props["parent"])

        assert isinstance(prop, ObjectRefProperty)
        assert prop.target == "Owner"


class TestNullability:
    """Порядок определения nullable"""

    def test_reference_is_nullable_by_default(self):
        prop = resolve_property("tag", {"$ref": "#/components/schemas/Tag"})

        assert prop.nullable is True

    def test_reference_with_explicit_nullable_false(self):
        """nullable: false рядом с $ref отменяет nullable ссылки"""
        props = _properties(
            {"tag": {"$ref": "#/components/schemas/Tag", "nullable": False}}
        )

        prop = resolve_property("tag", props["tag"])

        assert isinstance(prop, ObjectRefProperty)
        assert prop.nullable is False

    def test_required_overrides_reference(self):
        """required всегда делает свойство обязательным"""
        prop = resolve_property(
            "tag", {"$ref": "#/components/schemas/Tag"}, required={"tag"}
        )

        assert prop.nullable is False

    def test_required_overrides_explicit_nullable(self):
        prop = resolve_property(
            "name", {"type": "string", "nullable": True}, required={"name"}
        )

        assert prop.nullable is False

    def test_explicit_nullable(self):
        prop = resolve_property("name", {"type": "string", "nullable": True})

        assert prop.nullable is True

    def test_plain_property_is_not_nullable(self):
        """Отсутствие в required само по себе не делает свойство nullable"""
        prop = resolve_property("name", {"type": "string"})

        assert prop.nullable is False


class TestFallbacks:
    """Деградация неполных схем"""

    def test_one_of_takes_first_member(self, caplog):
        """oneOf без type - имя первой ссылки объединения"""
        node = {
            "oneOf": [
                {"$ref": "#/components/schemas/Cat"},
                {"$ref": "#/components/schemas/Dog"},
            ]
        }

        with caplog.at_level(logging.WARNING):
            prop = resolve_property("pet", node)

        assert isinstance(prop, PrimitiveProperty)
        assert prop.raw_type == "Cat"
        assert "oneOf" in caplog.text

    def test_one_of_without_references(self):
        prop = resolve_property("value", {"oneOf": [{"type": "string"}]})

        assert prop.raw_type == "unknown"

    def test_empty_schema(self):
        """Ни type, ни $ref, ни oneOf"""
        prop = resolve_property("anything", {})

        assert isinstance(prop, PrimitiveProperty)
        assert prop.raw_type is None

    def test_garbage_node(self):
        prop = resolve_property("broken", "not a schema")

        assert prop.raw_type is None


class TestFormFields:
    """Поля multipart формы"""

    def test_binary_is_file(self):
        prop = resolve_property(
            "file", {"type": "string", "format": "binary"}, form_field=True
        )

        assert prop.raw_type == "File"
        assert prop.is_form_field is True

    def test_binary_outside_form_is_string(self):
        prop = resolve_property("file", {"type": "string", "format": "binary"})

        assert prop.raw_type == "string"

    def test_array_items_are_form_fields(self):
        prop = resolve_property(
            "files",
            {"type": "array", "items": {"type": "string", "format": "binary"}},
            form_field=True,
        )

        assert prop.items.is_form_field is True
        assert prop.items.raw_type == "File"
