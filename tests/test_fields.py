from __future__ import annotations

import pytest

from nexuserp.errors import SchemaDefinitionError
from nexuserp.fields import FieldSchema, FieldType, parse_fields, validate_definition
from nexuserp.utils import generate_field_key


def test_field_type_is_the_closed_set_of_six():
    assert {item.value for item in FieldType} == {
        "text",
        "number",
        "checkbox",
        "select",
        "date",
        "textarea",
    }


def test_unique_keys_validate():
    fields = [FieldSchema(key="a"), FieldSchema(key="b"), FieldSchema(key="c")]
    assert validate_definition(fields) == []


def test_duplicate_key_is_named():
    fields = [FieldSchema(key="a"), FieldSchema(key="b"), FieldSchema(key="a")]
    errors = validate_definition(fields)
    assert len(errors) == 1
    assert isinstance(errors[0], SchemaDefinitionError)
    assert errors[0].key == "a"
    assert "duplicate key" in errors[0].message


def test_missing_key_is_reported():
    errors = validate_definition([FieldSchema(key="  ")])
    assert len(errors) == 1
    assert "missing key" in errors[0].message


def test_options_stripped_for_non_select():
    field = FieldSchema(key="name", type=FieldType.TEXT, options=("a", "b"))
    assert field.options == ()
    assert "options" not in field.to_dict()


def test_select_keeps_ordered_options():
    field = FieldSchema(key="status", type="select", options=[" New ", "Contacted", ""])
    assert field.type is FieldType.SELECT
    assert field.options == ("New", "Contacted")
    assert field.to_dict()["options"] == ["New", "Contacted"]


def test_invalid_type_is_rejected():
    with pytest.raises(ValueError):
        FieldSchema(key="x", type="color")


def test_parse_fields_collects_problems():
    fields, errors = parse_fields(
        [
            {"key": "a", "label": "A", "type": "number", "required": True},
            {"key": "b", "type": "color"},
            "nope",
        ]
    )
    assert [item.key for item in fields] == ["a"]
    assert fields[0].type is FieldType.NUMBER
    assert fields[0].required is True
    assert errors == ["field 2: invalid type (color)", "field 3: expected an object"]


def test_generate_field_key_avoids_existing():
    existing = {generate_field_key([]) for _ in range(20)}
    key = generate_field_key(existing)
    assert key not in existing
    assert key.startswith("field_")


@pytest.mark.parametrize("key", ["first name", "{{a}}", "1st", "a-b"])
def test_key_that_cannot_be_a_placeholder_is_reported(key):
    errors = validate_definition([FieldSchema(key=key)])
    assert errors == [SchemaDefinitionError.invalid_key(key)]
    assert errors[0].key == key


def test_from_dict_keeps_key_and_label_verbatim():
    field = FieldSchema.from_dict({"key": "firstName", "label": " First Name ", "type": "text"})
    assert field.key == "firstName"
    assert field.label == " First Name "
