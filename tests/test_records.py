from __future__ import annotations

from datetime import date

import pytest

from nexuserp.errors import InvalidFieldType, MissingRequiredField
from nexuserp.fields import FieldSchema, FieldType
from nexuserp.records import COERCERS, coerce_record, validate_record
from nexuserp.schema import FormSchema

LEAD_FIELDS = (
    FieldSchema(key="companyName", type="text", required=True),
    FieldSchema(key="notes", type="textarea"),
    FieldSchema(key="status", type="select", required=True, options=("New", "Contacted")),
    FieldSchema(key="potentialValue", type="number"),
    FieldSchema(key="followUp", type="date"),
    FieldSchema(key="vip", type="checkbox"),
)


def test_every_field_type_has_a_coercer():
    assert set(COERCERS) == set(FieldType)


def test_conformant_input_is_coerced():
    data, errors = coerce_record(
        LEAD_FIELDS,
        {
            "companyName": "Acme",
            "notes": "",
            "status": "New",
            "potentialValue": "1500.5",
            "followUp": "2024-03-01",
            "vip": "on",
        },
    )
    assert errors == []
    assert dict(data) == {
        "companyName": "Acme",
        "notes": "",
        "status": "New",
        "potentialValue": 1500.5,
        "followUp": "2024-03-01",
        "vip": True,
    }


def test_output_is_read_only():
    data, _ = coerce_record(LEAD_FIELDS, {"companyName": "Acme", "status": "New"})
    with pytest.raises(TypeError):
        data["companyName"] = "Other"


def test_select_rejects_unknown_option():
    fields = (FieldSchema(key="status", type="select", options=("New", "Contacted")),)
    _, errors = coerce_record(fields, {"status": "Bogus"})
    assert len(errors) == 1
    assert isinstance(errors[0], InvalidFieldType)
    assert errors[0].key == "status"
    assert errors[0].expected == "one_of(New, Contacted)"

    data, errors = coerce_record(fields, {"status": "New"})
    assert errors == []
    assert data["status"] == "New"


def test_optional_select_accepts_empty():
    fields = (FieldSchema(key="status", type="select", options=("New",)),)
    data, errors = coerce_record(fields, {"status": ""})
    assert errors == []
    assert data["status"] == ""


@pytest.mark.parametrize("required", [True, False])
def test_checkbox_absent_is_false(required):
    fields = (FieldSchema(key="agree", type="checkbox", required=required),)
    data, errors = coerce_record(fields, {})
    assert errors == []
    assert data["agree"] is False


def test_checkbox_rejects_garbage():
    fields = (FieldSchema(key="agree", type="checkbox"),)
    _, errors = coerce_record(fields, {"agree": "maybe"})
    assert errors == [InvalidFieldType("agree", expected="boolean")]


def test_required_text_rejects_empty():
    _, errors = coerce_record(LEAD_FIELDS, {"companyName": "  ", "status": "New"})
    assert errors == [MissingRequiredField("companyName")]


def test_text_accepts_numbers_as_strings():
    fields = (FieldSchema(key="code", type="text"),)
    data, errors = coerce_record(fields, {"code": 42})
    assert errors == []
    assert data["code"] == "42"


def test_text_rejects_containers():
    fields = (FieldSchema(key="code", type="text"),)
    _, errors = coerce_record(fields, {"code": ["a"]})
    assert errors == [InvalidFieldType("code", expected="text")]


@pytest.mark.parametrize("raw,expected", [("12", 12), (" 3.25 ", 3.25), (7, 7), (2.5, 2.5)])
def test_number_coercion(raw, expected):
    fields = (FieldSchema(key="qty", type="number"),)
    data, errors = coerce_record(fields, {"qty": raw})
    assert errors == []
    assert data["qty"] == expected
    assert type(data["qty"]) is type(expected)


@pytest.mark.parametrize("raw", ["abc", "nan", "inf", True, {"v": 1}])
def test_number_rejects_non_numeric(raw):
    fields = (FieldSchema(key="qty", type="number"),)
    _, errors = coerce_record(fields, {"qty": raw})
    assert errors == [InvalidFieldType("qty", expected="number")]


def test_required_number_missing():
    fields = (FieldSchema(key="qty", type="number", required=True),)
    _, errors = coerce_record(fields, {"qty": ""})
    assert errors == [MissingRequiredField("qty")]


def test_optional_fields_are_omitted_not_null():
    data, errors = coerce_record(LEAD_FIELDS, {"companyName": "Acme", "status": "New"})
    assert errors == []
    assert "notes" not in data
    assert "potentialValue" not in data
    assert "followUp" not in data
    assert data["vip"] is False


@pytest.mark.parametrize("raw", ["03/01/2024", "2024-3-1", "2024-02-30", 20240301])
def test_date_rejects_malformed(raw):
    fields = (FieldSchema(key="day", type="date"),)
    _, errors = coerce_record(fields, {"day": raw})
    assert errors == [InvalidFieldType("day", expected="date")]


def test_date_accepts_date_objects():
    fields = (FieldSchema(key="day", type="date"),)
    data, errors = coerce_record(fields, {"day": date(2024, 1, 31)})
    assert errors == []
    assert data["day"] == "2024-01-31"


def test_unknown_keys_are_preserved():
    data, errors = coerce_record(
        LEAD_FIELDS, {"companyName": "Acme", "status": "New", "legacy": {"a": 1}}
    )
    assert errors == []
    assert data["legacy"] == {"a": 1}
    assert list(data)[-1] == "legacy"


def test_all_errors_collected_in_field_order():
    _, errors = coerce_record(LEAD_FIELDS, {"status": "Bogus", "potentialValue": "x"})
    assert [type(error) for error in errors] == [
        MissingRequiredField,
        InvalidFieldType,
        InvalidFieldType,
    ]
    assert [error.key for error in errors] == ["companyName", "status", "potentialValue"]


def test_validate_record_raises_first_error():
    form = FormSchema(id=1, module_id=1, name="Leads", fields=LEAD_FIELDS)
    with pytest.raises(MissingRequiredField) as exc_info:
        validate_record(form, {"status": "Bogus"})
    assert exc_info.value.key == "companyName"
    assert exc_info.value.to_dict()["field"] == "companyName"


@pytest.mark.parametrize("raw", ["1_000", "١٢٣", "0x10", "1e", "."])
def test_number_strings_must_be_plain_ascii_decimals(raw):
    fields = (FieldSchema(key="qty", type="number"),)
    _, errors = coerce_record(fields, {"qty": raw})
    assert errors == [InvalidFieldType("qty", expected="number")]


@pytest.mark.parametrize("raw", ["123456789012345678901234567890", 2**63, -(2**63) - 1])
def test_number_rejects_integers_beyond_64_bits(raw):
    fields = (FieldSchema(key="qty", type="number"),)
    _, errors = coerce_record(fields, {"qty": raw})
    assert errors == [InvalidFieldType("qty", expected="number")]


def test_number_accepts_64_bit_bounds_and_exponents():
    fields = (FieldSchema(key="hi", type="number"), FieldSchema(key="lo", type="number"))
    data, errors = coerce_record(fields, {"hi": str(2**63 - 1), "lo": "-1.5e3"})
    assert errors == []
    assert data["hi"] == 2**63 - 1
    assert data["lo"] == -1500.0
