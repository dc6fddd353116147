"""Record validation and coercion driven by a form's field list.

Every field is evaluated in order and all violations are collected; callers
that only report one error take the first, which is the first offending field.

``checkbox`` fields have no empty state: an absent value coerces to ``False``
and ``required`` has no effect on them.
"""

from __future__ import annotations

import math
import re
from collections.abc import Mapping, Sequence
from datetime import date, datetime
from types import MappingProxyType
from typing import Any, Callable

from nexuserp.errors import InvalidFieldType, MissingRequiredField, RecordValidationError
from nexuserp.fields import FieldSchema, FieldType
from nexuserp.schema import FormSchema

ISO_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$", re.ASCII)
INTEGER_PATTERN = re.compile(r"^[+-]?\d+\Z", re.ASCII)
DECIMAL_PATTERN = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?\Z", re.ASCII)

# Stored record data must fit a signed 64-bit integer.
INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

TRUE_VALUES = {"1", "true", "on", "yes"}
FALSE_VALUES = {"0", "false", "off", "no", ""}

# Returned by a coercer when the field should be left out of the record.
OMIT = object()


def is_empty(value: Any) -> bool:
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()


def _check_int_range(number: int) -> int:
    if not INT64_MIN <= number <= INT64_MAX:
        raise ValueError(f"integer out of range: {number}")
    return number


def normalize_number(value: Any) -> int | float:
    if isinstance(value, bool):
        raise ValueError("booleans are not numbers")
    if isinstance(value, int):
        return _check_int_range(value)
    if isinstance(value, float):
        number = value
    elif isinstance(value, str):
        text = value.strip()
        if INTEGER_PATTERN.match(text):
            return _check_int_range(int(text))
        if not DECIMAL_PATTERN.match(text):
            raise ValueError(f"not a number: {value!r}")
        number = float(text)
    else:
        raise ValueError(f"not a number: {value!r}")
    if not math.isfinite(number):
        raise ValueError("non-finite number")
    return number


def parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    if isinstance(value, (int, float)):
        if value in (0, 1):
            return bool(value)
        raise ValueError(f"not a boolean: {value!r}")
    text = str(value).strip().lower()
    if text in TRUE_VALUES:
        return True
    if text in FALSE_VALUES:
        return False
    raise ValueError(f"not a boolean: {value!r}")


def _coerce_text(item: FieldSchema, value: Any, present: bool) -> Any:
    if not present or value is None:
        if item.required:
            raise MissingRequiredField(item.key)
        return OMIT
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        value = str(value)
    if not isinstance(value, str):
        raise InvalidFieldType(item.key, expected="text")
    if item.required and not value.strip():
        raise MissingRequiredField(item.key)
    return value


def _coerce_number(item: FieldSchema, value: Any, present: bool) -> Any:
    if not present or is_empty(value):
        if item.required:
            raise MissingRequiredField(item.key)
        return OMIT
    try:
        return normalize_number(value)
    except ValueError:
        raise InvalidFieldType(item.key, expected="number") from None


def _coerce_date(item: FieldSchema, value: Any, present: bool) -> Any:
    if not present or is_empty(value):
        if item.required:
            raise MissingRequiredField(item.key)
        return "" if present and value is not None else OMIT
    if isinstance(value, datetime):
        value = value.date()
    if isinstance(value, date):
        return value.isoformat()
    if not isinstance(value, str) or not ISO_DATE_PATTERN.match(value.strip()):
        raise InvalidFieldType(item.key, expected="date")
    text = value.strip()
    try:
        date.fromisoformat(text)
    except ValueError:
        raise InvalidFieldType(item.key, expected="date") from None
    return text


def _coerce_select(item: FieldSchema, value: Any, present: bool) -> Any:
    if not present or is_empty(value):
        if item.required:
            raise MissingRequiredField(item.key)
        return "" if present and value is not None else OMIT
    if isinstance(value, str) and value in item.options:
        return value
    choices = ", ".join(item.options)
    raise InvalidFieldType(item.key, expected=f"one_of({choices})")


def _coerce_checkbox(item: FieldSchema, value: Any, present: bool) -> Any:
    if not present:
        return False
    try:
        return parse_bool(value)
    except ValueError:
        raise InvalidFieldType(item.key, expected="boolean") from None


COERCERS: dict[FieldType, Callable[[FieldSchema, Any, bool], Any]] = {
    FieldType.TEXT: _coerce_text,
    FieldType.TEXTAREA: _coerce_text,
    FieldType.NUMBER: _coerce_number,
    FieldType.DATE: _coerce_date,
    FieldType.SELECT: _coerce_select,
    FieldType.CHECKBOX: _coerce_checkbox,
}


def coerce_record(
    fields: Sequence[FieldSchema], raw: Mapping[str, Any] | None
) -> tuple[Mapping[str, Any], list[RecordValidationError]]:
    raw = raw or {}
    data: dict[str, Any] = {}
    errors: list[RecordValidationError] = []
    known: set[str] = set()

    for item in fields:
        known.add(item.key)
        present = item.key in raw
        try:
            value = COERCERS[item.type](item, raw.get(item.key), present)
        except RecordValidationError as exc:
            errors.append(exc)
            continue
        if value is not OMIT:
            data[item.key] = value

    for key, value in raw.items():
        if key not in known:
            data[key] = value

    return MappingProxyType(data), errors


def validate_record(form: FormSchema, raw: Mapping[str, Any] | None) -> Mapping[str, Any]:
    data, errors = coerce_record(form.fields, raw)
    if errors:
        raise errors[0]
    return data
