from __future__ import annotations

import secrets
from collections.abc import Iterable
from typing import Any

import orjson

from nexuserp.config import KEY_PATTERN


def dumps_json(value: Any) -> str:
    return orjson.dumps(value).decode("utf-8")


def loads_json(value: str | bytes | None) -> Any:
    if not value:
        return None
    return orjson.loads(value)


def generate_field_key(existing: Iterable[str]) -> str:
    taken = set(existing)
    while True:
        candidate = f"field_{secrets.token_hex(4)}"
        if candidate not in taken and KEY_PATTERN.match(candidate):
            return candidate
