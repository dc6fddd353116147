"""Error taxonomy shared by the designer, the record coercer and the API.

Validation and designer errors are returned as values; they subclass
``Exception`` only so the HTTP layer can raise the first one and let a single
handler render it.
"""

from __future__ import annotations

from typing import Any


class NexusError(Exception):
    code = "error"

    def __init__(self, message: str, key: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.key = key

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.key is not None:
            payload["field"] = self.key
        return payload

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NexusError):
            return NotImplemented
        return (type(self), self.message, self.key) == (type(other), other.message, other.key)

    def __hash__(self) -> int:
        return hash((type(self), self.message, self.key))


class SchemaDefinitionError(NexusError):
    code = "schema_definition"

    @classmethod
    def missing_key(cls, index: int) -> SchemaDefinitionError:
        return cls(f"missing key (field {index + 1})")

    @classmethod
    def invalid_key(cls, key: str) -> SchemaDefinitionError:
        return cls(f"invalid key: {key}", key=key)

    @classmethod
    def duplicate_key(cls, key: str) -> SchemaDefinitionError:
        return cls(f"duplicate key: {key}", key=key)


class RecordValidationError(NexusError):
    code = "record_validation"


class MissingRequiredField(RecordValidationError):
    code = "missing_required_field"

    def __init__(self, key: str) -> None:
        super().__init__(f"{key} is required", key=key)


class InvalidFieldType(RecordValidationError):
    code = "invalid_field_type"

    def __init__(self, key: str, expected: str) -> None:
        super().__init__(f"{key} must be {expected}", key=key)
        self.expected = expected

    def to_dict(self) -> dict[str, Any]:
        payload = super().to_dict()
        payload["expected"] = self.expected
        return payload


class TransportError(NexusError):
    code = "transport"


class SessionClosedError(NexusError):
    code = "session_closed"
