"""
Field-level error model shared by the validator, the schema engines
and the HTTP error envelope.
"""
from __future__ import annotations

import enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer
from pydantic_core import to_jsonable_python


class ErrorKind(str, enum.Enum):
    required = "required"
    custom = "custom"
    type = "type"
    constraint = "constraint"


def required_message(path: str) -> str:
    return f"Path '{path}' is required."


class FieldError(BaseModel):
    """A single field-level validation error."""
    model_config = ConfigDict(use_enum_values=True)

    path: str = Field(description="Dot-delimited path of the offending field.")
    message: str = Field(description="Human-readable description of the failure.")
    kind: ErrorKind = Field(description="Error classification.")
    value: Any = Field(default=None, description="The offending value, if any.")
    name: str = Field(default="ValidatorError")

    @field_serializer("value", when_used="json")
    def _serialize_value(self, value: Any) -> Any:
        return to_jsonable_python(value, fallback=repr)

    @classmethod
    def required(cls, path: str, value: Any = None) -> "FieldError":
        return cls(
            path=path,
            message=required_message(path),
            kind=ErrorKind.required,
            value=value,
        )


class ErrorResponse(BaseModel):
    """Standard error envelope returned for all 4xx/5xx responses."""
    model_config = ConfigDict(from_attributes=True)

    code: str
    message: str
    details: Optional[dict[str, Any]] = None
