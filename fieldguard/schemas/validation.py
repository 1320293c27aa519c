"""
POST /validate request / response schemas.

Fields are typed loosely on purpose: shape problems are reported by
FieldValidator as INVALID_VALIDATION_REQUEST rather than by FastAPI.
"""
from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from fieldguard.schemas.errors import FieldError


class ValidatePayload(BaseModel):
    """Data plus the rules to check it against."""
    model_config = ConfigDict(populate_by_name=True)

    data: Any = Field(
        default=None,
        description="Object of candidate field values.",
        examples=[{"name": "bob", "address": {"city": ""}}],
    )
    required: Any = Field(
        default=None,
        description="Ordered list of dot paths that must be present and truthy.",
        examples=[["name", "address.city"]],
    )
    optional: Any = Field(
        default=None,
        description="Dot paths exempt from required-kind errors.",
        examples=[["address.city"]],
    )
    schema_: Any = Field(
        default=None,
        alias="schema",
        description="Declarative field rules. Types and validators are referenced by name.",
        examples=[{"name": {"type": "str", "min_length": 2}, "email": {"type": "str", "validate": "email"}}],
    )


class ValidateResponse(BaseModel):
    valid: bool = Field(description="True when no errors remain after filtering.")
    errors: list[FieldError] = Field(description="Field errors in discovery order.")
