"""
FastAPI dependencies.

    @router.post("/things")
    async def create(payload: dict, checker: RequestValidator = Depends(get_request_validator)):
        await checker.validate(data=payload, required=["name"])
        ...

The errors of the last validate() call are kept on `request.state.field_errors`,
also when the validator is configured to raise.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Any

from fastapi import Depends, Request

from fieldguard.services.bindings import DEFAULT_BINDINGS
from fieldguard.services.validator import FieldValidator, ValidationRequest, ValidatorConfig


@lru_cache
def get_field_validator() -> FieldValidator:
    return FieldValidator(ValidatorConfig(validator_bindings=DEFAULT_BINDINGS))


class RequestValidator:
    """A FieldValidator bound to one request."""

    def __init__(self, request: Request, validator: FieldValidator):
        self.request = request
        self.validator = validator

    async def validate(
        self,
        *,
        data: Any = None,
        required: Any = None,
        optional: Any = None,
        schema: Any = None,
        model: Any = None,
    ) -> Any:
        errors = await self.validator.collect(ValidationRequest(
            data=data,
            required_paths=required,
            optional_paths=optional,
            schema=schema,
            model=model,
        ))
        self.request.state.field_errors = errors
        return self.validator.finish(errors)


def get_request_validator(
    request: Request,
    validator: FieldValidator = Depends(get_field_validator),
) -> RequestValidator:
    request.state.field_errors = []
    return RequestValidator(request, validator)
