"""
Validate router.

POST /validate   — check a data object against required/optional paths and a declarative schema
"""
from __future__ import annotations

from fastapi import APIRouter, Depends

from fieldguard.dependencies import RequestValidator, get_request_validator
from fieldguard.schemas.validation import ValidatePayload, ValidateResponse

router = APIRouter(prefix="/validate", tags=["validate"])


@router.post(
    "",
    response_model=ValidateResponse,
    summary="Validate a data object",
    responses={
        400: {"description": "Malformed request (non-object data, unknown type or validator name, etc.)"},
        422: {"description": "Validation failed and the validator is configured to fail on errors"},
    },
)
async def validate_payload(
    payload: ValidatePayload,
    checker: RequestValidator = Depends(get_request_validator),
):
    """
    Run the field validator over `data`.

    Required-kind errors on paths listed in `optional` are dropped. With the
    default configuration errors are returned in the body; a validator
    configured with `fail_on_errors` answers 422 with the standard envelope.
    """
    await checker.validate(
        data=payload.data,
        required=payload.required,
        optional=payload.optional,
        schema=payload.schema_,
    )
    errors = checker.request.state.field_errors
    return ValidateResponse(valid=not errors, errors=errors)
