from fieldguard.core.errors import FieldGuardException, FieldValidationError, ValidationConfigError
from fieldguard.schemas.errors import ErrorKind, FieldError
from fieldguard.services.schema_engine import PydanticSchemaEngine, SchemaEngine
from fieldguard.services.validator import (
    FieldValidator,
    ValidationRequest,
    ValidatorConfig,
    envelope_formatter,
    filter_optional,
)

__all__ = [
    "FieldGuardException",
    "FieldValidationError",
    "ValidationConfigError",
    "ErrorKind",
    "FieldError",
    "PydanticSchemaEngine",
    "SchemaEngine",
    "FieldValidator",
    "ValidationRequest",
    "ValidatorConfig",
    "envelope_formatter",
    "filter_optional",
]
