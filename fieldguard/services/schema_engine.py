"""
Schema engines.

An engine takes a normalized schema (see services/rules.py) and a data
mapping and reports a list of FieldError. FieldValidator accepts any object
that satisfies SchemaEngine; the result may be returned directly or as an
awaitable.

PydanticSchemaEngine builds a throwaway pydantic model per call with
create_model(). Nothing is registered globally, so concurrent calls are
independent.
"""
from __future__ import annotations

from collections.abc import Awaitable, Mapping
from typing import Annotated, Any, Optional, Protocol, Union

from pydantic import (
    AfterValidator,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    ValidationError,
    create_model,
)
from pydantic_core import PydanticCustomError

from fieldguard.core.errors import ValidationConfigError
from fieldguard.core.logging import get_logger
from fieldguard.schemas.errors import ErrorKind, FieldError, required_message
from fieldguard.services.paths import is_leaf_rule

logger = get_logger(__name__)

CONSTRAINT_KEYS = ("min_length", "max_length", "ge", "gt", "le", "lt", "pattern")

# pydantic error types that mean "a declared constraint was violated"
# rather than "the value has the wrong type".
CONSTRAINT_ERROR_TYPES = frozenset({
    "string_too_short",
    "string_too_long",
    "too_short",
    "too_long",
    "greater_than",
    "greater_than_equal",
    "less_than",
    "less_than_equal",
    "string_pattern_mismatch",
    "literal_error",
    "enum",
    "choices",
})


class SchemaEngine(Protocol):
    def validate_against_schema(
        self, schema: Mapping[str, Any], data: Mapping[str, Any]
    ) -> Union[list[FieldError], Awaitable[list[FieldError]]]:
        ...


# ---------------------------------------------------------------------------
# Field-level hooks
# ---------------------------------------------------------------------------

def _custom_error(message: str) -> PydanticCustomError:
    return PydanticCustomError("custom", "{message}", {"message": message})


def _reject_empty(path: str):
    def check(value: Any) -> Any:
        if value is None or value == "":
            raise PydanticCustomError("required", "{message}", {"message": required_message(path)})
        return value
    return check


def _custom_validator(path: str, validator, message: Optional[str]):
    def check(value: Any) -> Any:
        if value is None:
            return value
        try:
            ok = validator(value)
        except ValueError as exc:
            raise _custom_error(str(exc)) from exc
        if not ok:
            raise _custom_error(
                message or f"Validator failed for path '{path}' with value '{value}'"
            )
        return value
    return check


def _one_of(choices: list):
    def check(value: Any) -> Any:
        if value is not None and value not in choices:
            allowed = ", ".join(repr(c) for c in choices)
            raise PydanticCustomError("choices", "{message}", {"message": f"Input should be one of {allowed}"})
        return value
    return check


def _none_to_empty(value: Any) -> Any:
    return {} if value is None else value


# ---------------------------------------------------------------------------
# Model building
# ---------------------------------------------------------------------------

def _leaf_field(rule: dict, key: str, path: str) -> tuple[Any, Any]:
    inner: Any = rule["type"]

    metadata: list[Any] = []
    constraints = {k: rule[k] for k in CONSTRAINT_KEYS if rule.get(k) is not None}
    if constraints:
        metadata.append(Field(**constraints))
    if rule.get("choices"):
        metadata.append(AfterValidator(_one_of(list(rule["choices"]))))
    for spec in rule.get("validate", []):
        validator = spec["validator"]
        if not callable(validator):
            raise ValidationConfigError(
                f"Unresolved validator reference for path '{path}'.",
                argument="schema",
            )
        metadata.append(AfterValidator(_custom_validator(path, validator, spec.get("message"))))
    if metadata:
        inner = Annotated[(inner, *metadata)]

    if rule.get("required"):
        annotation = Annotated[inner, BeforeValidator(_reject_empty(path))]
        return annotation, Field(..., alias=key)
    return Optional[inner], Field(default=rule.get("default"), alias=key)


def build_model(schema: Mapping[str, Any], name: str = "FieldGuardSchema") -> type[BaseModel]:
    """Build an anonymous pydantic model from a normalized schema."""
    try:
        return _build_model(schema, name, "")
    except ValidationConfigError:
        raise
    except TypeError as exc:
        # PydanticSchemaGenerationError and PydanticUserError are TypeErrors too.
        raise ValidationConfigError(f"Schema cannot be built: {exc}", argument="schema") from exc


def _build_model(schema: Mapping[str, Any], name: str, prefix: str) -> type[BaseModel]:
    fields: dict[str, Any] = {}
    for index, (key, rule) in enumerate(schema.items()):
        path = f"{prefix}.{key}" if prefix else key
        # Data keys need not be identifiers; the alias carries the real key.
        attr = f"field_{index}"
        if is_leaf_rule(rule):
            fields[attr] = _leaf_field(rule, key, path)
        else:
            nested = _build_model(rule, f"{name}_{index}", path)
            fields[attr] = (
                Annotated[nested, BeforeValidator(_none_to_empty)],
                Field(default_factory=dict, alias=key, validate_default=True),
            )
    return create_model(name, __config__=ConfigDict(extra="ignore"), **fields)


# ---------------------------------------------------------------------------
# Error mapping
# ---------------------------------------------------------------------------

def field_error_from_pydantic(error: dict[str, Any]) -> FieldError:
    path = ".".join(str(loc) for loc in error["loc"])
    error_type = error["type"]

    if error_type in ("missing", "required"):
        value = None if error_type == "missing" else error.get("input")
        return FieldError.required(path, value)
    if error_type == "custom":
        return FieldError(path=path, message=error["msg"], kind=ErrorKind.custom, value=error.get("input"))

    kind = ErrorKind.constraint if error_type in CONSTRAINT_ERROR_TYPES else ErrorKind.type
    return FieldError(
        path=path,
        message=f"Path '{path}': {error['msg']}.",
        kind=kind,
        value=error.get("input"),
    )


class PydanticSchemaEngine:
    """Validates data against a normalized declarative schema using pydantic."""

    def validate_against_schema(
        self, schema: Mapping[str, Any], data: Mapping[str, Any]
    ) -> list[FieldError]:
        model = build_model(schema)
        try:
            model.model_validate(data)
        except ValidationError as exc:
            errors = [field_error_from_pydantic(e) for e in exc.errors()]
            logger.debug("Schema validation failed", fields=len(schema), errors=len(errors))
            return errors
        return []
