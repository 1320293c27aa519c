"""
FieldValidator: merges schema-driven errors with required-path presence checks.

Public API
----------
FieldValidator(config).validate(request)              → list[FieldError] | formatted | raises  (async)
FieldValidator(config).collect(request)               → list[FieldError]  (async, never raises on errors)
FieldValidator(config).validate(data=..., required=..., optional=..., schema=..., model=...)
filter_optional(errors, optional_paths)               → list[FieldError]
envelope_formatter(errors)                           → {"errors": [...]}  (opt-in result_formatter)

Flow per call
-------------
1. check argument shapes            → ValidationConfigError on anything malformed
2. required paths found in a schema → rule marked required on a private copy
3. each schema (model, then custom) → SchemaEngine
4. leftover required paths          → presence check against data
5. concat (engine errors first), drop required-kind errors on optional paths
6. return / format / raise per ValidatorConfig
"""
from __future__ import annotations

import inspect
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

from fieldguard.core.config import settings
from fieldguard.core.errors import FieldValidationError, ValidationConfigError
from fieldguard.core.logging import get_logger
from fieldguard.schemas.errors import ErrorKind, FieldError
from fieldguard.services.model_schema import is_mapped_class, schema_from_model
from fieldguard.services.paths import find_rule, get_path
from fieldguard.services.rules import make_required, normalize_schema
from fieldguard.services.schema_engine import PydanticSchemaEngine, SchemaEngine

logger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Request / config types
# ---------------------------------------------------------------------------

@dataclass
class ValidationRequest:
    """
    data            candidate values, addressed by dot paths
    required_paths  paths that must be truthy
    optional_paths  paths exempt from required-kind errors
    schema          custom declarative schema
    model           primary schema: a SQLAlchemy mapped class or a declarative schema
    """
    data: Any = None
    required_paths: Any = None
    optional_paths: Any = None
    schema: Any = None
    model: Any = None


@dataclass
class ValidatorConfig:
    validator_bindings: Mapping[str, Callable[[Any], Any]] = field(default_factory=dict)
    result_formatter: Optional[Callable[[list[FieldError]], Any]] = None
    fail_on_errors: Optional[bool] = None
    engine: SchemaEngine = field(default_factory=PydanticSchemaEngine)

    def __post_init__(self) -> None:
        if self.fail_on_errors is None:
            self.fail_on_errors = settings.FIELDGUARD_FAIL_ON_ERRORS
        if not isinstance(self.validator_bindings, Mapping):
            raise ValidationConfigError(
                "validator_bindings must be a mapping of name → callable",
                argument="validator_bindings",
            )
        for name, fn in self.validator_bindings.items():
            if not callable(fn):
                raise ValidationConfigError(
                    f"Validator binding '{name}' is not callable",
                    argument="validator_bindings",
                )
        if self.result_formatter is not None and not callable(self.result_formatter):
            raise ValidationConfigError(
                "result_formatter must be callable", argument="result_formatter"
            )


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def envelope_formatter(errors: list[FieldError]) -> dict:
    """Wrap errors as {"errors": [...]}. Opt-in; pass as ValidatorConfig.result_formatter."""
    return {"errors": errors}


def filter_optional(errors: Iterable[FieldError], optional_paths: Iterable[str]) -> list[FieldError]:
    """Drop required-kind errors on exempted paths. Idempotent."""
    exempt = set(optional_paths)
    return [
        e for e in errors
        if not (e.path in exempt and e.kind == ErrorKind.required)
    ]


def _path_list(value: Any, argument: str, ordered: bool) -> list[str]:
    if value is None:
        return []
    accepted = (list, tuple) if ordered else (list, tuple, set, frozenset)
    if not isinstance(value, accepted):
        kind = "a list" if ordered else "a list or set"
        raise ValidationConfigError(f"{argument} must be {kind} of paths", argument=argument)
    paths = list(value)
    if not all(isinstance(p, str) for p in paths):
        raise ValidationConfigError(f"{argument} must contain only strings", argument=argument)
    return paths


def _check_request(request: ValidationRequest) -> tuple[Mapping, list[str], list[str]]:
    data = {} if request.data is None else request.data
    if not isinstance(data, Mapping):
        raise ValidationConfigError("data must be a mapping", argument="data")

    required = _path_list(request.required_paths, "required_paths", ordered=True)
    optional = _path_list(request.optional_paths, "optional_paths", ordered=False)

    if request.schema is not None and not isinstance(request.schema, Mapping):
        raise ValidationConfigError("schema must be a mapping", argument="schema")
    if request.model is not None and not (
        isinstance(request.model, Mapping) or is_mapped_class(request.model)
    ):
        raise ValidationConfigError(
            "model must be a SQLAlchemy declarative class or a schema mapping",
            argument="model",
        )
    return data, required, optional


# ---------------------------------------------------------------------------
# Validator
# ---------------------------------------------------------------------------

class FieldValidator:
    def __init__(self, config: Optional[ValidatorConfig] = None):
        self.config = config or ValidatorConfig()

    async def validate(
        self,
        request: Optional[ValidationRequest] = None,
        *,
        data: Any = None,
        required: Any = None,
        optional: Any = None,
        schema: Any = None,
        model: Any = None,
    ) -> Any:
        """Collect errors, then return, format or raise them per config."""
        if request is None:
            request = ValidationRequest(
                data=data,
                required_paths=required,
                optional_paths=optional,
                schema=schema,
                model=model,
            )
        return self.finish(await self.collect(request))

    async def collect(self, request: ValidationRequest) -> list[FieldError]:
        """Run the validation steps and return the filtered errors. Does not raise on a non-empty result."""
        data, pending, optional_paths = _check_request(request)

        schemas = self._prepare_schemas(request)
        pending = self._claim_required(pending, schemas)

        errors: list[FieldError] = []
        for prepared in schemas:
            errors.extend(await self._submit(prepared, data))

        for path in pending:
            value = get_path(data, path)
            if not value:
                errors.append(FieldError.required(path, value))

        result = filter_optional(errors, optional_paths)
        logger.debug(
            "Field validation finished",
            schemas=len(schemas),
            presence_checks=len(pending),
            errors=len(result),
            suppressed=len(errors) - len(result),
        )
        return result

    # ------------------------------------------------------------------

    def _prepare_schemas(self, request: ValidationRequest) -> list[dict]:
        """Private normalized copies: primary model schema first, then custom schema."""
        bindings = self.config.validator_bindings
        schemas = []
        if request.model is not None:
            source = request.model if isinstance(request.model, Mapping) else schema_from_model(request.model)
            schemas.append(normalize_schema(source, bindings))
        if request.schema is not None:
            schemas.append(normalize_schema(request.schema, bindings))
        return schemas

    @staticmethod
    def _claim_required(required: list[str], schemas: list[dict]) -> list[str]:
        """Mark schema-known required paths in place; return the ones no schema knows."""
        pending = []
        for path in required:
            for prepared in schemas:
                rule = find_rule(prepared, path)
                if rule is not None:
                    make_required(rule)
                    break
            else:
                pending.append(path)
        return pending

    async def _submit(self, schema: dict, data: Mapping) -> list[FieldError]:
        result = self.config.engine.validate_against_schema(schema, data)
        if inspect.isawaitable(result):
            result = await result
        return list(result or [])

    def finish(self, errors: list[FieldError]) -> Any:
        if not errors:
            return []

        formatter = self.config.result_formatter
        formatted = formatter(errors) if formatter else errors

        if self.config.fail_on_errors:
            if isinstance(formatted, BaseException):
                raise formatted
            raise FieldValidationError(errors, payload=formatted)
        return formatted
