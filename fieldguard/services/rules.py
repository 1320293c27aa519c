"""
Declarative schema rules.

A schema maps field names to rules. A rule is either a leaf
(a mapping with a `type` key, or a bare type as shorthand) or a group
(a mapping without `type`) describing a nested object:

    {
        "name": {"type": "str", "required": True, "min_length": 2},
        "age": int,
        "email": {"type": "str", "validate": "email"},
        "address": {"city": {"type": "str"}, "zip": "str"},
    }

normalize_schema() returns a private deep copy with every leaf expanded to a
dict, every type name resolved, and every validator reference bound to a
callable. Callers' schemas are never mutated.
"""
from __future__ import annotations

import copy
from collections.abc import Callable, Mapping
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional, get_origin

from fieldguard.core.errors import ValidationConfigError

TYPE_NAMES: dict[str, Any] = {
    "str": str,
    "string": str,
    "int": int,
    "integer": int,
    "float": float,
    "number": float,
    "bool": bool,
    "boolean": bool,
    "list": list,
    "array": list,
    "dict": dict,
    "object": dict,
    "date": date,
    "datetime": datetime,
    "decimal": Decimal,
    "any": Any,
}

LEAF_KEYS = frozenset({
    "type",
    "required",
    "default",
    "min_length",
    "max_length",
    "ge",
    "gt",
    "le",
    "lt",
    "pattern",
    "choices",
    "validate",
})

LENGTH_TYPES = (str, list, tuple, set, frozenset, dict)
BOUND_TYPES = (int, float, Decimal, date)

CONSTRAINT_TYPES = {
    "min_length": LENGTH_TYPES,
    "max_length": LENGTH_TYPES,
    "pattern": (str,),
    "ge": BOUND_TYPES,
    "gt": BOUND_TYPES,
    "le": BOUND_TYPES,
    "lt": BOUND_TYPES,
}

ValidatorBindings = Mapping[str, Callable[[Any], Any]]


def resolve_type(spec: Any, path: str) -> Any:
    if isinstance(spec, str):
        try:
            return TYPE_NAMES[spec.strip().lower()]
        except KeyError:
            raise ValidationConfigError(
                f"Unknown type '{spec}' for path '{path}'. "
                f"Expected one of: {', '.join(sorted(TYPE_NAMES))}.",
                argument="schema",
            ) from None
    # Array shorthand: ["str"] is a list of str, [] a list of anything.
    if isinstance(spec, (list, tuple)):
        if not spec:
            return list
        if len(spec) == 1:
            return list[resolve_type(spec[0], f"{path}.0")]
        raise ValidationConfigError(
            f"Array type for path '{path}' must name exactly one item type.",
            argument="schema",
        )
    if spec is Any or isinstance(spec, type) or get_origin(spec) is not None:
        return spec
    raise ValidationConfigError(
        f"Invalid type declaration for path '{path}'.", argument="schema"
    )


def _check_constraints(leaf: dict, path: str) -> None:
    """Reject constraint keys that cannot apply to the declared type."""
    base = get_origin(leaf["type"]) or leaf["type"]
    for key, allowed in CONSTRAINT_TYPES.items():
        if leaf.get(key) is None:
            continue
        if not (isinstance(base, type) and issubclass(base, allowed)):
            raise ValidationConfigError(
                f"Constraint '{key}' does not apply to the type of path '{path}'.",
                argument="schema",
            )


def _bind(ref: Any, path: str, bindings: ValidatorBindings) -> Callable[[Any], Any]:
    if isinstance(ref, str):
        try:
            return bindings[ref]
        except KeyError:
            raise ValidationConfigError(
                f"No validator bound to name '{ref}' (path '{path}').",
                argument="validator_bindings",
            ) from None
    if callable(ref):
        return ref
    raise ValidationConfigError(
        f"Validator for path '{path}' must be a callable or a bound name.",
        argument="schema",
    )


def resolve_validators(spec: Any, path: str, bindings: ValidatorBindings) -> list[dict]:
    """Expand a `validate` declaration into [{"validator": fn, "message": str | None}]."""
    items = spec if isinstance(spec, (list, tuple)) else [spec]
    resolved = []
    for item in items:
        if isinstance(item, Mapping):
            if "validator" not in item:
                raise ValidationConfigError(
                    f"Validator mapping for path '{path}' needs a 'validator' key.",
                    argument="schema",
                )
            resolved.append({
                "validator": _bind(item["validator"], path, bindings),
                "message": item.get("message"),
            })
        else:
            resolved.append({"validator": _bind(item, path, bindings), "message": None})
    return resolved


def _normalize_leaf(rule: Any, path: str, bindings: ValidatorBindings) -> dict:
    leaf = dict(rule) if isinstance(rule, Mapping) else {"type": rule}

    unknown = set(leaf) - LEAF_KEYS
    if unknown:
        raise ValidationConfigError(
            f"Unknown rule keys for path '{path}': {', '.join(sorted(unknown))}.",
            argument="schema",
        )

    leaf["type"] = resolve_type(leaf["type"], path)
    leaf["required"] = bool(leaf.get("required", False))

    if "choices" in leaf and not isinstance(leaf["choices"], (list, tuple)):
        raise ValidationConfigError(
            f"'choices' for path '{path}' must be a list.", argument="schema"
        )
    _check_constraints(leaf, path)
    if "validate" in leaf:
        leaf["validate"] = resolve_validators(leaf["validate"], path, bindings)
    return leaf


def _normalize_group(group: Mapping[str, Any], prefix: str, bindings: ValidatorBindings) -> dict:
    normalized: dict[str, Any] = {}
    for key, rule in group.items():
        if not isinstance(key, str) or not key:
            raise ValidationConfigError(
                f"Schema keys must be non-empty strings (under '{prefix or '<root>'}').",
                argument="schema",
            )
        path = f"{prefix}.{key}" if prefix else key
        if isinstance(rule, Mapping) and "type" not in rule:
            normalized[key] = _normalize_group(rule, path, bindings)
        else:
            normalized[key] = _normalize_leaf(rule, path, bindings)
    return normalized


def normalize_schema(
    schema: Mapping[str, Any],
    bindings: Optional[ValidatorBindings] = None,
) -> dict:
    if not isinstance(schema, Mapping):
        raise ValidationConfigError("schema must be a mapping", argument="schema")
    return _normalize_group(copy.deepcopy(dict(schema)), "", bindings or {})


def make_required(rule: dict) -> None:
    """Mark a leaf rule required and drop its default, in place."""
    rule.pop("default", None)
    rule["required"] = True
