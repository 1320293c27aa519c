"""
Derive a declarative schema from a SQLAlchemy declarative model.

Each mapped column becomes a leaf rule:
    type        ← column.type.python_type (falls back to Any)
    required    ← NOT NULL with no default, no server default, not an autoincrement PK
    default     ← scalar column default
    max_length  ← String(length)
    choices     ← string Enum values
"""
from __future__ import annotations

from typing import Any, Optional

from sqlalchemy import Column, Enum, Integer, String, inspect
from sqlalchemy.orm import Mapper

from fieldguard.core.errors import ValidationConfigError


def is_mapped_class(obj: Any) -> bool:
    return isinstance(obj, type) and isinstance(inspect(obj, raiseerr=False), Mapper)


def _python_type(column: Column) -> Any:
    try:
        return column.type.python_type
    except NotImplementedError:
        return Any


def _is_autoincrement_pk(column: Column) -> bool:
    if not column.primary_key:
        return False
    if column.autoincrement is True:
        return True
    return column.autoincrement == "auto" and isinstance(column.type, Integer)


def _scalar_default(column: Column) -> Optional[Any]:
    default = column.default
    if default is not None and getattr(default, "is_scalar", False):
        return default.arg
    return None


def column_rule(column: Column) -> dict:
    rule: dict[str, Any] = {"type": _python_type(column)}

    if isinstance(column.type, Enum):
        if column.type.enum_class is None:
            rule["type"] = str
            rule["choices"] = list(column.type.enums)
    elif isinstance(column.type, String) and column.type.length:
        rule["max_length"] = column.type.length

    has_default = column.default is not None or column.server_default is not None
    rule["required"] = not (column.nullable or has_default or _is_autoincrement_pk(column))

    default = _scalar_default(column)
    if default is not None:
        rule["default"] = default
    return rule


def schema_from_model(model: type) -> dict:
    """Build a declarative schema dict from a mapped class, keyed by attribute name."""
    if not is_mapped_class(model):
        raise ValidationConfigError(
            "model must be a SQLAlchemy declarative class", argument="model"
        )
    mapper = inspect(model)
    schema: dict[str, Any] = {}
    for attr in mapper.column_attrs:
        schema[attr.key] = column_rule(attr.columns[0])
    return schema
