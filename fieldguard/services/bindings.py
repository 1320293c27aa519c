"""
Built-in named validators.

Schemas sent as JSON cannot carry functions, so they reference validators by
name (`"validate": "email"`). The HTTP layer binds these names by default;
library callers pass their own mapping in ValidatorConfig.
"""
from __future__ import annotations

import re
from typing import Any

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
_SLUG_RE = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
_PHONE_RE = re.compile(r"^\+?[0-9][0-9\s\-()]{5,}$")


def is_email(value: Any) -> bool:
    return isinstance(value, str) and bool(_EMAIL_RE.match(value))


def is_slug(value: Any) -> bool:
    return isinstance(value, str) and bool(_SLUG_RE.match(value))


def is_phone(value: Any) -> bool:
    return isinstance(value, str) and bool(_PHONE_RE.match(value))


def not_blank(value: Any) -> bool:
    if isinstance(value, str) and not value.strip():
        raise ValueError("must not be blank")
    return True


DEFAULT_BINDINGS = {
    "email": is_email,
    "slug": is_slug,
    "phone": is_phone,
    "not_blank": not_blank,
}
