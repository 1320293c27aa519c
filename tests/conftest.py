"""
Shared pytest fixtures.

SQLAlchemy models here are only used as schema sources; no database is
created.
"""
import enum
from datetime import datetime

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import DateTime, Enum, Integer, String, Text, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from fieldguard.dependencies import get_field_validator
from fieldguard.main import app
from fieldguard.services.bindings import DEFAULT_BINDINGS
from fieldguard.services.validator import FieldValidator, ValidatorConfig


class Base(DeclarativeBase):
    pass


class ContactKind(str, enum.Enum):
    person = "person"
    company = "company"


class Contact(Base):
    __tablename__ = "contacts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(64), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(
        Enum("active", "archived", name="contact_status_enum"),
        nullable=False,
        default="active",
    )
    kind: Mapped[ContactKind] = mapped_column(
        Enum(ContactKind, name="contact_kind_enum"),
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )


@pytest.fixture()
def contact_model():
    return Contact


@pytest.fixture()
def validator():
    return FieldValidator(ValidatorConfig(validator_bindings=DEFAULT_BINDINGS))


@pytest.fixture()
def client():
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def strict_client():
    app.dependency_overrides[get_field_validator] = lambda: FieldValidator(
        ValidatorConfig(validator_bindings=DEFAULT_BINDINGS, fail_on_errors=True)
    )
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
