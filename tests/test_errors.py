"""
Tests for error handling: the exception classes, FieldError serialization
and the structured error envelope.
"""
from fieldguard.core.errors import (
    FieldValidationError,
    ValidationConfigError,
    field_error_from_request_error,
)
from fieldguard.schemas.errors import ErrorKind, FieldError


# ---------------------------------------------------------------------------
# Unit tests on exception classes
# ---------------------------------------------------------------------------

class TestExceptionClasses:
    def test_validation_config_error(self):
        err = ValidationConfigError("data must be a mapping", argument="data")
        assert err.http_status == 400
        assert err.code == "INVALID_VALIDATION_REQUEST"
        assert isinstance(err, TypeError)
        d = err.to_dict()
        assert d["message"] == "data must be a mapping"
        assert d["details"]["argument"] == "data"

    def test_validation_config_error_without_argument(self):
        d = ValidationConfigError("bad").to_dict()
        assert "details" not in d

    def test_field_validation_error(self):
        err = FieldValidationError([FieldError.required("name")])
        assert err.http_status == 422
        assert err.code == "VALIDATION_ERROR"
        d = err.to_dict()
        assert d["details"]["errors"] == [{
            "path": "name",
            "message": "Path 'name' is required.",
            "kind": "required",
            "value": None,
            "name": "ValidatorError",
        }]


class TestFieldError:
    def test_required_factory(self):
        err = FieldError.required("address.city", "")
        assert err.kind == ErrorKind.required
        assert err.kind == "required"
        assert err.message == "Path 'address.city' is required."
        assert err.value == ""

    def test_unserializable_value_falls_back_to_repr(self):
        class Opaque:
            def __repr__(self):
                return "<Opaque>"

        err = FieldError(path="x", message="bad", kind=ErrorKind.type, value=Opaque())
        assert err.model_dump(mode="json")["value"] == "<Opaque>"


class TestRequestErrorMapping:
    def test_missing_body_field(self):
        err = field_error_from_request_error({"loc": ("body", "data"), "msg": "Field required", "type": "missing"})
        assert err.path == "data"
        assert err.kind == ErrorKind.required

    def test_type_error(self):
        err = field_error_from_request_error({
            "loc": ("query", "limit"),
            "msg": "Input should be a valid integer",
            "type": "int_parsing",
            "input": "ten",
        })
        assert err.path == "query.limit"
        assert err.kind == ErrorKind.type
        assert err.value == "ten"
