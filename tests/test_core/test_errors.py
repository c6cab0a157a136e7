"""
Tests for the error taxonomy.
"""

import pytest

from demo_db import Person
from ormadmin.core.errors import (
    AccessDeniedError,
    AdminError,
    ConfigurationError,
    InvalidComponentError,
    MissingPrimaryKeyError,
    NotFoundError,
    PolicyNotFoundError,
    UnknownPropertyError,
    UnknownRecordTypeError,
    ValidationError,
)


class TestErrorCodes:
    @pytest.mark.parametrize(
        ("error", "code"),
        [
            (ConfigurationError("bad"), "CONFIGURATION_ERROR"),
            (UnknownRecordTypeError(Person), "UNKNOWN_RECORD_TYPE"),
            (MissingPrimaryKeyError(Person), "MISSING_PRIMARY_KEY"),
            (UnknownPropertyError("nope", Person), "UNKNOWN_PROPERTY"),
            (InvalidComponentError(int, "PropertyDisplayComponent"), "INVALID_COMPONENT"),
            (PolicyNotFoundError("DemoDb/Info"), "POLICY_NOT_FOUND"),
            (AccessDeniedError("DemoDb/Info"), "ACCESS_DENIED"),
            (ValidationError("bad value", field="age"), "VALIDATION_ERROR"),
            (NotFoundError(Person, 9), "NOT_FOUND"),
        ],
    )
    def test_code(self, error, code):
        assert isinstance(error, AdminError)
        assert error.code == code
        assert error.to_dict()["code"] == code

    def test_configuration_subclasses(self):
        assert isinstance(UnknownPropertyError("nope", Person), ConfigurationError)
        assert isinstance(InvalidComponentError(int, "X"), ConfigurationError)


class TestErrorDetails:
    def test_unknown_property_details(self):
        error = UnknownPropertyError("nope", Person, known=["id", "name"])
        assert error.details == {"property": "nope", "record_type": "Person", "known": ["id", "name"]}
        assert "nope" in str(error)

    def test_not_found_message(self):
        error = NotFoundError(Person, 9)
        assert error.message == "Record not found: Person with key '9'"
        assert error.details["key"] == 9

    def test_validation_error_without_field(self):
        assert ValidationError("bad").details == {}

    def test_invalid_component_reason(self):
        error = InvalidComponentError(int, "EntityDisplayComponent", reason="wrong type")
        assert "int" in error.message
        assert "wrong type" in error.message

    def test_to_dict(self):
        error = AccessDeniedError("DemoDb/Person/Delete", user_id="u-1")
        assert error.to_dict() == {
            "code": "ACCESS_DENIED",
            "message": "Access denied for policy 'DemoDb/Person/Delete'",
            "details": {"identity": "DemoDb/Person/Delete", "user_id": "u-1"},
        }
