"""
Unit tests for the declarative request validator.
"""

import pytest

from app.core.validation import (
    RULES,
    is_email,
    is_string,
    min_length,
    not_empty,
    optional,
    validate,
    validated_body,
)


class TestChecks:
    def test_not_empty(self):
        assert not_empty("x")
        assert not_empty(0)
        assert not_empty(False)
        assert not not_empty("")
        assert not not_empty(None)

    def test_is_string(self):
        assert is_string("")
        assert not is_string(12)

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("john.doe@example.com", True),
            ("john.doe@localhost", False),
            ("no-at-sign", False),
            ("", False),
            (None, False),
            (42, False),
        ],
    )
    def test_is_email(self, value, expected):
        assert is_email(value) is expected

    def test_min_length(self):
        check = min_length(6)
        assert check("123456")
        assert not check("12345")
        assert check(1234567)  # numbers are measured as text

    @pytest.mark.parametrize("value", [["John"], {"a": "bbbbbbbb"}, [], {}])
    def test_lists_and_objects_are_not_text(self, value):
        assert not not_empty(value)
        assert not min_length(1)(value)
        assert not is_email(value)
        assert not optional(is_string)(value)

    def test_optional_skips_absent_and_null(self):
        check = optional(is_string)
        assert check(None)
        assert check("text")
        assert not check(5)


class TestValidate:
    def test_valid_payload(self):
        payload = {
            "firstName": "John",
            "lastName": "Doe",
            "email": "john.doe@example.com",
            "password": "password",
        }
        assert validate("register", payload) == []

    def test_errors_follow_rule_order(self):
        errors = validate("register", {"password": "123"})
        assert [e.field for e in errors] == ["firstName", "lastName", "email", "password"]
        assert errors[3].value == "123"
        assert errors[0].value is None

    def test_non_object_payload(self):
        errors = validate("login", ["email", "password"])
        assert [e.message for e in errors] == ["Valid email is required", "Password is required"]

    def test_error_dict_shape(self):
        (error,) = validate("add_member", {})
        assert error.to_dict() == {
            "type": "field",
            "field": "userId",
            "path": "userId",
            "location": "body",
            "value": None,
            "message": "User ID is required",
            "msg": "User ID is required",
        }

    def test_phone_must_be_text(self):
        errors = validate(
            "register",
            {
                "firstName": "John",
                "lastName": "Doe",
                "email": "john.doe@example.com",
                "password": "password",
                "phone": 1234567890,
            },
        )
        assert [e.message for e in errors] == ["Phone must be a string"]

    def test_every_rule_set_is_known(self):
        assert set(RULES) == {"register", "login", "create_organisation", "add_member"}

    def test_unknown_rule_set(self):
        with pytest.raises(KeyError):
            validated_body("delete_everything")


@pytest.mark.parametrize(
    "rule_set,payload,field",
    [
        ("register", {"firstName": ["John"], "lastName": "Doe",
                      "email": "john.doe@example.com", "password": "password"}, "firstName"),
        ("login", {"email": "john.doe@example.com", "password": ["password"]}, "password"),
        ("create_organisation", {"name": {"x": "Acme"}}, "name"),
        ("add_member", {"userId": {"id": "x"}}, "userId"),
    ],
)
def test_non_scalar_field_fails_its_rule(rule_set, payload, field):
    errors = validate(rule_set, payload)
    assert [e.field for e in errors] == [field]
    assert errors[0].value == payload[field]
