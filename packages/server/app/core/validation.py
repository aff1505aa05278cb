"""
Declarative request validation.

Each rule set is an ordered list of ``Rule(field, check, message)``. Every rule
runs, so a request gets all of its field errors back at once, in rule order.
Validation happens in a dependency, before the handler touches the store.
"""

from __future__ import annotations

from typing import Any, Callable, NamedTuple

from email_validator import EmailNotValidError, validate_email
from fastapi import Body

from app.core.errors import RequestValidationFailed

Check = Callable[[Any], bool]

_MISSING = object()


class Rule(NamedTuple):
    field: str
    check: Check
    message: str


class FieldError(NamedTuple):
    field: str
    message: str
    value: Any = None

    def to_dict(self) -> dict[str, Any]:
        # msg/path/location mirror the shape clients of the previous service parse.
        return {
            "type": "field",
            "field": self.field,
            "path": self.field,
            "location": "body",
            "value": self.value,
            "message": self.message,
            "msg": self.message,
        }


# ---------------------------------------------------------------------------
# Checks
# ---------------------------------------------------------------------------

# Text fields hold scalars; lists and objects never satisfy a text rule.
_SCALAR_TYPES = (str, int, float)


def _is_scalar(value: Any) -> bool:
    return value is _MISSING or value is None or isinstance(value, _SCALAR_TYPES)


def _as_text(value: Any) -> str:
    if value is _MISSING or value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def not_empty(value: Any) -> bool:
    return _is_scalar(value) and _as_text(value) != ""


def is_string(value: Any) -> bool:
    return isinstance(value, str)


def is_email(value: Any) -> bool:
    if not isinstance(value, str) or not value:
        return False
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def min_length(n: int) -> Check:
    def check(value: Any) -> bool:
        return _is_scalar(value) and len(_as_text(value)) >= n

    return check


def optional(inner: Check) -> Check:
    """Skip ``inner`` when the field is absent or null."""

    def check(value: Any) -> bool:
        if value is _MISSING or value is None:
            return True
        return inner(value)

    return check


# ---------------------------------------------------------------------------
# Rule sets
# ---------------------------------------------------------------------------

RULES: dict[str, list[Rule]] = {
    "register": [
        Rule("firstName", not_empty, "First name is required"),
        Rule("lastName", not_empty, "Last name is required"),
        Rule("email", is_email, "Valid email is required"),
        Rule("password", min_length(6), "Password must be at least 6 characters long"),
        Rule("phone", optional(is_string), "Phone must be a string"),
    ],
    "login": [
        Rule("email", is_email, "Valid email is required"),
        Rule("password", not_empty, "Password is required"),
    ],
    "create_organisation": [
        Rule("name", not_empty, "Organisation name is required"),
        Rule("description", optional(is_string), "Invalid value"),
    ],
    "add_member": [
        Rule("userId", not_empty, "User ID is required"),
    ],
}


def validate(rule_set: str, payload: Any) -> list[FieldError]:
    """Run every rule in ``rule_set`` against ``payload``; return all failures."""
    if not isinstance(payload, dict):
        payload = {}
    errors = []
    for rule in RULES[rule_set]:
        value = payload.get(rule.field, _MISSING)
        if not rule.check(value):
            errors.append(
                FieldError(rule.field, rule.message, None if value is _MISSING else value)
            )
    return errors


def validated_body(rule_set: str) -> Callable[..., dict[str, Any]]:
    """Dependency factory: the JSON body, or 422 with every failing field."""
    if rule_set not in RULES:
        raise KeyError(f"Unknown rule set: {rule_set}")

    async def dependency(payload: Any = Body(None)) -> dict[str, Any]:
        errors = validate(rule_set, payload)
        if errors:
            raise RequestValidationFailed([e.to_dict() for e in errors])
        return payload

    return dependency
