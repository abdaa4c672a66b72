"""
DevMatch — Declarative profile field rules.

Each entry of ``USER_FIELD_RULES`` describes one wire field: the model
attribute it maps to, how the raw value is normalised, the predicate the
normalised value must satisfy, and the message reported when it does not.
``validate_fields`` runs the same table on signup (every required field
must be present) and on updates (only the fields being touched).
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Callable, Optional

from email_validator import EmailNotValidError, validate_email

from app.errors import ValidationError

GENDERS = ("female", "male", "others")

AGE_MIN = 18
AGE_MAX = 150

PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_BYTES = 72  # bcrypt input limit
_LOWER = re.compile(r"[a-z]")
_UPPER = re.compile(r"[A-Z]")
_DIGIT = re.compile(r"[0-9]")
_SYMBOL = re.compile(r"""[-#!$@£%^&*()_+|~=`{}\[\]:";'<>?,./\\ ]""")


def _strip(value: Any) -> Any:
    return value.strip() if isinstance(value, str) else value


def _strip_lower(value: Any) -> Any:
    return value.strip().lower() if isinstance(value, str) else value


def _to_int(value: Any) -> Any:
    if isinstance(value, bool):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and value.strip().lstrip("-").isdigit():
        return int(value.strip())
    return value


def _is_str(value: Any) -> bool:
    return isinstance(value, str)


def is_valid_email(value: Any) -> bool:
    if not isinstance(value, str) or not value:
        return False
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def is_strong_password(value: Any) -> bool:
    """At least 8 chars with an ASCII lowercase, an ASCII uppercase, a digit
    and a symbol, within bcrypt's 72-byte input.  Accented letters count
    toward length only."""
    if not isinstance(value, str) or len(value) < PASSWORD_MIN_LENGTH:
        return False
    if len(value.encode("utf-8")) > PASSWORD_MAX_BYTES:
        return False
    return all(
        pattern.search(value) is not None
        for pattern in (_LOWER, _UPPER, _DIGIT, _SYMBOL)
    )


def _is_adult_age(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and AGE_MIN <= value <= AGE_MAX


@dataclass(frozen=True)
class FieldRule:
    attr: str
    check: Callable[[Any], bool]
    message: str
    normalize: Optional[Callable[[Any], Any]] = None
    required: bool = False


USER_FIELD_RULES: dict[str, FieldRule] = {
    "firstName": FieldRule(
        attr="first_name",
        normalize=_strip,
        check=lambda v: _is_str(v) and 4 <= len(v) <= 20,
        message="First name must be between 4 and 20 characters",
        required=True,
    ),
    "lastName": FieldRule(
        attr="last_name",
        normalize=_strip,
        check=lambda v: _is_str(v) and len(v) <= 50,
        message="Last name must be at most 50 characters",
    ),
    "emailId": FieldRule(
        attr="email_id",
        normalize=_strip_lower,
        check=is_valid_email,
        message="Email is not valid",
        required=True,
    ),
    "password": FieldRule(
        attr="password",
        check=is_strong_password,
        message="Password is not strong",
        required=True,
    ),
    "gender": FieldRule(
        attr="gender",
        normalize=_strip_lower,
        check=lambda v: v in GENDERS,
        message="Gender is not valid",
    ),
    "age": FieldRule(
        attr="age",
        normalize=_to_int,
        check=_is_adult_age,
        message=f"Age must be a number between {AGE_MIN} and {AGE_MAX}",
    ),
    "about": FieldRule(
        attr="about",
        check=lambda v: _is_str(v) and len(v) <= 500,
        message="About must be text of at most 500 characters",
    ),
}


def validate_fields(values: dict[str, Any], *, partial: bool) -> dict[str, Any]:
    """Normalise and check ``values`` keyed by wire field name.

    Returns the cleaned values keyed by model attribute.  Raises
    ``ValidationError`` for the first failing field in rule order, or for
    a key no rule knows about.  On signup ``None`` means absent; on a
    partial update an explicit ``None`` fails the field's rule.
    """
    unknown = [key for key in values if key not in USER_FIELD_RULES]
    if unknown:
        raise ValidationError(f"Unknown field: {unknown[0]}", field=unknown[0])

    cleaned: dict[str, Any] = {}
    for name, rule in USER_FIELD_RULES.items():
        if name not in values or (values[name] is None and not partial):
            if rule.required and not partial:
                raise ValidationError(f"{name} is required", field=name)
            continue
        value = values[name]
        if rule.normalize is not None:
            value = rule.normalize(value)
        if not rule.check(value):
            raise ValidationError(rule.message, field=name)
        cleaned[rule.attr] = value
    return cleaned
