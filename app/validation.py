"""
Explicit validation for user payloads.

``validate_user`` runs every field rule and returns a mapping of field name
to the list of messages for that field; an empty mapping means the payload
is valid.  The router calls it after FastAPI has parsed the request body, so
only field-level rules live here (type and JSON errors are reported by the
``RequestValidationError`` handler in ``app.errors``).

``calculate_age`` is the single source of the year arithmetic used both by
the minimum-age rule and by the ``age`` value shown in responses.
"""
from __future__ import annotations

import re
from datetime import date
from typing import TYPE_CHECKING

from email_validator import EmailNotValidError, validate_email

from app.config import settings

if TYPE_CHECKING:
    from app.schemas import UserPayload

NAME_MAX_LENGTH = 128
PHONE_NUMBER_LENGTH = 10

_PHONE_RE = re.compile(rf"[0-9]{{{PHONE_NUMBER_LENGTH}}}")

ValidationErrors = dict[str, list[str]]


# ---------------------------------------------------------------------------
# Age
# ---------------------------------------------------------------------------

def calculate_age(date_of_birth: date, today: date | None = None) -> int:
    """
    Return the age in whole years on *today* (defaults to the current date).

    A 29 February birthday is celebrated on 28 February in non-leap years.
    """
    today = today or date.today()
    age = today.year - date_of_birth.year
    try:
        birthday = date_of_birth.replace(year=today.year)
    except ValueError:
        birthday = date_of_birth.replace(year=today.year, day=28)
    if today < birthday:
        age -= 1
    return age


# ---------------------------------------------------------------------------
# Field rules
# ---------------------------------------------------------------------------

def _is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


def _check_first_name(value: str | None) -> list[str]:
    if _is_blank(value):
        return ["First name is required."]
    if len(value) > NAME_MAX_LENGTH:
        return [f"First name must be at most {NAME_MAX_LENGTH} characters."]
    return []


def _check_last_name(value: str | None) -> list[str]:
    if value is not None and len(value) > NAME_MAX_LENGTH:
        return [f"Last name must be at most {NAME_MAX_LENGTH} characters."]
    return []


def _check_email(value: str | None) -> list[str]:
    if _is_blank(value):
        return ["Email is required."]
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        return ["Email is not a valid email address."]
    return []


def _check_date_of_birth(value: date | None, today: date | None) -> list[str]:
    if value is None:
        return ["Date of birth is required."]
    minimum_age = settings.MINIMUM_AGE
    if calculate_age(value, today) < minimum_age:
        return [f"User must be at least {minimum_age} years old."]
    return []


def _check_phone_number(value: str | None) -> list[str]:
    if _is_blank(value):
        return ["Phone number is required."]
    if not _PHONE_RE.fullmatch(value):
        return [f"Phone number must be {PHONE_NUMBER_LENGTH} digits long."]
    return []


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def validate_user(payload: UserPayload, today: date | None = None) -> ValidationErrors:
    """Run every field rule against *payload* and collect the failures."""
    checks = {
        "first_name": _check_first_name(payload.first_name),
        "last_name": _check_last_name(payload.last_name),
        "email": _check_email(payload.email),
        "date_of_birth": _check_date_of_birth(payload.date_of_birth, today),
        "phone_number": _check_phone_number(payload.phone_number),
    }
    return {field: messages for field, messages in checks.items() if messages}
