"""Sign-up field rules shared by the sign-up form and the username check."""

import re
from typing import Annotated

from pydantic import AfterValidator

USERNAME_MIN_LENGTH = 2
USERNAME_MAX_LENGTH = 20
PASSWORD_MIN_LENGTH = 6

USERNAME_RE = re.compile(r"^[a-zA-Z0-9_]+$")
EMAIL_RE = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")


def username_errors(value: str | None) -> list[str]:
    """Return every rule the candidate breaks (empty list = valid)."""
    if value is None:
        return ["Username is required"]
    errors = []
    if len(value) < USERNAME_MIN_LENGTH:
        errors.append(f"Username must be at least {USERNAME_MIN_LENGTH} characters")
    if len(value) > USERNAME_MAX_LENGTH:
        errors.append(f"Username must be no more than {USERNAME_MAX_LENGTH} characters")
    if value and not USERNAME_RE.match(value):
        errors.append("Username must not contain special characters")
    return errors


def _check_username(value: str) -> str:
    errors = username_errors(value)
    if errors:
        raise ValueError(", ".join(errors))
    return value


def _check_email(value: str) -> str:
    value = value.strip()
    if not EMAIL_RE.match(value):
        raise ValueError("Invalid email address")
    return value


def _check_password(value: str) -> str:
    if len(value) < PASSWORD_MIN_LENGTH:
        raise ValueError(f"Password must be at least {PASSWORD_MIN_LENGTH} characters")
    return value


Username = Annotated[str, AfterValidator(_check_username)]
Email = Annotated[str, AfterValidator(_check_email)]
Password = Annotated[str, AfterValidator(_check_password)]
