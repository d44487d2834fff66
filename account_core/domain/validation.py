"""
Account attribute validation.

Produces field-level error messages in the shape {field: [messages]}
so they can be rendered back to the editing form.
"""

from typing import Any

from email_validator import EmailNotValidError, validate_email

from .exceptions import ValidationFailed

NAME_MAX_LENGTH = 50
EMAIL_MAX_LENGTH = 255
PASSWORD_MIN_LENGTH = 6
# Password hashes only consider the first 72 bytes of input.
PASSWORD_MAX_BYTES = 72


def normalize_email(email: str) -> str:
    """
    Normalize email address for consistent storage and lookup.

    Applies: strip whitespace + lowercase
    """
    return email.strip().lower()


def validate_account_attrs(attrs: dict[str, Any], *, creating: bool) -> None:
    """
    Validate name/email/password attributes.

    On update (creating=False) only the keys present are checked and a
    blank password means "leave unchanged".

    Raises:
        ValidationFailed: With every failing field
    """
    errors: dict[str, list[str]] = {}

    if creating or "name" in attrs:
        name = (attrs.get("name") or "").strip()
        if not name:
            errors.setdefault("name", []).append("can't be blank")
        elif len(name) > NAME_MAX_LENGTH:
            errors.setdefault("name", []).append(
                f"is too long (maximum is {NAME_MAX_LENGTH} characters)"
            )

    if creating or "email" in attrs:
        email = normalize_email(attrs.get("email") or "")
        if not email:
            errors.setdefault("email", []).append("can't be blank")
        elif len(email) > EMAIL_MAX_LENGTH:
            errors.setdefault("email", []).append(
                f"is too long (maximum is {EMAIL_MAX_LENGTH} characters)"
            )
        else:
            try:
                validate_email(email, check_deliverability=False)
            except EmailNotValidError:
                errors.setdefault("email", []).append("is invalid")

    password = attrs.get("password") or ""
    if creating and not password.strip():
        errors.setdefault("password", []).append("can't be blank")
    elif password and len(password) < PASSWORD_MIN_LENGTH:
        errors.setdefault("password", []).append(
            f"is too short (minimum is {PASSWORD_MIN_LENGTH} characters)"
        )
    elif len(password.encode()) > PASSWORD_MAX_BYTES:
        errors.setdefault("password", []).append(
            f"is too long (maximum is {PASSWORD_MAX_BYTES} bytes)"
        )

    confirmation = attrs.get("password_confirmation")
    if confirmation is not None and password and confirmation != password:
        errors.setdefault("password_confirmation", []).append("doesn't match Password")

    if errors:
        raise ValidationFailed(errors)
