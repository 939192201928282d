import re

from email_validator import EmailNotValidError
from email_validator import validate_email as _check_email

from storefront.core.errors import ValidationError

PASSWORD_MIN_LENGTH = 8

_UPPER = re.compile(r"[A-Z]")
_LOWER = re.compile(r"[a-z]")
_DIGIT = re.compile(r"\d")
_SPECIAL = re.compile(r"[!@#$%^&*(),.?\":{}|<>]")


def validate_password(password: str) -> None:
    if len(password or "") < PASSWORD_MIN_LENGTH:
        raise ValidationError(f"Password must be at least {PASSWORD_MIN_LENGTH} characters long")
    if not _UPPER.search(password):
        raise ValidationError("Password must contain at least one uppercase letter")
    if not _LOWER.search(password):
        raise ValidationError("Password must contain at least one lowercase letter")
    if not _DIGIT.search(password):
        raise ValidationError("Password must contain at least one number")
    if not _SPECIAL.search(password):
        raise ValidationError("Password must contain at least one special character")


def validate_email(email: str) -> None:
    try:
        _check_email(email or "", check_deliverability=False)
    except EmailNotValidError:
        raise ValidationError("Please provide a valid email address")


def validate_text(text: str | None, field: str = "text") -> str:
    """Reject missing or whitespace-only input; return the trimmed value."""
    if not text or not text.strip():
        raise ValidationError(f"Please provide a valid {field}")
    return text.strip()
