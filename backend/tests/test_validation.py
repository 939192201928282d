import pytest

from storefront.auth.validation import validate_email, validate_password, validate_text
from storefront.core.errors import ValidationError


def test_accepts_policy_compliant_password():
    validate_password("Sup3r$ecret")


@pytest.mark.parametrize(
    "password, fragment",
    [
        ("Sh0rt!", "at least 8 characters"),
        ("lower1234!", "uppercase"),
        ("UPPER1234!", "lowercase"),
        ("NoDigits!!", "number"),
        ("NoSpecial123", "special character"),
    ],
)
def test_rejects_weak_passwords(password, fragment):
    with pytest.raises(ValidationError) as exc:
        validate_password(password)
    assert exc.value.status_code == 400
    assert fragment in exc.value.message


@pytest.mark.parametrize("email", ["a@b.co", "first.last@example.com"])
def test_accepts_plausible_emails(email):
    validate_email(email)


@pytest.mark.parametrize("email", ["", "plain", "no@tld", "two@@example.com", "sp ace@example.com", "ada@exa..mple.com"])
def test_rejects_malformed_emails(email):
    with pytest.raises(ValidationError):
        validate_email(email)


def test_validate_text_trims_and_rejects_blank():
    assert validate_text("  hi  ") == "hi"
    with pytest.raises(ValidationError):
        validate_text("   ", "name")
    with pytest.raises(ValidationError):
        validate_text(None)
