"""Input validation shared by the core services."""

from urllib.parse import urlparse

from email_validator import EmailNotValidError, validate_email as check_email_syntax

from verifylink.services.errors import ValidationError

# Blocked URL schemes for stored/linked URLs
BLOCKED_SCHEMES = {"javascript", "data", "file", "vbscript"}


def validate_email(value: str | None, field: str = "email") -> str:
    """Syntax check only (no DNS lookup). Returns the normalized address."""
    email = (value or "").strip()
    if not email:
        raise ValidationError("Please enter a valid email address.", {"field": field})
    try:
        return check_email_syntax(email, check_deliverability=False).normalized
    except EmailNotValidError as e:
        raise ValidationError("Please enter a valid email address.", {"field": field, "reason": str(e)}) from None


def validate_http_url(value: str | None, field: str = "url") -> str:
    """Only http(s) URLs with a host are accepted."""
    url = (value or "").strip()
    try:
        parsed = urlparse(url)
    except ValueError:
        parsed = None
    if (
        parsed is None
        or parsed.scheme.lower() in BLOCKED_SCHEMES
        or parsed.scheme.lower() not in ("https", "http")
        or not parsed.netloc
    ):
        raise ValidationError("Please enter a valid http(s) URL.", {"field": field})
    return url


def require_text(value: str | None, field: str, *, min_length: int = 1, max_length: int | None = None) -> str:
    text = (value or "").strip()
    if len(text) < min_length:
        if min_length <= 1:
            message = f"{field.replace('_', ' ').capitalize()} is required."
        else:
            message = f"{field.replace('_', ' ').capitalize()} must be at least {min_length} characters."
        raise ValidationError(message, {"field": field, "min_length": min_length})
    if max_length is not None and len(text) > max_length:
        raise ValidationError(
            f"{field.replace('_', ' ').capitalize()} must be at most {max_length} characters.",
            {"field": field, "max_length": max_length},
        )
    return text
