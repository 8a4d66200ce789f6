"""Registration numbers and verify URLs.

A registration number is the public identifier printed on a badge and used by
the embedded widget to look up live verification status.

Format: {prefix}-{YYYY}-{TOKEN}
- prefix: settings.registration_prefix ("VF")
- YYYY: year the badge was issued
- TOKEN: first 10 hex chars of sha256("{store_id}:{badge_type}"), upper-case

The token is derived from (store, badge type), which is also the badge
uniqueness key, so re-issuing never mints a second number for the same badge.
"""

from datetime import datetime
import hashlib
import re
from urllib.parse import quote

from verifylink.services.errors import ValidationError
from verifylink.services.statuses import BadgeType
from verifylink.settings import get_settings

REGISTRATION_NUMBER_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_-]{0,63}$")
TOKEN_LENGTH = 10


def validate_registration_number(registration_number: str | None) -> str:
    value = (registration_number or "").strip()
    if not value:
        raise ValidationError("Registration number is required", {"field": "registration_number"})
    if not REGISTRATION_NUMBER_RE.match(value):
        raise ValidationError("Malformed registration number", {"field": "registration_number"})
    return value


def build_verify_url(registration_number: str, *, base_url: str | None = None) -> str:
    """Embed a registration number into the public verify URL.

    Args:
        registration_number: Badge registration number.
        base_url: Override for settings.verify_base_url.

    Returns:
        e.g. "https://veryfy.link/verify/VF-2024-DEMO"
    """
    value = validate_registration_number(registration_number)
    base = (base_url or get_settings().verify_base_url).rstrip("/")
    return f"{base}/{quote(value, safe='')}"


def compute_badge_token(store_id: str, badge_type: BadgeType) -> str:
    key = f"{store_id}:{BadgeType(badge_type).value}"
    return hashlib.sha256(key.encode()).hexdigest()[:TOKEN_LENGTH].upper()


def generate_registration_number(
    store_id: str,
    badge_type: BadgeType,
    issued_at: datetime,
    *,
    prefix: str | None = None,
) -> str:
    if not store_id:
        raise ValidationError("Store id is required", {"field": "store_id"})
    prefix = (prefix or get_settings().registration_prefix).strip().upper()
    return f"{prefix}-{issued_at.year:04d}-{compute_badge_token(store_id, badge_type)}"
