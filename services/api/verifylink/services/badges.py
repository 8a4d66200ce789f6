"""Badge issuance, embed snippets and live badge resolution.

Issuance rules:
- Only stores with verification_status == verified get badges
- One badge per (store, badge_type); issuing again returns the existing badge
- Badges are never updated or deleted

Resolution (used by the embedded widget on third-party pages):
1. Badge by registration number
2. Store by badge.store_id
3. Public payload only when the store is verified, otherwise None

A miss at any step returns None without saying which step failed.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from html import escape
import logging
from typing import Any

from redis.exceptions import RedisError

from verifylink.models import Store, VerificationBadge
from verifylink.models._types import generate_id
from verifylink.services.errors import ConcurrentModification, InvalidState, NotFound, ValidationError
from verifylink.services.principal import Principal, require_owner_or_admin
from verifylink.services.registration import (
    build_verify_url,
    generate_registration_number,
    validate_registration_number,
)
from verifylink.services.repositories import BadgeRepository, StoreRepository
from verifylink.services.statuses import DEFAULT_BADGE_TYPES, BadgeType, VerificationStatus
from verifylink.settings import Settings, get_settings
from verifylink.stores.redis import get_badge_cache, set_badge_cache

logger = logging.getLogger("uvicorn.error")


@dataclass(frozen=True)
class PublicBadge:
    """What the embedded widget is allowed to show."""

    registration_number: str
    badge_type: str
    verify_url: str
    store_name: str
    store_url: str
    logo_url: str | None
    verified_since: str | None


@dataclass(frozen=True)
class BadgeEmbed:
    """Badge plus everything needed to embed it."""

    badge: VerificationBadge
    verify_url: str
    snippet: str


def parse_badge_type(value: str | BadgeType) -> BadgeType:
    try:
        return BadgeType(value)
    except ValueError:
        raise ValidationError(
            f"Unknown badge type: {value}",
            {"field": "badge_type", "allowed": [t.value for t in BadgeType]},
        ) from None


def render_badge_snippet(
    registration_number: str,
    badge_type: str | BadgeType,
    *,
    settings: Settings | None = None,
) -> str:
    """Render the embeddable badge code for a registration number.

    Pure function: the same inputs always give byte-identical output. The
    loaded script inserts the badge element and fetches live status from
    the status URL when the page renders.
    """
    settings = settings or get_settings()
    registration_number = validate_registration_number(registration_number)
    kind = parse_badge_type(badge_type).value
    verify_url = build_verify_url(registration_number, base_url=settings.verify_base_url)
    status_url = f"{settings.public_api_url.rstrip('/')}/v1/badges/{registration_number}"

    attrs = {
        "src": settings.badge_script_url,
        "data-registration-number": registration_number,
        "data-badge-type": kind,
        "data-verify-url": verify_url,
        "data-status-url": status_url,
    }
    rendered_attrs = " ".join(f'{name}="{escape(value, quote=True)}"' for name, value in attrs.items())
    return "\n".join(
        [
            f"<!-- Verify.link {kind} badge: {escape(registration_number)} -->",
            f'<div id="verifylink-{kind}-{escape(registration_number, quote=True)}"></div>',
            f"<script async {rendered_attrs}></script>",
            "<noscript>",
            f'  <a href="{escape(verify_url, quote=True)}" rel="noopener">'
            f"Verified Official Store by Veryfy ({escape(registration_number)})</a>",
            "</noscript>",
        ]
    )


class BadgeService:
    """Issues badges for verified stores and resolves them publicly."""

    def __init__(
        self,
        stores: StoreRepository,
        badges: BadgeRepository,
        settings: Settings | None = None,
    ):
        self.stores = stores
        self.badges = badges
        self.settings = settings or get_settings()

    async def issue_badge(self, store_id: str, badge_type: str | BadgeType) -> VerificationBadge:
        """Mint a badge for a verified store (idempotent per badge type).

        Raises:
            NotFound: Store does not exist.
            InvalidState: Store is not verified.
        """
        kind = parse_badge_type(badge_type)
        store = await self.stores.get(store_id)
        if store is None:
            raise NotFound(f"Store {store_id} not found", {"store_id": store_id})
        if store.verification_status != VerificationStatus.VERIFIED:
            raise InvalidState(
                "Badges can only be issued for verified stores",
                {"store_id": store_id, "status": store.verification_status.value},
            )

        existing = await self.badges.get_for_store(store_id, kind)
        if existing is not None:
            return existing

        badge = VerificationBadge(
            id=generate_id(),
            store_id=store_id,
            badge_type=kind,
            registration_number=generate_registration_number(
                store_id,
                kind,
                datetime.now(timezone.utc),
                prefix=self.settings.registration_prefix,
            ),
        )
        try:
            badge = await self.badges.create(badge)
        except ConcurrentModification:
            existing = await self.badges.get_for_store(store_id, kind)
            if existing is None:
                raise
            return existing

        logger.info(
            f"[badges] issued store_id={store_id} type={kind.value} registration_number={badge.registration_number}"
        )
        return badge

    async def issue_default_badges(self, store_id: str) -> list[VerificationBadge]:
        return [await self.issue_badge(store_id, kind) for kind in DEFAULT_BADGE_TYPES]

    def embed(self, badge: VerificationBadge) -> BadgeEmbed:
        return BadgeEmbed(
            badge=badge,
            verify_url=build_verify_url(badge.registration_number, base_url=self.settings.verify_base_url),
            snippet=render_badge_snippet(badge.registration_number, badge.badge_type, settings=self.settings),
        )

    async def list_badges(self, principal: Principal | None, store_id: str) -> list[BadgeEmbed]:
        store = await self.stores.get(store_id)
        if store is None:
            raise NotFound(f"Store {store_id} not found", {"store_id": store_id})
        require_owner_or_admin(principal, store.owner_id)
        return [self.embed(b) for b in await self.badges.list_for_store(store_id)]

    async def get_snippet(self, registration_number: str, badge_type: str | BadgeType) -> str:
        """Snippet for an existing badge; the type must match the issued badge."""
        registration_number = validate_registration_number(registration_number)
        kind = parse_badge_type(badge_type)
        badge = await self.badges.get_by_registration_number(registration_number)
        if badge is None or badge.badge_type != kind:
            raise NotFound("Badge not found")
        return render_badge_snippet(registration_number, kind, settings=self.settings)

    async def resolve_badge(self, registration_number: str) -> PublicBadge | None:
        """Live lookup for the embedded widget. Fails closed."""
        try:
            registration_number = validate_registration_number(registration_number)
        except ValidationError:
            return None

        cached = await _try_get_cached_badge(registration_number)
        if cached is not None:
            return cached

        badge = await self.badges.get_by_registration_number(registration_number)
        if badge is None:
            return None
        store = await self.stores.get(badge.store_id)
        if store is None or store.verification_status != VerificationStatus.VERIFIED:
            return None

        public = _to_public_badge(badge, store, self.settings)
        await _try_set_cached_badge(registration_number, public, self.settings.badge_cache_ttl_seconds)
        return public


def _to_public_badge(badge: VerificationBadge, store: Store, settings: Settings) -> PublicBadge:
    verified_since = store.updated_at.isoformat() if store.updated_at else None
    return PublicBadge(
        registration_number=badge.registration_number,
        badge_type=badge.badge_type.value,
        verify_url=build_verify_url(badge.registration_number, base_url=settings.verify_base_url),
        store_name=store.name,
        store_url=store.url,
        logo_url=store.logo_url,
        verified_since=verified_since,
    )


async def _try_get_cached_badge(registration_number: str) -> PublicBadge | None:
    try:
        payload = await get_badge_cache(registration_number)
    except (RuntimeError, RedisError, ValueError):
        return None
    if not payload:
        return None
    try:
        return PublicBadge(**payload)
    except TypeError:
        return None


async def _try_set_cached_badge(registration_number: str, badge: PublicBadge, ttl: int) -> None:
    payload: dict[str, Any] = asdict(badge)
    try:
        await set_badge_cache(registration_number, payload, ttl)
    except (RuntimeError, RedisError):
        # Redis may be unavailable in tests/local minimal env.
        return
