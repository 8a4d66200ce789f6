"""Public badge endpoints used by embedded widgets.

GET /v1/badges/{registrationNumber}             - Live verification status
GET /v1/badges/{registrationNumber}/snippet     - Embed code (text/plain)
GET /v1/badges/{registrationNumber}/verify-url  - Public verify URL

Lookups fail closed: an unknown number, or a store that is not verified,
gets the same bare 404 so nothing about the store leaks.
"""

from fastapi import APIRouter, Depends, Path, Query
from fastapi.responses import PlainTextResponse

from verifylink.routes.deps import get_badge_service
from verifylink.schemas import ErrorResponse, PublicBadgeOut
from verifylink.services.badges import BadgeService
from verifylink.services.errors import NotFound
from verifylink.services.registration import build_verify_url
from verifylink.services.statuses import BadgeType

router = APIRouter(responses={404: {"model": ErrorResponse}})

RegistrationNumber = Path(
    description="Badge registration number",
    min_length=1,
    max_length=64,
    pattern=r"^[A-Za-z0-9][A-Za-z0-9_-]*$",
)


@router.get("/{registration_number}", response_model=PublicBadgeOut)
async def get_badge_status(
    registration_number: str = RegistrationNumber,
    service: BadgeService = Depends(get_badge_service),
) -> PublicBadgeOut:
    badge = await service.resolve_badge(registration_number)
    if badge is None:
        raise NotFound("Badge not found")
    return PublicBadgeOut(
        registration_number=badge.registration_number,
        badge_type=badge.badge_type,
        verify_url=badge.verify_url,
        store_name=badge.store_name,
        store_url=badge.store_url,
        logo_url=badge.logo_url,
        verified_since=badge.verified_since,
    )


@router.get("/{registration_number}/snippet", response_class=PlainTextResponse)
async def get_badge_snippet(
    registration_number: str = RegistrationNumber,
    badge_type: BadgeType = Query(default=BadgeType.TOPBAR, alias="type"),
    service: BadgeService = Depends(get_badge_service),
) -> PlainTextResponse:
    snippet = await service.get_snippet(registration_number, badge_type)
    return PlainTextResponse(snippet, headers={"Cache-Control": "public, max-age=300"})


@router.get("/{registration_number}/verify-url")
async def get_verify_url(registration_number: str = RegistrationNumber) -> dict[str, str]:
    return {"verify_url": build_verify_url(registration_number)}
