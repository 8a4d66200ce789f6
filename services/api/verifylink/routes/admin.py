"""Admin endpoints for store review and scam report moderation.

All endpoints require a principal with the admin role.
"""

from fastapi import APIRouter, Depends, Query

from verifylink.auth import get_principal
from verifylink.routes.deps import (
    get_badge_service,
    get_report_service,
    get_stats_service,
    get_verification_service,
)
from verifylink.schemas import (
    BadgeIssueRequest,
    BadgeOut,
    DocumentOut,
    ErrorResponse,
    ReportOut,
    ReportStatusUpdate,
    StatsOut,
    StatusUpdate,
    StoreDetailOut,
    StoreOut,
)
from verifylink.services.badges import BadgeService
from verifylink.services.principal import Principal, require_admin
from verifylink.services.scam_reports import ScamReportService
from verifylink.services.stats import StatsService
from verifylink.services.verification import VerificationService

router = APIRouter(
    responses={
        401: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    }
)


@router.get("/stats", response_model=StatsOut)
async def get_stats(
    principal: Principal | None = Depends(get_principal),
    service: StatsService = Depends(get_stats_service),
) -> StatsOut:
    """Dashboard counters: pending verifications, pending reports, total stores."""
    stats = await service.get_dashboard_stats(principal)
    return StatsOut(
        pending_verifications=stats.pending_verifications,
        pending_reports=stats.pending_reports,
        total_stores=stats.total_stores,
    )


@router.get("/stores", response_model=list[StoreOut])
async def list_stores(
    status: str | None = Query(default=None, description="pending | verified | rejected"),
    principal: Principal | None = Depends(get_principal),
    service: VerificationService = Depends(get_verification_service),
) -> list[StoreOut]:
    return [StoreOut.model_validate(s) for s in await service.list_stores(principal, status)]


@router.get("/stores/{store_id}", response_model=StoreDetailOut)
async def get_store(
    store_id: str,
    principal: Principal | None = Depends(get_principal),
    service: VerificationService = Depends(get_verification_service),
) -> StoreDetailOut:
    require_admin(principal)
    details = await service.get_store(principal, store_id)
    return StoreDetailOut(
        store=StoreOut.model_validate(details.store),
        documents=[DocumentOut.model_validate(d) for d in details.documents],
    )


@router.post("/stores/{store_id}/status", response_model=StoreOut)
async def set_store_status(
    store_id: str,
    request: StatusUpdate,
    principal: Principal | None = Depends(get_principal),
    service: VerificationService = Depends(get_verification_service),
) -> StoreOut:
    """Approve (verified) or reject (rejected) a pending store."""
    store = await service.set_verification_status(
        principal,
        store_id,
        request.status,
        expected_version=request.expected_version,
    )
    return StoreOut.model_validate(store)


@router.post("/stores/{store_id}/badges", response_model=BadgeOut, status_code=201)
async def issue_badge(
    store_id: str,
    request: BadgeIssueRequest,
    principal: Principal | None = Depends(get_principal),
    service: BadgeService = Depends(get_badge_service),
) -> BadgeOut:
    """Issue a badge for a verified store. Returns the existing badge if already issued."""
    require_admin(principal)
    badge = await service.issue_badge(store_id, request.badge_type)
    return BadgeOut.from_embed(service.embed(badge))


@router.post("/documents/{document_id}/status", response_model=DocumentOut)
async def set_document_status(
    document_id: str,
    request: StatusUpdate,
    principal: Principal | None = Depends(get_principal),
    service: VerificationService = Depends(get_verification_service),
) -> DocumentOut:
    document = await service.set_document_status(principal, document_id, request.status)
    return DocumentOut.model_validate(document)


@router.get("/reports", response_model=list[ReportOut])
async def list_reports(
    status: str | None = Query(default=None, description="pending | reviewed | dismissed"),
    principal: Principal | None = Depends(get_principal),
    service: ScamReportService = Depends(get_report_service),
) -> list[ReportOut]:
    return [ReportOut.model_validate(r) for r in await service.list_reports(principal, status)]


@router.post("/reports/{report_id}/status", response_model=ReportOut)
async def set_report_status(
    report_id: str,
    request: ReportStatusUpdate,
    principal: Principal | None = Depends(get_principal),
    service: ScamReportService = Depends(get_report_service),
) -> ReportOut:
    report = await service.set_report_status(principal, report_id, request.status)
    return ReportOut.model_validate(report)
