"""Scam report endpoints.

POST /v1/reports/evidence - Upload an evidence file, returns its URL
POST /v1/reports          - Submit a scam report (alerts verified stores)
GET  /v1/reports/mine     - Reports filed by the caller
"""

from fastapi import APIRouter, Depends, File, UploadFile

from verifylink.auth import get_principal
from verifylink.routes.deps import get_report_service
from verifylink.schemas import (
    ErrorResponse,
    EvidenceOut,
    FanoutOut,
    ReportCreate,
    ReportOut,
    ReportSubmissionOut,
)
from verifylink.services.principal import Principal
from verifylink.services.scam_reports import ScamReportService

router = APIRouter(responses={401: {"model": ErrorResponse}, 422: {"model": ErrorResponse}})

_SUBMISSION_MESSAGES = {
    "delivered": "The scam report has been submitted and stores have been notified.",
    "none": "The scam report has been submitted. There were no verified stores to notify.",
    "partial": "The scam report has been submitted, but some stores could not be notified.",
    "failed": "The scam report has been submitted, but store notifications failed.",
}


@router.post("/evidence", response_model=EvidenceOut, status_code=201)
async def upload_evidence(
    file: UploadFile = File(...),
    principal: Principal | None = Depends(get_principal),
    service: ScamReportService = Depends(get_report_service),
) -> EvidenceOut:
    """Upload a PDF or image file (max 5MB) to attach to a report."""
    data = await file.read()
    url = await service.upload_evidence(
        principal,
        filename=file.filename or "",
        content_type=file.content_type or "",
        data=data,
    )
    return EvidenceOut(evidence_url=url)


@router.post("", response_model=ReportSubmissionOut, status_code=201)
async def submit_report(
    request: ReportCreate,
    principal: Principal | None = Depends(get_principal),
    service: ScamReportService = Depends(get_report_service),
) -> ReportSubmissionOut:
    """Submit a scam report.

    The report is saved before any store is notified. A 201 means the report
    is stored; `notifications.outcome` says how the fan-out went.
    """
    submission = await service.submit_scam_report(
        principal,
        reported_email=request.reported_email,
        description=request.description,
        evidence_url=request.evidence_url,
    )
    notifications = FanoutOut.from_result(submission.notifications)
    return ReportSubmissionOut(
        report=ReportOut.model_validate(submission.report),
        notifications=notifications,
        message=_SUBMISSION_MESSAGES[notifications.outcome],
    )


@router.get("/mine", response_model=list[ReportOut])
async def list_my_reports(
    principal: Principal | None = Depends(get_principal),
    service: ScamReportService = Depends(get_report_service),
) -> list[ReportOut]:
    return [ReportOut.model_validate(r) for r in await service.list_my_reports(principal)]
