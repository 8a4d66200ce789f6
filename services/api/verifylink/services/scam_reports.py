"""Scam report intake and review.

Submission:
1. Validate reporter, reported email, description and evidence
2. Persist the report (status = pending) and commit
3. Fan out one alert per verified store

A report counts as submitted once it is committed. Fan-out problems of any
kind are logged and summarised in the result; they never fail or roll back
the submission. Later status changes never trigger another fan-out.

Evidence policy (settings.evidence_policy):
- "required": an evidence URL must be supplied (default)
- "optional": evidence may be omitted
"""

from __future__ import annotations

from dataclasses import dataclass
import logging

from verifylink.models import ScamReport
from verifylink.models._types import generate_id
from verifylink.services.errors import (
    ConcurrentModification,
    InvalidTransition,
    NotFound,
    StorageError,
    ValidationError,
)
from verifylink.services.notifications import FanoutResult, NotificationGateway, notify_verified_stores
from verifylink.services.principal import Principal, require_admin, require_principal
from verifylink.services.repositories import ReportRepository, StoreRepository
from verifylink.services.statuses import ReportStatus, can_transition_report
from verifylink.services.storage import ObjectStorage, build_object_path, validate_upload
from verifylink.services.validation import require_text, validate_email, validate_http_url
from verifylink.settings import Settings, get_settings

logger = logging.getLogger("uvicorn.error")

EVIDENCE_REQUIRED = "required"
EVIDENCE_OPTIONAL = "optional"


@dataclass
class ReportSubmission:
    report: ScamReport
    notifications: FanoutResult


def parse_report_status(value: str | ReportStatus) -> ReportStatus:
    try:
        return ReportStatus(value)
    except ValueError:
        raise ValidationError(
            f"Unknown report status: {value}",
            {"field": "status", "allowed": [s.value for s in ReportStatus]},
        ) from None


class ScamReportService:
    """Scam report intake, fan-out and admin review."""

    def __init__(
        self,
        reports: ReportRepository,
        stores: StoreRepository,
        gateway: NotificationGateway,
        storage: ObjectStorage | None = None,
        settings: Settings | None = None,
    ):
        self.reports = reports
        self.stores = stores
        self.gateway = gateway
        self.storage = storage
        self.settings = settings or get_settings()

    async def submit_scam_report(
        self,
        principal: Principal | None,
        *,
        reported_email: str,
        description: str,
        evidence_url: str | None = None,
    ) -> ReportSubmission:
        """Persist a scam report and alert verified stores.

        The description is stored trimmed and its length is measured after
        trimming, so surrounding whitespace cannot satisfy the minimum.

        Raises:
            Unauthenticated: No signed-in reporter.
            ValidationError: Bad email, short description or evidence policy violation.
            PersistenceError: The report could not be saved (nothing was sent).
        """
        reporter = require_principal(principal)
        email = validate_email(reported_email, "reported_email")
        text = require_text(
            description,
            "description",
            min_length=self.settings.report_min_description_length,
            max_length=5000,
        )
        evidence = self._check_evidence(evidence_url)

        report = ScamReport(
            id=generate_id(),
            reporter_id=reporter.user_id,
            reported_email=email,
            description=text,
            evidence_url=evidence,
            status=ReportStatus.PENDING,
        )
        report = await self.reports.create(report)
        logger.info(f"[reports] submitted report_id={report.id} reporter_id={reporter.user_id}")

        notifications = await self._fan_out(report)
        return ReportSubmission(report=report, notifications=notifications)

    async def notify_verified_stores(self, reported_email: str, description: str) -> FanoutResult:
        return await notify_verified_stores(
            reported_email,
            description,
            stores=self.stores,
            gateway=self.gateway,
            settings=self.settings,
        )

    async def upload_evidence(
        self,
        principal: Principal | None,
        *,
        filename: str,
        content_type: str,
        data: bytes,
    ) -> str:
        """Store an evidence file and return its public URL."""
        reporter = require_principal(principal)
        content_type = validate_upload(content_type, len(data), settings=self.settings)
        if self.storage is None:
            raise StorageError("File storage is not configured")
        path = build_object_path(reporter.user_id, filename, content_type)
        return await self.storage.upload(self.settings.evidence_bucket, path, data, content_type)

    async def list_reports(
        self,
        principal: Principal | None,
        status: str | ReportStatus | None = None,
    ) -> list[ScamReport]:
        require_admin(principal)
        return await self.reports.list(status=parse_report_status(status) if status else None)

    async def list_my_reports(self, principal: Principal | None) -> list[ScamReport]:
        reporter = require_principal(principal)
        return await self.reports.list(reporter_id=reporter.user_id)

    async def set_report_status(
        self,
        principal: Principal | None,
        report_id: str,
        target: str | ReportStatus,
    ) -> ScamReport:
        admin = require_admin(principal)
        target_status = parse_report_status(target)
        report = await self.reports.get(report_id)
        if report is None:
            raise NotFound(f"Report {report_id} not found", {"report_id": report_id})

        current = report.status
        if current == target_status:
            return report
        if not can_transition_report(current, target_status):
            raise InvalidTransition(
                f"Report is already {current.value}",
                {"report_id": report_id, "from": current.value, "to": target_status.value},
            )

        updated = await self.reports.update_status(report_id, from_status=current, to_status=target_status)
        if updated is None:
            raise ConcurrentModification(
                "Report was modified by someone else, reload and try again",
                {"report_id": report_id},
            )
        logger.info(
            f"[reports] report_id={report_id} {current.value} -> {target_status.value} by admin_id={admin.user_id}"
        )
        return updated

    def _check_evidence(self, evidence_url: str | None) -> str | None:
        if evidence_url is None or not evidence_url.strip():
            if self.settings.evidence_policy == EVIDENCE_REQUIRED:
                raise ValidationError(
                    "Please upload evidence file (PDF or image)",
                    {"field": "evidence_url", "policy": EVIDENCE_REQUIRED},
                )
            return None
        return validate_http_url(evidence_url, "evidence_url")

    async def _fan_out(self, report: ScamReport) -> FanoutResult:
        try:
            return await self.notify_verified_stores(report.reported_email, report.description)
        except Exception as e:
            # The report is already committed; a broken fan-out must not undo that.
            logger.exception(f"[reports] fan-out crashed report_id={report.id}")
            return FanoutResult(error=f"{type(e).__name__}: {str(e)[:200]}")
