"""Schemas for scam reports, public badge lookups and admin stats."""

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field

from verifylink.services.statuses import ReportStatus


class ReportCreate(BaseModel):
    reported_email: EmailStr = Field(examples=["customer@example.com"])
    description: str = Field(max_length=5000)
    evidence_url: str | None = None


class ReportOut(BaseModel):
    id: str
    reporter_id: str
    reported_email: str
    description: str
    evidence_url: str | None = None
    status: ReportStatus
    created_at: datetime | None = None

    model_config = {"from_attributes": True}


class FailedRecipientOut(BaseModel):
    store_id: str
    error: str


class FanoutOut(BaseModel):
    """Notification delivery summary.

    outcome: delivered | partial | failed | none
    """

    outcome: str
    attempted: int
    delivered: int
    skipped: int
    failed: list[FailedRecipientOut] = Field(default_factory=list)

    @classmethod
    def from_result(cls, result) -> "FanoutOut":
        return cls(
            outcome=result.outcome,
            attempted=result.attempted,
            delivered=len(result.delivered),
            skipped=len(result.skipped),
            failed=[FailedRecipientOut(store_id=f.store_id, error=f.error) for f in result.failed],
        )


class ReportSubmissionOut(BaseModel):
    report: ReportOut
    notifications: FanoutOut
    message: str


class ReportStatusUpdate(BaseModel):
    status: str = Field(examples=["reviewed", "dismissed"])


class EvidenceOut(BaseModel):
    evidence_url: str


class PublicBadgeOut(BaseModel):
    """Payload served to embedded badge widgets."""

    verified: bool = True
    registration_number: str
    badge_type: str
    verify_url: str
    store_name: str
    store_url: str
    logo_url: str | None = None
    verified_since: str | None = None


class StatsOut(BaseModel):
    pending_verifications: int
    pending_reports: int
    total_stores: int
