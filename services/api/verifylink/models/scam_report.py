"""Scam report model.

A user-filed report against a buyer. Creating one triggers a single
notification fan-out to verified stores; later status changes do not.
"""

from datetime import datetime

from sqlalchemy import DateTime, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from verifylink.models._types import generate_id, status_column_type
from verifylink.services.statuses import ReportStatus
from verifylink.stores.postgres import Base


class ScamReport(Base):
    """Report against a reported email address."""

    __tablename__ = "scam_reports"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_id)
    reporter_id: Mapped[str] = mapped_column(String(64), index=True)

    reported_email: Mapped[str] = mapped_column(String(320), index=True)
    description: Mapped[str] = mapped_column(Text)
    evidence_url: Mapped[str | None] = mapped_column(Text)

    status: Mapped[ReportStatus] = mapped_column(
        status_column_type(ReportStatus, "report_status"),
        default=ReportStatus.PENDING,
        index=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
    )

    def __repr__(self) -> str:
        return f"<ScamReport {self.reported_email} ({self.status.value})>"
