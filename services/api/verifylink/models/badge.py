"""Verification badge model.

Issued only for verified stores, one per (store, badge_type).
Immutable once created.
"""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from verifylink.models._types import generate_id, status_column_type
from verifylink.services.statuses import BadgeType
from verifylink.stores.postgres import Base


class VerificationBadge(Base):
    """Badge bound to a public registration number."""

    __tablename__ = "verification_badges"
    __table_args__ = (
        UniqueConstraint("store_id", "badge_type", name="uq_verification_badges_store_type"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_id)
    store_id: Mapped[str] = mapped_column(ForeignKey("stores.id"), index=True)

    badge_type: Mapped[BadgeType] = mapped_column(status_column_type(BadgeType, "badge_type"))
    registration_number: Mapped[str] = mapped_column(String(64), unique=True, index=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
    )

    def __repr__(self) -> str:
        return f"<VerificationBadge {self.registration_number} ({self.badge_type.value})>"
