"""Store model.

Represents a merchant store submitted for verification.
`verification_status` is only changed by the verification service.
"""

from datetime import datetime

from sqlalchemy import DateTime, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from verifylink.models._types import generate_id, status_column_type
from verifylink.services.statuses import VerificationStatus
from verifylink.stores.postgres import Base


class Store(Base):
    """Merchant store with verification status."""

    __tablename__ = "stores"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_id)

    # Store identification
    name: Mapped[str] = mapped_column(String(200))
    url: Mapped[str] = mapped_column(Text)
    owner_id: Mapped[str] = mapped_column(String(64), index=True)
    logo_url: Mapped[str | None] = mapped_column(Text)

    # Scam alert recipient
    contact_email: Mapped[str | None] = mapped_column(String(320))

    # Business profile
    business_name: Mapped[str | None] = mapped_column(String(200))
    business_type: Mapped[str | None] = mapped_column(String(100))
    description: Mapped[str | None] = mapped_column(Text)

    # Verification
    verification_status: Mapped[VerificationStatus] = mapped_column(
        status_column_type(VerificationStatus, "verification_status"),
        default=VerificationStatus.PENDING,
        index=True,
    )
    version: Mapped[int] = mapped_column(default=1)

    # Timestamps
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
        return f"<Store {self.name} ({self.verification_status.value})>"
