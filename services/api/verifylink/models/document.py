"""Verification document model.

A file in object storage supporting a store's verification request.
Reviewed independently of the store itself.
"""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from verifylink.models._types import generate_id, status_column_type
from verifylink.services.statuses import DocumentType, VerificationStatus
from verifylink.stores.postgres import Base


class VerificationDocument(Base):
    """Document attached to a store."""

    __tablename__ = "verification_documents"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_id)
    store_id: Mapped[str] = mapped_column(ForeignKey("stores.id"), index=True)

    document_type: Mapped[DocumentType] = mapped_column(
        status_column_type(DocumentType, "document_type"),
    )
    document_url: Mapped[str] = mapped_column(Text)
    status: Mapped[VerificationStatus] = mapped_column(
        status_column_type(VerificationStatus, "document_status"),
        default=VerificationStatus.PENDING,
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
        return f"<VerificationDocument {self.document_type.value} ({self.status.value})>"
