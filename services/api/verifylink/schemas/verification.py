"""Schemas for store verification and badge endpoints."""

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field

from verifylink.services.statuses import BadgeType, DocumentType, VerificationStatus


class StoreCreate(BaseModel):
    """Store verification request submitted by an owner."""

    name: str = Field(min_length=1, max_length=200)
    url: str = Field(min_length=1, max_length=2000, examples=["https://acme.test"])
    contact_email: EmailStr | None = Field(default=None, description="Receives scam alerts once verified")
    logo_url: str | None = None
    business_name: str | None = Field(default=None, max_length=200)
    business_type: str | None = Field(default=None, max_length=100, examples=["LLC"])
    description: str | None = Field(default=None, max_length=5000)


class StoreOut(BaseModel):
    id: str
    name: str
    url: str
    owner_id: str
    contact_email: str | None = None
    logo_url: str | None = None
    business_name: str | None = None
    business_type: str | None = None
    description: str | None = None
    verification_status: VerificationStatus
    version: int
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}


class DocumentCreate(BaseModel):
    """Reference to a document already in object storage."""

    document_type: DocumentType
    document_url: str = Field(min_length=1, max_length=2000)


class DocumentOut(BaseModel):
    id: str
    store_id: str
    document_type: DocumentType
    document_url: str
    status: VerificationStatus
    created_at: datetime | None = None

    model_config = {"from_attributes": True}


class StoreDetailOut(BaseModel):
    store: StoreOut
    documents: list[DocumentOut] = Field(default_factory=list)


class StatusUpdate(BaseModel):
    """Administrator review decision.

    `expected_version` enables optimistic concurrency: the update fails with
    409 CONCURRENT_MODIFICATION if the store changed since it was read.
    """

    status: str = Field(examples=["verified", "rejected"])
    expected_version: int | None = Field(default=None, ge=1)


class BadgeIssueRequest(BaseModel):
    badge_type: BadgeType = BadgeType.TOPBAR


class BadgeOut(BaseModel):
    id: str
    store_id: str
    badge_type: BadgeType
    registration_number: str
    verify_url: str
    snippet: str
    created_at: datetime | None = None

    @classmethod
    def from_embed(cls, embed) -> "BadgeOut":
        badge = embed.badge
        return cls(
            id=badge.id,
            store_id=badge.store_id,
            badge_type=badge.badge_type,
            registration_number=badge.registration_number,
            verify_url=embed.verify_url,
            snippet=embed.snippet,
            created_at=badge.created_at,
        )
