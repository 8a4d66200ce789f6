"""Store verification workflow.

Flow:
1. Owner submits a store (status = pending) and attaches documents
2. Administrator approves or rejects the store (pending -> verified | rejected)
3. On approval, default badges (topbar + footer) are issued when
   settings.auto_issue_badges is on; admins can also issue explicitly

Rules:
- Only administrators change statuses; the target must be verified or rejected
- Repeating the current status is a no-op (no error, no extra badges)
- verified and rejected are terminal: any other change is InvalidTransition
- Updates are conditional on the status (and version, when supplied) that was
  read, so a conflicting concurrent review fails with ConcurrentModification
  instead of silently overwriting
- Documents are reviewed independently; approving a store does not require
  approved documents
"""

from __future__ import annotations

from dataclasses import dataclass, field
import logging

from verifylink.models import Store, VerificationDocument
from verifylink.models._types import generate_id
from verifylink.services.badges import BadgeService
from verifylink.services.errors import (
    ConcurrentModification,
    InvalidTransition,
    NotFound,
    StorageError,
    ValidationError,
)
from verifylink.services.principal import (
    Principal,
    require_admin,
    require_owner_or_admin,
    require_principal,
)
from verifylink.services.repositories import DocumentRepository, StoreRepository
from verifylink.services.statuses import (
    REVIEW_TARGETS,
    DocumentType,
    VerificationStatus,
    can_transition,
)
from verifylink.services.storage import ObjectStorage, build_object_path, validate_upload
from verifylink.services.validation import require_text, validate_email, validate_http_url
from verifylink.settings import Settings, get_settings

logger = logging.getLogger("uvicorn.error")


@dataclass
class StoreDetails:
    """Store with its documents (admin review / owner view)."""

    store: Store
    documents: list[VerificationDocument] = field(default_factory=list)


def parse_review_target(value: str | VerificationStatus) -> VerificationStatus:
    try:
        target = VerificationStatus(value)
    except ValueError:
        target = None
    if target not in REVIEW_TARGETS:
        raise ValidationError(
            f"Status must be one of: {', '.join(sorted(t.value for t in REVIEW_TARGETS))}",
            {"field": "status", "value": str(getattr(value, "value", value))},
        )
    return target


def parse_document_type(value: str | DocumentType) -> DocumentType:
    try:
        return DocumentType(value)
    except ValueError:
        raise ValidationError(
            f"Unknown document type: {value}",
            {"field": "document_type", "allowed": [t.value for t in DocumentType]},
        ) from None


class VerificationService:
    """Submission and review of stores and their documents."""

    def __init__(
        self,
        stores: StoreRepository,
        documents: DocumentRepository,
        badges: BadgeService,
        storage: ObjectStorage | None = None,
        settings: Settings | None = None,
    ):
        self.stores = stores
        self.documents = documents
        self.badges = badges
        self.storage = storage
        self.settings = settings or get_settings()

    # ------------------------------------------------------------
    # Submission (store owners)
    # ------------------------------------------------------------

    async def submit_store(
        self,
        principal: Principal | None,
        *,
        name: str,
        url: str,
        contact_email: str | None = None,
        logo_url: str | None = None,
        business_name: str | None = None,
        business_type: str | None = None,
        description: str | None = None,
    ) -> Store:
        """Create a store verification request. New stores always start pending."""
        principal = require_principal(principal)
        store = Store(
            id=generate_id(),
            owner_id=principal.user_id,
            name=require_text(name, "name", max_length=200),
            url=validate_http_url(url, "url"),
            contact_email=validate_email(contact_email, "contact_email") if contact_email else None,
            logo_url=validate_http_url(logo_url, "logo_url") if logo_url else None,
            business_name=_optional_text(business_name, "business_name", 200),
            business_type=_optional_text(business_type, "business_type", 100),
            description=_optional_text(description, "description", 5000),
            verification_status=VerificationStatus.PENDING,
            version=1,
        )
        store = await self.stores.create(store)
        logger.info(f"[verification] submitted store_id={store.id} owner_id={store.owner_id}")
        return store

    async def add_document(
        self,
        principal: Principal | None,
        store_id: str,
        *,
        document_type: str | DocumentType,
        document_url: str,
    ) -> VerificationDocument:
        store = await self._get_store(store_id)
        require_owner_or_admin(principal, store.owner_id)
        document = VerificationDocument(
            id=generate_id(),
            store_id=store.id,
            document_type=parse_document_type(document_type),
            document_url=validate_http_url(document_url, "document_url"),
            status=VerificationStatus.PENDING,
        )
        document = await self.documents.create(document)
        logger.info(
            f"[verification] document added store_id={store.id} document_id={document.id} "
            f"type={document.document_type.value}"
        )
        return document

    async def upload_document(
        self,
        principal: Principal | None,
        store_id: str,
        *,
        document_type: str | DocumentType,
        filename: str,
        content_type: str,
        data: bytes,
    ) -> VerificationDocument:
        """Store the file in object storage, then attach it as a document."""
        store = await self._get_store(store_id)
        principal = require_owner_or_admin(principal, store.owner_id)
        kind = parse_document_type(document_type)
        content_type = validate_upload(content_type, len(data), settings=self.settings)
        if self.storage is None:
            raise StorageError("File storage is not configured")

        path = build_object_path(f"{store.id}/{kind.value}", filename, content_type)
        url = await self.storage.upload(self.settings.documents_bucket, path, data, content_type)
        return await self.add_document(principal, store.id, document_type=kind, document_url=url)

    # ------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------

    async def get_store(self, principal: Principal | None, store_id: str) -> StoreDetails:
        store = await self._get_store(store_id)
        require_owner_or_admin(principal, store.owner_id)
        return StoreDetails(store=store, documents=await self.documents.list_for_store(store.id))

    async def list_my_stores(self, principal: Principal | None) -> list[Store]:
        principal = require_principal(principal)
        return await self.stores.list(owner_id=principal.user_id)

    async def list_stores(
        self,
        principal: Principal | None,
        status: str | VerificationStatus | None = None,
    ) -> list[Store]:
        require_admin(principal)
        return await self.stores.list(status=_parse_status_filter(status))

    # ------------------------------------------------------------
    # Review (administrators)
    # ------------------------------------------------------------

    async def set_verification_status(
        self,
        principal: Principal | None,
        store_id: str,
        target: str | VerificationStatus,
        *,
        expected_version: int | None = None,
    ) -> Store:
        """Apply an administrator review decision to a store.

        Raises:
            Unauthenticated / Forbidden: Caller is not an administrator.
            ValidationError: Target is not verified or rejected.
            NotFound: Store does not exist.
            InvalidTransition: Store already has a different final status.
            ConcurrentModification: Store changed since it was read.
            PersistenceError: The write failed.
        """
        admin = require_admin(principal)
        target_status = parse_review_target(target)
        store = await self._get_store(store_id)
        current = store.verification_status

        if expected_version is not None and store.version != expected_version:
            raise ConcurrentModification(
                "Store was modified by someone else, reload and try again",
                {"store_id": store_id, "expected_version": expected_version, "version": store.version},
            )

        if current == target_status:
            logger.info(f"[verification] no-op store_id={store_id} status={current.value}")
            if current == VerificationStatus.VERIFIED and self.settings.auto_issue_badges:
                # Existing badges are returned as-is; only missing ones are minted.
                await self.badges.issue_default_badges(store_id)
            return store

        if not can_transition(current, target_status):
            raise InvalidTransition(
                f"Store is already {current.value}",
                {"store_id": store_id, "from": current.value, "to": target_status.value},
            )

        updated = await self.stores.update_status(
            store_id,
            from_status=current,
            to_status=target_status,
            expected_version=store.version,
        )
        if updated is None:
            raise ConcurrentModification(
                "Store was modified by someone else, reload and try again",
                {"store_id": store_id},
            )

        logger.info(
            f"[verification] store_id={store_id} {current.value} -> {target_status.value} "
            f"by admin_id={admin.user_id} version={updated.version}"
        )

        if target_status == VerificationStatus.VERIFIED and self.settings.auto_issue_badges:
            await self.badges.issue_default_badges(store_id)
        return updated

    async def set_document_status(
        self,
        principal: Principal | None,
        document_id: str,
        target: str | VerificationStatus,
    ) -> VerificationDocument:
        require_admin(principal)
        target_status = parse_review_target(target)
        document = await self.documents.get(document_id)
        if document is None:
            raise NotFound(f"Document {document_id} not found", {"document_id": document_id})

        current = document.status
        if current == target_status:
            return document
        if not can_transition(current, target_status):
            raise InvalidTransition(
                f"Document is already {current.value}",
                {"document_id": document_id, "from": current.value, "to": target_status.value},
            )

        updated = await self.documents.update_status(
            document_id, from_status=current, to_status=target_status
        )
        if updated is None:
            raise ConcurrentModification(
                "Document was modified by someone else, reload and try again",
                {"document_id": document_id},
            )
        logger.info(f"[verification] document_id={document_id} {current.value} -> {target_status.value}")
        return updated

    async def _get_store(self, store_id: str) -> Store:
        store = await self.stores.get(store_id)
        if store is None:
            raise NotFound(f"Store {store_id} not found", {"store_id": store_id})
        return store


def _optional_text(value: str | None, field_name: str, max_length: int) -> str | None:
    if value is None or not value.strip():
        return None
    return require_text(value, field_name, max_length=max_length)


def _parse_status_filter(value: str | VerificationStatus | None) -> VerificationStatus | None:
    if value is None or value == "":
        return None
    try:
        return VerificationStatus(value)
    except ValueError:
        raise ValidationError(f"Unknown status filter: {value}", {"field": "status"}) from None
