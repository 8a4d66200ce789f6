"""Persistence contracts the core depends on.

Implementations must:
- commit every write on its own (a returned entity is durable)
- raise PersistenceError for storage failures
- apply status updates conditionally and return None when no row matched
"""

from __future__ import annotations

from typing import Protocol

from verifylink.models import ScamReport, Store, VerificationBadge, VerificationDocument
from verifylink.services.statuses import BadgeType, ReportStatus, VerificationStatus


class StoreRepository(Protocol):
    async def create(self, store: Store) -> Store: ...

    async def get(self, store_id: str) -> Store | None: ...

    async def list(
        self,
        *,
        status: VerificationStatus | None = None,
        owner_id: str | None = None,
    ) -> list[Store]: ...

    async def update_status(
        self,
        store_id: str,
        *,
        from_status: VerificationStatus,
        to_status: VerificationStatus,
        expected_version: int | None = None,
    ) -> Store | None: ...

    async def count(self, *, status: VerificationStatus | None = None) -> int: ...


class DocumentRepository(Protocol):
    async def create(self, document: VerificationDocument) -> VerificationDocument: ...

    async def get(self, document_id: str) -> VerificationDocument | None: ...

    async def list_for_store(self, store_id: str) -> list[VerificationDocument]: ...

    async def update_status(
        self,
        document_id: str,
        *,
        from_status: VerificationStatus,
        to_status: VerificationStatus,
    ) -> VerificationDocument | None: ...


class BadgeRepository(Protocol):
    async def create(self, badge: VerificationBadge) -> VerificationBadge: ...

    async def get_by_registration_number(self, registration_number: str) -> VerificationBadge | None: ...

    async def get_for_store(self, store_id: str, badge_type: BadgeType) -> VerificationBadge | None: ...

    async def list_for_store(self, store_id: str) -> list[VerificationBadge]: ...


class ReportRepository(Protocol):
    async def create(self, report: ScamReport) -> ScamReport: ...

    async def get(self, report_id: str) -> ScamReport | None: ...

    async def list(
        self,
        *,
        status: ReportStatus | None = None,
        reporter_id: str | None = None,
    ) -> list[ScamReport]: ...

    async def update_status(
        self,
        report_id: str,
        *,
        from_status: ReportStatus,
        to_status: ReportStatus,
    ) -> ScamReport | None: ...

    async def count(self, *, status: ReportStatus | None = None) -> int: ...
