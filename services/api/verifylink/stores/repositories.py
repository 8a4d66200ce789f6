"""SQLAlchemy repositories for the verification record store.

Each repository wraps one AsyncSession. Writes commit immediately so callers can
rely on durability (a scam report is committed before its fan-out starts).
Status updates are conditional UPDATEs keyed by id + current status (and the
store version when given); a miss returns None and leaves the row untouched.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
import logging

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from verifylink.models import ScamReport, Store, VerificationBadge, VerificationDocument
from verifylink.services.errors import ConcurrentModification, PersistenceError
from verifylink.services.statuses import BadgeType, ReportStatus, VerificationStatus

logger = logging.getLogger("uvicorn.error")


@asynccontextmanager
async def _guard(session: AsyncSession, action: str) -> AsyncIterator[None]:
    """Translate SQLAlchemy failures into PersistenceError."""
    try:
        yield
    except SQLAlchemyError as e:
        await session.rollback()
        logger.error(f"[db] {action} failed: {type(e).__name__}: {str(e)[:200]}")
        raise PersistenceError(f"Could not {action}, please try again") from e


class SqlStoreRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, store: Store) -> Store:
        async with _guard(self.session, "save store"):
            self.session.add(store)
            await self.session.commit()
            await self.session.refresh(store)
        return store

    async def get(self, store_id: str) -> Store | None:
        async with _guard(self.session, "load store"):
            return await self.session.get(Store, store_id, populate_existing=True)

    async def list(
        self,
        *,
        status: VerificationStatus | None = None,
        owner_id: str | None = None,
    ) -> list[Store]:
        query = select(Store).order_by(Store.created_at.desc())
        if status is not None:
            query = query.where(Store.verification_status == status)
        if owner_id is not None:
            query = query.where(Store.owner_id == owner_id)
        async with _guard(self.session, "list stores"):
            result = await self.session.execute(query)
            return list(result.scalars().all())

    async def update_status(
        self,
        store_id: str,
        *,
        from_status: VerificationStatus,
        to_status: VerificationStatus,
        expected_version: int | None = None,
    ) -> Store | None:
        stmt = (
            update(Store)
            .where(Store.id == store_id, Store.verification_status == from_status)
            .values(
                verification_status=to_status,
                version=Store.version + 1,
                updated_at=func.now(),
            )
            .execution_options(synchronize_session=False)
        )
        if expected_version is not None:
            stmt = stmt.where(Store.version == expected_version)

        async with _guard(self.session, "update store status"):
            result = await self.session.execute(stmt)
            if result.rowcount == 0:
                await self.session.rollback()
                return None
            await self.session.commit()
        return await self.get(store_id)

    async def count(self, *, status: VerificationStatus | None = None) -> int:
        query = select(func.count()).select_from(Store)
        if status is not None:
            query = query.where(Store.verification_status == status)
        async with _guard(self.session, "count stores"):
            return int((await self.session.execute(query)).scalar_one())


class SqlDocumentRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, document: VerificationDocument) -> VerificationDocument:
        async with _guard(self.session, "save document"):
            self.session.add(document)
            await self.session.commit()
            await self.session.refresh(document)
        return document

    async def get(self, document_id: str) -> VerificationDocument | None:
        async with _guard(self.session, "load document"):
            return await self.session.get(VerificationDocument, document_id, populate_existing=True)

    async def list_for_store(self, store_id: str) -> list[VerificationDocument]:
        query = (
            select(VerificationDocument)
            .where(VerificationDocument.store_id == store_id)
            .order_by(VerificationDocument.created_at.desc())
        )
        async with _guard(self.session, "list documents"):
            result = await self.session.execute(query)
            return list(result.scalars().all())

    async def update_status(
        self,
        document_id: str,
        *,
        from_status: VerificationStatus,
        to_status: VerificationStatus,
    ) -> VerificationDocument | None:
        stmt = (
            update(VerificationDocument)
            .where(VerificationDocument.id == document_id, VerificationDocument.status == from_status)
            .values(status=to_status, updated_at=func.now())
            .execution_options(synchronize_session=False)
        )
        async with _guard(self.session, "update document status"):
            result = await self.session.execute(stmt)
            if result.rowcount == 0:
                await self.session.rollback()
                return None
            await self.session.commit()
        return await self.get(document_id)


class SqlBadgeRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, badge: VerificationBadge) -> VerificationBadge:
        try:
            self.session.add(badge)
            await self.session.commit()
        except IntegrityError as e:
            # Lost a race against another issuance for the same (store, badge_type).
            await self.session.rollback()
            raise ConcurrentModification(
                "Badge was issued concurrently",
                {"store_id": badge.store_id, "badge_type": badge.badge_type.value},
            ) from e
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(f"[db] save badge failed: {type(e).__name__}: {str(e)[:200]}")
            raise PersistenceError("Could not save badge, please try again") from e
        async with _guard(self.session, "load badge"):
            await self.session.refresh(badge)
        return badge

    async def get_by_registration_number(self, registration_number: str) -> VerificationBadge | None:
        query = select(VerificationBadge).where(VerificationBadge.registration_number == registration_number)
        async with _guard(self.session, "load badge"):
            result = await self.session.execute(query)
            return result.scalar_one_or_none()

    async def get_for_store(self, store_id: str, badge_type: BadgeType) -> VerificationBadge | None:
        query = select(VerificationBadge).where(
            VerificationBadge.store_id == store_id,
            VerificationBadge.badge_type == badge_type,
        )
        async with _guard(self.session, "load badge"):
            result = await self.session.execute(query)
            return result.scalar_one_or_none()

    async def list_for_store(self, store_id: str) -> list[VerificationBadge]:
        query = (
            select(VerificationBadge)
            .where(VerificationBadge.store_id == store_id)
            .order_by(VerificationBadge.created_at.asc())
        )
        async with _guard(self.session, "list badges"):
            result = await self.session.execute(query)
            return list(result.scalars().all())


class SqlReportRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, report: ScamReport) -> ScamReport:
        async with _guard(self.session, "save report"):
            self.session.add(report)
            await self.session.commit()
            await self.session.refresh(report)
        return report

    async def get(self, report_id: str) -> ScamReport | None:
        async with _guard(self.session, "load report"):
            return await self.session.get(ScamReport, report_id, populate_existing=True)

    async def list(
        self,
        *,
        status: ReportStatus | None = None,
        reporter_id: str | None = None,
    ) -> list[ScamReport]:
        query = select(ScamReport).order_by(ScamReport.created_at.desc())
        if status is not None:
            query = query.where(ScamReport.status == status)
        if reporter_id is not None:
            query = query.where(ScamReport.reporter_id == reporter_id)
        async with _guard(self.session, "list reports"):
            result = await self.session.execute(query)
            return list(result.scalars().all())

    async def update_status(
        self,
        report_id: str,
        *,
        from_status: ReportStatus,
        to_status: ReportStatus,
    ) -> ScamReport | None:
        stmt = (
            update(ScamReport)
            .where(ScamReport.id == report_id, ScamReport.status == from_status)
            .values(status=to_status, updated_at=func.now())
            .execution_options(synchronize_session=False)
        )
        async with _guard(self.session, "update report status"):
            result = await self.session.execute(stmt)
            if result.rowcount == 0:
                await self.session.rollback()
                return None
            await self.session.commit()
        return await self.get(report_id)

    async def count(self, *, status: ReportStatus | None = None) -> int:
        query = select(func.count()).select_from(ScamReport)
        if status is not None:
            query = query.where(ScamReport.status == status)
        async with _guard(self.session, "count reports"):
            return int((await self.session.execute(query)).scalar_one())
