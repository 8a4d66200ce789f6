"""Request-scoped wiring of repositories, gateways and services.

Every service built here shares the request's database session. Tests replace
these with app.dependency_overrides.
"""

from collections.abc import AsyncGenerator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from verifylink.services.badges import BadgeService
from verifylink.services.notifications import NotificationGateway, ResendEmailGateway
from verifylink.services.scam_reports import ScamReportService
from verifylink.services.stats import StatsService
from verifylink.services.storage import ObjectStorage, SupabaseStorageGateway
from verifylink.services.verification import VerificationService
from verifylink.stores.postgres import get_session
from verifylink.stores.repositories import (
    SqlBadgeRepository,
    SqlDocumentRepository,
    SqlReportRepository,
    SqlStoreRepository,
)


async def db_session() -> AsyncGenerator[AsyncSession, None]:
    async with get_session() as session:
        yield session


def get_notification_gateway() -> NotificationGateway:
    return ResendEmailGateway()


def get_object_storage() -> ObjectStorage:
    return SupabaseStorageGateway()


def get_badge_service(session: AsyncSession = Depends(db_session)) -> BadgeService:
    return BadgeService(SqlStoreRepository(session), SqlBadgeRepository(session))


def get_verification_service(
    session: AsyncSession = Depends(db_session),
    badges: BadgeService = Depends(get_badge_service),
    storage: ObjectStorage = Depends(get_object_storage),
) -> VerificationService:
    return VerificationService(
        SqlStoreRepository(session),
        SqlDocumentRepository(session),
        badges,
        storage=storage,
    )


def get_report_service(
    session: AsyncSession = Depends(db_session),
    gateway: NotificationGateway = Depends(get_notification_gateway),
    storage: ObjectStorage = Depends(get_object_storage),
) -> ScamReportService:
    return ScamReportService(
        SqlReportRepository(session),
        SqlStoreRepository(session),
        gateway,
        storage=storage,
    )


def get_stats_service(session: AsyncSession = Depends(db_session)) -> StatsService:
    return StatsService(SqlStoreRepository(session), SqlReportRepository(session))
