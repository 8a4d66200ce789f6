"""Shared fixtures: in-memory services and an API client wired to them."""

import email_validator
import pytest
from httpx import ASGITransport, AsyncClient

from fakes import (
    Clock,
    FakeBadgeRepository,
    FakeDocumentRepository,
    FakeObjectStorage,
    FakeReportRepository,
    FakeStoreRepository,
    RecordingGateway,
)
from verifylink.auth import get_principal
from verifylink.main import app
from verifylink.routes import deps
from verifylink.services.badges import BadgeService
from verifylink.services.scam_reports import ScamReportService
from verifylink.services.stats import StatsService
from verifylink.services.verification import VerificationService
from verifylink.settings import Settings

# Addresses in tests use the reserved .test TLD
email_validator.TEST_ENVIRONMENT = True


@pytest.fixture
def settings() -> Settings:
    return Settings(evidence_policy="required", auto_issue_badges=True)


@pytest.fixture
def clock() -> Clock:
    return Clock()


@pytest.fixture
def store_repo(clock: Clock) -> FakeStoreRepository:
    return FakeStoreRepository(clock)


@pytest.fixture
def document_repo(clock: Clock) -> FakeDocumentRepository:
    return FakeDocumentRepository(clock)


@pytest.fixture
def badge_repo(clock: Clock) -> FakeBadgeRepository:
    return FakeBadgeRepository(clock)


@pytest.fixture
def report_repo(clock: Clock) -> FakeReportRepository:
    return FakeReportRepository(clock)


@pytest.fixture
def gateway() -> RecordingGateway:
    return RecordingGateway()


@pytest.fixture
def storage() -> FakeObjectStorage:
    return FakeObjectStorage()


@pytest.fixture
def badge_service(store_repo, badge_repo, settings) -> BadgeService:
    return BadgeService(store_repo, badge_repo, settings)


@pytest.fixture
def verification_service(store_repo, document_repo, badge_service, storage, settings) -> VerificationService:
    return VerificationService(store_repo, document_repo, badge_service, storage=storage, settings=settings)


@pytest.fixture
def report_service(report_repo, store_repo, gateway, storage, settings) -> ScamReportService:
    return ScamReportService(report_repo, store_repo, gateway, storage=storage, settings=settings)


@pytest.fixture
def stats_service(store_repo, report_repo) -> StatsService:
    return StatsService(store_repo, report_repo)


class PrincipalSwitch:
    """Who the API client is signed in as (None = anonymous)."""

    def __init__(self):
        self.current = None


@pytest.fixture
def signed_in() -> PrincipalSwitch:
    return PrincipalSwitch()


@pytest.fixture
async def client(
    signed_in: PrincipalSwitch,
    badge_service: BadgeService,
    verification_service: VerificationService,
    report_service: ScamReportService,
    stats_service: StatsService,
):
    """API client backed by the in-memory services."""
    app.dependency_overrides[get_principal] = lambda: signed_in.current
    app.dependency_overrides[deps.get_badge_service] = lambda: badge_service
    app.dependency_overrides[deps.get_verification_service] = lambda: verification_service
    app.dependency_overrides[deps.get_report_service] = lambda: report_service
    app.dependency_overrides[deps.get_stats_service] = lambda: stats_service
    try:
        async with AsyncClient(
            transport=ASGITransport(app=app),
            base_url="http://test",
        ) as ac:
            yield ac
    finally:
        app.dependency_overrides.clear()
