"""In-memory repositories and gateways for service and route tests."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from verifylink.models import ScamReport, Store, VerificationBadge, VerificationDocument
from verifylink.services.errors import ConcurrentModification, NotificationDeliveryError, PersistenceError
from verifylink.services.notifications import EmailMessage
from verifylink.services.principal import Principal
from verifylink.services.statuses import BadgeType, ReportStatus, VerificationStatus

OWNER = Principal(user_id="owner-1", email="owner@acme.test")
OTHER_USER = Principal(user_id="user-2", email="someone@else.test")
ADMIN = Principal(user_id="admin-1", email="admin@verify.link.test", is_admin=True)


class Clock:
    """Strictly increasing timestamps, one second apart."""

    def __init__(self):
        self._now = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        self._now += timedelta(seconds=1)
        return self._now


class FakeStoreRepository:
    def __init__(self, clock: Clock | None = None):
        self.clock = clock or Clock()
        self.items: dict[str, Store] = {}
        # Simulates another reviewer winning the race on the next update
        self.lose_next_update = False

    async def create(self, store: Store) -> Store:
        now = self.clock()
        store.created_at = now
        store.updated_at = now
        store.version = store.version or 1
        self.items[store.id] = store
        return store

    async def get(self, store_id: str) -> Store | None:
        return self.items.get(store_id)

    async def list(self, *, status=None, owner_id=None) -> list[Store]:
        return [
            s
            for s in self.items.values()
            if (status is None or s.verification_status == status)
            and (owner_id is None or s.owner_id == owner_id)
        ]

    async def update_status(self, store_id, *, from_status, to_status, expected_version=None):
        store = self.items.get(store_id)
        if self.lose_next_update:
            self.lose_next_update = False
            return None
        if store is None or store.verification_status != from_status:
            return None
        if expected_version is not None and store.version != expected_version:
            return None
        store.verification_status = to_status
        store.version += 1
        store.updated_at = self.clock()
        return store

    async def count(self, *, status=None) -> int:
        return len(await self.list(status=status))

    async def add(self, store_id: str, status: VerificationStatus, *, contact_email: str | None = None) -> Store:
        """Insert a store directly in the given status."""
        return await self.create(
            Store(
                id=store_id,
                name=f"Store {store_id}",
                url=f"https://{store_id}.test",
                owner_id=OWNER.user_id,
                contact_email=contact_email,
                verification_status=status,
                version=1,
            )
        )


class FakeDocumentRepository:
    def __init__(self, clock: Clock | None = None):
        self.clock = clock or Clock()
        self.items: dict[str, VerificationDocument] = {}

    async def create(self, document: VerificationDocument) -> VerificationDocument:
        document.created_at = document.updated_at = self.clock()
        self.items[document.id] = document
        return document

    async def get(self, document_id: str) -> VerificationDocument | None:
        return self.items.get(document_id)

    async def list_for_store(self, store_id: str) -> list[VerificationDocument]:
        return [d for d in self.items.values() if d.store_id == store_id]

    async def update_status(self, document_id, *, from_status, to_status):
        document = self.items.get(document_id)
        if document is None or document.status != from_status:
            return None
        document.status = to_status
        document.updated_at = self.clock()
        return document


class FakeBadgeRepository:
    def __init__(self, clock: Clock | None = None):
        self.clock = clock or Clock()
        self.items: dict[str, VerificationBadge] = {}
        self.create_calls = 0

    async def create(self, badge: VerificationBadge) -> VerificationBadge:
        self.create_calls += 1
        for existing in self.items.values():
            if existing.store_id == badge.store_id and existing.badge_type == badge.badge_type:
                raise ConcurrentModification("Badge already issued")
            if existing.registration_number == badge.registration_number:
                raise ConcurrentModification("Registration number already taken")
        badge.created_at = self.clock()
        self.items[badge.id] = badge
        return badge

    async def get_by_registration_number(self, registration_number: str) -> VerificationBadge | None:
        for badge in self.items.values():
            if badge.registration_number == registration_number:
                return badge
        return None

    async def get_for_store(self, store_id: str, badge_type: BadgeType) -> VerificationBadge | None:
        for badge in self.items.values():
            if badge.store_id == store_id and badge.badge_type == badge_type:
                return badge
        return None

    async def list_for_store(self, store_id: str) -> list[VerificationBadge]:
        return [b for b in self.items.values() if b.store_id == store_id]


class FakeReportRepository:
    def __init__(self, clock: Clock | None = None):
        self.clock = clock or Clock()
        self.items: dict[str, ScamReport] = {}
        self.fail_writes = False

    async def create(self, report: ScamReport) -> ScamReport:
        if self.fail_writes:
            raise PersistenceError("Could not save the report, please try again")
        report.created_at = report.updated_at = self.clock()
        self.items[report.id] = report
        return report

    async def get(self, report_id: str) -> ScamReport | None:
        return self.items.get(report_id)

    async def list(self, *, status=None, reporter_id=None) -> list[ScamReport]:
        return [
            r
            for r in self.items.values()
            if (status is None or r.status == status) and (reporter_id is None or r.reporter_id == reporter_id)
        ]

    async def update_status(self, report_id, *, from_status, to_status):
        report = self.items.get(report_id)
        if report is None or report.status != from_status:
            return None
        report.status = to_status
        report.updated_at = self.clock()
        return report

    async def count(self, *, status: ReportStatus | None = None) -> int:
        return len(await self.list(status=status))


class RecordingGateway:
    """Email gateway that records every send and fails for chosen recipients."""

    def __init__(self, fail_for: set[str] | None = None):
        self.fail_for = fail_for or set()
        self.sent: list[EmailMessage] = []

    @property
    def recipients(self) -> list[str]:
        return [to for message in self.sent for to in message.to]

    async def send(self, message: EmailMessage) -> None:
        self.sent.append(message)
        if set(message.to) & self.fail_for:
            raise NotificationDeliveryError(f"Email API error 500 for {message.to[0]}")


class BrokenStoreRepository(FakeStoreRepository):
    """Store listing blows up, e.g. the database went away mid-request."""

    async def list(self, *, status=None, owner_id=None) -> list[Store]:
        raise PersistenceError("Database unavailable")


class FakeObjectStorage:
    def __init__(self):
        self.uploads: list[tuple[str, str, bytes, str]] = []

    async def upload(self, bucket: str, path: str, data: bytes, content_type: str) -> str:
        self.uploads.append((bucket, path, data, content_type))
        return f"https://storage.test/{bucket}/{path}"
