"""Admin dashboard counters."""

from dataclasses import dataclass

from verifylink.services.principal import Principal, require_admin
from verifylink.services.repositories import ReportRepository, StoreRepository
from verifylink.services.statuses import ReportStatus, VerificationStatus


@dataclass(frozen=True)
class DashboardStats:
    pending_verifications: int
    pending_reports: int
    total_stores: int


class StatsService:
    def __init__(self, stores: StoreRepository, reports: ReportRepository):
        self.stores = stores
        self.reports = reports

    async def get_dashboard_stats(self, principal: Principal | None) -> DashboardStats:
        require_admin(principal)
        return DashboardStats(
            pending_verifications=await self.stores.count(status=VerificationStatus.PENDING),
            pending_reports=await self.reports.count(status=ReportStatus.PENDING),
            total_stores=await self.stores.count(),
        )
