"""Pydantic schemas for API request/response validation."""

from verifylink.schemas.common import ErrorDetail, ErrorResponse
from verifylink.schemas.verification import (
    BadgeIssueRequest,
    BadgeOut,
    DocumentCreate,
    DocumentOut,
    StatusUpdate,
    StoreCreate,
    StoreDetailOut,
    StoreOut,
)
from verifylink.schemas.reports import (
    EvidenceOut,
    FanoutOut,
    PublicBadgeOut,
    ReportCreate,
    ReportOut,
    ReportStatusUpdate,
    ReportSubmissionOut,
    StatsOut,
)

__all__ = [
    "ErrorDetail",
    "ErrorResponse",
    "BadgeIssueRequest",
    "BadgeOut",
    "DocumentCreate",
    "DocumentOut",
    "StatusUpdate",
    "StoreCreate",
    "StoreDetailOut",
    "StoreOut",
    "EvidenceOut",
    "FanoutOut",
    "PublicBadgeOut",
    "ReportCreate",
    "ReportOut",
    "ReportStatusUpdate",
    "ReportSubmissionOut",
    "StatsOut",
]
