"""Lifecycle enums and the transition tables that govern them.

Store verification:
    pending -> verified
    pending -> rejected
    (verified and rejected are terminal; re-review is not supported)

Documents follow the same table as stores but are reviewed independently.

Scam reports:
    pending  -> reviewed | dismissed
    reviewed -> dismissed
"""

from enum import Enum


class VerificationStatus(str, Enum):
    """Store / document verification status."""

    PENDING = "pending"
    VERIFIED = "verified"
    REJECTED = "rejected"


class ReportStatus(str, Enum):
    """Scam report review status."""

    PENDING = "pending"
    REVIEWED = "reviewed"
    DISMISSED = "dismissed"


class BadgeType(str, Enum):
    """Embeddable badge variants."""

    TOPBAR = "topbar"
    FOOTER = "footer"


class DocumentType(str, Enum):
    """Accepted verification document categories."""

    BUSINESS_LICENSE = "business_license"
    TAX_CERTIFICATE = "tax_certificate"
    IDENTITY_DOCUMENT = "identity_document"
    PROOF_OF_ADDRESS = "proof_of_address"
    OTHER = "other"


VERIFICATION_TRANSITIONS: dict[VerificationStatus, frozenset[VerificationStatus]] = {
    VerificationStatus.PENDING: frozenset({VerificationStatus.VERIFIED, VerificationStatus.REJECTED}),
    VerificationStatus.VERIFIED: frozenset(),
    VerificationStatus.REJECTED: frozenset(),
}

REPORT_TRANSITIONS: dict[ReportStatus, frozenset[ReportStatus]] = {
    ReportStatus.PENDING: frozenset({ReportStatus.REVIEWED, ReportStatus.DISMISSED}),
    ReportStatus.REVIEWED: frozenset({ReportStatus.DISMISSED}),
    ReportStatus.DISMISSED: frozenset(),
}

# Targets an administrator may request through a review action.
REVIEW_TARGETS = frozenset({VerificationStatus.VERIFIED, VerificationStatus.REJECTED})
DEFAULT_BADGE_TYPES = (BadgeType.TOPBAR, BadgeType.FOOTER)


def can_transition(current: VerificationStatus, target: VerificationStatus) -> bool:
    return target in VERIFICATION_TRANSITIONS[current]


def can_transition_report(current: ReportStatus, target: ReportStatus) -> bool:
    return target in REPORT_TRANSITIONS[current]
