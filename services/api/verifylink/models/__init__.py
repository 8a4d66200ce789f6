"""SQLAlchemy ORM models.

Models represent database tables:
- stores: Merchant stores undergoing verification
- verification_documents: Supporting documents attached to a store
- verification_badges: Badges issued to verified stores
- scam_reports: User-filed reports against buyers
"""

from verifylink.models.store import Store
from verifylink.models.document import VerificationDocument
from verifylink.models.badge import VerificationBadge
from verifylink.models.scam_report import ScamReport

__all__ = ["Store", "VerificationDocument", "VerificationBadge", "ScamReport"]
