#!/usr/bin/env python3
"""Seed database with demo data.

Creates:
- A verified demo store with topbar + footer badges
- A pending store awaiting review
- A rejected store

Goes through the same services the API uses, so statuses and badges follow
the normal workflow. Idempotent: stores are matched by (owner, name).

Usage:
    cd services/api
    python -m scripts.seed
"""

import asyncio
import os
import sys

# Add parent to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dotenv import load_dotenv

load_dotenv()

from verifylink.services.badges import BadgeService  # noqa: E402
from verifylink.services.principal import Principal  # noqa: E402
from verifylink.services.statuses import VerificationStatus  # noqa: E402
from verifylink.services.verification import VerificationService  # noqa: E402
from verifylink.stores.postgres import close_db, create_tables, get_session, init_db  # noqa: E402
from verifylink.stores.repositories import (  # noqa: E402
    SqlBadgeRepository,
    SqlDocumentRepository,
    SqlStoreRepository,
)

SEED_OWNER = Principal(user_id="seed-owner", email="owner@verify.link.test")
SEED_ADMIN = Principal(user_id="seed-admin", email="admin@verify.link.test", is_admin=True)

DEMO_STORES = [
    {
        "name": "Demo Store",
        "url": "https://demo-store.test",
        "contact_email": "alerts@demo-store.example.com",
        "business_name": "Demo Store LLC",
        "business_type": "LLC",
        "status": VerificationStatus.VERIFIED,
        "documents": [("business_license", "https://files.verify.link.test/demo/license.pdf")],
    },
    {
        "name": "Acme",
        "url": "https://acme.test",
        "contact_email": "security@acme.example.com",
        "business_name": "Acme Corporation",
        "business_type": "Corporation",
        "status": VerificationStatus.PENDING,
        "documents": [("business_license", "https://files.verify.link.test/acme/license.pdf")],
    },
    {
        "name": "Totally Legit Deals",
        "url": "https://legit-deals.test",
        "contact_email": None,
        "business_name": None,
        "business_type": None,
        "status": VerificationStatus.REJECTED,
        "documents": [],
    },
]


async def seed_database() -> None:
    """Seed demo stores through the verification workflow."""
    await init_db()
    await create_tables()

    try:
        async with get_session() as session:
            stores = SqlStoreRepository(session)
            badges = BadgeService(stores, SqlBadgeRepository(session))
            service = VerificationService(stores, SqlDocumentRepository(session), badges)

            existing = {s.name: s for s in await stores.list(owner_id=SEED_OWNER.user_id)}

            for definition in DEMO_STORES:
                store = existing.get(definition["name"])
                if store is not None:
                    print(f"  ⏭️  {store.name} ({store.verification_status.value}, exists)")
                    continue

                store = await service.submit_store(
                    SEED_OWNER,
                    name=definition["name"],
                    url=definition["url"],
                    contact_email=definition["contact_email"],
                    business_name=definition["business_name"],
                    business_type=definition["business_type"],
                )
                for document_type, document_url in definition["documents"]:
                    await service.add_document(
                        SEED_OWNER, store.id, document_type=document_type, document_url=document_url
                    )
                if definition["status"] != VerificationStatus.PENDING:
                    store = await service.set_verification_status(SEED_ADMIN, store.id, definition["status"])
                print(f"  ✅ {store.name} ({store.verification_status.value})")

                for embed in await badges.list_badges(SEED_ADMIN, store.id):
                    print(f"     🏷️  {embed.badge.badge_type.value}: {embed.badge.registration_number}")
    finally:
        await close_db()


if __name__ == "__main__":
    asyncio.run(seed_database())
