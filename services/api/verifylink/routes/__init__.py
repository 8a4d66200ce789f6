"""API routes."""

from fastapi import APIRouter

from verifylink.routes import admin, badges, reports, stores

api_router = APIRouter()

# Store owners: verification requests, documents, badge codes
api_router.include_router(stores.router, prefix="/v1/stores", tags=["stores"])

# Scam reports (authenticated users)
api_router.include_router(reports.router, prefix="/v1/reports", tags=["reports"])

# Public badge lookups for embedded widgets
api_router.include_router(badges.router, prefix="/v1/badges", tags=["badges"])

# Admin review
api_router.include_router(admin.router, prefix="/v1/admin", tags=["admin"])
