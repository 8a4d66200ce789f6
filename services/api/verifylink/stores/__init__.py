"""Data stores for persistence and caching.

Stores handle:
- PostgreSQL: DB session, repositories, ORM operations
- Redis: badge lookup caching

No verification/business rules in stores - those belong in services.
"""
