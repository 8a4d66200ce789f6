"""Authenticated actor passed explicitly into every core operation."""

from dataclasses import dataclass

from verifylink.services.errors import Forbidden, Unauthenticated


@dataclass(frozen=True)
class Principal:
    """Identity resolved by the identity provider for the current request."""

    user_id: str
    email: str | None = None
    is_admin: bool = False


def require_principal(principal: Principal | None) -> Principal:
    if principal is None or not principal.user_id:
        raise Unauthenticated("Sign in to continue")
    return principal


def require_admin(principal: Principal | None) -> Principal:
    principal = require_principal(principal)
    if not principal.is_admin:
        raise Forbidden("Administrator access required")
    return principal


def require_owner_or_admin(principal: Principal | None, owner_id: str) -> Principal:
    principal = require_principal(principal)
    if not principal.is_admin and principal.user_id != owner_id:
        raise Forbidden("You do not have access to this store")
    return principal
