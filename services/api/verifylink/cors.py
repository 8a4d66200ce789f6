"""CORS for an API that is partly public.

The badge widget script runs on arbitrary storefronts and fetches live status
from /v1/badges, so those paths answer any origin, without credentials.
Every other path keeps the credentialed allow-list from settings.cors_origins.
"""

from starlette.middleware.cors import CORSMiddleware
from starlette.types import ASGIApp, Receive, Scope, Send


class ScopedCORSMiddleware:
    def __init__(self, app: ASGIApp, *, allow_origins: list[str], public_prefixes: tuple[str, ...]):
        self.public_prefixes = tuple(p.rstrip("/") for p in public_prefixes)
        self.public = CORSMiddleware(
            app,
            allow_origins=["*"],
            allow_credentials=False,
            allow_methods=["GET"],
            allow_headers=["*"],
            max_age=3600,
        )
        self.private = CORSMiddleware(
            app,
            allow_origins=allow_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    def is_public(self, path: str) -> bool:
        return any(path == p or path.startswith(f"{p}/") for p in self.public_prefixes)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "http" and self.is_public(scope["path"]):
            await self.public(scope, receive, send)
        else:
            await self.private(scope, receive, send)
