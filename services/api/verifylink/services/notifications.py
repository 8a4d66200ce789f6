"""Scam alert fan-out to verified stores.

Flow:
1. Load all stores with verification_status == verified
2. Skip stores without a contact email
3. Send one email per remaining store, concurrently (bounded by
   settings.notification_max_concurrency)
4. Collect per-recipient failures into a FanoutResult

Each send succeeds or fails on its own. Nothing here raises to the caller for
a delivery problem: failures are logged and reported in the result.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from html import escape
import logging
from typing import Protocol

import httpx

from verifylink.services.errors import NotificationDeliveryError
from verifylink.services.repositories import StoreRepository
from verifylink.services.statuses import VerificationStatus
from verifylink.settings import Settings, get_settings

logger = logging.getLogger("uvicorn.error")


@dataclass(frozen=True)
class EmailMessage:
    sender: str
    to: list[str]
    subject: str
    html: str

    def to_payload(self) -> dict[str, object]:
        return {"from": self.sender, "to": self.to, "subject": self.subject, "html": self.html}


@dataclass(frozen=True)
class FailedRecipient:
    store_id: str
    email: str
    error: str


@dataclass
class FanoutResult:
    """Delivery summary for one scam report."""

    attempted: int = 0
    delivered: list[str] = field(default_factory=list)
    failed: list[FailedRecipient] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    error: str | None = None

    @property
    def outcome(self) -> str:
        if self.error is not None:
            return "failed"
        if self.attempted == 0:
            return "none"
        if not self.failed:
            return "delivered"
        if not self.delivered:
            return "failed"
        return "partial"


class NotificationGateway(Protocol):
    async def send(self, message: EmailMessage) -> None: ...


class ResendEmailGateway:
    """Transactional email via the Resend HTTP API."""

    def __init__(self, settings: Settings | None = None, http_client: httpx.AsyncClient | None = None):
        self.settings = settings or get_settings()
        self._http_client = http_client

    async def send(self, message: EmailMessage) -> None:
        """Send one message.

        Raises:
            NotificationDeliveryError: Missing API key, transport error or non-2xx response.
        """
        if not self.settings.resend_api_key:
            raise NotificationDeliveryError("RESEND_API_KEY is not set")

        headers = {
            "Authorization": f"Bearer {self.settings.resend_api_key}",
            "Content-Type": "application/json",
        }
        try:
            if self._http_client is not None:
                resp = await self._http_client.post(
                    self.settings.resend_api_url, json=message.to_payload(), headers=headers
                )
            else:
                async with httpx.AsyncClient(timeout=self.settings.notification_timeout_seconds) as client:
                    resp = await client.post(
                        self.settings.resend_api_url, json=message.to_payload(), headers=headers
                    )
        except httpx.HTTPError as e:
            raise NotificationDeliveryError(f"Email transport error: {type(e).__name__}") from e

        if resp.status_code >= 300:
            raise NotificationDeliveryError(
                f"Email API error {resp.status_code}: {resp.text[:200]}",
                {"status_code": resp.status_code},
            )


def render_scam_alert(reported_email: str, description: str) -> str:
    """HTML body of the alert sent to each verified store."""
    return (
        "<h2>New Scam Report Alert</h2>"
        "<p>A new customer has been reported for potential fraudulent activity:</p>"
        "<ul>"
        f"<li><strong>Reported Email:</strong> {escape(reported_email)}</li>"
        f"<li><strong>Description:</strong> {escape(description)}</li>"
        "</ul>"
        "<p>Please be cautious if you receive orders from this email address.</p>"
        "<p>This is an automated notification from Verify.link.</p>"
    )


async def notify_verified_stores(
    reported_email: str,
    description: str,
    *,
    stores: StoreRepository,
    gateway: NotificationGateway,
    settings: Settings | None = None,
) -> FanoutResult:
    """Send a scam alert to every verified store with a contact email.

    Args:
        reported_email: Address of the reported buyer.
        description: Report description.
        stores: Store repository used to find recipients.
        gateway: Email gateway.

    Returns:
        FanoutResult with delivered store ids and failed recipients.
    """
    settings = settings or get_settings()
    result = FanoutResult()

    recipients: list[tuple[str, str]] = []
    for store in await stores.list(status=VerificationStatus.VERIFIED):
        if store.contact_email:
            recipients.append((store.id, store.contact_email))
        else:
            result.skipped.append(store.id)

    if not recipients:
        logger.info(f"[notify] no reachable verified stores skipped={len(result.skipped)}")
        return result

    html = render_scam_alert(reported_email, description)
    sem = asyncio.Semaphore(settings.notification_max_concurrency)

    async def _send(email: str) -> None:
        async with sem:
            await gateway.send(
                EmailMessage(
                    sender=settings.notification_from,
                    to=[email],
                    subject=settings.notification_subject,
                    html=html,
                )
            )

    result.attempted = len(recipients)
    outcomes = await asyncio.gather(*(_send(email) for _, email in recipients), return_exceptions=True)

    for (store_id, email), outcome in zip(recipients, outcomes):
        if isinstance(outcome, BaseException):
            if isinstance(outcome, asyncio.CancelledError):
                raise outcome
            logger.warning(f"[notify] delivery failed store_id={store_id}: {str(outcome)[:200]}")
            result.failed.append(FailedRecipient(store_id=store_id, email=email, error=str(outcome)[:200]))
        else:
            result.delivered.append(store_id)

    logger.info(
        "[notify] done attempted=%s delivered=%s failed=%s skipped=%s",
        result.attempted,
        len(result.delivered),
        len(result.failed),
        len(result.skipped),
    )
    return result
