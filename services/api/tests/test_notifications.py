import httpx
import pytest

from fakes import FakeStoreRepository, RecordingGateway
from verifylink.services.errors import NotificationDeliveryError
from verifylink.services.notifications import (
    EmailMessage,
    FanoutResult,
    ResendEmailGateway,
    notify_verified_stores,
    render_scam_alert,
)
from verifylink.services.statuses import VerificationStatus
from verifylink.settings import Settings


@pytest.mark.asyncio
async def test_partial_failure_is_reported_per_recipient():
    stores = FakeStoreRepository()
    await stores.add("v1", VerificationStatus.VERIFIED, contact_email="v1@shop.test")
    await stores.add("v2", VerificationStatus.VERIFIED, contact_email="v2@shop.test")
    gateway = RecordingGateway(fail_for={"v2@shop.test"})

    result = await notify_verified_stores(
        "bad@scammer.test", "Chargeback fraud", stores=stores, gateway=gateway, settings=Settings()
    )

    assert result.attempted == 2
    assert result.delivered == ["v1"]
    assert [f.store_id for f in result.failed] == ["v2"]
    assert "500" in result.failed[0].error
    assert result.outcome == "partial"


@pytest.mark.asyncio
async def test_stores_without_contact_email_are_skipped():
    stores = FakeStoreRepository()
    await stores.add("v1", VerificationStatus.VERIFIED, contact_email="v1@shop.test")
    await stores.add("v2", VerificationStatus.VERIFIED)
    gateway = RecordingGateway()

    result = await notify_verified_stores(
        "bad@scammer.test", "Chargeback fraud", stores=stores, gateway=gateway, settings=Settings()
    )

    assert gateway.recipients == ["v1@shop.test"]
    assert result.skipped == ["v2"]
    assert result.outcome == "delivered"


@pytest.mark.asyncio
async def test_messages_use_configured_sender_and_subject():
    stores = FakeStoreRepository()
    await stores.add("v1", VerificationStatus.VERIFIED, contact_email="v1@shop.test")
    gateway = RecordingGateway()
    settings = Settings(notification_from="Alerts <alerts@verify.link.test>", notification_subject="Heads up")

    await notify_verified_stores("bad@scammer.test", "Chargeback fraud", stores=stores, gateway=gateway, settings=settings)

    message = gateway.sent[0]
    assert message.sender == "Alerts <alerts@verify.link.test>"
    assert message.subject == "Heads up"
    assert message.to == ["v1@shop.test"]


def test_render_scam_alert_escapes_user_input():
    html = render_scam_alert("bad@scammer.test", "<script>alert(1)</script>")
    assert "<script>" not in html
    assert "&lt;script&gt;" in html
    assert "bad@scammer.test" in html


def test_fanout_outcome():
    assert FanoutResult().outcome == "none"
    assert FanoutResult(error="boom").outcome == "failed"
    assert FanoutResult(attempted=1, delivered=["a"]).outcome == "delivered"


@pytest.mark.asyncio
async def test_resend_gateway_posts_message():
    captured: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(200, json={"id": "email-1"})

    settings = Settings(RESEND_API_KEY="re_test")
    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http_client:
        gateway = ResendEmailGateway(settings, http_client=http_client)
        await gateway.send(EmailMessage(sender="a@b.test", to=["c@d.test"], subject="s", html="<p>x</p>"))

    assert captured[0].headers["Authorization"] == "Bearer re_test"
    assert str(captured[0].url) == settings.resend_api_url


@pytest.mark.asyncio
async def test_resend_gateway_raises_on_error_status():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(422, json={"message": "invalid to"})

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http_client:
        gateway = ResendEmailGateway(Settings(RESEND_API_KEY="re_test"), http_client=http_client)
        with pytest.raises(NotificationDeliveryError) as exc:
            await gateway.send(EmailMessage(sender="a@b.test", to=["c@d.test"], subject="s", html="x"))
    assert exc.value.detail["status_code"] == 422


@pytest.mark.asyncio
async def test_resend_gateway_requires_api_key():
    gateway = ResendEmailGateway(Settings(RESEND_API_KEY=""))
    with pytest.raises(NotificationDeliveryError):
        await gateway.send(EmailMessage(sender="a@b.test", to=["c@d.test"], subject="s", html="x"))
