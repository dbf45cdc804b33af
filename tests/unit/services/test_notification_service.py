"""Unit tests for invariant alert delivery"""

import pytest
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock, patch

import httpx

from credit_ledger.adapter.services.notification_service import (
    CompositeNotificationService,
    LoggingNotificationService,
    WebhookNotificationService,
    create_notification_service,
)
from credit_ledger.app.services.notification_service import AlertKind, InvariantAlert


@pytest.fixture
def alert():
    return InvariantAlert(
        kind=AlertKind.DEBT_UNDERFLOW,
        customer_id="cust_1",
        sale_id=42,
        expected=Decimal("40000.00"),
        actual=Decimal("0"),
    )


def test_factory_without_webhook_logs_only():
    assert isinstance(create_notification_service(None), LoggingNotificationService)


def test_factory_with_webhook_is_composite():
    service = create_notification_service("https://hooks.example.com/credit")

    assert isinstance(service, CompositeNotificationService)
    assert isinstance(service.services[1], WebhookNotificationService)


@pytest.mark.asyncio
class TestNotificationDelivery:

    async def test_logging_service(self, alert, caplog):
        with caplog.at_level("WARNING"):
            assert await LoggingNotificationService().send_invariant_alert(alert) is True
        assert "debt_underflow" in caplog.text

    async def test_webhook_posts_payload(self, alert):
        def handler(request: httpx.Request):
            assert request.url == "https://hooks.example.com/credit"
            return httpx.Response(204)

        transport = httpx.MockTransport(handler)
        real_client = httpx.AsyncClient

        with patch(
            "credit_ledger.adapter.services.notification_service.httpx.AsyncClient",
            side_effect=lambda **kwargs: real_client(transport=transport, **kwargs),
        ):
            sent = await WebhookNotificationService(
                "https://hooks.example.com/credit"
            ).send_invariant_alert(alert)

        assert sent is True

    async def test_webhook_failure_returns_false(self, alert):
        transport = httpx.MockTransport(lambda request: httpx.Response(500))
        real_client = httpx.AsyncClient

        with patch(
            "credit_ledger.adapter.services.notification_service.httpx.AsyncClient",
            side_effect=lambda **kwargs: real_client(transport=transport, **kwargs),
        ):
            sent = await WebhookNotificationService(
                "https://hooks.example.com/credit"
            ).send_invariant_alert(alert)

        assert sent is False

    async def test_composite_survives_failing_service(self, alert):
        failing = MagicMock()
        failing.send_invariant_alert = AsyncMock(side_effect=RuntimeError("down"))
        working = MagicMock()
        working.send_invariant_alert = AsyncMock(return_value=True)

        sent = await CompositeNotificationService([failing, working]).send_invariant_alert(alert)

        assert sent is True
        working.send_invariant_alert.assert_called_once_with(alert)
