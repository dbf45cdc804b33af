"""Notification Service Implementations

Delivers credit ledger invariant alerts to operators.
"""

import logging
from typing import Optional
import httpx
from credit_ledger.app.services.notification_service import InvariantAlert, NotificationService

logger = logging.getLogger(__name__)


class LoggingNotificationService(NotificationService):
    """
    Notification service that logs alerts

    Always part of the configured chain, so an alert is never lost even
    when the webhook is down.
    """

    async def send_invariant_alert(self, alert: InvariantAlert) -> bool:
        logger.warning(
            f"[INVARIANT ALERT] Kind: {alert.kind.value}, "
            f"Customer: {alert.customer_id}, "
            f"Sale: {alert.sale_id}, "
            f"Expected: {alert.expected}, "
            f"Actual: {alert.actual}, "
            f"Detail: {alert.detail}"
        )
        return True


class WebhookNotificationService(NotificationService):
    """
    Notification service that sends alerts via HTTP webhook

    Sends JSON payload to configured webhook URL.
    """

    def __init__(self, webhook_url: str, timeout: float = 10.0):
        """
        Initialize webhook notification service

        Args:
            webhook_url: URL to POST alerts to
            timeout: Request timeout in seconds
        """
        self.webhook_url = webhook_url
        self.timeout = timeout

    async def send_invariant_alert(self, alert: InvariantAlert) -> bool:
        """
        Send invariant alert via webhook

        Returns:
            True if webhook call succeeded, False otherwise
        """
        payload = {
            "type": "invariant_alert",
            "kind": alert.kind.value,
            "customer_id": alert.customer_id,
            "sale_id": alert.sale_id,
            "expected": str(alert.expected),
            "actual": str(alert.actual),
            "detail": alert.detail,
            "detected_at": alert.detected_at.isoformat(),
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(self.webhook_url, json=payload)
                response.raise_for_status()
                logger.info(
                    f"Webhook notification sent for {alert.kind.value} of customer "
                    f"{alert.customer_id} to {self.webhook_url}"
                )
                return True
        except httpx.HTTPError as e:
            logger.error(
                f"Failed to send webhook notification for {alert.kind.value} "
                f"of customer {alert.customer_id}: {e}"
            )
            return False


class CompositeNotificationService(NotificationService):
    """Delegates to several services (e.g., log + webhook)"""

    def __init__(self, services: list[NotificationService]):
        self.services = services

    async def send_invariant_alert(self, alert: InvariantAlert) -> bool:
        """
        Returns:
            True if at least one service succeeded, False otherwise
        """
        success = False
        for service in self.services:
            try:
                if await service.send_invariant_alert(alert):
                    success = True
            except Exception as e:
                logger.error(f"Notification service {type(service).__name__} failed: {e}")
        return success


def create_notification_service(webhook_url: Optional[str] = None) -> NotificationService:
    """
    Build the notification chain from configuration

    Args:
        webhook_url: Optional webhook URL. If provided, alerts are logged
                     and posted. Otherwise, only logged.
    """
    services: list[NotificationService] = [LoggingNotificationService()]

    if webhook_url:
        services.append(WebhookNotificationService(webhook_url))

    if len(services) == 1:
        return services[0]

    return CompositeNotificationService(services)
