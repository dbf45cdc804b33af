"""Notification Service Interface

Defines the contract for alerting about ledger invariant breaches.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


class AlertKind(str, Enum):
    """Kinds of invariant breach"""
    DEBT_UNDERFLOW = "debt_underflow"      # Payment would have pushed debt below zero
    DEBT_MISMATCH = "debt_mismatch"        # current_debt != sum of pending amounts
    PAYMENT_MISMATCH = "payment_mismatch"  # amount_paid != sum of payments


class InvariantAlert(BaseModel):
    """A detected breach of a credit ledger invariant"""

    kind: AlertKind
    customer_id: str
    sale_id: Optional[int] = None
    expected: Decimal = Field(..., description="Value implied by the source records")
    actual: Decimal = Field(..., description="Value stored in the derived record")
    detail: Optional[str] = None
    detected_at: datetime = Field(default_factory=datetime.utcnow)


class NotificationService(ABC):
    """
    Abstract notification service for sending alerts

    Implementations can send notifications via:
    - Log
    - Webhook (HTTP POST)
    """

    @abstractmethod
    async def send_invariant_alert(self, alert: InvariantAlert) -> bool:
        """
        Send alert for a detected invariant breach

        Args:
            alert: InvariantAlert to report

        Returns:
            True if notification sent successfully, False otherwise
        """
        pass
