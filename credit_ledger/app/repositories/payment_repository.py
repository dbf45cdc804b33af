"""Payment Repository Interface

Defines the contract for the append-only payment ledger.
"""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Optional
from credit_ledger.domain.payment import Payment


class PaymentRepository(ABC):
    """
    Repository interface for Payment persistence

    Payments are immutable and append-only for audit trail.
    Idempotency is enforced via unique idempotency_key.
    """

    @abstractmethod
    async def append(self, payment: Payment) -> Payment:
        """
        Append a payment to the ledger

        If a payment with the same idempotency_key already exists, that
        original payment is returned and nothing is inserted.

        Args:
            payment: Payment entity to persist

        Returns:
            The created payment, or the original one on retry

        Raises:
            IntegrityError: If a concurrent writer inserted the same key first
        """
        pass

    @abstractmethod
    async def get_by_idempotency_key(self, idempotency_key: str) -> Optional[Payment]:
        """
        Retrieve payment by idempotency key

        Args:
            idempotency_key: Unique idempotency key

        Returns:
            Payment if found, None otherwise
        """
        pass

    @abstractmethod
    async def list_by_sale(self, sale_id: int) -> list[Payment]:
        """
        Retrieve all payments of a sale in chronological order

        Args:
            sale_id: Credit sale ID

        Returns:
            Payments ordered by created_at ascending
        """
        pass

    @abstractmethod
    async def list_by_customer(
        self, customer_id: str, limit: int = 50, offset: int = 0
    ) -> tuple[list[Payment], int]:
        """
        Retrieve a customer's payments, newest first

        Returns:
            Tuple of (list of Payment, total count)
        """
        pass

    @abstractmethod
    async def get_paid_sum_by_sale(self, sale_id: int) -> Decimal:
        """Sum of all payment amounts recorded for a sale"""
        pass
