"""Credit Sale Repository Interface

Defines the contract for credit sale persistence operations.
"""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Optional
from credit_ledger.domain.credit_sale import CreditSale, PaymentStatus


class SaleNotFoundError(Exception):
    """Raised when a balance update targets a sale that does not exist"""

    def __init__(self, sale_id: int):
        super().__init__(f"Credit sale {sale_id} not found")
        self.sale_id = sale_id


class VersionConflictError(Exception):
    """Raised when a sale changed since its version token was read"""

    def __init__(self, sale_id: int, expected_version: int):
        super().__init__(
            f"Credit sale {sale_id} was modified concurrently (expected version {expected_version})"
        )
        self.sale_id = sale_id
        self.expected_version = expected_version


class CreditSaleRepository(ABC):
    """
    Repository interface for CreditSale persistence

    Balance updates are conditional writes gated on the row version
    (optimistic concurrency). Concurrent writers to the same sale are
    detected instead of silently overwriting each other.
    """

    @abstractmethod
    async def get_by_id(self, sale_id: int) -> Optional[CreditSale]:
        """
        Retrieve sale by ID

        The returned sale carries the version token to pass to
        update_balances.

        Args:
            sale_id: Credit sale ID

        Returns:
            CreditSale if found, None otherwise
        """
        pass

    @abstractmethod
    async def create(self, sale: CreditSale) -> CreditSale:
        """
        Create a new credit sale

        Args:
            sale: CreditSale entity to persist

        Returns:
            Created CreditSale with generated ID
        """
        pass

    @abstractmethod
    async def update_balances(
        self,
        sale_id: int,
        expected_version: int,
        new_paid: Decimal,
        new_pending: Decimal,
        new_status: PaymentStatus,
    ) -> int:
        """
        Conditionally update the balances of a sale

        Args:
            sale_id: Credit sale ID
            expected_version: Version token read together with the balances
            new_paid: New amount_paid
            new_pending: New amount_pending
            new_status: New payment status

        Returns:
            The new version token

        Raises:
            SaleNotFoundError: If the sale does not exist
            VersionConflictError: If the sale version no longer matches
        """
        pass

    @abstractmethod
    async def list_by_customer(
        self,
        customer_id: str,
        include_settled: bool = False,
        limit: int = 50,
        offset: int = 0,
    ) -> tuple[list[CreditSale], int]:
        """
        Retrieve a customer's credit sales, newest first

        Args:
            customer_id: Customer identifier
            include_settled: If False, only pending and partial sales
            limit: Maximum number of sales to return
            offset: Number of sales to skip

        Returns:
            Tuple of (list of CreditSale, total count)
        """
        pass

    @abstractmethod
    async def get_pending_sum_by_customer(self, customer_id: str) -> Decimal:
        """Sum of amount_pending over the customer's unpaid sales"""
        pass

    @abstractmethod
    async def get_unsettled(self, limit: int = 1000, offset: int = 0) -> list[CreditSale]:
        """Sales that are pending or partial, oldest first"""
        pass
