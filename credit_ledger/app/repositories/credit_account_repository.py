"""Credit Account Repository Interface

Defines the contract for credit account persistence operations.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional
from credit_ledger.domain.credit_account import CreditAccount


class AccountNotFoundError(Exception):
    """Raised when a debt change targets a customer without a credit account"""

    def __init__(self, customer_id: str):
        super().__init__(f"Credit account not found for customer {customer_id}")
        self.customer_id = customer_id


@dataclass(frozen=True)
class DebtAdjustment:
    """Outcome of an atomic debt increment/decrement"""
    customer_id: str
    requested_delta: Decimal
    current_debt: Decimal
    underflow: bool = False


class CreditAccountRepository(ABC):
    """
    Repository interface for CreditAccount persistence

    Debt changes are single conditional UPDATE statements so that two
    writers never lose each other's increments.
    """

    @abstractmethod
    async def get_by_customer_id(self, customer_id: str) -> Optional[CreditAccount]:
        """
        Retrieve account by customer ID

        Args:
            customer_id: Customer identifier

        Returns:
            CreditAccount if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_or_create(self, customer_id: str) -> CreditAccount:
        """
        Retrieve the customer's account, creating it if missing

        New accounts start with credit_limit 0 (unlimited) and no debt.
        """
        pass

    @abstractmethod
    async def adjust_debt(
        self, customer_id: str, delta: Decimal, respect_limit: bool = False
    ) -> Optional[DebtAdjustment]:
        """
        Atomically add delta to current_debt

        Debt never goes negative: a decrement below zero clamps to 0 and
        the result is flagged with underflow=True.

        Args:
            customer_id: Customer identifier
            delta: Signed amount to add
            respect_limit: If True, only apply when the new debt stays within
                           a non-zero credit_limit

        Returns:
            DebtAdjustment with the new debt, or None if respect_limit
            rejected the change

        Raises:
            AccountNotFoundError: If the account does not exist
        """
        pass

    @abstractmethod
    async def set_credit_limit(self, customer_id: str, new_limit: Decimal) -> CreditAccount:
        """
        Set the credit limit, creating the account if missing

        Existing debt is not touched; the account may end up over its limit.
        """
        pass

    @abstractmethod
    async def list_debtors(self, limit: int = 50, offset: int = 0) -> tuple[list[CreditAccount], int]:
        """
        Retrieve accounts with current_debt > 0, highest debt first

        Returns:
            Tuple of (list of CreditAccount, total count)
        """
        pass

    @abstractmethod
    async def get_all(self, limit: int = 1000, offset: int = 0) -> list[CreditAccount]:
        """Retrieve a page of accounts ordered by ID"""
        pass
