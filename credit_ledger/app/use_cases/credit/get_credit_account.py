"""GetCreditAccount Use Case

Retrieves a customer's credit position.
"""

from decimal import Decimal
from libs.result import Result, Return, Error
from credit_ledger.app.repositories.credit_account_repository import CreditAccountRepository
from credit_ledger.domain.credit_policy import DEFAULT_ALERT_THRESHOLD, DEFAULT_CRITICAL_THRESHOLD
from .dtos import CreditAccountDTO
from .mappers import to_credit_account_dto


class GetCreditAccount:
    """
    Get Credit Account Use Case

    Read-only operation returning limit, debt, available credit and
    the risk tier for a customer.
    """

    def __init__(
        self,
        account_repo: CreditAccountRepository,
        alert_threshold: Decimal = DEFAULT_ALERT_THRESHOLD,
        critical_threshold: Decimal = DEFAULT_CRITICAL_THRESHOLD,
    ):
        self.account_repo = account_repo
        self.alert_threshold = alert_threshold
        self.critical_threshold = critical_threshold

    async def execute(self, customer_id: str) -> Result[CreditAccountDTO]:
        """
        Execute get credit account operation

        Args:
            customer_id: The customer identifier

        Returns:
            Result[CreditAccountDTO]: Success with the account or error

        Errors:
            CUSTOMER_NOT_FOUND: Customer has no credit account
        """
        account = await self.account_repo.get_by_customer_id(customer_id)

        if not account:
            return Return.err(
                Error(
                    code="CUSTOMER_NOT_FOUND",
                    message=f"No credit account found for customer {customer_id}",
                )
            )

        return Return.ok(
            to_credit_account_dto(account, self.alert_threshold, self.critical_threshold)
        )
