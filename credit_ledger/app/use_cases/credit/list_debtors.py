"""
List Debtors Use Case

Retrieves customers with outstanding debt, largest debt first.
"""
from decimal import Decimal
from libs.result import Result, Return
from credit_ledger.app.repositories.credit_account_repository import CreditAccountRepository
from credit_ledger.domain.credit_policy import DEFAULT_ALERT_THRESHOLD, DEFAULT_CRITICAL_THRESHOLD
from .dtos import ListDebtorsResponseDTO
from .mappers import to_credit_account_dto


class ListDebtors:
    """
    Use case: List debtors

    Only accounts with current_debt > 0 are returned, ordered by
    current_debt DESC with ties broken by account id.
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

    async def execute(self, limit: int = 50, offset: int = 0) -> Result[ListDebtorsResponseDTO]:
        """
        List debtors with pagination.

        Args:
            limit: Maximum number of accounts to return (default 50)
            offset: Number of accounts to skip (default 0)

        Returns:
            Result[ListDebtorsResponseDTO]: Paginated debtor list
        """
        accounts, total = await self.account_repo.list_debtors(limit=limit, offset=offset)

        debtors = [
            to_credit_account_dto(account, self.alert_threshold, self.critical_threshold)
            for account in accounts
        ]

        return Return.ok(
            ListDebtorsResponseDTO(
                debtors=debtors,
                total=total,
                total_debt=sum((d.current_debt for d in debtors), Decimal("0")),
                limit=limit,
                offset=offset,
            )
        )
