"""CheckCreditAvailability Use Case

Answers whether a customer could take a credit sale of a given amount
right now, without reserving anything.
"""

from decimal import Decimal
from libs.result import Result, Return, Error
from credit_ledger.app.repositories.credit_account_repository import CreditAccountRepository
from .credit_limit_guard import CreditLimitGuard
from .dtos import CreditAuthorizationDTO


class CheckCreditAvailability:
    """
    Use Case: Check credit availability

    A denied check is still a successful result (approved=False); the
    caller decides whether to offer the sale. Nothing is written, so a
    later credit sale may still be rejected if debt grows in between.
    """

    def __init__(self, account_repo: CreditAccountRepository):
        self.guard = CreditLimitGuard(account_repo)

    async def execute(self, customer_id: str, amount: Decimal) -> Result[CreditAuthorizationDTO]:
        if amount <= 0:
            return Return.err(
                Error(
                    code="INVALID_AMOUNT",
                    message="Amount must be greater than 0",
                    reason=f"amount={amount}",
                )
            )

        decision = await self.guard.evaluate(customer_id, amount)
        return Return.ok(decision)
