"""Credit Limit Guard

Decides whether a customer may take on additional debt. Consulted before
a credit sale is created; it never writes.
"""

from decimal import Decimal
from libs.result import Result, Return, Error
from credit_ledger.app.repositories.credit_account_repository import CreditAccountRepository
from credit_ledger.domain.credit_policy import UNLIMITED, available_credit, is_within_limit
from .dtos import CreditAuthorizationDTO


class CreditLimitGuard:
    """
    Read-only credit limit check

    Policy:
    - credit_limit == 0 means unlimited: always allowed
    - otherwise allowed iff current_debt + amount <= credit_limit
    - a denial is a hard block; there is no override here

    A customer without an account is evaluated as a fresh account
    (unlimited, no debt).
    """

    def __init__(self, account_repo: CreditAccountRepository):
        self.account_repo = account_repo

    async def evaluate(self, customer_id: str, amount: Decimal) -> CreditAuthorizationDTO:
        account = await self.account_repo.get_by_customer_id(customer_id)
        credit_limit = account.credit_limit if account else Decimal("0")
        current_debt = account.current_debt if account else Decimal("0")

        approved = is_within_limit(credit_limit, current_debt, amount)
        available = available_credit(credit_limit, current_debt)

        if available == UNLIMITED:
            message = "Unlimited credit"
        elif approved:
            message = "Credit available"
        else:
            message = f"Credit limit exceeded. Available: {available}"

        return CreditAuthorizationDTO(
            customer_id=customer_id,
            approved=approved,
            requested_amount=amount,
            credit_limit=credit_limit,
            current_debt=current_debt,
            available_credit=available,
            message=message,
        )

    async def authorize(self, customer_id: str, amount: Decimal) -> Result[CreditAuthorizationDTO]:
        """
        Allow or deny additional debt for a customer

        Returns:
            Result[CreditAuthorizationDTO]: Allowed decision, or
            CREDIT_LIMIT_EXCEEDED error
        """
        decision = await self.evaluate(customer_id, amount)
        if not decision.approved:
            return Return.err(
                Error(
                    code="CREDIT_LIMIT_EXCEEDED",
                    message=decision.message,
                    reason=(
                        f"credit_limit={decision.credit_limit}, "
                        f"current_debt={decision.current_debt}, requested={amount}"
                    ),
                )
            )
        return Return.ok(decision)
