"""UpdateCreditLimit Use Case

Changes the credit limit of a customer. The limit only gates future
credit sales; existing debt is never touched.
"""

import logging
from decimal import Decimal
from libs.result import Result, Return, Error
from credit_ledger.app.services.unit_of_work import UnitOfWork
from credit_ledger.app.repositories.credit_account_repository import CreditAccountRepository
from credit_ledger.domain.credit_policy import DEFAULT_ALERT_THRESHOLD, DEFAULT_CRITICAL_THRESHOLD
from .dtos import UpdateCreditLimitCommandDTO, CreditLimitResponseDTO
from .mappers import to_credit_account_dto

logger = logging.getLogger(__name__)


class UpdateCreditLimit:
    """
    Use Case: Update a customer's credit limit

    Business Rules:
    1. new_limit must be >= 0 (0 means unlimited)
    2. The account is opened if the customer has none
    3. Lowering the limit below current debt is allowed; the account is
       then over limit and future credit sales are blocked
    """

    def __init__(
        self,
        uow: UnitOfWork,
        account_repo: CreditAccountRepository,
        alert_threshold: Decimal = DEFAULT_ALERT_THRESHOLD,
        critical_threshold: Decimal = DEFAULT_CRITICAL_THRESHOLD,
    ):
        self.uow = uow
        self.account_repo = account_repo
        self.alert_threshold = alert_threshold
        self.critical_threshold = critical_threshold

    async def execute(self, command: UpdateCreditLimitCommandDTO) -> Result[CreditLimitResponseDTO]:
        if command.new_limit < 0:
            return Return.err(
                Error(
                    code="INVALID_AMOUNT",
                    message="Credit limit cannot be negative",
                    reason=f"new_limit={command.new_limit}",
                )
            )

        try:
            existing = await self.account_repo.get_by_customer_id(command.customer_id)
            previous_limit = existing.credit_limit if existing else Decimal("0")

            account = await self.account_repo.set_credit_limit(command.customer_id, command.new_limit)
            await self.uow.commit()

            logger.info(
                f"Credit limit for customer {command.customer_id} changed "
                f"from {previous_limit} to {command.new_limit}"
            )
            if command.new_limit > 0 and account.current_debt > command.new_limit:
                logger.warning(
                    f"Customer {command.customer_id} is over the new limit: "
                    f"debt={account.current_debt}, limit={command.new_limit}"
                )

            return Return.ok(
                CreditLimitResponseDTO(
                    account=to_credit_account_dto(
                        account, self.alert_threshold, self.critical_threshold
                    ),
                    previous_limit=previous_limit,
                )
            )

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to update credit limit for customer {command.customer_id}: {e}")
            return Return.err(
                Error(
                    code="CREDIT_LIMIT_UPDATE_FAILED",
                    message="Failed to update credit limit",
                    reason=str(e),
                )
            )
