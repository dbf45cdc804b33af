"""CreateCreditSale Use Case

Records a sale whose payment is deferred and adds its total to the
customer's debt, after the credit limit guard approves it.
"""

import logging
from decimal import Decimal
from libs.result import Result, Return, Error
from credit_ledger.app.services.unit_of_work import UnitOfWork
from credit_ledger.app.repositories.credit_account_repository import CreditAccountRepository
from credit_ledger.app.repositories.credit_sale_repository import CreditSaleRepository
from credit_ledger.domain.credit_policy import DEFAULT_ALERT_THRESHOLD, DEFAULT_CRITICAL_THRESHOLD
from credit_ledger.domain.credit_sale import CreditSale, PaymentStatus
from .credit_limit_guard import CreditLimitGuard
from .dtos import CreateCreditSaleCommandDTO, CreditSaleResponseDTO
from .mappers import to_credit_account_dto, to_credit_sale_dto

logger = logging.getLogger(__name__)


class CreateCreditSale:
    """
    Use Case: Create a credit sale

    Business Rules:
    1. total must be > 0
    2. The credit limit guard must approve the new debt
    3. The sale starts pending: amount_paid = 0, amount_pending = total
    4. Sale creation and debt increment commit together

    Flow:
    1. Validate total
    2. Authorize against the credit limit
    3. Open the credit account if the customer has none
    4. Create the sale
    5. Add total to the customer's debt (conditional on the limit)
    6. Commit
    """

    def __init__(
        self,
        uow: UnitOfWork,
        account_repo: CreditAccountRepository,
        sale_repo: CreditSaleRepository,
        alert_threshold: Decimal = DEFAULT_ALERT_THRESHOLD,
        critical_threshold: Decimal = DEFAULT_CRITICAL_THRESHOLD,
    ):
        self.uow = uow
        self.account_repo = account_repo
        self.sale_repo = sale_repo
        self.guard = CreditLimitGuard(account_repo)
        self.alert_threshold = alert_threshold
        self.critical_threshold = critical_threshold

    async def execute(self, command: CreateCreditSaleCommandDTO) -> Result[CreditSaleResponseDTO]:
        """
        Execute credit sale creation

        Args:
            command: CreateCreditSaleCommandDTO with customer_id, total, due_date

        Returns:
            Result[CreditSaleResponseDTO]: Created sale and updated account, or error
        """
        # Step 1: Validate amount
        if command.total <= 0:
            return Return.err(
                Error(
                    code="INVALID_AMOUNT",
                    message="Credit sale total must be greater than 0",
                    reason=f"total={command.total}",
                )
            )

        try:
            # Step 2: Credit limit guard
            authorization = await self.guard.authorize(command.customer_id, command.total)
            if authorization.is_err():
                logger.info(
                    f"Credit sale rejected for customer {command.customer_id}: "
                    f"{authorization.error.reason}"
                )
                return authorization

            # Step 3: Implicit account creation
            await self.account_repo.get_or_create(command.customer_id)

            # Step 4: Create sale
            sale = CreditSale(
                customer_id=command.customer_id,
                total=command.total,
                amount_paid=Decimal("0"),
                amount_pending=command.total,
                payment_status=PaymentStatus.PENDING,
                version=1,
                due_date=command.due_date,
            )
            created_sale = await self.sale_repo.create(sale)

            # Step 5: Increase debt, re-checking the limit at the storage layer
            adjustment = await self.account_repo.adjust_debt(
                command.customer_id, command.total, respect_limit=True
            )
            if adjustment is None:
                await self.uow.rollback()
                logger.warning(
                    f"Credit limit for customer {command.customer_id} was consumed "
                    f"concurrently; sale of {command.total} not created"
                )
                return Return.err(
                    Error(
                        code="CREDIT_LIMIT_EXCEEDED",
                        message="Credit limit exceeded",
                        reason="Available credit changed while the sale was being created",
                    )
                )

            # Step 6: Commit
            await self.uow.commit()

            account = await self.account_repo.get_by_customer_id(command.customer_id)
            logger.info(
                f"Created credit sale {created_sale.id} for customer {command.customer_id}: "
                f"total={command.total}, debt={adjustment.current_debt}"
            )

            return Return.ok(
                CreditSaleResponseDTO(
                    sale=to_credit_sale_dto(created_sale),
                    account=to_credit_account_dto(
                        account, self.alert_threshold, self.critical_threshold
                    ),
                )
            )

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to create credit sale for customer {command.customer_id}: {e}")
            return Return.err(
                Error(
                    code="CREDIT_SALE_CREATION_FAILED",
                    message="Failed to create credit sale",
                    reason=str(e),
                )
            )
