"""RegisterPayment Use Case

Applies a payment to the outstanding balance of a credit sale and lowers
the customer's debt by the same amount, all in one transaction.
"""

import logging
from decimal import Decimal
from typing import Optional
from sqlalchemy.exc import IntegrityError
from libs.result import Result, Return, Error
from credit_ledger.app.services.unit_of_work import UnitOfWork
from credit_ledger.app.services.notification_service import (
    AlertKind,
    InvariantAlert,
    NotificationService,
)
from credit_ledger.app.repositories.credit_account_repository import (
    AccountNotFoundError,
    CreditAccountRepository,
    DebtAdjustment,
)
from credit_ledger.app.repositories.credit_sale_repository import (
    CreditSaleRepository,
    VersionConflictError,
)
from credit_ledger.app.repositories.payment_repository import PaymentRepository
from credit_ledger.domain.credit_sale import PaymentStatus
from credit_ledger.domain.payment import Payment
from .dtos import RegisterPaymentCommandDTO, PaymentRegistrationResponseDTO
from .mappers import to_credit_sale_dto, to_payment_dto

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 3


class RegisterPayment:
    """
    Use Case: Register a payment against a credit sale

    Business Rules:
    1. Idempotency: a repeated idempotency_key returns the original payment
    2. amount > 0 and amount <= amount_pending (no overpayment, no clamping)
    3. Paid sales accept no further payments
    4. Payment, sale balances and customer debt commit together
    5. Optimistic concurrency: the balance update is gated on the sale
       version; on conflict the whole attempt is retried from the re-read

    Flow (per attempt):
    1. Check idempotency (return existing if found)
    2. Read the sale and its version
    3. Validate ownership, status and amount
    4. Append payment
    5. Conditionally update sale balances
    6. Decrease customer debt
    7. Commit
    """

    def __init__(
        self,
        uow: UnitOfWork,
        account_repo: CreditAccountRepository,
        sale_repo: CreditSaleRepository,
        payment_repo: PaymentRepository,
        notification_service: Optional[NotificationService] = None,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ):
        self.uow = uow
        self.account_repo = account_repo
        self.sale_repo = sale_repo
        self.payment_repo = payment_repo
        self.notification_service = notification_service
        self.max_attempts = max_attempts

    async def execute(self, command: RegisterPaymentCommandDTO) -> Result[PaymentRegistrationResponseDTO]:
        """
        Execute payment registration

        Args:
            command: RegisterPaymentCommandDTO

        Returns:
            Result[PaymentRegistrationResponseDTO]: Applied (or replayed) payment
            with the sale's balances and the customer's debt, or error
        """
        if command.amount <= 0:
            return Return.err(
                Error(
                    code="INVALID_AMOUNT",
                    message="Payment amount must be greater than 0",
                    reason=f"amount={command.amount}",
                )
            )

        for attempt in range(1, self.max_attempts + 1):
            try:
                return await self._attempt(command)

            except VersionConflictError as e:
                await self.uow.rollback()
                logger.warning(
                    f"Version conflict registering payment {command.idempotency_key} "
                    f"(attempt {attempt}/{self.max_attempts}): {e}"
                )

            except AccountNotFoundError as e:
                await self.uow.rollback()
                logger.error(f"Payment {command.idempotency_key} rejected: {e}")
                return Return.err(
                    Error(
                        code="CUSTOMER_NOT_FOUND",
                        message=f"No credit account found for customer {command.customer_id}",
                        reason=str(e),
                    )
                )

            except IntegrityError as e:
                # Either another request stored this idempotency key first,
                # or a constraint guarding the balances fired
                await self.uow.rollback()
                try:
                    existing = await self.payment_repo.get_by_idempotency_key(command.idempotency_key)
                except Exception as lookup_error:
                    logger.error(
                        f"Failed to re-read payment {command.idempotency_key} "
                        f"after integrity error ({e}): {lookup_error}"
                    )
                    return self._fatal(lookup_error)
                if existing:
                    return await self._replay(existing, command)
                logger.error(f"Integrity error registering payment {command.idempotency_key}: {e}")
                return self._fatal(e)

            except Exception as e:
                await self.uow.rollback()
                logger.error(f"Failed to register payment {command.idempotency_key}: {e}")
                return self._fatal(e)

        logger.error(
            f"Giving up on payment {command.idempotency_key} for sale {command.sale_id} "
            f"after {self.max_attempts} version conflicts"
        )
        return Return.err(
            Error(
                code="CONCURRENT_MODIFICATION",
                message="The credit sale is being modified concurrently, retry the payment",
                reason=f"{self.max_attempts} attempts exhausted for sale {command.sale_id}",
            )
        )

    async def _attempt(self, command: RegisterPaymentCommandDTO) -> Result[PaymentRegistrationResponseDTO]:
        # Step 1: Idempotency
        existing = await self.payment_repo.get_by_idempotency_key(command.idempotency_key)
        if existing:
            return await self._replay(existing, command)

        # Step 2: Read sale with its version token
        sale = await self.sale_repo.get_by_id(command.sale_id)
        if not sale:
            return Return.err(
                Error(
                    code="SALE_NOT_FOUND",
                    message=f"Credit sale {command.sale_id} not found",
                )
            )

        # Step 3: Validate
        if sale.customer_id != command.customer_id:
            return Return.err(
                Error(
                    code="CUSTOMER_MISMATCH",
                    message=f"Credit sale {sale.id} does not belong to customer {command.customer_id}",
                    reason=f"sale.customer_id={sale.customer_id}",
                )
            )

        if sale.is_settled:
            return Return.err(
                Error(
                    code="SALE_ALREADY_SETTLED",
                    message=f"Credit sale {sale.id} is already paid",
                )
            )

        if command.amount > sale.amount_pending:
            return Return.err(
                Error(
                    code="AMOUNT_EXCEEDS_PENDING",
                    message=(
                        f"Payment exceeds the pending balance. "
                        f"Requested: {command.amount}, Pending: {sale.amount_pending}"
                    ),
                    reason=f"amount={command.amount}, amount_pending={sale.amount_pending}",
                )
            )

        expected_version = sale.version
        new_paid = sale.amount_paid + command.amount
        new_pending = sale.amount_pending - command.amount
        new_status = PaymentStatus.PAID if new_pending == 0 else PaymentStatus.PARTIAL

        # Step 4: Append payment
        payment = Payment(
            sale_id=sale.id,
            customer_id=command.customer_id,
            amount=command.amount,
            method=command.method,
            registered_by=command.registered_by,
            notes=command.notes,
            idempotency_key=command.idempotency_key,
        )
        created_payment = await self.payment_repo.append(payment)
        if created_payment is not payment:
            # The key was stored by another request since step 1
            await self.uow.rollback()
            return await self._replay(created_payment, command)

        # Step 5: Compare-and-swap the balances (raises VersionConflictError)
        await self.sale_repo.update_balances(
            sale.id, expected_version, new_paid, new_pending, new_status
        )

        # Step 6: Decrease debt
        adjustment = await self.account_repo.adjust_debt(command.customer_id, -command.amount)

        # Step 7: Commit
        await self.uow.commit()

        logger.info(
            f"Registered payment {created_payment.id} of {command.amount} on credit sale {sale.id} "
            f"by {command.registered_by}: paid={new_paid}, pending={new_pending}, "
            f"status={new_status.value}"
        )

        if adjustment.underflow:
            await self._report_underflow(adjustment, sale.id)

        updated_sale = await self.sale_repo.get_by_id(sale.id)
        return Return.ok(
            PaymentRegistrationResponseDTO(
                payment=to_payment_dto(created_payment),
                sale=to_credit_sale_dto(updated_sale),
                customer_debt=adjustment.current_debt,
                replayed=False,
            )
        )

    async def _replay(
        self, payment: Payment, command: RegisterPaymentCommandDTO
    ) -> Result[PaymentRegistrationResponseDTO]:
        """Answer a retried request with the payment it originally created"""
        if payment.sale_id != command.sale_id:
            return Return.err(
                Error(
                    code="IDEMPOTENCY_KEY_REUSED",
                    message="Idempotency key was already used for a different credit sale",
                    reason=f"key={command.idempotency_key}, original_sale_id={payment.sale_id}",
                )
            )

        if payment.customer_id != command.customer_id:
            return Return.err(
                Error(
                    code="CUSTOMER_MISMATCH",
                    message=f"Credit sale {payment.sale_id} does not belong to customer {command.customer_id}",
                    reason=f"payment.customer_id={payment.customer_id}",
                )
            )

        sale = await self.sale_repo.get_by_id(payment.sale_id)
        account = await self.account_repo.get_by_customer_id(payment.customer_id)
        logger.info(f"Replayed payment {payment.id} for idempotency key {command.idempotency_key}")

        return Return.ok(
            PaymentRegistrationResponseDTO(
                payment=to_payment_dto(payment),
                sale=to_credit_sale_dto(sale),
                customer_debt=account.current_debt if account else Decimal("0"),
                replayed=True,
            )
        )

    async def _report_underflow(self, adjustment: DebtAdjustment, sale_id: int) -> None:
        logger.error(
            f"Debt underflow for customer {adjustment.customer_id}: decrement of "
            f"{-adjustment.requested_delta} for credit sale {sale_id} exceeded the "
            f"recorded debt; debt clamped to 0"
        )
        if not self.notification_service:
            return

        alert = InvariantAlert(
            kind=AlertKind.DEBT_UNDERFLOW,
            customer_id=adjustment.customer_id,
            sale_id=sale_id,
            expected=-adjustment.requested_delta,
            actual=adjustment.current_debt,
            detail="Payment decrement exceeded the customer's recorded debt",
        )
        try:
            await self.notification_service.send_invariant_alert(alert)
        except Exception as e:
            logger.error(f"Failed to send debt underflow alert: {e}")

    def _fatal(self, e: Exception) -> Result[PaymentRegistrationResponseDTO]:
        return Return.err(
            Error(
                code="PAYMENT_REGISTRATION_FAILED",
                message="Failed to register payment",
                reason=str(e),
            )
        )
