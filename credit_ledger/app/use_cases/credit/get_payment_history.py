"""
Get Payment History Use Case

Lists the payments applied to a credit sale, oldest first.
"""
from decimal import Decimal
from libs.result import Result, Return, Error
from credit_ledger.app.repositories.credit_sale_repository import CreditSaleRepository
from credit_ledger.app.repositories.payment_repository import PaymentRepository
from .dtos import PaymentHistoryResponseDTO
from .mappers import to_payment_dto


class GetPaymentHistory:
    """
    Use case: Payment history of a credit sale

    Payments are ordered by created_at ASC so the list reads as the
    sequence in which the balance was paid down.
    """

    def __init__(self, sale_repo: CreditSaleRepository, payment_repo: PaymentRepository):
        self.sale_repo = sale_repo
        self.payment_repo = payment_repo

    async def execute(self, sale_id: int) -> Result[PaymentHistoryResponseDTO]:
        """
        Errors:
            SALE_NOT_FOUND: No credit sale with this id
        """
        sale = await self.sale_repo.get_by_id(sale_id)
        if not sale:
            return Return.err(
                Error(
                    code="SALE_NOT_FOUND",
                    message=f"Credit sale {sale_id} not found",
                )
            )

        payments = await self.payment_repo.list_by_sale(sale_id)
        payment_dtos = [to_payment_dto(payment) for payment in payments]

        return Return.ok(
            PaymentHistoryResponseDTO(
                sale_id=sale_id,
                payments=payment_dtos,
                total_paid=sum((p.amount for p in payment_dtos), Decimal("0")),
            )
        )
