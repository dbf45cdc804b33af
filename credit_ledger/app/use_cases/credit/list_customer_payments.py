"""
List Customer Payments Use Case

Retrieves the payments a customer has made across all sales.
"""
from libs.result import Result, Return
from credit_ledger.app.repositories.payment_repository import PaymentRepository
from .dtos import ListCustomerPaymentsResponseDTO
from .mappers import to_payment_dto


class ListCustomerPayments:
    """
    Use case: Payments of a customer

    Ordered by created_at DESC (most recent first).
    """

    def __init__(self, payment_repo: PaymentRepository):
        self.payment_repo = payment_repo

    async def execute(
        self, customer_id: str, limit: int = 50, offset: int = 0
    ) -> Result[ListCustomerPaymentsResponseDTO]:
        payments, total = await self.payment_repo.list_by_customer(
            customer_id=customer_id,
            limit=limit,
            offset=offset,
        )

        return Return.ok(
            ListCustomerPaymentsResponseDTO(
                customer_id=customer_id,
                payments=[to_payment_dto(payment) for payment in payments],
                total=total,
                limit=limit,
                offset=offset,
            )
        )
