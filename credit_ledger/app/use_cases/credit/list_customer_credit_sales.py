"""
List Customer Credit Sales Use Case

Retrieves a customer's credit sales with pagination, newest first.
"""
from datetime import date
from typing import Optional
from libs.result import Result, Return
from credit_ledger.app.repositories.credit_sale_repository import CreditSaleRepository
from .dtos import ListCustomerCreditSalesResponseDTO
from .mappers import to_credit_sale_dto


class ListCustomerCreditSales:
    """
    Use case: Credit sales of a customer

    By default only open sales (pending or partial) are listed; pass
    include_settled=True to include paid ones.
    """

    def __init__(self, sale_repo: CreditSaleRepository):
        self.sale_repo = sale_repo

    async def execute(
        self,
        customer_id: str,
        include_settled: bool = False,
        limit: int = 50,
        offset: int = 0,
        today: Optional[date] = None,
    ) -> Result[ListCustomerCreditSalesResponseDTO]:
        sales, total = await self.sale_repo.list_by_customer(
            customer_id=customer_id,
            include_settled=include_settled,
            limit=limit,
            offset=offset,
        )

        return Return.ok(
            ListCustomerCreditSalesResponseDTO(
                customer_id=customer_id,
                sales=[to_credit_sale_dto(sale, today) for sale in sales],
                total=total,
                limit=limit,
                offset=offset,
            )
        )
