"""Get Credit Sale Use Case"""

from libs.result import Result, Return, Error
from credit_ledger.app.repositories.credit_sale_repository import CreditSaleRepository
from .dtos import CreditSaleDTO
from .mappers import to_credit_sale_dto


class GetCreditSale:
    def __init__(self, sale_repo: CreditSaleRepository):
        self.sale_repo = sale_repo

    async def execute(self, sale_id: int) -> Result[CreditSaleDTO]:
        sale = await self.sale_repo.get_by_id(sale_id)

        if not sale:
            return Return.err(
                Error(
                    code="SALE_NOT_FOUND",
                    message=f"Credit sale {sale_id} not found",
                )
            )

        return Return.ok(to_credit_sale_dto(sale))
