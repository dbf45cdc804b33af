"""SQLAlchemy implementation of CreditSaleRepository

Provides persistence for CreditSale entities with optimistic concurrency:
balance updates only apply when the row version still matches the version
read by the caller.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from sqlalchemy import update
from sqlmodel import select, func
from sqlmodel.ext.asyncio.session import AsyncSession
from credit_ledger.app.repositories.credit_sale_repository import (
    CreditSaleRepository,
    SaleNotFoundError,
    VersionConflictError,
)
from credit_ledger.domain.credit_sale import CreditSale, PaymentStatus

UNSETTLED_STATUSES = (PaymentStatus.PENDING, PaymentStatus.PARTIAL)


class SqlAlchemyCreditSaleRepository(CreditSaleRepository):
    """
    SQLAlchemy implementation of CreditSaleRepository

    Features:
    - Version-gated balance updates (compare-and-swap on version)
    - Reads always refresh instances already held by the session
    - Customer-scoped, paginated queries
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, sale_id: int) -> Optional[CreditSale]:
        """
        Retrieve sale by ID

        populate_existing makes a re-read after a version conflict see the
        row as committed by the other writer.
        """
        stmt = (
            select(CreditSale)
            .where(CreditSale.id == sale_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, sale: CreditSale) -> CreditSale:
        self.session.add(sale)
        await self.session.flush()
        await self.session.refresh(sale)
        return sale

    async def update_balances(
        self,
        sale_id: int,
        expected_version: int,
        new_paid: Decimal,
        new_pending: Decimal,
        new_status: PaymentStatus,
    ) -> int:
        """
        Compare-and-swap the balances of a sale

        Issues UPDATE ... WHERE id = :id AND version = :expected_version.
        Zero affected rows means the sale is gone or another writer won.
        """
        now = datetime.utcnow()
        new_version = expected_version + 1
        values = {
            "amount_paid": new_paid,
            "amount_pending": new_pending,
            "payment_status": new_status,
            "version": new_version,
            "updated_at": now,
        }
        if new_status == PaymentStatus.PAID:
            values["paid_at"] = now

        stmt = (
            update(CreditSale)
            .where(CreditSale.id == sale_id, CreditSale.version == expected_version)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)

        if result.rowcount == 0:
            exists = await self.session.execute(
                select(CreditSale.id).where(CreditSale.id == sale_id)
            )
            if exists.scalar_one_or_none() is None:
                raise SaleNotFoundError(sale_id)
            raise VersionConflictError(sale_id, expected_version)

        return new_version

    async def list_by_customer(
        self,
        customer_id: str,
        include_settled: bool = False,
        limit: int = 50,
        offset: int = 0,
    ) -> tuple[list[CreditSale], int]:
        conditions = [CreditSale.customer_id == customer_id]
        if not include_settled:
            conditions.append(CreditSale.payment_status.in_(UNSETTLED_STATUSES))

        count_stmt = select(func.count()).select_from(CreditSale).where(*conditions)
        count_result = await self.session.execute(count_stmt)
        total = count_result.scalar()

        stmt = (
            select(CreditSale)
            .where(*conditions)
            .order_by(CreditSale.created_at.desc(), CreditSale.id.desc())
            .limit(limit)
            .offset(offset)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all()), total

    async def get_pending_sum_by_customer(self, customer_id: str) -> Decimal:
        stmt = select(func.sum(CreditSale.amount_pending)).where(
            CreditSale.customer_id == customer_id,
            CreditSale.payment_status.in_(UNSETTLED_STATUSES),
        )
        result = await self.session.execute(stmt)
        pending = result.scalar()
        return Decimal(str(pending)) if pending is not None else Decimal("0")

    async def get_unsettled(self, limit: int = 1000, offset: int = 0) -> list[CreditSale]:
        stmt = (
            select(CreditSale)
            .where(CreditSale.payment_status.in_(UNSETTLED_STATUSES))
            .order_by(CreditSale.id)
            .limit(limit)
            .offset(offset)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
