"""SQLAlchemy implementation of PaymentRepository

Provides persistence for Payment entities with idempotency enforcement
via unique constraint on idempotency_key.
"""

from decimal import Decimal
from typing import Optional
from sqlmodel import select, func
from sqlmodel.ext.asyncio.session import AsyncSession
from credit_ledger.app.repositories.payment_repository import PaymentRepository
from credit_ledger.domain.payment import Payment


class SqlAlchemyPaymentRepository(PaymentRepository):
    """
    SQLAlchemy implementation of PaymentRepository

    Features:
    - Idempotency enforcement via unique idempotency_key constraint
    - Immutable append-only payments
    - Chronological history per sale, newest-first history per customer
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def append(self, payment: Payment) -> Payment:
        """
        Append a payment, returning the original record on a repeated key

        Raises:
            IntegrityError: If a concurrent writer inserted the same key
                            between the lookup and the flush
        """
        existing = await self.get_by_idempotency_key(payment.idempotency_key)
        if existing:
            return existing

        self.session.add(payment)
        await self.session.flush()
        await self.session.refresh(payment)
        return payment

    async def get_by_idempotency_key(self, idempotency_key: str) -> Optional[Payment]:
        stmt = select(Payment).where(Payment.idempotency_key == idempotency_key)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_by_sale(self, sale_id: int) -> list[Payment]:
        stmt = (
            select(Payment)
            .where(Payment.sale_id == sale_id)
            .order_by(Payment.created_at.asc(), Payment.id.asc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_by_customer(
        self, customer_id: str, limit: int = 50, offset: int = 0
    ) -> tuple[list[Payment], int]:
        count_stmt = select(func.count()).select_from(Payment).where(
            Payment.customer_id == customer_id
        )
        count_result = await self.session.execute(count_stmt)
        total = count_result.scalar()

        stmt = (
            select(Payment)
            .where(Payment.customer_id == customer_id)
            .order_by(Payment.created_at.desc(), Payment.id.desc())
            .limit(limit)
            .offset(offset)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all()), total

    async def get_paid_sum_by_sale(self, sale_id: int) -> Decimal:
        stmt = select(func.sum(Payment.amount)).where(Payment.sale_id == sale_id)
        result = await self.session.execute(stmt)
        paid = result.scalar()
        return Decimal(str(paid)) if paid is not None else Decimal("0")
