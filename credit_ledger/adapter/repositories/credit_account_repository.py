"""SQLAlchemy implementation of CreditAccountRepository

Debt changes are applied with conditional UPDATE statements evaluated by
the database, so concurrent increments and decrements never overwrite
each other.
"""

import logging
from datetime import datetime
from decimal import Decimal
from typing import Optional
from sqlalchemy import update, or_
from sqlmodel import select, func
from sqlmodel.ext.asyncio.session import AsyncSession
from credit_ledger.app.repositories.credit_account_repository import (
    AccountNotFoundError,
    CreditAccountRepository,
    DebtAdjustment,
)
from credit_ledger.domain.credit_account import CreditAccount

logger = logging.getLogger(__name__)


class SqlAlchemyCreditAccountRepository(CreditAccountRepository):
    """
    SQLAlchemy implementation of CreditAccountRepository

    Features:
    - Atomic debt increment/decrement at the storage layer
    - Debt clamped at zero with underflow reporting
    - Optional credit-limit condition on increments
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_customer_id(self, customer_id: str) -> Optional[CreditAccount]:
        stmt = (
            select(CreditAccount)
            .where(CreditAccount.customer_id == customer_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_or_create(self, customer_id: str) -> CreditAccount:
        account = await self.get_by_customer_id(customer_id)
        if account:
            return account

        account = CreditAccount(
            customer_id=customer_id,
            credit_limit=Decimal("0"),
            current_debt=Decimal("0"),
        )
        self.session.add(account)
        await self.session.flush()
        await self.session.refresh(account)
        logger.info(f"Opened credit account for customer {customer_id}")
        return account

    async def adjust_debt(
        self, customer_id: str, delta: Decimal, respect_limit: bool = False
    ) -> Optional[DebtAdjustment]:
        """
        Atomically add delta to the customer's debt

        The first UPDATE only matches when the result stays >= 0 (and within
        the limit when respect_limit is set). If a decrement would go below
        zero, a second UPDATE clamps the debt to 0 and the adjustment is
        reported as an underflow.
        """
        now = datetime.utcnow()
        new_debt = CreditAccount.current_debt + delta

        conditions = [CreditAccount.customer_id == customer_id, new_debt >= 0]
        if respect_limit:
            conditions.append(
                or_(CreditAccount.credit_limit == 0, new_debt <= CreditAccount.credit_limit)
            )

        stmt = (
            update(CreditAccount)
            .where(*conditions)
            .values(current_debt=new_debt, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)

        if result.rowcount == 1:
            account = await self.get_by_customer_id(customer_id)
            return DebtAdjustment(
                customer_id=customer_id,
                requested_delta=delta,
                current_debt=account.current_debt,
            )

        account = await self.get_by_customer_id(customer_id)
        if account is None:
            raise AccountNotFoundError(customer_id)

        if delta >= 0:
            # Only the credit limit condition can reject an increment
            return None

        clamp_stmt = (
            update(CreditAccount)
            .where(CreditAccount.customer_id == customer_id, new_debt < 0)
            .values(current_debt=0, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        clamp_result = await self.session.execute(clamp_stmt)
        if clamp_result.rowcount == 0:
            # Debt grew between both statements; the plain decrement fits now
            return await self.adjust_debt(customer_id, delta, respect_limit)

        return DebtAdjustment(
            customer_id=customer_id,
            requested_delta=delta,
            current_debt=Decimal("0"),
            underflow=True,
        )

    async def set_credit_limit(self, customer_id: str, new_limit: Decimal) -> CreditAccount:
        await self.get_or_create(customer_id)

        stmt = (
            update(CreditAccount)
            .where(CreditAccount.customer_id == customer_id)
            .values(credit_limit=new_limit, updated_at=datetime.utcnow())
            .execution_options(synchronize_session=False)
        )
        await self.session.execute(stmt)

        return await self.get_by_customer_id(customer_id)

    async def list_debtors(self, limit: int = 50, offset: int = 0) -> tuple[list[CreditAccount], int]:
        count_stmt = select(func.count()).select_from(CreditAccount).where(
            CreditAccount.current_debt > 0
        )
        count_result = await self.session.execute(count_stmt)
        total = count_result.scalar()

        stmt = (
            select(CreditAccount)
            .where(CreditAccount.current_debt > 0)
            .order_by(CreditAccount.current_debt.desc(), CreditAccount.id)
            .limit(limit)
            .offset(offset)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all()), total

    async def get_all(self, limit: int = 1000, offset: int = 0) -> list[CreditAccount]:
        stmt = (
            select(CreditAccount)
            .order_by(CreditAccount.id)
            .limit(limit)
            .offset(offset)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
