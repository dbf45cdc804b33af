"""Concurrent payments on the same credit sale

Two payments for half of the pending balance each must both land, one of
them after retrying on a version conflict, without losing an update.
"""

import asyncio
import pytest
from decimal import Decimal

from credit_ledger.adapter.repositories import (
    SqlAlchemyCreditAccountRepository,
    SqlAlchemyCreditSaleRepository,
)

from .helpers import (
    assert_ledger_invariants,
    create_sale,
    pay,
    payment_command,
    register_payment_use_case,
)


class InterleavingSaleRepository(SqlAlchemyCreditSaleRepository):
    """Runs a competing write right after the first read of the sale"""

    def __init__(self, session, competitor):
        super().__init__(session)
        self.competitor = competitor
        self.reads = 0
        self.conflicts = 0

    async def get_by_id(self, sale_id):
        sale = await super().get_by_id(sale_id)
        self.reads += 1
        if self.reads == 1:
            await self.competitor()
        return sale

    async def update_balances(self, *args, **kwargs):
        try:
            return await super().update_balances(*args, **kwargs)
        except Exception:
            self.conflicts += 1
            raise


@pytest.mark.asyncio
class TestConcurrentPayments:

    async def test_version_conflict_is_retried(self, session_factory):
        """
        Given: A sale of 100000
        When: Payment B commits between payment A's read and write
        Then: A hits a version conflict, retries, and both payments land
        """
        async with session_factory() as setup:
            sale_id = (await create_sale(setup, "cust_x", "100000.00")).value.sale.id

        async def competing_payment():
            async with session_factory() as other:
                result = await pay(other, sale_id, "cust_x", "50000.00", "x-b")
                assert result.is_ok()

        async with session_factory() as session:
            sale_repo = InterleavingSaleRepository(session, competing_payment)
            use_case = register_payment_use_case(session, sale_repo=sale_repo)

            result = await use_case.execute(payment_command(sale_id, "cust_x", "50000.00", "x-a"))

            assert result.is_ok()
            assert sale_repo.conflicts == 1
            assert result.value.sale.amount_paid == Decimal("100000.00")
            assert result.value.sale.amount_pending == Decimal("0")
            assert result.value.sale.payment_status == "paid"
            assert result.value.customer_debt == Decimal("0")

        async with session_factory() as check:
            sale = await SqlAlchemyCreditSaleRepository(check).get_by_id(sale_id)
            assert sale.version == 3
            await assert_ledger_invariants(check)

    async def test_competitor_overpaying_turns_retry_into_rejection(self, session_factory):
        """After the retry re-reads the sale, the original amount no longer fits"""
        async with session_factory() as setup:
            sale_id = (await create_sale(setup, "cust_y", "100.00")).value.sale.id

        async def competing_payment():
            async with session_factory() as other:
                assert (await pay(other, sale_id, "cust_y", "70.00", "y-b")).is_ok()

        async with session_factory() as session:
            sale_repo = InterleavingSaleRepository(session, competing_payment)
            use_case = register_payment_use_case(session, sale_repo=sale_repo)

            result = await use_case.execute(payment_command(sale_id, "cust_y", "60.00", "y-a"))

            assert result.is_err()
            assert result.error.code == "AMOUNT_EXCEEDS_PENDING"

        async with session_factory() as check:
            account = await SqlAlchemyCreditAccountRepository(check).get_by_customer_id("cust_y")
            assert account.current_debt == Decimal("30.00")
            await assert_ledger_invariants(check)

    async def test_retries_exhausted(self, session_factory):
        async with session_factory() as setup:
            sale_id = (await create_sale(setup, "cust_z", "100.00")).value.sale.id

        async def competing_payment():
            async with session_factory() as other:
                assert (await pay(other, sale_id, "cust_z", "10.00", "z-b")).is_ok()

        async with session_factory() as session:
            sale_repo = InterleavingSaleRepository(session, competing_payment)
            use_case = register_payment_use_case(session, sale_repo=sale_repo, max_attempts=1)

            result = await use_case.execute(payment_command(sale_id, "cust_z", "10.00", "z-a"))

            assert result.is_err()
            assert result.error.code == "CONCURRENT_MODIFICATION"

        async with session_factory() as check:
            await assert_ledger_invariants(check)

    async def test_parallel_payments_both_succeed(self, session_factory):
        async with session_factory() as setup:
            sale_id = (await create_sale(setup, "cust_p", "100000.00")).value.sale.id

        async def pay_half(key):
            async with session_factory() as session:
                return await pay(session, sale_id, "cust_p", "50000.00", key)

        results = await asyncio.gather(pay_half("p-1"), pay_half("p-2"))

        assert all(r.is_ok() for r in results)
        async with session_factory() as check:
            sale = await SqlAlchemyCreditSaleRepository(check).get_by_id(sale_id)
            assert sale.amount_paid == Decimal("100000.00")
            assert sale.payment_status.value == "paid"
            account = await SqlAlchemyCreditAccountRepository(check).get_by_customer_id("cust_p")
            assert account.current_debt == Decimal("0")
            await assert_ledger_invariants(check)
