"""Builders wiring the credit use cases to the SQLAlchemy adapters"""

from decimal import Decimal
from typing import Optional

from sqlmodel import select

from credit_ledger.adapter.repositories import (
    SqlAlchemyCreditAccountRepository,
    SqlAlchemyCreditSaleRepository,
    SqlAlchemyPaymentRepository,
)
from credit_ledger.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from credit_ledger.app.use_cases.credit import (
    AuditCreditLedger,
    CreateCreditSale,
    RegisterPayment,
    UpdateCreditLimit,
)
from credit_ledger.app.use_cases.credit.dtos import (
    CreateCreditSaleCommandDTO,
    RegisterPaymentCommandDTO,
    UpdateCreditLimitCommandDTO,
)
from credit_ledger.domain import CreditAccount, CreditSale, Payment, PaymentMethod


def create_sale_use_case(session):
    return CreateCreditSale(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyCreditAccountRepository(session),
        SqlAlchemyCreditSaleRepository(session),
    )


def register_payment_use_case(session, sale_repo=None, notification_service=None, max_attempts=3):
    return RegisterPayment(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyCreditAccountRepository(session),
        sale_repo or SqlAlchemyCreditSaleRepository(session),
        SqlAlchemyPaymentRepository(session),
        notification_service=notification_service,
        max_attempts=max_attempts,
    )


def audit_use_case(session, notification_service=None):
    return AuditCreditLedger(
        SqlAlchemyCreditAccountRepository(session),
        SqlAlchemyCreditSaleRepository(session),
        SqlAlchemyPaymentRepository(session),
        notification_service=notification_service,
    )


async def set_limit(session, customer_id: str, limit: str):
    use_case = UpdateCreditLimit(SqlAlchemyUnitOfWork(session), SqlAlchemyCreditAccountRepository(session))
    result = await use_case.execute(
        UpdateCreditLimitCommandDTO(customer_id=customer_id, new_limit=Decimal(limit))
    )
    assert result.is_ok(), result
    return result.value


async def create_sale(session, customer_id: str, total: str):
    return await create_sale_use_case(session).execute(
        CreateCreditSaleCommandDTO(customer_id=customer_id, total=Decimal(total))
    )


async def pay(session, sale_id: int, customer_id: str, amount: str, key: str, **kwargs):
    return await register_payment_use_case(session, **kwargs).execute(
        payment_command(sale_id, customer_id, amount, key)
    )


def payment_command(sale_id: int, customer_id: str, amount: str, key: str, method: Optional[PaymentMethod] = None):
    return RegisterPaymentCommandDTO(
        sale_id=sale_id,
        customer_id=customer_id,
        amount=Decimal(amount),
        method=method or PaymentMethod.CASH,
        registered_by="cashier_03",
        idempotency_key=key,
    )


async def assert_ledger_invariants(session):
    sales = (await session.execute(select(CreditSale).execution_options(populate_existing=True))).scalars().all()
    payments = (await session.execute(select(Payment))).scalars().all()
    accounts = (
        await session.execute(select(CreditAccount).execution_options(populate_existing=True))
    ).scalars().all()

    for sale in sales:
        assert sale.amount_paid + sale.amount_pending == sale.total
        paid = sum((p.amount for p in payments if p.sale_id == sale.id), Decimal("0"))
        assert paid == sale.amount_paid

    for account in accounts:
        pending = sum(
            (s.amount_pending for s in sales if s.customer_id == account.customer_id),
            Decimal("0"),
        )
        assert account.current_debt == pending
