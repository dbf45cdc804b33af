"""Entity to DTO conversion shared by the credit use cases"""

from datetime import date
from decimal import Decimal
from typing import Optional
from credit_ledger.domain.credit_account import CreditAccount
from credit_ledger.domain.credit_policy import (
    DEFAULT_ALERT_THRESHOLD,
    DEFAULT_CRITICAL_THRESHOLD,
    available_credit,
    classify_risk,
    usage_percentage,
)
from credit_ledger.domain.credit_sale import CreditSale
from credit_ledger.domain.payment import Payment
from .dtos import CreditAccountDTO, CreditSaleDTO, PaymentDTO


def _enum_value(value) -> str:
    return value.value if hasattr(value, "value") else value


def to_credit_sale_dto(sale: CreditSale, today: Optional[date] = None) -> CreditSaleDTO:
    return CreditSaleDTO(
        id=sale.id,
        customer_id=sale.customer_id,
        total=sale.total,
        amount_paid=sale.amount_paid,
        amount_pending=sale.amount_pending,
        payment_status=_enum_value(sale.payment_status),
        due_date=sale.due_date,
        is_overdue=sale.is_overdue(today),
        paid_at=sale.paid_at,
        created_at=sale.created_at,
        updated_at=sale.updated_at,
    )


def to_payment_dto(payment: Payment) -> PaymentDTO:
    return PaymentDTO(
        id=payment.id,
        sale_id=payment.sale_id,
        customer_id=payment.customer_id,
        amount=payment.amount,
        method=_enum_value(payment.method),
        registered_by=payment.registered_by,
        notes=payment.notes,
        idempotency_key=payment.idempotency_key,
        created_at=payment.created_at,
    )


def to_credit_account_dto(
    account: CreditAccount,
    alert_threshold: Decimal = DEFAULT_ALERT_THRESHOLD,
    critical_threshold: Decimal = DEFAULT_CRITICAL_THRESHOLD,
) -> CreditAccountDTO:
    limit = account.credit_limit
    debt = account.current_debt
    return CreditAccountDTO(
        customer_id=account.customer_id,
        credit_limit=limit,
        current_debt=debt,
        available_credit=available_credit(limit, debt),
        usage_percentage=usage_percentage(limit, debt),
        risk_tier=classify_risk(limit, debt, alert_threshold, critical_threshold).value,
        is_over_limit=limit > 0 and debt > limit,
        updated_at=account.updated_at,
    )
