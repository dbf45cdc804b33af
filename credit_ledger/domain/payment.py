"""Payment Domain Entity

Immutable append-only record of a payment applied to a credit sale.
The payments of a sale explain how it reached its amount_paid.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import ForeignKey, CheckConstraint, String, Text
from credit_ledger.domain.base import BaseModel, BigIntegerPK, Money


class PaymentMethod(str, Enum):
    """How the customer paid"""
    CASH = "cash"
    CARD = "card"
    TRANSFER = "transfer"


class Payment(BaseModel, table=True):
    """
    Payment - Immutable audit trail of credit sale payments

    Domain Rules:
    - Payments are immutable (append-only, never deleted)
    - amount > 0
    - idempotency_key must be unique (prevents double application on retry)
    - Sum of a sale's payments equals the sale's amount_paid
    """

    __tablename__ = "credit_payments"
    __table_args__ = (
        CheckConstraint('amount > 0', name='payment_amount_positive'),
        Index('ix_credit_payments_sale_created', 'sale_id', 'created_at'),
        Index('ix_credit_payments_customer_created', 'customer_id', 'created_at'),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(BigIntegerPK, primary_key=True, autoincrement=True),
        description="Unique payment identifier (auto-increment)"
    )

    sale_id: int = Field(
        sa_column=Column(BigIntegerPK, ForeignKey("credit_sales.id", ondelete="RESTRICT"), nullable=False),
        description="Foreign key to CreditSale"
    )

    customer_id: str = Field(
        description="Customer who paid"
    )

    amount: Decimal = Field(
        sa_column=Column(Money, nullable=False),
        description="Amount applied to the sale"
    )

    method: PaymentMethod = Field(
        description="Payment method (cash, card, transfer)"
    )

    registered_by: str = Field(
        sa_column=Column(String(255), nullable=False),
        description="Cashier or user who registered the payment"
    )

    notes: Optional[str] = Field(
        default=None,
        sa_column=Column(Text, nullable=True),
        description="Free-form notes"
    )

    idempotency_key: str = Field(
        unique=True,
        index=True,
        description="Caller-supplied key; a retried request returns the original payment"
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Payment timestamp (immutable)"
    )

    class Config:
        """SQLModel configuration"""
        json_schema_extra = {
            "example": {
                "id": 7,
                "sale_id": 42,
                "customer_id": "cust_8812",
                "amount": "40000.00",
                "method": "cash",
                "registered_by": "cashier_03",
                "notes": "First installment",
                "idempotency_key": "pos-3:sale-42:1",
                "created_at": "2024-01-10T00:00:00Z"
            }
        }
