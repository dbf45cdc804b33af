"""Credit Sale Domain Entity

Per-sale credit state: how much of the sale total has been paid and how
much is still pending. Balances only move forward through payments.
"""

from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import CheckConstraint, Date, Integer
from credit_ledger.domain.base import BaseModel, BigIntegerPK, Money


class PaymentStatus(str, Enum):
    """Credit sale payment status"""
    PENDING = "pending"    # Nothing paid yet
    PARTIAL = "partial"    # Some payments, balance still pending
    PAID = "paid"          # Fully paid (terminal)


def derive_payment_status(amount_paid: Decimal, total: Decimal) -> PaymentStatus:
    """Status implied by the paid amount of a sale"""
    if amount_paid <= 0:
        return PaymentStatus.PENDING
    if amount_paid < total:
        return PaymentStatus.PARTIAL
    return PaymentStatus.PAID


class CreditSale(BaseModel, table=True):
    """
    Credit Sale - A sale whose payment is deferred

    Domain Rules:
    - total is fixed at creation and must be > 0
    - amount_paid + amount_pending == total at all times
    - Status transitions: pending -> partial -> paid (no way back)
    - Immutable once paid
    - version is bumped on every balance write (optimistic concurrency)
    """

    __tablename__ = "credit_sales"
    __table_args__ = (
        CheckConstraint('total > 0', name='total_positive'),
        CheckConstraint('amount_paid >= 0', name='amount_paid_non_negative'),
        CheckConstraint('amount_pending >= 0', name='amount_pending_non_negative'),
        CheckConstraint('amount_paid + amount_pending = total', name='balances_match_total'),
        Index('ix_credit_sales_customer_status', 'customer_id', 'payment_status'),
        Index('ix_credit_sales_created_at', 'created_at'),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(BigIntegerPK, primary_key=True, autoincrement=True),
        description="Unique credit sale identifier (auto-increment)"
    )

    customer_id: str = Field(
        index=True,
        description="Customer who owes the sale"
    )

    total: Decimal = Field(
        sa_column=Column(Money, nullable=False),
        description="Sale total (fixed at creation)"
    )

    amount_paid: Decimal = Field(
        default=Decimal("0"),
        sa_column=Column(Money, nullable=False, default=0),
        description="Sum of registered payments"
    )

    amount_pending: Decimal = Field(
        sa_column=Column(Money, nullable=False),
        description="Outstanding balance (total - amount_paid)"
    )

    payment_status: PaymentStatus = Field(
        default=PaymentStatus.PENDING,
        description="Payment status (pending, partial, paid)"
    )

    version: int = Field(
        default=1,
        sa_column=Column(Integer, nullable=False, default=1),
        description="Row version token for conditional balance updates"
    )

    due_date: Optional[date] = Field(
        default=None,
        sa_column=Column(Date, nullable=True),
        description="Date the balance is due (optional)"
    )

    paid_at: Optional[datetime] = Field(
        default=None,
        description="Timestamp when the sale became fully paid"
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Credit sale creation timestamp"
    )

    updated_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Last balance update timestamp"
    )

    @property
    def is_settled(self) -> bool:
        return self.payment_status == PaymentStatus.PAID

    def is_overdue(self, today: Optional[date] = None) -> bool:
        if self.due_date is None or self.is_settled:
            return False
        return self.due_date < (today or date.today())

    class Config:
        """SQLModel configuration"""
        json_schema_extra = {
            "example": {
                "id": 42,
                "customer_id": "cust_8812",
                "total": "100000.00",
                "amount_paid": "40000.00",
                "amount_pending": "60000.00",
                "payment_status": "partial",
                "version": 2,
                "due_date": "2024-02-01",
                "paid_at": None,
                "created_at": "2024-01-01T00:00:00Z",
                "updated_at": "2024-01-10T00:00:00Z"
            }
        }
