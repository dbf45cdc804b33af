"""Credit Account Domain Entity

One account per customer holding the credit ceiling and the aggregate
debt across all of the customer's open credit sales.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from sqlmodel import Field, Column
from sqlalchemy import CheckConstraint
from credit_ledger.domain.base import BaseModel, BigIntegerPK, Money


class CreditAccount(BaseModel, table=True):
    """
    Credit Account - Per-customer credit ceiling and aggregate debt

    Domain Rules:
    - One account per customer (customer_id is unique)
    - credit_limit >= 0, where 0 means unlimited
    - current_debt >= 0 and equals the sum of amount_pending over the
      customer's credit sales that are not paid
    - Created implicitly the first time the customer is granted credit
    - current_debt only changes through credit sales and payments
    """

    __tablename__ = "credit_accounts"
    __table_args__ = (
        CheckConstraint('credit_limit >= 0', name='credit_limit_non_negative'),
        CheckConstraint('current_debt >= 0', name='current_debt_non_negative'),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(BigIntegerPK, primary_key=True, autoincrement=True),
        description="Unique account identifier (auto-increment)"
    )

    customer_id: str = Field(
        index=True,
        unique=True,
        description="Customer ID (unique - one account per customer)"
    )

    credit_limit: Decimal = Field(
        default=Decimal("0"),
        sa_column=Column(Money, nullable=False, default=0),
        description="Maximum aggregate debt (0 = unlimited)"
    )

    current_debt: Decimal = Field(
        default=Decimal("0"),
        sa_column=Column(Money, nullable=False, default=0),
        description="Sum of pending amounts over open credit sales"
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Account creation timestamp"
    )

    updated_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Last debt or limit change"
    )

    @property
    def is_unlimited(self) -> bool:
        return self.credit_limit == 0

    class Config:
        """SQLModel configuration"""
        json_schema_extra = {
            "example": {
                "id": 1,
                "customer_id": "cust_8812",
                "credit_limit": "200000.00",
                "current_debt": "180000.00",
                "created_at": "2024-01-01T00:00:00Z",
                "updated_at": "2024-01-05T00:00:00Z"
            }
        }
