"""Data Transfer Objects for Credit Ledger Use Cases

Pydantic models for command inputs and response outputs.
"""

from datetime import datetime, date
from decimal import Decimal
from typing import Optional, Literal, Union
from pydantic import BaseModel, Field
from credit_ledger.domain.payment import PaymentMethod


AvailableCredit = Union[Decimal, Literal["unlimited"]]


class CreateCreditSaleCommandDTO(BaseModel):
    """
    Command DTO for creating a credit sale

    Used as input to CreateCreditSale use case. The total comes from the
    sales workflow; it is validated by the use case.
    """

    customer_id: str = Field(
        ...,
        description="Customer identifier"
    )

    total: Decimal = Field(
        ...,
        description="Sale total (must be > 0)"
    )

    due_date: Optional[date] = Field(
        default=None,
        description="Date the balance is due"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "customer_id": "cust_8812",
                "total": "100000.00",
                "due_date": "2024-02-01"
            }
        }


class RegisterPaymentCommandDTO(BaseModel):
    """
    Command DTO for registering a payment against a credit sale

    Used as input to RegisterPayment use case.
    """

    sale_id: int = Field(
        ...,
        description="Credit sale the payment is applied to"
    )

    customer_id: str = Field(
        ...,
        description="Customer paying (must own the sale)"
    )

    amount: Decimal = Field(
        ...,
        description="Amount to apply (must be > 0 and <= amount_pending)"
    )

    method: PaymentMethod = Field(
        ...,
        description="Payment method (cash, card, transfer)"
    )

    registered_by: str = Field(
        ...,
        description="Cashier or user registering the payment"
    )

    notes: Optional[str] = Field(
        default=None,
        description="Free-form notes"
    )

    idempotency_key: str = Field(
        ...,
        description="Unique key for idempotent retries"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "sale_id": 42,
                "customer_id": "cust_8812",
                "amount": "40000.00",
                "method": "cash",
                "registered_by": "cashier_03",
                "notes": "First installment",
                "idempotency_key": "pos-3:sale-42:1"
            }
        }


class UpdateCreditLimitCommandDTO(BaseModel):
    """Command DTO for changing a customer's credit limit"""

    customer_id: str = Field(..., description="Customer identifier")
    new_limit: Decimal = Field(..., description="New credit limit (>= 0, 0 = unlimited)")


class CreditSaleDTO(BaseModel):
    """Read model of a credit sale"""

    id: int
    customer_id: str
    total: Decimal
    amount_paid: Decimal
    amount_pending: Decimal
    payment_status: str = Field(..., description="pending, partial or paid")
    due_date: Optional[date] = None
    is_overdue: bool = False
    paid_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class PaymentDTO(BaseModel):
    """Read model of a payment"""

    id: int
    sale_id: int
    customer_id: str
    amount: Decimal
    method: str
    registered_by: str
    notes: Optional[str] = None
    idempotency_key: str
    created_at: datetime


class CreditAccountDTO(BaseModel):
    """
    Read model of a credit account

    available_credit is "unlimited" when credit_limit is 0.
    """

    customer_id: str
    credit_limit: Decimal
    current_debt: Decimal
    available_credit: AvailableCredit
    usage_percentage: Optional[Decimal] = Field(
        default=None,
        description="current_debt as a percentage of credit_limit (None when unlimited)"
    )
    risk_tier: str = Field(..., description="normal, alert or critical")
    is_over_limit: bool = False
    updated_at: datetime

    class Config:
        json_schema_extra = {
            "example": {
                "customer_id": "cust_8812",
                "credit_limit": "200000.00",
                "current_debt": "180000.00",
                "available_credit": "20000.00",
                "usage_percentage": "90.00",
                "risk_tier": "critical",
                "is_over_limit": False,
                "updated_at": "2024-01-05T00:00:00Z"
            }
        }


class CreditSaleResponseDTO(BaseModel):
    """Response DTO for CreateCreditSale"""

    sale: CreditSaleDTO
    account: CreditAccountDTO


class PaymentRegistrationResponseDTO(BaseModel):
    """
    Response DTO for RegisterPayment

    replayed is True when the idempotency key had already been used and
    the original payment is returned without applying anything.
    """

    payment: PaymentDTO
    sale: CreditSaleDTO
    customer_debt: Decimal
    replayed: bool = False


class CreditLimitResponseDTO(BaseModel):
    """Response DTO for UpdateCreditLimit"""

    account: CreditAccountDTO
    previous_limit: Decimal


class CreditAuthorizationDTO(BaseModel):
    """Outcome of a credit limit check"""

    customer_id: str
    approved: bool
    requested_amount: Decimal
    credit_limit: Decimal
    current_debt: Decimal
    available_credit: AvailableCredit
    message: str


class ListDebtorsResponseDTO(BaseModel):
    """Response DTO for ListDebtors"""

    debtors: list[CreditAccountDTO]
    total: int = Field(..., description="Number of debtors")
    total_debt: Decimal = Field(..., description="Sum of current_debt over the returned page")
    limit: int
    offset: int


class PaymentHistoryResponseDTO(BaseModel):
    """Response DTO for GetPaymentHistory"""

    sale_id: int
    payments: list[PaymentDTO]
    total_paid: Decimal


class ListCustomerCreditSalesResponseDTO(BaseModel):
    customer_id: str
    sales: list[CreditSaleDTO]
    total: int
    limit: int
    offset: int


class ListCustomerPaymentsResponseDTO(BaseModel):
    customer_id: str
    payments: list[PaymentDTO]
    total: int
    limit: int
    offset: int


class LedgerDiscrepancyDTO(BaseModel):
    """A derived balance that disagrees with its source records"""

    kind: str = Field(..., description="debt_mismatch or payment_mismatch")
    customer_id: str
    sale_id: Optional[int] = None
    expected: Decimal = Field(..., description="Value recomputed from source records")
    actual: Decimal = Field(..., description="Stored value")
    discrepancy: Decimal = Field(..., description="actual - expected")


class LedgerAuditResultDTO(BaseModel):
    """Response DTO for AuditCreditLedger"""

    accounts_checked: int
    sales_checked: int
    discrepancies_found: int
    discrepancies: list[LedgerDiscrepancyDTO]
    audit_time: datetime
    execution_time_ms: int
