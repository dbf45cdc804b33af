"""Request schemas for Credit API

Pydantic models for validating incoming HTTP requests.
"""

from datetime import date
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field, field_validator
from credit_ledger.domain.payment import PaymentMethod


class CreateCreditSaleRequestSchema(BaseModel):
    """
    Request schema for creating a credit sale

    Used for POST /credit/sales endpoint.
    """

    customer_id: str = Field(
        ...,
        min_length=1,
        description="Customer identifier (required, non-empty)"
    )

    total: Decimal = Field(
        ...,
        description="Sale total (must be > 0)"
    )

    due_date: Optional[date] = Field(
        default=None,
        description="Date the balance is due"
    )

    @field_validator('total')
    @classmethod
    def validate_total(cls, v):
        if v <= 0:
            raise ValueError("Total must be greater than 0")
        return v

    class Config:
        json_schema_extra = {
            "example": {
                "customer_id": "cust_8812",
                "total": "100000.00",
                "due_date": "2024-02-01"
            }
        }


class RegisterPaymentRequestSchema(BaseModel):
    """
    Request schema for registering a payment

    Used for POST /credit/sales/{sale_id}/payments endpoint. The sale id
    comes from the path.
    """

    customer_id: str = Field(
        ...,
        min_length=1,
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
        min_length=1,
        max_length=255,
        description="Cashier or user registering the payment"
    )

    notes: Optional[str] = Field(
        default=None,
        description="Free-form notes"
    )

    idempotency_key: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Unique key for idempotent retries (required, non-empty)"
    )

    @field_validator('amount')
    @classmethod
    def validate_amount(cls, v):
        if v <= 0:
            raise ValueError("Amount must be greater than 0")
        return v

    class Config:
        json_schema_extra = {
            "example": {
                "customer_id": "cust_8812",
                "amount": "40000.00",
                "method": "cash",
                "registered_by": "cashier_03",
                "idempotency_key": "pos-3:sale-42:1"
            }
        }


class UpdateCreditLimitRequestSchema(BaseModel):
    """Used for PUT /credit/accounts/{customer_id}/limit endpoint."""

    credit_limit: Decimal = Field(
        ...,
        description="New credit limit (>= 0, 0 = unlimited)"
    )

    @field_validator('credit_limit')
    @classmethod
    def validate_credit_limit(cls, v):
        if v < 0:
            raise ValueError("Credit limit cannot be negative")
        return v


class CheckCreditRequestSchema(BaseModel):
    """Used for POST /credit/accounts/{customer_id}/check endpoint."""

    amount: Decimal = Field(
        ...,
        description="Amount the customer wants to take on credit (must be > 0)"
    )

    @field_validator('amount')
    @classmethod
    def validate_amount(cls, v):
        if v <= 0:
            raise ValueError("Amount must be greater than 0")
        return v
