from .base import BaseModel
from .credit_account import CreditAccount
from .credit_sale import CreditSale, PaymentStatus, derive_payment_status
from .payment import Payment, PaymentMethod
from .credit_policy import RiskTier, UNLIMITED

__all__ = [
    "BaseModel",
    "CreditAccount",
    "CreditSale",
    "PaymentStatus",
    "derive_payment_status",
    "Payment",
    "PaymentMethod",
    "RiskTier",
    "UNLIMITED",
]
