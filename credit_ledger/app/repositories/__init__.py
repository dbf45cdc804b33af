from .credit_account_repository import AccountNotFoundError, CreditAccountRepository, DebtAdjustment
from .credit_sale_repository import CreditSaleRepository, SaleNotFoundError, VersionConflictError
from .payment_repository import PaymentRepository

__all__ = [
    "AccountNotFoundError",
    "CreditAccountRepository",
    "DebtAdjustment",
    "CreditSaleRepository",
    "SaleNotFoundError",
    "VersionConflictError",
    "PaymentRepository",
]
