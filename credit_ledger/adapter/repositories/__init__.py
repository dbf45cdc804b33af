from .credit_account_repository import SqlAlchemyCreditAccountRepository
from .credit_sale_repository import SqlAlchemyCreditSaleRepository
from .payment_repository import SqlAlchemyPaymentRepository

__all__ = [
    "SqlAlchemyCreditAccountRepository",
    "SqlAlchemyCreditSaleRepository",
    "SqlAlchemyPaymentRepository",
]
