"""Credit sales and receivables use cases"""
from .credit_limit_guard import CreditLimitGuard
from .create_credit_sale import CreateCreditSale
from .register_payment import RegisterPayment
from .update_credit_limit import UpdateCreditLimit
from .get_credit_account import GetCreditAccount
from .get_credit_sale import GetCreditSale
from .list_debtors import ListDebtors
from .get_payment_history import GetPaymentHistory
from .list_customer_credit_sales import ListCustomerCreditSales
from .list_customer_payments import ListCustomerPayments
from .check_credit import CheckCreditAvailability
from .audit_ledger import AuditCreditLedger
from .dtos import (
    CreateCreditSaleCommandDTO,
    RegisterPaymentCommandDTO,
    UpdateCreditLimitCommandDTO,
    CreditSaleDTO,
    PaymentDTO,
    CreditAccountDTO,
    CreditSaleResponseDTO,
    PaymentRegistrationResponseDTO,
    CreditLimitResponseDTO,
    CreditAuthorizationDTO,
    ListDebtorsResponseDTO,
    PaymentHistoryResponseDTO,
    ListCustomerCreditSalesResponseDTO,
    ListCustomerPaymentsResponseDTO,
    LedgerDiscrepancyDTO,
    LedgerAuditResultDTO,
)

__all__ = [
    "CreditLimitGuard",
    "CreateCreditSale",
    "RegisterPayment",
    "UpdateCreditLimit",
    "GetCreditAccount",
    "GetCreditSale",
    "ListDebtors",
    "GetPaymentHistory",
    "ListCustomerCreditSales",
    "ListCustomerPayments",
    "CheckCreditAvailability",
    "AuditCreditLedger",
    "CreateCreditSaleCommandDTO",
    "RegisterPaymentCommandDTO",
    "UpdateCreditLimitCommandDTO",
    "CreditSaleDTO",
    "PaymentDTO",
    "CreditAccountDTO",
    "CreditSaleResponseDTO",
    "PaymentRegistrationResponseDTO",
    "CreditLimitResponseDTO",
    "CreditAuthorizationDTO",
    "ListDebtorsResponseDTO",
    "PaymentHistoryResponseDTO",
    "ListCustomerCreditSalesResponseDTO",
    "ListCustomerPaymentsResponseDTO",
    "LedgerDiscrepancyDTO",
    "LedgerAuditResultDTO",
]
