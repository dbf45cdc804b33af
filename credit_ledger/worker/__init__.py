"""Background workers for the credit ledger service"""
from .ledger_auditor import LedgerAuditorWorker

__all__ = ["LedgerAuditorWorker"]
