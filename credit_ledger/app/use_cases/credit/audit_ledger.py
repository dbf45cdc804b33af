"""AuditCreditLedger Use Case

Recomputes the derived balances of the credit ledger from their source
records and reports every mismatch.
"""

import logging
import time
from datetime import datetime
from typing import Optional
from libs.result import Result, Return, Error
from credit_ledger.app.services.notification_service import (
    AlertKind,
    InvariantAlert,
    NotificationService,
)
from credit_ledger.app.repositories.credit_account_repository import CreditAccountRepository
from credit_ledger.app.repositories.credit_sale_repository import CreditSaleRepository
from credit_ledger.app.repositories.payment_repository import PaymentRepository
from .dtos import LedgerDiscrepancyDTO, LedgerAuditResultDTO

logger = logging.getLogger(__name__)

PAGE_SIZE = 500


class AuditCreditLedger:
    """
    Use Case: Audit the credit ledger

    Business Rules:
    1. For each account, current_debt must equal the sum of amount_pending
       over the customer's open sales
    2. For each open sale, amount_paid must equal the sum of its payments
    3. Every mismatch is logged and sent as an invariant alert
    4. Does NOT modify any data
    """

    def __init__(
        self,
        account_repo: CreditAccountRepository,
        sale_repo: CreditSaleRepository,
        payment_repo: PaymentRepository,
        notification_service: Optional[NotificationService] = None,
        page_size: int = PAGE_SIZE,
    ):
        self.account_repo = account_repo
        self.sale_repo = sale_repo
        self.payment_repo = payment_repo
        self.notification_service = notification_service
        self.page_size = page_size

    async def execute(self) -> Result[LedgerAuditResultDTO]:
        """
        Execute ledger audit

        Returns:
            Result[LedgerAuditResultDTO]: Audit result with any discrepancies
        """
        start_time = time.time()
        audit_time = datetime.utcnow()

        try:
            logger.info("Starting credit ledger audit")
            discrepancies: list[LedgerDiscrepancyDTO] = []

            # Step 1: Customer debt against open sales
            accounts_checked = 0
            offset = 0
            while True:
                accounts = await self.account_repo.get_all(limit=self.page_size, offset=offset)
                for account in accounts:
                    pending_sum = await self.sale_repo.get_pending_sum_by_customer(
                        account.customer_id
                    )
                    if account.current_debt != pending_sum:
                        discrepancies.append(
                            LedgerDiscrepancyDTO(
                                kind=AlertKind.DEBT_MISMATCH.value,
                                customer_id=account.customer_id,
                                expected=pending_sum,
                                actual=account.current_debt,
                                discrepancy=account.current_debt - pending_sum,
                            )
                        )
                accounts_checked += len(accounts)
                if len(accounts) < self.page_size:
                    break
                offset += self.page_size

            # Step 2: Sale balances against payments
            sales_checked = 0
            offset = 0
            while True:
                sales = await self.sale_repo.get_unsettled(limit=self.page_size, offset=offset)
                for sale in sales:
                    paid_sum = await self.payment_repo.get_paid_sum_by_sale(sale.id)
                    if sale.amount_paid != paid_sum:
                        discrepancies.append(
                            LedgerDiscrepancyDTO(
                                kind=AlertKind.PAYMENT_MISMATCH.value,
                                customer_id=sale.customer_id,
                                sale_id=sale.id,
                                expected=paid_sum,
                                actual=sale.amount_paid,
                                discrepancy=sale.amount_paid - paid_sum,
                            )
                        )
                sales_checked += len(sales)
                if len(sales) < self.page_size:
                    break
                offset += self.page_size

            for discrepancy in discrepancies:
                logger.warning(
                    f"Ledger discrepancy ({discrepancy.kind}) for customer "
                    f"{discrepancy.customer_id} (sale_id={discrepancy.sale_id}): "
                    f"expected={discrepancy.expected}, actual={discrepancy.actual}, "
                    f"discrepancy={discrepancy.discrepancy}"
                )
                await self._alert(discrepancy)

            execution_time_ms = int((time.time() - start_time) * 1000)

            if discrepancies:
                logger.warning(
                    f"Ledger audit complete. Found {len(discrepancies)} discrepancies "
                    f"across {accounts_checked} accounts and {sales_checked} open sales "
                    f"in {execution_time_ms}ms"
                )
            else:
                logger.info(
                    f"Ledger audit complete. {accounts_checked} accounts and "
                    f"{sales_checked} open sales consistent in {execution_time_ms}ms"
                )

            return Return.ok(
                LedgerAuditResultDTO(
                    accounts_checked=accounts_checked,
                    sales_checked=sales_checked,
                    discrepancies_found=len(discrepancies),
                    discrepancies=discrepancies,
                    audit_time=audit_time,
                    execution_time_ms=execution_time_ms,
                )
            )

        except Exception as e:
            logger.error(f"Credit ledger audit failed: {e}")
            return Return.err(
                Error(
                    code="LEDGER_AUDIT_FAILED",
                    message="Failed to audit credit ledger",
                    reason=str(e),
                )
            )

    async def _alert(self, discrepancy: LedgerDiscrepancyDTO) -> None:
        if not self.notification_service:
            return
        alert = InvariantAlert(
            kind=AlertKind(discrepancy.kind),
            customer_id=discrepancy.customer_id,
            sale_id=discrepancy.sale_id,
            expected=discrepancy.expected,
            actual=discrepancy.actual,
            detail=f"Stored value differs from source records by {discrepancy.discrepancy}",
        )
        try:
            await self.notification_service.send_invariant_alert(alert)
        except Exception as e:
            logger.error(f"Failed to send ledger discrepancy alert: {e}")
