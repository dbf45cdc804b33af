"""Credit Ledger Audit Background Worker

Periodically checks customer debts and sale balances against the sales
and payments they are derived from. Can be run as a standalone script or
integrated with a scheduler.
"""

import asyncio
import logging
from datetime import datetime
from typing import Optional
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from credit_ledger.adapter.repositories import (
    SqlAlchemyCreditAccountRepository,
    SqlAlchemyCreditSaleRepository,
    SqlAlchemyPaymentRepository,
)
from credit_ledger.adapter.services.notification_service import create_notification_service
from credit_ledger.app.services.notification_service import NotificationService
from credit_ledger.app.use_cases.credit import AuditCreditLedger, LedgerAuditResultDTO

logger = logging.getLogger(__name__)


class LedgerAuditorWorker:
    """
    Background worker for the credit ledger audit

    Usage:
        # Run once
        worker = LedgerAuditorWorker()
        result = await worker.run_once()

        # Run continuously
        worker = LedgerAuditorWorker()
        await worker.run_forever(interval_seconds=86400)  # Daily
    """

    def __init__(
        self,
        db_uri: Optional[str] = None,
        notification_service: Optional[NotificationService] = None,
    ):
        """
        Initialize the worker

        Args:
            db_uri: Database URI (defaults to ApplicationConfig.DB_URI)
            notification_service: Alert sink (defaults to the configured chain)
        """
        self.db_uri = db_uri or ApplicationConfig.DB_URI
        self.notification_service = notification_service or create_notification_service(
            ApplicationConfig.INVARIANT_ALERT_WEBHOOK
        )

        self.engine = create_async_engine(self.db_uri, echo=False, future=True)
        self.async_session_factory = sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
        )

        logger.info("LedgerAuditorWorker initialized")

    async def run_once(self) -> LedgerAuditResultDTO:
        """
        Run the audit once

        Raises:
            RuntimeError: if the audit itself fails
        """
        if not ApplicationConfig.LEDGER_AUDIT_ENABLED:
            logger.info("Credit ledger audit is disabled, skipping")
            return LedgerAuditResultDTO(
                accounts_checked=0,
                sales_checked=0,
                discrepancies_found=0,
                discrepancies=[],
                audit_time=datetime.utcnow(),
                execution_time_ms=0,
            )

        async with self.async_session_factory() as session:
            use_case = AuditCreditLedger(
                account_repo=SqlAlchemyCreditAccountRepository(session),
                sale_repo=SqlAlchemyCreditSaleRepository(session),
                payment_repo=SqlAlchemyPaymentRepository(session),
                notification_service=self.notification_service,
            )

            result = await use_case.execute()

            if result.is_err():
                logger.error(f"Ledger audit failed: {result.error.message}")
                raise RuntimeError(f"Ledger audit failed: {result.error.message}")

            response = result.value
            if response.discrepancies_found > 0:
                logger.error(
                    f"ALERT: {response.discrepancies_found} credit ledger discrepancies found!"
                )

            return response

    async def run_forever(self, interval_seconds: int = 86400):
        """
        Run the audit continuously at the given interval

        Args:
            interval_seconds: Seconds between audit runs (default: 24 hours)
        """
        logger.info(f"Starting continuous credit ledger audit with {interval_seconds}s interval")

        while True:
            try:
                result = await self.run_once()
                logger.info(
                    f"Audit cycle complete. Checked {result.accounts_checked} accounts "
                    f"and {result.sales_checked} open sales, found "
                    f"{result.discrepancies_found} discrepancies in {result.execution_time_ms}ms"
                )
            except Exception as e:
                logger.error(f"Audit cycle failed: {e}")

            await asyncio.sleep(interval_seconds)

    async def shutdown(self):
        """Cleanup resources"""
        await self.engine.dispose()
        logger.info("LedgerAuditorWorker shutdown complete")


async def main():
    """
    Entry point for running the worker as a standalone script

    Usage:
        # Run once
        python -m credit_ledger.worker.ledger_auditor --once

        # Run continuously with custom interval (in seconds)
        python -m credit_ledger.worker.ledger_auditor --interval 3600
    """
    import argparse

    logging.basicConfig(
        level=ApplicationConfig.LOG_LEVEL,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    parser = argparse.ArgumentParser(description="Credit Ledger Audit Worker")
    parser.add_argument(
        "--once", action="store_true", help="Run once and exit"
    )
    parser.add_argument(
        "--interval", type=int, default=ApplicationConfig.LEDGER_AUDIT_INTERVAL_SECONDS,
        help="Interval between runs in seconds (default: LEDGER_AUDIT_INTERVAL_SECONDS)"
    )
    args = parser.parse_args()

    worker = LedgerAuditorWorker()

    try:
        if args.once:
            result = await worker.run_once()
            print("Credit ledger audit complete:")
            print(f"  Accounts checked: {result.accounts_checked}")
            print(f"  Open sales checked: {result.sales_checked}")
            print(f"  Discrepancies found: {result.discrepancies_found}")
            print(f"  Execution time: {result.execution_time_ms}ms")
            for d in result.discrepancies:
                print(
                    f"  - {d.kind} customer={d.customer_id} sale={d.sale_id}: "
                    f"expected={d.expected}, actual={d.actual}, diff={d.discrepancy}"
                )
        else:
            await worker.run_forever(interval_seconds=args.interval)
    except KeyboardInterrupt:
        logger.info("Received shutdown signal")
    finally:
        await worker.shutdown()


if __name__ == "__main__":
    asyncio.run(main())
