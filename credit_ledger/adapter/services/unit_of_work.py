from sqlmodel.ext.asyncio.session import AsyncSession
from credit_ledger.app.services.unit_of_work import UnitOfWork


class SqlAlchemyUnitOfWork(UnitOfWork):
    """UnitOfWork over a single AsyncSession shared with the repositories"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def commit(self):
        await self.session.commit()

    async def rollback(self):
        # Drops pending writes and expires loaded rows so the next read
        # of a sale or account sees what is committed
        await self.session.rollback()
