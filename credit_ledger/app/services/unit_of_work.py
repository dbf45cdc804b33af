from abc import ABC, abstractmethod


class UnitOfWork(ABC):
    """
    Transaction boundary spanning all repositories of a use case

    Writes made through the repositories become visible together on
    commit, or not at all on rollback.
    """

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        await self.rollback()

    @abstractmethod
    async def commit(self):
        pass

    @abstractmethod
    async def rollback(self):
        pass
