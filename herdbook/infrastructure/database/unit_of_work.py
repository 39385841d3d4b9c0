# herdbook/infrastructure/database/unit_of_work.py

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from herdbook.infrastructure.database.repositories import (
    SqlAlchemyAuditRepository,
    SqlAlchemyBreedingRecordRepository,
    SqlAlchemyCattleRepository,
    SqlAlchemyFeedRepository,
    SqlAlchemyFeedTransactionRepository,
    SqlAlchemyHealthRecordRepository,
    SqlAlchemyUserAccountRepository,
    SqlAlchemyWorkerRepository,
)


class SqlAlchemyUnitOfWork:
    """One AsyncSession transaction shared by every repository. Rolls back unless commit() was called."""

    def __init__(self, session_factory: async_sessionmaker) -> None:
        self._session_factory = session_factory
        self._session: Optional[AsyncSession] = None

    async def __aenter__(self) -> "SqlAlchemyUnitOfWork":
        session = self._session_factory()
        self._session = session
        self.cattle = SqlAlchemyCattleRepository(session)
        self.health_records = SqlAlchemyHealthRecordRepository(session)
        self.breeding_records = SqlAlchemyBreedingRecordRepository(session)
        self.feed = SqlAlchemyFeedRepository(session)
        self.feed_transactions = SqlAlchemyFeedTransactionRepository(session)
        self.workers = SqlAlchemyWorkerRepository(session)
        self.user_accounts = SqlAlchemyUserAccountRepository(session)
        self.audit = SqlAlchemyAuditRepository(session)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        try:
            if self._session.in_transaction():
                await self._session.rollback()
        finally:
            await self._session.close()
            self._session = None

    async def commit(self) -> None:
        await self._session.commit()

    async def rollback(self) -> None:
        await self._session.rollback()
