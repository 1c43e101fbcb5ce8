import logging
from contextlib import asynccontextmanager
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from cardshop.domain.exceptions import StoreError
from cardshop.infrastructure.repositories import (
    SQLAlchemyInventoryRepository,
    SQLAlchemyOrderRepository
)

logger = logging.getLogger(__name__)


class UnitOfWork:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    @asynccontextmanager
    async def __call__(self):
        # Сессия держит одно соединение из пула и закрывается на любом выходе
        async with self._session_factory() as session:
            try:
                await session.begin()
                uow_impl = _UnitOfWorkImpl(session)
                yield uow_impl
                # Если commit не вызван — rollback
                await session.rollback()
            except SQLAlchemyError as e:
                logger.error(f"Ошибка БД, транзакция откатывается: {e}")
                await session.rollback()
                raise StoreError("Database error") from e
            except Exception:
                await session.rollback()
                raise


class _UnitOfWorkImpl:
    def __init__(self, session: AsyncSession):
        self._session = session
        self.inventory = SQLAlchemyInventoryRepository(session)
        self.orders = SQLAlchemyOrderRepository(session)

    async def commit(self):
        await self._session.commit()

    async def rollback(self):
        await self._session.rollback()
