from contextlib import asynccontextmanager
import logging

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from productivity_api.db.models import Base

logger = logging.getLogger(__name__)


def create_engine(db_string: str, echo: bool = False) -> AsyncEngine:
    """
    Создать асинхронный движок SQLAlchemy.

    Соединения не переиспользуются между вызовами (NullPool): маршруты
    выполняются в отдельных event loop'ах, а соединение aiosqlite/asyncpg
    привязано к циклу, в котором было открыто.
    """
    return create_async_engine(db_string, echo=echo, poolclass=NullPool)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker:
    # Создаем фабрику асинхронных сессий
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False
    )


@asynccontextmanager
async def get_session(session_factory: async_sessionmaker) -> AsyncSession:
    """Получить асинхронную сессию базы данных"""
    async with session_factory() as session:
        try:
            yield session
        finally:
            await session.close()


# Функция для инициализации базы данных
async def init_db(engine: AsyncEngine):
    logger.debug("Создание таблиц, если их еще нет")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
