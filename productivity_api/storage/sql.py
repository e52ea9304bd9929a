import logging
from datetime import date
from typing import Any, Dict, List, Optional

from sqlalchemy import delete, select

from productivity_api.database import create_engine, create_session_factory, get_session, init_db
from productivity_api.db.models import TABLES
from productivity_api.models.time_block import TimeBlock
from productivity_api.storage.base import TIME_BLOCKS, Storage, day_bounds

logger = logging.getLogger(__name__)


def _row_to_dict(row) -> Dict[str, Any]:
    return {column.name: getattr(row, column.name) for column in row.__table__.columns}


class SqlStorage(Storage):
    """Хранилище в реляционной БД через асинхронный SQLAlchemy"""

    name = "sql"

    def __init__(self, db_string: str, echo: bool = False):
        self.engine = create_engine(db_string, echo=echo)
        self.session_factory = create_session_factory(self.engine)

    async def init(self) -> None:
        await init_db(self.engine)
        logger.info(f"База данных готова: {self.engine.url.render_as_string(hide_password=True)}")

    async def close(self) -> None:
        await self.engine.dispose()

    async def _insert(self, collection: str, data: Dict[str, Any]) -> Dict[str, Any]:
        table = TABLES[collection]
        async with get_session(self.session_factory) as session:
            row = table(**{key: value for key, value in data.items() if key != "id"})
            session.add(row)
            await session.commit()
            await session.refresh(row)
            return _row_to_dict(row)

    async def _fetch(self, collection: str, record_id: int) -> Optional[Dict[str, Any]]:
        async with get_session(self.session_factory) as session:
            row = await session.get(TABLES[collection], record_id)
            return _row_to_dict(row) if row is not None else None

    async def _select(self, query) -> List[Dict[str, Any]]:
        async with get_session(self.session_factory) as session:
            result = await session.execute(query)
            return [_row_to_dict(row) for row in result.scalars().all()]

    async def _fetch_all(self, collection: str) -> List[Dict[str, Any]]:
        table = TABLES[collection]
        return await self._select(select(table).order_by(table.id))

    async def _fetch_many(self, collection: str, ids: List[int]) -> List[Dict[str, Any]]:
        if not ids:
            return []
        table = TABLES[collection]
        return await self._select(select(table).where(table.id.in_(ids)).order_by(table.id))

    async def _find(self, collection: str, field: str, value: Any) -> List[Dict[str, Any]]:
        table = TABLES[collection]
        return await self._select(select(table).where(getattr(table, field) == value).order_by(table.id))

    async def _patch(self, collection: str, record_id: int, changes: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        async with get_session(self.session_factory) as session:
            row = await session.get(TABLES[collection], record_id)
            if row is None:
                return None
            for key, value in changes.items():
                setattr(row, key, value)
            await session.commit()
            await session.refresh(row)
            return _row_to_dict(row)

    async def _remove(self, collection: str, record_id: int) -> bool:
        table = TABLES[collection]
        async with get_session(self.session_factory) as session:
            result = await session.execute(delete(table).where(table.id == record_id))
            await session.commit()
            return result.rowcount > 0

    async def get_time_blocks_by_day(self, day: date) -> List[TimeBlock]:
        table = TABLES[TIME_BLOCKS]
        start, end = day_bounds(day)
        query = (
            select(table)
            .where(table.start_time >= start, table.start_time < end)
            .order_by(table.id)
        )
        return self._to_models(TIME_BLOCKS, await self._select(query))
