from datetime import datetime
import asyncio
import logging
import threading
from typing import Any, Dict, List, Optional

from pymongo import AsyncMongoClient, ReturnDocument

from productivity_api.storage.base import RECORD_MODELS, Storage

logger = logging.getLogger(__name__)

COUNTERS = "counters"


def _millis(value: Any) -> Any:
    """BSON хранит время с точностью до миллисекунд, лишние микросекунды отбрасываются"""
    if isinstance(value, datetime):
        return value.replace(microsecond=value.microsecond // 1000 * 1000)
    if isinstance(value, dict):
        return {key: _millis(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_millis(item) for item in value]
    return value


def _to_document(record_id: int, data: Dict[str, Any]) -> Dict[str, Any]:
    document = _millis(data)
    document["_id"] = str(record_id)
    document["id"] = record_id
    return document


def _from_document(document: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if document is None:
        return None
    record = dict(document)
    record.pop("_id", None)
    return record


class MongoStorage(Storage):
    """
    Хранилище в MongoDB.

    Каждая сущность лежит в своей коллекции, _id документа - строковый id.
    Целые id выдает атомарный счетчик ($inc) в коллекции counters, поэтому
    параллельные вставки из разных процессов не получают одинаковый id.
    Запросы используют только равенство полей и $in.
    """

    name = "mongo"

    def __init__(self, url: str = "mongodb://localhost:27017", database_name: str = "productivity", database=None):
        self._url = url
        self._database_name = database_name
        self._database = database
        # Асинхронный клиент привязан к event loop, в котором был создан.
        # Веб-приложение работает в одном общем цикле (blueprints/wrapper.py)
        self._clients: Dict[asyncio.AbstractEventLoop, AsyncMongoClient] = {}
        self._lock = threading.Lock()

    def _db(self):
        if self._database is not None:
            return self._database
        loop = asyncio.get_running_loop()
        with self._lock:
            client = self._clients.get(loop)
            if client is None:
                logger.debug(f"Новое подключение к MongoDB для цикла {id(loop)}")
                client = AsyncMongoClient(self._url, tz_aware=True)
                self._clients[loop] = client
        return client[self._database_name]

    async def init(self) -> None:
        """Выставить счетчики id не ниже уже занятых значений"""
        db = self._db()
        for collection in RECORD_MODELS:
            latest = await db[collection].find_one({}, sort=[("id", -1)])
            if latest is not None:
                await db[COUNTERS].update_one(
                    {"_id": collection},
                    {"$max": {"seq": latest["id"]}},
                    upsert=True,
                )
        logger.info(f"MongoDB готова: база {self._database_name}")

    async def close(self) -> None:
        with self._lock:
            clients = list(self._clients.items())
            self._clients.clear()
        current = asyncio.get_running_loop()
        for loop, client in clients:
            # Клиенты других циклов закрываются только в своем цикле
            if loop is current:
                await client.close()

    async def _next_id(self, collection: str) -> int:
        counter = await self._db()[COUNTERS].find_one_and_update(
            {"_id": collection},
            {"$inc": {"seq": 1}},
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )
        return counter["seq"]

    async def _insert(self, collection: str, data: Dict[str, Any]) -> Dict[str, Any]:
        record_id = await self._next_id(collection)
        document = _to_document(record_id, data)
        await self._db()[collection].insert_one(document)
        return _from_document(document)

    async def _fetch(self, collection: str, record_id: int) -> Optional[Dict[str, Any]]:
        return _from_document(await self._db()[collection].find_one({"_id": str(record_id)}))

    async def _fetch_all(self, collection: str) -> List[Dict[str, Any]]:
        cursor = self._db()[collection].find({})
        return [_from_document(document) for document in await cursor.to_list()]

    async def _fetch_many(self, collection: str, ids: List[int]) -> List[Dict[str, Any]]:
        if not ids:
            return []
        cursor = self._db()[collection].find({"id": {"$in": ids}})
        return [_from_document(document) for document in await cursor.to_list()]

    async def _find(self, collection: str, field: str, value: Any) -> List[Dict[str, Any]]:
        cursor = self._db()[collection].find({field: value})
        return [_from_document(document) for document in await cursor.to_list()]

    async def _patch(self, collection: str, record_id: int, changes: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        table = self._db()[collection]
        if not changes:
            return await self._fetch(collection, record_id)
        document = await table.find_one_and_update(
            {"_id": str(record_id)},
            {"$set": _millis(changes)},
            return_document=ReturnDocument.AFTER,
        )
        return _from_document(document)

    async def _remove(self, collection: str, record_id: int) -> bool:
        result = await self._db()[collection].delete_one({"_id": str(record_id)})
        return result.deleted_count > 0
