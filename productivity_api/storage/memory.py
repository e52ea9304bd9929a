import copy
import logging
import threading
from typing import Any, Dict, List, Optional

from productivity_api.storage.base import RECORD_MODELS, Storage

logger = logging.getLogger(__name__)


class MemoryStorage(Storage):
    """
    Хранилище в памяти процесса.

    Каждая коллекция - словарь id -> запись в порядке вставки. Счетчик id
    у коллекции свой и только растет, поэтому id после удаления не
    переиспользуются. Данные живут до перезапуска процесса.
    """

    name = "memory"

    def __init__(self):
        self._lock = threading.Lock()
        self._collections: Dict[str, Dict[int, Dict[str, Any]]] = {name: {} for name in RECORD_MODELS}
        self._counters: Dict[str, int] = {name: 0 for name in RECORD_MODELS}

    def _next_id(self, collection: str) -> int:
        self._counters[collection] += 1
        return self._counters[collection]

    async def _insert(self, collection: str, data: Dict[str, Any]) -> Dict[str, Any]:
        with self._lock:
            record = copy.deepcopy(data)
            record["id"] = self._next_id(collection)
            self._collections[collection][record["id"]] = record
            return copy.deepcopy(record)

    async def _fetch(self, collection: str, record_id: int) -> Optional[Dict[str, Any]]:
        with self._lock:
            record = self._collections[collection].get(record_id)
            return copy.deepcopy(record) if record is not None else None

    async def _fetch_all(self, collection: str) -> List[Dict[str, Any]]:
        with self._lock:
            return copy.deepcopy(list(self._collections[collection].values()))

    async def _fetch_many(self, collection: str, ids: List[int]) -> List[Dict[str, Any]]:
        with self._lock:
            records = self._collections[collection]
            return [copy.deepcopy(records[record_id]) for record_id in ids if record_id in records]

    async def _find(self, collection: str, field: str, value: Any) -> List[Dict[str, Any]]:
        with self._lock:
            return [copy.deepcopy(record) for record in self._collections[collection].values()
                    if record.get(field) == value]

    async def _patch(self, collection: str, record_id: int, changes: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        with self._lock:
            record = self._collections[collection].get(record_id)
            if record is None:
                return None
            record.update(copy.deepcopy(changes))
            return copy.deepcopy(record)

    async def _remove(self, collection: str, record_id: int) -> bool:
        with self._lock:
            return self._collections[collection].pop(record_id, None) is not None
