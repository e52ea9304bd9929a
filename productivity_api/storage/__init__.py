import logging

from productivity_api.storage.base import Storage
from productivity_api.storage.memory import MemoryStorage

logger = logging.getLogger(__name__)

BACKENDS = ("memory", "mongo", "sql")


def build_storage(config: dict) -> Storage:
    """Создать хранилище по ключу STORAGE_BACKEND конфигурации"""
    backend = (config.get("STORAGE_BACKEND") or "memory").lower()
    logger.info(f"Используется хранилище: {backend}")

    if backend == "memory":
        return MemoryStorage()
    if backend == "mongo":
        from productivity_api.storage.mongo import MongoStorage
        return MongoStorage(url=config["MONGO_URL"], database_name=config["MONGO_DATABASE"])
    if backend == "sql":
        from productivity_api.storage.sql import SqlStorage
        return SqlStorage(config["DATABASE_URL"])

    raise ValueError(f"Unknown storage backend: {backend}. Expected one of {', '.join(BACKENDS)}")


__all__ = ["Storage", "MemoryStorage", "build_storage", "BACKENDS"]
