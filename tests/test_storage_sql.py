from __future__ import annotations

from pathlib import Path
from tempfile import TemporaryDirectory
import unittest

from productivity_api.models.task import TaskCreate
from productivity_api.storage.sql import SqlStorage
from tests.storage_contract import StorageContract


class TestSqlStorage(StorageContract, unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self) -> None:
        self._tmp = TemporaryDirectory()
        self.db_path = Path(self._tmp.name) / "productivity.db"
        self.storage = SqlStorage(f"sqlite+aiosqlite:///{self.db_path}")
        await self.storage.init()

    async def asyncTearDown(self) -> None:
        await self.storage.close()
        self._tmp.cleanup()

    async def test_data_survives_new_storage_instance(self) -> None:
        created = await self.storage.create_task(TaskCreate(title="Persisted", tags=["db"]))
        await self.storage.close()

        reopened = SqlStorage(f"sqlite+aiosqlite:///{self.db_path}")
        await reopened.init()
        try:
            fetched = await reopened.get_task(created.id)
            self.assertEqual(created, fetched)
        finally:
            await reopened.close()


if __name__ == "__main__":
    unittest.main()
