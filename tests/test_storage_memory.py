from __future__ import annotations

import unittest

from productivity_api.models.project import ProjectCreate
from productivity_api.models.task import TaskCreate
from productivity_api.storage import build_storage
from productivity_api.storage.memory import MemoryStorage
from tests.storage_contract import StorageContract


class TestMemoryStorage(StorageContract, unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self) -> None:
        self.storage = MemoryStorage()
        await self.storage.init()

    async def test_returned_records_are_copies(self) -> None:
        created = await self.storage.create_task(TaskCreate(title="Copy", tags=["one"]))
        created.tags.append("mutated")
        self.assertEqual(["one"], (await self.storage.get_task(created.id)).tags)

    async def test_collections_have_independent_counters(self) -> None:
        task = await self.storage.create_task(TaskCreate(title="Task"))
        await self.storage.create_task(TaskCreate(title="Task 2"))
        project = await self.storage.create_project(ProjectCreate(name="Project"))
        self.assertEqual(1, task.id)
        self.assertEqual(1, project.id)


class TestBuildStorage(unittest.TestCase):
    def test_selects_backend_by_config(self) -> None:
        self.assertEqual("memory", build_storage({"STORAGE_BACKEND": "memory"}).name)
        self.assertEqual("memory", build_storage({}).name)
        sql = build_storage({"STORAGE_BACKEND": "SQL", "DATABASE_URL": "sqlite+aiosqlite:///:memory:"})
        self.assertEqual("sql", sql.name)
        mongo = build_storage({"STORAGE_BACKEND": "mongo", "MONGO_URL": "mongodb://localhost:27017",
                               "MONGO_DATABASE": "test"})
        self.assertEqual("mongo", mongo.name)

    def test_unknown_backend_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            build_storage({"STORAGE_BACKEND": "firestore"})


if __name__ == "__main__":
    unittest.main()
