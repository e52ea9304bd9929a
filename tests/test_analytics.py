from __future__ import annotations

from datetime import datetime, timedelta, timezone
import unittest

from productivity_api.models.pomodoro import PomodoroSessionCreate
from productivity_api.models.task import TaskCreate
from productivity_api.models.time_block import TimeBlockCreate
from productivity_api.services.analytics_service import AnalyticsError, AnalyticsService, productivity_score
from productivity_api.storage.memory import MemoryStorage
from tests.helpers import make_app


class TestProductivityScore(unittest.TestCase):
    def test_score_weights(self) -> None:
        self.assertEqual(0, productivity_score(0, 0, 0, 0))
        self.assertEqual(100, productivity_score(1, 120, 240, 100))
        self.assertEqual(100, productivity_score(1, 500, 900, 100))
        # 0.5*40 + 60/120*30 + 120/240*20 + 50/100*10 = 20 + 15 + 10 + 5
        self.assertEqual(50, productivity_score(0.5, 60, 120, 50))
        # 20 + 15 + 20 + 7.5: половина округляется вверх
        self.assertEqual(63, productivity_score(0.5, 60, 240, 75))


class TestAnalyticsService(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self) -> None:
        self.storage = MemoryStorage()
        self.service = AnalyticsService(self.storage)

    async def test_day_summary(self) -> None:
        now = datetime.now(timezone.utc)
        await self.storage.create_task(TaskCreate(title="done", status="completed", priority="high"))
        await self.storage.create_task(TaskCreate(title="open", priority="urgent"))
        session = await self.storage.create_pomodoro_session(PomodoroSessionCreate(start_time=now, duration=60))
        await self.storage.update_pomodoro_session(session.id, {"completed": True})
        await self.storage.create_pomodoro_session(PomodoroSessionCreate(start_time=now, duration=30))
        await self.storage.create_time_block(TimeBlockCreate(
            title="Focus", start_time=now, end_time=now + timedelta(minutes=120),
        ))

        summary = await self.service.get_summary("day", "UTC", now=now + timedelta(seconds=1))
        self.assertEqual(2, summary["tasksTotal"])
        self.assertEqual(1, summary["tasksCompleted"])
        self.assertEqual({"low": 0, "medium": 0, "high": 1, "urgent": 1}, summary["tasksByPriority"])
        self.assertEqual({"todo": 1, "in_progress": 0, "completed": 1}, summary["tasksByStatus"])
        self.assertEqual(90, summary["totalFocusMinutes"])
        self.assertEqual(50, summary["pomodoroCompletionRate"])
        self.assertEqual(120, summary["blockedMinutes"])
        self.assertEqual(1, len(summary["series"]))
        self.assertEqual(2, summary["series"][0]["tasksCreated"])
        self.assertEqual(90, summary["series"][0]["focusMinutes"])
        # 0.5*40 + 90/120*30 + 120/240*20 + 50/100*10 = 20 + 22.5 + 10 + 5
        self.assertEqual(58, summary["productivityScore"])

    async def test_blocked_minutes_truncate_toward_zero(self) -> None:
        now = datetime(2024, 5, 10, 12, 0, tzinfo=timezone.utc)
        await self.storage.create_time_block(TimeBlockCreate(
            title="Focus", start_time=now, end_time=now + timedelta(minutes=30),
        ))
        await self.storage.create_time_block(TimeBlockCreate(
            title="Backwards", start_time=now, end_time=now - timedelta(seconds=90),
        ))
        summary = await self.service.get_summary("day", "UTC", now=now + timedelta(hours=1))
        self.assertEqual(29, summary["blockedMinutes"])

    async def test_week_window_excludes_old_records(self) -> None:
        now = datetime(2024, 5, 10, 12, 0, tzinfo=timezone.utc)
        await self.storage.create_pomodoro_session(PomodoroSessionCreate(start_time=now - timedelta(days=3), duration=25))
        await self.storage.create_pomodoro_session(PomodoroSessionCreate(start_time=now - timedelta(days=8), duration=25))

        summary = await self.service.get_summary("week", "Europe/Moscow", now=now)
        self.assertEqual(7, len(summary["series"]))
        self.assertEqual("2024-05-04", summary["series"][0]["date"])
        self.assertEqual("2024-05-10", summary["series"][-1]["date"])
        self.assertEqual(1, summary["pomodoroSessions"])
        self.assertEqual(25, summary["totalFocusMinutes"])

    async def test_unknown_range_or_timezone(self) -> None:
        with self.assertRaises(AnalyticsError):
            await self.service.get_summary("year")
        with self.assertRaises(AnalyticsError):
            await self.service.get_summary("week", "Mars/Olympus")

    async def test_eisenhower_matrix(self) -> None:
        await self.storage.create_task(TaskCreate(title="fire", priority="urgent"))
        await self.storage.create_task(TaskCreate(title="plan", priority="high"))
        await self.storage.create_task(TaskCreate(title="email", priority="medium"))
        await self.storage.create_task(TaskCreate(title="browse", priority="low"))
        await self.storage.create_task(TaskCreate(title="finished", priority="urgent", completed=True))

        matrix = await self.service.get_eisenhower_matrix()
        self.assertEqual(["fire"], [task.title for task in matrix["doFirst"]])
        self.assertEqual(["plan"], [task.title for task in matrix["schedule"]])
        self.assertEqual(["email"], [task.title for task in matrix["delegate"]])
        self.assertEqual(["browse"], [task.title for task in matrix["eliminate"]])


class TestAnalyticsApi(unittest.TestCase):
    def setUp(self) -> None:
        self.client = make_app().test_client()

    def test_summary_and_errors(self) -> None:
        response = self.client.get("/api/analytics/summary?range=month")
        self.assertEqual(200, response.status_code)
        body = response.get_json()
        self.assertEqual(30, len(body["series"]))
        self.assertEqual(0, body["productivityScore"])

        self.assertEqual(400, self.client.get("/api/analytics/summary?range=decade").status_code)
        self.assertEqual(400, self.client.get("/api/analytics/summary?tz=Nowhere/City").status_code)

    def test_eisenhower_route(self) -> None:
        self.client.post("/api/tasks", json={"title": "fire", "priority": "urgent"})
        body = self.client.get("/api/frameworks/eisenhower").get_json()
        self.assertEqual(["fire"], [task["title"] for task in body["doFirst"]])
        self.assertEqual([], body["eliminate"])

    def test_timezones(self) -> None:
        zones = self.client.get("/api/timezones").get_json()
        self.assertIn({"value": "Europe/Moscow", "label": "Europe/Moscow", "group": "Europe"}, zones)


if __name__ == "__main__":
    unittest.main()
