from datetime import datetime, time, timedelta
from typing import Dict, List, Optional
import logging

import pytz

from productivity_api.models.task import Task, TaskPriority, TaskStatus
from productivity_api.storage.base import Storage

logger = logging.getLogger(__name__)

# Количество дней в окне отчета
RANGE_DAYS = {
    'day': 1,
    'week': 7,
    'month': 30,
}

# Квадранты матрицы Эйзенхауэра по приоритету задачи
EISENHOWER_QUADRANTS = {
    TaskPriority.URGENT.value: 'doFirst',
    TaskPriority.HIGH.value: 'schedule',
    TaskPriority.MEDIUM.value: 'delegate',
    TaskPriority.LOW.value: 'eliminate',
}


class AnalyticsError(ValueError):
    """Неизвестный период или часовой пояс"""


def productivity_score(completed_ratio: float, avg_focus: float, avg_blocked: float, completion_rate: float) -> int:
    """
    Итоговая оценка продуктивности от 0 до 100.

    Args:
        completed_ratio: Доля выполненных задач за период (0..1).
        avg_focus: Среднее количество минут фокуса в день.
        avg_blocked: Среднее количество запланированных минут в день.
        completion_rate: Процент завершенных помидоров (0..100).
    """
    score = (
        completed_ratio * 40
        + min(avg_focus, 120) / 120 * 30
        + min(avg_blocked, 240) / 240 * 20
        + completion_rate / 100 * 10
    )
    # Половина округляется вверх
    return min(100, int(score + 0.5))


class AnalyticsService:
    def __init__(self, storage: Storage):
        self.storage = storage

    @staticmethod
    def _timezone(tz_name: Optional[str]):
        try:
            return pytz.timezone(tz_name or 'UTC')
        except pytz.UnknownTimeZoneError:
            raise AnalyticsError(f"Unknown timezone: {tz_name}")

    async def get_summary(self, range_name: str = 'week', tz_name: Optional[str] = None,
                          now: Optional[datetime] = None) -> Dict:
        """Сводка по задачам, помидорам и блокам времени за период"""
        if range_name not in RANGE_DAYS:
            raise AnalyticsError(f"Unknown range: {range_name}")
        tz = self._timezone(tz_name)
        days = RANGE_DAYS[range_name]

        now = (now or datetime.now(pytz.utc)).astimezone(tz)
        today = now.date()
        first_day = today - timedelta(days=days - 1)
        window_start = tz.localize(datetime.combine(first_day, time.min))

        def in_window(value: datetime) -> bool:
            return window_start <= value <= now

        tasks = [task for task in await self.storage.get_tasks() if in_window(task.created_at)]
        sessions = [s for s in await self.storage.get_pomodoro_sessions() if in_window(s.start_time)]
        blocks = [b for b in await self.storage.get_time_blocks() if in_window(b.start_time)]
        logger.debug(f"Аналитика за {range_name}: задач {len(tasks)}, сессий {len(sessions)}, блоков {len(blocks)}")

        series = []
        for offset in range(days):
            day = first_day + timedelta(days=offset)
            day_tasks = [task for task in tasks if task.created_at.astimezone(tz).date() == day]
            series.append({
                'date': day.isoformat(),
                'tasksCreated': len(day_tasks),
                'tasksCompleted': len([task for task in day_tasks if task.status == TaskStatus.COMPLETED.value]),
                'focusMinutes': sum(s.duration for s in sessions if s.start_time.astimezone(tz).date() == day),
            })

        completed_tasks = len([task for task in tasks if task.status == TaskStatus.COMPLETED.value])
        completed_ratio = completed_tasks / len(tasks) if tasks else 0

        total_focus = sum(s.duration for s in sessions)
        avg_focus = total_focus / days
        completed_sessions = len([s for s in sessions if s.completed])
        completion_rate = completed_sessions / len(sessions) * 100 if sessions else 0

        blocked_minutes = sum(int((b.end_time - b.start_time).total_seconds() / 60) for b in blocks)
        avg_blocked = blocked_minutes / days

        return {
            'range': range_name,
            'timezone': tz.zone,
            'start': window_start.isoformat(),
            'end': now.isoformat(),
            'tasksTotal': len(tasks),
            'tasksCompleted': completed_tasks,
            'tasksByPriority': {p.value: len([t for t in tasks if t.priority == p.value]) for p in TaskPriority},
            'tasksByStatus': {s.value: len([t for t in tasks if t.status == s.value]) for s in TaskStatus},
            'series': series,
            'totalFocusMinutes': total_focus,
            'averageFocusMinutes': avg_focus,
            'pomodoroSessions': len(sessions),
            'pomodoroCompletionRate': completion_rate,
            'blockedMinutes': blocked_minutes,
            'averageBlockedMinutes': avg_blocked,
            'productivityScore': productivity_score(completed_ratio, avg_focus, avg_blocked, completion_rate),
        }

    async def get_eisenhower_matrix(self) -> Dict[str, List[Task]]:
        """Незавершенные задачи, разложенные по квадрантам"""
        matrix: Dict[str, List[Task]] = {quadrant: [] for quadrant in EISENHOWER_QUADRANTS.values()}
        for task in await self.storage.get_tasks():
            if task.completed:
                continue
            matrix[EISENHOWER_QUADRANTS[task.priority]].append(task)
        return matrix
