from typing import Optional

from pydantic import Field

from productivity_api.models.base import CamelModel, StoredModel, UtcDatetime


class PomodoroSessionCreate(CamelModel):
    """Данные для запуска помидора. endTime и completed выставляет сервер"""
    task_id: Optional[int] = None
    start_time: UtcDatetime
    duration: int = Field(ge=1)  # в минутах


class PomodoroSessionUpdate(CamelModel):
    task_id: Optional[int] = None
    start_time: Optional[UtcDatetime] = None
    end_time: Optional[UtcDatetime] = None
    duration: Optional[int] = Field(default=None, ge=1)
    completed: Optional[bool] = None


class PomodoroSession(StoredModel):
    """Модель сессии помидора"""
    task_id: Optional[int] = None
    start_time: UtcDatetime
    end_time: Optional[UtcDatetime] = None
    duration: int
    completed: bool = False
