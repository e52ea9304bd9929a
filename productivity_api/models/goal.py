from typing import Optional

from pydantic import Field

from productivity_api.models.base import CamelModel, StoredModel, UtcDatetime


class GoalCreate(CamelModel):
    """Данные для создания SMART-цели"""
    title: str = Field(min_length=1)
    description: Optional[str] = None
    specific: Optional[str] = None
    measurable: Optional[str] = None
    achievable: Optional[str] = None
    relevant: Optional[str] = None
    time_bound: Optional[str] = None
    due_date: Optional[UtcDatetime] = None
    completed: bool = False
    progress: int = Field(default=0, ge=0, le=100)


class GoalUpdate(CamelModel):
    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    specific: Optional[str] = None
    measurable: Optional[str] = None
    achievable: Optional[str] = None
    relevant: Optional[str] = None
    time_bound: Optional[str] = None
    due_date: Optional[UtcDatetime] = None
    completed: Optional[bool] = None
    progress: Optional[int] = Field(default=None, ge=0, le=100)


class Goal(StoredModel):
    """Модель цели. Прогресс задается пользователем напрямую"""
    title: str
    description: Optional[str] = None
    specific: Optional[str] = None
    measurable: Optional[str] = None
    achievable: Optional[str] = None
    relevant: Optional[str] = None
    time_bound: Optional[str] = None
    due_date: Optional[UtcDatetime] = None
    completed: bool = False
    progress: int = 0
