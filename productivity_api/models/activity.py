from typing import Any, Optional

from pydantic import Field

from productivity_api.models.base import CamelModel, StoredModel, UtcDatetime


class ActivityLogCreate(CamelModel):
    """Запись журнала активности. Журнал только пополняется"""
    user_id: int
    team_id: Optional[int] = None
    project_id: Optional[int] = None
    task_id: Optional[int] = None
    action: str = Field(min_length=1)
    details: Optional[Any] = None


class ActivityLog(StoredModel):
    user_id: int
    team_id: Optional[int] = None
    project_id: Optional[int] = None
    task_id: Optional[int] = None
    action: str
    details: Optional[Any] = None
    created_at: UtcDatetime


class ActivityLogRequest(CamelModel):
    """Тело запроса на запись в журнал; автор берется из сессии"""
    team_id: Optional[int] = None
    project_id: Optional[int] = None
    task_id: Optional[int] = None
    action: str = Field(min_length=1)
    details: Optional[Any] = None
