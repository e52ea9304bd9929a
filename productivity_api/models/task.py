from enum import Enum
from typing import List, Optional

from pydantic import Field

from productivity_api.models.base import CamelModel, StoredModel, UtcDatetime


class TaskStatus(str, Enum):
    """Статусы задачи"""
    TODO = "todo"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class TaskPriority(str, Enum):
    """Приоритеты задачи"""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class TaskCreate(CamelModel):
    """Данные для создания задачи"""
    title: str = Field(min_length=1)
    description: Optional[str] = None
    project_id: Optional[int] = None
    status: TaskStatus = TaskStatus.TODO
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: Optional[UtcDatetime] = None
    completed: bool = False
    progress: int = Field(default=0, ge=0, le=100)
    time_estimate: Optional[int] = Field(default=None, ge=0)
    tags: List[str] = Field(default_factory=list)


class TaskUpdate(CamelModel):
    """Частичное обновление задачи. completed и status не синхронизируются"""
    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    project_id: Optional[int] = None
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    due_date: Optional[UtcDatetime] = None
    completed: Optional[bool] = None
    progress: Optional[int] = Field(default=None, ge=0, le=100)
    time_estimate: Optional[int] = Field(default=None, ge=0)
    tags: Optional[List[str]] = None


class Task(StoredModel):
    """Модель задачи"""
    title: str
    description: Optional[str] = None
    project_id: Optional[int] = None
    status: TaskStatus = TaskStatus.TODO
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: Optional[UtcDatetime] = None
    completed: bool = False
    progress: int = 0
    time_estimate: Optional[int] = None
    tags: List[str] = Field(default_factory=list)
    created_at: UtcDatetime
