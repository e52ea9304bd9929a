from enum import Enum
from typing import Optional

from pydantic import Field

from productivity_api.models.base import CamelModel, StoredModel, UtcDatetime


class AssignmentStatus(str, Enum):
    """Статусы назначения задачи"""
    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"
    COMPLETED = "completed"


class CollaborativeProjectCreate(CamelModel):
    """Открыть проект команде. sharedById берется из сессии"""
    project_id: int
    team_id: int
    shared_by_id: int
    permissions: str = Field(default="edit", min_length=1)


class CollaborativeProject(StoredModel):
    project_id: int
    team_id: int
    shared_by_id: int
    shared_at: UtcDatetime
    permissions: str = "edit"


class TaskAssignmentCreate(CamelModel):
    task_id: int
    user_id: int
    assigned_by_id: int


class TaskAssignmentStatusUpdate(CamelModel):
    status: AssignmentStatus


class TaskAssignment(StoredModel):
    """Назначение задачи пользователю"""
    task_id: int
    user_id: int
    assigned_by_id: int
    assigned_at: UtcDatetime
    status: AssignmentStatus = AssignmentStatus.PENDING


class ShareProjectRequest(CamelModel):
    project_id: int
    permissions: Optional[str] = None


class AssignTaskRequest(CamelModel):
    user_id: int
