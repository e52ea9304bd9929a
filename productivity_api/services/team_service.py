from typing import Optional
import logging

from productivity_api.models.activity import ActivityLogCreate
from productivity_api.models.collaboration import (
    CollaborativeProject,
    CollaborativeProjectCreate,
    TaskAssignment,
    TaskAssignmentCreate,
)
from productivity_api.models.team import Team, TeamCreate
from productivity_api.storage.base import Storage

logger = logging.getLogger(__name__)


class TeamService:
    """Командные операции, которые оставляют след в журнале активности"""

    def __init__(self, storage: Storage):
        self.storage = storage

    async def _log(self, user_id: int, action: str, team_id: Optional[int] = None,
                   project_id: Optional[int] = None, task_id: Optional[int] = None, details=None):
        await self.storage.create_activity_log(ActivityLogCreate(
            user_id=user_id,
            team_id=team_id,
            project_id=project_id,
            task_id=task_id,
            action=action,
            details=details,
        ))

    async def create_team(self, team_data: TeamCreate, user_id: int) -> Team:
        team = await self.storage.create_team(team_data, user_id)
        logger.info(f"Пользователь {user_id} создал команду {team.id}")
        await self._log(user_id, "created_team", team_id=team.id, details={"name": team.name})
        return team

    async def share_project(self, team_id: int, project_id: int, user_id: int,
                            permissions: Optional[str] = None) -> CollaborativeProject:
        data = {"team_id": team_id, "project_id": project_id, "shared_by_id": user_id}
        if permissions:
            data["permissions"] = permissions
        shared = await self.storage.share_project(CollaborativeProjectCreate(**data))
        logger.info(f"Проект {project_id} открыт команде {team_id}")
        await self._log(user_id, "shared_project", team_id=team_id, project_id=project_id,
                        details={"permissions": shared.permissions})
        return shared

    async def assign_task(self, task_id: int, assignee_id: int, user_id: int) -> TaskAssignment:
        assignment = await self.storage.assign_task(TaskAssignmentCreate(
            task_id=task_id,
            user_id=assignee_id,
            assigned_by_id=user_id,
        ))
        logger.info(f"Задача {task_id} назначена пользователю {assignee_id}")
        await self._log(user_id, "assigned_task", task_id=task_id, details={"assigneeId": assignee_id})
        return assignment

    async def delete_team(self, team_id: int) -> bool:
        return await self.storage.delete_team(team_id)
