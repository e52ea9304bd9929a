from enum import Enum
from typing import Optional

from pydantic import Field

from productivity_api.models.base import CamelModel, StoredModel, UtcDatetime


class TeamRole(str, Enum):
    """Роли участника команды"""
    OWNER = "owner"
    ADMIN = "admin"
    MEMBER = "member"
    GUEST = "guest"


class TeamCreate(CamelModel):
    """Данные для создания команды. Автор берется из сессии"""
    name: str = Field(min_length=1)
    description: Optional[str] = None
    avatar: Optional[str] = None


class TeamUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    avatar: Optional[str] = None


class Team(StoredModel):
    """Модель команды"""
    name: str
    description: Optional[str] = None
    avatar: Optional[str] = None
    created_by_id: int
    created_at: UtcDatetime


class TeamMemberCreate(CamelModel):
    team_id: int
    user_id: int
    role: TeamRole = TeamRole.MEMBER


class TeamMemberRoleUpdate(CamelModel):
    role: TeamRole


class TeamMember(StoredModel):
    """Участник команды. Уникальность пары (teamId, userId) не гарантируется"""
    team_id: int
    user_id: int
    role: TeamRole = TeamRole.MEMBER
    joined_at: UtcDatetime


class AddTeamMemberRequest(CamelModel):
    """Тело запроса на добавление участника; teamId берется из пути"""
    user_id: int
    role: TeamRole = TeamRole.MEMBER
