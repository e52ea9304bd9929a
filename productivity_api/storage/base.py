import logging
from abc import ABC, abstractmethod
from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, Iterable, List, Optional, Type

from werkzeug.security import check_password_hash, generate_password_hash

from productivity_api.errors import DuplicateEntityError
from productivity_api.models.activity import ActivityLog, ActivityLogCreate
from productivity_api.models.base import DEFAULT_COLOR, StoredModel
from productivity_api.models.collaboration import (
    AssignmentStatus,
    CollaborativeProject,
    CollaborativeProjectCreate,
    TaskAssignment,
    TaskAssignmentCreate,
)
from productivity_api.models.goal import Goal, GoalCreate
from productivity_api.models.pomodoro import PomodoroSession, PomodoroSessionCreate
from productivity_api.models.project import Project, ProjectCreate
from productivity_api.models.task import Task, TaskCreate
from productivity_api.models.team import Team, TeamCreate, TeamMember, TeamMemberCreate, TeamRole
from productivity_api.models.time_block import TimeBlock, TimeBlockCreate
from productivity_api.models.user import User, UserCreate
from productivity_api.utils import utcnow

logger = logging.getLogger(__name__)

TASKS = "tasks"
PROJECTS = "projects"
POMODORO_SESSIONS = "pomodoro_sessions"
GOALS = "goals"
TIME_BLOCKS = "time_blocks"
USERS = "users"
TEAMS = "teams"
TEAM_MEMBERS = "team_members"
COLLABORATIVE_PROJECTS = "collaborative_projects"
TASK_ASSIGNMENTS = "task_assignments"
ACTIVITY_LOGS = "activity_logs"

RECORD_MODELS: Dict[str, Type[StoredModel]] = {
    TASKS: Task,
    PROJECTS: Project,
    POMODORO_SESSIONS: PomodoroSession,
    GOALS: Goal,
    TIME_BLOCKS: TimeBlock,
    USERS: User,
    TEAMS: Team,
    TEAM_MEMBERS: TeamMember,
    COLLABORATIVE_PROJECTS: CollaborativeProject,
    TASK_ASSIGNMENTS: TaskAssignment,
    ACTIVITY_LOGS: ActivityLog,
}

# Поля, которые нельзя изменить частичным обновлением
IMMUTABLE_FIELDS = {"id", "created_at"}


def _unique(ids: Iterable[int]) -> List[int]:
    seen = set()
    result = []
    for value in ids:
        if value not in seen:
            seen.add(value)
            result.append(value)
    return result


class Storage(ABC):
    """
    Контракт хранилища.

    Публичные методы одинаковы для всех бэкендов и возвращают pydantic-модели.
    get/update на отсутствующий id возвращают None, delete возвращает False,
    исключения при этом не выбрасываются. Бэкенд реализует только примитивы
    над коллекциями записей-словарей (ключи в snake_case).
    """

    name = "abstract"

    async def init(self) -> None:
        """Подготовить источник данных при старте процесса"""

    async def close(self) -> None:
        """Освободить ресурсы при остановке процесса"""

    # ------------------------------------------------------------------
    # Примитивы бэкенда
    # ------------------------------------------------------------------

    @abstractmethod
    async def _insert(self, collection: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """Сохранить новую запись, присвоить id и вернуть ее целиком"""

    @abstractmethod
    async def _fetch(self, collection: str, record_id: int) -> Optional[Dict[str, Any]]:
        """Получить запись по id"""

    @abstractmethod
    async def _fetch_all(self, collection: str) -> List[Dict[str, Any]]:
        """Получить все записи коллекции"""

    @abstractmethod
    async def _fetch_many(self, collection: str, ids: List[int]) -> List[Dict[str, Any]]:
        """Получить записи по списку id; отсутствующие пропускаются"""

    @abstractmethod
    async def _find(self, collection: str, field: str, value: Any) -> List[Dict[str, Any]]:
        """Записи, у которых поле равно значению"""

    @abstractmethod
    async def _patch(self, collection: str, record_id: int, changes: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Поверхностно слить изменения с записью и вернуть результат"""

    @abstractmethod
    async def _remove(self, collection: str, record_id: int) -> bool:
        """Удалить запись; False, если ее не было"""

    # ------------------------------------------------------------------
    # Общие операции
    # ------------------------------------------------------------------

    @staticmethod
    def _to_model(collection: str, record: Optional[Dict[str, Any]]):
        if record is None:
            return None
        return RECORD_MODELS[collection].model_validate(record)

    def _to_models(self, collection: str, records: List[Dict[str, Any]]) -> list:
        return [self._to_model(collection, record) for record in records]

    async def _list(self, collection: str) -> list:
        return self._to_models(collection, await self._fetch_all(collection))

    async def _get(self, collection: str, record_id: int):
        return self._to_model(collection, await self._fetch(collection, record_id))

    async def _create(self, collection: str, data: Dict[str, Any]):
        record = await self._insert(collection, data)
        logger.debug(f"Создана запись {collection}#{record['id']}")
        return self._to_model(collection, record)

    async def _update(self, collection: str, record_id: int, changes: Dict[str, Any]):
        changes = {key: value for key, value in changes.items() if key not in IMMUTABLE_FIELDS}
        current = await self._fetch(collection, record_id)
        if current is None:
            return None
        # Результат слияния проверяется до записи: ValidationError не портит запись
        RECORD_MODELS[collection].model_validate({**current, **changes})
        return self._to_model(collection, await self._patch(collection, record_id, changes))

    async def _filter(self, collection: str, field: str, value: Any) -> list:
        return self._to_models(collection, await self._find(collection, field, value))

    # ------------------------------------------------------------------
    # Задачи
    # ------------------------------------------------------------------

    async def get_tasks(self) -> List[Task]:
        return await self._list(TASKS)

    async def get_task(self, task_id: int) -> Optional[Task]:
        return await self._get(TASKS, task_id)

    async def create_task(self, task: TaskCreate) -> Task:
        data = task.model_dump()
        data["created_at"] = utcnow()
        return await self._create(TASKS, data)

    async def update_task(self, task_id: int, changes: Dict[str, Any]) -> Optional[Task]:
        # completed и status намеренно не синхронизируются
        return await self._update(TASKS, task_id, changes)

    async def delete_task(self, task_id: int) -> bool:
        return await self._remove(TASKS, task_id)

    async def get_tasks_by_status(self, status: str) -> List[Task]:
        return await self._filter(TASKS, "status", status)

    async def get_tasks_by_project(self, project_id: int) -> List[Task]:
        return await self._filter(TASKS, "project_id", project_id)

    async def get_tasks_by_priority(self, priority: str) -> List[Task]:
        return await self._filter(TASKS, "priority", priority)

    # ------------------------------------------------------------------
    # Проекты
    # ------------------------------------------------------------------

    async def get_projects(self) -> List[Project]:
        return await self._list(PROJECTS)

    async def get_project(self, project_id: int) -> Optional[Project]:
        return await self._get(PROJECTS, project_id)

    async def create_project(self, project: ProjectCreate) -> Project:
        data = project.model_dump()
        data["color"] = data.get("color") or DEFAULT_COLOR
        return await self._create(PROJECTS, data)

    async def update_project(self, project_id: int, changes: Dict[str, Any]) -> Optional[Project]:
        return await self._update(PROJECTS, project_id, changes)

    async def delete_project(self, project_id: int) -> bool:
        return await self._remove(PROJECTS, project_id)

    # ------------------------------------------------------------------
    # Помидоры
    # ------------------------------------------------------------------

    async def get_pomodoro_sessions(self) -> List[PomodoroSession]:
        return await self._list(POMODORO_SESSIONS)

    async def get_pomodoro_session(self, session_id: int) -> Optional[PomodoroSession]:
        return await self._get(POMODORO_SESSIONS, session_id)

    async def create_pomodoro_session(self, session: PomodoroSessionCreate) -> PomodoroSession:
        data = session.model_dump()
        data["end_time"] = None
        data["completed"] = False
        return await self._create(POMODORO_SESSIONS, data)

    async def update_pomodoro_session(self, session_id: int, changes: Dict[str, Any]) -> Optional[PomodoroSession]:
        current = await self.get_pomodoro_session(session_id)
        if current is None:
            return None
        changes = dict(changes)
        # Время окончания ставится только при переходе false -> true
        if changes.get("completed") and not current.completed:
            changes["end_time"] = utcnow()
        return await self._update(POMODORO_SESSIONS, session_id, changes)

    async def delete_pomodoro_session(self, session_id: int) -> bool:
        return await self._remove(POMODORO_SESSIONS, session_id)

    async def get_sessions_by_task(self, task_id: int) -> List[PomodoroSession]:
        return await self._filter(POMODORO_SESSIONS, "task_id", task_id)

    # ------------------------------------------------------------------
    # Цели
    # ------------------------------------------------------------------

    async def get_goals(self) -> List[Goal]:
        return await self._list(GOALS)

    async def get_goal(self, goal_id: int) -> Optional[Goal]:
        return await self._get(GOALS, goal_id)

    async def create_goal(self, goal: GoalCreate) -> Goal:
        return await self._create(GOALS, goal.model_dump())

    async def update_goal(self, goal_id: int, changes: Dict[str, Any]) -> Optional[Goal]:
        return await self._update(GOALS, goal_id, changes)

    async def delete_goal(self, goal_id: int) -> bool:
        return await self._remove(GOALS, goal_id)

    # ------------------------------------------------------------------
    # Блоки времени
    # ------------------------------------------------------------------

    async def get_time_blocks(self) -> List[TimeBlock]:
        return await self._list(TIME_BLOCKS)

    async def get_time_block(self, block_id: int) -> Optional[TimeBlock]:
        return await self._get(TIME_BLOCKS, block_id)

    async def create_time_block(self, time_block: TimeBlockCreate) -> TimeBlock:
        data = time_block.model_dump()
        data["color"] = data.get("color") or DEFAULT_COLOR
        return await self._create(TIME_BLOCKS, data)

    async def update_time_block(self, block_id: int, changes: Dict[str, Any]) -> Optional[TimeBlock]:
        return await self._update(TIME_BLOCKS, block_id, changes)

    async def delete_time_block(self, block_id: int) -> bool:
        return await self._remove(TIME_BLOCKS, block_id)

    async def get_time_blocks_by_day(self, day: date) -> List[TimeBlock]:
        """Блоки, начинающиеся в указанный день (UTC)"""
        start, end = day_bounds(day)
        blocks = await self.get_time_blocks()
        return [block for block in blocks if start <= block.start_time < end]

    # ------------------------------------------------------------------
    # Пользователи
    # ------------------------------------------------------------------

    async def get_users(self) -> List[User]:
        return await self._list(USERS)

    async def get_user(self, user_id: int) -> Optional[User]:
        return await self._get(USERS, user_id)

    async def get_user_by_email(self, email: str) -> Optional[User]:
        users = await self._filter(USERS, "email", email)
        return users[0] if users else None

    async def get_user_by_username(self, username: str) -> Optional[User]:
        users = await self._filter(USERS, "username", username)
        return users[0] if users else None

    async def _check_unique_user(self, email: Optional[str], username: Optional[str], user_id: Optional[int] = None):
        # Проверка до вставки: между проверкой и записью остается окно гонки
        if email is not None:
            existing = await self.get_user_by_email(email)
            if existing and existing.id != user_id:
                raise DuplicateEntityError("User with this email already exists")
        if username is not None:
            existing = await self.get_user_by_username(username)
            if existing and existing.id != user_id:
                raise DuplicateEntityError("User with this username already exists")

    async def create_user(self, user: UserCreate) -> User:
        await self._check_unique_user(user.email, user.username)
        data = user.model_dump(exclude={"password", "confirm_password"})
        data["password_hash"] = generate_password_hash(user.password)
        data["created_at"] = utcnow()
        data["last_login"] = None
        created = await self._create(USERS, data)
        logger.info(f"Зарегистрирован пользователь {created.username} (id={created.id})")
        return created

    async def update_user(self, user_id: int, changes: Dict[str, Any]) -> Optional[User]:
        changes = dict(changes)
        changes.pop("password_hash", None)
        if await self.get_user(user_id) is None:
            return None
        await self._check_unique_user(changes.get("email"), changes.get("username"), user_id)
        password = changes.pop("password", None)
        if password:
            changes["password_hash"] = generate_password_hash(password)
        return await self._update(USERS, user_id, changes)

    async def delete_user(self, user_id: int) -> bool:
        return await self._remove(USERS, user_id)

    async def verify_user_credentials(self, email: str, password: str) -> Optional[User]:
        """Проверить пароль. Неверные данные дают None, а не исключение"""
        user = await self.get_user_by_email(email)
        if user is None or not user.password_hash:
            return None
        if not check_password_hash(user.password_hash, password):
            return None
        return await self._update(USERS, user.id, {"last_login": utcnow()})

    # ------------------------------------------------------------------
    # Команды
    # ------------------------------------------------------------------

    async def get_teams(self) -> List[Team]:
        return await self._list(TEAMS)

    async def get_team(self, team_id: int) -> Optional[Team]:
        return await self._get(TEAMS, team_id)

    async def create_team(self, team: TeamCreate, created_by_id: int) -> Team:
        data = team.model_dump()
        data["created_by_id"] = created_by_id
        data["created_at"] = utcnow()
        created = await self._create(TEAMS, data)
        # Создатель становится администратором команды
        await self.add_team_member(TeamMemberCreate(team_id=created.id, user_id=created_by_id, role=TeamRole.ADMIN))
        return created

    async def update_team(self, team_id: int, changes: Dict[str, Any]) -> Optional[Team]:
        changes = {key: value for key, value in changes.items() if key != "created_by_id"}
        return await self._update(TEAMS, team_id, changes)

    async def delete_team(self, team_id: int) -> bool:
        """
        Удалить команду вместе с участниками и открытыми ей проектами.

        Шаги выполняются последовательно и без транзакции. Ошибка на
        отдельном участнике или проекте логируется, остальные шаги
        продолжаются; откат уже выполненных шагов не делается.
        """
        if await self.get_team(team_id) is None:
            return False

        for member in await self.get_team_members(team_id):
            try:
                await self.remove_team_member(member.id)
            except Exception as e:
                logger.warning(f"Не удалось удалить участника {member.id} команды {team_id}: {e}")

        for shared in await self.get_collaborative_projects(team_id):
            try:
                await self.unshare_project(shared.id)
            except Exception as e:
                logger.warning(f"Не удалось закрыть доступ к проекту {shared.project_id} для команды {team_id}: {e}")

        deleted = await self._remove(TEAMS, team_id)
        if deleted:
            logger.info(f"Команда {team_id} удалена")
        return deleted

    async def get_teams_by_user(self, user_id: int) -> List[Team]:
        memberships = await self.get_team_membership_by_user(user_id)
        team_ids = _unique(member.team_id for member in memberships)
        return self._to_models(TEAMS, await self._fetch_many(TEAMS, team_ids))

    # ------------------------------------------------------------------
    # Участники команд
    # ------------------------------------------------------------------

    async def get_team_members(self, team_id: int) -> List[TeamMember]:
        return await self._filter(TEAM_MEMBERS, "team_id", team_id)

    async def get_team_member(self, member_id: int) -> Optional[TeamMember]:
        return await self._get(TEAM_MEMBERS, member_id)

    async def add_team_member(self, team_member: TeamMemberCreate) -> TeamMember:
        data = team_member.model_dump()
        data["joined_at"] = utcnow()
        return await self._create(TEAM_MEMBERS, data)

    async def remove_team_member(self, member_id: int) -> bool:
        return await self._remove(TEAM_MEMBERS, member_id)

    async def update_team_member_role(self, member_id: int, role: str) -> Optional[TeamMember]:
        return await self._update(TEAM_MEMBERS, member_id, {"role": role})

    async def get_team_membership_by_user(self, user_id: int) -> List[TeamMember]:
        return await self._filter(TEAM_MEMBERS, "user_id", user_id)

    # ------------------------------------------------------------------
    # Совместные проекты
    # ------------------------------------------------------------------

    async def get_collaborative_projects(self, team_id: int) -> List[CollaborativeProject]:
        return await self._filter(COLLABORATIVE_PROJECTS, "team_id", team_id)

    async def get_collaborative_project(self, shared_id: int) -> Optional[CollaborativeProject]:
        return await self._get(COLLABORATIVE_PROJECTS, shared_id)

    async def share_project(self, collaborative_project: CollaborativeProjectCreate) -> CollaborativeProject:
        data = collaborative_project.model_dump()
        data["shared_at"] = utcnow()
        return await self._create(COLLABORATIVE_PROJECTS, data)

    async def unshare_project(self, shared_id: int) -> bool:
        return await self._remove(COLLABORATIVE_PROJECTS, shared_id)

    async def get_projects_by_team(self, team_id: int) -> List[Project]:
        shared = await self.get_collaborative_projects(team_id)
        project_ids = _unique(item.project_id for item in shared)
        return self._to_models(PROJECTS, await self._fetch_many(PROJECTS, project_ids))

    # ------------------------------------------------------------------
    # Назначения задач
    # ------------------------------------------------------------------

    async def get_task_assignments(self, task_id: int) -> List[TaskAssignment]:
        return await self._filter(TASK_ASSIGNMENTS, "task_id", task_id)

    async def get_task_assignment(self, assignment_id: int) -> Optional[TaskAssignment]:
        return await self._get(TASK_ASSIGNMENTS, assignment_id)

    async def assign_task(self, task_assignment: TaskAssignmentCreate) -> TaskAssignment:
        data = task_assignment.model_dump()
        data["status"] = AssignmentStatus.PENDING.value
        data["assigned_at"] = utcnow()
        return await self._create(TASK_ASSIGNMENTS, data)

    async def unassign_task(self, assignment_id: int) -> bool:
        return await self._remove(TASK_ASSIGNMENTS, assignment_id)

    async def update_task_assignment_status(self, assignment_id: int, status: str) -> Optional[TaskAssignment]:
        return await self._update(TASK_ASSIGNMENTS, assignment_id, {"status": status})

    async def get_tasks_by_assignee(self, user_id: int) -> List[Task]:
        assignments = await self._filter(TASK_ASSIGNMENTS, "user_id", user_id)
        task_ids = _unique(assignment.task_id for assignment in assignments)
        return self._to_models(TASKS, await self._fetch_many(TASKS, task_ids))

    # ------------------------------------------------------------------
    # Журнал активности
    # ------------------------------------------------------------------

    @staticmethod
    def _newest_first(logs: List[ActivityLog]) -> List[ActivityLog]:
        return sorted(logs, key=lambda log: (log.created_at, log.id), reverse=True)

    async def get_activity_logs(self, team_id: Optional[int] = None) -> List[ActivityLog]:
        if team_id is not None:
            logs = await self._filter(ACTIVITY_LOGS, "team_id", team_id)
        else:
            logs = await self._list(ACTIVITY_LOGS)
        return self._newest_first(logs)

    async def get_activity_log(self, log_id: int) -> Optional[ActivityLog]:
        return await self._get(ACTIVITY_LOGS, log_id)

    async def create_activity_log(self, activity_log: ActivityLogCreate) -> ActivityLog:
        data = activity_log.model_dump()
        data["created_at"] = utcnow()
        return await self._create(ACTIVITY_LOGS, data)

    async def get_activity_logs_by_user(self, user_id: int) -> List[ActivityLog]:
        return self._newest_first(await self._filter(ACTIVITY_LOGS, "user_id", user_id))

    async def get_activity_logs_by_project(self, project_id: int) -> List[ActivityLog]:
        return self._newest_first(await self._filter(ACTIVITY_LOGS, "project_id", project_id))

    async def get_activity_logs_by_task(self, task_id: int) -> List[ActivityLog]:
        return self._newest_first(await self._filter(ACTIVITY_LOGS, "task_id", task_id))


def day_bounds(day: date):
    """Полуинтервал [начало дня, начало следующего дня) в UTC"""
    start = datetime(day.year, day.month, day.day, tzinfo=timezone.utc)
    return start, start + timedelta(days=1)
