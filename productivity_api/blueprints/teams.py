import logging

from flask import Blueprint, jsonify

from productivity_api.blueprints.planner import deleted_or_not_found, not_found, to_json_list
from productivity_api.blueprints.wrapper import async_route, get_storage, validate_body
from productivity_api.middleware.auth_middleware import current_user_id, login_required
from productivity_api.models.base import partial_fields
from productivity_api.models.collaboration import AssignTaskRequest, ShareProjectRequest, TaskAssignmentStatusUpdate
from productivity_api.models.team import AddTeamMemberRequest, TeamCreate, TeamMemberCreate, TeamMemberRoleUpdate, TeamUpdate
from productivity_api.services.team_service import TeamService

bp = Blueprint("teams", __name__)
logger = logging.getLogger(__name__)


# Команды
@bp.route('/api/teams', methods=['GET'])
@login_required
@async_route
async def get_teams():
    return to_json_list(await get_storage().get_teams())


@bp.route('/api/teams/<int:team_id>', methods=['GET'])
@login_required
@async_route
async def get_team(team_id):
    team = await get_storage().get_team(team_id)
    if team is None:
        return not_found('Team not found')
    return jsonify(team.to_json())


@bp.route('/api/teams', methods=['POST'])
@login_required
@async_route
async def create_team():
    """Создать команду; автор становится ее администратором"""
    team_data = validate_body(TeamCreate)
    team = await TeamService(get_storage()).create_team(team_data, current_user_id())
    return jsonify(team.to_json()), 201


@bp.route('/api/teams/<int:team_id>', methods=['PUT'])
@login_required
@async_route
async def update_team(team_id):
    changes = partial_fields(validate_body(TeamUpdate))
    team = await get_storage().update_team(team_id, changes)
    if team is None:
        return not_found('Team not found')
    return jsonify(team.to_json())


@bp.route('/api/teams/<int:team_id>', methods=['DELETE'])
@login_required
@async_route
async def delete_team(team_id):
    """Удалить команду вместе с участниками и доступами к проектам"""
    deleted = await TeamService(get_storage()).delete_team(team_id)
    return deleted_or_not_found(deleted, 'Team not found')


@bp.route('/api/users/<int:user_id>/teams', methods=['GET'])
@login_required
@async_route
async def get_teams_by_user(user_id):
    return to_json_list(await get_storage().get_teams_by_user(user_id))


# Участники команд
@bp.route('/api/teams/<int:team_id>/members', methods=['GET'])
@login_required
@async_route
async def get_team_members(team_id):
    return to_json_list(await get_storage().get_team_members(team_id))


@bp.route('/api/teams/<int:team_id>/members', methods=['POST'])
@login_required
@async_route
async def add_team_member(team_id):
    body = validate_body(AddTeamMemberRequest)
    storage = get_storage()
    if await storage.get_team(team_id) is None:
        return not_found('Team not found')
    member = await storage.add_team_member(TeamMemberCreate(team_id=team_id, user_id=body.user_id, role=body.role))
    logger.info(f"Пользователь {body.user_id} добавлен в команду {team_id}")
    return jsonify(member.to_json()), 201


@bp.route('/api/team-members/<int:member_id>/role', methods=['PUT'])
@login_required
@async_route
async def update_team_member_role(member_id):
    body = validate_body(TeamMemberRoleUpdate)
    member = await get_storage().update_team_member_role(member_id, body.role)
    if member is None:
        return not_found('Team member not found')
    return jsonify(member.to_json())


@bp.route('/api/team-members/<int:member_id>', methods=['DELETE'])
@login_required
@async_route
async def remove_team_member(member_id):
    deleted = await get_storage().remove_team_member(member_id)
    return deleted_or_not_found(deleted, 'Team member not found')


# Совместные проекты
@bp.route('/api/teams/<int:team_id>/projects', methods=['GET'])
@login_required
@async_route
async def get_projects_by_team(team_id):
    return to_json_list(await get_storage().get_projects_by_team(team_id))


@bp.route('/api/teams/<int:team_id>/projects', methods=['POST'])
@login_required
@async_route
async def share_project(team_id):
    """Открыть проект команде от имени текущего пользователя"""
    body = validate_body(ShareProjectRequest)
    storage = get_storage()
    if await storage.get_team(team_id) is None:
        return not_found('Team not found')
    if await storage.get_project(body.project_id) is None:
        return not_found('Project not found')
    shared = await TeamService(storage).share_project(team_id, body.project_id, current_user_id(), body.permissions)
    return jsonify(shared.to_json()), 201


@bp.route('/api/collaborative-projects/<int:shared_id>', methods=['DELETE'])
@login_required
@async_route
async def unshare_project(shared_id):
    deleted = await get_storage().unshare_project(shared_id)
    return deleted_or_not_found(deleted, 'Collaborative project not found')


# Назначения задач
@bp.route('/api/tasks/<int:task_id>/assignments', methods=['GET'])
@login_required
@async_route
async def get_task_assignments(task_id):
    return to_json_list(await get_storage().get_task_assignments(task_id))


@bp.route('/api/tasks/<int:task_id>/assign', methods=['POST'])
@login_required
@async_route
async def assign_task(task_id):
    body = validate_body(AssignTaskRequest)
    storage = get_storage()
    if await storage.get_task(task_id) is None:
        return not_found('Task not found')
    assignment = await TeamService(storage).assign_task(task_id, body.user_id, current_user_id())
    return jsonify(assignment.to_json()), 201


@bp.route('/api/task-assignments/<int:assignment_id>/status', methods=['PUT'])
@login_required
@async_route
async def update_task_assignment_status(assignment_id):
    body = validate_body(TaskAssignmentStatusUpdate)
    assignment = await get_storage().update_task_assignment_status(assignment_id, body.status)
    if assignment is None:
        return not_found('Task assignment not found')
    return jsonify(assignment.to_json())


@bp.route('/api/task-assignments/<int:assignment_id>', methods=['DELETE'])
@login_required
@async_route
async def unassign_task(assignment_id):
    deleted = await get_storage().unassign_task(assignment_id)
    return deleted_or_not_found(deleted, 'Task assignment not found')


@bp.route('/api/users/<int:user_id>/tasks', methods=['GET'])
@login_required
@async_route
async def get_tasks_by_assignee(user_id):
    return to_json_list(await get_storage().get_tasks_by_assignee(user_id))
