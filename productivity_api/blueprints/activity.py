import logging

from flask import Blueprint, jsonify, request

from productivity_api.blueprints.planner import to_json_list
from productivity_api.blueprints.wrapper import async_route, get_storage, validate_body
from productivity_api.middleware.auth_middleware import current_user_id, login_required
from productivity_api.models.activity import ActivityLogCreate, ActivityLogRequest

bp = Blueprint("activity", __name__)
logger = logging.getLogger(__name__)


@bp.route('/api/activity-logs', methods=['GET'])
@async_route
async def get_activity_logs():
    """Журнал активности, новые записи первыми; можно отфильтровать по teamId"""
    team_id = request.args.get('teamId')
    if team_id is not None and not team_id.isdigit():
        return jsonify({'message': 'Invalid teamId'}), 400
    logs = await get_storage().get_activity_logs(int(team_id) if team_id is not None else None)
    return to_json_list(logs)


@bp.route('/api/activity-logs', methods=['POST'])
@login_required
@async_route
async def create_activity_log():
    body = validate_body(ActivityLogRequest)
    log = await get_storage().create_activity_log(ActivityLogCreate(user_id=current_user_id(), **body.model_dump()))
    logger.debug(f"Запись журнала {log.id}: {log.action}")
    return jsonify(log.to_json()), 201


@bp.route('/api/users/<int:user_id>/activity', methods=['GET'])
@async_route
async def get_activity_logs_by_user(user_id):
    return to_json_list(await get_storage().get_activity_logs_by_user(user_id))


@bp.route('/api/projects/<int:project_id>/activity', methods=['GET'])
@async_route
async def get_activity_logs_by_project(project_id):
    return to_json_list(await get_storage().get_activity_logs_by_project(project_id))


@bp.route('/api/tasks/<int:task_id>/activity', methods=['GET'])
@async_route
async def get_activity_logs_by_task(task_id):
    return to_json_list(await get_storage().get_activity_logs_by_task(task_id))
