import logging

from flask import Blueprint, jsonify

from productivity_api.blueprints.wrapper import async_route, get_storage, validate_body
from productivity_api.models.base import partial_fields
from productivity_api.models.goal import GoalCreate, GoalUpdate
from productivity_api.models.pomodoro import PomodoroSessionCreate, PomodoroSessionUpdate
from productivity_api.models.project import ProjectCreate, ProjectUpdate
from productivity_api.models.task import TaskCreate, TaskUpdate
from productivity_api.models.time_block import TimeBlockCreate, TimeBlockUpdate
from productivity_api.utils import parse_day

bp = Blueprint("planner", __name__)
logger = logging.getLogger(__name__)


def to_json_list(items):
    return jsonify([item.to_json() for item in items])


def not_found(message):
    return jsonify({'message': message}), 404


def deleted_or_not_found(deleted, message):
    if not deleted:
        return not_found(message)
    return '', 204


# Маршруты для работы с задачами
@bp.route('/api/tasks', methods=['GET'])
@async_route
async def get_tasks():
    """Получить список задач"""
    return to_json_list(await get_storage().get_tasks())


@bp.route('/api/tasks/<int:task_id>', methods=['GET'])
@async_route
async def get_task(task_id):
    """Получить задачу по ID"""
    task = await get_storage().get_task(task_id)
    if task is None:
        return not_found('Task not found')
    return jsonify(task.to_json())


@bp.route('/api/tasks', methods=['POST'])
@async_route
async def create_task():
    """Создать новую задачу"""
    task_data = validate_body(TaskCreate)
    task = await get_storage().create_task(task_data)
    logger.info(f"Создана задача {task.id}")
    return jsonify(task.to_json()), 201


@bp.route('/api/tasks/<int:task_id>', methods=['PUT'])
@async_route
async def update_task(task_id):
    """Обновить задачу"""
    changes = partial_fields(validate_body(TaskUpdate))
    task = await get_storage().update_task(task_id, changes)
    if task is None:
        return not_found('Task not found')
    return jsonify(task.to_json())


@bp.route('/api/tasks/<int:task_id>', methods=['DELETE'])
@async_route
async def delete_task(task_id):
    """Удалить задачу"""
    deleted = await get_storage().delete_task(task_id)
    if deleted:
        logger.info(f"Задача {task_id} удалена")
    return deleted_or_not_found(deleted, 'Task not found')


@bp.route('/api/tasks/status/<status>', methods=['GET'])
@async_route
async def get_tasks_by_status(status):
    return to_json_list(await get_storage().get_tasks_by_status(status))


@bp.route('/api/tasks/project/<int:project_id>', methods=['GET'])
@async_route
async def get_tasks_by_project(project_id):
    return to_json_list(await get_storage().get_tasks_by_project(project_id))


@bp.route('/api/tasks/priority/<priority>', methods=['GET'])
@async_route
async def get_tasks_by_priority(priority):
    return to_json_list(await get_storage().get_tasks_by_priority(priority))


# Маршруты для работы с проектами
@bp.route('/api/projects', methods=['GET'])
@async_route
async def get_projects():
    return to_json_list(await get_storage().get_projects())


@bp.route('/api/projects/<int:project_id>', methods=['GET'])
@async_route
async def get_project(project_id):
    project = await get_storage().get_project(project_id)
    if project is None:
        return not_found('Project not found')
    return jsonify(project.to_json())


@bp.route('/api/projects', methods=['POST'])
@async_route
async def create_project():
    """Создать новый проект"""
    project = await get_storage().create_project(validate_body(ProjectCreate))
    logger.info(f"Создан проект {project.id}")
    return jsonify(project.to_json()), 201


@bp.route('/api/projects/<int:project_id>', methods=['PUT'])
@async_route
async def update_project(project_id):
    changes = partial_fields(validate_body(ProjectUpdate))
    project = await get_storage().update_project(project_id, changes)
    if project is None:
        return not_found('Project not found')
    return jsonify(project.to_json())


@bp.route('/api/projects/<int:project_id>', methods=['DELETE'])
@async_route
async def delete_project(project_id):
    """Удалить проект. Задачи проекта не удаляются"""
    deleted = await get_storage().delete_project(project_id)
    if deleted:
        logger.info(f"Проект {project_id} удален")
    return deleted_or_not_found(deleted, 'Project not found')


# Маршруты для работы с помидорами
@bp.route('/api/pomodoro', methods=['GET'])
@async_route
async def get_pomodoro_sessions():
    return to_json_list(await get_storage().get_pomodoro_sessions())


@bp.route('/api/pomodoro/<int:session_id>', methods=['GET'])
@async_route
async def get_pomodoro_session(session_id):
    pomodoro = await get_storage().get_pomodoro_session(session_id)
    if pomodoro is None:
        return not_found('Pomodoro session not found')
    return jsonify(pomodoro.to_json())


@bp.route('/api/pomodoro', methods=['POST'])
@async_route
async def create_pomodoro_session():
    pomodoro = await get_storage().create_pomodoro_session(validate_body(PomodoroSessionCreate))
    logger.info(f"Запущен помидор {pomodoro.id}")
    return jsonify(pomodoro.to_json()), 201


@bp.route('/api/pomodoro/<int:session_id>', methods=['PUT'])
@async_route
async def update_pomodoro_session(session_id):
    """Обновить сессию. При завершении сервер сам ставит endTime"""
    changes = partial_fields(validate_body(PomodoroSessionUpdate))
    pomodoro = await get_storage().update_pomodoro_session(session_id, changes)
    if pomodoro is None:
        return not_found('Pomodoro session not found')
    return jsonify(pomodoro.to_json())


@bp.route('/api/pomodoro/<int:session_id>', methods=['DELETE'])
@async_route
async def delete_pomodoro_session(session_id):
    deleted = await get_storage().delete_pomodoro_session(session_id)
    return deleted_or_not_found(deleted, 'Pomodoro session not found')


@bp.route('/api/pomodoro/task/<int:task_id>', methods=['GET'])
@async_route
async def get_sessions_by_task(task_id):
    return to_json_list(await get_storage().get_sessions_by_task(task_id))


# Маршруты для работы с целями
@bp.route('/api/goals', methods=['GET'])
@async_route
async def get_goals():
    return to_json_list(await get_storage().get_goals())


@bp.route('/api/goals/<int:goal_id>', methods=['GET'])
@async_route
async def get_goal(goal_id):
    goal = await get_storage().get_goal(goal_id)
    if goal is None:
        return not_found('Goal not found')
    return jsonify(goal.to_json())


@bp.route('/api/goals', methods=['POST'])
@async_route
async def create_goal():
    goal = await get_storage().create_goal(validate_body(GoalCreate))
    logger.info(f"Создана цель {goal.id}")
    return jsonify(goal.to_json()), 201


@bp.route('/api/goals/<int:goal_id>', methods=['PUT'])
@async_route
async def update_goal(goal_id):
    changes = partial_fields(validate_body(GoalUpdate))
    goal = await get_storage().update_goal(goal_id, changes)
    if goal is None:
        return not_found('Goal not found')
    return jsonify(goal.to_json())


@bp.route('/api/goals/<int:goal_id>', methods=['DELETE'])
@async_route
async def delete_goal(goal_id):
    deleted = await get_storage().delete_goal(goal_id)
    return deleted_or_not_found(deleted, 'Goal not found')


# Маршруты для работы с блоками времени
@bp.route('/api/timeblocks', methods=['GET'])
@async_route
async def get_time_blocks():
    return to_json_list(await get_storage().get_time_blocks())


@bp.route('/api/timeblocks/<int:block_id>', methods=['GET'])
@async_route
async def get_time_block(block_id):
    time_block = await get_storage().get_time_block(block_id)
    if time_block is None:
        return not_found('Time block not found')
    return jsonify(time_block.to_json())


@bp.route('/api/timeblocks/day/<day>', methods=['GET'])
@async_route
async def get_time_blocks_by_day(day):
    """Блоки времени за день; дата в формате ISO"""
    parsed = parse_day(day)
    if parsed is None:
        logger.debug(f"Не удалось разобрать дату {day}")
        return jsonify({'message': 'Invalid date format'}), 400
    return to_json_list(await get_storage().get_time_blocks_by_day(parsed))


@bp.route('/api/timeblocks', methods=['POST'])
@async_route
async def create_time_block():
    time_block = await get_storage().create_time_block(validate_body(TimeBlockCreate))
    logger.info(f"Создан блок времени {time_block.id}")
    return jsonify(time_block.to_json()), 201


@bp.route('/api/timeblocks/<int:block_id>', methods=['PUT'])
@async_route
async def update_time_block(block_id):
    changes = partial_fields(validate_body(TimeBlockUpdate))
    time_block = await get_storage().update_time_block(block_id, changes)
    if time_block is None:
        return not_found('Time block not found')
    return jsonify(time_block.to_json())


@bp.route('/api/timeblocks/<int:block_id>', methods=['DELETE'])
@async_route
async def delete_time_block(block_id):
    deleted = await get_storage().delete_time_block(block_id)
    return deleted_or_not_found(deleted, 'Time block not found')
