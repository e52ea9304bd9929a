import logging

import pytz
from flask import Blueprint, jsonify, request

from productivity_api.blueprints.wrapper import async_route, get_storage
from productivity_api.services.analytics_service import AnalyticsService

bp = Blueprint("analytics", __name__)
logger = logging.getLogger(__name__)


@bp.route('/api/analytics/summary', methods=['GET'])
@async_route
async def get_summary():
    """Сводка продуктивности за день, неделю или месяц"""
    range_name = request.args.get('range', 'week')
    tz_name = request.args.get('tz', 'UTC')
    summary = await AnalyticsService(get_storage()).get_summary(range_name, tz_name)
    return jsonify(summary)


@bp.route('/api/frameworks/eisenhower', methods=['GET'])
@async_route
async def get_eisenhower_matrix():
    """Незавершенные задачи по квадрантам матрицы Эйзенхауэра"""
    matrix = await AnalyticsService(get_storage()).get_eisenhower_matrix()
    return jsonify({quadrant: [task.to_json() for task in tasks] for quadrant, tasks in matrix.items()})


@bp.route('/api/timezones', methods=['GET'])
def get_available_timezones():
    """Получение списка доступных часовых поясов."""
    timezones = [
        {
            'value': tz,
            'label': tz.replace('_', ' '),
            'group': tz.split('/', 1)[0] if '/' in tz else 'Other'
        }
        for tz in pytz.all_timezones
    ]

    return jsonify(timezones)
