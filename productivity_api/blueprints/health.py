import logging

from flask import Blueprint, jsonify

from productivity_api.blueprints.wrapper import get_storage

bp = Blueprint("health", __name__)

logger = logging.getLogger(__name__)


@bp.route('/api/health', methods=['GET'])
def health_check():
    """Эндпоинт для проверки работоспособности API в Docker healthcheck"""
    logger.debug("Health check requested")
    return jsonify({"status": "ok", "storage": get_storage().name}), 200
