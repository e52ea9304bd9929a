import logging

from flask import jsonify
from pydantic import ValidationError
from werkzeug.exceptions import HTTPException

from productivity_api.errors import DuplicateEntityError
from productivity_api.services.analytics_service import AnalyticsError

logger = logging.getLogger(__name__)


def validation_errors(exc: ValidationError) -> list:
    """Поэлементный список ошибок валидации для ответа клиенту"""
    return [
        {
            'path': list(error['loc']),
            'message': error['msg'],
            'code': error['type'],
        }
        for error in exc.errors()
    ]


def register_error_handlers(app):
    @app.errorhandler(ValidationError)
    def handle_validation_error(e):
        logger.debug(f"Ошибка валидации: {e.error_count()} полей")
        return jsonify({'message': 'Validation error', 'errors': validation_errors(e)}), 400

    @app.errorhandler(DuplicateEntityError)
    def handle_duplicate(e):
        return jsonify({'message': str(e)}), 400

    @app.errorhandler(AnalyticsError)
    def handle_analytics_error(e):
        return jsonify({'message': str(e)}), 400

    @app.errorhandler(HTTPException)
    def handle_http_error(e):
        return jsonify({'message': e.description or e.name}), e.code

    @app.errorhandler(Exception)
    def handle_unexpected(e):
        logger.exception(f"Необработанная ошибка: {e}")
        return jsonify({'message': 'Internal Server Error'}), 500
