from functools import wraps
from typing import Optional
import logging

from flask import jsonify, session

logger = logging.getLogger(__name__)

SESSION_USER_KEY = 'user_id'


def current_user_id() -> Optional[int]:
    """ID пользователя из подписанной сессии или None"""
    return session.get(SESSION_USER_KEY)


def login_user(user_id: int):
    session.clear()
    session[SESSION_USER_KEY] = user_id
    session.permanent = True


def logout_user():
    session.pop(SESSION_USER_KEY, None)


def login_required(f):
    """
    Пропускает запрос, только если в сессии есть пользователь.

    Существование пользователя здесь не проверяется: устаревший id в сессии
    обнаруживает только /auth/current-user.
    """
    @wraps(f)
    def wrapped(*args, **kwargs):
        if current_user_id() is None:
            logger.debug("Запрос без сессии отклонен")
            return jsonify({'message': 'Unauthorized'}), 401
        return f(*args, **kwargs)

    return wrapped
