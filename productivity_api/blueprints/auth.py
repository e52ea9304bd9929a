import logging

from flask import Blueprint, jsonify

from productivity_api.blueprints.wrapper import async_route, get_storage, validate_body
from productivity_api.middleware.auth_middleware import current_user_id, login_required, login_user, logout_user
from productivity_api.models.base import partial_fields
from productivity_api.models.user import UserCreate, UserLogin, UserUpdate
from productivity_api.services.auth_service import AuthService

bp = Blueprint("auth", __name__)

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = 'Invalid email or password'


# Пользователи без привязки к сессии
@bp.route('/api/users/register', methods=['POST'])
@async_route
async def register_user():
    """Зарегистрировать пользователя"""
    user_data = validate_body(UserCreate)
    user = await AuthService(get_storage()).register(user_data)
    return jsonify(user.to_json()), 201


@bp.route('/api/users/login', methods=['POST'])
@async_route
async def login():
    """Проверить учетные данные без создания сессии"""
    credentials = validate_body(UserLogin)
    user = await AuthService(get_storage()).authenticate_user(credentials.email, credentials.password)
    if user is None:
        return jsonify({'message': INVALID_CREDENTIALS}), 401
    return jsonify(user.to_json())


@bp.route('/api/users', methods=['GET'])
@async_route
async def get_users():
    users = await get_storage().get_users()
    return jsonify([user.to_json() for user in users])


@bp.route('/api/users/<int:user_id>', methods=['GET'])
@async_route
async def get_user(user_id):
    user = await get_storage().get_user(user_id)
    if user is None:
        return jsonify({'message': 'User not found'}), 404
    return jsonify(user.to_json())


@bp.route('/api/users/<int:user_id>', methods=['PUT'])
@login_required
@async_route
async def update_user(user_id):
    """Обновить свой профиль. Переданный пароль хешируется заново"""
    storage = get_storage()
    if await storage.get_user(user_id) is None:
        return jsonify({'message': 'User not found'}), 404
    if current_user_id() != user_id:
        logger.warning(f"Пользователь {current_user_id()} пытался изменить профиль {user_id}")
        return jsonify({'message': 'Forbidden'}), 403
    changes = partial_fields(validate_body(UserUpdate))
    user = await storage.update_user(user_id, changes)
    if user is None:
        return jsonify({'message': 'User not found'}), 404
    return jsonify(user.to_json())


# Авторизация через серверную сессию
@bp.route('/api/auth/register', methods=['POST'])
@async_route
async def auth_register():
    user_data = validate_body(UserCreate)
    user = await AuthService(get_storage()).register(user_data)
    login_user(user.id)
    return jsonify(user.to_json()), 201


@bp.route('/api/auth/login', methods=['POST'])
@async_route
async def authenticate():
    """Аутентифицировать пользователя и привязать его к сессии"""
    credentials = validate_body(UserLogin)
    user = await AuthService(get_storage()).authenticate_user(credentials.email, credentials.password)
    if user is None:
        return jsonify({'message': INVALID_CREDENTIALS}), 401
    login_user(user.id)
    return jsonify(user.to_json())


@bp.route('/api/auth/current-user', methods=['GET'])
@login_required
@async_route
async def get_current_user():
    user_id = current_user_id()
    user = await AuthService(get_storage()).get_user_by_id(user_id)
    if user is None:
        # Пользователь удален, а сессия осталась
        logger.warning(f"В сессии несуществующий пользователь {user_id}")
        logout_user()
        return jsonify({'message': 'Unauthorized'}), 401
    return jsonify(user.to_json())


@bp.route('/api/auth/logout', methods=['POST'])
def user_logout():
    logout_user()
    return jsonify({'message': 'Logged out successfully'})
