from typing import Optional
import logging

from productivity_api.models.user import User, UserCreate
from productivity_api.storage.base import Storage

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, storage: Storage):
        self.storage = storage

    async def get_user_by_id(self, user_id: int) -> Optional[User]:
        """Получить пользователя по ID"""
        logger.debug(f"Поиск пользователя с ID {user_id}")
        user = await self.storage.get_user(user_id)

        if user:
            logger.debug(f"Пользователь с ID {user_id} найден")
        else:
            logger.debug(f"Пользователь с ID {user_id} не найден")

        return user

    async def register(self, user_data: UserCreate) -> User:
        """Зарегистрировать пользователя. DuplicateEntityError, если email или имя заняты"""
        return await self.storage.create_user(user_data)

    async def authenticate_user(self, email: str, password: str) -> Optional[User]:
        """Аутентифицировать пользователя по email и паролю"""
        user = await self.storage.verify_user_credentials(email, password)
        if user is None:
            # В лог не пишем, что именно не совпало
            logger.warning(f"Неудачная попытка входа для {email}")
            return None
        logger.info(f"Пользователь {user.id} вошел в систему")
        return user
