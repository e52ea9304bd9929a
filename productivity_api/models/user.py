from typing import Any, Dict, Optional

from pydantic import EmailStr, Field, ValidationInfo, field_validator

from productivity_api.models.base import CamelModel, StoredModel, UtcDatetime


class UserCreate(CamelModel):
    """Данные регистрации пользователя"""
    name: str = Field(min_length=2)
    username: str = Field(min_length=3)
    email: EmailStr
    password: str = Field(min_length=8)
    confirm_password: str
    avatar: Optional[str] = None
    role: str = "user"
    firebase_uid: Optional[str] = None

    @field_validator("confirm_password")
    @classmethod
    def passwords_match(cls, value: str, info: ValidationInfo) -> str:
        password = info.data.get("password")
        if password is not None and value != password:
            raise ValueError("Passwords do not match")
        return value


class UserLogin(CamelModel):
    # Нормализуется так же, как при регистрации
    email: EmailStr
    password: str = Field(min_length=1)


class UserUpdate(CamelModel):
    """Частичное обновление профиля. Пароль перехешируется хранилищем"""
    name: Optional[str] = Field(default=None, min_length=2)
    username: Optional[str] = Field(default=None, min_length=3)
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(default=None, min_length=8)
    avatar: Optional[str] = None
    role: Optional[str] = None
    firebase_uid: Optional[str] = None


class PublicUser(StoredModel):
    """Пользователь без хеша пароля: единственная форма, уходящая клиенту"""
    email: str
    username: str
    name: str
    avatar: Optional[str] = None
    role: str = "user"
    created_at: UtcDatetime
    last_login: Optional[UtcDatetime] = None
    firebase_uid: Optional[str] = None


class User(PublicUser):
    """Модель пользователя"""
    password_hash: str

    def public(self) -> PublicUser:
        return PublicUser.model_validate(self.model_dump(exclude={"password_hash"}))

    def to_json(self) -> Dict[str, Any]:
        return self.public().to_json()
