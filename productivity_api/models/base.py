from datetime import datetime, timezone
from typing import Annotated, Any, Dict

from pydantic import AfterValidator, BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


def ensure_utc(value: datetime) -> datetime:
    """Привести дату к UTC; наивные даты считаются UTC"""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


UtcDatetime = Annotated[datetime, AfterValidator(ensure_utc)]

DEFAULT_COLOR = "#6366f1"


class CamelModel(BaseModel):
    """Базовая модель: snake_case в Python, camelCase в JSON"""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        use_enum_values=True,
        validate_default=True,
    )

    def to_json(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class StoredModel(CamelModel):
    """Сохраненная запись: id всегда присваивает хранилище"""
    id: int


def partial_fields(update: BaseModel) -> Dict[str, Any]:
    """Только поля, которые клиент действительно передал"""
    return update.model_dump(exclude_unset=True)
