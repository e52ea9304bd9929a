from typing import Optional

from pydantic import Field

from productivity_api.models.base import DEFAULT_COLOR, CamelModel, StoredModel, UtcDatetime


class TimeBlockCreate(CamelModel):
    """Данные для создания блока времени. Пересечения блоков не проверяются"""
    title: str = Field(min_length=1)
    task_id: Optional[int] = None
    start_time: UtcDatetime
    end_time: UtcDatetime
    color: Optional[str] = DEFAULT_COLOR


class TimeBlockUpdate(CamelModel):
    title: Optional[str] = Field(default=None, min_length=1)
    task_id: Optional[int] = None
    start_time: Optional[UtcDatetime] = None
    end_time: Optional[UtcDatetime] = None
    color: Optional[str] = None


class TimeBlock(StoredModel):
    """Модель блока времени"""
    title: str
    task_id: Optional[int] = None
    start_time: UtcDatetime
    end_time: UtcDatetime
    color: Optional[str] = DEFAULT_COLOR
