from typing import Optional

from pydantic import Field

from productivity_api.models.base import DEFAULT_COLOR, CamelModel, StoredModel


class ProjectCreate(CamelModel):
    """Данные для создания проекта"""
    name: str = Field(min_length=1)
    description: Optional[str] = None
    color: Optional[str] = DEFAULT_COLOR


class ProjectUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    color: Optional[str] = None


class Project(StoredModel):
    """Модель проекта"""
    name: str
    description: Optional[str] = None
    color: Optional[str] = DEFAULT_COLOR
