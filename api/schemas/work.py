# api/schemas/work.py
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, field_validator


class WorkSchema(BaseModel):
    id: str
    title: str
    author: Optional[str] = None
    description: Optional[str] = None
    cover_url: Optional[str] = None
    published_date: Optional[str] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class WorkUpdate(BaseModel):
    title: str
    author: Optional[str] = None
    description: Optional[str] = None
    cover_url: Optional[str] = None

    @field_validator('title')
    @classmethod
    def title_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be empty")
        return value


class WorkCreate(WorkUpdate):
    id: str
    published_date: Optional[str] = None

    @field_validator('id')
    @classmethod
    def id_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be empty")
        return value


class WorkAuthorLink(BaseModel):
    work_id: str
    author_id: str


class WorkDeleted(BaseModel):
    status: str = "deleted"
    id: str
    editions_deleted: int
    links_deleted: int


class LinkResponse(BaseModel):
    status: str
    work_id: str
    author_id: str
