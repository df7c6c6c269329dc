# api/schemas/common.py
from typing import Any, Generic, List, Optional, TypeVar
from pydantic import BaseModel

DataT = TypeVar('DataT')


class Page(BaseModel, Generic[DataT]):
    """
    Generic schema for offset-paginated responses.
    """
    total: int
    limit: int
    offset: int
    results: List[DataT]


class ErrorResponse(BaseModel):
    error: str
    detail: Optional[List[Any]] = None


class NotFoundResponse(BaseModel):
    found: bool = False


class UpsertResponse(BaseModel):
    status: str
    id: str
