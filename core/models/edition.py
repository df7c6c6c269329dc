# core/models/edition.py

from datetime import datetime
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, field_validator


class EditionType(str, Enum):
    """Known edition types. The column is open text; these are the values the catalog itself writes."""
    PRINT = "print"
    EBOOK = "ebook"
    AUDIOBOOK = "audiobook"
    UNKNOWN = "unknown"


class UpsertStatus(str, Enum):
    CREATED = "created"
    UPDATED = "updated"


def normalize_isbn(value: Optional[str]) -> Optional[str]:
    """Strip hyphens and spaces so "978-0-80413-920-1" and "9780804139201" dedup together"""
    if value is None:
        return None
    cleaned = "".join(ch for ch in str(value) if ch not in "- ").upper()
    return cleaned or None


def normalize_asin(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    cleaned = str(value).strip().upper()
    return cleaned or None


class EditionPayload(BaseModel):
    """Candidate edition as submitted by a caller or an ingest job.

    Required-field checks live in the upserter so that a missing field is a
    ValidationError (400) with no write, rather than a schema error.
    """
    id: Optional[str] = None
    work_id: Optional[str] = None
    type: Optional[str] = None
    format: Optional[str] = None
    isbn: Optional[str] = None
    asin: Optional[str] = None
    narrator: Optional[str] = None
    abridged: Optional[bool] = None
    explicit: Optional[bool] = None
    page_count: Optional[int] = None
    runtime: Optional[str] = None
    release_date: Optional[str] = None
    language: Optional[str] = None
    publisher: Optional[str] = None
    series_name: Optional[str] = None
    series_position: Optional[float] = None
    genres: Optional[str] = None
    tags: Optional[str] = None

    model_config = ConfigDict(extra="ignore")

    @field_validator(
        'id', 'work_id', 'type', 'format', 'narrator', 'release_date',
        'language', 'publisher', 'series_name', mode='before'
    )
    @classmethod
    def blank_to_none(cls, value: Any):
        # Empty strings count as missing
        if isinstance(value, str):
            value = value.strip()
            return value or None
        return value

    @field_validator('isbn', mode='before')
    @classmethod
    def clean_isbn(cls, value: Any):
        return normalize_isbn(value) if value is not None else None

    @field_validator('asin', mode='before')
    @classmethod
    def clean_asin(cls, value: Any):
        return normalize_asin(value) if value is not None else None

    @field_validator('runtime', mode='before')
    @classmethod
    def runtime_to_text(cls, value: Any):
        if value is None or isinstance(value, bool):
            return None
        if isinstance(value, (int, float)):
            return str(int(value))
        if isinstance(value, str):
            return value.strip() or None
        return value

    @field_validator('genres', 'tags', mode='before')
    @classmethod
    def join_lists(cls, value: Any):
        if value is None:
            return None
        if isinstance(value, (list, tuple)):
            items = [str(v).strip() for v in value if v is not None and str(v).strip()]
            return ", ".join(items) if items else None
        if isinstance(value, str):
            return value.strip() or None
        return value

    @field_validator('page_count', 'series_position', mode='before')
    @classmethod
    def blank_number_to_none(cls, value: Any):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    def mutable_fields(self) -> dict:
        """Every column an upsert writes, i.e. everything but the identifier"""
        return self.model_dump(exclude={'id'})


class NormalizedEdition(BaseModel):
    """Caller-facing edition. Absent values are None, never omitted."""
    id: str
    work_id: str
    type: str
    format: str
    isbn: Optional[str] = None
    asin: Optional[str] = None
    narrator: Optional[str] = None
    abridged: bool = False
    explicit: bool = False
    page_count: Optional[int] = None
    runtime: Optional[str] = None
    release_date: Optional[str] = None
    language: Optional[str] = None
    publisher: Optional[str] = None
    series_name: Optional[str] = None
    series_position: Optional[float] = None
    genres: List[str] = []
    tags: List[str] = []
    updated_at: Optional[datetime] = None
    title: Optional[str] = None  # Work title, only on author roll-ups

    model_config = ConfigDict(from_attributes=True)


class UpsertResult(BaseModel):
    status: UpsertStatus
    id: str

    @property
    def created(self) -> bool:
        return self.status == UpsertStatus.CREATED
