# core/sa/__init__.py
from .database import Database
from .models import (
    Base, Author, Work, WorkAuthor, Edition,
    ExternalIngest, SearchCooldown
)

__all__ = [
    'Database',
    'Base',
    'Author',
    'Work',
    'WorkAuthor',
    'Edition',
    'ExternalIngest',
    'SearchCooldown'
]
