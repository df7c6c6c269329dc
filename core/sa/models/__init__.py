# core/sa/models/__init__.py
from .base import Base, UpdatedAtMixin, utcnow
from .author import Author
from .work import Work, WorkAuthor
from .edition import Edition
from .ingest import ExternalIngest, SearchCooldown

__all__ = [
    'Base',
    'UpdatedAtMixin',
    'utcnow',
    'Author',
    'Work',
    'WorkAuthor',
    'Edition',
    'ExternalIngest',
    'SearchCooldown'
]
