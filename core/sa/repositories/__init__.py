# core/sa/repositories/__init__.py
from .author import AuthorRepository
from .work import WorkRepository
from .edition import EditionRepository
from .ingest import IngestLogRepository

__all__ = ['AuthorRepository', 'WorkRepository', 'EditionRepository', 'IngestLogRepository']
