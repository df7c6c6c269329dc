# api/schemas/edition.py
from core.models.edition import EditionPayload, NormalizedEdition

# The API speaks the core edition models directly
EditionSchema = NormalizedEdition
EditionCreate = EditionPayload

__all__ = ['EditionSchema', 'EditionCreate']
