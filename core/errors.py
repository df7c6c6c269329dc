# core/errors.py
from typing import Optional


class CatalogError(Exception):
    """Base class for errors surfaced to API callers.

    Each subclass carries the HTTP status it maps to at the request boundary.
    """
    status_code: int = 500
    default_message: str = "Internal error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(CatalogError):
    """Missing or malformed input"""
    status_code = 400
    default_message = "Missing required fields."


class NotFoundError(CatalogError):
    status_code = 404
    default_message = "Not found"


class RateLimitedError(CatalogError):
    """Raised while a search query is in its fallback cooldown window"""
    status_code = 429
    default_message = "Rate limited. Try again shortly."


class UpstreamError(CatalogError):
    """The external metadata provider failed or had nothing usable"""
    status_code = 404
    default_message = "No external results found."
