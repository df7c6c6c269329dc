# core/providers/google_books.py
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol

import requests

from core.errors import UpstreamError

logger = logging.getLogger(__name__)

SOURCE_NAME = "google_books"
DEFAULT_URL = "https://www.googleapis.com/books/v1/volumes"


@dataclass
class ExternalVolume:
    """The subset of a provider volume the catalog ingests"""
    external_id: Optional[str]
    title: str
    authors: List[str] = field(default_factory=list)
    description: Optional[str] = None
    published_date: Optional[str] = None
    isbn_13: Optional[str] = None
    isbn_10: Optional[str] = None
    asin: Optional[str] = None
    cover_url: Optional[str] = None
    print_type: Optional[str] = None
    subtitle: Optional[str] = None
    is_ebook: bool = False

    @property
    def first_author(self) -> Optional[str]:
        return self.authors[0] if self.authors else None


class MetadataProvider(Protocol):
    """An external metadata lookup service"""
    source: str

    def lookup(self, query: str) -> Optional[ExternalVolume]:
        """Return the best volume for a free-text query, or None"""
        ...


def parse_volume(item: Dict[str, Any]) -> Optional[ExternalVolume]:
    """Parse one Google Books `items[]` entry. Returns None when it has no title."""
    info = item.get("volumeInfo") or {}
    title = (info.get("title") or "").strip()
    if not title:
        return None

    identifiers = {}
    for entry in info.get("industryIdentifiers") or []:
        kind = entry.get("type")
        value = entry.get("identifier")
        if kind and value and kind not in identifiers:
            identifiers[kind] = value

    # ASINs sometimes show up as OTHER identifiers, always starting with "B"
    other = identifiers.get("OTHER")
    asin = other if other and other.startswith("B") else None

    sale_info = item.get("saleInfo") or {}
    image_links = info.get("imageLinks") or {}

    return ExternalVolume(
        external_id=item.get("id"),
        title=title,
        authors=[a for a in info.get("authors") or [] if a],
        description=info.get("description") or None,
        published_date=info.get("publishedDate") or None,
        isbn_13=identifiers.get("ISBN_13"),
        isbn_10=identifiers.get("ISBN_10"),
        asin=asin,
        cover_url=image_links.get("thumbnail") or None,
        print_type=info.get("printType") or None,
        subtitle=info.get("subtitle") or None,
        is_ebook=bool(sale_info.get("isEbook")),
    )


class GoogleBooksClient:
    """Thin client for the Google Books volumes endpoint."""

    source = SOURCE_NAME

    def __init__(
        self,
        base_url: str = DEFAULT_URL,
        api_key: Optional[str] = None,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None
    ):
        self.base_url = base_url
        self.api_key = api_key
        self.timeout = timeout
        self.session = session or requests.Session()

    def search(self, query: str, max_results: int = 10) -> List[ExternalVolume]:
        """
        Search volumes.

        Args:
            query: Google Books query string (supports operators like inauthor:)
            max_results: Number of volumes to request (the API caps this at 40)

        Returns:
            List of parsed volumes, in provider order

        Raises:
            UpstreamError: On network errors, non-2xx responses or invalid JSON
        """
        params = {"q": query, "maxResults": max(1, min(max_results, 40))}
        if self.api_key:
            params["key"] = self.api_key

        try:
            response = self.session.get(self.base_url, params=params, timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
        except requests.RequestException as e:
            logger.warning(f"Google Books request failed for {query!r}: {str(e)}")
            raise UpstreamError() from e
        except ValueError as e:
            logger.warning(f"Google Books returned invalid JSON for {query!r}")
            raise UpstreamError() from e

        volumes = []
        for item in payload.get("items") or []:
            volume = parse_volume(item)
            if volume:
                volumes.append(volume)
        return volumes

    def lookup(self, query: str) -> Optional[ExternalVolume]:
        """Return the first usable volume for the query, or None"""
        volumes = self.search(query, max_results=10)
        return volumes[0] if volumes else None
