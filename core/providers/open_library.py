# core/providers/open_library.py
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import requests

from core.errors import UpstreamError

logger = logging.getLogger(__name__)

SOURCE_NAME = "open_library"
DEFAULT_URL = "https://openlibrary.org"


def key_id(key: Optional[str]) -> Optional[str]:
    """Last path segment of an Open Library key: "/works/OL45804W" -> "OL45804W" """
    if not key:
        return None
    return key.rstrip("/").split("/")[-1] or None


def _first(values: Any) -> Optional[str]:
    if isinstance(values, list):
        for value in values:
            if value:
                return str(value)
    return None


@dataclass
class OpenLibraryWork:
    key: str
    title: str
    description: Optional[str] = None
    cover_id: Optional[int] = None

    @property
    def cover_url(self) -> Optional[str]:
        if not self.cover_id:
            return None
        return f"https://covers.openlibrary.org/b/id/{self.cover_id}-L.jpg"


@dataclass
class OpenLibraryEdition:
    key: str
    title: Optional[str] = None
    isbn: Optional[str] = None
    asin: Optional[str] = None
    physical_format: Optional[str] = None
    publish_date: Optional[str] = None
    page_count: Optional[int] = None
    language: Optional[str] = None
    publisher: Optional[str] = None
    narrator: Optional[str] = None


def parse_work(entry: Dict[str, Any]) -> Optional[OpenLibraryWork]:
    """Parse one `entries[]` item of an author's works listing"""
    key = entry.get("key")
    title = (entry.get("title") or "").strip()
    if not key or not title:
        return None

    description = entry.get("description")
    if isinstance(description, dict):
        description = description.get("value")

    covers = [c for c in entry.get("covers") or [] if isinstance(c, int) and c > 0]
    return OpenLibraryWork(
        key=key,
        title=title,
        description=description or None,
        cover_id=covers[0] if covers else None,
    )


def parse_edition(entry: Dict[str, Any]) -> OpenLibraryEdition:
    """Parse one `entries[]` item of a work's editions listing"""
    identifiers = entry.get("identifiers") or {}

    narrator = None
    for contributor in entry.get("contributors") or []:
        if (contributor.get("role") or "").lower() in ("narrator", "read by"):
            narrator = contributor.get("name")
            break

    language = key_id((entry.get("languages") or [{}])[0].get("key"))
    page_count = entry.get("number_of_pages")

    return OpenLibraryEdition(
        key=entry.get("key") or "",
        title=entry.get("title"),
        isbn=_first(entry.get("isbn_13")) or _first(entry.get("isbn_10")),
        asin=_first(identifiers.get("amazon")),
        physical_format=entry.get("physical_format") or None,
        publish_date=entry.get("publish_date") or None,
        page_count=page_count if isinstance(page_count, int) else None,
        language=language,
        publisher=_first(entry.get("publishers")),
        narrator=narrator,
    )


class OpenLibraryClient:
    """Thin client for the Open Library author, works and editions endpoints."""

    source = SOURCE_NAME

    def __init__(self, base_url: str = DEFAULT_URL, timeout: float = 10.0, session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
            response.raise_for_status()
            return response.json()
        except requests.RequestException as e:
            logger.warning(f"Open Library request failed for {path}: {str(e)}")
            raise UpstreamError() from e
        except ValueError as e:
            logger.warning(f"Open Library returned invalid JSON for {path}")
            raise UpstreamError() from e

    def get_author_name(self, author_key: str) -> Optional[str]:
        data = self._get(f"/authors/{author_key}.json")
        return (data.get("name") or data.get("personal_name") or "").strip() or None

    def get_author_works(self, author_key: str, limit: int = 50) -> List[OpenLibraryWork]:
        data = self._get(f"/authors/{author_key}/works.json", params={"limit": limit})
        works = [parse_work(entry) for entry in data.get("entries") or []]
        return [w for w in works if w]

    def get_work_editions(self, work_key: str, limit: int = 50) -> List[OpenLibraryEdition]:
        """List editions of a work. work_key is either "/works/OL..W" or the bare id."""
        path = work_key if work_key.startswith("/works/") else f"/works/{work_key}"
        data = self._get(f"{path}/editions.json", params={"limit": limit})
        return [parse_edition(entry) for entry in data.get("entries") or []]
