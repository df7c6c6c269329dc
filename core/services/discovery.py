# core/services/discovery.py
"""Filtered, sorted and paginated edition discovery."""
import logging
from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple

from sqlalchemy import asc, desc
from sqlalchemy.orm import Session
from sqlalchemy.sql.elements import ColumnElement

from core.models.edition import NormalizedEdition
from core.sa.models import Edition
from core.sa.repositories.edition import EditionRepository
from core.sa.repositories.work import escape_like
from core.utils.normalize import normalize_edition

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 25
DEFAULT_SORT = "release_date"

SORT_FIELDS = {
    "release_date": Edition.release_date,
    "runtime": Edition.runtime,
    "page_count": Edition.page_count,
}


class Comparison(str, Enum):
    EQUALS = "equals"
    FLAG = "flag"
    CONTAINS = "contains"


# Every recognized filter and how it compares. Anything else is ignored.
FILTER_COMPARISONS: Dict[str, Comparison] = {
    "type": Comparison.EQUALS,
    "format": Comparison.EQUALS,
    "language": Comparison.EQUALS,
    "publisher": Comparison.EQUALS,
    "series_name": Comparison.EQUALS,
    "explicit": Comparison.FLAG,
    "abridged": Comparison.FLAG,
    "genres": Comparison.CONTAINS,
    "tags": Comparison.CONTAINS,
}


def parse_flag(value: Optional[str]) -> Optional[bool]:
    """Only the string "true" means true; any other present value means false"""
    if value is None:
        return None
    return value.strip().lower() == "true"


@dataclass(frozen=True)
class DiscoveryFilters:
    type: Optional[str] = None
    format: Optional[str] = None
    language: Optional[str] = None
    publisher: Optional[str] = None
    series_name: Optional[str] = None
    explicit: Optional[bool] = None
    abridged: Optional[bool] = None
    genres: Optional[str] = None
    tags: Optional[str] = None

    @classmethod
    def from_params(cls, params: Mapping[str, Optional[str]]) -> "DiscoveryFilters":
        """Build filters from raw query parameters.

        Empty equality/substring values count as absent. A flag that is present,
        even empty, is a filter.
        """
        values: Dict[str, Any] = {}
        for name, comparison in FILTER_COMPARISONS.items():
            raw = params.get(name)
            if raw is None:
                continue
            if comparison is Comparison.FLAG:
                values[name] = parse_flag(raw)
            elif raw.strip():
                values[name] = raw.strip()

        ignored = sorted(set(params) - set(FILTER_COMPARISONS) - {"sort", "order", "limit", "offset"})
        if ignored:
            logger.debug(f"Ignoring unrecognized discovery parameters: {', '.join(ignored)}")

        return cls(**values)

    def active(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self) if getattr(self, f.name) is not None}


def build_conditions(filters: DiscoveryFilters) -> List[ColumnElement]:
    """Translate filters into a list of clauses to be ANDed together.

    No filters means no clauses, which matches every edition.
    """
    conditions: List[ColumnElement] = []
    for name, value in filters.active().items():
        column = getattr(Edition, name)
        comparison = FILTER_COMPARISONS[name]
        if comparison is Comparison.EQUALS:
            conditions.append(column == value)
        elif comparison is Comparison.FLAG:
            conditions.append(column.is_(True) if value else column.is_not(True))
        elif comparison is Comparison.CONTAINS:
            conditions.append(column.like(f"%{escape_like(value)}%", escape="\\"))
    return conditions


def resolve_sort(sort: Optional[str], order: Optional[str]) -> Tuple[str, str]:
    """Clamp sort to the allow-list (default release_date) and order to asc/desc (default desc)"""
    sort_field = sort if sort in SORT_FIELDS else DEFAULT_SORT
    sort_order = "asc" if (order or "").strip().lower() == "asc" else "desc"
    return sort_field, sort_order


@dataclass
class DiscoveryPage:
    total: int
    limit: int
    offset: int
    results: List[NormalizedEdition]
    sort: str = DEFAULT_SORT
    order: str = "desc"


class DiscoveryService:
    def __init__(self, session: Session):
        self.session = session
        self.repository = EditionRepository(session)

    def discover(
        self,
        filters: DiscoveryFilters,
        sort: Optional[str] = None,
        order: Optional[str] = None,
        limit: int = DEFAULT_LIMIT,
        offset: int = 0
    ) -> DiscoveryPage:
        """Count and fetch one page of editions matching the filters.

        The count and the page are built from the same clause list; they are two
        reads, so a concurrent write can land between them.
        """
        conditions = build_conditions(filters)
        sort_field, sort_order = resolve_sort(sort, order)
        column = SORT_FIELDS[sort_field]
        direction = asc if sort_order == "asc" else desc

        total = self.repository.count_editions(conditions)
        editions = self.repository.find_editions(
            conditions,
            order_by=(direction(column), direction(Edition.id)),
            limit=limit,
            offset=offset,
        )
        return DiscoveryPage(
            total=total,
            limit=limit,
            offset=offset,
            results=[normalize_edition(e) for e in editions],
            sort=sort_field,
            order=sort_order,
        )
