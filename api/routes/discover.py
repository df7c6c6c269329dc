# api/routes/discover.py

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from api.dependencies import get_db
from api.schemas.common import Page
from api.schemas.edition import EditionSchema
from core.services.discovery import DEFAULT_LIMIT, DiscoveryFilters, DiscoveryService

router = APIRouter(prefix="/discover", tags=["discover"])


@router.get("/editions", response_model=Page[EditionSchema])
def discover_editions(
    request: Request,
    sort: str = Query("release_date", description="release_date, runtime or page_count"),
    order: str = Query("desc", description="asc or desc"),
    limit: int = Query(DEFAULT_LIMIT, ge=0, description="Page size"),
    offset: int = Query(0, ge=0, description="Number of editions to skip"),
    db: Session = Depends(get_db)
):
    """
    Filtered, sorted and paginated editions.

    Filters (all optional, combined with AND):
        type, format, language, publisher, series_name: exact match
        explicit, abridged: "true" matches flagged editions, any other value unflagged ones
        genres, tags: substring match

    Unknown sort fields fall back to release_date; order is descending unless "asc".
    Other query parameters are ignored.
    """
    filters = DiscoveryFilters.from_params(request.query_params)
    page = DiscoveryService(db).discover(filters, sort=sort, order=order, limit=limit, offset=offset)
    return Page[EditionSchema](
        total=page.total,
        limit=page.limit,
        offset=page.offset,
        results=page.results,
    )
