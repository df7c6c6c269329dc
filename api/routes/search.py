# api/routes/search.py

from typing import List, Optional
from fastapi import APIRouter, Depends, Query

from api.dependencies import get_search_service, get_settings
from api.schemas.work import WorkSchema
from core.config import Settings
from core.services.search import SearchService

router = APIRouter(tags=["search"])


@router.get("/search", response_model=List[WorkSchema])
def search_works(
    q: Optional[str] = Query(None, description="Title search, at least 2 characters"),
    limit: Optional[int] = Query(None, ge=1, le=100, description="Maximum number of works to return"),
    service: SearchService = Depends(get_search_service),
    settings: Settings = Depends(get_settings)
):
    """
    Search works by title.

    Local matches are ranked exact, prefix, then substring. When nothing matches
    locally the external provider is asked once, its result is ingested, and
    the local search is re-run. Repeating a query that fell back within the
    cooldown window responds 429.
    """
    return service.search(q, limit=limit or settings.search_default_limit)
