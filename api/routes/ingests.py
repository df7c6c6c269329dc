# api/routes/ingests.py

from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from api.dependencies import get_db
from api.schemas.ingest import ExternalIngestSchema
from core.sa.repositories.ingest import IngestLogRepository
from core.services.search import normalize_query

router = APIRouter(prefix="/external_ingests", tags=["search"])


@router.get("", response_model=List[ExternalIngestSchema])
def get_external_ingests(
    query: Optional[str] = Query(None, description="Only attempts for this search query"),
    limit: int = Query(50, ge=0, description="Maximum number of rows to return"),
    offset: int = Query(0, ge=0, description="Number of rows to skip"),
    db: Session = Depends(get_db)
):
    """
    View the external ingest log, newest first.

    Queries are stored normalized, so the filter is matched case-insensitively.
    """
    return IngestLogRepository(db).get_for_query(
        normalize_query(query) or None, limit=limit, offset=offset
    )
