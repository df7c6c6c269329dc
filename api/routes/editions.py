# api/routes/editions.py

from typing import Optional
from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from api.dependencies import get_db
from api.schemas.common import NotFoundResponse, Page, UpsertResponse
from api.schemas.edition import EditionSchema, EditionCreate
from core.errors import NotFoundError, ValidationError
from core.models.edition import normalize_asin, normalize_isbn
from core.resolvers.edition_upserter import EditionUpserter
from core.sa.repositories.edition import EditionRepository
from core.utils.normalize import normalize_edition

router = APIRouter(prefix="/editions", tags=["editions"])


@router.get("", response_model=Page[EditionSchema])
def get_editions(
    limit: int = Query(20, ge=0, description="Maximum number of editions to return"),
    offset: int = Query(0, ge=0, description="Number of editions to skip"),
    db: Session = Depends(get_db)
):
    """Get a page of editions, most recently updated first"""
    repo = EditionRepository(db)
    return Page[EditionSchema](
        total=repo.count_editions(),
        limit=limit,
        offset=offset,
        results=[normalize_edition(e) for e in repo.list_editions(limit=limit, offset=offset)],
    )


@router.post("", response_model=UpsertResponse, status_code=status.HTTP_201_CREATED)
def upsert_edition(edition: EditionCreate, response: Response, db: Session = Depends(get_db)):
    """
    Create an edition, or update the existing edition with the same ISBN or ASIN.

    Requires work_id, type, format and at least one of isbn/asin.
    Responds 201 when a new edition was created and 200 when one was updated.
    """
    result = EditionUpserter(db).upsert(edition)
    if not result.created:
        response.status_code = status.HTTP_200_OK
    return UpsertResponse(status=result.status.value, id=result.id)


@router.get("/lookup")
def lookup_edition(
    isbn: Optional[str] = Query(None, description="ISBN-10 or ISBN-13"),
    asin: Optional[str] = Query(None, description="Amazon ASIN"),
    db: Session = Depends(get_db)
):
    """Look up an edition by ISBN or ASIN"""
    isbn = normalize_isbn(isbn)
    asin = normalize_asin(asin)
    if not isbn and not asin:
        raise ValidationError("ISBN or ASIN required.")

    edition = EditionRepository(db).get_by_identifier(isbn=isbn, asin=asin)
    if edition is None:
        return NotFoundResponse()
    return normalize_edition(edition)


@router.get("/{edition_id}", response_model=EditionSchema)
def get_edition(edition_id: str, db: Session = Depends(get_db)):
    edition = EditionRepository(db).get_by_id(edition_id)
    if edition is None:
        raise NotFoundError("Edition not found")
    return normalize_edition(edition)
