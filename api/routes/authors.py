# api/routes/authors.py

from typing import List, Optional
from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from api.dependencies import get_db
from api.schemas.author import AuthorSchema, AuthorCreate
from api.schemas.common import NotFoundResponse, UpsertResponse
from api.schemas.edition import EditionSchema
from api.schemas.work import WorkSchema
from core.errors import NotFoundError, ValidationError
from core.sa.repositories.author import AuthorRepository
from core.utils.normalize import normalize_edition

router = APIRouter(prefix="/authors", tags=["authors"])


def _require_author(repo: AuthorRepository, author_id: str):
    author = repo.get_by_id(author_id)
    if author is None:
        raise NotFoundError("Author not found")
    return author


@router.get("")
def find_author_by_name(
    name: Optional[str] = Query(None, description="Exact author name"),
    db: Session = Depends(get_db)
):
    """
    Look up an author by exact name.

    Returns the author, or {"found": false} when nobody has that name.
    """
    if not name:
        raise ValidationError("Name is required.")
    author = AuthorRepository(db).get_by_name(name)
    if author is None:
        return NotFoundResponse()
    return AuthorSchema.model_validate(author)


@router.post("", response_model=UpsertResponse, status_code=status.HTTP_201_CREATED)
def upsert_author(author: AuthorCreate, response: Response, db: Session = Depends(get_db)):
    """Create an author, or rename the author with the same ID"""
    _, created = AuthorRepository(db).upsert(author.id, author.name)
    if not created:
        response.status_code = status.HTTP_200_OK
    return UpsertResponse(status="created" if created else "updated", id=author.id)


@router.get("/{author_id}", response_model=AuthorSchema)
def get_author(author_id: str, db: Session = Depends(get_db)):
    return _require_author(AuthorRepository(db), author_id)


@router.get("/{author_id}/works", response_model=List[WorkSchema])
def get_author_works(author_id: str, db: Session = Depends(get_db)):
    """Get all works linked to an author"""
    repo = AuthorRepository(db)
    _require_author(repo, author_id)
    return repo.get_works(author_id)


@router.get("/{author_id}/editions", response_model=List[EditionSchema])
def get_author_editions(author_id: str, db: Session = Depends(get_db)):
    """
    Get every edition of every work by an author, flattened.

    Each edition carries the title of its work.
    """
    repo = AuthorRepository(db)
    _require_author(repo, author_id)
    return [
        normalize_edition(edition).model_copy(update={"title": title})
        for edition, title in repo.get_editions(author_id)
    ]
