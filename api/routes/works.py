# api/routes/works.py

from typing import List
from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from api.dependencies import get_db
from api.schemas.common import Page, UpsertResponse
from api.schemas.edition import EditionSchema
from api.schemas.work import WorkSchema, WorkCreate, WorkUpdate, WorkDeleted
from core.errors import NotFoundError
from core.sa.repositories.work import WorkRepository
from core.utils.normalize import normalize_edition

router = APIRouter(prefix="/works", tags=["works"])


@router.get("", response_model=Page[WorkSchema])
def get_works(
    limit: int = Query(20, ge=0, description="Maximum number of works to return"),
    offset: int = Query(0, ge=0, description="Number of works to skip"),
    db: Session = Depends(get_db)
):
    """Get a page of works, most recently updated first"""
    repo = WorkRepository(db)
    return Page[WorkSchema](
        total=repo.count_works(),
        limit=limit,
        offset=offset,
        results=[WorkSchema.model_validate(w) for w in repo.list_works(limit=limit, offset=offset)],
    )


@router.post("", response_model=UpsertResponse, status_code=status.HTTP_201_CREATED)
def upsert_work(work: WorkCreate, response: Response, db: Session = Depends(get_db)):
    """
    Create a work under the caller's ID, or update it in place if the ID exists.
    """
    _, created = WorkRepository(db).upsert(
        work.id,
        title=work.title,
        author=work.author,
        description=work.description,
        cover_url=work.cover_url,
        published_date=work.published_date,
    )
    if not created:
        response.status_code = status.HTTP_200_OK
    return UpsertResponse(status="created" if created else "updated", id=work.id)


@router.get("/{work_id}", response_model=WorkSchema)
def get_work(work_id: str, db: Session = Depends(get_db)):
    work = WorkRepository(db).get_by_id(work_id)
    if work is None:
        raise NotFoundError("Work not found")
    return work


@router.put("/{work_id}", response_model=WorkSchema)
def update_work(work_id: str, update: WorkUpdate, db: Session = Depends(get_db)):
    work = WorkRepository(db).update(
        work_id,
        title=update.title,
        author=update.author,
        description=update.description,
        cover_url=update.cover_url,
    )
    if work is None:
        raise NotFoundError("Work not found")
    return work


@router.delete("/{work_id}", response_model=WorkDeleted)
def delete_work(work_id: str, db: Session = Depends(get_db)):
    """
    Delete a work along with its editions and author links.
    """
    deleted = WorkRepository(db).delete(work_id)
    if deleted is None:
        raise NotFoundError("Work not found")
    editions_deleted, links_deleted = deleted
    return WorkDeleted(id=work_id, editions_deleted=editions_deleted, links_deleted=links_deleted)


@router.get("/{work_id}/editions", response_model=List[EditionSchema])
def get_work_editions(work_id: str, db: Session = Depends(get_db)):
    repo = WorkRepository(db)
    if repo.get_by_id(work_id) is None:
        raise NotFoundError("Work not found")
    return [normalize_edition(e) for e in repo.get_editions(work_id)]
