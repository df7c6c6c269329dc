# api/routes/links.py

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from api.dependencies import get_db
from api.schemas.work import WorkAuthorLink, LinkResponse
from core.errors import NotFoundError
from core.sa.repositories.author import AuthorRepository
from core.sa.repositories.work import WorkRepository

router = APIRouter(prefix="/work-authors", tags=["works"])


@router.post("", response_model=LinkResponse, status_code=status.HTTP_201_CREATED)
def link_work_author(link: WorkAuthorLink, db: Session = Depends(get_db)):
    """
    Link a work to an author. Linking an already linked pair is a no-op.
    """
    works = WorkRepository(db)
    if works.get_by_id(link.work_id) is None:
        raise NotFoundError("Work not found")
    if AuthorRepository(db).get_by_id(link.author_id) is None:
        raise NotFoundError("Author not found")

    inserted = works.link_author(link.work_id, link.author_id)
    return LinkResponse(
        status="linked" if inserted else "exists",
        work_id=link.work_id,
        author_id=link.author_id,
    )
