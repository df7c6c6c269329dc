# core/sa/repositories/work.py
import logging
from typing import Optional, List, Tuple
from sqlalchemy import desc, func, case
from sqlalchemy.orm import Session
from ..models import Work, WorkAuthor, Edition, utcnow

logger = logging.getLogger(__name__)


def escape_like(value: str, escape: str = "\\") -> str:
    """Escape LIKE wildcards so user input only ever matches literally"""
    return (
        value.replace(escape, escape + escape)
        .replace("%", escape + "%")
        .replace("_", escape + "_")
    )


class WorkRepository:
    def __init__(self, session: Session):
        self.session = session

    def get_by_id(self, work_id: str) -> Optional[Work]:
        """Get a work by ID"""
        return self.session.query(Work).filter(Work.id == work_id).first()

    def count_works(self) -> int:
        return self.session.query(func.count(Work.id)).scalar() or 0

    def list_works(self, limit: int = 20, offset: int = 0) -> List[Work]:
        """Get works, most recently updated first"""
        return (
            self.session.query(Work)
            .order_by(desc(Work.updated_at), Work.id)
            .offset(offset)
            .limit(limit)
            .all()
        )

    def search_titles(self, query: str, limit: int = 10) -> List[Work]:
        """Search work titles, ranking exact matches, then prefixes, then substrings.

        Matching is case-insensitive. The query is expected to be lower-cased
        already; LIKE wildcards in it are escaped.

        Args:
            query: Lower-cased search string
            limit: Maximum number of results to return

        Returns:
            List of Work objects in rank order
        """
        title = func.lower(Work.title)
        escaped = escape_like(query)
        rank = case(
            (title == query, 1),
            (title.like(f"{escaped}%", escape="\\"), 2),
            else_=3,
        )
        return (
            self.session.query(Work)
            .filter(title.like(f"%{escaped}%", escape="\\"))
            .order_by(rank)
            .limit(limit)
            .all()
        )

    def upsert(
        self,
        work_id: str,
        title: str,
        author: Optional[str] = None,
        description: Optional[str] = None,
        cover_url: Optional[str] = None,
        published_date: Optional[str] = None,
        commit: bool = True
    ) -> Tuple[Work, bool]:
        """Create a work under a caller-supplied ID, or update it in place.

        Returns:
            Tuple of (work, was_created)
        """
        work = self.get_by_id(work_id)
        created = work is None
        if created:
            work = Work(id=work_id, title=title)
            self.session.add(work)

        work.title = title
        work.author = author
        work.description = description
        work.cover_url = cover_url
        if published_date is not None or created:
            work.published_date = published_date
        work.updated_at = utcnow()

        if commit:
            self.session.commit()
        else:
            self.session.flush()
        return work, created

    def update(
        self,
        work_id: str,
        title: str,
        author: Optional[str] = None,
        description: Optional[str] = None,
        cover_url: Optional[str] = None
    ) -> Optional[Work]:
        """Update an existing work. Returns None if it does not exist."""
        work = self.get_by_id(work_id)
        if work is None:
            return None
        work.title = title
        work.author = author
        work.description = description
        work.cover_url = cover_url
        work.updated_at = utcnow()
        self.session.commit()
        return work

    def delete(self, work_id: str) -> Optional[Tuple[int, int]]:
        """Delete a work together with its editions and author links.

        Ingest log rows that point at the work are kept.

        Returns:
            Tuple of (editions_deleted, links_deleted), or None if the work does not exist
        """
        work = self.get_by_id(work_id)
        if work is None:
            return None

        try:
            editions_deleted = (
                self.session.query(Edition)
                .filter(Edition.work_id == work_id)
                .delete(synchronize_session=False)
            )
            links_deleted = (
                self.session.query(WorkAuthor)
                .filter(WorkAuthor.work_id == work_id)
                .delete(synchronize_session=False)
            )
            self.session.delete(work)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        logger.info(f"Deleted work {work_id} ({editions_deleted} editions, {links_deleted} author links)")
        return editions_deleted, links_deleted

    def get_editions(self, work_id: str) -> List[Edition]:
        return (
            self.session.query(Edition)
            .filter(Edition.work_id == work_id)
            .order_by(Edition.release_date.asc(), Edition.id.asc())
            .all()
        )

    def link_author(self, work_id: str, author_id: str, commit: bool = True) -> bool:
        """Link a work to an author if they are not linked yet.

        Returns:
            True if a link row was inserted, False if it already existed
        """
        existing = self.session.get(WorkAuthor, (work_id, author_id))
        if existing:
            logger.debug(f"Link {work_id} -> {author_id} already exists")
            return False

        self.session.add(WorkAuthor(work_id=work_id, author_id=author_id))
        if commit:
            self.session.commit()
        else:
            self.session.flush()
        return True
