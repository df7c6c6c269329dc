# core/sa/repositories/author.py
import logging
from typing import Optional, List, Tuple
from sqlalchemy.orm import Session
from ..models import Author, Work, WorkAuthor, Edition

logger = logging.getLogger(__name__)


class AuthorRepository:
    def __init__(self, session: Session):
        self.session = session

    def get_by_id(self, author_id: str) -> Optional[Author]:
        """Get an author by ID"""
        return self.session.query(Author).filter(Author.id == author_id).first()

    def get_by_name(self, name: str) -> Optional[Author]:
        """Get an author by exact name. Similar names are never merged."""
        return self.session.query(Author).filter(Author.name == name).first()

    def upsert(self, author_id: str, name: str, commit: bool = True) -> Tuple[Author, bool]:
        """Create an author, or rename it if the ID already exists.

        Returns:
            Tuple of (author, was_created)
        """
        author = self.get_by_id(author_id)
        created = author is None
        if created:
            author = Author(id=author_id, name=name)
            self.session.add(author)
        else:
            author.name = name

        if commit:
            self.session.commit()
        else:
            self.session.flush()
        return author, created

    def get_or_create_by_name(self, name: str, author_id: str, commit: bool = True) -> Tuple[Author, bool]:
        """Reuse the author with this exact name, or create one with author_id"""
        author = self.get_by_name(name)
        if author:
            return author, False
        author = Author(id=author_id, name=name)
        self.session.add(author)
        if commit:
            self.session.commit()
        else:
            self.session.flush()
        return author, True

    def get_works(self, author_id: str) -> List[Work]:
        """Get all works linked to an author"""
        return (
            self.session.query(Work)
            .join(WorkAuthor, WorkAuthor.work_id == Work.id)
            .filter(WorkAuthor.author_id == author_id)
            .order_by(Work.title.asc())
            .all()
        )

    def get_editions(self, author_id: str) -> List[Tuple[Edition, str]]:
        """Get every edition of every work by an author, with the work title.

        Returns:
            List of (Edition, work_title) tuples
        """
        return (
            self.session.query(Edition, Work.title)
            .join(Work, Edition.work_id == Work.id)
            .join(WorkAuthor, WorkAuthor.work_id == Work.id)
            .filter(WorkAuthor.author_id == author_id)
            .order_by(Work.title.asc(), Edition.id.asc())
            .all()
        )
