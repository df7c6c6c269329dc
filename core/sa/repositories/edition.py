# core/sa/repositories/edition.py
from typing import Optional, List, Sequence
from sqlalchemy import desc, func, or_, false
from sqlalchemy.orm import Session
from sqlalchemy.sql.elements import ColumnElement
from ..models import Edition


class EditionRepository:
    def __init__(self, session: Session):
        self.session = session

    def get_by_id(self, edition_id: str) -> Optional[Edition]:
        """Get an edition by ID"""
        return self.session.query(Edition).filter(Edition.id == edition_id).first()

    @staticmethod
    def identifier_condition(isbn: Optional[str], asin: Optional[str]) -> ColumnElement:
        """Match on isbn OR asin, using only the identifiers that are present.

        An absent identifier contributes no term, so two editions without an
        ISBN never match each other through it.
        """
        terms = []
        if isbn:
            terms.append(Edition.isbn == isbn)
        if asin:
            terms.append(Edition.asin == asin)
        if not terms:
            return false()
        return or_(*terms)

    def find_by_identifiers(self, isbn: Optional[str], asin: Optional[str]) -> List[Edition]:
        """Get every edition sharing the given isbn or asin (at most two rows)"""
        return (
            self.session.query(Edition)
            .filter(self.identifier_condition(isbn, asin))
            .order_by(Edition.id)
            .all()
        )

    def get_by_identifier(self, isbn: Optional[str] = None, asin: Optional[str] = None) -> Optional[Edition]:
        """Look up a single edition by ISBN or ASIN, preferring an ISBN match"""
        if isbn:
            edition = self.session.query(Edition).filter(Edition.isbn == isbn).first()
            if edition:
                return edition
        if asin:
            return self.session.query(Edition).filter(Edition.asin == asin).first()
        return None

    def count_editions(self, conditions: Sequence[ColumnElement] = ()) -> int:
        """Count editions matching all of the given conditions"""
        return self.session.query(func.count(Edition.id)).filter(*conditions).scalar() or 0

    def find_editions(
        self,
        conditions: Sequence[ColumnElement] = (),
        order_by: Sequence[ColumnElement] = (),
        limit: int = 20,
        offset: int = 0
    ) -> List[Edition]:
        """Get one page of editions matching all of the given conditions"""
        query = self.session.query(Edition).filter(*conditions)
        if order_by:
            query = query.order_by(*order_by)
        return query.offset(offset).limit(limit).all()

    def list_editions(self, limit: int = 20, offset: int = 0) -> List[Edition]:
        """Get editions, most recently updated first"""
        return self.find_editions(order_by=(desc(Edition.updated_at), Edition.id), limit=limit, offset=offset)
