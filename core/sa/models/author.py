# core/sa/models/author.py
from sqlalchemy import String, Index
from sqlalchemy.orm import relationship, Mapped, mapped_column
from .base import Base


class Author(Base):
    __tablename__ = 'authors'

    # Supplied by the caller; never generated or merged by the store
    id: Mapped[str] = mapped_column(String(255), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)

    # Relationships
    work_authors = relationship('WorkAuthor', back_populates='author')

    # Convenience relationship
    works = relationship('Work', secondary='work_authors', viewonly=True)

    __table_args__ = (
        Index('idx_author_name', 'name'),
    )
