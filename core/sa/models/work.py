# core/sa/models/work.py
from sqlalchemy import String, Text, ForeignKey, Index
from sqlalchemy.orm import relationship, Mapped, mapped_column
from .base import Base, UpdatedAtMixin


class WorkAuthor(Base):
    """Association between works and authors. No payload, unique pair."""
    __tablename__ = 'work_authors'

    work_id: Mapped[str] = mapped_column(String(255), ForeignKey('works.id'), primary_key=True)
    author_id: Mapped[str] = mapped_column(String(255), ForeignKey('authors.id'), primary_key=True)

    # Relationships
    work = relationship('Work', back_populates='work_authors')
    author = relationship('Author', back_populates='work_authors')


class Work(Base, UpdatedAtMixin):
    __tablename__ = 'works'

    id: Mapped[str] = mapped_column(String(255), primary_key=True)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    author: Mapped[str | None] = mapped_column(String(255), nullable=True)  # Legacy denormalized author name
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    cover_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    published_date: Mapped[str | None] = mapped_column(String(32), nullable=True)

    # Relationships
    work_authors = relationship('WorkAuthor', back_populates='work')
    editions = relationship('Edition', back_populates='work')

    # Convenience relationship
    authors = relationship('Author', secondary='work_authors', viewonly=True)

    __table_args__ = (
        Index('idx_work_title', 'title'),
        Index('idx_work_updated_at', 'updated_at'),
    )
