# core/sa/models/edition.py
from sqlalchemy import String, Integer, Float, Boolean, Text, ForeignKey, Index
from sqlalchemy.orm import relationship, Mapped, mapped_column
from .base import Base, UpdatedAtMixin


class Edition(Base, UpdatedAtMixin):
    __tablename__ = 'editions'

    id: Mapped[str] = mapped_column(String(255), primary_key=True)
    work_id: Mapped[str] = mapped_column(String(255), ForeignKey('works.id'), nullable=False)
    type: Mapped[str] = mapped_column(String(50), nullable=False)       # print, ebook, audiobook, ...
    format: Mapped[str] = mapped_column(String(100), nullable=False)    # free text: hardcover, mp3, ...

    # Natural dedup key. NULLs never collide in a unique index.
    isbn: Mapped[str | None] = mapped_column(String(20), unique=True, nullable=True)
    asin: Mapped[str | None] = mapped_column(String(20), unique=True, nullable=True)

    narrator: Mapped[str | None] = mapped_column(String(255), nullable=True)
    abridged: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    explicit: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    page_count: Mapped[int | None] = mapped_column(Integer, nullable=True)
    runtime: Mapped[str | None] = mapped_column(String(32), nullable=True)
    release_date: Mapped[str | None] = mapped_column(String(32), nullable=True)
    language: Mapped[str | None] = mapped_column(String(32), nullable=True)
    publisher: Mapped[str | None] = mapped_column(String(255), nullable=True)
    series_name: Mapped[str | None] = mapped_column(String(500), nullable=True)
    series_position: Mapped[float | None] = mapped_column(Float, nullable=True)
    genres: Mapped[str | None] = mapped_column(Text, nullable=True)  # comma-joined
    tags: Mapped[str | None] = mapped_column(Text, nullable=True)    # comma-joined

    # Relationships
    work = relationship('Work', back_populates='editions')

    __table_args__ = (
        Index('idx_edition_work_id', 'work_id'),
        Index('idx_edition_type', 'type'),
        Index('idx_edition_language', 'language'),
        Index('idx_edition_release_date', 'release_date'),
    )
