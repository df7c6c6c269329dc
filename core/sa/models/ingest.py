# core/sa/models/ingest.py
import uuid
from datetime import datetime
from sqlalchemy import String, DateTime, Index
from sqlalchemy.orm import Mapped, mapped_column
from .base import Base, utcnow


class ExternalIngest(Base):
    """Append-only record of every external fallback attempt"""
    __tablename__ = 'external_ingests'

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    query: Mapped[str] = mapped_column(String(500), nullable=False)
    source: Mapped[str] = mapped_column(String(50), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False)  # success | not_found
    # Plain column, not a foreign key: audit rows outlive deleted works
    work_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)

    __table_args__ = (
        Index('idx_external_ingest_query', 'query'),
    )


class SearchCooldown(Base):
    """Last fallback attempt per normalized query, for the shared cooldown backend"""
    __tablename__ = 'search_cooldowns'

    query: Mapped[str] = mapped_column(String(500), primary_key=True)
    last_seen_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
