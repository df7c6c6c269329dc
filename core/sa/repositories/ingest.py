from typing import Optional, List
from sqlalchemy import desc
from sqlalchemy.orm import Session
from ..models import ExternalIngest

SUCCESS = "success"
NOT_FOUND = "not_found"


class IngestLogRepository:
    """Append-only access to the external ingest log"""

    def __init__(self, session: Session):
        self.session = session

    def record(self, query: str, source: str, status: str, work_id: Optional[str] = None) -> ExternalIngest:
        """Add a log row to the session. The caller decides when to commit."""
        entry = ExternalIngest(query=query, source=source, status=status, work_id=work_id)
        self.session.add(entry)
        self.session.flush()
        return entry

    def get_for_query(self, query: Optional[str] = None, limit: int = 50, offset: int = 0) -> List[ExternalIngest]:
        """Get log rows, newest first, optionally only those for one query"""
        rows = self.session.query(ExternalIngest)
        if query:
            rows = rows.filter(ExternalIngest.query == query)
        return (
            rows.order_by(desc(ExternalIngest.created_at), ExternalIngest.id)
            .offset(offset)
            .limit(limit)
            .all()
        )
