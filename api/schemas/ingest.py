# api/schemas/ingest.py
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict


class ExternalIngestSchema(BaseModel):
    id: str
    query: str
    source: str
    status: str
    work_id: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
