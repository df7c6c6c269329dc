# api/dependencies.py
from typing import Iterator
from fastapi import Depends, Request
from sqlalchemy.orm import Session

from core.config import Settings
from core.services.search import SearchService


def get_db(request: Request) -> Iterator[Session]:
    """Get a database session.

    This is a FastAPI dependency that opens one session per request from the
    app's Database and closes it when the request is complete.

    Yields:
        Session: A SQLAlchemy session
    """
    session = request.app.state.database.get_session()
    try:
        yield session
    finally:
        session.close()


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_search_service(
    request: Request,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings)
) -> SearchService:
    return SearchService(
        db,
        provider=request.app.state.provider,
        cooldown=request.app.state.cooldown,
        cooldown_seconds=settings.search_cooldown_seconds,
    )
