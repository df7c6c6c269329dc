# core/utils/cooldown.py
import threading
from abc import ABC, abstractmethod
from datetime import datetime, timedelta, UTC
from typing import Callable, Dict, Optional

from sqlalchemy.orm import Session, sessionmaker

from core.sa.models import SearchCooldown


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything here is stored in UTC
    return value if value.tzinfo is not None else value.replace(tzinfo=UTC)


class CooldownCache(ABC):
    """Remembers when a key was last used so repeated work can be throttled.

    Keys are normalized query strings, values the time of the last fallback.
    """

    @abstractmethod
    def last_seen(self, key: str) -> Optional[datetime]:
        """Return when the key was last touched, or None"""

    @abstractmethod
    def touch(self, key: str, when: datetime) -> None:
        """Record that the key was used at the given time"""

    def remaining(self, key: str, window: timedelta, now: datetime) -> float:
        """Seconds left in the cooldown window for key (0 when not cooling down)"""
        last = self.last_seen(key)
        if last is None:
            return 0.0
        left = (_as_utc(last) + window - _as_utc(now)).total_seconds()
        return max(left, 0.0)


class InMemoryCooldownCache(CooldownCache):
    """Per-process cooldown store.

    Lost on restart and not shared between instances, so under scale-out the
    cooldown is best-effort only. Use DatabaseCooldownCache to share it.
    """

    def __init__(self):
        self._seen: Dict[str, datetime] = {}
        self._lock = threading.Lock()

    def last_seen(self, key: str) -> Optional[datetime]:
        with self._lock:
            return self._seen.get(key)

    def touch(self, key: str, when: datetime) -> None:
        with self._lock:
            self._seen[key] = when

    def clear(self) -> None:
        with self._lock:
            self._seen.clear()


class DatabaseCooldownCache(CooldownCache):
    """Cooldown store shared by every process using the same database.

    Each call runs in its own short session so cooldown writes commit
    independently of the request's unit of work.
    """

    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    @classmethod
    def from_engine(cls, engine) -> "DatabaseCooldownCache":
        return cls(sessionmaker(bind=engine, autoflush=False))

    def last_seen(self, key: str) -> Optional[datetime]:
        session = self._session_factory()
        try:
            row = session.get(SearchCooldown, key)
            return _as_utc(row.last_seen_at) if row else None
        finally:
            session.close()

    def touch(self, key: str, when: datetime) -> None:
        session = self._session_factory()
        try:
            row = session.get(SearchCooldown, key)
            if row:
                row.last_seen_at = when
            else:
                session.add(SearchCooldown(query=key, last_seen_at=when))
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()
