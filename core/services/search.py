# core/services/search.py
import logging
import uuid
from datetime import datetime, timedelta, UTC
from typing import Callable, List, Optional

from sqlalchemy.orm import Session

from core.errors import RateLimitedError, UpstreamError, ValidationError
from core.models.edition import EditionPayload, EditionType
from core.providers.google_books import ExternalVolume, MetadataProvider
from core.sa.models import Work
from core.sa.repositories.author import AuthorRepository
from core.sa.repositories.edition import EditionRepository
from core.sa.repositories.ingest import IngestLogRepository, NOT_FOUND, SUCCESS
from core.sa.repositories.work import WorkRepository
from core.resolvers.edition_upserter import EditionUpserter
from core.utils.cooldown import CooldownCache

logger = logging.getLogger(__name__)

MIN_QUERY_LENGTH = 2
DEFAULT_COOLDOWN_SECONDS = 60
UNKNOWN_AUTHOR = "Unknown"
INGEST_FORMAT = "unspecified"


def normalize_query(query: Optional[str]) -> str:
    return (query or "").strip().lower()


class SearchService:
    """Title search over local works, falling back to an external provider on a miss.

    A miss ingests the provider's first volume (author, work, link and, when it
    has an ISBN-13, one edition) and then re-runs the local search.
    """

    def __init__(
        self,
        session: Session,
        provider: MetadataProvider,
        cooldown: CooldownCache,
        cooldown_seconds: int = DEFAULT_COOLDOWN_SECONDS,
        clock: Callable[[], datetime] = lambda: datetime.now(UTC)
    ):
        self.session = session
        self.provider = provider
        self.cooldown = cooldown
        self.cooldown_window = timedelta(seconds=cooldown_seconds)
        self.clock = clock
        self.works = WorkRepository(session)
        self.authors = AuthorRepository(session)
        self.editions = EditionRepository(session)
        self.ingest_log = IngestLogRepository(session)

    def search(self, query: Optional[str], limit: int = 10) -> List[Work]:
        """
        Search works by title.

        Args:
            query: Free-text title query (case-insensitive)
            limit: Maximum number of works to return

        Returns:
            Works ranked exact match, then prefix, then substring

        Raises:
            ValidationError: If the query is shorter than 2 characters
            RateLimitedError: If the same query fell back less than the cooldown ago
            UpstreamError: If the provider has no usable result
        """
        normalized = normalize_query(query)
        if len(normalized) < MIN_QUERY_LENGTH:
            raise ValidationError("Query too short")

        results = self.works.search_titles(normalized, limit=limit)
        if results:
            return results

        self._fallback(normalized)
        return self.works.search_titles(normalized, limit=limit)

    def _fallback(self, query: str) -> None:
        now = self.clock()
        remaining = self.cooldown.remaining(query, self.cooldown_window, now)
        if remaining > 0:
            logger.info(f"Fallback for {query!r} rejected, {remaining:.0f}s of cooldown left")
            raise RateLimitedError()
        self.cooldown.touch(query, now)

        logger.info(f"No local results for {query!r}, asking {self.provider.source}")
        try:
            volume = self.provider.lookup(query)
        except UpstreamError:
            logger.warning(f"{self.provider.source} lookup failed for {query!r}")
            self._log_not_found(query)
            raise

        if volume is None:
            logger.info(f"{self.provider.source} has no results for {query!r}")
            self._log_not_found(query)
            raise UpstreamError()

        work_id = self.ingest(query, volume)
        logger.info(f"Ingested {volume.title!r} from {self.provider.source} as work {work_id}")

    def _log_not_found(self, query: str) -> None:
        self.ingest_log.record(query, self.provider.source, NOT_FOUND)
        self.session.commit()

    def ingest(self, query: str, volume: ExternalVolume) -> str:
        """
        Persist a provider volume in one transaction.

        Creates (or reuses by exact name) the author, creates the work, links
        them, adds one print edition if the volume has an ISBN-13 not already
        in the catalog, and logs a successful ingest. Any failure rolls back
        every step.

        Returns:
            ID of the new work
        """
        try:
            author_name = volume.first_author or UNKNOWN_AUTHOR
            author, _ = self.authors.get_or_create_by_name(author_name, str(uuid.uuid4()), commit=False)

            work, _ = self.works.upsert(
                str(uuid.uuid4()),
                title=volume.title,
                author=author_name,
                description=volume.description,
                cover_url=volume.cover_url,
                published_date=volume.published_date,
                commit=False,
            )
            self.works.link_author(work.id, author.id, commit=False)

            if volume.isbn_13:
                if self.editions.get_by_identifier(isbn=volume.isbn_13):
                    logger.warning(f"ISBN {volume.isbn_13} already catalogued, not adding an edition to {work.id}")
                else:
                    EditionUpserter(self.session).upsert(
                        EditionPayload(
                            work_id=work.id,
                            type=EditionType.PRINT.value,
                            format=INGEST_FORMAT,
                            isbn=volume.isbn_13,
                        ),
                        commit=False,
                    )

            self.ingest_log.record(query, self.provider.source, SUCCESS, work_id=work.id)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        return work.id
