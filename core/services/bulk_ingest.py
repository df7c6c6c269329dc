# core/services/bulk_ingest.py
import logging
import uuid
from dataclasses import dataclass, field
from typing import List, Optional

from sqlalchemy.orm import Session

from core.errors import ValidationError
from core.models.edition import EditionPayload, EditionType
from core.providers.google_books import ExternalVolume, GoogleBooksClient
from core.providers.open_library import OpenLibraryClient, OpenLibraryEdition, OpenLibraryWork, key_id
from core.resolvers.edition_upserter import EditionUpserter
from core.sa.repositories.author import AuthorRepository
from core.sa.repositories.work import WorkRepository

logger = logging.getLogger(__name__)

AUDIOBOOK_HINTS = ("audiobook", "narrated", "mp3")
EBOOK_HINTS = ("ebook", "kindle")
PRINT_HINTS = ("paperback", "hardcover", "print")


def infer_edition_type(volume: ExternalVolume) -> str:
    """Guess the edition type from the volume's print type, subtitle and description"""
    hints = " ".join(
        part for part in (volume.print_type, volume.subtitle, volume.description) if part
    ).lower()

    if any(h in hints for h in AUDIOBOOK_HINTS):
        return EditionType.AUDIOBOOK.value
    if volume.is_ebook or any(h in hints for h in EBOOK_HINTS):
        return EditionType.EBOOK.value
    if any(h in hints for h in PRINT_HINTS):
        return EditionType.PRINT.value
    return EditionType.UNKNOWN.value


def volume_work_id(volume: ExternalVolume) -> str:
    """Stable work ID for a provider volume, so re-running an ingest updates in place"""
    if volume.external_id:
        return f"gb-{volume.external_id}"
    return str(uuid.uuid4())


@dataclass
class IngestSummary:
    author_id: str
    author_name: str
    works: int = 0
    editions_created: int = 0
    editions_updated: int = 0
    skipped: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)


class AuthorIngestor:
    """Imports every volume a provider lists for an author."""

    def __init__(self, session: Session, client: GoogleBooksClient):
        self.session = session
        self.client = client
        self.authors = AuthorRepository(session)
        self.works = WorkRepository(session)
        self.upserter = EditionUpserter(session)

    def ingest_author(self, name: str, author_id: Optional[str] = None, max_results: int = 40) -> IngestSummary:
        """
        Fetch an author's volumes and ingest one work (plus edition) per volume.

        Args:
            name: Author name, matched exactly against existing authors
            author_id: ID to use when the author has to be created
            max_results: Number of volumes to request

        Returns:
            IngestSummary with counts and the titles that were skipped or failed
        """
        author = self.authors.get_by_id(author_id) if author_id else None
        if author is None:
            author, created = self.authors.get_or_create_by_name(name, author_id or str(uuid.uuid4()))
            if created:
                logger.info(f"Created author {author.name} ({author.id})")

        summary = IngestSummary(author_id=author.id, author_name=author.name)
        volumes = self.client.search(f'inauthor:"{name}"', max_results=max_results)
        logger.info(f"Found {len(volumes)} volumes for {name}")

        for volume in volumes:
            try:
                self._ingest_volume(author.id, author.name, volume, summary)
            except Exception:
                self.session.rollback()
                logger.exception(f"Error ingesting {volume.title}")
                summary.failed.append(volume.title)

        return summary

    def _ingest_volume(self, author_id: str, author_name: str, volume: ExternalVolume, summary: IngestSummary) -> None:
        work, _ = self.works.upsert(
            volume_work_id(volume),
            title=volume.title,
            author=author_name,
            description=volume.description,
            cover_url=volume.cover_url,
            published_date=volume.published_date,
            commit=False,
        )
        self.works.link_author(work.id, author_id, commit=False)

        isbn = volume.isbn_13 or volume.isbn_10
        if not isbn and not volume.asin:
            self.session.commit()
            summary.works += 1
            summary.skipped.append(volume.title)
            logger.debug(f"No ISBN or ASIN for {volume.title}, work only")
            return

        result = self.upserter.upsert(
            EditionPayload(
                work_id=work.id,
                type=infer_edition_type(volume),
                format=volume.print_type or "unknown",
                isbn=isbn,
                asin=volume.asin,
                release_date=volume.published_date,
            ),
            commit=False,
        )
        self.session.commit()
        summary.works += 1

        if result.created:
            summary.editions_created += 1
        else:
            summary.editions_updated += 1


def infer_open_library_type(edition: OpenLibraryEdition) -> str:
    """Edition type from the physical format, falling back to which identifier is present"""
    physical_format = (edition.physical_format or "").lower()
    if "audio" in physical_format:
        return EditionType.AUDIOBOOK.value
    if "ebook" in physical_format or "e-book" in physical_format:
        return EditionType.EBOOK.value
    if edition.isbn:
        return EditionType.PRINT.value
    if edition.asin:
        return EditionType.AUDIOBOOK.value
    return EditionType.UNKNOWN.value


class OpenLibraryIngestor:
    """Imports an Open Library author's works and every edition they list."""

    def __init__(self, session: Session, client: OpenLibraryClient):
        self.session = session
        self.client = client
        self.authors = AuthorRepository(session)
        self.works = WorkRepository(session)
        self.upserter = EditionUpserter(session)

    def ingest_author(self, author_key: str, max_works: int = 50, max_editions: int = 50) -> IngestSummary:
        """
        Fetch an author's works and their editions, committing once per work.

        Args:
            author_key: Open Library author key, e.g. "OL23919A"
            max_works: Number of works to request
            max_editions: Number of editions to request per work

        Returns:
            IngestSummary; skipped lists editions without ISBN/ASIN or that
            conflict with existing rows, failed lists works that were rolled back
        """
        name = self.client.get_author_name(author_key) or author_key
        author, created = self.authors.get_or_create_by_name(name, f"ol-{author_key}")
        if created:
            logger.info(f"Created author {author.name} ({author.id})")

        summary = IngestSummary(author_id=author.id, author_name=author.name)
        works = self.client.get_author_works(author_key, limit=max_works)
        logger.info(f"Found {len(works)} Open Library works for {name}")

        for work in works:
            try:
                self._ingest_work(author.id, author.name, work, summary, max_editions)
            except Exception:
                self.session.rollback()
                logger.exception(f"Error ingesting {work.title}")
                summary.failed.append(work.title)

        return summary

    def _ingest_work(
        self, author_id: str, author_name: str, work: OpenLibraryWork, summary: IngestSummary, max_editions: int
    ) -> None:
        editions = self.client.get_work_editions(work.key, limit=max_editions)

        row, _ = self.works.upsert(
            f"ol-{key_id(work.key)}",
            title=work.title,
            author=author_name,
            description=work.description,
            cover_url=work.cover_url,
            commit=False,
        )
        self.works.link_author(row.id, author_id, commit=False)

        created = updated = 0
        skipped = []
        for edition in editions:
            label = f"{work.title} ({key_id(edition.key) or 'edition'})"
            if not edition.isbn and not edition.asin:
                skipped.append(label)
                continue
            try:
                result = self.upserter.upsert(
                    EditionPayload(
                        work_id=row.id,
                        type=infer_open_library_type(edition),
                        format=edition.physical_format or "unknown",
                        isbn=edition.isbn,
                        asin=edition.asin,
                        narrator=edition.narrator,
                        publisher=edition.publisher,
                        language=edition.language,
                        page_count=edition.page_count,
                        release_date=edition.publish_date,
                    ),
                    commit=False,
                )
            except ValidationError as e:
                logger.warning(f"Skipping {label}: {e.message}")
                skipped.append(label)
                continue
            if result.created:
                created += 1
            else:
                updated += 1

        self.session.commit()
        summary.works += 1
        summary.editions_created += created
        summary.editions_updated += updated
        summary.skipped.extend(skipped)
