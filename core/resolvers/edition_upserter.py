import logging
import uuid
from typing import Any, Dict, Optional, Union

from sqlalchemy.orm import Session

from ..errors import ValidationError
from ..models.edition import EditionPayload, UpsertResult, UpsertStatus
from ..sa.models import Edition, utcnow
from ..sa.repositories.edition import EditionRepository
from ..sa.repositories.work import WorkRepository

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ('work_id', 'type', 'format')


class EditionUpserter:
    """Creates or updates edition records, deduplicating on ISBN/ASIN."""

    def __init__(self, session: Session):
        """
        Initialize the upserter.

        Args:
            session: SQLAlchemy session
        """
        self.session = session
        self.edition_repository = EditionRepository(session)
        self.work_repository = WorkRepository(session)

    def upsert(self, payload: Union[EditionPayload, Dict[str, Any]], commit: bool = True) -> UpsertResult:
        """
        Create an edition, or update the one that already holds its ISBN or ASIN.

        Args:
            payload: Candidate edition
            commit: Commit the write. Pass False to enlist in a larger transaction.

        Returns:
            UpsertResult with status "created" (new row) or "updated" (matched row)

        Raises:
            ValidationError: If required fields are missing, the work does not exist,
                the ISBN and ASIN belong to two different editions, or a new
                edition's id is already taken
        """
        if not isinstance(payload, EditionPayload):
            payload = EditionPayload.model_validate(payload)

        self._validate(payload)
        existing = self._find_match(payload)
        now = utcnow()

        if existing:
            self._apply(existing, payload)
            existing.updated_at = now
            result = UpsertResult(status=UpsertStatus.UPDATED, id=existing.id)
        else:
            if payload.id and self.edition_repository.get_by_id(payload.id) is not None:
                raise ValidationError(f"Edition id {payload.id} is already used by another edition")
            edition = Edition(id=payload.id or str(uuid.uuid4()))
            self._apply(edition, payload)
            edition.updated_at = now
            self.session.add(edition)
            result = UpsertResult(status=UpsertStatus.CREATED, id=edition.id)

        if commit:
            try:
                self.session.commit()
            except Exception:
                self.session.rollback()
                raise
        else:
            self.session.flush()

        logger.info(f"Edition {result.id} {result.status.value} (isbn={payload.isbn}, asin={payload.asin})")
        return result

    def _validate(self, payload: EditionPayload) -> None:
        missing = [name for name in REQUIRED_FIELDS if not getattr(payload, name)]
        if not payload.isbn and not payload.asin:
            missing.append('isbn or asin')
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")

        if self.work_repository.get_by_id(payload.work_id) is None:
            raise ValidationError(f"Work {payload.work_id} does not exist")

    def _find_match(self, payload: EditionPayload) -> Optional[Edition]:
        matches = self.edition_repository.find_by_identifiers(payload.isbn, payload.asin)
        if len(matches) > 1:
            ids = ', '.join(m.id for m in matches)
            raise ValidationError(
                f"isbn {payload.isbn} and asin {payload.asin} belong to different editions ({ids})"
            )
        return matches[0] if matches else None

    @staticmethod
    def _apply(edition: Edition, payload: EditionPayload) -> None:
        """Overwrite every mutable column with the submitted values"""
        for name, value in payload.mutable_fields().items():
            setattr(edition, name, value)
