# tests/test_sa/test_repositories/test_ingest_repository.py
from datetime import datetime, timedelta, UTC

import pytest
from core.sa.models import ExternalIngest
from core.sa.repositories.ingest import IngestLogRepository, NOT_FOUND, SUCCESS


@pytest.fixture
def ingest_repo(db_session):
    return IngestLogRepository(db_session)


@pytest.fixture
def log_rows(db_session):
    start = datetime(2024, 1, 1, tzinfo=UTC)
    for minutes, query, status in [(0, "dune", NOT_FOUND), (1, "the martian", SUCCESS), (2, "dune", NOT_FOUND)]:
        db_session.add(ExternalIngest(
            query=query, source="google_books", status=status, created_at=start + timedelta(minutes=minutes)
        ))
    db_session.commit()


def test_record_flushes_without_commit(ingest_repo, db_session):
    entry = ingest_repo.record("dune", "google_books", NOT_FOUND)
    assert entry.id
    db_session.rollback()
    assert db_session.query(ExternalIngest).count() == 0


def test_get_for_query_newest_first(ingest_repo, log_rows):
    rows = ingest_repo.get_for_query()
    assert [r.query for r in rows] == ["dune", "the martian", "dune"]
    assert rows[0].created_at > rows[2].created_at


def test_get_for_query_filters_and_paginates(ingest_repo, log_rows):
    assert [r.status for r in ingest_repo.get_for_query("the martian")] == [SUCCESS]
    assert len(ingest_repo.get_for_query("dune")) == 2
    assert len(ingest_repo.get_for_query("dune", limit=1, offset=1)) == 1
    assert ingest_repo.get_for_query("hyperion") == []
