# tests/test_sa/test_repositories/test_edition_repository.py
import pytest
from sqlalchemy.exc import IntegrityError
from core.sa.models import Edition
from core.sa.repositories.edition import EditionRepository


@pytest.fixture
def edition_repo(db_session):
    return EditionRepository(db_session)


def test_find_by_identifiers_ignores_absent_values(edition_repo, make_edition):
    make_edition(isbn=None, asin="B000000001")
    make_edition(isbn=None, asin="B000000002")

    assert edition_repo.find_by_identifiers(None, None) == []
    assert [e.asin for e in edition_repo.find_by_identifiers(None, "B000000002")] == ["B000000002"]


def test_find_by_identifiers_returns_both_rows(edition_repo, make_edition):
    make_edition(isbn="111")
    make_edition(asin="B000000001")

    assert len(edition_repo.find_by_identifiers("111", "B000000001")) == 2


def test_get_by_identifier_prefers_isbn(edition_repo, make_edition):
    by_isbn = make_edition(isbn="111")
    make_edition(asin="B000000001")

    assert edition_repo.get_by_identifier(isbn="111", asin="B000000001").id == by_isbn.id
    assert edition_repo.get_by_identifier(isbn="999", asin="B000000001").asin == "B000000001"
    assert edition_repo.get_by_identifier() is None


def test_isbn_is_unique(db_session, make_edition):
    make_edition(isbn="111")
    with pytest.raises(IntegrityError):
        make_edition(isbn="111")
    db_session.rollback()


def test_list_editions_paginates(edition_repo, make_edition):
    for i in range(5):
        make_edition(isbn=str(i))

    assert edition_repo.count_editions() == 5
    assert len(edition_repo.list_editions(limit=2)) == 2
    assert len(edition_repo.list_editions(limit=2, offset=4)) == 1
