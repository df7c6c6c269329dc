# tests/conftest.py
import sys
import pytest
from pathlib import Path

# Add project root to Python path
project_root = str(Path(__file__).parent.parent)
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from sqlalchemy.orm import Session

from core.providers.google_books import ExternalVolume
from core.sa.database import Database
from core.sa.models import Base, Author, Work, WorkAuthor, Edition, utcnow


@pytest.fixture(scope="session")
def test_db_path(tmp_path_factory):
    """Create a temporary directory for the test database."""
    test_dir = tmp_path_factory.mktemp("test_db")
    return str(test_dir / "test_bookframe.db")


@pytest.fixture(scope="session")
def database(test_db_path):
    """Create a test database instance"""
    db = Database(f"sqlite:///{test_db_path}")

    # Drop all tables and recreate schema
    db.drop_db()
    db.init_db()

    yield db

    db.dispose()


@pytest.fixture(autouse=True)
def cleanup_db(database):
    """Empty every table before each test"""
    session = database.get_session()
    for table in reversed(Base.metadata.sorted_tables):
        session.execute(table.delete())
    session.commit()
    session.close()
    yield


@pytest.fixture(scope="function")
def db_session(database):
    """Create a new database session for a test"""
    session: Session = database.get_session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def sample_author(db_session):
    """Create a sample author for testing."""
    author = Author(id="author-1", name="Andy Weir")
    db_session.add(author)
    db_session.commit()
    return author


@pytest.fixture
def sample_work(db_session, sample_author):
    """Create a sample work linked to the sample author."""
    work = Work(
        id="work-1",
        title="Project Hail Mary",
        author="Andy Weir",
        description="A lone astronaut",
        updated_at=utcnow(),
    )
    db_session.add(work)
    db_session.add(WorkAuthor(work_id=work.id, author_id=sample_author.id))
    db_session.commit()
    return work


@pytest.fixture
def make_edition(db_session, sample_work):
    """Factory for stored editions. Defaults to an audiobook of the sample work."""
    counter = {"n": 0}

    def _make(**fields):
        counter["n"] += 1
        values = {
            "id": f"ed-{counter['n']}",
            "work_id": sample_work.id,
            "type": "audiobook",
            "format": "mp3",
            "updated_at": utcnow(),
        }
        values.update(fields)
        edition = Edition(**values)
        db_session.add(edition)
        db_session.commit()
        return edition

    return _make


class FakeProvider:
    """In-memory metadata provider that counts lookups"""
    source = "fake"

    def __init__(self, volume=None, error=None):
        self.volume = volume
        self.error = error
        self.calls = []

    def lookup(self, query):
        self.calls.append(query)
        if self.error:
            raise self.error
        return self.volume


@pytest.fixture
def martian_volume():
    return ExternalVolume(
        external_id="vol-martian",
        title="The Martian",
        authors=["Andy Weir"],
        description="Stranded on Mars",
        published_date="2014-02-11",
        isbn_13="9780804139201",
        isbn_10="0804139202",
        cover_url="http://books.google.com/martian.jpg",
        print_type="BOOK",
    )


@pytest.fixture
def fake_provider():
    return FakeProvider()


@pytest.fixture
def app(database, fake_provider):
    """API app wired to the test database and the fake provider"""
    from api.main import create_app
    from core.config import Settings
    from core.utils.cooldown import InMemoryCooldownCache

    return create_app(
        settings=Settings(log_level="WARNING"),
        database=database,
        provider=fake_provider,
        cooldown=InMemoryCooldownCache(),
    )


@pytest.fixture
def client(app):
    """Test client that returns 500 responses instead of raising"""
    from fastapi.testclient import TestClient

    return TestClient(app, raise_server_exceptions=False)
