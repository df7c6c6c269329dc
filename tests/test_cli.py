# tests/test_cli.py
from unittest.mock import Mock, patch

import pytest
from click.testing import CliRunner
from sqlalchemy import create_engine, inspect

from cli.main import cli
from core.errors import UpstreamError
from core.providers.google_books import ExternalVolume
from core.providers.open_library import OpenLibraryEdition, OpenLibraryWork


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def cli_env(tmp_path):
    """Environment pointing the CLI at a throwaway database"""
    return {"DATABASE_URL": f"sqlite:///{tmp_path / 'cli.db'}", "LOG_LEVEL": "WARNING"}


def test_db_init(runner, cli_env):
    result = runner.invoke(cli, ["db", "init"], env=cli_env)

    assert result.exit_code == 0
    assert "Database schema created" in result.output
    tables = inspect(create_engine(cli_env["DATABASE_URL"])).get_table_names()
    assert {"authors", "works", "editions", "work_authors", "external_ingests"} <= set(tables)


def test_search_falls_back_and_prints_results(runner, cli_env, fake_provider, martian_volume):
    fake_provider.volume = martian_volume

    with patch("cli.commands.search.GoogleBooksClient", return_value=fake_provider):
        result = runner.invoke(cli, ["search", "The Martian"], env=cli_env)

    assert result.exit_code == 0
    assert "The Martian by Andy Weir" in result.output
    assert fake_provider.calls == ["the martian"]


def test_search_reports_errors(runner, cli_env, fake_provider):
    with patch("cli.commands.search.GoogleBooksClient", return_value=fake_provider):
        result = runner.invoke(cli, ["search", "x"], env=cli_env)

    assert result.exit_code == 1
    assert "Query too short (400)" in result.output


def test_ingest_author(runner, cli_env):
    client = Mock()
    client.search.return_value = [
        ExternalVolume(external_id="v1", title="The Martian", authors=["Andy Weir"], isbn_13="9780804139201"),
        ExternalVolume(external_id="v2", title="Cheshire Crossing", authors=["Andy Weir"]),
    ]

    with patch("cli.commands.ingest.GoogleBooksClient", return_value=client):
        result = runner.invoke(
            cli,
            ["ingest", "author", "Andy Weir", "--author-id", "andy-weir", "--max-results", "5", "--verbose"],
            env=cli_env,
        )

    assert result.exit_code == 0, result.output
    client.search.assert_called_once_with('inauthor:"Andy Weir"', max_results=5)
    assert "Author: Andy Weir (andy-weir)" in result.output
    assert "Works: 2" in result.output
    assert "Editions created: 1" in result.output
    assert "skipped: Cheshire Crossing" in result.output


def test_ingest_openlibrary(runner, cli_env):
    client = Mock()
    client.get_author_name.return_value = "J.R.R. Tolkien"
    client.get_author_works.return_value = [OpenLibraryWork(key="/works/OL27482W", title="The Hobbit")]
    client.get_work_editions.return_value = [
        OpenLibraryEdition(key="/books/OL1M", isbn="9780547928227", physical_format="Paperback"),
        OpenLibraryEdition(key="/books/OL3M"),
    ]

    with patch("cli.commands.ingest.OpenLibraryClient", return_value=client):
        result = runner.invoke(
            cli, ["ingest", "openlibrary", "OL26320A", "--max-works", "3", "--verbose"], env=cli_env
        )

    assert result.exit_code == 0, result.output
    client.get_author_works.assert_called_once_with("OL26320A", limit=3)
    assert "Author: J.R.R. Tolkien (ol-OL26320A)" in result.output
    assert "Works: 1" in result.output
    assert "Editions created: 1" in result.output
    assert "skipped: The Hobbit (OL3M)" in result.output


def test_ingest_openlibrary_reports_upstream_failure(runner, cli_env):
    client = Mock()
    client.get_author_name.side_effect = UpstreamError()

    with patch("cli.commands.ingest.OpenLibraryClient", return_value=client):
        result = runner.invoke(cli, ["ingest", "openlibrary", "OL0A"], env=cli_env)

    assert result.exit_code == 1
    assert "Open Library request failed: No external results found." in result.output
