# cli/commands/ingest.py
import click

from core.errors import UpstreamError
from core.providers.google_books import GoogleBooksClient
from core.providers.open_library import OpenLibraryClient
from core.sa.database import Database
from core.services.bulk_ingest import AuthorIngestor, IngestSummary, OpenLibraryIngestor


@click.group()
def ingest():
    """Import catalog data from external providers"""
    pass


def _print_summary(summary: IngestSummary, verbose: bool):
    click.echo(click.style(f"\nAuthor: {summary.author_name} ({summary.author_id})", fg='green'))
    click.echo(f"Works: {summary.works}")
    click.echo(f"Editions created: {summary.editions_created}")
    click.echo(f"Editions updated: {summary.editions_updated}")
    click.echo(f"Skipped: {len(summary.skipped)}")
    if summary.failed:
        click.echo(click.style(f"Failed: {len(summary.failed)}", fg='red'))

    if verbose:
        for title in summary.skipped:
            click.echo(click.style(f"  skipped: {title}", fg='yellow'))
        for title in summary.failed:
            click.echo(click.style(f"  failed: {title}", fg='red'))


@ingest.command()
@click.argument('name')
@click.option('--author-id', default=None, help='ID to use if the author has to be created')
@click.option('--max-results', default=40, type=int, help='Number of volumes to request (max 40)')
@click.option('--verbose/--no-verbose', default=False, help='List skipped and failed titles')
@click.pass_obj
def author(settings, name: str, author_id: str, max_results: int, verbose: bool):
    """Import every Google Books volume for an author

    Creates or reuses the author, creates one work per volume and an edition
    for each volume with an ISBN or ASIN.

    Example:
        bookframe ingest author "Andy Weir"
        bookframe ingest author "Andy Weir" --author-id andy-weir --max-results 10
    """
    database = Database(settings.database_url)
    database.init_db()
    client = GoogleBooksClient(
        base_url=settings.google_books_url,
        api_key=settings.google_books_api_key,
        timeout=settings.provider_timeout,
    )

    session = database.get_session()
    try:
        click.echo(click.style(f"\nIngesting volumes for {name}...", fg='blue'))
        try:
            summary = AuthorIngestor(session, client).ingest_author(
                name, author_id=author_id, max_results=max_results
            )
        except UpstreamError as e:
            click.echo(click.style(f"Google Books request failed: {e.message}", fg='red'))
            raise SystemExit(1)

        _print_summary(summary, verbose)
    finally:
        session.close()
        database.dispose()


@ingest.command()
@click.argument('author_key')
@click.option('--max-works', default=50, type=int, help='Number of works to request')
@click.option('--max-editions', default=50, type=int, help='Number of editions to request per work')
@click.option('--verbose/--no-verbose', default=False, help='List skipped and failed titles')
@click.pass_obj
def openlibrary(settings, author_key: str, max_works: int, max_editions: int, verbose: bool):
    """Import an Open Library author's works and editions

    AUTHOR_KEY is the Open Library author key. Each work is stored as
    "ol-<work key>" and every edition with an ISBN or ASIN is upserted.

    Example:
        bookframe ingest openlibrary OL26320A
        bookframe ingest openlibrary OL26320A --max-works 5 --verbose
    """
    database = Database(settings.database_url)
    database.init_db()
    client = OpenLibraryClient(base_url=settings.open_library_url, timeout=settings.provider_timeout)

    session = database.get_session()
    try:
        click.echo(click.style(f"\nIngesting Open Library works for {author_key}...", fg='blue'))
        try:
            summary = OpenLibraryIngestor(session, client).ingest_author(
                author_key, max_works=max_works, max_editions=max_editions
            )
        except UpstreamError as e:
            click.echo(click.style(f"Open Library request failed: {e.message}", fg='red'))
            raise SystemExit(1)

        _print_summary(summary, verbose)
    finally:
        session.close()
        database.dispose()
