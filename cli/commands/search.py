# cli/commands/search.py
import click

from core.errors import CatalogError
from core.providers.google_books import GoogleBooksClient
from core.sa.database import Database
from core.services.search import SearchService
from core.utils.cooldown import DatabaseCooldownCache, InMemoryCooldownCache


@click.command()
@click.argument('query')
@click.option('--limit', default=None, type=int, help='Maximum number of works to show')
@click.pass_obj
def search(settings, query: str, limit: int):
    """Search works by title, falling back to Google Books on a miss

    Example:
        bookframe search "the martian"
        bookframe search dune --limit 5
    """
    database = Database(settings.database_url)
    database.init_db()
    if settings.cooldown_backend == "database":
        cooldown = DatabaseCooldownCache.from_engine(database.engine)
    else:
        cooldown = InMemoryCooldownCache()
    provider = GoogleBooksClient(
        base_url=settings.google_books_url,
        api_key=settings.google_books_api_key,
        timeout=settings.provider_timeout,
    )

    session = database.get_session()
    try:
        service = SearchService(
            session,
            provider=provider,
            cooldown=cooldown,
            cooldown_seconds=settings.search_cooldown_seconds,
        )
        try:
            works = service.search(query, limit=limit or settings.search_default_limit)
        except CatalogError as e:
            click.echo(click.style(f"{e.message} ({e.status_code})", fg='red'))
            raise SystemExit(1)

        if not works:
            click.echo(click.style("No works found", fg='yellow'))
            return

        for work in works:
            author = f" by {work.author}" if work.author else ""
            click.echo(f"{work.id}  {work.title}{author}")
    finally:
        session.close()
        database.dispose()
