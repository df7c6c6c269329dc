# cli/commands/db.py
import click
from core.sa.database import Database


@click.group()
def db():
    """Database management commands"""
    pass


@db.command()
@click.pass_obj
def init(settings):
    """Create the catalog schema"""
    database = Database(settings.database_url)
    try:
        database.init_db()
        click.echo(click.style("Database schema created", fg='green'))
    finally:
        database.dispose()
