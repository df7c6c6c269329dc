# cli/main.py
import click

from core.config import Settings, configure_logging
from .commands.db import db
from .commands.serve import serve
from .commands.search import search
from .commands.ingest import ingest


@click.group()
@click.option('--log-level', default=None, help='Override LOG_LEVEL (DEBUG, INFO, WARNING, ...)')
@click.pass_context
def cli(ctx, log_level):
    """BookFrame catalog CLI"""
    settings = Settings()
    if log_level:
        settings.log_level = log_level.upper()
    configure_logging(settings.log_level)
    ctx.obj = settings


cli.add_command(db)
cli.add_command(serve)
cli.add_command(search)
cli.add_command(ingest)


def main():
    """Entry point for the CLI"""
    cli()


if __name__ == '__main__':
    main()
