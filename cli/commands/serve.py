# cli/commands/serve.py
import click
import uvicorn


@click.command()
@click.option('--host', default='127.0.0.1', help='Interface to bind')
@click.option('--port', default=8000, type=int, help='Port to listen on')
@click.option('--reload/--no-reload', default=False, help='Reload on code changes')
def serve(host: str, port: int, reload: bool):
    """Run the HTTP API"""
    click.echo(click.style(f"Serving BookFrame API on http://{host}:{port}", fg='blue'))
    uvicorn.run("api.main:app", host=host, port=port, reload=reload)
