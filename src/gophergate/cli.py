"""CLI interface using typer."""

import asyncio
import sys

import typer

from .config import settings
from .core import GopherClient, GopherError
from .normalize import normalize
from .render import needs_fetch, to_html

app = typer.Typer(
    name="gophergate",
    help="Browse Gopherspace from a web browser",
    no_args_is_help=True,
)


@app.command()
def serve(
    host: str = typer.Option(settings.host, "-h", "--host", help="Hostname to bind to"),
    port: int = typer.Option(settings.port, "-p", "--port", help="Port to bind to"),
    default: str = typer.Option(
        settings.default_target, "-d", "--default", help="Gopher URL shown for an empty path"
    ),
    workers: int = typer.Option(settings.workers, "-w", "--workers", help="Concurrent connections"),
):
    """Run the gateway."""
    from .server import bind, start

    try:
        listener = bind(host, port)
    except OSError as e:
        typer.echo(f"Can't listen on {host}:{port}: {e}", err=True)
        raise typer.Exit(1)

    try:
        asyncio.run(start(
            listener,
            default_target=default,
            client=GopherClient(timeout=settings.gopher_timeout),
            workers=workers,
            buffer_size=settings.request_buffer_size,
            title=settings.title,
        ))
    except KeyboardInterrupt:
        typer.echo("Exiting.")
    finally:
        listener.close()


async def _fetch(url: str, raw: bool) -> str:
    """Fetch a Gopher URL and return the rendered fragment (or raw body)."""
    locator = normalize(url)
    if not needs_fetch(locator):
        if raw:
            raise GopherError(f"Nothing to fetch for {locator}")
        return to_html(locator)
    client = GopherClient(timeout=settings.gopher_timeout)
    response = await client.fetch(locator)
    if raw:
        return response.text
    return to_html(locator, response)


@app.command()
def fetch(
    url: str = typer.Argument(..., help="Gopher URL or search terms"),
    raw: bool = typer.Option(False, "--raw", help="Print the raw Gopher response"),
):
    """Fetch a single Gopher resource and print it as HTML."""
    try:
        output = asyncio.run(_fetch(url, raw))
    except GopherError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(1)
    sys.stdout.write(output)
    if not output.endswith("\n"):
        sys.stdout.write("\n")


@app.command()
def version():
    """Show version."""
    from . import __version__

    typer.echo(f"gophergate {__version__}")


if __name__ == "__main__":
    app()
