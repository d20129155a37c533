"""``gosight version``."""

import typer

from . import app


@app.command()
def version() -> None:
    """Show version and exit."""
    from .. import __version__

    typer.echo(f"gosight {__version__}")
