"""CLI entry point: registers all subcommands."""

import typer

app = typer.Typer(
    name="gosight",
    help="gosight - complexity, duplication and call-graph analysis for Go code",
    add_completion=False,
    rich_markup_mode="rich",
)


# Import subcommands to register them
from .analyze import analyze as _analyze  # noqa: F401, E402
from .version import version as _version  # noqa: F401, E402


def main() -> None:
    app()
