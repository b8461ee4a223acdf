"""PaperLens CLI entry point."""

from __future__ import annotations

import importlib.metadata
import logging
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler

from paperlens.cli.chat import chat_cmd
from paperlens.cli.generate import insights_cmd, search_cmd, summarize_cmd
from paperlens.cli.library import library_app
from paperlens.cli.status import status_cmd
from paperlens.cli.upload import upload_cmd


def _package_version() -> str:
    try:
        return importlib.metadata.version("paperlens")
    except importlib.metadata.PackageNotFoundError:
        return "dev"


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"paperlens {_package_version()}")
        raise typer.Exit()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )
    # httpx logs every request at INFO; keep it quiet unless asked.
    logging.getLogger("httpx").setLevel(logging.DEBUG if verbose else logging.WARNING)


app = typer.Typer(
    name="paperlens",
    help=(
        "PaperLens — AI research-paper workspace.\n\n"
        "  paperlens upload      Add a PDF paper to the library.\n"
        "  paperlens summarize   Abstract, findings, methodology, limitations.\n"
        "  paperlens chat        Ask questions about a paper."
    ),
    add_completion=False,
)


@app.callback()
def main_callback(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=_version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log debug output to stderr."),
    ] = False,
) -> None:
    """PaperLens — AI research-paper workspace."""
    _configure_logging(verbose)


app.command("upload")(upload_cmd)
app.command("summarize")(summarize_cmd)
app.command("insights")(insights_cmd)
app.command("search")(search_cmd)
app.command("chat")(chat_cmd)
app.command("status")(status_cmd)
app.add_typer(library_app, name="library")


@app.command("version")
def version_cmd() -> None:
    """Show the installed PaperLens version."""
    typer.echo(f"paperlens {_package_version()}")


if __name__ == "__main__":
    app()
