"""PaperLens rich error messages — actionable feedback.

Every error shown to the user must contain:
  1. What went wrong (clear cause)
  2. The exact action the user should take to fix it

Usage:
    from paperlens.cli.errors import err_no_documents
    console.print(err_no_documents())
    raise typer.Exit(1)
"""

from __future__ import annotations

from rich.markup import escape


def err_no_documents() -> str:
    """The library is empty."""
    return (
        "[yellow]No papers uploaded.[/]\n"
        "  Run:  paperlens upload path/to/paper.pdf"
    )


def err_document_not_found(ref: str) -> str:
    """--doc did not match any id, id prefix, or file name."""
    return (
        f"[red]Error:[/] No paper matches '{escape(ref)}'.\n"
        "  Run:  paperlens library list  to see ids and names."
    )


def err_ambiguous_document(ref: str, names: list[str]) -> str:
    """--doc matched more than one document."""
    listing = "\n".join(f"    {escape(n)}" for n in names)
    return (
        f"[red]Error:[/] '{escape(ref)}' matches more than one paper:\n"
        f"{listing}\n"
        "  Use a longer id prefix."
    )


def err_upload(message: str) -> str:
    """Upload rejected or extraction failed; nothing was stored."""
    return (
        f"[red]Error:[/] {escape(message)}\n"
        "  Choose a PDF file within the upload size limit and run paperlens upload again."
    )


def err_operation_failed(message: str, retry_cmd: str) -> str:
    """A backend operation settled as failed."""
    return (
        f"[red]Error:[/] {escape(message)}\n"
        f"  Retry:  {escape(retry_cmd)}"
    )


def err_config(message: str) -> str:
    """Config file contains an invalid or forbidden value."""
    return (
        f"[red]Error:[/] Invalid configuration.\n"
        f"  {escape(message)}\n"
        "  Fix paperlens.yaml or ~/.paperlens/config.yaml and try again."
    )


def err_invalid_language(message: str) -> str:
    """--lang is not one of the supported languages."""
    return f"[red]Error:[/] {escape(message)}"


def warn_speech_unsupported() -> str:
    """Speech input was requested but is not available."""
    return (
        "[yellow]Speech recognition is not supported in this environment.[/]\n"
        "  Type your question instead."
    )
