"""paperlens summarize / insights / search — AI artifacts via the backend.

summarize and insights attach their result to the paper (once; an existing
artifact is shown without calling the backend). search spans the whole
library and is never stored.

Usage:
  paperlens summarize --doc 3f2a
  paperlens insights --doc paper.pdf
  paperlens search "What are the effects of transformer architecture?"
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Annotated

import typer
from rich.console import RenderableType
from rich.markup import escape
from rich.status import Status

from paperlens.cli.common import console, load_cfg, resolve_document
from paperlens.cli.errors import err_no_documents, err_operation_failed
from paperlens.cli.render import insights_panel, search_panel, summary_panel
from paperlens.config import PaperLensConfig
from paperlens.workspace.envelope import OperationKind, OperationState
from paperlens.workspace.service import open_workspace

_DbOption = Annotated[
    Path | None,
    typer.Option("--db", help="Path to the PaperLens database."),
]
_DocOption = Annotated[
    str,
    typer.Option("--doc", "-d", help="Paper id, id prefix, or file name."),
]


def summarize_cmd(doc: _DocOption, db: _DbOption = None) -> None:
    """Generate (or show) the AI summary of a paper."""
    cfg = load_cfg(db)
    _exit_on_failure(asyncio.run(_generate(cfg, OperationKind.SUMMARY, doc)))


def insights_cmd(doc: _DocOption, db: _DbOption = None) -> None:
    """Extract (or show) objectives, key concepts, results, and conclusions."""
    cfg = load_cfg(db)
    _exit_on_failure(asyncio.run(_generate(cfg, OperationKind.INSIGHTS, doc)))


def search_cmd(
    query: Annotated[str, typer.Argument(help="Free-text question across all papers.")],
    db: _DbOption = None,
) -> None:
    """Ask a question across the whole library."""
    if not query.strip():
        console.print("[yellow]Enter a question to search for.[/]")
        raise typer.Exit(1)
    cfg = load_cfg(db)
    _exit_on_failure(asyncio.run(_search(cfg, query)))


# ------------------------------------------------------------------
# Async bodies return (renderable, error message, retry command)
# ------------------------------------------------------------------

_Outcome = tuple[RenderableType | None, str | None, str]


async def _generate(cfg: PaperLensConfig, kind: OperationKind, ref: str) -> _Outcome:
    async with open_workspace(cfg) as ws:
        target = resolve_document(ws.store, ref)
        ws.open_document(target.id)
        retry = f"paperlens {'summarize' if kind is OperationKind.SUMMARY else 'insights'} --doc {ref}"

        label = "Analyzing…" if kind is OperationKind.SUMMARY else "Extracting…"
        with Status(f"{label} {escape(target.name)}", console=console):
            if kind is OperationKind.SUMMARY:
                status = await ws.generate_summary(target.id)
            else:
                status = await ws.extract_insights(target.id)

        if status.state is OperationState.FAILED:
            return None, status.error, retry
        if kind is OperationKind.SUMMARY:
            return summary_panel(target.name, status.result), None, retry
        return insights_panel(target.name, status.result), None, retry


async def _search(cfg: PaperLensConfig, query: str) -> _Outcome:
    retry = f'paperlens search "{query}"'
    async with open_workspace(cfg) as ws:
        if len(ws.store) == 0:
            return err_no_documents(), None, retry
        with Status("Searching…", console=console):
            status = await ws.search(query)
    if status.state is OperationState.FAILED:
        return None, status.error, retry
    return search_panel(query, status.result), None, retry


def _exit_on_failure(outcome: _Outcome) -> None:
    renderable, error, retry = outcome
    if error is not None:
        console.print(err_operation_failed(error, retry))
        raise typer.Exit(1)
    if renderable is not None:
        console.print(renderable)
