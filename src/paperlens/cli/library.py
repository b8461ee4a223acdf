"""paperlens library commands.

Commands:
  paperlens library list            — all papers in upload order
  paperlens library show --doc REF  — stored summary and insights
  paperlens library remove --doc REF — delete a paper and its artifacts
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape
from rich.table import Table

from paperlens.cli.common import console, format_size, load_cfg, resolve_document
from paperlens.cli.errors import err_no_documents
from paperlens.cli.render import insights_panel, summary_panel
from paperlens.config import PaperLensConfig
from paperlens.store.models import ResearchDocument
from paperlens.workspace.service import open_store, open_workspace
from paperlens.workspace.session import AppView

library_app = typer.Typer(
    name="library",
    help="Browse and manage uploaded papers (list, show, remove).",
    add_completion=False,
)

_DbOption = Annotated[
    Path | None,
    typer.Option("--db", help="Path to the PaperLens database."),
]
_DocOption = Annotated[
    str,
    typer.Option("--doc", "-d", help="Paper id, id prefix, or file name."),
]


@library_app.command("list")
def library_list_cmd(db: _DbOption = None) -> None:
    """List uploaded papers with their artifact status."""
    cfg = load_cfg(db)
    with open_store(cfg.storage.path) as store:
        docs = store.documents()

    if not docs:
        console.print(err_no_documents())
        raise typer.Exit(0)

    table = Table(title=AppView.DASHBOARD.heading, show_header=True, header_style="bold")
    table.add_column("ID", style="dim")
    table.add_column("Name", style="bold")
    table.add_column("Size", justify="right")
    table.add_column("Pages", justify="right")
    table.add_column("Uploaded")
    table.add_column("Artifacts")

    for doc in docs:
        badges = [
            "[green]summary[/]" if doc.summary else "[dim]no summary[/]",
        ]
        if doc.insights:
            badges.append("[magenta]insights[/]")
        table.add_row(
            doc.id[:8],
            escape(doc.name),
            format_size(doc.size),
            str(doc.page_count),
            doc.upload_date[:10],
            " ".join(badges),
        )

    console.print(table)
    console.print(f"[dim]{len(docs)} papers[/]")


@library_app.command("show")
def library_show_cmd(doc: _DocOption, db: _DbOption = None) -> None:
    """Show the stored summary and insights of a paper."""
    cfg = load_cfg(db)
    with open_store(cfg.storage.path) as store:
        target = resolve_document(store, doc)

    console.print(f"[bold]{escape(target.name)}[/]  [dim]{target.id}[/]")
    console.print(
        f"  {target.page_count} pages  |  {format_size(target.size)}  |  "
        f"uploaded {target.upload_date}"
    )
    if target.summary is None and target.insights is None:
        console.print(
            "\n[dim]No artifacts yet.[/]\n"
            f"  Run:  paperlens summarize --doc {target.id[:8]}\n"
            f"        paperlens insights --doc {target.id[:8]}"
        )
        return
    if target.summary is not None:
        console.print(summary_panel(target.name, target.summary))
    if target.insights is not None:
        console.print(insights_panel(target.name, target.insights))


@library_app.command("remove")
def library_remove_cmd(
    doc: _DocOption,
    db: _DbOption = None,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Skip confirmation prompt."),
    ] = False,
) -> None:
    """Delete a paper together with its summary and insights."""
    cfg = load_cfg(db)
    target = asyncio.run(_remove(cfg, doc, confirm=not yes))
    console.print(f"\n[green]✓[/] Removed: {escape(target.name)}")


async def _remove(cfg: PaperLensConfig, ref: str, *, confirm: bool) -> ResearchDocument:
    async with open_workspace(cfg) as ws:
        target = resolve_document(ws.store, ref)

        console.print(f"\nRemove paper: [bold]{escape(target.name)}[/]")
        console.print(
            f"  Summary: {'yes' if target.summary else 'no'}  |  "
            f"Insights: {'yes' if target.insights else 'no'}"
        )
        if confirm and not typer.confirm("Confirm removal?", default=False):
            console.print("[dim]Cancelled.[/]")
            raise typer.Exit(0)

        ws.delete(target.id)
    return target
