"""paperlens status — configuration and library overview."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape
from rich.panel import Panel

from paperlens.cli.common import console, format_size, load_cfg
from paperlens.config import PaperLensConfig
from paperlens.store.models import ResearchDocument
from paperlens.workspace.service import open_store


def status_cmd(
    db: Annotated[
        Path | None,
        typer.Option("--db", help="Path to the PaperLens database."),
    ] = None,
) -> None:
    """Show backend settings and how many papers have each artifact."""
    cfg = load_cfg(db)
    _show_backend_panel(cfg)

    db_path = Path(cfg.storage.path)
    if not db_path.exists():
        console.print(
            Panel(
                "[yellow]No library yet.[/]\n"
                "  Run:  paperlens upload path/to/paper.pdf",
                title="[bold]Library[/]",
                expand=False,
            )
        )
        return

    with open_store(db_path) as store:
        docs = store.documents()
    _show_library_panel(db_path, docs)


def _show_backend_panel(cfg: PaperLensConfig) -> None:
    ep = cfg.backend.endpoints
    lines = [
        f"Backend:   [bold]{escape(cfg.backend.base_url)}[/]  [dim](timeout {cfg.backend.timeout:g}s)[/]",
        "Endpoints: " + escape(f"{ep.summarize}  {ep.insights}  {ep.search}  {ep.chat}"),
        f"Upload:    max {format_size(cfg.upload.max_bytes)}",
        f"Chat:      {cfg.chat.language}, first {cfg.chat.context_chars:,} chars of context",
    ]
    console.print(Panel("\n".join(lines), title="[bold]Configuration[/]", expand=False))


def _show_library_panel(db_path: Path, docs: list[ResearchDocument]) -> None:
    summaries = sum(1 for d in docs if d.summary is not None)
    insights = sum(1 for d in docs if d.insights is not None)
    size_mb = db_path.stat().st_size / (1024 * 1024)
    lines = [
        f"Database:  {escape(str(db_path))} ({size_mb:.1f} MB)",
        f"Papers: [bold]{len(docs)}[/]  |  "
        f"Summaries: [bold]{summaries}[/]  |  "
        f"Insights: [bold]{insights}[/]",
    ]
    if docs:
        lines.append(f"Last upload: [dim]{escape(docs[-1].name)} ({docs[-1].upload_date[:10]})[/]")
    else:
        lines.append("[dim]No papers uploaded yet.[/]")
    console.print(Panel("\n".join(lines), title="[bold]Library[/]", expand=False))
