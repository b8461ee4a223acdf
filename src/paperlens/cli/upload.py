"""paperlens upload — add a PDF paper to the library.

The file is checked (PDF MIME type, size ceiling) before any extraction
runs. If extraction fails, nothing is stored.

Usage:
  paperlens upload paper.pdf
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape
from rich.progress import Progress, SpinnerColumn, TextColumn

from paperlens.cli.common import console, format_size, load_cfg
from paperlens.cli.errors import err_upload
from paperlens.config import PaperLensConfig
from paperlens.exceptions import ExtractionError, UploadRejectedError
from paperlens.store.models import ResearchDocument
from paperlens.workspace.service import open_workspace
from paperlens.workspace.upload import UploadFile


def upload_cmd(
    path: Annotated[
        Path,
        typer.Argument(help="PDF file to upload.", exists=True, dir_okay=False, readable=True),
    ],
    db: Annotated[
        Path | None,
        typer.Option("--db", help="Path to the PaperLens database."),
    ] = None,
) -> None:
    """Upload a PDF paper and extract its text."""
    cfg = load_cfg(db)
    doc = asyncio.run(_upload(cfg, UploadFile.from_path(path)))

    console.print(f"[green]✓[/] Uploaded [bold]{escape(doc.name)}[/]")
    console.print(
        f"  id: {doc.id}  |  {doc.page_count} pages  |  {format_size(doc.size)}"
    )


async def _upload(cfg: PaperLensConfig, file: UploadFile) -> ResearchDocument:
    async with open_workspace(cfg) as ws:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            transient=True,
            console=console,
        ) as prog:
            prog.add_task(f"Extracting text from {escape(file.name)}…", total=None)
            try:
                return ws.upload(file)
            except (UploadRejectedError, ExtractionError) as exc:
                prog.stop()
                console.print(err_upload(str(exc)))
                raise typer.Exit(1) from exc
