"""Helpers shared by the PaperLens commands: config, --doc lookup, formatting."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console

from paperlens.cli.errors import err_ambiguous_document, err_config, err_document_not_found
from paperlens.config import ConfigError, PaperLensConfig, load_config
from paperlens.store.document_store import DocumentStore
from paperlens.store.models import ResearchDocument

console = Console()


def load_cfg(db: Path | None = None) -> PaperLensConfig:
    """Load config, apply the --db flag, and exit(1) with a message on ConfigError."""
    try:
        cfg = load_config()
    except ConfigError as exc:
        console.print(err_config(str(exc)))
        raise typer.Exit(1) from exc
    if db is not None:
        cfg.storage.path = str(db)
    return cfg


def match_documents(store: DocumentStore, ref: str) -> list[ResearchDocument]:
    """Documents *ref* names: an exact id, else exact file name, else id prefix."""
    docs = store.documents()
    for doc in docs:
        if doc.id == ref:
            return [doc]
    matches = [d for d in docs if d.name == ref]
    if not matches:
        matches = [d for d in docs if d.id.startswith(ref)]
    return matches


def no_single_match(ref: str, matches: list[ResearchDocument]) -> str:
    """Error message for a ref that matched nothing or more than one document."""
    if not matches:
        return err_document_not_found(ref)
    return err_ambiguous_document(ref, [f"{d.id[:8]}  {d.name}" for d in matches])


def resolve_document(store: DocumentStore, ref: str) -> ResearchDocument:
    """Find the one document *ref* names; exit with status 1 otherwise."""
    matches = match_documents(store, ref)
    if len(matches) == 1:
        return matches[0]
    console.print(no_single_match(ref, matches))
    raise typer.Exit(1)


def format_size(size: int) -> str:
    """Human-readable byte count: 0 B, 512 B, 1.5 KB, 9.2 MB."""
    if size <= 0:
        return "0 B"
    value = float(size)
    for unit in ("B", "KB", "MB"):
        if value < 1024:
            return f"{round(value, 2):g} {unit}"
        value /= 1024
    return f"{round(value, 2):g} GB"
