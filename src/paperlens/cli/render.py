"""Rich renderables for artifacts and search answers."""

from __future__ import annotations

from rich.console import Group
from rich.markup import escape
from rich.panel import Panel
from rich.text import Text

from paperlens.backend.protocol import SearchAnswer
from paperlens.store.models import Insights, Summary


def _bullets(items: tuple[str, ...], marker: str = "•") -> Text:
    if not items:
        return Text("(none)", style="dim")
    return Text("\n".join(f"{marker} {item}" for item in items))


def _numbered(items: tuple[str, ...]) -> Text:
    if not items:
        return Text("(none)", style="dim")
    return Text("\n".join(f"{i}. {item}" for i, item in enumerate(items, 1)))


def summary_panel(name: str, summary: Summary) -> Panel:
    body = Group(
        Text("Abstract", style="bold cyan"),
        Text(summary.abstract or "(none)"),
        Text(""),
        Text("Key Findings", style="bold green"),
        _bullets(summary.findings, "✓"),
        Text(""),
        Text("Methodology", style="bold yellow"),
        Text(summary.methodology or "(none)"),
        Text(""),
        Text("Limitations", style="bold red"),
        Text(summary.limitations or "(none)"),
    )
    return Panel(body, title=f"[bold]Summary[/] [dim]{escape(name)}[/]", expand=False)


def insights_panel(name: str, insights: Insights) -> Panel:
    body = Group(
        Text("Objectives", style="bold cyan"),
        _numbered(insights.objectives),
        Text(""),
        Text("Key Concepts", style="bold magenta"),
        Text(", ".join(insights.key_concepts) or "(none)"),
        Text(""),
        Text("Results & Findings", style="bold yellow"),
        _bullets(tuple(f"“{r}”" for r in insights.results)),
        Text(""),
        Text("Conclusions", style="bold green"),
        _bullets(insights.conclusions),
    )
    return Panel(body, title=f"[bold]Insights[/] [dim]{escape(name)}[/]", expand=False)


def search_panel(query: str, answer: SearchAnswer) -> Panel:
    parts: list[Text] = [Text(answer.answer or "No answer returned.")]
    if answer.results:
        parts.append(Text(""))
        parts.append(Text("Sources", style="bold"))
        for res in answer.results:
            parts.append(Text(f"{res.doc_name} · p.{res.page}", style="cyan"))
            parts.append(Text(res.text, style="dim"))
    return Panel(Group(*parts), title=f"[bold]AI Answer[/] [dim]{escape(query)}[/]", expand=False)
