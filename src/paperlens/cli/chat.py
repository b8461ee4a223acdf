"""paperlens chat — ask questions about one paper.

Without --message the command runs an interactive session. Inside it:
  /doc <ref>         pick the paper to talk about (id, id prefix, or name)
  /lang <language>   switch language (english, hindi, marathi, hinglish)
  /listen            speak a question (when speech is available)
  /exit              leave (Ctrl-D also works)

The transcript is not saved.

Usage:
  paperlens chat --doc 3f2a --lang hindi
  paperlens chat --doc paper.pdf -m "What dataset was used?"
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape
from rich.status import Status

from paperlens.backend.protocol import Language
from paperlens.cli.common import (
    console,
    load_cfg,
    match_documents,
    no_single_match,
    resolve_document,
)
from paperlens.cli.errors import err_invalid_language, warn_speech_unsupported
from paperlens.config import PaperLensConfig
from paperlens.exceptions import SpeechUnsupportedError
from paperlens.store.models import Message, Role
from paperlens.workspace.chat import ChatSession
from paperlens.workspace.session import AppView
from paperlens.workspace.service import Workspace, open_workspace

_EXIT_WORDS = {"/exit", "/quit", "exit", "quit"}


def chat_cmd(
    doc: Annotated[
        str | None,
        typer.Option("--doc", "-d", help="Paper id, id prefix, or file name."),
    ] = None,
    lang: Annotated[
        str | None,
        typer.Option("--lang", "-l", help="English, Hindi, Marathi, or Hinglish."),
    ] = None,
    message: Annotated[
        list[str] | None,
        typer.Option("--message", "-m", help="Ask and exit (repeatable)."),
    ] = None,
    db: Annotated[
        Path | None,
        typer.Option("--db", help="Path to the PaperLens database."),
    ] = None,
) -> None:
    """Chat with the AI research assistant about a paper."""
    cfg = load_cfg(db)
    try:
        language = Language.parse(lang or cfg.chat.language)
    except ValueError as exc:
        console.print(err_invalid_language(str(exc)))
        raise typer.Exit(1) from exc

    asyncio.run(_chat(cfg, doc, language, message or []))


async def _chat(
    cfg: PaperLensConfig, ref: str | None, language: Language, questions: list[str]
) -> None:
    async with open_workspace(cfg) as ws:
        if ref is not None:
            ws.session.select(resolve_document(ws.store, ref).id)
        ws.session.navigate(AppView.CHAT)
        chat = ws.open_chat(language)

        selected = ws.session.selected_document()
        title = selected.name if selected else "no paper selected"
        console.print(f"[bold]{AppView.CHAT.heading}[/] [dim]{escape(title)} · {language.label}[/]")

        if questions:
            for question in questions:
                await _ask(chat, question)
            return

        _print_message(chat.messages[0])
        while True:
            try:
                line = await asyncio.to_thread(console.input, "[bold cyan]You:[/] ")
            except EOFError:
                break
            text = line.strip()
            if text.lower() in _EXIT_WORDS:
                break
            if text.startswith("/doc"):
                _select_document(ws, text.removeprefix("/doc").strip())
                continue
            if text.startswith("/lang"):
                _switch_language(chat, text.removeprefix("/lang").strip())
                continue
            if text == "/listen":
                try:
                    text = chat.listen()
                except SpeechUnsupportedError:
                    console.print(warn_speech_unsupported())
                    continue
                console.print(f"[dim]Heard:[/] {escape(text)}")
            await _ask(chat, text)


async def _ask(chat: ChatSession, question: str) -> None:
    with Status("Thinking…", console=console):
        reply = await chat.send(question)
    if reply is not None:
        _print_message(reply)


def _select_document(ws: Workspace, ref: str) -> None:
    if not ref:
        console.print("[yellow]Usage:[/] /doc <id, id prefix, or file name>")
        return
    matches = match_documents(ws.store, ref)
    if len(matches) != 1:
        console.print(no_single_match(ref, matches))
        return
    ws.session.select(matches[0].id)
    console.print(f"[dim]Paper: {escape(matches[0].name)}[/]")


def _switch_language(chat: ChatSession, value: str) -> None:
    try:
        chat.language = Language.parse(value)
    except ValueError as exc:
        console.print(err_invalid_language(str(exc)))
        return
    console.print(f"[dim]Language: {chat.language.label}[/]")


def _print_message(message: Message) -> None:
    who = "[bold green]Assistant[/]" if message.role is Role.ASSISTANT else "[bold cyan]You[/]"
    stamp = message.timestamp.astimezone().strftime("%H:%M")
    console.print(f"{who} [dim]{stamp}[/]")
    console.print(message.text, markup=False, highlight=False)
    console.print()
