"""Artifact request protocol: payloads, prompts, and response validation.

Four operations share one shape: build a payload, POST it, validate the
body, return a typed artifact:

  summarize          {"content"}   → Summary
  extract_insights   {"content"}   → Insights
  search             {"query"}     → SearchAnswer
  chat               {"messages"}  → answer text

Validation is lenient about *missing* fields (they become "" or []) and
strict about *mistyped* ones: a field that is present with the wrong type
raises ResponseFormatError instead of yielding a half-filled artifact.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from paperlens.backend.client import BackendClient
from paperlens.config import EndpointsCfg
from paperlens.exceptions import ResponseFormatError
from paperlens.store.models import Insights, SearchResult, Summary

DEFAULT_CONTEXT_CHARS = 20_000
NO_RESPONSE_TEXT = "No response generated."


class Language(str, Enum):
    """Chat language preference; the value is the tag sent to the backend."""

    ENGLISH = "en-US"
    HINDI = "hi-IN"
    MARATHI = "mr-IN"
    HINGLISH = "hinglish"

    @property
    def label(self) -> str:
        return self.name.capitalize()

    @property
    def speech_locale(self) -> str:
        """Locale for speech I/O; Hinglish is spoken and heard as Hindi."""
        return Language.HINDI.value if self is Language.HINGLISH else self.value

    @classmethod
    def parse(cls, value: str) -> Language:
        """Accept either a tag (``hi-IN``) or a label (``hindi``), case-insensitively."""
        needle = value.strip().lower()
        for lang in cls:
            if needle in (lang.value.lower(), lang.name.lower()):
                return lang
        choices = ", ".join(f"{lang.label} ({lang.value})" for lang in cls)
        raise ValueError(f"Unsupported language '{value}'. Choose one of: {choices}")


@dataclass(frozen=True)
class ChatRequest:
    document_title: str
    document_text: str
    user_message: str
    language: Language = Language.ENGLISH


@dataclass(frozen=True)
class SearchAnswer:
    answer: str
    results: tuple[SearchResult, ...] = field(default_factory=tuple)


# ---------------------------------------------------------------------------
# Prompt construction
# ---------------------------------------------------------------------------

_CHAT_PROMPT = """\
You are an intelligent research assistant.
User Language Preference: {language}
Context Document:
Title: {title}
Content Snippet (first {limit} chars):
{snippet}...
User Question: {question}
Instructions:
1. Answer based ONLY on the provided context if possible.
2. If the user asks in Hindi/Marathi, reply in that language.
3. If 'Hinglish' is selected, reply in a mix of Hindi and English.
4. Be concise and accurate."""


def build_chat_prompt(request: ChatRequest, context_chars: int = DEFAULT_CONTEXT_CHARS) -> str:
    """Render the chat prompt. Only a *context_chars* prefix of the text is sent."""
    return _CHAT_PROMPT.format(
        language=request.language.value,
        title=request.document_title,
        limit=context_chars,
        snippet=request.document_text[:context_chars],
        question=request.user_message,
    )


# ---------------------------------------------------------------------------
# Response validation
# ---------------------------------------------------------------------------


def _str_field(body: dict[str, Any], name: str) -> str:
    value = body.get(name)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ResponseFormatError(
            f"Field '{name}' must be a string, got {type(value).__name__}"
        )
    return value


def _str_list_field(body: dict[str, Any], name: str) -> tuple[str, ...]:
    value = body.get(name)
    if value is None:
        return ()
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ResponseFormatError(f"Field '{name}' must be a list of strings")
    return tuple(value)


def parse_summary(body: dict[str, Any]) -> Summary:
    return Summary(
        abstract=_str_field(body, "abstract"),
        findings=_str_list_field(body, "findings"),
        methodology=_str_field(body, "methodology"),
        limitations=_str_field(body, "limitations"),
    )


def parse_insights(body: dict[str, Any]) -> Insights:
    return Insights(
        objectives=_str_list_field(body, "objectives"),
        key_concepts=_str_list_field(body, "keyConcepts"),
        results=_str_list_field(body, "results"),
        conclusions=_str_list_field(body, "conclusions"),
    )


def parse_search(body: dict[str, Any]) -> SearchAnswer:
    raw_results = body.get("results")
    if raw_results is None:
        raw_results = []
    if not isinstance(raw_results, list):
        raise ResponseFormatError("Field 'results' must be a list")

    results: list[SearchResult] = []
    for item in raw_results:
        if not isinstance(item, dict):
            raise ResponseFormatError("Each search result must be a JSON object")
        page = item.get("page", 0)
        if isinstance(page, bool) or not isinstance(page, int):
            raise ResponseFormatError("Search result 'page' must be an integer")
        results.append(
            SearchResult(
                doc_name=_str_field(item, "docName"),
                page=page,
                text=_str_field(item, "text"),
            )
        )
    return SearchAnswer(answer=_str_field(body, "answer"), results=tuple(results))


def parse_chat(body: dict[str, Any]) -> str:
    return _str_field(body, "response") or NO_RESPONSE_TEXT


# ---------------------------------------------------------------------------
# Operations
# ---------------------------------------------------------------------------


class ArtifactProtocol:
    """The four backend operations, bound to a client and endpoint table.

    Args:
        client: Open BackendClient.
        endpoints: Path per operation (see EndpointsCfg).
        context_chars: Prefix length of document text embedded in chat prompts.
    """

    def __init__(
        self,
        client: BackendClient,
        endpoints: EndpointsCfg | None = None,
        context_chars: int = DEFAULT_CONTEXT_CHARS,
    ) -> None:
        self._client = client
        self._endpoints = endpoints or EndpointsCfg()
        self._context_chars = context_chars

    async def summarize(self, content: str) -> Summary:
        body = await self._client.post_json(self._endpoints.summarize, {"content": content})
        return parse_summary(body)

    async def extract_insights(self, content: str) -> Insights:
        body = await self._client.post_json(self._endpoints.insights, {"content": content})
        return parse_insights(body)

    async def search(self, query: str) -> SearchAnswer:
        body = await self._client.post_json(self._endpoints.search, {"query": query})
        return parse_search(body)

    async def chat(self, request: ChatRequest) -> str:
        prompt = build_chat_prompt(request, self._context_chars)
        body = await self._client.post_json(
            self._endpoints.chat,
            {"messages": [{"role": "user", "content": prompt}]},
        )
        return parse_chat(body)
