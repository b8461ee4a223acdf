"""Domain models for the document store.

All models are frozen: the only way to change a document is to build a new
one with ``dataclasses.replace`` and hand it to ``DocumentStore.update``.
JSON keys are camelCase to match the persisted format.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


@dataclass(frozen=True)
class Summary:
    abstract: str = ""
    findings: tuple[str, ...] = ()
    methodology: str = ""
    limitations: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "abstract": self.abstract,
            "findings": list(self.findings),
            "methodology": self.methodology,
            "limitations": self.limitations,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Summary:
        return cls(
            abstract=str(data.get("abstract", "")),
            findings=tuple(str(f) for f in data.get("findings", [])),
            methodology=str(data.get("methodology", "")),
            limitations=str(data.get("limitations", "")),
        )


@dataclass(frozen=True)
class Insights:
    objectives: tuple[str, ...] = ()
    key_concepts: tuple[str, ...] = ()
    results: tuple[str, ...] = ()
    conclusions: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "objectives": list(self.objectives),
            "keyConcepts": list(self.key_concepts),
            "results": list(self.results),
            "conclusions": list(self.conclusions),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Insights:
        return cls(
            objectives=tuple(str(o) for o in data.get("objectives", [])),
            key_concepts=tuple(str(k) for k in data.get("keyConcepts", [])),
            results=tuple(str(r) for r in data.get("results", [])),
            conclusions=tuple(str(c) for c in data.get("conclusions", [])),
        )


@dataclass(frozen=True)
class ResearchDocument:
    """An uploaded paper plus any AI artifacts attached to it.

    Attributes:
        id: UUID assigned at upload; never reused.
        name: Original file name.
        size: File size in bytes.
        upload_date: ISO-8601 UTC timestamp of the upload.
        page_count: Number of pages reported by the extractor.
        content: Full extracted text. Set once at upload.
        summary: Summary artifact, or None until generated.
        insights: Insights artifact, or None until generated.
    """

    id: str
    name: str
    size: int
    upload_date: str
    page_count: int
    content: str
    summary: Summary | None = None
    insights: Insights | None = None

    @classmethod
    def create(cls, name: str, size: int, content: str, page_count: int) -> ResearchDocument:
        """Build a fresh document with a new id and the current UTC time."""
        return cls(
            id=str(uuid.uuid4()),
            name=name,
            size=size,
            upload_date=datetime.now(timezone.utc).isoformat(),
            page_count=page_count,
            content=content,
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "size": self.size,
            "uploadDate": self.upload_date,
            "pageCount": self.page_count,
            "content": self.content,
        }
        if self.summary is not None:
            data["summary"] = self.summary.to_dict()
        if self.insights is not None:
            data["insights"] = self.insights.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ResearchDocument:
        """Rebuild a document from its persisted form.

        Raises:
            KeyError: If a required metadata field is missing.
            TypeError / ValueError: If a field cannot be coerced.
        """
        summary = data.get("summary")
        insights = data.get("insights")
        return cls(
            id=str(data["id"]),
            name=str(data["name"]),
            size=int(data["size"]),
            upload_date=str(data["uploadDate"]),
            page_count=int(data["pageCount"]),
            content=str(data["content"]),
            summary=Summary.from_dict(summary) if summary is not None else None,
            insights=Insights.from_dict(insights) if insights is not None else None,
        )


@dataclass(frozen=True)
class SearchResult:
    """A source fragment returned alongside a search answer. Never persisted."""

    doc_name: str
    page: int
    text: str


class Role(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class Message:
    """One chat transcript entry; lives only as long as its chat session."""

    role: Role
    text: str
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
