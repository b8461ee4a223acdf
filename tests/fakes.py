"""Test doubles shared across the suite."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

import httpx

from paperlens.store.models import ResearchDocument


def make_doc(
    id: str = "doc-1",
    name: str = "paper.pdf",
    content: str = "Full text of the paper.",
    size: int = 1024,
    page_count: int = 3,
    **kwargs: Any,
) -> ResearchDocument:
    return ResearchDocument(
        id=id,
        name=name,
        size=size,
        upload_date="2026-01-01T00:00:00+00:00",
        page_count=page_count,
        content=content,
        **kwargs,
    )


@dataclass
class FakeBackend:
    """Canned AI backend: one response per path, every request recorded."""

    routes: dict[str, httpx.Response] = field(default_factory=dict)
    requests: list[httpx.Request] = field(default_factory=list)

    def reply(self, path: str, status: int = 200, json_body: Any = None, text: str | None = None) -> None:
        if text is not None:
            self.routes[path] = httpx.Response(status, text=text)
        else:
            self.routes[path] = httpx.Response(status, json=json_body)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        response = self.routes.get(request.url.path)
        if response is None:
            return httpx.Response(404, json={"error": f"no route for {request.url.path}"})
        return httpx.Response(
            response.status_code, content=response.content, headers=response.headers
        )

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def bodies(self, path: str) -> list[dict[str, Any]]:
        return [json.loads(r.content) for r in self.requests if r.url.path == path]
