"""Tests for artifact attachment: captured ids, dedup, and deletion races."""

from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from fakes import make_doc
from paperlens.backend.client import BackendClient
from paperlens.backend.protocol import ArtifactProtocol
from paperlens.exceptions import BackendError, DocumentNotFoundError
from paperlens.store.models import Insights, Summary
from paperlens.workspace.artifacts import ArtifactAttacher
from paperlens.workspace.envelope import OperationKind
from paperlens.workspace.session import Session

SUMMARY_BODY = {"abstract": "A", "findings": ["f"], "methodology": "M", "limitations": "L"}
INSIGHTS_BODY = {"objectives": ["o"], "keyConcepts": ["k"], "results": ["r"], "conclusions": ["c"]}


class GatedBackend:
    """Backend whose responses are held until ``release`` is set."""

    def __init__(self) -> None:
        self.release = asyncio.Event()
        self.calls: list[tuple[str, dict]] = []

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.calls.append((request.url.path, json.loads(request.content)))
        await self.release.wait()
        if request.url.path == "/api/insights/":
            return httpx.Response(200, json=INSIGHTS_BODY)
        return httpx.Response(200, json=SUMMARY_BODY)

    def protocol(self) -> ArtifactProtocol:
        client = BackendClient("http://backend.test", transport=httpx.MockTransport(self.handler))
        return ArtifactProtocol(client)


def test_generate_summary_attaches_to_document(store, protocol, backend):
    backend.reply("/api/summarize/", json_body=SUMMARY_BODY)
    store.add(make_doc(id="a", content="paper A"))
    attacher = ArtifactAttacher(store, protocol)

    summary = asyncio.run(attacher.generate_summary("a"))

    assert summary == Summary("A", ("f",), "M", "L")
    assert store.get("a").summary == summary
    assert backend.bodies("/api/summarize/") == [{"content": "paper A"}]


def test_existing_artifact_skips_backend(store, protocol, backend):
    existing = Insights(objectives=("cached",))
    store.add(make_doc(id="a", insights=existing))
    attacher = ArtifactAttacher(store, protocol)

    assert asyncio.run(attacher.extract_insights("a")) is existing
    assert backend.requests == []


def test_unknown_document_raises(store, protocol):
    attacher = ArtifactAttacher(store, protocol)
    with pytest.raises(DocumentNotFoundError):
        asyncio.run(attacher.generate_summary("ghost"))


def test_failure_leaves_document_unchanged(store, protocol, backend):
    backend.reply("/api/insights/", status=500, json_body={"error": "rate limited"})
    store.add(make_doc(id="a"))
    attacher = ArtifactAttacher(store, protocol)

    with pytest.raises(BackendError, match="rate limited"):
        asyncio.run(attacher.extract_insights("a"))
    assert store.get("a").insights is None


def test_result_attaches_to_captured_id_after_selection_change(store):
    gated = GatedBackend()
    store.add(make_doc(id="a", content="paper A"))
    store.add(make_doc(id="b", content="paper B"))
    session = Session(store)
    session.select("a")
    attacher = ArtifactAttacher(store, gated.protocol())

    async def go():
        task = asyncio.create_task(attacher.generate_summary(session.selected_document_id))
        await asyncio.sleep(0)
        session.select("b")
        gated.release.set()
        await task

    asyncio.run(go())

    assert store.get("a").summary is not None
    assert store.get("b").summary is None
    assert gated.calls == [("/api/summarize/", {"content": "paper A"})]


def test_result_for_deleted_document_is_dropped(store):
    gated = GatedBackend()
    store.add(make_doc(id="a"))
    store.add(make_doc(id="b"))
    attacher = ArtifactAttacher(store, gated.protocol())

    async def go():
        task = asyncio.create_task(attacher.generate_summary("a"))
        await asyncio.sleep(0)
        store.remove("a")
        gated.release.set()
        return await task

    asyncio.run(go())

    assert store.get("a") is None
    assert [d.id for d in store] == ["b"]
    assert store.get("b").summary is None


def test_concurrent_summary_and_insights_both_survive(store):
    gated = GatedBackend()
    store.add(make_doc(id="a"))
    attacher = ArtifactAttacher(store, gated.protocol())

    async def go():
        tasks = [
            asyncio.create_task(attacher.generate_summary("a")),
            asyncio.create_task(attacher.extract_insights("a")),
        ]
        await asyncio.sleep(0)
        gated.release.set()
        await asyncio.gather(*tasks)

    asyncio.run(go())

    doc = store.get("a")
    assert doc.summary is not None
    assert doc.insights is not None


def test_duplicate_requests_share_one_backend_call(store):
    gated = GatedBackend()
    store.add(make_doc(id="a"))
    attacher = ArtifactAttacher(store, gated.protocol())

    async def go():
        first = asyncio.create_task(attacher.generate_summary("a"))
        second = asyncio.create_task(attacher.generate_summary("a"))
        await asyncio.sleep(0)
        assert attacher.in_flight(OperationKind.SUMMARY, "a")
        gated.release.set()
        return await asyncio.gather(first, second)

    first, second = asyncio.run(go())

    assert first == second
    assert len(gated.calls) == 1
    assert not attacher.in_flight(OperationKind.SUMMARY, "a")
