"""Artifact attachment rules.

- The target document id is captured when a request is dispatched; the
  result is attached to that id, whatever is selected when it arrives.
- Attaching is a whole-document replace built from the document as it is
  *at completion time*, so a summary and an insights request running side by
  side both survive.
- If the document was deleted meanwhile, the result is dropped.
- An artifact that is already present is returned without a backend call.
- While a request for (document, kind) is in flight, further requests for
  the same pair await that request instead of dispatching another.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import replace
from typing import Any

from paperlens.backend.protocol import ArtifactProtocol
from paperlens.exceptions import DocumentNotFoundError
from paperlens.store.document_store import DocumentStore
from paperlens.store.models import Insights, ResearchDocument, Summary
from paperlens.workspace.envelope import OperationKind

logger = logging.getLogger(__name__)

# OperationKind → ResearchDocument field holding that artifact
_FIELDS: dict[OperationKind, str] = {
    OperationKind.SUMMARY: "summary",
    OperationKind.INSIGHTS: "insights",
}


class ArtifactAttacher:
    """Generates summary/insights artifacts and attaches them to documents."""

    def __init__(self, store: DocumentStore, protocol: ArtifactProtocol) -> None:
        self._store = store
        self._protocol = protocol
        self._inflight: dict[tuple[OperationKind, str], asyncio.Task[Any]] = {}

    async def generate_summary(self, doc_id: str) -> Summary:
        return await self._generate(OperationKind.SUMMARY, doc_id, self._protocol.summarize)

    async def extract_insights(self, doc_id: str) -> Insights:
        return await self._generate(
            OperationKind.INSIGHTS, doc_id, self._protocol.extract_insights
        )

    def in_flight(self, kind: OperationKind, doc_id: str) -> bool:
        return (kind, doc_id) in self._inflight

    async def _generate(
        self,
        kind: OperationKind,
        doc_id: str,
        request: Callable[[str], Awaitable[Any]],
    ) -> Any:
        doc = self._store.get(doc_id)
        if doc is None:
            raise DocumentNotFoundError(f"Document {doc_id} no longer exists")

        existing = getattr(doc, _FIELDS[kind])
        if existing is not None:
            return existing

        key = (kind, doc_id)
        task = self._inflight.get(key)
        if task is None:
            task = asyncio.create_task(self._request_and_attach(kind, doc_id, doc, request))
            self._inflight[key] = task
            task.add_done_callback(lambda _t: self._inflight.pop(key, None))
        else:
            logger.debug("Joining in-flight %s request for %s", kind.value, doc_id)
        return await task

    async def _request_and_attach(
        self,
        kind: OperationKind,
        doc_id: str,
        doc: ResearchDocument,
        request: Callable[[str], Awaitable[Any]],
    ) -> Any:
        artifact = await request(doc.content)

        current = self._store.get(doc_id)
        if current is None:
            logger.info("Dropping %s for deleted document %s", kind.value, doc_id)
            return artifact

        self._store.update(replace(current, **{_FIELDS[kind]: artifact}))
        return artifact
