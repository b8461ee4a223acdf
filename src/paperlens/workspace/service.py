"""Workspace — wires the store, session, backend protocol, and envelope.

The CLI (and any other front end) talks to a Workspace only. All artifact
operations return an OperationStatus; none of them raise.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Iterator
from contextlib import asynccontextmanager, contextmanager
from pathlib import Path

import httpx

from paperlens.backend.client import BackendClient
from paperlens.backend.protocol import ArtifactProtocol, Language
from paperlens.config import PaperLensConfig
from paperlens.db.connection import Database
from paperlens.db.schema import initialize
from paperlens.db.storage import KeyValueStorage
from paperlens.extract.pdf import extract_pdf
from paperlens.store.document_store import DocumentStore
from paperlens.store.models import ResearchDocument
from paperlens.workspace.artifacts import ArtifactAttacher
from paperlens.workspace.chat import ChatSession
from paperlens.workspace.envelope import (
    IDLE,
    OperationKind,
    OperationStatus,
    OperationTracker,
)
from paperlens.workspace.session import AppView, Session
from paperlens.workspace.speech import SpeechCapability
from paperlens.workspace.upload import (
    DEFAULT_MAX_BYTES,
    Extractor,
    UploadFile,
    upload_document,
)


class Workspace:
    """Single entry point for document and artifact operations.

    Args:
        store: Loaded DocumentStore (the Workspace never reloads it).
        protocol: Backend protocol for summary/insights/search/chat.
        max_upload_bytes: Upload size ceiling.
        extractor: PDF text extractor (replaceable in tests).
        speech: Speech capability handed to chat sessions.
    """

    def __init__(
        self,
        store: DocumentStore,
        protocol: ArtifactProtocol,
        *,
        max_upload_bytes: int = DEFAULT_MAX_BYTES,
        extractor: Extractor = extract_pdf,
        speech: SpeechCapability | None = None,
    ) -> None:
        self.store = store
        self.session = Session(store)
        self.tracker = OperationTracker()
        self._protocol = protocol
        self._attacher = ArtifactAttacher(store, protocol)
        self._max_upload_bytes = max_upload_bytes
        self._extractor = extractor
        self._speech = speech

    # ------------------------------------------------------------------
    # Documents
    # ------------------------------------------------------------------

    def upload(self, file: UploadFile) -> ResearchDocument:
        """Add *file* to the store and show the workspace view.

        Raises:
            UploadRejectedError: Wrong type or oversized file.
            ExtractionError: The PDF could not be parsed.
        """
        doc = upload_document(
            self.store, file, max_bytes=self._max_upload_bytes, extractor=self._extractor
        )
        self.session.navigate(AppView.WORKSPACE)
        return doc

    def delete(self, doc_id: str) -> bool:
        """Remove a document; a selection pointing at it is cleared by the session."""
        return self.store.remove(doc_id)

    def open_document(self, doc_id: str) -> None:
        """Select *doc_id* and show its summary, as picking a row in the library does."""
        self.session.select(doc_id)
        self.session.navigate(AppView.SUMMARIZER)

    # ------------------------------------------------------------------
    # Artifacts
    # ------------------------------------------------------------------

    async def generate_summary(self, doc_id: str) -> OperationStatus:
        return await self.tracker.run(
            OperationKind.SUMMARY, doc_id, lambda: self._attacher.generate_summary(doc_id)
        )

    async def extract_insights(self, doc_id: str) -> OperationStatus:
        return await self.tracker.run(
            OperationKind.INSIGHTS, doc_id, lambda: self._attacher.extract_insights(doc_id)
        )

    async def search(self, query: str) -> OperationStatus:
        """Ask the backend about the whole collection. Blank queries stay idle."""
        if not query.strip():
            return IDLE
        return await self.tracker.run(
            OperationKind.SEARCH, None, lambda: self._protocol.search(query)
        )

    def open_chat(self, language: Language = Language.ENGLISH) -> ChatSession:
        return ChatSession(
            self.session, self._protocol, self.tracker, language=language, speech=self._speech
        )


# ---------------------------------------------------------------------------
# Construction from config
# ---------------------------------------------------------------------------


@contextmanager
def open_store(db_path: Path | str) -> Iterator[DocumentStore]:
    """Open the SQLite database at *db_path* and yield a loaded DocumentStore."""
    with Database(db_path) as conn:
        initialize(conn)
        store = DocumentStore(KeyValueStorage(conn))
        store.load()
        yield store


@asynccontextmanager
async def open_workspace(
    cfg: PaperLensConfig,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
    speech: SpeechCapability | None = None,
) -> AsyncIterator[Workspace]:
    """Yield a Workspace backed by the configured store and backend."""
    with open_store(cfg.storage.path) as store:
        async with BackendClient(
            cfg.backend.base_url, cfg.backend.timeout, transport=transport
        ) as client:
            protocol = ArtifactProtocol(
                client, cfg.backend.endpoints, context_chars=cfg.chat.context_chars
            )
            yield Workspace(
                store,
                protocol,
                max_upload_bytes=cfg.upload.max_bytes,
                speech=speech,
            )
