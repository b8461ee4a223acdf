"""Document store — sole owner and mutator of the document collection.

The full collection is serialized as a JSON array under a fixed storage key
after every mutation. Loading never raises: corrupt data is logged and the
store starts empty. Saving is best-effort: failures are logged, not raised.
"""

from __future__ import annotations

import json
import logging
import sqlite3
from collections.abc import Callable, Iterator

from paperlens.db.storage import KeyValueStorage
from paperlens.exceptions import DuplicateDocumentError
from paperlens.store.models import ResearchDocument

logger = logging.getLogger(__name__)

STORAGE_KEY = "research_docs"

RemovalListener = Callable[[str], None]


class DocumentStore:
    """Ordered, id-unique collection of ResearchDocuments.

    Insertion order is display order. Consumers hold document ids, never
    references into the collection; every write is a whole-document replace.
    """

    def __init__(self, storage: KeyValueStorage, key: str = STORAGE_KEY) -> None:
        self._storage = storage
        self._key = key
        self._docs: list[ResearchDocument] = []
        self._removal_listeners: list[RemovalListener] = []

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def load(self) -> None:
        """Replace the in-memory collection with the persisted one."""
        self._docs = []
        try:
            raw = self._storage.get_item(self._key)
        except sqlite3.Error:
            logger.exception("Failed to read stored documents; starting empty")
            return
        if raw is None:
            return

        try:
            data = json.loads(raw)
            if not isinstance(data, list):
                raise ValueError(f"expected a JSON array, got {type(data).__name__}")
            docs = [ResearchDocument.from_dict(item) for item in data]
        except (ValueError, KeyError, TypeError, AttributeError) as exc:
            logger.error("Failed to parse stored documents (%s); starting empty", exc)
            return

        ids = [d.id for d in docs]
        if len(set(ids)) != len(ids):
            logger.error("Stored documents contain duplicate ids; starting empty")
            return

        self._docs = docs
        logger.debug("Loaded %d documents", len(docs))

    def save(self) -> None:
        """Persist the whole collection. Errors are logged and swallowed."""
        payload = json.dumps([d.to_dict() for d in self._docs], ensure_ascii=False)
        try:
            self._storage.set_item(self._key, payload)
        except (sqlite3.Error, OSError):
            logger.exception("Failed to persist %d documents", len(self._docs))

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add(self, doc: ResearchDocument) -> None:
        """Append *doc*.

        Raises:
            DuplicateDocumentError: If a document with the same id exists.
        """
        if self.get(doc.id) is not None:
            raise DuplicateDocumentError(f"Document id already exists: {doc.id}")
        self._docs.append(doc)
        self.save()

    def update(self, doc: ResearchDocument) -> bool:
        """Replace the document with the same id, keeping its position.

        Returns False (and writes nothing) if no document has that id.
        """
        for i, existing in enumerate(self._docs):
            if existing.id == doc.id:
                self._docs[i] = doc
                self.save()
                return True
        return False

    def remove(self, doc_id: str) -> bool:
        """Delete the document with *doc_id* and notify removal listeners."""
        remaining = [d for d in self._docs if d.id != doc_id]
        if len(remaining) == len(self._docs):
            return False
        self._docs = remaining
        self.save()
        for listener in list(self._removal_listeners):
            listener(doc_id)
        return True

    def on_remove(self, listener: RemovalListener) -> None:
        """Register *listener* to be called with the id of each removed document."""
        self._removal_listeners.append(listener)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get(self, doc_id: str) -> ResearchDocument | None:
        for doc in self._docs:
            if doc.id == doc_id:
                return doc
        return None

    def documents(self) -> list[ResearchDocument]:
        """Return a snapshot of the collection in upload order."""
        return list(self._docs)

    def __iter__(self) -> Iterator[ResearchDocument]:
        return iter(self.documents())

    def __len__(self) -> int:
        return len(self._docs)
