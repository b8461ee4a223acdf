"""Session/selection state: which view is showing and which document is selected.

The selection is held by id only and resolved against the store on every
read, so a deleted document reads back as "no selection" rather than a
dangling object.
"""

from __future__ import annotations

from enum import Enum

from paperlens.store.document_store import DocumentStore
from paperlens.store.models import ResearchDocument


class AppView(str, Enum):
    LANDING = "landing"
    WORKSPACE = "workspace"
    DASHBOARD = "dashboard"
    UPLOAD = "upload"
    SUMMARIZER = "summarizer"
    INSIGHTS = "insights"
    SEARCH = "search"
    CHAT = "chat"

    @property
    def heading(self) -> str:
        return _HEADINGS[self]


_HEADINGS: dict[AppView, str] = {
    AppView.LANDING: "",
    AppView.WORKSPACE: "Workspace",
    AppView.DASHBOARD: "My Library",
    AppView.UPLOAD: "Upload Paper",
    AppView.SUMMARIZER: "Summarize",
    AppView.INSIGHTS: "Insights",
    AppView.SEARCH: "Semantic Search",
    AppView.CHAT: "Chat",
}


class Session:
    """Current view plus a weak (by-id) reference to the selected document."""

    def __init__(self, store: DocumentStore) -> None:
        self._store = store
        self.current_view: AppView = AppView.LANDING
        self.selected_document_id: str | None = None
        store.on_remove(self._on_document_removed)

    def navigate(self, view: AppView) -> None:
        self.current_view = view

    def select(self, doc_id: str | None) -> None:
        self.selected_document_id = doc_id

    def clear_selection(self) -> None:
        self.selected_document_id = None

    def selected_document(self) -> ResearchDocument | None:
        """Resolve the selection against the store; stale ids resolve to None."""
        if self.selected_document_id is None:
            return None
        return self._store.get(self.selected_document_id)

    def _on_document_removed(self, doc_id: str) -> None:
        if self.selected_document_id == doc_id:
            self.clear_selection()
