"""Document store — models and the persisted collection."""

from paperlens.store.document_store import STORAGE_KEY, DocumentStore
from paperlens.store.models import (
    Insights,
    Message,
    ResearchDocument,
    Role,
    SearchResult,
    Summary,
)

__all__ = [
    "STORAGE_KEY",
    "DocumentStore",
    "Insights",
    "Message",
    "ResearchDocument",
    "Role",
    "SearchResult",
    "Summary",
]
