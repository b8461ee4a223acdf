"""Error & retry envelope shared by all artifact operations.

Each operation, keyed by ``(kind, document id)``, is observable as idle,
in progress, or settled (succeeded with a result / failed with a message).
Errors are caught here, at the operation boundary, and turned into the
message the user sees; nothing propagates further. Retrying means running
the same operation again; there is no automatic retry or backoff.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from paperlens.exceptions import PaperLensError

logger = logging.getLogger(__name__)


class OperationKind(str, Enum):
    SUMMARY = "summary"
    INSIGHTS = "insights"
    SEARCH = "search"
    CHAT = "chat"


class OperationState(str, Enum):
    IDLE = "idle"
    IN_PROGRESS = "in_progress"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class OperationStatus:
    state: OperationState = OperationState.IDLE
    result: Any = None
    error: str | None = None

    @property
    def settled(self) -> bool:
        return self.state in (OperationState.SUCCEEDED, OperationState.FAILED)


IDLE = OperationStatus()

_FAILURE_TEMPLATES: dict[OperationKind, str] = {
    OperationKind.SUMMARY: "AI generation failed: {}",
    OperationKind.INSIGHTS: "Insights extraction failed: {}",
    OperationKind.SEARCH: "Failed to fetch search results: {}",
    OperationKind.CHAT: (
        "Sorry, I encountered an error: {}. Please check your connection and API key."
    ),
}


def describe_failure(kind: OperationKind, exc: BaseException) -> str:
    """Build the user-facing failure message for *kind*."""
    return _FAILURE_TEMPLATES[kind].format(str(exc) or "Unknown error")


OperationKey = tuple[OperationKind, str | None]


class OperationTracker:
    """Holds the latest status of every operation that has been run."""

    def __init__(self) -> None:
        self._statuses: dict[OperationKey, OperationStatus] = {}

    def status(self, kind: OperationKind, doc_id: str | None = None) -> OperationStatus:
        return self._statuses.get((kind, doc_id), IDLE)

    async def run(
        self,
        kind: OperationKind,
        doc_id: str | None,
        operation: Callable[[], Awaitable[Any]],
    ) -> OperationStatus:
        """Await *operation* and record how it settled.

        Only the status for ``(kind, doc_id)`` is touched, so a failure never
        leaks into another document's or another operation's state.
        """
        key = (kind, doc_id)
        self._statuses[key] = OperationStatus(state=OperationState.IN_PROGRESS)
        try:
            result = await operation()
        except PaperLensError as exc:
            status = OperationStatus(state=OperationState.FAILED, error=describe_failure(kind, exc))
            logger.info("%s failed for %s: %s", kind.value, doc_id or "-", exc)
        except Exception as exc:
            status = OperationStatus(state=OperationState.FAILED, error=describe_failure(kind, exc))
            logger.exception("Unexpected error during %s for %s", kind.value, doc_id or "-")
        else:
            status = OperationStatus(state=OperationState.SUCCEEDED, result=result)
        self._statuses[key] = status
        return status
