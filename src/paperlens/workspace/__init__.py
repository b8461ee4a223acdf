"""Document workspace — selection, artifacts, chat, upload, and the envelope."""

from paperlens.workspace.envelope import OperationKind, OperationState, OperationStatus
from paperlens.workspace.service import Workspace, open_store, open_workspace
from paperlens.workspace.session import AppView, Session

__all__ = [
    "AppView",
    "OperationKind",
    "OperationState",
    "OperationStatus",
    "Session",
    "Workspace",
    "open_store",
    "open_workspace",
]
