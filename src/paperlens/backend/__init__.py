"""AI backend access — HTTP transport and the artifact request protocol."""

from paperlens.backend.client import BackendClient
from paperlens.backend.protocol import (
    ArtifactProtocol,
    ChatRequest,
    Language,
    SearchAnswer,
    build_chat_prompt,
)

__all__ = [
    "ArtifactProtocol",
    "BackendClient",
    "ChatRequest",
    "Language",
    "SearchAnswer",
    "build_chat_prompt",
]
