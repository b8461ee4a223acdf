"""Chat about the selected document.

The transcript is ephemeral: it lives as long as the ChatSession and is
never written to the store.
"""

from __future__ import annotations

from paperlens.backend.protocol import ArtifactProtocol, ChatRequest, Language
from paperlens.store.models import Message, Role
from paperlens.workspace.envelope import OperationKind, OperationState, OperationTracker
from paperlens.workspace.session import Session
from paperlens.workspace.speech import NullSpeech, SpeechCapability

GREETING = (
    "Namaste! I am your AI Research Assistant. Select a document above and ask "
    "me anything in English, Hindi, or Marathi."
)
NO_DOCUMENT_REPLY = "Please select a document from the dropdown above to start chatting."


class ChatSession:
    """One conversation: transcript, language preference, and speech I/O.

    Args:
        session: Shared selection state; the selected document is the context.
        protocol: Backend protocol used for the chat call.
        tracker: Envelope recording the chat operation's status per document.
        language: Initial language preference.
        speech: Speech capability; defaults to NullSpeech.
    """

    def __init__(
        self,
        session: Session,
        protocol: ArtifactProtocol,
        tracker: OperationTracker,
        language: Language = Language.ENGLISH,
        speech: SpeechCapability | None = None,
    ) -> None:
        self._session = session
        self._protocol = protocol
        self._tracker = tracker
        self._speech = speech or NullSpeech()
        self.language = language
        self.messages: list[Message] = [Message(role=Role.ASSISTANT, text=GREETING)]

    async def send(self, text: str) -> Message | None:
        """Send *text* about the selected document and return the reply.

        Blank input is ignored (returns None). With no document selected, a
        hint is returned without contacting the backend. Backend failures
        become an assistant message; they never raise.
        """
        if not text.strip():
            return None

        doc = self._session.selected_document()
        if doc is None:
            return self._append(Role.ASSISTANT, NO_DOCUMENT_REPLY)

        self._append(Role.USER, text)
        request = ChatRequest(
            document_title=doc.name,
            document_text=doc.content,
            user_message=text,
            language=self.language,
        )
        status = await self._tracker.run(
            OperationKind.CHAT, doc.id, lambda: self._protocol.chat(request)
        )
        if status.state is OperationState.FAILED:
            return self._append(Role.ASSISTANT, status.error or "")

        reply = self._append(Role.ASSISTANT, status.result)
        self._speech.speak(reply.text, self.language.speech_locale)
        return reply

    def listen(self) -> str:
        """Capture a spoken question in the current language.

        Raises:
            SpeechUnsupportedError: If no speech capability is available.
        """
        return self._speech.listen(self.language.speech_locale)

    def _append(self, role: Role, text: str) -> Message:
        message = Message(role=role, text=text)
        self.messages.append(message)
        return message
