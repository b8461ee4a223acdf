"""Optional speech I/O for chat.

Chat depends on the SpeechCapability interface only. Environments without
speech support use NullSpeech: listening is reported as unsupported and
speaking is silently skipped.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from paperlens.exceptions import SpeechUnsupportedError


class SpeechCapability(ABC):
    """Speech-to-text and text-to-speech for one chat session.

    Locales are BCP-47 tags such as ``en-US`` or ``hi-IN``.
    """

    @abstractmethod
    def listen(self, locale: str) -> str:
        """Capture one utterance and return its transcript.

        Raises:
            SpeechUnsupportedError: If recognition is unavailable.
        """

    @abstractmethod
    def speak(self, text: str, locale: str) -> None:
        """Read *text* aloud in a voice matching *locale*, if one exists."""


class NullSpeech(SpeechCapability):
    """Speech capability for environments with no speech support."""

    def listen(self, locale: str) -> str:
        raise SpeechUnsupportedError("Speech recognition is not supported in this environment.")

    def speak(self, text: str, locale: str) -> None:
        return None
