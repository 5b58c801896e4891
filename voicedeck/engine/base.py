"""Platform speech-engine interface.

Responsibilities:
- Define the narrow operation set the speech service needs from a platform engine.
- Keep service logic independent from any concrete synthesis backend.
"""

from __future__ import annotations

from typing import Callable, Protocol, Sequence

from ..models.datatypes import FlushMode, InitStatus, Voice

InitCallback = Callable[[InitStatus], None]


class SpeechEngine(Protocol):
    """Protocol for platform speech-engine implementations.

    `initialize` must return without waiting for the engine to start and must
    invoke `callback` exactly once, from any thread, with the outcome.
    """

    def initialize(self, callback: InitCallback) -> None:
        """Begin asynchronous engine start-up."""

    def shutdown(self) -> None:
        """Release the engine and any worker it owns."""

    def stop(self) -> None:
        """Interrupt the current utterance and drop pending ones."""

    def set_language(self, tag: str) -> None:
        """Switch the engine to a voice speaking the given language tag."""

    def set_voice(self, voice: Voice) -> None:
        """Make `voice` the active voice for subsequent utterances."""

    def speak(self, text: str, flush_mode: FlushMode) -> None:
        """Request synthesis and playback of one utterance."""

    def list_voices(self) -> Sequence[Voice]:
        """Return every voice the platform reports, in platform order."""

    def current_voice(self) -> Voice | None:
        """Return the voice the platform currently has active."""

    def wait_until_idle(self, timeout: float) -> bool:
        """Block until no utterance is playing; return `False` on timeout."""
