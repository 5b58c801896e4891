"""The two mutating operations exposed to the UI shell."""

from __future__ import annotations

from ..models.datatypes import FlushMode, Voice
from ..telemetry.logger import SessionLogger
from .catalog import VoiceCatalog
from .handle import SpeechServiceHandle


class SpeechController:
    """Relay `speak` and `select_voice` requests into a speech handle."""

    def __init__(
        self,
        handle: SpeechServiceHandle,
        catalog: VoiceCatalog,
        logger: SessionLogger | None = None,
    ) -> None:
        self._handle = handle
        self._catalog = catalog
        self._logger = logger or SessionLogger()

    @property
    def selected_voice(self) -> Voice | None:
        """Return the catalog voice matching the engine's active voice, if any."""

        active = self._handle.active_voice
        if active is None:
            return None
        return self._catalog.find(active.identifier)

    def speak(self, text: str) -> bool:
        """Replace whatever is playing with `text`; blank text is ignored.

        Returns immediately. `False` means nothing was sent to the engine.
        """

        if not text or not text.strip():
            self._logger.log_precondition_violation("speak", "empty_text")
            return False
        return self._handle.speak(text, FlushMode.FLUSH)

    def select_voice(self, voice: Voice) -> bool:
        """Make a catalog voice active for subsequent `speak` calls."""

        if voice not in self._catalog:
            self._logger.log_precondition_violation("select_voice", "voice_not_in_catalog")
            return False
        return self._handle.set_voice(voice)
