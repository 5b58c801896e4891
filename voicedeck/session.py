"""Speech session composition root.

Responsibilities:
- Build the speech handle, voice catalog and controller from one config.
- Apply a configured preferred voice once the catalog is populated.
- Publish a read-only snapshot of session state to UI shells.

Key types:
- `SpeechSession`: owns one engine for its whole lifetime.
- `SessionSnapshot`: what a UI shell renders.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass

from .config import VoicedeckConfig
from .engine.base import SpeechEngine
from .engine.factory import EngineFactory
from .models.datatypes import ServiceEvent, ServiceState, Voice
from .service.catalog import VoiceCatalog
from .service.controller import SpeechController
from .service.handle import Notifier, SpeechServiceHandle
from .telemetry.logger import SessionLogger


@dataclass(frozen=True, slots=True)
class SessionSnapshot:
    """Point-in-time view of a speech session for UI rendering.

    Attributes:
        ready: Whether speech requests are accepted.
        state: Current handle lifecycle state.
        voices: Catalog voices in picker order.
        selected_voice: Catalog voice currently active, if any.
    """

    ready: bool
    state: ServiceState
    voices: tuple[Voice, ...]
    selected_voice: Voice | None


class SpeechSession:
    """Wire one platform engine to a handle, a catalog and a controller."""

    def __init__(
        self,
        config: VoicedeckConfig,
        engine: SpeechEngine | None = None,
        notifier: Notifier | None = None,
        logger: SessionLogger | None = None,
    ) -> None:
        """Validate config, create the engine if needed and start initialization."""

        config.validate()
        self.config = config
        self._logger = logger or SessionLogger()
        self._settled = threading.Event()
        self.engine = engine or EngineFactory.create_engine(
            config.engine_driver,
            rate=config.speech_rate,
            volume=config.volume,
            logger=self._logger,
        )
        self.handle = SpeechServiceHandle(
            self.engine,
            default_language=config.effective_default_language,
            notifier=notifier,
            logger=self._logger,
        )
        self.catalog = VoiceCatalog(self.handle, config.target_language, logger=self._logger)
        self.controller = SpeechController(self.handle, self.catalog, logger=self._logger)
        self.catalog.subscribe(self._on_catalog_event)
        self.handle.subscribe(self._on_service_event)

    def snapshot(self) -> SessionSnapshot:
        """Return the state a UI shell should currently display."""

        return SessionSnapshot(
            ready=self.handle.is_ready,
            state=self.handle.state,
            voices=self.catalog.voices(),
            selected_voice=self.controller.selected_voice,
        )

    def speak(self, text: str) -> bool:
        """Speak `text`, replacing any utterance in progress."""

        return self.controller.speak(text)

    def select_voice(self, voice: Voice) -> bool:
        """Make a catalog voice active."""

        return self.controller.select_voice(voice)

    def wait_until_settled(self, timeout: float | None = None) -> bool:
        """Block until the engine is ready, failed or released.

        For shells that can afford to block; returns `False` on timeout.
        """

        return self._settled.wait(
            self.config.ready_timeout_seconds if timeout is None else timeout
        )

    def wait_until_idle(self, timeout: float | None = None) -> bool:
        """Block until the current utterance finishes; returns `False` on timeout."""

        return self.handle.wait_until_idle(
            self.config.ready_timeout_seconds if timeout is None else timeout
        )

    def close(self) -> None:
        """Stop speech and release the engine."""

        self.handle.teardown()

    def __enter__(self) -> SpeechSession:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _on_catalog_event(self, event: ServiceEvent, catalog: VoiceCatalog) -> None:
        preferred = self.config.preferred_voice
        if event is not ServiceEvent.CATALOG_UPDATED or preferred is None:
            return
        voice = catalog.find(preferred)
        if voice is None:
            self._logger.log_precondition_violation("preferred_voice", "voice_not_in_catalog")
            return
        self.controller.select_voice(voice)

    def _on_service_event(self, event: ServiceEvent, handle: SpeechServiceHandle) -> None:
        if event in (ServiceEvent.READY, ServiceEvent.FAILED, ServiceEvent.SHUTDOWN):
            self._settled.set()
