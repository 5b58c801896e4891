"""Language-filtered snapshot of platform voices.

Responsibilities:
- Rebuild the voice list once per `READY` transition of the speech handle.
- Keep only voices for the target language, in platform order.
- Replace the snapshot atomically and publish `CATALOG_UPDATED`.
"""

from __future__ import annotations

import threading
from typing import Callable, Iterable, Iterator

from ..models.datatypes import ServiceEvent, Voice
from ..parsing import normalize_language_code
from ..telemetry.logger import SessionLogger
from .handle import SpeechServiceHandle

CatalogListener = Callable[[ServiceEvent, "VoiceCatalog"], None]


def filter_voices(voices: Iterable[Voice], language: str) -> tuple[Voice, ...]:
    """Return voices whose primary language subtag equals `language`, order preserved."""

    target = normalize_language_code(language)
    return tuple(
        voice for voice in voices if normalize_language_code(voice.language) == target
    )


class VoiceCatalog:
    """Filtered, immutable view of the voices offered by a speech handle."""

    def __init__(
        self,
        handle: SpeechServiceHandle,
        target_language: str,
        logger: SessionLogger | None = None,
    ) -> None:
        """Attach to `handle` so the catalog refreshes when it becomes ready."""

        language = normalize_language_code(target_language)
        if language is None:
            raise ValueError("`target_language` must be a non-empty language tag.")
        self.target_language = language
        self._handle = handle
        self._logger = logger or SessionLogger()
        self._lock = threading.Lock()
        self._voices: tuple[Voice, ...] = ()
        self._refreshed = False
        self._listeners: list[CatalogListener] = []
        self._unsubscribe = handle.subscribe(self._on_service_event)

    def refresh(self) -> None:
        """Pull all platform voices, filter them and swap in the new snapshot."""

        available = self._handle.list_voices()
        matched = filter_voices(available, self.target_language)
        with self._lock:
            self._voices = matched
            self._refreshed = True
            listeners = list(self._listeners)
        self._logger.log_catalog_refresh(self.target_language, len(available), len(matched))
        self._publish(listeners)

    def voices(self) -> tuple[Voice, ...]:
        """Return the current snapshot; empty until the first refresh."""

        with self._lock:
            return self._voices

    def subscribe(self, listener: CatalogListener) -> Callable[[], None]:
        """Register a catalog listener; it fires at once if a refresh already ran."""

        with self._lock:
            self._listeners.append(listener)
            replay = self._refreshed
        if replay:
            self._publish([listener])

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def detach(self) -> None:
        """Stop following the speech handle's lifecycle events."""

        self._unsubscribe()

    def find(self, identifier: str) -> Voice | None:
        """Return the catalog voice with `identifier`, if present."""

        for voice in self.voices():
            if voice.identifier == identifier:
                return voice
        return None

    def index_of(self, voice: Voice | None) -> int | None:
        """Return the 1-based picker position of `voice`, or `None` when absent."""

        if voice is None:
            return None
        for position, candidate in enumerate(self.voices(), start=1):
            if candidate == voice:
                return position
        return None

    def voice_at(self, position: int) -> Voice | None:
        """Return the voice at 1-based picker `position`, or `None` when out of range."""

        snapshot = self.voices()
        if 1 <= position <= len(snapshot):
            return snapshot[position - 1]
        return None

    def __iter__(self) -> Iterator[Voice]:
        return iter(self.voices())

    def __len__(self) -> int:
        return len(self.voices())

    def __contains__(self, voice: object) -> bool:
        return voice in self.voices()

    def _on_service_event(self, event: ServiceEvent, handle: SpeechServiceHandle) -> None:
        if event is ServiceEvent.READY:
            self.refresh()

    def _publish(self, listeners: list[CatalogListener]) -> None:
        """Deliver `CATALOG_UPDATED`, isolating listener failures."""

        for listener in listeners:
            try:
                listener(ServiceEvent.CATALOG_UPDATED, self)
            except Exception as exc:
                self._logger.log_listener_failure("catalog", type(exc).__name__)
