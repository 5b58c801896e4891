"""Shared in-memory speech engine fakes for deterministic tests."""

from __future__ import annotations

from typing import Callable

from voicedeck.models.datatypes import FlushMode, InitStatus, Voice


RU_IRINA = Voice(identifier="1", label="Irina", language="ru", region="RU")
EN_DAVID = Voice(identifier="2", label="David", language="en", region="US")
RU_PAVEL = Voice(identifier="3", label="Pavel", language="ru", region="RU")


class FakeSpeechEngine:
    """Record every engine call and report initialization on demand.

    With `init_status=None` the initialization callback is held until
    `complete_initialization` is called, mimicking a slow platform.
    """

    def __init__(
        self,
        voices: list[Voice] | None = None,
        current: Voice | None = None,
        init_status: InitStatus | None = InitStatus.SUCCESS,
    ) -> None:
        """Initialize the fake platform voice list and call log."""

        self.voices = list(voices) if voices is not None else [RU_IRINA, EN_DAVID, RU_PAVEL]
        self.current = current
        self.init_status = init_status
        self.callback: Callable[[InitStatus], None] | None = None
        self.calls: list[tuple[object, ...]] = []

    def initialize(self, callback: Callable[[InitStatus], None]) -> None:
        self.calls.append(("initialize",))
        self.callback = callback
        if self.init_status is not None:
            callback(self.init_status)

    def complete_initialization(self, status: InitStatus = InitStatus.SUCCESS) -> None:
        """Deliver a held initialization callback."""

        assert self.callback is not None
        self.callback(status)

    def shutdown(self) -> None:
        self.calls.append(("shutdown",))

    def stop(self) -> None:
        self.calls.append(("stop",))

    def set_language(self, tag: str) -> None:
        self.calls.append(("set_language", tag))
        if self.current is not None and self.current.language == tag:
            return
        for voice in self.voices:
            if voice.language == tag:
                self.current = voice
                return

    def set_voice(self, voice: Voice) -> None:
        self.calls.append(("set_voice", voice.identifier))
        self.current = voice

    def speak(self, text: str, flush_mode: FlushMode) -> None:
        self.calls.append(("speak", text, flush_mode))

    def list_voices(self) -> list[Voice]:
        self.calls.append(("list_voices",))
        return list(self.voices)

    def current_voice(self) -> Voice | None:
        return self.current

    def wait_until_idle(self, timeout: float) -> bool:
        self.calls.append(("wait_until_idle",))
        return True

    def calls_named(self, name: str) -> list[tuple[object, ...]]:
        """Return recorded calls for one operation name."""

        return [call for call in self.calls if call[0] == name]


class RecordingNotifier:
    """Collect user-visible notifications."""

    def __init__(self) -> None:
        self.messages: list[str] = []

    def __call__(self, message: str) -> None:
        self.messages.append(message)
