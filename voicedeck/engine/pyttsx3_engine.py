"""Offline platform speech engine backed by `pyttsx3`.

Responsibilities:
- Start the pyttsx3 driver (SAPI5, NSSpeechSynthesizer or eSpeak) asynchronously.
- Confine every pyttsx3 call to one worker thread that owns the driver loop.
- Implement flush-queue and append-queue utterance semantics.

The worker drives pyttsx3 with an external loop (`startLoop(False)` and
`iterate()`), so commands posted from other threads run between loop ticks
in submission order. Calls made from the worker thread itself, such as the
initialization callback, run inline.
"""

from __future__ import annotations

import queue
import threading
from concurrent.futures import Future
from dataclasses import dataclass
from typing import Any, Callable, TypeVar

import pyttsx3

from ..models.datatypes import FlushMode, InitStatus, Voice
from ..parsing import normalize_language_code
from ..telemetry.logger import SessionLogger
from .base import InitCallback
from .voices import voice_from_pyttsx3

T = TypeVar("T")

_CONTROL = "control"
_UTTERANCE = "utterance"


@dataclass(frozen=True, slots=True)
class _Command:
    """One unit of work for the engine worker."""

    kind: str
    generation: int
    action: Callable[[Any], None]


class Pyttsx3SpeechEngine:
    """Speech engine adapter that owns a pyttsx3 driver on a daemon worker thread."""

    def __init__(
        self,
        driver_name: str | None = None,
        rate: int = 175,
        volume: float = 1.0,
        poll_interval_seconds: float = 0.05,
        call_timeout_seconds: float = 5.0,
        join_timeout_seconds: float = 2.0,
        logger: SessionLogger | None = None,
    ) -> None:
        """Initialize driver settings; the driver itself starts in `initialize`."""

        self.driver_name = driver_name
        self.rate = rate
        self.volume = max(0.0, min(1.0, volume))
        self._poll_interval = poll_interval_seconds
        self._call_timeout = call_timeout_seconds
        self._join_timeout = join_timeout_seconds
        self._logger = logger or SessionLogger()
        self._commands: queue.Queue[_Command] = queue.Queue()
        self._lock = threading.Lock()
        self._generation = 0
        self._closing = threading.Event()
        self._idle = threading.Event()
        self._idle.set()
        self._thread: threading.Thread | None = None
        self._engine: Any = None

    def initialize(self, callback: InitCallback) -> None:
        """Start the worker thread, which reports the outcome through `callback`."""

        with self._lock:
            if self._thread is not None:
                raise RuntimeError("Pyttsx3SpeechEngine.initialize() may only be called once.")
            self._thread = threading.Thread(
                target=self._run,
                args=(callback,),
                name="voicedeck-pyttsx3",
                daemon=True,
            )
        self._thread.start()

    def shutdown(self) -> None:
        """Stop playback, end the driver loop and join the worker."""

        with self._lock:
            if self._closing.is_set():
                return
            self._closing.set()
            self._generation += 1
            thread = self._thread
        self._commands.put(_Command(_CONTROL, self._generation, lambda engine: None))
        if thread is not None and thread is not threading.current_thread():
            thread.join(self._join_timeout)
        self._idle.set()

    def stop(self) -> None:
        """Interrupt the current utterance and drop utterances not yet started."""

        generation = self._next_generation()
        self._post(_Command(_CONTROL, generation, lambda engine: engine.stop()))

    def set_language(self, tag: str) -> None:
        """Select the first platform voice for `tag` unless the current one matches."""

        self._post(
            _Command(_CONTROL, self._generation, lambda engine: self._apply_language(engine, tag))
        )

    def set_voice(self, voice: Voice) -> None:
        """Make `voice` active for subsequent utterances."""

        identifier = voice.identifier
        self._post(
            _Command(
                _CONTROL,
                self._generation,
                lambda engine: engine.setProperty("voice", identifier),
            )
        )

    def speak(self, text: str, flush_mode: FlushMode) -> None:
        """Queue one utterance, discarding earlier ones when `flush_mode` is `FLUSH`."""

        if flush_mode is FlushMode.FLUSH:
            generation = self._next_generation()

            def action(engine: Any) -> None:
                engine.stop()
                engine.say(text)

        else:
            generation = self._generation

            def action(engine: Any) -> None:
                engine.say(text)

        self._post(_Command(_UTTERANCE, generation, action))
        if not self._closing.is_set():
            self._idle.clear()

    def list_voices(self) -> list[Voice]:
        """Return all platform voices in driver order."""

        return self._call(self._platform_voices, default=[])

    def current_voice(self) -> Voice | None:
        """Return the voice the driver currently has active."""

        return self._call(self._active_voice, default=None)

    def wait_until_idle(self, timeout: float) -> bool:
        """Block until the driver reports no utterance in progress."""

        return self._idle.wait(timeout)

    def _next_generation(self) -> int:
        """Advance the flush generation so older queued utterances are skipped."""

        with self._lock:
            self._generation += 1
            return self._generation

    def _post(self, command: _Command) -> None:
        """Queue a command for the worker, or run it inline on the worker thread."""

        if self._closing.is_set():
            return
        if threading.current_thread() is self._thread and self._engine is not None:
            self._execute(self._engine, command)
            return
        self._commands.put(command)

    def _call(self, query: Callable[[Any], T], default: T) -> T:
        """Run a read-only query on the worker thread and wait for its result."""

        if self._engine is None or self._closing.is_set():
            return default
        if threading.current_thread() is self._thread:
            return query(self._engine)

        future: Future[T] = Future()

        def action(engine: Any) -> None:
            try:
                future.set_result(query(engine))
            except Exception as exc:
                future.set_exception(exc)

        self._commands.put(_Command(_CONTROL, self._generation, action))
        return future.result(timeout=self._call_timeout)

    def _run(self, callback: InitCallback) -> None:
        """Worker body: start the driver, report status, then serve commands."""

        try:
            engine = pyttsx3.init(self.driver_name) if self.driver_name else pyttsx3.init()
            engine.setProperty("rate", self.rate)
            engine.setProperty("volume", self.volume)
            engine.startLoop(False)
        except Exception as exc:
            self._logger.log_engine_failure("initialize", type(exc).__name__)
            callback(InitStatus.ERROR)
            return

        self._engine = engine
        callback(InitStatus.SUCCESS)
        try:
            self._serve(engine)
        finally:
            self._release(engine)

    def _serve(self, engine: Any) -> None:
        """Execute posted commands between driver loop ticks until shutdown."""

        while not self._closing.is_set():
            try:
                command: _Command | None = self._commands.get(timeout=self._poll_interval)
            except queue.Empty:
                command = None
            while command is not None and not self._closing.is_set():
                self._execute(engine, command)
                try:
                    command = self._commands.get_nowait()
                except queue.Empty:
                    command = None
            engine.iterate()
            if self._commands.empty() and not engine.isBusy():
                self._idle.set()

    def _execute(self, engine: Any, command: _Command) -> None:
        """Run one command, skipping utterances superseded by a later flush."""

        if command.kind == _UTTERANCE and command.generation < self._generation:
            return
        try:
            command.action(engine)
        except Exception as exc:
            self._logger.log_engine_failure(command.kind, type(exc).__name__)

    def _release(self, engine: Any) -> None:
        """Stop playback and leave the external driver loop."""

        try:
            engine.stop()
            engine.endLoop()
        except Exception as exc:
            self._logger.log_engine_failure("shutdown", type(exc).__name__)
        self._engine = None
        self._idle.set()

    def _platform_voices(self, engine: Any) -> list[Voice]:
        """Read and convert the driver voice list."""

        return [voice_from_pyttsx3(raw) for raw in engine.getProperty("voices") or []]

    def _active_voice(self, engine: Any) -> Voice | None:
        """Resolve the driver's current voice id against its voice list."""

        current = engine.getProperty("voice")
        if not current:
            return None
        voices = self._platform_voices(engine)
        for voice in voices:
            if voice.identifier == current:
                return voice
        for voice in voices:
            if voice.label == current:
                return voice
        return None

    def _apply_language(self, engine: Any, tag: str) -> None:
        """Switch to the first voice for `tag`, keeping a current voice that already matches."""

        language = normalize_language_code(tag)
        if language is None:
            return
        current = self._active_voice(engine)
        if current is not None and current.language == language:
            return
        for voice in self._platform_voices(engine):
            if voice.language == language:
                engine.setProperty("voice", voice.identifier)
                return
        self._logger.log_precondition_violation("set_language", f"no_voice_for_{language}")
