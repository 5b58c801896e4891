"""Lifecycle handle for the platform speech engine.

Responsibilities:
- Model engine start-up and teardown as an explicit state machine.
- Publish lifecycle events to subscribed listeners.
- Serialize every engine call behind one lock so teardown never races a request.

State transitions:
- `UNINITIALIZED -> INITIALIZING` on construction.
- `INITIALIZING -> READY` or `INITIALIZING -> FAILED` from the engine callback.
- `READY -> SHUTTING_DOWN -> SHUTDOWN` on `teardown()`.

Requests made outside `READY` are ignored and logged, never raised.
"""

from __future__ import annotations

import threading
from typing import Callable

from ..engine.base import SpeechEngine
from ..models.datatypes import FlushMode, InitStatus, ServiceEvent, ServiceState, Voice
from ..telemetry.logger import SessionLogger

Notifier = Callable[[str], None]
ServiceListener = Callable[[ServiceEvent, "SpeechServiceHandle"], None]

INIT_SUCCESS_MESSAGE = "Speech engine initialized."
INIT_FAILURE_MESSAGE = "Failed to initialize speech engine."

_REPLAYED_EVENTS = {
    ServiceState.READY: ServiceEvent.READY,
    ServiceState.FAILED: ServiceEvent.FAILED,
    ServiceState.SHUTDOWN: ServiceEvent.SHUTDOWN,
}


class SpeechServiceHandle:
    """Own one platform speech engine from start-up to release."""

    def __init__(
        self,
        engine: SpeechEngine,
        default_language: str,
        notifier: Notifier | None = None,
        logger: SessionLogger | None = None,
    ) -> None:
        """Store collaborators and begin asynchronous engine initialization."""

        self._engine = engine
        self.default_language = default_language
        self._notifier = notifier
        self._logger = logger or SessionLogger()
        self._lock = threading.RLock()
        self._listeners: list[ServiceListener] = []
        self._state = ServiceState.UNINITIALIZED
        self._active_voice: Voice | None = None
        self._teardown_requested = False

        with self._lock:
            self._transition(ServiceState.INITIALIZING)
        self._engine.initialize(self._on_initialized)

    @property
    def state(self) -> ServiceState:
        """Return the current lifecycle state."""

        with self._lock:
            return self._state

    @property
    def is_ready(self) -> bool:
        """Return whether speech requests are currently accepted."""

        return self.state is ServiceState.READY

    @property
    def active_voice(self) -> Voice | None:
        """Return the voice the engine is currently set to, if known."""

        with self._lock:
            return self._active_voice

    def subscribe(self, listener: ServiceListener) -> Callable[[], None]:
        """Register a lifecycle listener and return a callable that removes it.

        A listener subscribing after `READY`, `FAILED` or `SHUTDOWN` already
        happened receives that event immediately.
        """

        with self._lock:
            self._listeners.append(listener)
            replay = _REPLAYED_EVENTS.get(self._state)
        if replay is not None:
            self._publish(replay, [listener])

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def list_voices(self) -> list[Voice]:
        """Return all platform voices, or an empty list before `READY`."""

        with self._lock:
            if self._state is not ServiceState.READY:
                self._logger.log_precondition_violation("list_voices", self._state.value)
                return []
            try:
                return list(self._engine.list_voices())
            except Exception as exc:
                self._logger.log_engine_failure("list_voices", type(exc).__name__)
                return []

    def speak(self, text: str, flush_mode: FlushMode = FlushMode.FLUSH) -> bool:
        """Forward one utterance to the engine; return whether it was accepted."""

        with self._lock:
            if self._state is not ServiceState.READY:
                self._logger.log_precondition_violation("speak", self._state.value)
                return False
            try:
                self._engine.speak(text, flush_mode)
            except Exception as exc:
                self._logger.log_engine_failure("speak", type(exc).__name__)
                return False
            self._logger.log_request("speak", chars=len(text), mode=flush_mode)
            return True

    def set_voice(self, voice: Voice) -> bool:
        """Make `voice` active on the engine; return whether it was applied."""

        with self._lock:
            if self._state is not ServiceState.READY:
                self._logger.log_precondition_violation("set_voice", self._state.value)
                return False
            try:
                self._engine.set_voice(voice)
            except Exception as exc:
                self._logger.log_engine_failure("set_voice", type(exc).__name__)
                return False
            self._active_voice = voice
            self._logger.log_request("set_voice", voice=voice.identifier)
            return True

    def wait_until_idle(self, timeout: float) -> bool:
        """Block the caller until playback ends; the core itself never calls this."""

        if not self.is_ready:
            return True
        return self._engine.wait_until_idle(timeout)

    def teardown(self) -> None:
        """Stop playback and release the engine; repeated calls are no-ops.

        During `INITIALIZING` the request is remembered and honored when the
        engine callback arrives.
        """

        with self._lock:
            if self._state is ServiceState.INITIALIZING:
                self._teardown_requested = True
                self._logger.log_precondition_violation("teardown", "deferred_until_initialized")
                return
            if self._state is not ServiceState.READY:
                return
            self._release_engine()
            listeners = list(self._listeners)
        self._publish(ServiceEvent.SHUTDOWN, listeners)

    def _on_initialized(self, status: InitStatus) -> None:
        """Handle the engine's one-shot initialization callback."""

        message: str | None = None
        with self._lock:
            if self._state is not ServiceState.INITIALIZING:
                self._logger.log_precondition_violation("initialized", self._state.value)
                return
            if status != InitStatus.SUCCESS:
                self._transition(ServiceState.FAILED)
                event = ServiceEvent.FAILED
                message = INIT_FAILURE_MESSAGE
            elif self._teardown_requested:
                self._release_engine()
                event = ServiceEvent.SHUTDOWN
            else:
                self._apply_default_language()
                self._transition(ServiceState.READY)
                event = ServiceEvent.READY
                message = INIT_SUCCESS_MESSAGE
            listeners = list(self._listeners)

        if message is not None:
            self._notify(message)
        self._publish(event, listeners)

    def _apply_default_language(self) -> None:
        """Set the default language and record the engine's resulting voice."""

        try:
            self._engine.set_language(self.default_language)
            self._active_voice = self._engine.current_voice()
        except Exception as exc:
            self._logger.log_engine_failure("set_language", type(exc).__name__)

    def _release_engine(self) -> None:
        """Stop any utterance, then shut the engine down."""

        self._transition(ServiceState.SHUTTING_DOWN)
        try:
            self._engine.stop()
        except Exception as exc:
            self._logger.log_engine_failure("stop", type(exc).__name__)
        try:
            self._engine.shutdown()
        except Exception as exc:
            self._logger.log_engine_failure("shutdown", type(exc).__name__)
        self._active_voice = None
        self._transition(ServiceState.SHUTDOWN)

    def _transition(self, state: ServiceState) -> None:
        """Move to `state` and log the transition; caller holds the lock."""

        previous = self._state
        self._state = state
        self._logger.log_transition(previous, state)

    def _notify(self, message: str) -> None:
        """Raise one user-visible notification."""

        self._logger.log_notification(message)
        if self._notifier is None:
            return
        try:
            self._notifier(message)
        except Exception as exc:
            self._logger.log_listener_failure("notify", type(exc).__name__)

    def _publish(self, event: ServiceEvent, listeners: list[ServiceListener]) -> None:
        """Deliver `event` to listeners outside the lock, isolating their failures."""

        for listener in listeners:
            try:
                listener(event, self)
            except Exception as exc:
                self._logger.log_listener_failure(event.value, type(exc).__name__)
