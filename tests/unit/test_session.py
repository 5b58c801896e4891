"""Unit tests for speech session wiring and snapshots."""

from __future__ import annotations

import io

import pytest

from tests.fakes import EN_DAVID, RU_IRINA, RU_PAVEL, FakeSpeechEngine, RecordingNotifier
from voicedeck.config import VoicedeckConfig
from voicedeck.models.datatypes import InitStatus, ServiceState
from voicedeck.service.handle import INIT_FAILURE_MESSAGE, INIT_SUCCESS_MESSAGE
from voicedeck.session import SessionSnapshot, SpeechSession


def test_snapshot_after_ready_exposes_filtered_catalog(
    fake_engine: FakeSpeechEngine, notifier: RecordingNotifier
) -> None:
    """A ready session should publish filtered voices and the platform default."""

    session = SpeechSession(VoicedeckConfig(), engine=fake_engine, notifier=notifier)

    assert session.wait_until_settled(0.1) is True
    assert session.snapshot() == SessionSnapshot(
        ready=True,
        state=ServiceState.READY,
        voices=(RU_IRINA, RU_PAVEL),
        selected_voice=RU_IRINA,
    )
    assert notifier.messages == [INIT_SUCCESS_MESSAGE]


def test_failed_initialization_leaves_empty_catalog_and_one_notification(
    notifier: RecordingNotifier,
) -> None:
    """Failure should settle the session with no voices and a single notification."""

    engine = FakeSpeechEngine(init_status=InitStatus.ERROR)
    session = SpeechSession(VoicedeckConfig(), engine=engine, notifier=notifier)

    assert session.wait_until_settled(0.1) is True
    snapshot = session.snapshot()
    assert snapshot.ready is False
    assert snapshot.state is ServiceState.FAILED
    assert snapshot.voices == ()
    assert snapshot.selected_voice is None
    assert notifier.messages == [INIT_FAILURE_MESSAGE]
    assert session.speak("привет") is False


def test_pending_initialization_keeps_session_usable() -> None:
    """A hung engine should time out the wait without blocking other calls."""

    engine = FakeSpeechEngine(init_status=None)
    session = SpeechSession(VoicedeckConfig(), engine=engine)

    assert session.wait_until_settled(0.01) is False
    assert session.snapshot().state is ServiceState.INITIALIZING
    assert session.speak("привет") is False
    assert session.wait_until_idle(0.01) is True


def test_preferred_voice_is_selected_when_catalog_loads() -> None:
    """A configured preferred voice should override the platform default."""

    engine = FakeSpeechEngine(init_status=None)
    session = SpeechSession(VoicedeckConfig(preferred_voice="3"), engine=engine)

    engine.complete_initialization()

    assert session.snapshot().selected_voice == RU_PAVEL
    assert engine.calls_named("set_voice") == [("set_voice", "3")]


def test_missing_preferred_voice_is_logged_and_default_kept(
    fake_engine: FakeSpeechEngine, log_sink: io.StringIO
) -> None:
    """A preferred voice outside the catalog should not be applied."""

    session = SpeechSession(VoicedeckConfig(preferred_voice="2"), engine=fake_engine)

    assert session.snapshot().selected_voice == RU_IRINA
    assert fake_engine.calls_named("set_voice") == []
    assert "stage=preferred_voice event=ignored reason=voice_not_in_catalog" in log_sink.getvalue()


def test_default_language_can_differ_from_catalog_language() -> None:
    """Engine language and catalog filter are configured separately."""

    engine = FakeSpeechEngine()
    config = VoicedeckConfig(target_language="ru", default_language="en")
    session = SpeechSession(config, engine=engine)

    assert engine.calls_named("set_language") == [("set_language", "en")]
    assert session.handle.active_voice == EN_DAVID
    assert session.snapshot().selected_voice is None


def test_context_manager_releases_engine(fake_engine: FakeSpeechEngine) -> None:
    """Leaving the session context should tear the handle down."""

    with SpeechSession(VoicedeckConfig(), engine=fake_engine) as session:
        session.speak("привет")

    assert session.snapshot().state is ServiceState.SHUTDOWN
    assert fake_engine.calls_named("shutdown") == [("shutdown",)]


def test_session_builds_engine_from_config(
    monkeypatch: pytest.MonkeyPatch, fake_engine: FakeSpeechEngine
) -> None:
    """Without an explicit engine the factory should receive driver, rate and volume."""

    received: dict[str, object] = {}

    def _create_engine(driver_id: str, **kwargs: object) -> FakeSpeechEngine:
        received["driver_id"] = driver_id
        received.update(kwargs)
        return fake_engine

    monkeypatch.setattr("voicedeck.session.EngineFactory.create_engine", _create_engine)

    session = SpeechSession(VoicedeckConfig(engine_driver="espeak", speech_rate=140, volume=0.5))

    assert session.engine is fake_engine
    assert received["driver_id"] == "espeak"
    assert received["rate"] == 140
    assert received["volume"] == 0.5


def test_session_rejects_invalid_config(fake_engine: FakeSpeechEngine) -> None:
    """Invalid settings should fail before the engine is touched."""

    with pytest.raises(ValueError, match="volume"):
        SpeechSession(VoicedeckConfig(volume=1.5), engine=fake_engine)

    assert fake_engine.calls == []
