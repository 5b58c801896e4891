"""Integration-test fixtures for deterministic engine behavior."""

from __future__ import annotations

import pytest

from tests.fakes import FakeSpeechEngine


@pytest.fixture
def installed_engine(monkeypatch: pytest.MonkeyPatch) -> FakeSpeechEngine:
    """Route every CLI session to one shared fake engine."""

    engine = FakeSpeechEngine()

    def _create_engine(driver_id: str, **kwargs: object) -> FakeSpeechEngine:
        _ = driver_id
        _ = kwargs
        return engine

    monkeypatch.setattr("voicedeck.session.EngineFactory.create_engine", _create_engine)
    for key in (
        "VOICEDECK_TARGET_LANGUAGE",
        "VOICEDECK_DEFAULT_LANGUAGE",
        "VOICEDECK_ENGINE_DRIVER",
        "VOICEDECK_PREFERRED_VOICE",
    ):
        monkeypatch.delenv(key, raising=False)
    return engine
