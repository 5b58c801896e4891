"""Shared pytest fixtures for the voicedeck test suite."""

from __future__ import annotations

import io

import pytest

from tests.fakes import FakeSpeechEngine, RecordingNotifier
from voicedeck.telemetry.logger import SessionLogger, configure_logging


@pytest.fixture(autouse=True)
def log_sink() -> io.StringIO:
    """Route loguru output to an in-memory buffer for every test."""

    sink = io.StringIO()
    configure_logging(sink, level="DEBUG")
    return sink


@pytest.fixture
def session_logger() -> SessionLogger:
    """Provide a session logger writing to the test log sink."""

    return SessionLogger()


@pytest.fixture
def fake_engine() -> FakeSpeechEngine:
    """Provide an engine that becomes ready immediately with mixed-language voices."""

    return FakeSpeechEngine()


@pytest.fixture
def notifier() -> RecordingNotifier:
    """Provide a notifier that records messages."""

    return RecordingNotifier()
