"""Speech-engine factory helpers.

Responsibilities:
- Resolve configured driver identifiers to concrete engine implementations.
- Keep session wiring independent from concrete engine construction.

Notes:
- `pyttsx3` lets the library pick the platform driver; `sapi5`, `nsss` and
  `espeak` force a specific pyttsx3 driver.
"""

from __future__ import annotations

from ..telemetry.logger import SessionLogger
from .base import SpeechEngine
from .pyttsx3_engine import Pyttsx3SpeechEngine

_PYTTSX3_DRIVER_NAMES = frozenset({"sapi5", "nsss", "espeak"})
SUPPORTED_DRIVER_IDS = frozenset({"pyttsx3"}) | _PYTTSX3_DRIVER_NAMES


class EngineFactory:
    """Factory for platform speech engines used by the speech session."""

    @staticmethod
    def create_engine(
        driver_id: str,
        rate: int = 175,
        volume: float = 1.0,
        logger: SessionLogger | None = None,
    ) -> SpeechEngine:
        """Create a speech engine for a configured driver identifier."""

        normalized = driver_id.strip().lower()
        if normalized == "pyttsx3":
            return Pyttsx3SpeechEngine(rate=rate, volume=volume, logger=logger)
        if normalized in _PYTTSX3_DRIVER_NAMES:
            return Pyttsx3SpeechEngine(
                driver_name=normalized,
                rate=rate,
                volume=volume,
                logger=logger,
            )
        raise ValueError(f"Unsupported speech engine driver `{driver_id}`.")
