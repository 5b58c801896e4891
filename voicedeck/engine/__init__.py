"""Platform speech-engine adapters.

This package contains the engine protocol, the pyttsx3-backed implementation
and platform voice conversion helpers.
"""

from .base import InitCallback, SpeechEngine
from .factory import SUPPORTED_DRIVER_IDS, EngineFactory
from .pyttsx3_engine import Pyttsx3SpeechEngine
from .voices import parse_locale_tag, voice_from_pyttsx3

__all__ = [
    "EngineFactory",
    "InitCallback",
    "Pyttsx3SpeechEngine",
    "SUPPORTED_DRIVER_IDS",
    "SpeechEngine",
    "parse_locale_tag",
    "voice_from_pyttsx3",
]
