"""Speech-service core: engine lifecycle, voice catalog and controller."""

from .catalog import VoiceCatalog, filter_voices
from .controller import SpeechController
from .handle import (
    INIT_FAILURE_MESSAGE,
    INIT_SUCCESS_MESSAGE,
    Notifier,
    SpeechServiceHandle,
)

__all__ = [
    "INIT_FAILURE_MESSAGE",
    "INIT_SUCCESS_MESSAGE",
    "Notifier",
    "SpeechController",
    "SpeechServiceHandle",
    "VoiceCatalog",
    "filter_voices",
]
