"""Top-level package for voicedeck.

This package wraps the host operating system's speech-synthesis service behind
an explicit lifecycle, a language-filtered voice catalog and a two-operation
controller. The main composition entry point is `SpeechSession`.
"""

from .session import SessionSnapshot, SpeechSession

__all__ = ["SessionSnapshot", "SpeechSession", "__version__"]

__version__ = "0.1.0"
