"""Core datatypes shared across voicedeck modules.

Responsibilities:
- Represent immutable voice records obtained from the platform engine.
- Name the speech-service lifecycle states, events and platform status codes.

Key types:
- `Voice`, `ServiceState`, `ServiceEvent`, `InitStatus`, and `FlushMode`.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum


@dataclass(frozen=True, slots=True)
class Voice:
    """One platform voice as reported by the speech engine.

    Attributes:
        identifier: Platform-native voice identifier, unique per engine.
        label: Human-readable voice name.
        language: Lowercase primary language subtag (`ru`), empty when unknown.
        region: Uppercase region subtag (`RU`), empty when unknown.
    """

    identifier: str
    label: str
    language: str
    region: str = ""

    @property
    def locale_tag(self) -> str:
        """Return a BCP-47 style `language-REGION` tag, or the bare language."""

        if self.language and self.region:
            return f"{self.language}-{self.region}"
        return self.language


class ServiceState(str, Enum):
    """Lifecycle states of the platform speech engine handle."""

    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    READY = "ready"
    FAILED = "failed"
    SHUTTING_DOWN = "shutting_down"
    SHUTDOWN = "shutdown"


class ServiceEvent(str, Enum):
    """Events published to lifecycle and catalog listeners."""

    READY = "ready"
    FAILED = "failed"
    CATALOG_UPDATED = "catalog_updated"
    SHUTDOWN = "shutdown"


class InitStatus(IntEnum):
    """Status codes reported by the engine's one-shot initialization callback."""

    SUCCESS = 0
    ERROR = -1


class FlushMode(str, Enum):
    """Queueing behavior for a synthesis request.

    `FLUSH` drops any playing or pending utterance before speaking;
    `ADD` appends after it.
    """

    FLUSH = "flush"
    ADD = "add"
