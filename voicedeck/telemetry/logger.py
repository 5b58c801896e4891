"""Structured speech-session logging utilities.

Responsibilities:
- Emit concise, deterministic lifecycle logs for the speech service.
- Route every record through `loguru` with a single configurable sink.
"""

from __future__ import annotations

import sys
from typing import TextIO

from loguru import logger as _loguru_logger


def _sanitize_context_value(value: object) -> str:
    """Convert context values into stable, shell-safe tokens."""

    raw = getattr(value, "value", value)
    text = str(raw).strip()
    if not text:
        return "none"
    return "".join(
        character if character.isalnum() or character in {"-", "_", ".", ":", "/"} else "_"
        for character in text
    )


def _format_context(context: dict[str, object]) -> str:
    """Serialize context key/value pairs in deterministic key order."""

    if not context:
        return ""
    tokens = [
        f"{key}={_sanitize_context_value(context[key])}"
        for key in sorted(context.keys())
    ]
    return " " + " ".join(tokens)


def configure_logging(sink: TextIO | None = None, level: str = "INFO") -> int:
    """Replace loguru handlers with one plain-message sink and return its handler id."""

    _loguru_logger.remove()
    return _loguru_logger.add(
        sink or sys.stderr,
        format="{message}",
        level=level.upper(),
        colorize=False,
    )


class SessionLogger:
    """Emit deterministic lifecycle logs for the speech handle, catalog and controller.

    Utterance text is never logged; only its length is.
    """

    def _emit(self, level: str, event: str, stage: str, **context: object) -> None:
        """Emit one structured runtime log line."""

        line = f"[speech] level={level} stage={stage} event={event}{_format_context(context)}"
        _loguru_logger.log(level, line)

    def log_transition(self, previous: object, current: object) -> None:
        """Emit a handle state transition."""

        self._emit("INFO", "transition", "lifecycle", **{"from": previous, "to": current})

    def log_notification(self, message_key: str) -> None:
        """Emit a record that a user-visible notification was raised."""

        self._emit("INFO", "notify", "lifecycle", message=message_key)

    def log_catalog_refresh(self, language: str, total: int, matched: int) -> None:
        """Emit catalog refresh counts for the configured target language."""

        self._emit("INFO", "refresh", "catalog", language=language, total=total, matched=matched)

    def log_request(self, operation: str, **context: object) -> None:
        """Emit a debug record for an accepted controller request."""

        self._emit("DEBUG", "request", operation, **context)

    def log_precondition_violation(self, operation: str, reason: str) -> None:
        """Emit a warning for an ignored request made in the wrong state."""

        self._emit("WARNING", "ignored", operation, reason=reason)

    def log_listener_failure(self, stage: str, error_type: str) -> None:
        """Emit a listener failure without payload details."""

        self._emit("ERROR", "listener_failure", stage, error_type=error_type)

    def log_engine_failure(self, operation: str, error_type: str) -> None:
        """Emit an engine call failure without payload details."""

        self._emit("ERROR", "engine_failure", operation, error_type=error_type)
