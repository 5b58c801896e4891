"""Telemetry and observability helpers.

This package emits structured speech-session lifecycle events.
"""

from .logger import SessionLogger, configure_logging

__all__ = ["SessionLogger", "configure_logging"]
