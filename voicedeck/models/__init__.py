"""Shared typed data models for voicedeck.

This package contains dataclasses and enums used across engine, service and
CLI modules to avoid cross-module coupling and circular imports.
"""

from .datatypes import FlushMode, InitStatus, ServiceEvent, ServiceState, Voice

__all__ = [
    "FlushMode",
    "InitStatus",
    "ServiceEvent",
    "ServiceState",
    "Voice",
]
