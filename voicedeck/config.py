"""Configuration model and loaders for voicedeck.

Responsibilities:
- Define speech-session settings as a typed dataclass.
- Provide loader entry points for file- and environment-based configuration.
- Apply explicit CLI overrides on top of loaded values.

Key types:
- `VoicedeckConfig`: normalized settings for one speech session.
- `ConfigLoader`: static construction helpers for `VoicedeckConfig`.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
import os
from pathlib import Path
from typing import Any, Mapping

import yaml

from .engine.factory import SUPPORTED_DRIVER_IDS
from .parsing import normalize_language_code, normalize_optional_string


_DEFAULT_TARGET_LANGUAGE = "ru"
_DEFAULT_ENGINE_DRIVER = "pyttsx3"
_DEFAULT_SPEECH_RATE = 175
_DEFAULT_VOLUME = 1.0
_DEFAULT_READY_TIMEOUT_SECONDS = 10.0
_DEFAULT_LOG_LEVEL = "INFO"
_SUPPORTED_LOG_LEVELS = frozenset({"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR"})


@dataclass(slots=True)
class VoicedeckConfig:
    """Settings for one speech session.

    Attributes:
        target_language: Language subtag the voice catalog is filtered to.
        default_language: Language applied to the engine once it is ready;
            falls back to `target_language` when unset.
        engine_driver: Speech engine driver identifier.
        speech_rate: Speaking rate in words per minute.
        volume: Output volume between 0.0 and 1.0.
        preferred_voice: Optional voice identifier selected once the catalog loads.
        ready_timeout_seconds: How long CLI commands wait for the engine.
        log_level: Minimum loguru level written to the log sink.
    """

    target_language: str = _DEFAULT_TARGET_LANGUAGE
    default_language: str | None = None
    engine_driver: str = _DEFAULT_ENGINE_DRIVER
    speech_rate: int = _DEFAULT_SPEECH_RATE
    volume: float = _DEFAULT_VOLUME
    preferred_voice: str | None = None
    ready_timeout_seconds: float = _DEFAULT_READY_TIMEOUT_SECONDS
    log_level: str = _DEFAULT_LOG_LEVEL

    @property
    def effective_default_language(self) -> str:
        """Return the language applied to the engine at start-up."""

        return self.default_language or self.target_language

    def validate(self) -> None:
        """Validate configuration values before a session starts."""

        if normalize_language_code(self.target_language) is None:
            raise ValueError("`target_language` must be a non-empty language tag.")
        if self.default_language is not None and normalize_language_code(
            self.default_language
        ) is None:
            raise ValueError("`default_language` must be a non-empty language tag.")
        if self.engine_driver.strip().lower() not in SUPPORTED_DRIVER_IDS:
            supported = ", ".join(sorted(SUPPORTED_DRIVER_IDS))
            raise ValueError(
                f"Unsupported `engine_driver` value `{self.engine_driver}`; supported: {supported}."
            )
        if isinstance(self.speech_rate, bool) or self.speech_rate <= 0:
            raise ValueError("`speech_rate` must be a positive integer.")
        if not 0.0 <= self.volume <= 1.0:
            raise ValueError("`volume` must be between 0.0 and 1.0.")
        if self.ready_timeout_seconds <= 0.0:
            raise ValueError("`ready_timeout_seconds` must be a positive number.")
        if self.log_level.upper() not in _SUPPORTED_LOG_LEVELS:
            supported = ", ".join(sorted(_SUPPORTED_LOG_LEVELS))
            raise ValueError(f"`log_level` must be one of: {supported}.")

    def with_overrides(self, **overrides: object) -> VoicedeckConfig:
        """Return a validated copy with non-`None` overrides applied."""

        applied = {key: value for key, value in overrides.items() if value is not None}
        updated = replace(self, **applied)
        updated.validate()
        return updated


class ConfigLoader:
    """Factory methods for creating `VoicedeckConfig` from external sources."""

    _SUPPORTED_YAML_KEYS = frozenset(
        {
            "target_language",
            "default_language",
            "engine_driver",
            "speech_rate",
            "volume",
            "preferred_voice",
            "ready_timeout_seconds",
            "log_level",
        }
    )

    @staticmethod
    def from_yaml(path: Path) -> VoicedeckConfig:
        """Create a validated config from a YAML file."""

        path_text = path.read_text(encoding="utf-8")
        payload = ConfigLoader._parse_yaml_payload(path_text, path)

        return ConfigLoader._build_config_from_mapping(payload, source_label=f"YAML `{path}`")

    @staticmethod
    def from_env(env: Mapping[str, str] | None = None) -> VoicedeckConfig:
        """Create a validated config from `VOICEDECK_*` environment variables."""

        env_map: Mapping[str, str] = os.environ if env is None else env
        payload: dict[str, Any] = {}
        for key in ConfigLoader._SUPPORTED_YAML_KEYS:
            env_key = f"VOICEDECK_{key.upper()}"
            if env_key in env_map:
                payload[key] = env_map[env_key]
        return ConfigLoader._build_config_from_mapping(payload, source_label="Environment")

    @staticmethod
    def _parse_yaml_payload(raw_text: str, path: Path) -> Mapping[str, Any]:
        """Parse YAML text and enforce a mapping root payload."""

        try:
            payload = yaml.safe_load(raw_text)
        except yaml.YAMLError as exc:
            raise ValueError(f"YAML config `{path}` is not valid YAML: {exc}") from exc

        if payload is None:
            payload = {}
        if not isinstance(payload, Mapping):
            raise ValueError(f"YAML config `{path}` must contain a top-level mapping/object.")
        return payload

    @staticmethod
    def _build_config_from_mapping(
        payload: Mapping[str, Any], source_label: str
    ) -> VoicedeckConfig:
        """Build a validated config from a normalized mapping payload."""

        unknown = sorted(set(payload).difference(ConfigLoader._SUPPORTED_YAML_KEYS))
        if unknown:
            key_list = ", ".join(str(key) for key in unknown)
            raise ValueError(f"{source_label} includes unsupported key(s): {key_list}.")

        config = VoicedeckConfig(
            target_language=(
                ConfigLoader._optional_non_empty_string(payload, "target_language")
                or _DEFAULT_TARGET_LANGUAGE
            ),
            default_language=ConfigLoader._optional_non_empty_string(
                payload, "default_language"
            ),
            engine_driver=(
                ConfigLoader._optional_non_empty_string(payload, "engine_driver")
                or _DEFAULT_ENGINE_DRIVER
            ),
            speech_rate=ConfigLoader._optional_positive_int(
                payload, "speech_rate", source_label, default=_DEFAULT_SPEECH_RATE
            ),
            volume=ConfigLoader._optional_float(
                payload, "volume", source_label, default=_DEFAULT_VOLUME
            ),
            preferred_voice=ConfigLoader._optional_non_empty_string(
                payload, "preferred_voice"
            ),
            ready_timeout_seconds=ConfigLoader._optional_float(
                payload,
                "ready_timeout_seconds",
                source_label,
                default=_DEFAULT_READY_TIMEOUT_SECONDS,
            ),
            log_level=(
                ConfigLoader._optional_non_empty_string(payload, "log_level")
                or _DEFAULT_LOG_LEVEL
            ).upper(),
        )
        try:
            config.validate()
        except ValueError as exc:
            raise ValueError(f"{source_label}: {exc}") from exc
        return config

    @staticmethod
    def _optional_non_empty_string(payload: Mapping[str, Any], key: str) -> str | None:
        """Read an optional string field and normalize blank values to `None`."""

        if key not in payload:
            return None
        return normalize_optional_string(payload[key])

    @staticmethod
    def _optional_positive_int(
        payload: Mapping[str, Any], key: str, source_label: str, default: int
    ) -> int:
        """Read and validate a positive integer payload field."""

        if key not in payload:
            return default

        raw_value = payload[key]
        if isinstance(raw_value, bool):
            raise ValueError(f"{source_label} field `{key}` must be a positive integer.")
        if isinstance(raw_value, int):
            parsed = raw_value
        else:
            normalized = normalize_optional_string(raw_value)
            if normalized is None:
                return default
            try:
                parsed = int(normalized)
            except ValueError as exc:
                raise ValueError(
                    f"{source_label} field `{key}` must be a positive integer."
                ) from exc

        if parsed <= 0:
            raise ValueError(f"{source_label} field `{key}` must be a positive integer.")
        return parsed

    @staticmethod
    def _optional_float(
        payload: Mapping[str, Any], key: str, source_label: str, default: float
    ) -> float:
        """Read a numeric payload field as `float`."""

        if key not in payload:
            return default

        raw_value = payload[key]
        if isinstance(raw_value, bool):
            raise ValueError(f"{source_label} field `{key}` must be a number.")
        if isinstance(raw_value, (int, float)):
            return float(raw_value)
        normalized = normalize_optional_string(raw_value)
        if normalized is None:
            return default
        try:
            return float(normalized)
        except ValueError as exc:
            raise ValueError(f"{source_label} field `{key}` must be a number.") from exc
