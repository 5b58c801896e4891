"""Unit tests for YAML/environment configuration loader behavior."""

from __future__ import annotations

from pathlib import Path

import pytest

from voicedeck.config import ConfigLoader, VoicedeckConfig


def test_config_loader_from_yaml_loads_valid_config_and_normalizes_values(
    tmp_path: Path,
) -> None:
    """YAML loader should parse valid payloads and normalize typed/blank values."""

    config_path = tmp_path / "voicedeck.yml"
    config_path.write_text(
        """
target_language: " ru "
default_language: " ru-RU "
engine_driver: " espeak "
speech_rate: " 150 "
volume: 0.75
preferred_voice: " irina "
ready_timeout_seconds: "2.5"
log_level: " debug "
""".strip(),
        encoding="utf-8",
    )

    config = ConfigLoader.from_yaml(config_path)

    assert config == VoicedeckConfig(
        target_language="ru",
        default_language="ru-RU",
        engine_driver="espeak",
        speech_rate=150,
        volume=0.75,
        preferred_voice="irina",
        ready_timeout_seconds=2.5,
        log_level="DEBUG",
    )
    assert config.effective_default_language == "ru-RU"


def test_config_loader_from_yaml_applies_defaults_for_empty_file(tmp_path: Path) -> None:
    """An empty YAML file should produce the default config."""

    config_path = tmp_path / "empty.yml"
    config_path.write_text("", encoding="utf-8")

    config = ConfigLoader.from_yaml(config_path)

    assert config == VoicedeckConfig()
    assert config.effective_default_language == "ru"


def test_config_loader_from_yaml_rejects_unknown_keys(tmp_path: Path) -> None:
    """Unknown fields should fail clearly."""

    config_path = tmp_path / "unknown.yml"
    config_path.write_text("target_language: ru\nvoice_pitch: 3\n", encoding="utf-8")

    with pytest.raises(ValueError, match=r"unsupported key\(s\): voice_pitch"):
        ConfigLoader.from_yaml(config_path)


def test_config_loader_from_yaml_rejects_non_mapping_root(tmp_path: Path) -> None:
    """List roots are not a valid config."""

    config_path = tmp_path / "list.yml"
    config_path.write_text("- ru\n- en\n", encoding="utf-8")

    with pytest.raises(ValueError, match="top-level mapping"):
        ConfigLoader.from_yaml(config_path)


def test_config_loader_from_yaml_rejects_malformed_yaml(tmp_path: Path) -> None:
    """Syntax errors should surface as `ValueError`."""

    config_path = tmp_path / "broken.yml"
    config_path.write_text("target_language: [ru\n", encoding="utf-8")

    with pytest.raises(ValueError, match="not valid YAML"):
        ConfigLoader.from_yaml(config_path)


@pytest.mark.parametrize(
    ("payload", "message"),
    [
        ("speech_rate: 0\n", "speech_rate"),
        ("speech_rate: true\n", "speech_rate"),
        ("volume: 2\n", "volume"),
        ("volume: loud\n", "volume"),
        ("engine_driver: festival\n", "engine_driver"),
        ("ready_timeout_seconds: 0\n", "ready_timeout_seconds"),
        ("log_level: chatty\n", "log_level"),
    ],
)
def test_config_loader_from_yaml_rejects_invalid_values(
    tmp_path: Path, payload: str, message: str
) -> None:
    """Invalid field values should name the offending field."""

    config_path = tmp_path / "invalid.yml"
    config_path.write_text(payload, encoding="utf-8")

    with pytest.raises(ValueError, match=message):
        ConfigLoader.from_yaml(config_path)


def test_config_loader_from_env_reads_prefixed_variables() -> None:
    """Environment loader should read `VOICEDECK_*` keys and ignore others."""

    config = ConfigLoader.from_env(
        {
            "VOICEDECK_TARGET_LANGUAGE": "uk",
            "VOICEDECK_SPEECH_RATE": "120",
            "VOICEDECK_PREFERRED_VOICE": "  ",
            "VOICEDECK_LOG_LEVEL": "warning",
            "UNRELATED": "x",
        }
    )

    assert config.target_language == "uk"
    assert config.speech_rate == 120
    assert config.preferred_voice is None
    assert config.log_level == "WARNING"


def test_config_loader_from_env_reports_invalid_values() -> None:
    """Environment errors should be labeled with their source."""

    with pytest.raises(ValueError, match="Environment field `volume` must be a number"):
        ConfigLoader.from_env({"VOICEDECK_VOLUME": "max"})


def test_with_overrides_ignores_none_and_validates() -> None:
    """CLI overrides should apply only explicit values and revalidate."""

    base = VoicedeckConfig(target_language="ru", engine_driver="espeak")

    updated = base.with_overrides(target_language="uk", engine_driver=None)

    assert updated.target_language == "uk"
    assert updated.engine_driver == "espeak"
    assert base.target_language == "ru"
    with pytest.raises(ValueError, match="engine_driver"):
        base.with_overrides(engine_driver="festival")
