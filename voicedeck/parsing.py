"""Shared parsing helpers for configuration value normalization."""

from __future__ import annotations


def normalize_optional_string(value: object) -> str | None:
    """Normalize an optional value to a stripped non-empty string.

    Args:
        value: Arbitrary input value.

    Returns:
        Stripped string value, or `None` when the value is empty after trimming.
    """

    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    return text


def normalize_language_code(value: object) -> str | None:
    """Normalize a language tag to its lowercase primary subtag.

    `"RU"`, `"ru-RU"` and `"ru_RU"` all normalize to `"ru"`.
    """

    normalized = normalize_optional_string(value)
    if normalized is None:
        return None
    primary = normalized.replace("_", "-").split("-", 1)[0].strip().lower()
    return primary or None

