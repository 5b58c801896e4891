"""Platform voice conversion helpers.

Responsibilities:
- Convert `pyttsx3` voice objects into immutable `Voice` records.
- Recover language and region tags from the shapes each pyttsx3 driver reports.

Drivers disagree on where the locale lives:
- eSpeak: `languages=[b"\\x05ru"]` (priority byte followed by the tag).
- NSSpeechSynthesizer: `languages=["ru_RU"]`.
- SAPI5: `languages=[]`, locale embedded in the registry token id.
"""

from __future__ import annotations

import re
from typing import Any, Iterable

from ..models.datatypes import Voice

_SAPI_TOKEN_PATTERN = re.compile(r"TTS_MS_([A-Za-z]{2,3})-([A-Za-z]{2})_")
_ONECORE_TOKEN_PATTERN = re.compile(r"MSTTS_V\d+_([a-z]{2,3})([A-Z]{2})_")


def parse_locale_tag(tag: str) -> tuple[str, str]:
    """Split a locale tag into lowercase language and uppercase region.

    Accepts `-` and `_` separators. Subtags other than a two-letter region
    (scripts, dialects such as `zh-yue`) are ignored.
    """

    parts = [part for part in tag.strip().replace("_", "-").split("-") if part]
    if not parts:
        return "", ""
    language = parts[0].lower()
    for part in parts[1:]:
        if len(part) == 2 and part.isalpha():
            return language, part.upper()
    return language, ""


def _decode_language_entry(entry: object) -> str:
    """Decode one pyttsx3 `languages` entry into a printable tag."""

    if isinstance(entry, bytes):
        text = entry.decode("utf-8", errors="ignore")
    else:
        text = str(entry)
    return "".join(character for character in text if character.isprintable()).strip()


def locale_from_languages(languages: Iterable[object] | None) -> tuple[str, str]:
    """Return the first usable `(language, region)` from a driver `languages` list."""

    for entry in languages or ():
        language, region = parse_locale_tag(_decode_language_entry(entry))
        if language:
            return language, region
    return "", ""


def locale_from_identifier(identifier: str) -> tuple[str, str]:
    """Recover `(language, region)` from a SAPI5 or OneCore voice token id."""

    match = _SAPI_TOKEN_PATTERN.search(identifier) or _ONECORE_TOKEN_PATTERN.search(identifier)
    if match is None:
        return "", ""
    return match.group(1).lower(), match.group(2).upper()


def voice_from_pyttsx3(raw: Any) -> Voice:
    """Convert a `pyttsx3.voice.Voice` into a `Voice` record."""

    identifier = str(getattr(raw, "id", "") or "")
    label = str(getattr(raw, "name", "") or "").strip() or identifier
    language, region = locale_from_languages(getattr(raw, "languages", None))
    if not language:
        language, region = locale_from_identifier(identifier)
    return Voice(identifier=identifier, label=label, language=language, region=region)
