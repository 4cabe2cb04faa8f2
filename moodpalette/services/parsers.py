"""Defensive parsers turning free-form model replies into structured values.

The model answers in prose, so every parser either returns a well-formed value
or raises ``ParseError``; callers recover with fallback data.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Protocol

from ..core.errors import ParseError
from ..models import HEX_COLOR_PATTERN

MOOD_PATTERN = re.compile(r"[A-Z][a-z]+")
MAX_MOODS = 6

_UNSAFE_CHARACTERS = re.compile(r"[^a-zA-Z0-9\s,.\-]")


def sanitize_text(value: object) -> str:
    """Drop characters outside letters, digits, whitespace, comma, period and hyphen."""
    if not isinstance(value, str):
        return ""
    return _UNSAFE_CHARACTERS.sub("", value).strip()


def extract_moods(text: str, limit: int = MAX_MOODS) -> list[str]:
    """Capitalised words from ``text`` in first-seen order, without duplicates."""
    moods = list(dict.fromkeys(MOOD_PATTERN.findall(text or "")))
    if not moods:
        raise ParseError("no moods found in the response")
    return moods[:limit]


def extract_hex_colors(text: str, count: int) -> list[str]:
    """The first ``count`` ``#RRGGBB`` codes in scan order."""
    matches = HEX_COLOR_PATTERN.findall(text or "")
    if len(matches) < count:
        raise ParseError(f"expected {count} hex colors, found {len(matches)}")
    return matches[:count]


@dataclass(frozen=True)
class PsychologyFields:
    meaning: str
    associations: tuple[str, str, str]
    application: str


class PsychologyParser(Protocol):
    def parse(self, text: str) -> PsychologyFields: ...


class SentencePsychologyParser:
    """Positional parse of period-separated sentences.

    The first five non-empty segments map to meaning, three associations and
    application. Periods inside a sentence (abbreviations, decimals) shift the
    mapping; only the segment count is checked.
    """

    required_segments = 5

    def parse(self, text: str) -> PsychologyFields:
        return extract_psychology_fields(text, self.required_segments)


def extract_psychology_fields(text: str, required_segments: int = 5) -> PsychologyFields:
    parts = [part.strip() for part in (text or "").split(".")]
    parts = [part for part in parts if part]
    if len(parts) < required_segments:
        raise ParseError(f"incomplete psychology data: {len(parts)} of {required_segments} segments")
    meaning, first, second, third, application = parts[:5]
    return PsychologyFields(
        meaning=meaning,
        associations=(first, second, third),
        application=application,
    )
