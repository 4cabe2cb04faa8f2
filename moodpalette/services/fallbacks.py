"""Static substitutes used when the text generation service cannot help."""
from __future__ import annotations

import random

from ..models import ColorPsychology

FALLBACK_PALETTES: dict[str, tuple[str, ...]] = {
    "Calm": ("#E6EFF6", "#B8D1E5", "#92AFC7", "#6E8BA3", "#5A9BD5"),
    "Energetic": ("#FFE45C", "#FF6B6B", "#4ECDC4", "#45B7D1", "#F9AFAE"),
    "Mysterious": ("#2C3E50", "#8E44AD", "#2980B9", "#34495E", "#5D6D7E"),
    "Joyful": ("#FF9A8B", "#FF6B6B", "#4ECDC4", "#45B7D1", "#FFD700"),
    "Serene": ("#E8F3F1", "#CCECE6", "#99D8CF", "#66C3B8", "#5BC0EB"),
    "Love": ("#FFB6C1", "#DB7093", "#C71585", "#FF69B4", "#FF1493"),
}

DEFAULT_MOODS: tuple[str, ...] = ("Calm", "Energetic", "Mysterious", "Joyful", "Serene", "Love")

GENERIC_ASSOCIATIONS: tuple[str, str, str] = (
    "General association 1",
    "General association 2",
    "General association 3",
)
GENERIC_APPLICATION = "General design application"


def default_moods() -> list[str]:
    return list(DEFAULT_MOODS)


def static_palette(mood: str) -> list[str] | None:
    """Known palette for ``mood``, or ``None`` when the mood has no table entry."""
    palette = FALLBACK_PALETTES.get(mood)
    return list(palette) if palette is not None else None


def random_palette(size: int, rng: random.Random | None = None) -> list[str]:
    """``size`` uniformly random 24-bit colors formatted as ``#RRGGBB``."""
    rng = rng or random.Random()
    return [f"#{rng.randrange(0x1000000):06X}" for _ in range(size)]


def fallback_palette(mood: str, size: int, rng: random.Random | None = None) -> list[str]:
    """Static palette for a known mood (never padded), else a random one of exactly ``size`` colors."""
    palette = static_palette(mood)
    if palette is None:
        return random_palette(size, rng)
    return palette[:size]


def fallback_psychology(mood: str, color_role: str) -> ColorPsychology:
    return ColorPsychology(
        mood=mood,
        meaning=f"General {color_role} color psychology for {mood}",
        associations=GENERIC_ASSOCIATIONS,
        application=GENERIC_APPLICATION,
    )
