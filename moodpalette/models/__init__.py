"""Domain models for the mood palette service."""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, List, Sequence

from ..core.errors import InputError

HEX_COLOR_PATTERN = re.compile(r"#[0-9A-Fa-f]{6}")


class GenerationMode(StrEnum):
    PROMPT = "prompt"
    IMAGE = "image"


class ColorRole(StrEnum):
    PRIMARY = "Primary"
    SECONDARY = "Secondary"
    ACCENT = "Accent"
    NEUTRAL = "Neutral"
    HIGHLIGHT = "Highlight"


COLOR_ROLES: tuple[ColorRole, ...] = tuple(ColorRole)


def role_label(index: int) -> str:
    """Role name for the color at ``index``; positions past the named roles are numbered."""
    if index < len(COLOR_ROLES):
        return str(COLOR_ROLES[index])
    return f"Color {index + 1}"


class ContrastLevel(StrEnum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class Readability(StrEnum):
    FAIR = "Fair"
    GOOD = "Good"
    EXCELLENT = "Excellent"


class WcagTier(StrEnum):
    BELOW_AA = "BelowAA"
    AA = "AA"
    AAA = "AAA"


COLOR_BLINDNESS_PLACEHOLDER = "Moderate"


def is_hex_color(value: str) -> bool:
    return isinstance(value, str) and HEX_COLOR_PATTERN.fullmatch(value) is not None


def hex_to_rgb(hex_code: str) -> tuple[int, int, int]:
    if not is_hex_color(hex_code):
        raise ValueError(f"not a #RRGGBB color: {hex_code!r}")
    value = int(hex_code[1:], 16)
    return (value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF


@dataclass(frozen=True)
class ColorPsychology:
    mood: str
    meaning: str
    associations: tuple[str, str, str]
    application: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "mood": self.mood,
            "meaning": self.meaning,
            "associations": list(self.associations),
            "application": self.application,
        }

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "ColorPsychology":
        associations = tuple(str(item) for item in payload["associations"])
        if len(associations) != 3:
            raise ValueError("psychology records carry exactly three associations")
        return cls(
            mood=str(payload["mood"]),
            meaning=str(payload["meaning"]),
            associations=associations,  # type: ignore[arg-type]
            application=str(payload.get("application", "")),
        )


@dataclass(frozen=True)
class WcagAssessment:
    normal: WcagTier
    large: WcagTier


@dataclass(frozen=True)
class AccessibilityReport:
    contrast: ContrastLevel
    readability: Readability
    wcag: WcagAssessment
    color_blindness: str = COLOR_BLINDNESS_PLACEHOLDER


@dataclass(frozen=True)
class ColorEntry:
    name: str
    hex: str
    rgb: tuple[int, int, int]
    psychology: ColorPsychology

    @classmethod
    def from_hex(cls, name: str, hex_code: str, psychology: ColorPsychology) -> "ColorEntry":
        return cls(name=name, hex=hex_code, rgb=hex_to_rgb(hex_code), psychology=psychology)


@dataclass
class Palette:
    id: str
    name: str
    mood: str
    colors: List[ColorEntry]
    description: str
    accessibility: AccessibilityReport

    @property
    def hex_codes(self) -> list[str]:
        return [color.hex for color in self.colors]


@dataclass
class GenerationRequest:
    prompt_text: str = ""
    mode: GenerationMode = GenerationMode.PROMPT
    image_data: str | None = None
    mood_prompt_text: str | None = None
    user_moods: Sequence[str] = field(default_factory=list)
    palette_size: int = 5

    def validate(self) -> None:
        """Raise ``InputError`` when the field required by the mode is missing."""
        if self.mode == GenerationMode.PROMPT and not (self.prompt_text or "").strip():
            raise InputError("Prompt is required")
        if self.mode == GenerationMode.IMAGE and not self.image_data:
            raise InputError("Image is required")
        if self.palette_size < 1:
            raise InputError("paletteSize must be at least 1")
