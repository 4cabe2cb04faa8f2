"""WCAG contrast metrics over a palette's colors."""
from __future__ import annotations

from itertools import combinations
from typing import Iterable, Sequence

from ..models import (
    AccessibilityReport,
    ContrastLevel,
    Readability,
    WcagAssessment,
    WcagTier,
    hex_to_rgb,
)

_LUMINANCE_WEIGHTS = (0.2126, 0.7152, 0.0722)


def _linearise(channel: int) -> float:
    value = channel / 255
    if value <= 0.03928:
        return value / 12.92
    return ((value + 0.055) / 1.055) ** 2.4


def relative_luminance(hex_code: str) -> float:
    """Relative luminance of a ``#RRGGBB`` color in ``[0, 1]``."""
    channels = hex_to_rgb(hex_code)
    return sum(weight * _linearise(channel) for weight, channel in zip(_LUMINANCE_WEIGHTS, channels))


def contrast_ratio(first: str, second: str) -> float:
    """Contrast ratio between two colors, from 1 (identical) to 21 (black on white)."""
    l1 = relative_luminance(first)
    l2 = relative_luminance(second)
    return (max(l1, l2) + 0.05) / (min(l1, l2) + 0.05)


def average_contrast(colors: Iterable[str]) -> float:
    """Mean contrast over every unordered pair; a lone color contrasts 1:1 with itself."""
    ratios = [contrast_ratio(a, b) for a, b in combinations(list(colors), 2)]
    if not ratios:
        return 1.0
    return sum(ratios) / len(ratios)


def _contrast_level(ratio: float) -> ContrastLevel:
    if ratio > 4.5:
        return ContrastLevel.HIGH
    if ratio > 3:
        return ContrastLevel.MEDIUM
    return ContrastLevel.LOW


def _readability(ratio: float) -> Readability:
    if ratio > 7:
        return Readability.EXCELLENT
    if ratio > 4.5:
        return Readability.GOOD
    return Readability.FAIR


def _wcag_normal(ratio: float) -> WcagTier:
    if ratio > 7:
        return WcagTier.AAA
    if ratio > 4.5:
        return WcagTier.AA
    return WcagTier.BELOW_AA


def _wcag_large(ratio: float) -> WcagTier:
    if ratio > 4.5:
        return WcagTier.AAA
    if ratio > 3:
        return WcagTier.AA
    return WcagTier.BELOW_AA


def calculate_accessibility(colors: Sequence[str]) -> AccessibilityReport:
    """Classify a palette by the average pairwise contrast of its colors.

    Color blindness is reported as a fixed placeholder; no simulation is run.
    """
    ratio = average_contrast(colors)
    return AccessibilityReport(
        contrast=_contrast_level(ratio),
        readability=_readability(ratio),
        wcag=WcagAssessment(normal=_wcag_normal(ratio), large=_wcag_large(ratio)),
    )
