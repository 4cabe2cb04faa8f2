"""Tests for WCAG contrast metrics."""
import pytest

from ..models import ContrastLevel, Readability, WcagTier
from ..services.accessibility import (
    average_contrast,
    calculate_accessibility,
    contrast_ratio,
    relative_luminance,
)
from ..services.fallbacks import FALLBACK_PALETTES

SAMPLE_COLORS = ["#000000", "#FFFFFF", "#FF0000", "#00FF00", "#0000FF", "#5A9BD5", "#c71585"]


def test_luminance_is_bounded() -> None:
    for color in SAMPLE_COLORS:
        assert 0.0 <= relative_luminance(color) <= 1.0
    assert relative_luminance("#000000") == 0.0
    assert relative_luminance("#FFFFFF") == pytest.approx(1.0)


def test_contrast_ratio_extremes_and_symmetry() -> None:
    assert contrast_ratio("#000000", "#FFFFFF") == pytest.approx(21.0)
    for first in SAMPLE_COLORS:
        assert contrast_ratio(first, first) == pytest.approx(1.0)
        for second in SAMPLE_COLORS:
            assert contrast_ratio(first, second) == pytest.approx(contrast_ratio(second, first))


def test_average_contrast_covers_every_pair() -> None:
    colors = ["#000000", "#FFFFFF", "#000000"]
    # pairs: black/white, black/black, white/black
    assert average_contrast(colors) == pytest.approx((21.0 + 1.0 + 21.0) / 3)


def test_black_and_white_is_top_tier() -> None:
    report = calculate_accessibility(["#000000", "#FFFFFF"])

    assert report.contrast == ContrastLevel.HIGH
    assert report.readability == Readability.EXCELLENT
    assert report.wcag.normal == WcagTier.AAA
    assert report.wcag.large == WcagTier.AAA
    assert report.color_blindness == "Moderate"


def test_mid_grey_on_black_is_medium() -> None:
    report = calculate_accessibility(["#000000", "#666666"])

    assert report.contrast == ContrastLevel.MEDIUM
    assert report.readability == Readability.FAIR
    assert report.wcag.normal == WcagTier.BELOW_AA
    assert report.wcag.large == WcagTier.AA


def test_soft_calm_palette_is_low_contrast() -> None:
    report = calculate_accessibility(list(FALLBACK_PALETTES["Calm"]))

    assert report.contrast == ContrastLevel.LOW
    assert report.readability == Readability.FAIR
    assert report.wcag.normal == WcagTier.BELOW_AA
    assert report.wcag.large == WcagTier.BELOW_AA


def test_single_color_palette_is_low_contrast() -> None:
    report = calculate_accessibility(["#123456"])
    assert report.contrast == ContrastLevel.LOW


def test_malformed_color_is_rejected() -> None:
    with pytest.raises(ValueError):
        relative_luminance("#12345")
    with pytest.raises(ValueError):
        contrast_ratio("red", "#FFFFFF")
