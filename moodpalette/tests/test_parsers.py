"""Tests for model reply parsers."""
import pytest

from ..core.errors import ParseError
from ..services.parsers import (
    SentencePsychologyParser,
    extract_hex_colors,
    extract_moods,
    extract_psychology_fields,
    sanitize_text,
)


def test_extract_moods_preserves_order() -> None:
    assert extract_moods("I feel Calm and Energetic today.") == ["Calm", "Energetic"]


def test_extract_moods_deduplicates_and_truncates() -> None:
    text = "Calm, Joyful, Calm, Serene, Bold, Quiet, Dreamy, Warm, Joyful"
    assert extract_moods(text) == ["Calm", "Joyful", "Serene", "Bold", "Quiet", "Dreamy"]


def test_extract_moods_without_capitalised_words_fails() -> None:
    with pytest.raises(ParseError):
        extract_moods("calm, joyful, SERENE")
    with pytest.raises(ParseError):
        extract_moods("")


def test_extract_hex_colors_keeps_scan_order() -> None:
    text = "Try #112233, then #AABBCC and #abcdef. Also #000000 #FFFFFF #123456"
    assert extract_hex_colors(text, 5) == ["#112233", "#AABBCC", "#abcdef", "#000000", "#FFFFFF"]


def test_extract_hex_colors_requires_enough_matches() -> None:
    with pytest.raises(ParseError):
        extract_hex_colors("#112233, #GGGGGG, #12345, #AABBCC", 5)


def test_extract_psychology_fields_maps_segments() -> None:
    text = (
        "Soft blue soothes the mind. Tranquility. Trust.  . Stability. "
        "Use it for calm backgrounds. Extra sentence."
    )
    fields = extract_psychology_fields(text)

    assert fields.meaning == "Soft blue soothes the mind"
    assert fields.associations == ("Tranquility", "Trust", "Stability")
    assert fields.application == "Use it for calm backgrounds"


def test_psychology_parser_rejects_short_replies() -> None:
    with pytest.raises(ParseError):
        SentencePsychologyParser().parse("Only. Four. Segments. Here.")


def test_sanitize_text_strips_unsafe_characters() -> None:
    assert sanitize_text("  <b>Sunset</b> beach; 2024!  ") == "bSunsetb beach 2024"
    assert sanitize_text("deep-blue, calm.") == "deep-blue, calm."
    assert sanitize_text(None) == ""
    assert sanitize_text(42) == ""
