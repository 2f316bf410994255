"""Weight extractor tests: longest-match heuristic, pure function."""
from __future__ import annotations

import pytest

from weight_ocr.extraction.extractor import ExtractedWeight, extract_weight, normalize_text


def test_normalize_collapses_whitespace() -> None:
    assert normalize_text("  12 \n\t 34  \r\n") == "12 34"


def test_stray_fragment_loses_to_full_reading() -> None:
    result = extract_weight("1\n1626")
    assert result == ExtractedWeight(value="1626", confidence=0.9)


def test_comma_decimal_normalized_to_dot() -> None:
    result = extract_weight("162,6 kg")
    assert result.value == "162.6"
    assert result.confidence == 0.95


def test_no_number_returns_normalized_text() -> None:
    result = extract_weight("ERROR")
    assert result == ExtractedWeight(value="ERROR", confidence=0.5)


def test_no_number_fallback_is_whitespace_normalized() -> None:
    result = extract_weight("  kg \n  kg ")
    assert result.value == "kg kg"
    assert result.confidence == 0.5


def test_empty_text_falls_back_to_empty_value() -> None:
    result = extract_weight("")
    assert result.value == ""
    assert result.confidence == 0.5


def test_decimal_beats_longer_whole_number() -> None:
    result = extract_weight("123456 1.5")
    assert result.value == "1.5"
    assert result.confidence == 0.95


def test_longest_decimal_wins() -> None:
    assert extract_weight("1.5\n125.50 kg").value == "125.50"


def test_decimal_tie_goes_to_first_occurrence() -> None:
    assert extract_weight("12.5 34,7").value == "12.5"


def test_whole_number_tie_goes_to_first_occurrence() -> None:
    assert extract_weight("42 kg 17").value == "42"


def test_noise_characters_around_digits() -> None:
    result = extract_weight("~~ 0.845kg ..")
    assert result.value == "0.845"


@pytest.mark.parametrize("text", ["1\n1626", "162,6 kg", "ERROR", " 7 . 5 "])
def test_extraction_is_deterministic(text: str) -> None:
    assert extract_weight(text) == extract_weight(text)
