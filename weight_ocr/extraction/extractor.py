"""Weight extraction from raw OCR text.

Seven-segment displays often come back from OCR as several fragments, e.g. a
stray ``1`` from the decimal point next to the real reading ``1626``. The
longest numeric run is taken as the reading; decimals win over whole numbers.
"""
from __future__ import annotations

import re
from dataclasses import dataclass

_WHITESPACE = re.compile(r"\s+")
_DECIMAL = re.compile(r"\d+[.,]\d+")
_WHOLE = re.compile(r"\d+")

DECIMAL_CONFIDENCE = 0.95
WHOLE_CONFIDENCE = 0.9
FALLBACK_CONFIDENCE = 0.5


@dataclass(frozen=True)
class ExtractedWeight:
    value: str
    confidence: float  # 0.0 to 1.0, heuristic only


def normalize_text(text: str) -> str:
    return _WHITESPACE.sub(" ", text).strip()


def _longest(matches: list[str]) -> str:
    # max() keeps the first of several equally long candidates
    return max(matches, key=len)


def extract_weight(text: str) -> ExtractedWeight:
    """Pick the most plausible weight reading out of *text*.

    Priority: longest decimal (``,`` normalized to ``.``), then longest whole
    number, then the normalized text itself with low confidence.
    """
    normalized = normalize_text(text)

    decimals = _DECIMAL.findall(normalized)
    if decimals:
        return ExtractedWeight(value=_longest(decimals).replace(",", "."), confidence=DECIMAL_CONFIDENCE)

    wholes = _WHOLE.findall(normalized)
    if wholes:
        return ExtractedWeight(value=_longest(wholes), confidence=WHOLE_CONFIDENCE)

    return ExtractedWeight(value=normalized, confidence=FALLBACK_CONFIDENCE)
