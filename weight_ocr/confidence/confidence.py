"""Confidence scoring.

The reported confidence is the OCR engine's own character-level confidence
(0 to 100) scaled to 0.0 to 1.0 and multiplied by the extraction heuristic's
confidence in the number it picked.
"""
from __future__ import annotations


def compute_confidence(engine_confidence: float, extraction_confidence: float) -> float:
    engine_score = max(0.0, min(100.0, engine_confidence)) / 100.0
    return max(0.0, min(1.0, engine_score * extraction_confidence))
