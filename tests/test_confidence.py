from __future__ import annotations

import pytest

from weight_ocr.confidence.confidence import compute_confidence


def test_engine_confidence_scaled_by_heuristic() -> None:
    assert compute_confidence(88, 0.95) == pytest.approx(0.836)


def test_full_confidence() -> None:
    assert compute_confidence(100, 1.0) == 1.0


def test_zero_engine_confidence() -> None:
    assert compute_confidence(0, 0.9) == 0.0


@pytest.mark.parametrize("engine", [-5.0, 150.0])
def test_out_of_range_engine_confidence_is_clamped(engine: float) -> None:
    assert 0.0 <= compute_confidence(engine, 0.95) <= 1.0
