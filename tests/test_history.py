from __future__ import annotations

from datetime import datetime, timezone

from weight_ocr.history.store import HistoryStore, ReadingRecord


def _record(weight: str) -> ReadingRecord:
    return ReadingRecord(
        weight=weight,
        confidence=0.9,
        raw_text=weight,
        filename=f"weight-{weight}.png",
        uploaded_at=datetime.now(timezone.utc),
    )


def test_recent_is_newest_first() -> None:
    store = HistoryStore(max_size=3)
    for w in ("1", "2", "3"):
        store.add(_record(w))
    assert [r.weight for r in store.recent()] == ["3", "2", "1"]


def test_ring_buffer_drops_oldest() -> None:
    store = HistoryStore(max_size=2)
    for w in ("1", "2", "3"):
        store.add(_record(w))
    assert len(store) == 2
    assert [r.weight for r in store.recent()] == ["3", "2"]


def test_recent_limit_and_clear() -> None:
    store = HistoryStore(max_size=5)
    for w in ("1", "2", "3"):
        store.add(_record(w))
    assert [r.weight for r in store.recent(1)] == ["3"]
    store.clear()
    assert store.recent() == []
    assert store.max_size == 5
