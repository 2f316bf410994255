"""In-memory ring buffer of recent readings, used by the dashboard."""
from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class ReadingRecord:
    weight: str
    confidence: float
    raw_text: str
    filename: str
    uploaded_at: datetime
    metadata: dict[str, Any] = field(default_factory=dict)


class HistoryStore:
    def __init__(self, max_size: int = 50) -> None:
        self._records: deque[ReadingRecord] = deque(maxlen=max_size)

    @property
    def max_size(self) -> int:
        return self._records.maxlen or 0

    def add(self, record: ReadingRecord) -> None:
        self._records.append(record)

    def recent(self, limit: int | None = None) -> list[ReadingRecord]:
        """Newest first."""
        records = list(reversed(self._records))
        return records if limit is None else records[:limit]

    def clear(self) -> None:
        self._records.clear()

    def __len__(self) -> int:
        return len(self._records)
