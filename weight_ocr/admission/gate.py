"""Admission gate: fail-fast concurrency limiter around OCR recognition.

OCR is CPU and memory heavy, so only ``max_concurrent`` recognitions may run
at once. Excess callers are rejected immediately instead of being queued;
they are expected to retry.

Usage:
    gate = AdmissionGate(max_concurrent=2)
    with gate.admit():
        result = await engine.extract_text(image_bytes)
"""
from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)


class AdmissionRejected(Exception):
    """Raised by ``AdmissionGate.admit`` when every slot is taken."""

    def __init__(self, in_flight: int, limit: int) -> None:
        super().__init__(f"Admission rejected: {in_flight}/{limit} recognitions in flight")
        self.in_flight = in_flight
        self.limit = limit


@dataclass(eq=False)
class AdmissionTicket:
    """Handle for one granted slot. Must be released exactly once."""

    gate: AdmissionGate
    released: bool = field(default=False, init=False)


class AdmissionGate:
    def __init__(self, max_concurrent: int = 2) -> None:
        if max_concurrent < 1:
            raise ValueError(f"max_concurrent must be >= 1, got {max_concurrent}")
        self._limit = max_concurrent
        self._in_flight = 0
        self._lock = threading.Lock()

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def in_flight(self) -> int:
        return self._in_flight

    def try_enter(self) -> AdmissionTicket | None:
        """Take a slot if one is free. Returns ``None`` when the gate is full."""
        with self._lock:
            if self._in_flight >= self._limit:
                return None
            self._in_flight += 1
        return AdmissionTicket(gate=self)

    def exit(self, ticket: AdmissionTicket) -> None:
        with self._lock:
            if ticket.gate is not self:
                raise RuntimeError("Ticket was issued by a different admission gate")
            if ticket.released:
                raise RuntimeError("Admission ticket already released")
            ticket.released = True
            self._in_flight -= 1

    @contextmanager
    def admit(self) -> Iterator[AdmissionTicket]:
        ticket = self.try_enter()
        if ticket is None:
            in_flight, limit = self._in_flight, self._limit
            logger.info("admission_rejected", extra={"in_flight": in_flight, "limit": limit})
            raise AdmissionRejected(in_flight, limit)
        try:
            yield ticket
        finally:
            self.exit(ticket)
