from __future__ import annotations

import time
from typing import Protocol

NANOS_PER_MILLI = 1_000_000
NANOS_PER_SECOND = 1_000_000_000


class MonotonicClock(Protocol):
    """
    Fonte de tempo monotônica.

    Só a diferença entre duas leituras tem significado; o epoch é arbitrário.
    """

    def now_ns(self) -> int:
        ...


class SystemMonotonicClock:
    def now_ns(self) -> int:
        return time.monotonic_ns()


class ManualClock:
    """
    Relógio controlado à mão, para testes sem sleep.

        clock = ManualClock()
        clock.advance(millis=250)
        assert clock.now_ns() == 250_000_000
    """

    def __init__(self, start_ns: int = 0) -> None:
        self._now_ns = start_ns

    def now_ns(self) -> int:
        return self._now_ns

    def advance(self, *, seconds: float = 0, millis: int = 0) -> None:
        step = int(seconds * NANOS_PER_SECOND) + millis * NANOS_PER_MILLI
        if step < 0:
            raise ValueError("monotonic clock cannot go backwards")
        self._now_ns += step
