"""Metrics sinks for observed toggle maps.

``StatsReceiver`` is the narrow contract togglestack records against; host
applications adapt their own metrics library to it. ``NullStatsReceiver``
discards everything and ``InMemoryStatsReceiver`` keeps values in process
(useful for tests and the CLI).
"""
from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from typing import Callable, Dict, Tuple

Names = Tuple[str, ...]


class Counter(ABC):
    @abstractmethod
    def incr(self, delta: int = 1) -> None:
        ...


class StatsReceiver(ABC):
    """Records counters and gauges under hierarchical names."""

    @abstractmethod
    def counter(self, *names: str) -> Counter:
        ...

    @abstractmethod
    def add_gauge(self, *names: str, fn: Callable[[], float]) -> None:
        ...

    def scope(self, *names: str) -> "StatsReceiver":
        """Return a receiver that prefixes every name with ``names``."""
        if not names:
            return self
        return ScopedStatsReceiver(self, tuple(names))


class ScopedStatsReceiver(StatsReceiver):
    def __init__(self, underlying: StatsReceiver, prefix: Names) -> None:
        self.underlying = underlying
        self.prefix = prefix

    def counter(self, *names: str) -> Counter:
        return self.underlying.counter(*self.prefix, *names)

    def add_gauge(self, *names: str, fn: Callable[[], float]) -> None:
        self.underlying.add_gauge(*self.prefix, *names, fn=fn)

    def scope(self, *names: str) -> StatsReceiver:
        if not names:
            return self
        return ScopedStatsReceiver(self.underlying, self.prefix + tuple(names))


class _NullCounter(Counter):
    def incr(self, delta: int = 1) -> None:
        return None


class NullStatsReceiver(StatsReceiver):
    _COUNTER = _NullCounter()

    def counter(self, *names: str) -> Counter:
        return self._COUNTER

    def add_gauge(self, *names: str, fn: Callable[[], float]) -> None:
        return None


class _InMemoryCounter(Counter):
    def __init__(self, receiver: "InMemoryStatsReceiver", names: Names) -> None:
        self._receiver = receiver
        self._names = names

    def incr(self, delta: int = 1) -> None:
        with self._receiver._lock:
            counters = self._receiver.counters
            counters[self._names] = counters.get(self._names, 0) + delta


class InMemoryStatsReceiver(StatsReceiver):
    """Thread-safe in-process metrics store keyed by name tuples."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.counters: Dict[Names, int] = {}
        self.gauges: Dict[Names, Callable[[], float]] = {}

    def counter(self, *names: str) -> Counter:
        return _InMemoryCounter(self, tuple(names))

    def add_gauge(self, *names: str, fn: Callable[[], float]) -> None:
        with self._lock:
            self.gauges[tuple(names)] = fn

    def counter_value(self, *names: str) -> int:
        with self._lock:
            return self.counters.get(tuple(names), 0)

    def gauge_value(self, *names: str) -> float | None:
        with self._lock:
            fn = self.gauges.get(tuple(names))
        return None if fn is None else float(fn())


__all__ = [
    "Counter",
    "StatsReceiver",
    "ScopedStatsReceiver",
    "NullStatsReceiver",
    "InMemoryStatsReceiver",
]
