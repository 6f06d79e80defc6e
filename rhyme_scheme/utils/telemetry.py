"""Phase timings and counters for the most recent analysis."""

from __future__ import annotations

import logging
import threading
import time
from contextlib import contextmanager
from copy import deepcopy
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional

from .observability import get_logger

TelemetryListener = Callable[[str, Dict[str, Any]], None]


@dataclass
class PhaseReport:
    """What one analysis recorded."""

    trace_id: int = 0
    name: Optional[str] = None
    timings: Dict[str, float] = field(default_factory=dict)
    counters: Dict[str, float] = field(default_factory=dict)
    metadata: Dict[str, Any] = field(default_factory=dict)


class PhaseTelemetry:
    """Records the phases of one analysis at a time.

    Each ``start_trace`` replaces the current :class:`PhaseReport`, so
    ``snapshot()`` describes the latest analysis only. Listeners are called
    with ``(event, payload)`` for every recorded value.
    """

    def __init__(
        self,
        time_fn: Optional[Callable[[], float]] = None,
        *,
        listeners: Optional[Iterable[TelemetryListener]] = None,
    ) -> None:
        self._clock = time_fn or time.perf_counter
        self._guard = threading.Lock()
        self._report = PhaseReport()
        self._subscribers: List[TelemetryListener] = list(listeners or ())

    def _emit(self, event: str, **payload: Any) -> None:
        with self._guard:
            subscribers = list(self._subscribers)
        for subscriber in subscribers:
            subscriber(event, payload)

    def now(self) -> float:
        return float(self._clock())

    def start_trace(self, name: str) -> int:
        with self._guard:
            self._report = PhaseReport(trace_id=self._report.trace_id + 1, name=name)
            trace_id = self._report.trace_id
        self._emit("trace_started", trace_id=trace_id, name=name)
        return trace_id

    @contextmanager
    def phase(self, name: str) -> Iterator[None]:
        """Add the duration of the block to the timing of ``name``."""

        began = self.now()
        try:
            yield
        finally:
            elapsed = max(0.0, self.now() - began)
            with self._guard:
                timings = self._report.timings
                timings[name] = timings.get(name, 0.0) + elapsed
            self._emit("timing", name=name, duration=elapsed)

    def increment(self, name: str, amount: float = 1.0) -> None:
        with self._guard:
            counters = self._report.counters
            counters[name] = counters.get(name, 0.0) + float(amount)
            total = counters[name]
        self._emit("counter", name=name, delta=float(amount), value=total)

    def annotate(self, key: str, value: Any) -> None:
        with self._guard:
            self._report.metadata[key] = value
        self._emit("metadata", key=key, value=value)

    def snapshot(self) -> Dict[str, Any]:
        with self._guard:
            report = deepcopy(self._report)
        return {
            "trace_id": report.trace_id,
            "name": report.name,
            "timings": report.timings,
            "counters": report.counters,
            "metadata": report.metadata,
        }

    def add_listener(self, listener: TelemetryListener) -> None:
        with self._guard:
            self._subscribers.append(listener)

    def remove_listener(self, listener: TelemetryListener) -> None:
        with self._guard:
            self._subscribers = [s for s in self._subscribers if s is not listener]


class TelemetryLogger:
    """Telemetry listener writing one log line per event."""

    def __init__(self, *, logger=None, level: int = logging.DEBUG) -> None:
        self._logger = logger or get_logger(__name__, component="telemetry")
        self._level = level

    def __call__(self, event: str, payload: Dict[str, Any]) -> None:
        if not self._logger.isEnabledFor(self._level):
            return
        subject = payload.get("name") or payload.get("key") or "event"
        self._logger.log(
            self._level,
            f"Telemetry {event}: {subject}",
            context={"telemetry.event": event, **payload},
        )


__all__ = ["PhaseReport", "PhaseTelemetry", "TelemetryListener", "TelemetryLogger"]
