"""In-memory aggregate state shared by the ingestion pipeline and the console.

The aggregator owns three mappings and a stats record, all guarded by a
single coarse lock. Anything that reads or writes them, console commands and
ingestion alike, must hold `lock` for the whole operation:

    with aggregator.lock:
        snapshot = dict(aggregator.counters)

The lock is a `threading.Lock` so the ingestion path may run on its own
threads while console sessions run on the event loop. Critical sections never
await or do I/O, which keeps the event loop stall bounded.
"""

from __future__ import annotations

import threading
from datetime import datetime, timezone
from typing import Dict, List, Optional

from shared.logging.logger import get_logger
from statsd_console.domain.models import AggregatorStats

logger = get_logger("aggregator")


def _now() -> datetime:
    return datetime.now(timezone.utc)


class MetricAggregator:
    def __init__(self):
        self.lock = threading.Lock()
        self.counters: Dict[str, float] = {}
        self.timers: Dict[str, List[float]] = {}
        self.gauges: Dict[str, float] = {}
        self.stats = AggregatorStats()

    # Ingestion-side helpers. Each takes the lock itself.

    def add_counter(self, name: str, value: float = 1) -> None:
        with self.lock:
            self.counters[name] = self.counters.get(name, 0) + value
            self.stats.last_message = _now()

    def add_timer(self, name: str, value: float) -> None:
        with self.lock:
            self.timers.setdefault(name, []).append(value)
            self.stats.last_message = _now()

    def set_gauge(self, name: str, value: float) -> None:
        with self.lock:
            self.gauges[name] = value
            self.stats.last_message = _now()

    def record_bad_line(self) -> None:
        with self.lock:
            self.stats.bad_lines += 1

    def record_flush(self, error: Optional[str] = None) -> None:
        """Note a flush attempt; a successful flush clears the previous error."""
        with self.lock:
            if error:
                self.stats.last_flush_error = error
            else:
                self.stats.last_flush = _now()
                self.stats.last_flush_error = ""

    def reset_after_flush(self) -> None:
        """Start a new interval: counters go to zero, timers empty, gauges kept."""
        with self.lock:
            for name in self.counters:
                self.counters[name] = 0
            dropped = sum(len(samples) for samples in self.timers.values())
            self.timers.clear()
        logger.debug("aggregator_interval_reset", extra={"timer_samples": dropped})
