"""Shared state handed to both the sampler thread and the main loop.

Access rights:
  store     written by the sampler only, read by the main loop
  stop      set by the main loop, polled by the sampler
  duration  read and mutated by the main loop only
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field

from netgraph.config import Settings
from netgraph.store import SeriesStore


# Longest window the zoom keys can reach (one week).
MAX_DURATION_S = 7 * 24 * 3600.0


class DisplayDuration:
    """Width of the visible time window, in seconds. floor <= seconds <= ceiling."""

    def __init__(self, seconds: float, floor: float, ceiling: float = MAX_DURATION_S):
        if floor <= 0:
            raise ValueError(f"floor must be positive, got {floor}")
        self.floor = float(floor)
        self.ceiling = max(self.floor, float(ceiling))
        self._seconds = min(self.ceiling, max(self.floor, float(seconds)))

    @property
    def seconds(self) -> float:
        return self._seconds

    def double(self) -> float:
        self._seconds = min(self.ceiling, self._seconds * 2)
        return self._seconds

    def halve(self) -> float:
        self._seconds = max(self.floor, self._seconds / 2)
        return self._seconds

    def __repr__(self) -> str:
        return f"DisplayDuration({self._seconds:g}s)"


@dataclass
class DashboardContext:
    settings: Settings
    store: SeriesStore = field(default_factory=SeriesStore)
    stop: threading.Event = field(default_factory=threading.Event)
    started_at: float = field(default_factory=time.monotonic)
    duration: DisplayDuration = field(init=False)

    def __post_init__(self) -> None:
        self.duration = DisplayDuration(self.settings.window_s,
                                        floor=self.settings.interval_s)

    def elapsed(self) -> float:
        """Seconds since the context was created (monotonic clock)."""
        return time.monotonic() - self.started_at
