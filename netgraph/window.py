"""Visible time domain and value range for the chart."""

from __future__ import annotations

from bisect import bisect_left
from dataclasses import dataclass
from typing import Sequence

from netgraph.store import Point, Snapshot

# Smallest y extent drawn when every visible rate is zero.
MIN_Y_EXTENT = 1.0


@dataclass(frozen=True)
class Window:
    start: float
    end: float
    max_rate: float

    @property
    def x_bounds(self) -> tuple[float, float]:
        return self.start, self.end

    def y_bounds(self) -> tuple[float, float]:
        """(0, max_rate), widened so the axis never has zero height."""
        return 0.0, max(self.max_rate, MIN_Y_EXTENT)


def visible(series: Sequence[Point], start: float) -> Sequence[Point]:
    """Suffix of a time-ordered series with timestamp >= start."""
    idx = bisect_left(series, start, key=lambda p: p[0])
    return series[idx:]


def select_window(snapshot: Snapshot, duration: float) -> Window:
    """Anchor a window of `duration` seconds at the newest sample.

    The window spans at least `duration` seconds and never starts before 0.
    Only points inside it count towards max_rate.
    """
    if duration <= 0:
        raise ValueError(f"duration must be positive, got {duration}")

    last_ts = max((s[-1][0] for s in snapshot.values() if s), default=0.0)
    end = max(duration, last_ts)
    start = max(0.0, end - duration)

    max_rate = 0.0
    for series in snapshot.values():
        for _, rate in visible(series, start):
            if rate > max_rate:
                max_rate = rate
    return Window(start=start, end=end, max_rate=max_rate)
