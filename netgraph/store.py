"""SeriesStore: per-interface time series shared by the sampler and renderer."""

from __future__ import annotations

import threading

# (elapsed_seconds, rate_bytes_per_second)
Point = tuple[float, float]
Snapshot = dict[str, tuple[Point, ...]]


class SeriesStore:
    """Append-only mapping of interface name → time-ordered points.

    One lock guards the whole mapping. Writers hold it for a single push and
    readers for a single copy, so a snapshot never contains a half-written
    point and no lock is held while drawing.

    History is kept for the whole process lifetime; nothing is evicted.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._series: dict[str, list[Point]] = {}

    def ensure(self, name: str) -> bool:
        """Create an empty series for name. Returns True if it was new."""
        with self._lock:
            if name in self._series:
                return False
            self._series[name] = []
            return True

    def append(self, name: str, point: Point) -> None:
        ts, rate = float(point[0]), float(point[1])
        if rate < 0:
            raise ValueError(f"negative rate for {name!r}: {rate}")
        with self._lock:
            series = self._series.setdefault(name, [])
            if series and ts <= series[-1][0]:
                raise ValueError(
                    f"timestamp {ts} for {name!r} does not follow {series[-1][0]}")
            series.append((ts, rate))

    def snapshot(self) -> Snapshot:
        with self._lock:
            return {name: tuple(points) for name, points in self._series.items()}

    def names(self) -> list[str]:
        with self._lock:
            return sorted(self._series)

    def last_timestamp(self) -> float:
        with self._lock:
            return max((s[-1][0] for s in self._series.values() if s), default=0.0)

    def __len__(self) -> int:
        with self._lock:
            return len(self._series)
