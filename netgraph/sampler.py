"""RateSampler: background thread turning cumulative counters into rates."""

from __future__ import annotations

import logging
import threading
from typing import Callable, Protocol

from netgraph import modes
from netgraph.counters import CounterError, InterfaceCounters
from netgraph.context import DashboardContext

logger = logging.getLogger(__name__)


class CounterSource(Protocol):
    def refresh(self) -> dict[str, InterfaceCounters]: ...


class RateSampler:
    """Polls a CounterSource every interval and appends rates to the store.

    Lifecycle:
        1. prime() takes the first counter baseline (start() does it too)
        2. start() spawns the sampler thread
        3. each tick: refresh, difference, append, wait one interval
        4. setting context.stop ends the loop after the in-flight tick;
           join() waits for the thread

    The loop is fixed-delay: a slow refresh pushes later ticks back and the
    drift is not corrected. rate = delta_bytes / interval, matching the
    nominal sampling period rather than the measured one.
    """

    def __init__(self, context: DashboardContext, source: CounterSource,
                 clock: Callable[[], float] | None = None):
        self.context = context
        self.source = source
        self.interval_s = context.settings.interval_s
        self._delta = modes.REGISTRY[context.settings.mode]
        self._clock = clock or context.elapsed
        self._prev: dict[str, InterfaceCounters] = {}
        self._primed = False
        self._thread: threading.Thread | None = None

    # ---- sampling ----

    def prime(self) -> None:
        """Record a counter baseline without appending any points."""
        counters = self._refresh()
        if counters:
            for name in counters:
                self._see(name)
            self._prev = dict(counters)
        self._primed = True

    def tick(self) -> int:
        """Run one sampling step. Returns the number of points appended."""
        counters = self._refresh()
        if not counters:
            return 0

        now = self._clock()
        appended = 0
        for name, cur in counters.items():
            prev = self._prev.get(name)
            if prev is None:
                # first sight: baseline only, the rate starts next tick
                self._see(name)
                continue
            rate = self._delta(prev, cur) / self.interval_s
            try:
                self.context.store.append(name, (now, rate))
            except ValueError:
                logger.warning("dropped sample for %s at %.3fs (clock did not advance)", name, now)
                continue
            appended += 1
        self._prev.update(counters)
        return appended

    def _refresh(self) -> dict[str, InterfaceCounters]:
        try:
            return self.source.refresh()
        except (CounterError, OSError) as exc:
            logger.debug("skipping tick: %s", exc)
            return {}

    def _see(self, name: str) -> None:
        if self.context.store.ensure(name):
            logger.info("new interface: %s", name)

    # ---- thread ----

    def run(self) -> None:
        if not self._primed:
            self.prime()
        # A fresh baseline needs one full interval before the first rate.
        stop = self.context.stop
        stop.wait(self.interval_s)
        while not stop.is_set():
            try:
                self.tick()
            except Exception:
                logger.exception("sampler tick failed, skipping")
            stop.wait(self.interval_s)
        logger.info("sampler stopped")

    def start(self) -> None:
        if self._thread is not None:
            raise RuntimeError("sampler already started")
        self._thread = threading.Thread(target=self.run, name="netgraph-sampler",
                                        daemon=True)
        self._thread.start()
        logger.info("sampler started (interval=%.3fs, mode=%s)",
                    self.interval_s, self.context.settings.mode)

    def stop(self) -> None:
        self.context.stop.set()

    def join(self, timeout: float | None = None) -> bool:
        """Wait for the sampler thread. Returns True once it has exited."""
        if self._thread is None:
            return False
        self._thread.join(timeout)
        return not self._thread.is_alive()

    def is_alive(self) -> bool:
        return self._thread is not None and self._thread.is_alive()
