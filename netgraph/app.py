"""Dashboard main loop and command-line entry point."""

from __future__ import annotations

import logging
import signal
import sys
import threading
import time
from typing import Callable, TextIO

from netgraph import chart
from netgraph.config import Settings, parse_settings
from netgraph.context import DashboardContext
from netgraph.controls import InputController
from netgraph.counters import CounterError, NetCounters
from netgraph.keyboard import KeyboardHandler, TerminalError
from netgraph.sampler import CounterSource, RateSampler
from netgraph.window import select_window

logger = logging.getLogger(__name__)

HIDE_CURSOR = "\033[?25l"
SHOW_CURSOR = "\033[?25h"
ENTER_ALT_SCREEN = "\033[?1049h"
LEAVE_ALT_SCREEN = "\033[?1049l"

# The sampler gets this many intervals to notice the stop flag.
JOIN_INTERVALS = 4
MIN_JOIN_TIMEOUT_S = 1.0


class Dashboard:
    """Single-threaded render loop: poll a key, recompute the window, redraw.

    The sampler thread is the only writer to context.store; this loop only
    takes snapshots of it and is the only code that changes the display
    duration.
    """

    def __init__(self, context: DashboardContext, source: CounterSource, *,
                 keyboard: KeyboardHandler | None = None,
                 out: TextIO | None = None,
                 draw: Callable[..., None] = chart.draw):
        self.context = context
        self.settings: Settings = context.settings
        self.sampler = RateSampler(context, source)
        self.controls = InputController(context.duration, zoom=self.settings.zoom)
        self.keyboard = keyboard or KeyboardHandler()
        self.out = out if out is not None else sys.stdout
        self._draw_fn = draw
        self._drawing = False

    # ---- rendering ----

    def frame(self) -> chart.Frame:
        snapshot = self.context.store.snapshot()
        duration = self.context.duration.seconds
        window = select_window(snapshot, duration)
        return chart.build_frame(snapshot, window, duration, self.settings.mode)

    def draw(self) -> None:
        # plotext keeps one global figure; a SIGWINCH redraw must not start
        # while another draw is building it
        if self._drawing:
            return
        self._drawing = True
        try:
            self._draw_fn(self.frame(), self.out, border=self.settings.frame)
        finally:
            self._drawing = False

    # ---- main loop ----

    def _loop(self) -> None:
        refresh = self.settings.refresh_s
        last_tick = time.monotonic()
        while not self.controls.quit_requested:
            self.draw()
            timeout = max(0.0, refresh - (time.monotonic() - last_tick))
            self.controls.handle(self.keyboard.get_key(timeout=timeout))
            if time.monotonic() - last_tick >= refresh:
                last_tick = time.monotonic()

    def _screen(self, enter: bool) -> None:
        if enter:
            self.out.write(ENTER_ALT_SCREEN + HIDE_CURSOR)
        else:
            self.out.write(SHOW_CURSOR + LEAVE_ALT_SCREEN)
        self.out.flush()

    def _run_interactive(self) -> None:
        with self.keyboard.raw_mode():
            self._screen(True)
            on_main = threading.current_thread() is threading.main_thread()
            if on_main:
                prev_handler = signal.signal(signal.SIGWINCH, lambda signum, frame: self.draw())
            try:
                self._loop()
            finally:
                if on_main:
                    signal.signal(signal.SIGWINCH, prev_handler)
                self._screen(False)

    def shutdown(self) -> bool:
        """Stop the sampler and wait for it. Returns True if it exited."""
        self.sampler.stop()
        timeout = max(MIN_JOIN_TIMEOUT_S, JOIN_INTERVALS * self.settings.interval_s)
        joined = self.sampler.join(timeout)
        if not joined:
            logger.error("sampler thread did not exit within %.1fs", timeout)
        return joined

    def run(self) -> int:
        """Run until quit. Returns the process exit code."""
        self.sampler.prime()
        self.sampler.start()
        try:
            self._run_interactive()
        except KeyboardInterrupt:
            logger.info("interrupted")
        finally:
            joined = self.shutdown()
        if not joined:
            print("Error: sampler thread could not be joined", file=sys.stderr)
            return 1
        return 0


def configure_logging(settings: Settings) -> None:
    root = logging.getLogger("netgraph")
    for old in root.handlers[:]:
        root.removeHandler(old)
        old.close()
    if settings.log_file:
        handler: logging.Handler = logging.FileHandler(settings.log_file)
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s [%(threadName)s] %(name)s: %(message)s"))
        root.setLevel(settings.log_level)
    else:
        handler = logging.NullHandler()
    root.addHandler(handler)
    root.propagate = False


def main(argv: list[str] | None = None) -> int:
    settings = parse_settings(argv)
    configure_logging(settings)

    source = NetCounters(interface=settings.interface, exclude=settings.exclude)
    try:
        source.check()
    except CounterError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    dashboard = Dashboard(DashboardContext(settings), source)
    try:
        return dashboard.run()
    except TerminalError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
