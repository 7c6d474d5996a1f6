from __future__ import annotations

import pytest

from netgraph.config import Settings
from netgraph.context import DashboardContext
from netgraph.counters import InterfaceCounters


class FakeCounters:
    """Counter source that replays a scripted list of refresh results.

    An entry may be a dict (returned), an exception (raised) or None (empty
    refresh). The last entry repeats once the script runs out.
    """

    def __init__(self, script):
        self.script = list(script)
        self.calls = 0

    def refresh(self):
        idx = min(self.calls, len(self.script) - 1)
        self.calls += 1
        entry = self.script[idx]
        if isinstance(entry, Exception):
            raise entry
        return dict(entry or {})


def counters(**ifaces):
    """counters(eth0=(rx, tx), ...) → {name: InterfaceCounters}"""
    return {name: InterfaceCounters(rx_bytes=rx, tx_bytes=tx) for name, (rx, tx) in ifaces.items()}


@pytest.fixture
def settings():
    return Settings(interval_s=0.1, refresh_s=0.05, window_s=60.0)


@pytest.fixture
def context(settings):
    return DashboardContext(settings)
