"""Per-interface cumulative byte counters, read from /proc/net/dev."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable

logger = logging.getLogger(__name__)

PROC_NET_DEV = "/proc/net/dev"


class CounterError(RuntimeError):
    """The counter source could not be read."""


@dataclass(frozen=True)
class InterfaceCounters:
    """Cumulative bytes since the interface came up."""
    rx_bytes: int
    tx_bytes: int


def parse_net_dev(text: str) -> dict[str, InterfaceCounters]:
    """Parse a /proc/net/dev table into {iface: InterfaceCounters}.

    Fields after "iface:" are 8 receive columns followed by 8 transmit
    columns; [0] is receive bytes and [8] is transmit bytes.
    """
    result = {}
    for line in text.splitlines():
        if ":" not in line:
            continue
        iface, data = line.split(":", 1)
        iface = iface.strip()
        parts = data.split()
        if not iface or len(parts) < 9:
            continue
        try:
            rx, tx = int(parts[0]), int(parts[8])
        except ValueError:
            continue
        result[iface] = InterfaceCounters(rx_bytes=rx, tx_bytes=tx)
    return result


class NetCounters:
    """Counter source for the sampler. Only the sampler thread calls refresh()."""

    def __init__(self, path: str = PROC_NET_DEV, *,
                 interface: str | None = None,
                 exclude: Iterable[str] = ()):
        self.path = path
        self._interface = interface
        self._excludes = set(exclude)

    def refresh(self) -> dict[str, InterfaceCounters]:
        try:
            with open(self.path) as f:
                text = f.read()
        except OSError as exc:
            raise CounterError(f"Cannot read {self.path}: {exc}") from exc

        counters = parse_net_dev(text)
        if self._interface:
            counters = {k: v for k, v in counters.items() if k == self._interface}
        return {k: v for k, v in counters.items() if k not in self._excludes}

    def check(self) -> None:
        """Raise CounterError unless the source can be read right now."""
        self.refresh()
        logger.debug("counter source %s is readable", self.path)
