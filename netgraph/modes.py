"""Rate modes: which cumulative counters feed an interface's rate.

Import this module to get the built-in modes registered in REGISTRY.
"""

from __future__ import annotations

from typing import Callable

from netgraph.counters import InterfaceCounters

# mode name → function returning the byte delta between two readings
RateMode = Callable[[InterfaceCounters, InterfaceCounters], int]

REGISTRY: dict[str, RateMode] = {}

# Short aliases → canonical name
ALIASES: dict[str, str] = {
    "both": "combined",
    "total": "combined",
    "tx": "transmit",
    "rx": "receive",
}

DEFAULT_MODE = "combined"


def register(name: str) -> Callable[[RateMode], RateMode]:
    """Decorator that adds a rate mode to the registry."""
    def wrap(fn: RateMode) -> RateMode:
        REGISTRY[name] = fn
        return fn
    return wrap


def resolve(name: str) -> str:
    """Resolve a mode name, supporting aliases. Raises KeyError if unknown."""
    canonical = ALIASES.get(name, name)
    if canonical not in REGISTRY:
        raise KeyError(name)
    return canonical


def choices() -> list[str]:
    return sorted(set(REGISTRY) | set(ALIASES))


def _delta(cur: int, prev: int) -> int:
    # counters reset when an interface is re-created; treat as idle
    return max(0, cur - prev)


@register("combined")
def combined(prev: InterfaceCounters, cur: InterfaceCounters) -> int:
    return _delta(cur.tx_bytes, prev.tx_bytes) + _delta(cur.rx_bytes, prev.rx_bytes)


@register("transmit")
def transmit(prev: InterfaceCounters, cur: InterfaceCounters) -> int:
    return _delta(cur.tx_bytes, prev.tx_bytes)


@register("receive")
def receive(prev: InterfaceCounters, cur: InterfaceCounters) -> int:
    return _delta(cur.rx_bytes, prev.rx_bytes)
