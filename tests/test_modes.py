import pytest

from netgraph import modes
from netgraph.counters import InterfaceCounters

PREV = InterfaceCounters(rx_bytes=100, tx_bytes=1000)
CUR = InterfaceCounters(rx_bytes=600, tx_bytes=3000)


def test_builtin_modes():
    assert modes.REGISTRY["combined"](PREV, CUR) == 2500
    assert modes.REGISTRY["transmit"](PREV, CUR) == 2000
    assert modes.REGISTRY["receive"](PREV, CUR) == 500


def test_counter_reset_counts_as_idle():
    reset = InterfaceCounters(rx_bytes=0, tx_bytes=0)
    assert modes.REGISTRY["combined"](CUR, reset) == 0


@pytest.mark.parametrize("name, canonical", [
    ("combined", "combined"), ("both", "combined"), ("total", "combined"),
    ("tx", "transmit"), ("rx", "receive"),
])
def test_resolve_aliases(name, canonical):
    assert modes.resolve(name) == canonical


def test_resolve_unknown():
    with pytest.raises(KeyError):
        modes.resolve("sideways")


def test_choices_include_aliases():
    assert {"combined", "transmit", "receive", "tx", "rx"} <= set(modes.choices())
