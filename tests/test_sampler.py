import itertools
import time

import pytest

from conftest import FakeCounters, counters
from netgraph.config import Settings
from netgraph.context import DashboardContext
from netgraph.counters import CounterError
from netgraph.sampler import RateSampler


def make_sampler(script, mode="combined", interval_s=0.1):
    context = DashboardContext(Settings(interval_s=interval_s, mode=mode))
    clock = itertools.count(1).__next__
    source = FakeCounters(script)
    return RateSampler(context, source, clock=lambda: float(clock())), context, source


def test_rate_is_delta_over_interval():
    sampler, context, _ = make_sampler([
        counters(eth0=(0, 0)),
        counters(eth0=(0, 1000)),
    ], mode="transmit")
    sampler.prime()
    assert sampler.tick() == 1
    assert context.store.snapshot() == {"eth0": ((1.0, 10000.0),)}


def test_combined_and_receive_modes():
    script = [counters(eth0=(0, 0)), counters(eth0=(300, 200))]

    sampler, context, _ = make_sampler(script, mode="combined")
    sampler.prime()
    sampler.tick()
    assert context.store.snapshot()["eth0"][0][1] == pytest.approx(5000.0)

    sampler, context, _ = make_sampler(script, mode="receive")
    sampler.prime()
    sampler.tick()
    assert context.store.snapshot()["eth0"][0][1] == pytest.approx(3000.0)


def test_failed_refresh_is_a_noop_tick():
    sampler, context, _ = make_sampler([
        counters(eth0=(0, 0)),
        CounterError("gone"),
        None,
        OSError("io"),
        counters(eth0=(0, 100)),
    ], mode="transmit")
    sampler.prime()
    assert sampler.tick() == 0
    assert sampler.tick() == 0
    assert sampler.tick() == 0
    assert context.store.snapshot() == {"eth0": ()}
    assert sampler.tick() == 1
    (point,) = context.store.snapshot()["eth0"]
    assert point[1] == pytest.approx(1000.0)


def test_failed_prime_still_allows_sampling():
    sampler, context, _ = make_sampler([CounterError("boom"), counters(eth0=(0, 0)),
                                        counters(eth0=(0, 10))])
    sampler.prime()
    assert sampler.tick() == 0
    assert sampler.tick() == 1


def test_new_interface_gets_empty_series_then_points():
    sampler, context, _ = make_sampler([
        counters(eth0=(0, 0)),
        counters(eth0=(0, 0), wlan0=(50, 50)),
        counters(eth0=(0, 0), wlan0=(100, 100)),
    ])
    sampler.prime()
    assert sampler.tick() == 1
    assert context.store.snapshot()["wlan0"] == ()
    assert sampler.tick() == 2
    assert context.store.snapshot()["wlan0"] == ((2.0, pytest.approx(1000.0)),)


def test_counter_reset_yields_zero_rate():
    sampler, context, _ = make_sampler([counters(eth0=(500, 500)), counters(eth0=(0, 0))])
    sampler.prime()
    sampler.tick()
    assert context.store.snapshot()["eth0"] == ((1.0, 0.0),)


def test_timestamps_strictly_increase():
    script = [counters(eth0=(i * 10, i * 10)) for i in range(20)]
    sampler, context, _ = make_sampler(script)
    sampler.prime()
    for _ in range(19):
        sampler.tick()
    stamps = [t for t, _ in context.store.snapshot()["eth0"]]
    assert len(stamps) == 19
    assert all(a < b for a, b in zip(stamps, stamps[1:]))


def test_stalled_clock_drops_point():
    context = DashboardContext(Settings(interval_s=0.1))
    sampler = RateSampler(context, FakeCounters([counters(eth0=(0, 0))]), clock=lambda: 5.0)
    sampler.prime()
    assert sampler.tick() == 1
    assert sampler.tick() == 0
    assert len(context.store.snapshot()["eth0"]) == 1


def test_thread_samples_and_stops_within_one_interval():
    context = DashboardContext(Settings(interval_s=0.05))
    source = FakeCounters([counters(eth0=(i, i)) for i in range(1000)])
    sampler = RateSampler(context, source)
    sampler.start()
    deadline = time.monotonic() + 5
    while not context.store.snapshot().get("eth0") and time.monotonic() < deadline:
        time.sleep(0.01)
    assert context.store.snapshot()["eth0"]

    stop_at = time.monotonic()
    sampler.stop()
    assert sampler.join(timeout=2)
    # one interval plus scheduling slack
    assert time.monotonic() - stop_at < 0.5
    assert not sampler.is_alive()


def test_start_twice_rejected():
    context = DashboardContext(Settings(interval_s=0.05))
    sampler = RateSampler(context, FakeCounters([{}]))
    sampler.start()
    try:
        with pytest.raises(RuntimeError):
            sampler.start()
    finally:
        sampler.stop()
        assert sampler.join(timeout=2)


def test_join_without_start():
    context = DashboardContext(Settings())
    assert RateSampler(context, FakeCounters([{}])).join(0.01) is False


def test_thread_survives_unexpected_tick_error():
    context = DashboardContext(Settings(interval_s=0.05))
    source = FakeCounters([counters(eth0=(0, 0)), ZeroDivisionError("bad counters")]
                          + [counters(eth0=(i, i)) for i in range(1, 1000)])
    sampler = RateSampler(context, source)
    sampler.start()
    deadline = time.monotonic() + 5
    while not context.store.snapshot().get("eth0") and time.monotonic() < deadline:
        time.sleep(0.01)
    try:
        assert sampler.is_alive()
        assert context.store.snapshot()["eth0"]
        assert source.calls >= 3
    finally:
        sampler.stop()
        assert sampler.join(timeout=2)
