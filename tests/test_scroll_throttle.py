import math

import pytest
from PySide6.QtTest import QTest

from pagegrid.utils import scroll_throttle as throttle_module
from pagegrid.utils.scroll_throttle import ScrollThrottle


class FakeClock:
    def __init__(self):
        self.now_ms = 0

    def monotonic(self):
        return self.now_ms / 1000.0


class FakeTimer:
    def __init__(self, clock):
        self._clock = clock
        self.started = []
        self.stop_calls = 0
        self.due_ms = None

    def start(self, delay):
        self.started.append(delay)
        self.due_ms = self._clock.now_ms + delay

    def stop(self):
        self.stop_calls += 1
        self.due_ms = None


@pytest.fixture
def clock(monkeypatch):
    clock = FakeClock()
    monkeypatch.setattr(throttle_module.time, "monotonic", clock.monotonic)
    return clock


def make_throttle(clock, interval_ms=100):
    fired = []
    throttle = ScrollThrottle(lambda offset: fired.append((clock.now_ms, offset)), interval_ms)
    timer = FakeTimer(clock)
    throttle._timer = timer
    return throttle, timer, fired


def advance(clock, timer, throttle, to_ms):
    """Move the clock forward, firing the parked call if its timer is due."""
    if timer.due_ms is not None and timer.due_ms <= to_ms:
        clock.now_ms = timer.due_ms
        timer.due_ms = None
        throttle._fire_pending()
    clock.now_ms = to_ms


def test_first_call_fires_immediately(qapp, clock):
    throttle, timer, fired = make_throttle(clock)

    throttle(10)

    assert fired == [(0, 10)]
    assert timer.started == []
    assert not throttle.has_pending


def test_call_inside_interval_is_deferred_for_remaining_delay(qapp, clock):
    throttle, timer, fired = make_throttle(clock)
    throttle(10)

    clock.now_ms = 30
    throttle(20)

    assert fired == [(0, 10)]
    assert timer.started == [70]
    assert throttle.has_pending


def test_later_call_supersedes_parked_arguments(qapp, clock):
    throttle, timer, fired = make_throttle(clock)
    throttle(10)
    clock.now_ms = 30
    throttle(20)
    clock.now_ms = 60
    throttle(30)

    assert timer.started == [70, 40]
    advance(clock, timer, throttle, 100)

    assert fired == [(0, 10), (100, 30)]
    assert not throttle.has_pending


def test_call_after_interval_fires_and_cancels_pending(qapp, clock):
    throttle, timer, fired = make_throttle(clock)
    throttle(10)
    clock.now_ms = 50
    throttle(20)

    # The timer never got the chance to fire before the next call arrives.
    timer.due_ms = None
    clock.now_ms = 150
    throttle(30)

    assert fired == [(0, 10), (150, 30)]
    assert not throttle.has_pending


def test_burst_is_bounded_and_keeps_last_offset(qapp, clock):
    throttle, timer, fired = make_throttle(clock)
    burst = [(t, t * 3) for t in range(0, 251, 10)]

    for t, offset in burst:
        advance(clock, timer, throttle, t)
        throttle(offset)
    advance(clock, timer, throttle, 10_000)

    duration = burst[-1][0] - burst[0][0]
    assert len(fired) <= math.ceil(duration / 100) + 1
    assert fired[-1][1] == burst[-1][1]
    fire_times = [t for t, _ in fired]
    assert all(b - a >= 100 for a, b in zip(fire_times, fire_times[1:]))


def test_flush_fires_parked_call_now(qapp, clock):
    throttle, timer, fired = make_throttle(clock)
    throttle(1)
    clock.now_ms = 20
    throttle(2)

    throttle.flush()

    assert fired == [(0, 1), (20, 2)]
    assert timer.due_ms is None


def test_cancel_drops_parked_call(qapp, clock):
    throttle, timer, fired = make_throttle(clock)
    throttle(1)
    clock.now_ms = 20
    throttle(2)

    throttle.cancel()
    throttle._fire_pending()

    assert fired == [(0, 1)]


def test_deferred_delay_rounds_up_so_spacing_never_drops_below_interval(qapp, clock):
    throttle, timer, fired = make_throttle(clock)
    throttle(1)

    clock.now_ms = 99.6
    throttle(2)

    assert timer.started == [1]
    advance(clock, timer, throttle, 200)
    assert [offset for _, offset in fired] == [1, 2]
    assert fired[-1][0] - fired[0][0] >= 100


def test_real_timer_delivers_trailing_call_once(qapp):
    fired = []
    throttle = ScrollThrottle(fired.append, interval_ms=20)

    for offset in range(0, 100, 10):
        throttle(offset)
    assert fired == [0]
    assert throttle.has_pending

    QTest.qWait(80)

    assert fired == [0, 90]
    assert not throttle.has_pending
