import pytest

from utils.rate_limit import RateLimiter, SlidingWindowRateLimiter


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now


def test_allows_up_to_limit_then_denies():
    limiter = SlidingWindowRateLimiter(max_requests=3, window_seconds=60, clock=FakeClock())
    assert [limiter.allow("1.2.3.4") for _ in range(4)] == [True, True, True, False]


def test_window_slides_forward():
    clock = FakeClock()
    limiter = SlidingWindowRateLimiter(max_requests=2, window_seconds=60, clock=clock)
    assert limiter.allow("ip")
    clock.now += 30
    assert limiter.allow("ip")
    assert not limiter.allow("ip")

    # First hit leaves the window, one slot frees up
    clock.now += 31
    assert limiter.allow("ip")
    assert not limiter.allow("ip")


def test_keys_are_independent_and_reset_clears_state():
    limiter = SlidingWindowRateLimiter(max_requests=1, window_seconds=60, clock=FakeClock())
    assert limiter.allow("a")
    assert not limiter.allow("a")
    assert limiter.allow("b")

    limiter.reset()
    assert limiter.allow("a")


def test_idle_keys_are_dropped_after_a_window():
    clock = FakeClock()
    limiter = SlidingWindowRateLimiter(max_requests=2, window_seconds=60, clock=clock)
    for ip in ("10.0.0.1", "10.0.0.2", "10.0.0.3"):
        assert limiter.allow(ip)
    assert limiter.tracked_keys() == 3

    clock.now += 61
    assert limiter.allow("10.0.0.9")
    assert limiter.tracked_keys() == 1


def test_rate_limiter_interface_is_abstract():
    with pytest.raises(TypeError):
        RateLimiter()
