"""Tests for the fixed-window rate limiter."""
from core.rate_limit import RATE_LIMIT_PRESETS, RateLimitConfig, RateLimiter, get_client_ip


class FakeClock:
    def __init__(self, now=1_000_000):
        self.now = now

    def __call__(self):
        return self.now


def test_eleventh_request_in_window_rejected():
    clock = FakeClock()
    limiter = RateLimiter(clock=clock, rng=lambda: 1.0)
    config = RATE_LIMIT_PRESETS["donations"]

    results = [limiter.hit("1.2.3.4:/api/donations", config) for _ in range(10)]
    assert all(r.allowed for r in results)
    assert [r.remaining for r in results] == list(range(9, -1, -1))

    eleventh = limiter.hit("1.2.3.4:/api/donations", config)
    assert eleventh.allowed is False
    assert eleventh.remaining == 0
    assert eleventh.limit == 10
    assert eleventh.reset_time == 1_000_000 + 60_000


def test_window_resets_after_expiry():
    clock = FakeClock()
    limiter = RateLimiter(clock=clock, rng=lambda: 1.0)
    config = RateLimitConfig(window_ms=1000, max_requests=1)

    assert limiter.hit("k", config).allowed is True
    assert limiter.hit("k", config).allowed is False

    clock.now += 1000
    # still inside the window at exactly reset_time
    assert limiter.hit("k", config).allowed is False

    clock.now += 1
    result = limiter.hit("k", config)
    assert result.allowed is True
    assert result.remaining == 0
    assert result.reset_time == clock.now + 1000


def test_keys_are_independent():
    limiter = RateLimiter(clock=FakeClock(), rng=lambda: 1.0)
    config = RateLimitConfig(window_ms=60_000, max_requests=1)
    assert limiter.hit("1.1.1.1:/api/subscribe", config).allowed is True
    assert limiter.hit("2.2.2.2:/api/subscribe", config).allowed is True
    assert limiter.hit("1.1.1.1:/api/donations", config).allowed is True
    assert limiter.hit("1.1.1.1:/api/subscribe", config).allowed is False


def test_client_ip_header_priority():
    assert get_client_ip({"x-forwarded-for": "203.0.113.9, 10.0.0.1", "x-real-ip": "10.0.0.2"}) == "203.0.113.9"
    assert get_client_ip({"x-real-ip": "10.0.0.2", "cf-connecting-ip": "10.0.0.3"}) == "10.0.0.2"
    assert get_client_ip({"cf-connecting-ip": "10.0.0.3"}) == "10.0.0.3"
    assert get_client_ip({}) == "127.0.0.1"


def test_sweep_removes_expired_entries():
    clock = FakeClock()
    limiter = RateLimiter(clock=clock, rng=lambda: 1.0)
    limiter.hit("a", RateLimitConfig(window_ms=100, max_requests=5))
    limiter.hit("b", RateLimitConfig(window_ms=10_000, max_requests=5))

    clock.now += 500
    assert limiter.sweep() == 1
    assert len(limiter) == 1


def test_opportunistic_cleanup_on_hit():
    clock = FakeClock()
    draws = iter([1.0, 0.0])
    limiter = RateLimiter(clock=clock, rng=lambda: next(draws))
    limiter.hit("old", RateLimitConfig(window_ms=100, max_requests=5))

    clock.now += 500
    limiter.hit("new", RateLimitConfig(window_ms=100, max_requests=5))
    assert len(limiter) == 1


def test_retry_after_rounds_up():
    clock = FakeClock()
    limiter = RateLimiter(clock=clock, rng=lambda: 1.0)
    config = RateLimitConfig(window_ms=60_000, max_requests=1)
    limiter.hit("k", config)
    blocked = limiter.hit("k", config)

    clock.now += 30_500
    assert limiter.retry_after_seconds(blocked) == 30


def test_presets():
    assert RATE_LIMIT_PRESETS["strict"] == RateLimitConfig(60_000, 5)
    assert RATE_LIMIT_PRESETS["passwordReset"] == RateLimitConfig(3_600_000, 3)
    assert RATE_LIMIT_PRESETS["subscribe"] == RateLimitConfig(3_600_000, 5)
