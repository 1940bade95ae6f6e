import pytest

from health_companion.infrastructure.rate_limit import build_rate_limiter
from health_companion.infrastructure.rate_limit.memory_rate_limiter import InMemoryRateLimiter


def test_memory_rate_limiter_allows_then_blocks():
    rl = InMemoryRateLimiter()
    key = "k1"
    assert rl.allow(key, max_requests=2, window_seconds=60) is True
    assert rl.allow(key, max_requests=2, window_seconds=60) is True
    assert rl.allow(key, max_requests=2, window_seconds=60) is False
    # Other keys have their own budget
    assert rl.allow("k2", max_requests=2, window_seconds=60) is True


def test_memory_rate_limiter_window_slides(monkeypatch):
    from health_companion.infrastructure.rate_limit import memory_rate_limiter as mod

    now = [1000.0]
    monkeypatch.setattr(mod.time, "time", lambda: now[0])
    rl = InMemoryRateLimiter()
    assert rl.allow("k", 1, 60) is True
    assert rl.allow("k", 1, 60) is False
    now[0] += 61
    assert rl.allow("k", 1, 60) is True


def test_memory_rate_limiter_reset():
    rl = InMemoryRateLimiter()
    assert rl.allow("k", 1, 60) is True
    rl.reset()
    assert rl.allow("k", 1, 60) is True


def test_build_without_redis_url_uses_memory():
    assert isinstance(build_rate_limiter(None), InMemoryRateLimiter)


def test_redis_rate_limiter_with_fake(monkeypatch):
    pytest.importorskip("redis")

    class FakePipe:
        def __init__(self, client):
            self.client = client
            self.key = None

        def incr(self, k, n):
            self.key = k
            return self

        def expire(self, k, s):
            self.client.ttls[k] = s
            return self

        def execute(self):
            cnt = self.client.store.get(self.key, 0) + 1
            self.client.store[self.key] = cnt
            return [cnt, True]

    class FakeRedis:
        def __init__(self):
            self.store = {}
            self.ttls = {}

        @classmethod
        def from_url(cls, url):
            return cls()

        def pipeline(self):
            return FakePipe(self)

    from health_companion.infrastructure.rate_limit import redis_rate_limiter as mod
    monkeypatch.setattr(mod.redis, "Redis", FakeRedis)

    rl = mod.RedisRateLimiter(url="redis://fake")
    assert rl.allow("k1", 2, 60) is True
    assert rl.allow("k1", 2, 60) is True
    assert rl.allow("k1", 2, 60) is False
    assert rl.client.ttls == {"rl:k1:60": 60}
