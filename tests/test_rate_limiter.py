"""
Tests for the per-client rate limiter.
"""

from types import SimpleNamespace

import pytest
from fastapi import HTTPException

from quizbot.utils import rate_limiter as rate_limiter_module
from quizbot.utils.rate_limiter import RateLimiter


def make_request(host):
    return SimpleNamespace(client=SimpleNamespace(host=host))


@pytest.fixture
def clock(monkeypatch):
    now = {"value": 1000.0}
    monkeypatch.setattr(rate_limiter_module, "time", SimpleNamespace(monotonic=lambda: now["value"]))
    return now


class TestRateLimiter:
    """Tests for the sliding window."""

    @pytest.mark.asyncio
    async def test_rejects_over_limit(self, clock):
        limiter = RateLimiter(requests_per_minute=2)

        await limiter.check_rate_limit(make_request("10.0.0.1"))
        await limiter.check_rate_limit(make_request("10.0.0.1"))

        with pytest.raises(HTTPException) as exc_info:
            await limiter.check_rate_limit(make_request("10.0.0.1"))
        assert exc_info.value.status_code == 429

        # Other clients have their own window
        await limiter.check_rate_limit(make_request("10.0.0.2"))

    @pytest.mark.asyncio
    async def test_window_slides(self, clock):
        limiter = RateLimiter(requests_per_minute=1)
        await limiter.check_rate_limit(make_request("10.0.0.1"))

        clock["value"] += 61

        await limiter.check_rate_limit(make_request("10.0.0.1"))

    @pytest.mark.asyncio
    async def test_idle_clients_are_forgotten(self, clock):
        limiter = RateLimiter(requests_per_minute=60)
        for i in range(1000):
            await limiter.check_rate_limit(make_request(f"10.0.{i // 256}.{i % 256}"))
        assert len(limiter.requests) == 1000

        clock["value"] += 3600

        await limiter.check_rate_limit(make_request("192.168.1.1"))
        assert list(limiter.requests) == ["192.168.1.1"]
