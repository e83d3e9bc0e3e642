"""Rate limiter unit tests."""

from leetcode_assistant.services.rate_limiter import RateLimiter


def _limits(monkeypatch, client: int, global_: int) -> None:
    monkeypatch.setattr("leetcode_assistant.services.rate_limiter.settings.rate_limit_client_per_minute", client)
    monkeypatch.setattr("leetcode_assistant.services.rate_limiter.settings.rate_limit_global_per_minute", global_)


def test_client_within_limit(monkeypatch) -> None:
    _limits(monkeypatch, client=5, global_=1000)
    limiter = RateLimiter()
    assert all(limiter.admit("10.0.0.1", now=100.0).allowed for _ in range(5))


def test_client_exceeds_limit(monkeypatch) -> None:
    """The 6th request inside one minute is rejected with a retry hint."""
    _limits(monkeypatch, client=5, global_=1000)
    limiter = RateLimiter()
    for i in range(5):
        limiter.admit("10.0.0.1", now=100.0 + i)

    decision = limiter.admit("10.0.0.1", now=110.0)

    assert decision.allowed is False
    assert decision.scope == "client"
    assert decision.retry_after == 50
    assert limiter.admit("10.0.0.2", now=110.0).allowed is True


def test_rejected_requests_are_not_recorded(monkeypatch) -> None:
    _limits(monkeypatch, client=1, global_=1000)
    limiter = RateLimiter()
    limiter.admit("a", now=0.0)
    for t in range(1, 50):
        assert not limiter.admit("a", now=float(t)).allowed
    assert limiter.admit("a", now=61.0).allowed


def test_global_limit(monkeypatch) -> None:
    _limits(monkeypatch, client=1000, global_=3)
    limiter = RateLimiter()
    for i in range(3):
        limiter.admit(f"client-{i}", now=10.0)

    decision = limiter.admit("client-9", now=20.0)

    assert decision.allowed is False
    assert decision.scope == "global"


def test_timestamp_expiry(monkeypatch) -> None:
    """Requests older than 60 seconds no longer count."""
    _limits(monkeypatch, client=1, global_=1000)
    limiter = RateLimiter()
    limiter.admit("a", now=0.0)

    assert limiter.admit("a", now=61.0).allowed
    assert list(limiter._client_windows) == ["a"]


def test_reset_clears_all_windows(monkeypatch) -> None:
    _limits(monkeypatch, client=1, global_=1)
    limiter = RateLimiter()
    limiter.admit("a", now=0.0)
    limiter.reset()
    assert limiter.admit("b", now=1.0).allowed
