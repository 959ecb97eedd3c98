from concurrent.futures import ThreadPoolExecutor

from starlette.requests import Request

from shared.rate_limiter import (
    RateLimiter,
    check_rate_limit,
    get_client_identifier,
    get_rate_limit_headers,
    get_rate_limits,
)


def make_request(headers=None):
    raw = [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()]
    return Request({"type": "http", "method": "GET", "path": "/", "headers": raw})


def test_allows_up_to_limit_then_blocks():
    limiter = RateLimiter()

    assert [limiter.check("ip", 3, 60) for _ in range(4)] == [True, True, True, False]
    assert limiter.get_remaining("ip", 3, 60) == 0


def test_unknown_identifier_has_full_quota():
    limiter = RateLimiter()

    assert limiter.get_remaining("unknown", 5, 60) == 5
    assert limiter.get_reset_time("unknown", 5, 60) == 0


def test_reset_time_is_within_window():
    limiter = RateLimiter()
    limiter.check("ip", 5, 60)

    assert 0 < limiter.get_reset_time("ip", 5, 60) <= 60
    assert limiter.get_remaining("ip", 5, 60) == 4


def test_clear_forgets_every_counter():
    limiter = RateLimiter()
    limiter.check("ip", 1, 60)
    assert limiter.check("ip", 1, 60) is False

    limiter.clear()
    assert limiter.check("ip", 1, 60) is True


def test_concurrent_checks_never_exceed_limit():
    limiter = RateLimiter()

    with ThreadPoolExecutor(max_workers=16) as pool:
        results = list(pool.map(lambda _: limiter.check("shared", 25, 60), range(200)))

    assert results.count(True) == 25
    assert limiter.get_remaining("shared", 25, 60) == 0


def test_client_identifier_prefers_forwarded_for():
    assert get_client_identifier(make_request({"X-Forwarded-For": "1.2.3.4, 5.6.7.8"})) == "1.2.3.4"
    assert get_client_identifier(make_request({"X-Real-IP": "9.9.9.9"})) == "9.9.9.9"
    assert get_client_identifier(make_request()) == "anonymous"


def test_check_rate_limit_keys_by_scope():
    limiter = RateLimiter()
    request = make_request({"X-Real-IP": "9.9.9.9"})

    first = check_rate_limit(request, 1, 60, limiter=limiter, scope="OCR")
    second = check_rate_limit(request, 1, 60, limiter=limiter, scope="OCR")
    other = check_rate_limit(request, 1, 60, limiter=limiter, scope="SESSIONS")

    assert first.allowed and not second.allowed and other.allowed
    assert second.remaining == 0
    assert 0 < second.reset_time <= 60


def test_headers_and_default_rules():
    assert get_rate_limit_headers(10, 4, 30) == {
        "X-RateLimit-Limit": "10",
        "X-RateLimit-Remaining": "4",
        "X-RateLimit-Reset": "30",
    }
    assert set(get_rate_limits()) == {"AI_TUTOR", "OCR", "SESSIONS"}
