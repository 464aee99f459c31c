import pytest
from starlette.requests import Request

from arena import rate_limiter
from arena.rate_limiter import caller_identity, check_rate_limit


class FakeRedis:
    """Only the commands the limiter uses"""

    def __init__(self):
        self.values = {}

    def get(self, key):
        return self.values.get(key)

    def ttl(self, key):
        return 60 if key in self.values else -2

    def set(self, key, value, ex=None):
        self.values[key] = str(value)


@pytest.fixture(autouse=True)
def clean_cache():
    rate_limiter.reset_memory_cache()
    yield
    rate_limiter.reset_memory_cache()


def make_request(headers=None, client=("10.0.0.1", 5000)):
    raw = [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()]
    return Request({"type": "http", "headers": raw, "client": client})


def test_allows_up_to_limit_then_denies():
    redis_client = FakeRedis()

    results = [check_rate_limit("bookings:user:1", 3, 60, redis_client)[0] for _ in range(4)]

    assert results == [True, True, True, False]


def test_counts_resume_from_redis():
    redis_client = FakeRedis()
    redis_client.values["bookings:user:2"] = "3"

    allowed, count, ttl = check_rate_limit("bookings:user:2", 3, 60, redis_client)

    assert allowed is False
    assert count == 3
    assert ttl > 0


def test_caller_identity_prefers_user_header():
    assert caller_identity(make_request({"X-User-Id": "7"})) == "user:7"
    assert caller_identity(make_request({"X-Forwarded-For": "1.2.3.4, 5.6.7.8"})) == "ip:1.2.3.4"
    assert caller_identity(make_request()) == "ip:10.0.0.1"
