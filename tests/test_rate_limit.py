import time

import pytest
from django.core.cache import cache
from django.test import RequestFactory
from rest_framework.test import APIClient

from pages.middleware import FixedWindowCounter, client_ip


@pytest.fixture
def clock(monkeypatch):
    now = [1000.0]
    monkeypatch.setattr(time, "time", lambda: now[0])
    return now


def test_counter_allows_limit_then_rejects():
    counter = FixedWindowCounter(window_seconds=60)
    states = [counter.hit("1.2.3.4:anon", 3, now=100.0) for _ in range(5)]

    assert [s.allowed for s in states] == [True, True, True, False, False]
    assert [s.count for s in states] == [1, 2, 3, 4, 4]
    assert states[2].remaining() == 0
    assert states[3].seconds_left(100.0) == 60


def test_counter_state_lives_in_django_cache():
    counter = FixedWindowCounter(window_seconds=60)
    counter.hit("1.2.3.4:anon", 5, now=100.0)
    counter.hit("1.2.3.4:anon", 5, now=101.0)

    assert cache.get("ratelimit:1.2.3.4:anon:5") == 2
    assert cache.get("ratelimit:1.2.3.4:anon:5:reset") == 160.0

    # A second counter on the same cache sees the same window
    assert FixedWindowCounter(window_seconds=60).hit("1.2.3.4:anon", 5, now=102.0).count == 3


def test_counter_restarts_when_cache_entry_expires(clock):
    counter = FixedWindowCounter(window_seconds=10)
    for _ in range(3):
        counter.hit("k", 2, now=clock[0])

    clock[0] += 10.5
    state = counter.hit("k", 2, now=clock[0])
    assert state.count == 1
    assert state.reset_at == clock[0] + 10


def test_counter_restarts_on_limit_change():
    counter = FixedWindowCounter(window_seconds=10)
    for _ in range(3):
        counter.hit("k", 2, now=0.0)
    assert counter.hit("k", 5, now=1.0).count == 1


def test_counter_recovers_when_entry_vanishes_mid_window():
    counter = FixedWindowCounter(window_seconds=60)
    counter.hit("k", 2, now=0.0)
    counter.hit("k", 2, now=1.0)
    cache.delete("ratelimit:k:2")

    assert counter.hit("k", 2, now=2.0).allowed


def test_client_ip_precedence():
    rf = RequestFactory()
    assert client_ip(rf.get("/", HTTP_X_FORWARDED_FOR="9.9.9.9, 10.0.0.1", HTTP_X_REAL_IP="8.8.8.8")) == "9.9.9.9"
    assert client_ip(rf.get("/", HTTP_X_REAL_IP="8.8.8.8")) == "8.8.8.8"
    assert client_ip(rf.get("/", REMOTE_ADDR="7.7.7.7")) == "7.7.7.7"


@pytest.mark.django_db
def test_middleware_returns_429_with_retry_after(settings):
    settings.RATE_LIMIT_ENABLED = True
    settings.RATE_LIMIT_MAX_REQUESTS_ANON = 2
    client = APIClient()

    first = client.get("/api/health")
    assert first["X-RateLimit-Limit"] == "2"
    assert first["X-RateLimit-Remaining"] == "1"
    client.get("/api/health")
    blocked = client.get("/api/health")

    assert blocked.status_code == 429
    assert int(blocked["Retry-After"]) > 0
    assert blocked.json()["error"] == "Too Many Requests"


@pytest.mark.django_db
def test_authorization_header_uses_its_own_bucket(settings):
    settings.RATE_LIMIT_MAX_REQUESTS_ANON = 1
    settings.RATE_LIMIT_MAX_REQUESTS_AUTH = 5
    client = APIClient()

    client.get("/api/health")
    assert client.get("/api/health").status_code == 429
    client.credentials(HTTP_AUTHORIZATION="Bearer whatever")
    assert client.get("/api/health").status_code == 200


@pytest.mark.django_db
def test_disabled_limiter_adds_no_headers(settings):
    settings.RATE_LIMIT_ENABLED = False
    settings.RATE_LIMIT_MAX_REQUESTS_ANON = 1
    client = APIClient()
    client.get("/api/health")
    resp = client.get("/api/health")
    assert resp.status_code == 200
    assert "X-RateLimit-Limit" not in resp


@pytest.mark.django_db
def test_limit_is_shared_between_middleware_instances(settings):
    settings.RATE_LIMIT_MAX_REQUESTS_ANON = 2

    APIClient().get("/api/health")
    APIClient().get("/api/health")
    assert APIClient().get("/api/health").status_code == 429
