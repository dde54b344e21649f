"""Shared fixtures: in-memory media, a clean cache and bearer-token clients."""

import pytest
from django.contrib.auth import get_user_model
from django.core.cache import cache
from rest_framework.test import APIClient

from pages.authentication import issue_token
from widgetfolio import celery_app

PASSWORD = "Secret123"


@pytest.fixture(autouse=True)
def in_memory_media(settings):
    settings.STORAGES = {
        **settings.STORAGES,
        "default": {"BACKEND": "django.core.files.storage.InMemoryStorage"},
    }
    settings.API_BASE_URL = "http://testserver/api"


@pytest.fixture(autouse=True)
def clean_cache():
    cache.clear()
    yield
    cache.clear()


@pytest.fixture(autouse=True, scope="session")
def eager_celery():
    celery_app.conf.task_always_eager = True
    celery_app.conf.task_eager_propagates = True


@pytest.fixture
def make_user(db):
    def _make(username="Alice1", email=None, password=PASSWORD, **extra):
        return get_user_model().objects.create_user(
            username=username,
            email=email or f"{username.lower()}@example.com",
            password=password,
            **extra,
        )

    return _make


@pytest.fixture
def user(make_user):
    return make_user()


@pytest.fixture
def other_user(make_user):
    return make_user("Bob22")


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def client_for():
    def _client(user):
        client = APIClient()
        client.credentials(HTTP_AUTHORIZATION=f"Bearer {issue_token(user)}")
        return client

    return _client


@pytest.fixture
def auth_client(client_for, user):
    return client_for(user)
