"""
Pytest configuration for Django app tests.
"""

from django.core.cache import cache
from django.test import Client as DjangoClient

import pytest

from apps.web.core.models import User
from apps.web.core.tests.factories import UserFactory


@pytest.fixture(autouse=True)
def _clear_cache():
    """Idempotency keys must not leak between tests."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def api_client() -> DjangoClient:
    """Django test client for API requests."""
    return DjangoClient()


@pytest.fixture
def user() -> User:
    """A signed-in guest."""
    return UserFactory(
        firebase_uid="guest-uid",
        email="guest@example.com",
        display_name="Guest User",
    )


@pytest.fixture
def admin_user() -> User:
    """A signed-in admin."""
    return UserFactory(
        admin=True,
        firebase_uid="admin-uid",
        email="owner@karahi.example.com",
        display_name="Restaurant Owner",
    )


@pytest.fixture
def as_caller():
    """Build the identity header for a user: client.get(url, headers=...)."""

    def _headers(user: User) -> dict[str, str]:
        return {"X-Firebase-UID": user.firebase_uid}

    return _headers
