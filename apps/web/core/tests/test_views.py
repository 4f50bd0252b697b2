"""
Integration tests for auth API views.
"""

import json

import pytest

from apps.web.core.models import User

from .factories import UserFactory


def _sync(api_client, **body):
    return api_client.post(
        "/api/auth/sync", data=json.dumps(body), content_type="application/json"
    )


@pytest.mark.django_db
class TestSync:
    """Tests for POST /api/auth/sync."""

    def test_creates_user(self, api_client) -> None:
        """First sign-in creates a regular user."""
        response = _sync(
            api_client,
            firebaseUid="new-uid",
            email="new@example.com",
            displayName="New Guest",
            photoURL="https://example.com/me.png",
        )

        assert response.status_code == 201
        data = response.json()["user"]
        assert data["firebaseUid"] == "new-uid"
        assert data["email"] == "new@example.com"
        assert data["displayName"] == "New Guest"
        assert data["photoURL"] == "https://example.com/me.png"
        assert data["role"] == "user"

        user = User.objects.get(firebase_uid="new-uid")
        assert not user.has_usable_password()

    def test_updates_existing_user(self, api_client, user) -> None:
        """Signing in again updates profile fields and returns 200."""
        response = _sync(
            api_client,
            firebaseUid=user.firebase_uid,
            email=user.email,
            displayName="Renamed",
        )

        assert response.status_code == 200
        user.refresh_from_db()
        assert user.display_name == "Renamed"
        assert User.objects.filter(firebase_uid=user.firebase_uid).count() == 1

    def test_allow_listed_email_becomes_admin(self, api_client, settings) -> None:
        """Admin role comes from ADMIN_EMAILS, case-insensitively."""
        settings.ADMIN_EMAILS = ["owner@karahi.example.com"]

        response = _sync(
            api_client, firebaseUid="owner-uid", email="Owner@Karahi.example.com"
        )

        assert response.status_code == 201
        assert response.json()["user"]["role"] == "admin"
        assert User.objects.get(firebase_uid="owner-uid").is_admin

    def test_requested_admin_role_is_ignored(self, api_client, settings) -> None:
        """A client asking for admin without being allow-listed stays a user."""
        settings.ADMIN_EMAILS = ["owner@karahi.example.com"]

        response = _sync(
            api_client,
            firebaseUid="sneaky-uid",
            email="sneaky@example.com",
            role="admin",
        )

        assert response.status_code == 201
        assert response.json()["user"]["role"] == "user"

    def test_removed_from_allow_list_is_demoted(
        self, api_client, admin_user, settings
    ) -> None:
        """Role is re-decided on every sync."""
        settings.ADMIN_EMAILS = []

        response = _sync(
            api_client, firebaseUid=admin_user.firebase_uid, email=admin_user.email
        )

        assert response.status_code == 200
        admin_user.refresh_from_db()
        assert admin_user.role == User.Role.USER

    def test_invalid_email(self, api_client) -> None:
        """Schema violations return 400 with per-field details."""
        response = _sync(api_client, firebaseUid="uid", email="not-an-email")

        assert response.status_code == 400
        data = response.json()
        assert data["error"] == "validation_error"
        assert any(d["field"] == "email" for d in data["details"])

    def test_malformed_json(self, api_client) -> None:
        response = api_client.post(
            "/api/auth/sync", data="{not json", content_type="application/json"
        )

        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"

    def test_get_not_allowed(self, api_client) -> None:
        response = api_client.get("/api/auth/sync")

        assert response.status_code == 405


@pytest.mark.django_db
class TestUserDetail:
    """Tests for GET /api/auth/user/{uid}."""

    def test_read_self(self, api_client, user, as_caller) -> None:
        response = api_client.get(
            f"/api/auth/user/{user.firebase_uid}", headers=as_caller(user)
        )

        assert response.status_code == 200
        assert response.json()["user"]["email"] == user.email

    def test_requires_caller(self, api_client, user) -> None:
        """No X-Firebase-UID header means 401."""
        response = api_client.get(f"/api/auth/user/{user.firebase_uid}")

        assert response.status_code == 401
        assert response.json()["error"] == "authentication_required"

    def test_unknown_caller(self, api_client, user) -> None:
        """A UID that was never synced is not a caller."""
        response = api_client.get(
            f"/api/auth/user/{user.firebase_uid}",
            headers={"X-Firebase-UID": "never-synced"},
        )

        assert response.status_code == 401

    def test_cannot_read_other_user(self, api_client, user, as_caller) -> None:
        other = UserFactory()

        response = api_client.get(
            f"/api/auth/user/{other.firebase_uid}", headers=as_caller(user)
        )

        assert response.status_code == 403
        assert response.json()["error"] == "forbidden"

    def test_admin_reads_anyone(self, api_client, user, admin_user, as_caller) -> None:
        response = api_client.get(
            f"/api/auth/user/{user.firebase_uid}", headers=as_caller(admin_user)
        )

        assert response.status_code == 200
        assert response.json()["user"]["firebaseUid"] == user.firebase_uid

    def test_admin_unknown_user(self, api_client, admin_user, as_caller) -> None:
        response = api_client.get(
            "/api/auth/user/missing-uid", headers=as_caller(admin_user)
        )

        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    def test_inactive_user_is_not_a_caller(self, api_client, as_caller) -> None:
        """Deactivated accounts lose API access immediately."""
        inactive = UserFactory(is_active=False)

        response = api_client.get(
            f"/api/auth/user/{inactive.firebase_uid}", headers=as_caller(inactive)
        )

        assert response.status_code == 401
