"""API tests for the user resource routes."""

from uuid import uuid4

from fastapi import Depends
from fastapi.testclient import TestClient

from arcana.config import Settings, load_settings
from arcana.domain.model import User
from arcana.interface.api.app import create_app
from arcana.interface.api.security import optional_auth
from arcana.persistence.database import DatabaseProbe
from tests.di import build_test_container
from tests.e2e.flows import login, make_profile
from tests.harness import bearer, create_client_fixture, resolve

api = create_client_fixture()


def build_app(settings: Settings | None = None):
    """App over mock providers, for tests that mount extra routes."""
    settings = settings or load_settings()
    container = build_test_container(settings=settings)
    return create_app(settings, container), container


class TestMe:
    """Tests for /api/users/me routes."""

    def test_get_me_returns_full_profile(self, api):
        client, container = api
        token, user = login(client, container)

        response = client.get("/api/users/me", headers=bearer(token))

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["id"] == user["id"]
        assert data["googleImage"] == "https://example.com/ada.jpg"
        assert "createdAt" in data
        assert "updatedAt" in data

    def test_update_me_merges_preferences(self, api):
        client, container = api
        token, _ = login(client, container)

        response = client.put(
            "/api/users/me",
            headers=bearer(token),
            json={
                "name": "Countess",
                "preferences": {"notifications": {"reminderTime": "07:30"}},
            },
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["name"] == "Countess"
        assert data["preferences"]["notifications"]["reminderTime"] == "07:30"
        assert data["preferences"]["notifications"]["dailyReminder"] is True

    def test_bad_reminder_time_is_validation_error(self, api):
        client, container = api
        token, _ = login(client, container)

        response = client.patch(
            "/api/users/me/preferences",
            headers=bearer(token),
            json={"notifications": {"reminderTime": "7pm"}},
        )

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["code"] == "VALIDATION_ERROR"

    def test_empty_name_is_validation_error(self, api):
        client, container = api
        token, _ = login(client, container)

        response = client.put("/api/users/me", headers=bearer(token), json={"name": ""})

        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"

    def test_profile_image_must_be_http_url(self, api):
        client, container = api
        token, _ = login(client, container)

        bad = client.patch(
            "/api/users/me/profile-image",
            headers=bearer(token),
            json={"profileImage": "javascript:alert(1)"},
        )
        good = client.patch(
            "/api/users/me/profile-image",
            headers=bearer(token),
            json={"profileImage": "https://cdn.example.com/ada.png"},
        )

        assert bad.status_code == 400
        assert good.status_code == 200
        assert good.json()["data"] == {"profileImage": "https://cdn.example.com/ada.png"}

    def test_stats_include_derived_ages(self, api):
        client, container = api
        token, _ = login(client, container)

        response = client.get("/api/users/me/stats", headers=bearer(token))

        data = response.json()["data"]
        assert data["totalEntries"] == 0
        assert data["accountAge"] == 0
        assert data["lastActivity"] is None

    def test_onboarding_moves_forward_only(self, api):
        client, container = api
        token, _ = login(client, container)

        forward = client.patch(
            "/api/users/me/onboarding",
            headers=bearer(token),
            json={"step": "persona-intro"},
        )
        backward = client.patch(
            "/api/users/me/onboarding",
            headers=bearer(token),
            json={"step": "welcome"},
        )

        assert forward.status_code == 200
        assert forward.json()["data"]["step"] == "persona-intro"
        assert backward.status_code == 400
        assert backward.json()["code"] == "VALIDATION_ERROR"

    def test_me_requires_token(self, api):
        client, _ = api

        response = client.get("/api/users/me")

        assert response.status_code == 401
        assert response.json()["code"] == "NO_TOKEN"


class TestOwnership:
    """Tests for /api/users/{user_id} routes."""

    def test_owner_can_read_self(self, api):
        client, container = api
        token, user = login(client, container)

        response = client.get(f"/api/users/{user['id']}", headers=bearer(token))

        assert response.status_code == 200
        assert response.json()["data"]["email"] == "ada@example.com"

    def test_other_user_is_denied(self, api):
        client, container = api
        token, _ = login(client, container)
        _, other = login(
            client,
            container,
            make_profile(sub="google-grace", email="grace@example.com", name="Grace"),
        )

        response = client.get(f"/api/users/{other['id']}", headers=bearer(token))

        assert response.status_code == 403
        assert response.json()["code"] == "ACCESS_DENIED"

    def test_other_user_cannot_delete(self, api):
        client, container = api
        token, _ = login(client, container)
        _, other = login(
            client,
            container,
            make_profile(sub="google-grace", email="grace@example.com", name="Grace"),
        )

        response = client.delete(f"/api/users/{other['id']}", headers=bearer(token))

        assert response.status_code == 403

    def test_malformed_id_is_bad_request(self, api):
        client, container = api
        token, _ = login(client, container)

        response = client.get("/api/users/not-a-uuid", headers=bearer(token))

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_ID"

    def test_unknown_id_without_token_is_unauthorized(self, api):
        client, _ = api

        response = client.get(f"/api/users/{uuid4()}")

        assert response.status_code == 401

    def test_delete_removes_account_and_invalidates_token(self, api):
        client, container = api
        token, user = login(client, container)

        deleted = client.delete(f"/api/users/{user['id']}", headers=bearer(token))
        after = client.get("/api/users/me", headers=bearer(token))

        assert deleted.status_code == 200
        assert deleted.json()["data"] == {
            "id": user["id"],
            "email": "ada@example.com",
            "name": "Ada Lovelace",
        }
        assert after.status_code == 401
        assert after.json()["code"] == "USER_NOT_FOUND"


class TestServiceRoutes:
    """Tests for root, health and fallback handling."""

    def test_root_describes_api(self, api):
        client, _ = api

        data = client.get("/").json()["data"]

        assert data["version"] == "1.0.0"
        assert data["environment"] == "test"

    def test_health_and_liveness(self, api):
        client, _ = api

        health = client.get("/health").json()
        live = client.get("/health/live").json()

        assert health["data"]["status"] == "healthy"
        assert health["data"]["version"] == "1.0.0"
        assert live["data"] == {"status": "alive"}

    def test_ready_when_database_answers(self, api):
        client, _ = api

        response = client.get("/health/ready")

        assert response.status_code == 200
        assert response.json()["data"]["status"] == "ready"

    def test_not_ready_when_database_is_down(self, api):
        client, container = api
        resolve(container, DatabaseProbe).healthy = False

        response = client.get("/health/ready")

        assert response.status_code == 503
        assert response.json()["code"] == "NOT_READY"

    def test_unknown_route_is_enveloped(self, api):
        client, _ = api

        response = client.get("/does/not/exist")

        assert response.status_code == 404
        assert response.json() == {
            "success": False,
            "data": None,
            "error": "Route not found",
            "code": "NOT_FOUND",
        }

    def test_unexpected_error_is_internal_error(self):
        app, _ = build_app()

        @app.get("/boom")
        async def boom():
            raise RuntimeError("kaboom")

        with TestClient(app, raise_server_exceptions=False) as client:
            response = client.get("/boom")

        assert response.status_code == 500
        assert response.json()["code"] == "INTERNAL_ERROR"
        assert response.json()["success"] is False

    def test_production_hides_unexpected_error_detail(self):
        settings = load_settings().model_copy(update={"environment": "production"})
        app, container = build_app(settings)

        @app.get("/boom")
        async def boom():
            raise RuntimeError("kaboom")

        with TestClient(app, raise_server_exceptions=False) as client:
            root = client.get("/")
            response = client.get("/boom")
            served = resolve(container, Settings)

        assert served is settings
        assert root.json()["data"]["environment"] == "production"
        assert response.status_code == 500
        assert response.json()["error"] == "Internal server error"


class TestOptionalAuth:
    """Tests for optional_auth, mounted on a route open to anonymous callers."""

    @staticmethod
    def mount_whoami(app):
        @app.get("/whoami")
        async def whoami(user: User | None = Depends(optional_auth)):
            return {"userId": str(user.id) if user else None}

    def test_anonymous_caller_gets_none(self):
        app, _ = build_app()
        self.mount_whoami(app)

        with TestClient(app) as client:
            response = client.get("/whoami")

        assert response.status_code == 200
        assert response.json() == {"userId": None}

    def test_bad_token_falls_back_to_anonymous(self):
        app, _ = build_app()
        self.mount_whoami(app)

        with TestClient(app) as client:
            response = client.get("/whoami", headers=bearer("not-a-jwt"))

        assert response.status_code == 200
        assert response.json() == {"userId": None}

    def test_valid_token_resolves_user(self):
        app, container = build_app()
        self.mount_whoami(app)

        with TestClient(app) as client:
            token, user = login(client, container)
            response = client.get("/whoami", headers=bearer(token))

        assert response.json() == {"userId": user["id"]}
