# tests/test_api.py
"""
Contract tests for API responses.
"""

from datetime import timedelta

import pytest
from fastapi.testclient import TestClient

from app.main import app

HEADERS = {"X-API-Key": "test-admin-key"}


@pytest.fixture
def client(db):
    """Create test client (runs the lifespan; scheduler is disabled in tests)."""
    with TestClient(app) as client:
        yield client


class TestHealthEndpoints:
    """Test health check endpoints."""

    def test_health(self, client):
        """Test /health endpoint."""
        response = client.get("/health")
        assert response.status_code == 200

        data = response.json()
        assert data["status"] == "ok"
        assert data["service"] == "content-expiration"
        assert data["sweep_running"] is False

    def test_health_reports_running_sweep(self, client, db):
        from app.services.expiration.single_flight import single_flight

        with single_flight(db) as acquired:
            assert acquired
            data = client.get("/health").json()

        assert data["sweep_running"] is True
        assert client.get("/health").json()["sweep_running"] is False

    def test_no_scheduler_when_disabled(self, client):
        assert app.state.scheduler is None


class TestAuth:
    """Admin key enforcement."""

    @pytest.mark.parametrize(
        "method,path",
        [
            ("get", "/v1/items/1/expiration"),
            ("put", "/v1/items/1/expiration"),
            ("get", "/v1/admin/expiration/items"),
            ("post", "/v1/admin/expiration/sweep"),
        ],
    )
    def test_missing_key_is_401(self, client, method, path):
        response = getattr(client, method)(path)
        assert response.status_code == 401

    def test_wrong_key_is_401(self, client):
        response = client.get("/v1/admin/expiration/items", headers={"X-API-Key": "nope"})
        assert response.status_code == 401


class TestItemExpiration:
    """PUT/GET /v1/items/{item_id}/expiration."""

    def test_get_never(self, client, make_item):
        item = make_item()

        response = client.get(f"/v1/items/{item.id}/expiration", headers=HEADERS)

        assert response.status_code == 200
        assert response.json() == {"item_id": item.id, "label": "Never", "is_expired": False, "raw": None}

    def test_unknown_item_is_404(self, client):
        assert client.get("/v1/items/9999/expiration", headers=HEADERS).status_code == 404
        assert client.put("/v1/items/9999/expiration", json={}, headers=HEADERS).status_code == 404

    def test_put_by_date(self, client, make_user, make_item):
        editor = make_user(role="editor")
        item = make_item()

        response = client.put(
            f"/v1/items/{item.id}/expiration",
            json={
                "actor_id": editor.id,
                "fields": {
                    "expiration-status": "by-date",
                    "expiration-month": "3",
                    "expiration-day": "1",
                    "expiration-year": "2099",
                    "expiration-hour": "9",
                    "expiration-ampm": "am",
                },
            },
            headers=HEADERS,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["label"] == "2099-03-01 09:00:00 AM -0500"
        assert not data["is_expired"]

    def test_put_then_disable(self, client, make_user, make_item):
        author = make_user(role="author")
        item = make_item(author=author)
        url = f"/v1/items/{item.id}/expiration"

        set_response = client.put(
            url,
            json={"actor_id": author.id, "fields": {"expiration-status": "by-days", "expiration-days": "30"}},
            headers=HEADERS,
        )
        assert set_response.json()["raw"] is not None

        disable_response = client.put(
            url,
            json={"actor_id": author.id, "fields": {"expiration-status": "disable"}},
            headers=HEADERS,
        )
        assert disable_response.json()["label"] == "Never"

    def test_unauthorized_save_is_ignored(self, client, make_user, make_item):
        item = make_item()
        stranger = make_user(role="author")

        response = client.put(
            f"/v1/items/{item.id}/expiration",
            json={"actor_id": stranger.id, "fields": {"expiration-status": "by-days", "expiration-days": "30"}},
            headers=HEADERS,
        )

        assert response.status_code == 200
        assert response.json()["label"] == "Never"

    def test_autosave_is_ignored(self, client, make_user, make_item):
        editor = make_user(role="editor")
        item = make_item()

        response = client.put(
            f"/v1/items/{item.id}/expiration",
            json={
                "actor_id": editor.id,
                "fields": {"expiration-status": "by-days", "expiration-days": "30"},
                "is_autosave": True,
            },
            headers=HEADERS,
        )

        assert response.json()["label"] == "Never"


class TestAdminListing:
    """GET /v1/admin/expiration/items."""

    def test_lists_items_with_status_labels(self, client, store, make_item, db):
        published = make_item(title="Live")
        expired = make_item(title="Gone", status="expired")
        from app.services.expiration.dates import now_in

        store.set_expiration(published.id, now_in(store.tz) + timedelta(days=5))
        store.set_expiration(expired.id, now_in(store.tz) - timedelta(days=1))
        db.commit()

        response = client.get("/v1/admin/expiration/items", headers=HEADERS)

        assert response.status_code == 200
        rows = {row["title"]: row for row in response.json()}
        assert rows["Live"]["status_label"] == "Published"
        assert not rows["Live"]["is_expired"]
        assert rows["Gone"]["status_label"] == "Expired"
        assert rows["Gone"]["label"] == "Expired"

    def test_unregistered_statuses_are_hidden(self, client, make_item):
        make_item(title="Trash", status="trash")

        response = client.get("/v1/admin/expiration/items", headers=HEADERS)

        assert [row["title"] for row in response.json()] == []

    def test_pagination(self, client, make_item):
        for n in range(3):
            make_item(title=f"Item {n}")

        response = client.get("/v1/admin/expiration/items?limit=2&offset=1", headers=HEADERS)

        assert [row["title"] for row in response.json()] == ["Item 1", "Item 2"]


class TestSweepEndpoint:
    """POST /v1/admin/expiration/sweep."""

    def test_sweep_expires_due_items(self, client, store, make_item, db):
        item = make_item()
        from app.services.expiration.dates import now_in

        store.set_expiration(item.id, now_in(store.tz) - timedelta(hours=1))
        db.commit()

        response = client.post("/v1/admin/expiration/sweep", headers=HEADERS)

        assert response.status_code == 200
        data = response.json()
        assert data["success"]
        assert data["status"] == "completed"
        assert data["records_scanned"] == 1
        assert data["warnings_sent"] == 1
        assert data["items_expired"] == 1
        assert data["mail_failures"] == 0

        followup = client.get(f"/v1/items/{item.id}/expiration", headers=HEADERS)
        assert followup.json()["is_expired"]

    def test_empty_sweep(self, client):
        response = client.post("/v1/admin/expiration/sweep", headers=HEADERS)

        assert response.status_code == 200
        assert response.json()["records_scanned"] == 0
