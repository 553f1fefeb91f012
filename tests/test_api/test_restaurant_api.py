"""
Tests for the restaurant API.

These tests verify the FastAPI endpoints against the JSON fixtures.
"""

import pytest
from fastapi.testclient import TestClient

from api.main import app, reset_api_state
from realtime.topics import Topics, user_notifications_topic

CUSTOMER = {"X-User-Id": "2"}
ADMIN = {"X-User-Id": "1"}
NEW_CUSTOMER = {"X-User-Id": "3"}


@pytest.fixture
def api_client(data_store, broker):
    """Create a test client with fresh state."""
    reset_api_state(data_store=data_store, broker=broker)
    yield TestClient(app)
    reset_api_state(None, None)


class TestHealthEndpoint:
    def test_health_check(self, api_client):
        response = api_client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestAuthentication:
    """Tests for resolving the signed-in user."""

    def test_missing_header(self, api_client):
        response = api_client.get("/api/notifications/my")
        assert response.status_code == 401

    def test_unknown_user(self, api_client):
        response = api_client.get("/api/notifications/my", headers={"X-User-Id": "999"})
        assert response.status_code == 401


class TestMyNotifications:
    """Tests for GET /api/notifications/my."""

    def test_first_page_newest_first(self, api_client):
        response = api_client.get("/api/notifications/my", headers=CUSTOMER)

        assert response.status_code == 200
        body = response.json()
        assert [n["id"] for n in body["content"]] == [12, 11, 10, 9, 8, 7, 6, 5, 4, 3]
        assert body["number"] == 0
        assert body["size"] == 10
        assert body["totalElements"] == 12
        assert body["totalPages"] == 2

    def test_wire_field_names(self, api_client):
        response = api_client.get("/api/notifications/my", params={"size": 1}, headers=CUSTOMER)

        notification = response.json()["content"][0]
        assert set(notification) == {"id", "typeName", "message", "createdAt", "isRead"}

    def test_second_page(self, api_client):
        response = api_client.get("/api/notifications/my", params={"page": 1}, headers=CUSTOMER)

        assert [n["id"] for n in response.json()["content"]] == [2, 1]

    def test_page_past_the_end_is_empty(self, api_client):
        response = api_client.get("/api/notifications/my", params={"page": 5}, headers=CUSTOMER)

        body = response.json()
        assert body["content"] == []
        assert body["totalPages"] == 2

    def test_user_without_notifications(self, api_client):
        response = api_client.get("/api/notifications/my", headers=NEW_CUSTOMER)

        body = response.json()
        assert body["content"] == []
        assert body["totalElements"] == 0
        assert body["totalPages"] == 0

    @pytest.mark.parametrize("params", [{"size": 0}, {"size": 101}, {"page": -1}])
    def test_invalid_paging(self, api_client, params):
        response = api_client.get("/api/notifications/my", params=params, headers=CUSTOMER)
        assert response.status_code == 422


class TestUnreadCount:
    def test_counts_across_pages(self, api_client):
        response = api_client.get("/api/notifications/my/unread-count", headers=CUSTOMER)

        assert response.status_code == 200
        assert response.json() == {"count": 4}


class TestMarkAsRead:
    """Tests for PUT /api/notifications/{id}/read."""

    def test_mark_own_notification(self, api_client):
        response = api_client.put("/api/notifications/11/read", headers=CUSTOMER)

        assert response.status_code == 200
        assert response.json()["isRead"] is True

        count = api_client.get("/api/notifications/my/unread-count", headers=CUSTOMER)
        assert count.json() == {"count": 3}

    def test_mark_twice(self, api_client):
        api_client.put("/api/notifications/11/read", headers=CUSTOMER)
        response = api_client.put("/api/notifications/11/read", headers=CUSTOMER)

        assert response.status_code == 200
        assert response.json()["isRead"] is True

    def test_other_users_notification(self, api_client):
        response = api_client.put("/api/notifications/13/read", headers=CUSTOMER)
        assert response.status_code == 404

    def test_unknown_notification(self, api_client):
        response = api_client.put("/api/notifications/999/read", headers=CUSTOMER)
        assert response.status_code == 404


class TestCurrentCart:
    def test_cart(self, api_client):
        response = api_client.get("/api/cart/current", headers=CUSTOMER)

        assert response.status_code == 200
        body = response.json()
        assert body["id"] == 101
        assert len(body["items"]) == 3
        assert "unitPrice" in body["items"][0]

    def test_no_cart(self, api_client):
        response = api_client.get("/api/cart/current", headers=NEW_CUSTOMER)
        assert response.status_code == 404


class TestCreateNotification:
    """Tests for POST /api/notifications."""

    def test_admin_creates_and_pushes(self, api_client, broker):
        user_messages, admin_messages = [], []
        broker.subscribe(user_notifications_topic("usr-7f3a2c"), user_messages.append)
        broker.subscribe(Topics.ADMIN_NOTIFICATIONS, admin_messages.append)

        response = api_client.post("/api/notifications", headers=ADMIN, json={
            "userId": 2,
            "typeName": "Đơn hàng đang giao",
            "message": "Đơn hàng #5102 đang được giao",
        })

        assert response.status_code == 201
        created = response.json()
        assert created["isRead"] is False
        assert user_messages[0]["data"]["id"] == created["id"]
        assert len(admin_messages) == 1

        count = api_client.get("/api/notifications/my/unread-count", headers=CUSTOMER)
        assert count.json() == {"count": 5}

    def test_non_admin_forbidden(self, api_client):
        response = api_client.post("/api/notifications", headers=CUSTOMER, json={
            "userId": 3,
            "typeName": "Đơn hàng mới",
            "message": "Hello",
        })
        assert response.status_code == 403

    def test_unknown_user(self, api_client):
        response = api_client.post("/api/notifications", headers=ADMIN, json={
            "userId": 999,
            "typeName": "Đơn hàng mới",
            "message": "Hello",
        })
        assert response.status_code == 404

    def test_empty_message(self, api_client):
        response = api_client.post("/api/notifications", headers=ADMIN, json={
            "userId": 2,
            "typeName": "Đơn hàng mới",
            "message": "",
        })
        assert response.status_code == 422
