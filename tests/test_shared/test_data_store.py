"""
Tests for the DataStore.

These tests verify that the store loads the JSON fixtures and provides
the paginated reads, counts and updates the API needs.
"""

import pytest
from pathlib import Path

from shared.data_store import DataStore
from shared.errors import NotificationNotFoundError
from shared.models import PageRequest


class TestDataStoreUsers:
    """Tests for user lookups."""

    def test_get_user(self, data_store: DataStore):
        user = data_store.get_user(2)

        assert user is not None
        assert user.public_id == "usr-7f3a2c"
        assert user.is_admin is False

    def test_get_admin(self, data_store: DataStore):
        user = data_store.get_user(1)

        assert user is not None
        assert user.public_id == "usr-admin-01"
        assert user.is_admin is True

    def test_get_nonexistent_user(self, data_store: DataStore):
        assert data_store.get_user(999) is None

    def test_get_users(self, data_store: DataStore):
        assert len(data_store.get_users()) == 3


class TestFindNotificationsByUser:
    """Tests for the paginated notification read."""

    def test_first_page_newest_first(self, data_store: DataStore):
        """Test that page 0 holds the 10 newest notifications."""
        page = data_store.find_notifications_by_user(2, PageRequest(page=0, size=10))

        assert [n.id for n in page.content] == [12, 11, 10, 9, 8, 7, 6, 5, 4, 3]
        assert page.number == 0
        assert page.size == 10
        assert page.total_elements == 12
        assert page.total_pages == 2

    def test_second_page(self, data_store: DataStore):
        page = data_store.find_notifications_by_user(2, PageRequest(page=1, size=10))

        assert [n.id for n in page.content] == [2, 1]
        assert page.total_pages == 2

    def test_oldest_first(self, data_store: DataStore):
        page = data_store.find_notifications_by_user(
            2, PageRequest(page=0, size=3, newest_first=False)
        )

        assert [n.id for n in page.content] == [1, 2, 3]
        assert page.total_pages == 4

    def test_page_past_the_end(self, data_store: DataStore):
        """Test that a page past the end is empty but keeps the totals."""
        page = data_store.find_notifications_by_user(2, PageRequest(page=5, size=10))

        assert page.content == []
        assert page.total_elements == 12
        assert page.total_pages == 2

    def test_user_without_notifications(self, data_store: DataStore):
        page = data_store.find_notifications_by_user(3, PageRequest())

        assert page.content == []
        assert page.total_pages == 0

    def test_only_own_notifications(self, data_store: DataStore):
        page = data_store.find_notifications_by_user(1, PageRequest())

        assert sorted(n.id for n in page.content) == [13, 14]

    def test_default_page_request(self, data_store: DataStore):
        page = data_store.find_notifications_by_user(2)

        assert len(page.content) == 10


class TestCountUnread:
    """Tests for the global unread count."""

    def test_count_unread(self, data_store: DataStore):
        """Test counting across all pages, not just the first."""
        assert data_store.count_unread_notifications(2) == 4
        assert data_store.count_unread_notifications(1) == 2
        assert data_store.count_unread_notifications(3) == 0

    def test_count_follows_mark_as_read(self, data_store: DataStore):
        data_store.mark_notification_as_read(12, user_id=2)

        assert data_store.count_unread_notifications(2) == 3


class TestMarkAsRead:
    """Tests for the read flag update."""

    def test_mark_as_read(self, data_store: DataStore):
        updated = data_store.mark_notification_as_read(11, user_id=2)

        assert updated.id == 11
        assert updated.is_read is True
        assert data_store.get_notification(11).is_read is True

    def test_already_read_is_idempotent(self, data_store: DataStore):
        first = data_store.mark_notification_as_read(1, user_id=2)
        second = data_store.mark_notification_as_read(1, user_id=2)

        assert first == second
        assert second.is_read is True

    def test_unknown_notification(self, data_store: DataStore):
        with pytest.raises(NotificationNotFoundError):
            data_store.mark_notification_as_read(999, user_id=2)

    def test_other_users_notification(self, data_store: DataStore):
        """Test that a user cannot mark someone else's notification."""
        with pytest.raises(NotificationNotFoundError):
            data_store.mark_notification_as_read(13, user_id=2)

        assert data_store.get_notification(13).is_read is False


class TestAddNotification:
    """Tests for creating notifications."""

    def test_add_assigns_next_id(self, data_store: DataStore):
        notification = data_store.add_notification(3, "Đặt bàn mới", "Yêu cầu đặt bàn #400")

        assert notification.id == 15
        assert notification.is_read is False
        assert data_store.count_unread_notifications(3) == 1

    def test_latest_added_is_first(self, data_store: DataStore):
        first = data_store.add_notification(3, "Đơn hàng mới", "Đơn hàng #6000")
        second = data_store.add_notification(3, "Đơn hàng được duyệt", "Đơn hàng #6000 đã được duyệt")
        page = data_store.find_notifications_by_user(3, PageRequest(page=0, size=10))

        assert [n.id for n in page.content] == [second.id, first.id]
        assert page.total_elements == 2


class TestDataStoreCarts:
    """Tests for cart lookups."""

    def test_get_cart(self, data_store: DataStore):
        cart = data_store.get_cart(2)

        assert cart is not None
        assert cart.id == 101
        assert len(cart.items) == 3
        assert cart.available_item_count() == 3

    def test_user_without_cart(self, data_store: DataStore):
        assert data_store.get_cart(3) is None


class TestDataStoreLoading:
    """Tests for fixture loading."""

    def test_missing_fixture_files(self, tmp_path: Path):
        """Test that missing files behave as empty collections."""
        store = DataStore(data_dir=tmp_path)

        assert store.get_users() == []
        assert store.find_notifications_by_user(1).total_pages == 0
        assert store.get_cart(1) is None

    def test_reload_discards_writes(self, data_store: DataStore):
        data_store.mark_notification_as_read(12, user_id=2)
        data_store.reload()

        assert data_store.get_notification(12).is_read is False
