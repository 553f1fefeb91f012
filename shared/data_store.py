"""
JSON-backed data store for the restaurant server.

This module is the paginated read store behind the notification
endpoints, plus the cart and user lookups the API needs.

Design decisions:
- Fixtures are loaded lazily from JSON and are the starting state
- Write operations (mark as read, new notification) update memory only
- Notifications are paged per user, newest first unless asked otherwise
- The unread count is a store-level aggregate, independent of any page
"""

import json
from datetime import datetime
from pathlib import Path
from typing import Optional

from shared.errors import NotificationNotFoundError
from shared.models import (
    Cart,
    Notification,
    NotificationPage,
    NotificationRecord,
    PageRequest,
    Principal,
)


class DataStore:
    """
    Central data store that loads and manages JSON fixtures.

    Users, notifications and carts are keyed the way the server looks
    them up: users by id, notifications by id, carts by owner.
    """

    def __init__(self, data_dir: Optional[Path] = None):
        """
        Initialize the data store.

        Args:
            data_dir: Path to the data directory containing JSON fixtures.
                     Defaults to ./data relative to project root.
        """
        if data_dir is None:
            data_dir = Path(__file__).parent.parent / "data"

        self.data_dir = Path(data_dir)

        # In-memory caches - loaded lazily
        self._users: Optional[dict[int, Principal]] = None
        self._notifications: Optional[dict[int, NotificationRecord]] = None
        self._carts: Optional[dict[int, Cart]] = None  # keyed by user_id

    # =========================================================================
    # Data Loading (lazy)
    # =========================================================================

    def _load_json(self, filename: str) -> list[dict]:
        """Load a JSON fixture file."""
        filepath = self.data_dir / filename
        if not filepath.exists():
            return []
        with open(filepath, "r", encoding="utf-8") as f:
            return json.load(f)

    def _ensure_users_loaded(self):
        if self._users is None:
            data = self._load_json("users.json")
            users = [Principal.model_validate(u) for u in data]
            self._users = {u.user_id: u for u in users}

    def _ensure_notifications_loaded(self):
        if self._notifications is None:
            data = self._load_json("notifications.json")
            records = [NotificationRecord.model_validate(n) for n in data]
            self._notifications = {r.id: r for r in records}

    def _ensure_carts_loaded(self):
        """Lazy load carts from JSON (keyed by user_id)."""
        if self._carts is None:
            data = self._load_json("carts.json")
            carts = [Cart.model_validate(c) for c in data]
            self._carts = {c.user_id: c for c in carts}

    # =========================================================================
    # User Operations
    # =========================================================================

    def get_user(self, user_id: int) -> Optional[Principal]:
        """Get a user by store id."""
        self._ensure_users_loaded()
        return self._users.get(user_id)

    def get_users(self) -> list[Principal]:
        """Get all users."""
        self._ensure_users_loaded()
        return list(self._users.values())

    # =========================================================================
    # Notification Operations
    # =========================================================================

    def find_notifications_by_user(
        self,
        user_id: int,
        page_request: Optional[PageRequest] = None,
    ) -> NotificationPage:
        """
        Get one page of a user's notifications.

        A page index past the end gives empty content with correct totals.
        """
        page_request = page_request or PageRequest()
        self._ensure_notifications_loaded()

        records = [r for r in self._notifications.values() if r.user_id == user_id]
        records.sort(
            key=lambda r: (r.created_at, r.id),
            reverse=page_request.newest_first,
        )

        start = page_request.offset
        window = records[start:start + page_request.size]
        return NotificationPage.build(
            content=[r.to_notification() for r in window],
            request=page_request,
            total_elements=len(records),
        )

    def count_unread_notifications(self, user_id: int) -> int:
        """Count a user's unread notifications across all pages."""
        self._ensure_notifications_loaded()
        return sum(
            1 for r in self._notifications.values()
            if r.user_id == user_id and not r.is_read
        )

    def get_notification(self, notification_id: int) -> Optional[Notification]:
        """Look up any notification by id, whoever owns it. Inspection helper for tests."""
        self._ensure_notifications_loaded()
        record = self._notifications.get(notification_id)
        return record.to_notification() if record else None

    def mark_notification_as_read(self, notification_id: int, user_id: int) -> Notification:
        """
        Set one notification's read flag.

        Raises:
            NotificationNotFoundError: if it does not exist or is not the user's
        """
        self._ensure_notifications_loaded()
        record = self._notifications.get(notification_id)
        if record is None or record.user_id != user_id:
            raise NotificationNotFoundError(notification_id)

        if not record.is_read:
            record = record.model_copy(update={"is_read": True})
            self._notifications[notification_id] = record
        return record.to_notification()

    def add_notification(self, user_id: int, type_name: str, message: str) -> Notification:
        """Store a new unread notification with the next id."""
        self._ensure_notifications_loaded()
        next_id = max(self._notifications, default=0) + 1
        record = NotificationRecord(
            id=next_id,
            user_id=user_id,
            type_name=type_name,
            message=message,
            created_at=datetime.utcnow(),
            is_read=False,
        )
        self._notifications[next_id] = record
        return record.to_notification()

    # =========================================================================
    # Cart Operations
    # =========================================================================

    def get_cart(self, user_id: int) -> Optional[Cart]:
        """Get a user's cart, or None when it has not been created."""
        self._ensure_carts_loaded()
        return self._carts.get(user_id)

    # =========================================================================
    # Utility Methods
    # =========================================================================

    def reload(self):
        """Force reload all data from JSON files, dropping in-memory writes (tests)."""
        self._users = None
        self._notifications = None
        self._carts = None


# Module-level singleton for convenience
# In tests, create a new DataStore instance with test fixtures
_default_store: Optional[DataStore] = None


def get_data_store() -> DataStore:
    """Get the default data store singleton."""
    global _default_store
    if _default_store is None:
        _default_store = DataStore()
    return _default_store
