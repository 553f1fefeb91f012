"""
Realtime topic names and message builders.

Topics:
- /topic/notifications/{public_id}: notifications for one user
- /topic/admin/notifications: broadcast to every admin view

Messages are JSON-shaped dicts: {"type": "NEW_NOTIFICATION", "data": {...}}
"""

from typing import Any

from shared.models import MessageType, Notification


class Topics:
    """Constants for topic names."""
    USER_NOTIFICATIONS_PREFIX = "/topic/notifications/"
    ADMIN_NOTIFICATIONS = "/topic/admin/notifications"


def user_notifications_topic(public_id: str) -> str:
    """Topic carrying one user's notifications."""
    return f"{Topics.USER_NOTIFICATIONS_PREFIX}{public_id}"


def new_notification_message(notification: Notification) -> dict[str, Any]:
    """
    Build a NEW_NOTIFICATION message.

    The notification is serialized with its wire names so a client
    sees the same shape over the broker as over HTTP.
    """
    return {
        "type": MessageType.NEW_NOTIFICATION.value,
        "data": notification.model_dump(mode="json", by_alias=True),
    }
