"""
Server-side notification publisher.

Creates a notification in the store and pushes it to the owner's topic
and to the admin broadcast topic. Services that want to tell a user
something (order approved, table booked) go through here.
"""

import logging
from typing import Optional

from realtime.broker import MessageBroker, get_broker
from realtime.topics import Topics, new_notification_message, user_notifications_topic
from shared.data_store import DataStore, get_data_store
from shared.models import Notification

logger = logging.getLogger("notification_publisher")


class NotificationPublisher:
    """
    Persists notifications and pushes them to realtime topics.

    Example:
        publisher = NotificationPublisher(data_store=store, broker=broker)
        publisher.notify_user(2, "Đơn hàng được duyệt", "Đơn hàng #5001 đã được duyệt")
    """

    def __init__(
        self,
        data_store: Optional[DataStore] = None,
        broker: Optional[MessageBroker] = None,
    ):
        self.data_store = data_store or get_data_store()
        self.broker = broker or get_broker()

    def notify_user(
        self,
        user_id: int,
        type_name: str,
        message: str,
        broadcast_to_admins: bool = True,
    ) -> Notification:
        """
        Store a notification for a user and push it.

        Raises:
            ValueError: if the user does not exist
        """
        user = self.data_store.get_user(user_id)
        if user is None:
            raise ValueError(f"Unknown user: {user_id}")

        notification = self.data_store.add_notification(user_id, type_name, message)
        payload = new_notification_message(notification)

        delivered = self.broker.publish(user_notifications_topic(user.public_id), payload)
        if broadcast_to_admins:
            delivered += self.broker.publish(Topics.ADMIN_NOTIFICATIONS, payload)

        logger.info(
            f"Notification {notification.id} for user {user_id} "
            f"delivered to {delivered} subscriber(s)"
        )
        return notification
