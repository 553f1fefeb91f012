"""
Realtime delivery of notifications.

The broker is the subscribe/publish primitive; the publisher is what
the server uses to store a notification and push it to the right topics.
"""

from realtime.broker import MessageBroker, get_broker, reset_broker
from realtime.publisher import NotificationPublisher
from realtime.topics import Topics, new_notification_message, user_notifications_topic

__all__ = [
    "MessageBroker",
    "get_broker",
    "reset_broker",
    "NotificationPublisher",
    "Topics",
    "new_notification_message",
    "user_notifications_topic",
]
