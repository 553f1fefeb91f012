"""
In-memory topic broker for realtime notification delivery.

This module provides the subscription primitive the client feed is
built on: `subscribe(topic, handler)` returns an unsubscribe callable.
The server side publishes JSON-shaped messages to topics. In a real
deployment this sits behind a STOMP/WebSocket endpoint; the handshake
and reconnect mechanics are not modelled here.

Design decisions:
- Synchronous delivery, in subscription order
- Topic-based subscriptions with exact topic names
- A failing handler is logged and does not stop delivery to the others
- Unsubscribe callables are idempotent
"""

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Optional

logger = logging.getLogger("broker")


@dataclass
class PublishedMessage:
    """A message as it was published, kept for inspection."""
    topic: str
    payload: dict[str, Any]
    timestamp: datetime = field(default_factory=datetime.utcnow)

    def __str__(self) -> str:
        return f"Message({self.topic}, type={self.payload.get('type')})"


# Type aliases for handlers and the unsubscribe callable
MessageHandler = Callable[[dict[str, Any]], None]
Unsubscribe = Callable[[], None]


class MessageBroker:
    """
    Simple in-memory pub/sub keyed by topic.

    Example usage:
        broker = MessageBroker()

        unsubscribe = broker.subscribe("/topic/admin/notifications", print)
        broker.publish("/topic/admin/notifications", {"type": "NEW_NOTIFICATION", "data": {...}})
        unsubscribe()
    """

    def __init__(self):
        self._subscribers: dict[str, list[MessageHandler]] = defaultdict(list)
        self._message_log: list[PublishedMessage] = []
        self._log_messages: bool = True

    def subscribe(self, topic: str, handler: MessageHandler) -> Unsubscribe:
        """
        Subscribe a handler to a topic.

        Returns:
            A callable that removes this subscription. Calling it twice is harmless.
        """
        self._subscribers[topic].append(handler)
        logger.debug(f"Subscribed handler to '{topic}'")

        subscribed = True

        def unsubscribe() -> None:
            nonlocal subscribed
            if not subscribed:
                return
            subscribed = False
            self._remove(topic, handler)

        return unsubscribe

    def _remove(self, topic: str, handler: MessageHandler) -> bool:
        try:
            self._subscribers[topic].remove(handler)
        except ValueError:
            return False
        if not self._subscribers[topic]:
            del self._subscribers[topic]
        logger.debug(f"Unsubscribed handler from '{topic}'")
        return True

    def publish(self, topic: str, payload: dict[str, Any]) -> int:
        """
        Publish a message to every handler subscribed to the topic.

        Returns:
            Number of handlers that received the message
        """
        message = PublishedMessage(topic=topic, payload=payload)
        if self._log_messages:
            self._message_log.append(message)

        logger.info(f"Publishing: {message}")

        # Copy so handlers may unsubscribe while being called
        handlers = list(self._subscribers.get(topic, []))
        for handler in handlers:
            try:
                handler(payload)
            except Exception as e:
                logger.error(f"Handler raised exception for {message}: {e}")

        if not handlers:
            logger.debug(f"No subscribers for topic '{topic}'")

        return len(handlers)

    def get_subscriber_count(self, topic: str) -> int:
        """Get the number of subscribers for a topic."""
        return len(self._subscribers.get(topic, []))

    def get_message_log(self) -> list[PublishedMessage]:
        return self._message_log.copy()

    def clear_message_log(self) -> None:
        self._message_log.clear()

    def set_logging(self, enabled: bool) -> None:
        """Enable or disable the message log."""
        self._log_messages = enabled


# Module-level singleton used by the API process
_default_broker: Optional[MessageBroker] = None


def get_broker() -> MessageBroker:
    """Get the default broker singleton."""
    global _default_broker
    if _default_broker is None:
        _default_broker = MessageBroker()
    return _default_broker


def reset_broker() -> MessageBroker:
    """Reset the default broker (useful for testing)."""
    global _default_broker
    _default_broker = MessageBroker()
    return _default_broker
