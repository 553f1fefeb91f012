"""
Shared infrastructure for the restaurant ordering platform.

This package contains code used by both the server and the client:
- Domain models (Cart, Notification, NotificationPage, ...)
- Data store for JSON-backed persistence
- Notification presentation mapping
- Settings and logging setup
- Domain exceptions
"""

from shared.models import (
    Cart,
    CartItem,
    CartItemStatus,
    MessageType,
    Notification,
    NotificationPage,
    PageRequest,
    Principal,
    RealtimeMessage,
)
from shared.data_store import DataStore
from shared.errors import (
    CartNotFoundError,
    MissingContextError,
    NotAuthenticatedError,
    NotificationNotFoundError,
    RestaurantError,
)

__all__ = [
    "Cart",
    "CartItem",
    "CartItemStatus",
    "MessageType",
    "Notification",
    "NotificationPage",
    "PageRequest",
    "Principal",
    "RealtimeMessage",
    "DataStore",
    "CartNotFoundError",
    "MissingContextError",
    "NotAuthenticatedError",
    "NotificationNotFoundError",
    "RestaurantError",
]
