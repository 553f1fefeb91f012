"""
Domain models for the restaurant ordering platform.

These models describe what the server owns (notifications, carts, users)
and what the client holds a transient copy of. Wire names follow the
server's JSON (camelCase); Python attributes are snake_case.

Design decisions:
- Using Pydantic for validation and serialization
- Aliases carry the wire names, either form is accepted on input
- Cart status is a plain string so unknown statuses survive a round trip
"""

import math
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    """Base for models that travel over HTTP or the realtime broker."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# =============================================================================
# Enums
# =============================================================================

class CartItemStatus(str, Enum):
    """
    Availability of a dish in the cart.

    The server may send other values; only AVAILABLE items count
    towards the cart badge.
    """
    AVAILABLE = "AVAILABLE"
    UNAVAILABLE = "UNAVAILABLE"


class MessageType(str, Enum):
    """Realtime message types the client reacts to."""
    NEW_NOTIFICATION = "NEW_NOTIFICATION"


# =============================================================================
# Users
# =============================================================================

class Principal(WireModel):
    """
    The authenticated user.

    `user_id` keys the store, `public_id` names the per-user realtime topic.
    """
    user_id: int = Field(..., description="Store key")
    public_id: str = Field(..., description="Public identifier used in topic names")
    name: str = Field(default="")
    is_admin: bool = Field(default=False)


# =============================================================================
# Cart
# =============================================================================

class CartItem(WireModel):
    """A single dish in a cart."""
    id: int
    menu_item_id: Optional[int] = None
    name: str = ""
    unit_price: float = Field(default=0.0, ge=0)
    quantity: int = Field(..., ge=0)
    status: str = Field(default=CartItemStatus.AVAILABLE.value)

    @field_validator("status", mode="before")
    @classmethod
    def _status_to_str(cls, value: Any) -> Any:
        if isinstance(value, Enum):
            return value.value
        return value

    def is_available(self) -> bool:
        return self.status == CartItemStatus.AVAILABLE.value


class Cart(WireModel):
    """
    A user's cart.

    Read-only from the client's point of view; the client copy is a
    cache refreshed by an explicit refetch.
    """
    id: Optional[int] = None
    user_id: Optional[int] = None
    items: list[CartItem] = Field(default_factory=list)
    updated_at: Optional[datetime] = None

    @field_validator("items", mode="before")
    @classmethod
    def _none_is_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    def available_item_count(self) -> int:
        """Total quantity over AVAILABLE items. Other statuses count as zero."""
        return sum(item.quantity for item in self.items if item.is_available())


# =============================================================================
# Notifications
# =============================================================================

class Notification(WireModel):
    """
    A notification as the client sees it.

    `type_name` is the category label used by the presentation mapping.
    """
    id: int
    type_name: str = ""
    message: str = ""
    created_at: datetime = Field(default_factory=datetime.utcnow)
    is_read: bool = False


class NotificationRecord(Notification):
    """A stored notification, with its owner."""
    user_id: int

    def to_notification(self) -> Notification:
        return Notification(**self.model_dump(exclude={"user_id"}))


class PageRequest(BaseModel):
    """A zero-indexed page window."""
    page: int = Field(default=0, ge=0)
    size: int = Field(default=10, ge=1)
    newest_first: bool = True

    @property
    def offset(self) -> int:
        return self.page * self.size


class NotificationPage(WireModel):
    """
    One page of notifications, shaped like a Spring Data page.
    """
    content: list[Notification] = Field(default_factory=list)
    number: int = 0
    size: int = 10
    total_elements: int = 0
    total_pages: int = 0

    @classmethod
    def build(
        cls,
        content: list[Notification],
        request: PageRequest,
        total_elements: int,
    ) -> "NotificationPage":
        return cls(
            content=content,
            number=request.page,
            size=request.size,
            total_elements=total_elements,
            total_pages=math.ceil(total_elements / request.size),
        )

    @property
    def is_empty(self) -> bool:
        return not self.content


class RealtimeMessage(WireModel):
    """
    A message delivered on a realtime topic.

    Handlers only act on NEW_NOTIFICATION messages that carry data.
    """
    type: str
    data: Optional[Notification] = None

    def is_new_notification(self) -> bool:
        return self.type == MessageType.NEW_NOTIFICATION.value and self.data is not None
