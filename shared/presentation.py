"""
Visual treatment for notification categories.

The server labels every notification with a category (`typeName`).
This module maps a label to the classes and icon the feed renders it
with. It is a pure lookup: unknown labels get a neutral treatment.

Design decisions:
- Labels are the exact strings the server sends (Vietnamese)
- Treatments are utility-class names, not colours, so a view can use them as-is
- Read notifications are rendered plainly by the view, not here
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class NotificationCategory(str, Enum):
    """
    Category labels the server assigns to notifications.

    Order lifecycle and table reservation lifecycle.
    """
    # Orders
    NEW_ORDER = "Đơn hàng mới"
    ORDER_APPROVED = "Đơn hàng được duyệt"
    ORDER_SHIPPING = "Đơn hàng đang giao"
    ORDER_DELIVERED = "Đơn hàng đã giao"
    ORDER_CANCELLED = "Đơn hàng bị hủy"

    # Table reservations
    NEW_RESERVATION = "Đặt bàn mới"
    RESERVATION_APPROVED = "Đặt bàn được duyệt"
    RESERVATION_COMPLETED = "Hoàn tất đặt bàn"
    RESERVATION_CANCELLED = "Đặt bàn bị hủy"


@dataclass(frozen=True)
class NotificationStyle:
    """Background, border and icon for one category."""
    background: str
    border: str
    icon: str
    icon_color: str


DEFAULT_STYLE = NotificationStyle(
    background="bg-gray-50",
    border="border-gray-300",
    icon="information-circle",
    icon_color="text-gray-500",
)


# =============================================================================
# Style Definitions
# =============================================================================

STYLES: dict[str, NotificationStyle] = {

    # -------------------------------------------------------------------------
    # Orders
    # -------------------------------------------------------------------------

    NotificationCategory.NEW_ORDER.value: NotificationStyle(
        background="bg-blue-50",
        border="border-blue-500",
        icon="shopping-cart",
        icon_color="text-blue-600",
    ),
    NotificationCategory.ORDER_APPROVED.value: NotificationStyle(
        background="bg-emerald-50",
        border="border-emerald-600",
        icon="check-circle",
        icon_color="text-emerald-700",
    ),
    NotificationCategory.ORDER_SHIPPING.value: NotificationStyle(
        background="bg-amber-50",
        border="border-amber-500",
        icon="truck",
        icon_color="text-amber-600",
    ),
    NotificationCategory.ORDER_DELIVERED.value: NotificationStyle(
        background="bg-cyan-50",
        border="border-cyan-600",
        icon="archive",
        icon_color="text-cyan-700",
    ),
    NotificationCategory.ORDER_CANCELLED.value: NotificationStyle(
        background="bg-rose-50",
        border="border-rose-600",
        icon="x-circle",
        icon_color="text-rose-700",
    ),

    # -------------------------------------------------------------------------
    # Table reservations
    # -------------------------------------------------------------------------

    NotificationCategory.NEW_RESERVATION.value: NotificationStyle(
        background="bg-purple-50",
        border="border-purple-500",
        icon="calendar",
        icon_color="text-purple-600",
    ),
    NotificationCategory.RESERVATION_APPROVED.value: NotificationStyle(
        background="bg-lime-50",
        border="border-lime-600",
        icon="check-circle",
        icon_color="text-lime-700",
    ),
    NotificationCategory.RESERVATION_COMPLETED.value: NotificationStyle(
        background="bg-indigo-50",
        border="border-indigo-600",
        icon="sparkles",
        icon_color="text-indigo-700",
    ),
    NotificationCategory.RESERVATION_CANCELLED.value: NotificationStyle(
        background="bg-red-50",
        border="border-red-600",
        icon="x-circle",
        icon_color="text-red-700",
    ),
}


# =============================================================================
# Lookup Functions
# =============================================================================

def get_style(type_name: Optional[str]) -> NotificationStyle:
    """Get the treatment for a category label, or the neutral default."""
    if type_name is None:
        return DEFAULT_STYLE
    if isinstance(type_name, Enum):
        type_name = type_name.value
    return STYLES.get(type_name, DEFAULT_STYLE)


def format_created_at(created_at: datetime) -> str:
    """Format a timestamp the way the feed shows it (vi-VN style)."""
    return created_at.strftime("%H:%M:%S %d/%m/%Y")
