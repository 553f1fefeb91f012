"""
Shared pytest fixtures for the restaurant ordering tests.

These fixtures provide consistent test data and fresh state for each test.
"""

import asyncio
from datetime import datetime, timedelta
from pathlib import Path
from typing import Optional

import pytest

from client.api_client import RestaurantApi
from realtime.broker import MessageBroker
from shared.data_store import DataStore
from shared.models import Cart, Notification, NotificationPage, Principal


@pytest.fixture
def data_dir() -> Path:
    """Path to the fixture data directory."""
    return Path(__file__).parent.parent / "data"


@pytest.fixture
def data_store(data_dir: Path) -> DataStore:
    """
    Fresh DataStore instance for each test.

    Uses the real JSON fixtures but creates a new instance
    so in-memory writes don't leak between tests.
    """
    return DataStore(data_dir=data_dir)


@pytest.fixture
def broker() -> MessageBroker:
    """Fresh broker for each test."""
    return MessageBroker()


# =============================================================================
# User Fixtures
# =============================================================================

@pytest.fixture
def admin(data_store: DataStore) -> Principal:
    """Nguyen Van An (admin, 2 unread notifications, no cart)."""
    return data_store.get_user(1)


@pytest.fixture
def customer(data_store: DataStore) -> Principal:
    """
    Tran Thi Binh.

    12 notifications (ids 1-12), unread: 4, 9, 11, 12.
    Cart 101: 2 + 1 AVAILABLE, 5 UNAVAILABLE.
    """
    return data_store.get_user(2)


@pytest.fixture
def new_customer(data_store: DataStore) -> Principal:
    """Le Minh Chau (no notifications, no cart)."""
    return data_store.get_user(3)


# =============================================================================
# Fake API
# =============================================================================

class FakeRestaurantApi(RestaurantApi):
    """
    Scriptable RestaurantApi.

    Pages are served from `pages`; `hold(page)` returns an event the
    fetch for that page waits on, so tests control resolution order.
    """

    def __init__(self):
        self.pages: dict[int, NotificationPage] = {}
        self.cart: Optional[Cart] = None
        self.cart_error: Optional[Exception] = None
        self.page_error: Optional[Exception] = None
        self.mark_error: Optional[Exception] = None
        self.unread_total = 0
        self.calls: list[tuple] = []
        self._gates: dict[int, asyncio.Event] = {}

    def hold(self, page: int) -> asyncio.Event:
        gate = asyncio.Event()
        self._gates[page] = gate
        return gate

    def calls_to(self, name: str) -> list[tuple]:
        return [c for c in self.calls if c[0] == name]

    def set_principal(self, principal: Optional[Principal]) -> None:
        self.calls.append(("set_principal", principal.user_id if principal else None))

    async def get_current_cart(self) -> Cart:
        self.calls.append(("get_current_cart",))
        if self.cart_error is not None:
            raise self.cart_error
        return self.cart

    async def fetch_my_notifications(self, page: int, size: int) -> NotificationPage:
        self.calls.append(("fetch_my_notifications", page, size))
        gate = self._gates.get(page)
        if gate is not None:
            await gate.wait()
        if self.page_error is not None:
            raise self.page_error
        return self.pages.get(page, NotificationPage(number=page, size=size))

    async def mark_notification_as_read(self, notification_id: int) -> Notification:
        self.calls.append(("mark_notification_as_read", notification_id))
        if self.mark_error is not None:
            raise self.mark_error
        for page in self.pages.values():
            for n in page.content:
                if n.id == notification_id:
                    return n.model_copy(update={"is_read": True})
        return Notification(id=notification_id, is_read=True)

    async def count_my_unread(self) -> int:
        self.calls.append(("count_my_unread",))
        return self.unread_total


@pytest.fixture
def fake_api() -> FakeRestaurantApi:
    return FakeRestaurantApi()


@pytest.fixture
def make_notification():
    """Factory for notifications; later ids get later timestamps."""
    base = datetime(2026, 10, 1, 9, 0, 0)

    def _make(id: int, is_read: bool = False, type_name: str = "Đơn hàng mới") -> Notification:
        return Notification(
            id=id,
            type_name=type_name,
            message=f"Notification {id}",
            created_at=base + timedelta(minutes=id),
            is_read=is_read,
        )

    return _make


@pytest.fixture
def make_page():
    """Factory for a NotificationPage."""
    def _make(content: list[Notification], number: int = 0, size: int = 10, total_pages: int = 1) -> NotificationPage:
        return NotificationPage(
            content=content,
            number=number,
            size=size,
            total_elements=len(content),
            total_pages=total_pages,
        )

    return _make
