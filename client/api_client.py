"""
Client-side access to the restaurant server.

The controllers only depend on the RestaurantApi interface. Two
implementations ship:
- HttpRestaurantApi talks to the FastAPI server over httpx
- InProcessRestaurantApi calls a DataStore directly (demo, tests)

Every call is made on behalf of the current principal, which can be
switched with set_principal(). Every call may raise; the controllers
decide what a failure means.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional

import httpx

from shared.data_store import DataStore
from shared.errors import CartNotFoundError, NotAuthenticatedError, NotificationNotFoundError
from shared.models import Cart, Notification, NotificationPage, PageRequest, Principal

logger = logging.getLogger("api_client")


class RestaurantApi(ABC):
    """Operations the browser client consumes."""

    @abstractmethod
    def set_principal(self, principal: Optional[Principal]) -> None:
        """Make later calls on behalf of `principal` (None when signed out)."""

    @abstractmethod
    async def get_current_cart(self) -> Cart:
        """
        Get the current user's cart.

        Raises:
            CartNotFoundError: the user has no cart yet
        """

    @abstractmethod
    async def fetch_my_notifications(self, page: int, size: int) -> NotificationPage:
        """Get one page of the current user's notifications."""

    @abstractmethod
    async def mark_notification_as_read(self, notification_id: int) -> Notification:
        """Mark one notification as read and return the updated record."""

    @abstractmethod
    async def count_my_unread(self) -> int:
        """Count the current user's unread notifications across all pages."""


class HttpRestaurantApi(RestaurantApi):
    """
    RestaurantApi over HTTP.

    The user is identified with the X-User-Id header; real authentication
    is handled elsewhere. Without a user no header is sent and the server
    answers 401.
    """

    def __init__(
        self,
        base_url: str,
        user_id: Optional[int] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.base_url = base_url
        self.user_id = user_id
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(base_url=base_url)

    def set_principal(self, principal: Optional[Principal]) -> None:
        self.user_id = principal.user_id if principal is not None else None
        logger.debug(f"HTTP client now acting for user {self.user_id}")

    @property
    def _headers(self) -> dict[str, str]:
        if self.user_id is None:
            return {}
        return {"X-User-Id": str(self.user_id)}

    def _check(self, response: httpx.Response) -> None:
        if response.status_code == 401:
            raise NotAuthenticatedError(f"Server rejected user {self.user_id}")
        response.raise_for_status()

    async def get_current_cart(self) -> Cart:
        response = await self._client.get("/api/cart/current", headers=self._headers)
        if response.status_code == 404:
            raise CartNotFoundError(self.user_id)
        self._check(response)
        return Cart.model_validate(response.json())

    async def fetch_my_notifications(self, page: int, size: int) -> NotificationPage:
        response = await self._client.get(
            "/api/notifications/my",
            params={"page": page, "size": size},
            headers=self._headers,
        )
        self._check(response)
        return NotificationPage.model_validate(response.json())

    async def mark_notification_as_read(self, notification_id: int) -> Notification:
        response = await self._client.put(
            f"/api/notifications/{notification_id}/read",
            headers=self._headers,
        )
        if response.status_code == 404:
            raise NotificationNotFoundError(notification_id)
        self._check(response)
        return Notification.model_validate(response.json())

    async def count_my_unread(self) -> int:
        response = await self._client.get(
            "/api/notifications/my/unread-count",
            headers=self._headers,
        )
        self._check(response)
        return int(response.json()["count"])

    async def aclose(self) -> None:
        """Close the underlying client if this object created it."""
        if self._owns_client:
            await self._client.aclose()


class InProcessRestaurantApi(RestaurantApi):
    """RestaurantApi backed directly by a DataStore."""

    def __init__(self, data_store: DataStore, principal: Optional[Principal] = None):
        self.data_store = data_store
        self.principal = principal

    def set_principal(self, principal: Optional[Principal]) -> None:
        self.principal = principal

    def _user_id(self) -> int:
        if self.principal is None:
            raise NotAuthenticatedError()
        return self.principal.user_id

    async def get_current_cart(self) -> Cart:
        user_id = self._user_id()
        cart = self.data_store.get_cart(user_id)
        if cart is None:
            raise CartNotFoundError(user_id)
        return cart

    async def fetch_my_notifications(self, page: int, size: int) -> NotificationPage:
        return self.data_store.find_notifications_by_user(
            self._user_id(),
            PageRequest(page=page, size=size),
        )

    async def mark_notification_as_read(self, notification_id: int) -> Notification:
        return self.data_store.mark_notification_as_read(notification_id, self._user_id())

    async def count_my_unread(self) -> int:
        return self.data_store.count_unread_notifications(self._user_id())
