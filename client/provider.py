"""
Application services for the client.

AppServices is built once at application start and handed to every
view that needs the cart, the signed-in user or a notification feed.
Its lifecycle is explicit: start() fetches the cart once, stop() closes
every feed it opened.

use_cart() and use_auth() are what a view calls to reach those
services. Calling them without a started AppServices is a programming
error and raises MissingContextError.
"""

import logging
from typing import Optional

from client.api_client import RestaurantApi
from client.cart import CartAggregator
from client.feed import NotificationFeedController, UnreadCountCallback
from realtime.broker import MessageBroker
from shared.config import Settings, get_settings
from shared.errors import MissingContextError
from shared.models import Principal

logger = logging.getLogger("app_services")


class AppServices:
    """
    Container for the client-side controllers.

    Example:
        services = AppServices(api=api, broker=broker, principal=user)
        await services.start()
        feed = await services.open_feed(on_unread_count_change=print)
        ...
        await services.stop()
    """

    def __init__(
        self,
        api: RestaurantApi,
        broker: MessageBroker,
        principal: Optional[Principal] = None,
        settings: Optional[Settings] = None,
    ):
        self.api = api
        self.broker = broker
        self.principal = principal
        self.settings = settings or get_settings()
        self.api.set_principal(principal)

        self.cart: Optional[CartAggregator] = None
        self._feeds: list[NotificationFeedController] = []
        self._started = False

    @property
    def started(self) -> bool:
        return self._started

    async def start(self) -> None:
        """Create the cart aggregator and fetch the cart once."""
        if self._started:
            logger.warning("AppServices already started")
            return

        self.cart = CartAggregator(self.api)
        self._started = True
        logger.info("AppServices started")
        await self.cart.fetch_cart()

    async def stop(self) -> None:
        """Close every open feed."""
        if not self._started:
            return
        for feed in self._feeds:
            feed.close()
        self._feeds.clear()
        self._started = False
        logger.info("AppServices stopped")

    async def open_feed(
        self,
        on_unread_count_change: Optional[UnreadCountCallback] = None,
    ) -> NotificationFeedController:
        """Mount a notification feed for the current principal."""
        if not self._started:
            raise MissingContextError("open_feed must be called on a started AppServices")

        feed = NotificationFeedController(
            api=self.api,
            broker=self.broker,
            principal=self.principal,
            page_size=self.settings.page_size,
            on_unread_count_change=on_unread_count_change,
        )
        self._feeds.append(feed)
        await feed.mount()
        return feed

    def close_feed(self, feed: NotificationFeedController) -> None:
        feed.close()
        if feed in self._feeds:
            self._feeds.remove(feed)

    async def sign_in(self, principal: Optional[Principal]) -> None:
        """
        Switch user, then refresh every open feed and the cart.

        The API is moved to the new user first so the refetches load that
        user's data. Signing out (None) empties the feeds; the cart fetch
        then fails and resets to empty.
        """
        self.principal = principal
        self.api.set_principal(principal)
        for feed in self._feeds:
            await feed.set_principal(principal)
        if self.cart is not None:
            await self.cart.fetch_cart()


def use_cart(services: Optional[AppServices]) -> CartAggregator:
    """Get the cart aggregator from a started AppServices."""
    if services is None or not services.started or services.cart is None:
        raise MissingContextError("use_cart must be used within a started AppServices")
    return services.cart


def use_auth(services: Optional[AppServices]) -> Optional[Principal]:
    """Get the signed-in user (None when signed out) from a started AppServices."""
    if services is None or not services.started:
        raise MissingContextError("use_auth must be used within a started AppServices")
    return services.principal
