"""
Cart aggregator for the client.

Fetches the current cart and derives the badge count: the total
quantity of AVAILABLE items. A failed fetch (including "no cart yet")
resets to an empty cart and is logged; it never raises to the caller.

Concurrent fetches are not coalesced. Whichever response resolves last
wins.
"""

import logging
from typing import Optional

from client.api_client import RestaurantApi
from client.outcome import Outcome
from shared.errors import CartNotFoundError
from shared.models import Cart

logger = logging.getLogger("cart")


class CartAggregator:
    """
    Holds the client's copy of the cart.

    Example:
        cart = CartAggregator(api)
        await cart.fetch_cart()
        print(cart.cart_item_count)
    """

    def __init__(self, api: RestaurantApi):
        self.api = api
        self.cart: Optional[Cart] = None
        self.cart_item_count: int = 0
        self.outcome: Outcome = Outcome.idle()
        self._in_flight = 0

    @property
    def is_loading(self) -> bool:
        """True while at least one fetch is in flight."""
        return self._in_flight > 0

    async def fetch_cart(self) -> None:
        """Refetch the cart and recompute the badge count."""
        self._in_flight += 1
        self.outcome = Outcome.loading()
        try:
            current = await self.api.get_current_cart()
        except CartNotFoundError as e:
            self._reset(e)
            logger.warning(f"No cart for the current user yet: {e}")
        except Exception as e:
            self._reset(e)
            logger.warning(f"Failed to fetch current cart, resetting to empty: {e}")
        else:
            self.cart = current
            self.cart_item_count = current.available_item_count()
            self.outcome = Outcome.loaded(current)
            logger.debug(f"Cart loaded with {self.cart_item_count} available item(s)")
        finally:
            self._in_flight -= 1

    def _reset(self, reason: BaseException) -> None:
        self.cart = None
        self.cart_item_count = 0
        self.outcome = Outcome.failed(reason)
