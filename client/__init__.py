"""
Client-side controllers for the restaurant ordering platform.

- RestaurantApi and its HTTP / in-process implementations
- CartAggregator: cart copy and available-item badge count
- NotificationFeedController: one page of notifications kept live by push
- AppServices: builds and owns the controllers for the application
"""

from client.api_client import HttpRestaurantApi, InProcessRestaurantApi, RestaurantApi
from client.cart import CartAggregator
from client.feed import FeedStatus, NotificationFeedController
from client.outcome import Outcome, OutcomeState
from client.provider import AppServices, use_auth, use_cart

__all__ = [
    "RestaurantApi",
    "HttpRestaurantApi",
    "InProcessRestaurantApi",
    "CartAggregator",
    "FeedStatus",
    "NotificationFeedController",
    "Outcome",
    "OutcomeState",
    "AppServices",
    "use_auth",
    "use_cart",
]
