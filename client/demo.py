"""
Demonstration scripts for the client controllers.

These functions run the cart aggregator and the notification feed
against the JSON fixtures, in process, and print what a view would show.
"""

import asyncio

from client.api_client import InProcessRestaurantApi
from client.provider import AppServices, use_cart
from realtime.broker import MessageBroker
from realtime.publisher import NotificationPublisher
from shared.config import configure_logging, get_settings
from shared.data_store import DataStore
from shared.presentation import NotificationCategory, format_created_at, get_style

# Tran Thi Binh: has a cart and two pages of notifications
DEMO_USER_ID = 2


def _print_feed(feed) -> None:
    print(f"\nPage {feed.page_index + 1}/{max(feed.total_pages, 1)} ({feed.status.value})")
    if feed.is_empty:
        print("  (no notifications)")
    for n in feed.notifications:
        style = get_style(n.type_name)
        marker = "*" if not n.is_read else " "
        print(f"  {marker} [{style.icon:<18}] #{n.id:<3} {n.message}  ({format_created_at(n.created_at)})")


async def _cart_demo() -> None:
    print("\n" + "=" * 70)
    print("CLIENT DEMO: Cart badge")
    print("=" * 70)

    store = DataStore()
    services = AppServices(
        api=InProcessRestaurantApi(store, store.get_user(DEMO_USER_ID)),
        broker=MessageBroker(),
        principal=store.get_user(DEMO_USER_ID),
    )
    await services.start()

    cart = use_cart(services)
    for item in cart.cart.items:
        print(f"  {item.name:<18} x{item.quantity}  {item.status}")
    print(f"\nBadge: {cart.cart_item_count} (only AVAILABLE items count)")

    await services.stop()


async def _feed_demo() -> None:
    print("\n" + "=" * 70)
    print("CLIENT DEMO: Notification feed")
    print("=" * 70)

    store = DataStore()
    broker = MessageBroker()
    principal = store.get_user(DEMO_USER_ID)
    services = AppServices(
        api=InProcessRestaurantApi(store, principal),
        broker=broker,
        principal=principal,
    )
    await services.start()

    badge = []
    feed = await services.open_feed(on_unread_count_change=badge.append)
    _print_feed(feed)
    print(f"Unread on this page: {badge[-1]}")

    print("\n" + "-" * 70)
    print("ACTION: The kitchen approves a new order (pushed on the user's topic)")
    print("-" * 70)
    publisher = NotificationPublisher(data_store=store, broker=broker)
    publisher.notify_user(
        DEMO_USER_ID,
        NotificationCategory.ORDER_APPROVED.value,
        "Đơn hàng #5102 đã được duyệt",
    )
    _print_feed(feed)
    print(f"Unread on this page: {badge[-1]}")

    print("\n" + "-" * 70)
    print("ACTION: Mark the newest notification as read")
    print("-" * 70)
    await feed.mark_as_read(feed.notifications[0].id)
    _print_feed(feed)
    print(f"Unread on this page: {badge[-1]}")

    await feed.go_to_page(1)
    _print_feed(feed)

    total = await feed.refresh_global_unread()
    print(f"\nUnread across all pages (server): {total}")

    await services.stop()


def run_cart_demo():
    """Fetch the demo user's cart and show the badge count."""
    asyncio.run(_cart_demo())


def run_feed_demo():
    """Load, push into, mark and page through the demo user's feed."""
    asyncio.run(_feed_demo())


def main():
    configure_logging(get_settings())
    run_cart_demo()
    run_feed_demo()


if __name__ == "__main__":
    main()
