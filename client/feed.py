"""
Notification feed controller for the client.

The feed holds one page of the current user's notifications and keeps
it live with two realtime subscriptions:
- the user's own topic: new notifications are prepended and the
  reported unread count goes up by one
- the admin broadcast topic: new notifications are prepended, the
  reported unread count is left alone

State changes go through a pure reducer over tagged events (page
loaded, page failed, notification pushed, marked as read). Every page
load gets a new generation number and a settle event from an older
generation is discarded, so a slow response for a page the user has
already left cannot overwrite the page they are on.

The unread count reported to `on_unread_count_change` is computed over
the loaded page only. The global count lives on the server and is
fetched with `refresh_global_unread()`.
"""

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Callable, Optional, Union

from pydantic import ValidationError

from client.api_client import RestaurantApi
from client.outcome import Outcome
from realtime.broker import MessageBroker, Unsubscribe
from realtime.topics import Topics, user_notifications_topic
from shared.models import Notification, NotificationPage, Principal, RealtimeMessage

logger = logging.getLogger("notification_feed")

DEFAULT_PAGE_SIZE = 10

UnreadCountCallback = Callable[[int], None]


class FeedStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    LOADED_EMPTY = "loaded_empty"
    ERROR_SETTLED = "error_settled"


@dataclass(frozen=True)
class FeedState:
    """Everything the feed view renders from."""
    notifications: tuple[Notification, ...] = ()
    page_index: int = 0
    total_pages: int = 0
    status: FeedStatus = FeedStatus.IDLE
    generation: int = 0
    outcome: Outcome = field(default_factory=Outcome.idle)

    @property
    def unread_count(self) -> int:
        return sum(1 for n in self.notifications if not n.is_read)


# =============================================================================
# Events
# =============================================================================

@dataclass(frozen=True)
class LoadRequested:
    page_index: int


@dataclass(frozen=True)
class PageLoaded:
    generation: int
    page: NotificationPage


@dataclass(frozen=True)
class PageFailed:
    generation: int
    reason: BaseException


@dataclass(frozen=True)
class NotificationPushed:
    notification: Notification
    counts_as_unread: bool


@dataclass(frozen=True)
class MarkedAsRead:
    notification: Notification


@dataclass(frozen=True)
class Reset:
    """The principal went away."""


FeedEvent = Union[LoadRequested, PageLoaded, PageFailed, NotificationPushed, MarkedAsRead, Reset]


def reduce(state: FeedState, event: FeedEvent) -> tuple[FeedState, Optional[int]]:
    """
    Apply one event to the feed state.

    Returns:
        Tuple of (new state, unread count to report or None)
    """
    if isinstance(event, LoadRequested):
        return replace(
            state,
            page_index=event.page_index,
            status=FeedStatus.LOADING,
            generation=state.generation + 1,
            outcome=Outcome.loading(),
        ), None

    if isinstance(event, PageLoaded):
        if event.generation != state.generation:
            return state, None
        content = tuple(event.page.content)
        new_state = replace(
            state,
            notifications=content,
            total_pages=event.page.total_pages,
            status=FeedStatus.LOADED if content else FeedStatus.LOADED_EMPTY,
            outcome=Outcome.loaded(event.page),
        )
        return new_state, new_state.unread_count

    if isinstance(event, PageFailed):
        if event.generation != state.generation:
            return state, None
        return replace(
            state,
            notifications=(),
            total_pages=0,
            status=FeedStatus.ERROR_SETTLED,
            outcome=Outcome.failed(event.reason),
        ), 0

    if isinstance(event, NotificationPushed):
        previous_unread = state.unread_count
        status = FeedStatus.LOADED if state.status == FeedStatus.LOADED_EMPTY else state.status
        new_state = replace(
            state,
            notifications=(event.notification,) + state.notifications,
            status=status,
        )
        if event.counts_as_unread:
            return new_state, previous_unread + 1
        return new_state, None

    if isinstance(event, MarkedAsRead):
        updated = event.notification
        notifications = tuple(
            updated if n.id == updated.id else n
            for n in state.notifications
        )
        unread = sum(1 for n in notifications if n.id != updated.id and not n.is_read)
        return replace(state, notifications=notifications), unread

    if isinstance(event, Reset):
        # Bump the generation so in-flight loads for the old principal are dropped
        return FeedState(generation=state.generation + 1), 0

    raise TypeError(f"Unknown feed event: {event!r}")


class NotificationFeedController:
    """
    One mounted notification feed.

    Example:
        feed = NotificationFeedController(api, broker, principal, on_unread_count_change=badge.set)
        await feed.mount()
        await feed.go_to_page(1)
        await feed.mark_as_read(42)
        feed.close()
    """

    def __init__(
        self,
        api: RestaurantApi,
        broker: MessageBroker,
        principal: Optional[Principal] = None,
        page_size: int = DEFAULT_PAGE_SIZE,
        on_unread_count_change: Optional[UnreadCountCallback] = None,
    ):
        self.api = api
        self.broker = broker
        self.principal = principal
        self.page_size = page_size
        self.on_unread_count_change = on_unread_count_change

        self.state = FeedState()
        self.global_unread_count: Optional[int] = None

        self._unsubscribe_user: Optional[Unsubscribe] = None
        self._unsubscribe_admin: Optional[Unsubscribe] = None
        self._mounted = False
        self._closed = False

    # =========================================================================
    # View-facing state
    # =========================================================================

    @property
    def notifications(self) -> list[Notification]:
        return list(self.state.notifications)

    @property
    def page_index(self) -> int:
        return self.state.page_index

    @property
    def total_pages(self) -> int:
        return self.state.total_pages

    @property
    def status(self) -> FeedStatus:
        return self.state.status

    @property
    def outcome(self) -> Outcome:
        return self.state.outcome

    @property
    def is_loading(self) -> bool:
        return self.state.status == FeedStatus.LOADING

    @property
    def is_empty(self) -> bool:
        return not self.state.notifications

    @property
    def unread_count(self) -> int:
        """Unread entries on the loaded page."""
        return self.state.unread_count

    @property
    def closed(self) -> bool:
        return self._closed

    # =========================================================================
    # Lifecycle
    # =========================================================================

    async def mount(self) -> None:
        """Subscribe to both topics and load the current page."""
        if self._mounted:
            logger.warning("Notification feed already mounted")
            return
        if self._closed:
            raise RuntimeError("Cannot mount a closed notification feed")

        self._mounted = True
        self._unsubscribe_admin = self.broker.subscribe(
            Topics.ADMIN_NOTIFICATIONS, self._on_admin_message
        )
        self._subscribe_user()
        logger.info("Notification feed mounted")

        if self.principal is not None:
            await self._load(self.state.page_index)

    def close(self) -> None:
        """Stop listening. Results still in flight are ignored."""
        if self._closed:
            return
        self._closed = True
        for unsubscribe in (self._unsubscribe_user, self._unsubscribe_admin):
            if unsubscribe is not None:
                unsubscribe()
        self._unsubscribe_user = None
        self._unsubscribe_admin = None
        logger.info("Notification feed closed")

    async def set_principal(self, principal: Optional[Principal]) -> None:
        """Switch user: resubscribe the user topic and reload the current page."""
        if self._closed:
            return
        if self._unsubscribe_user is not None:
            self._unsubscribe_user()
            self._unsubscribe_user = None

        self.principal = principal
        if principal is None:
            self._dispatch(Reset())
            return

        if self._mounted:
            self._subscribe_user()
            await self._load(self.state.page_index)

    def _subscribe_user(self) -> None:
        if self.principal is None:
            return
        topic = user_notifications_topic(self.principal.public_id)
        self._unsubscribe_user = self.broker.subscribe(topic, self._on_user_message)

    # =========================================================================
    # Paging
    # =========================================================================

    async def go_to_page(self, page_index: int) -> None:
        """Load another page. The index is clamped to the known page range."""
        if self.principal is None:
            logger.debug("No principal, ignoring page change")
            return
        await self._load(self._clamp(page_index))

    async def reload(self) -> None:
        if self.principal is not None:
            await self._load(self.state.page_index)

    def _clamp(self, page_index: int) -> int:
        page_index = max(0, page_index)
        if self.state.total_pages > 0:
            page_index = min(page_index, self.state.total_pages - 1)
        return page_index

    async def _load(self, page_index: int) -> None:
        if self._closed:
            return

        self._dispatch(LoadRequested(page_index))
        generation = self.state.generation

        try:
            page = await self.api.fetch_my_notifications(page_index, self.page_size)
        except Exception as e:
            logger.error(f"Failed to load notifications page {page_index}: {e}")
            self._settle(PageFailed(generation, e))
        else:
            self._settle(PageLoaded(generation, page))

    def _settle(self, event: Union[PageLoaded, PageFailed]) -> None:
        if self._closed:
            logger.debug("Feed closed, ignoring page result")
            return
        if event.generation != self.state.generation:
            logger.debug(
                f"Discarding stale page result (generation {event.generation}, "
                f"current {self.state.generation})"
            )
            return
        self._dispatch(event)

    # =========================================================================
    # Read state
    # =========================================================================

    async def mark_as_read(self, notification_id: int) -> bool:
        """
        Mark one loaded notification as read.

        Returns:
            True if the server call was made and applied. Already-read or
            unknown entries make no call.
        """
        entry = next((n for n in self.state.notifications if n.id == notification_id), None)
        if entry is None or entry.is_read:
            return False

        try:
            updated = await self.api.mark_notification_as_read(notification_id)
        except Exception as e:
            logger.error(f"Failed to mark notification {notification_id} as read: {e}")
            return False

        if self._closed:
            return False
        self._dispatch(MarkedAsRead(updated))
        return True

    async def refresh_global_unread(self) -> Optional[int]:
        """Fetch the server's unread count over all pages."""
        try:
            count = await self.api.count_my_unread()
        except Exception as e:
            logger.error(f"Failed to fetch unread count: {e}")
            return self.global_unread_count

        if not self._closed:
            self.global_unread_count = count
        return count

    # =========================================================================
    # Realtime handlers
    # =========================================================================

    def _on_user_message(self, payload: dict) -> None:
        self._on_message(payload, counts_as_unread=True)

    def _on_admin_message(self, payload: dict) -> None:
        self._on_message(payload, counts_as_unread=False)

    def _on_message(self, payload: dict, counts_as_unread: bool) -> None:
        if self._closed:
            return
        try:
            message = RealtimeMessage.model_validate(payload)
        except ValidationError as e:
            logger.warning(f"Ignoring malformed realtime message: {e}")
            return

        if not message.is_new_notification():
            return
        self._dispatch(NotificationPushed(message.data, counts_as_unread))

    def _dispatch(self, event: FeedEvent) -> None:
        self.state, report = reduce(self.state, event)
        if report is not None and self.on_unread_count_change is not None:
            self.on_unread_count_change(report)
