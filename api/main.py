"""
FastAPI application for the restaurant ordering platform.

This application provides:
1. Paginated notification reads for the signed-in user
2. The user's global unread count
3. Mark-as-read for a single notification
4. The current cart
5. An admin endpoint that creates a notification and pushes it

The signed-in user is taken from the X-User-Id header. Authentication
itself is handled in front of this service.

Run with:
    uvicorn api.main:app --reload

Then visit http://localhost:8000/docs for interactive API documentation.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, Header, HTTPException, Query
from pydantic import BaseModel, Field

from realtime.broker import MessageBroker, get_broker
from realtime.publisher import NotificationPublisher
from shared.config import configure_logging, get_settings
from shared.data_store import DataStore, get_data_store
from shared.errors import NotificationNotFoundError
from shared.models import Cart, Notification, NotificationPage, PageRequest, Principal, WireModel

logger = logging.getLogger("restaurant_api")

settings = get_settings()


# Response / request models
class UnreadCount(BaseModel):
    count: int


class NotificationCreate(WireModel):
    """Admin request to notify a user."""
    user_id: int
    type_name: str = Field(..., min_length=1)
    message: str = Field(..., min_length=1)
    broadcast_to_admins: bool = True


# Module-level instances (replaced in tests with reset_api_state)
_data_store: Optional[DataStore] = None
_broker: Optional[MessageBroker] = None


def get_store() -> DataStore:
    """Get the data store instance."""
    global _data_store
    if _data_store is None:
        _data_store = get_data_store()
    return _data_store


def get_message_broker() -> MessageBroker:
    """Get the broker instance."""
    global _broker
    if _broker is None:
        _broker = get_broker()
    return _broker


def reset_api_state(
    data_store: Optional[DataStore] = None,
    broker: Optional[MessageBroker] = None,
) -> None:
    """Reset API state (for testing)."""
    global _data_store, _broker
    _data_store = data_store
    _broker = broker


def get_current_principal(
    x_user_id: Optional[int] = Header(default=None),
    data_store: DataStore = Depends(get_store),
) -> Principal:
    """Resolve the signed-in user from the X-User-Id header."""
    if x_user_id is None:
        raise HTTPException(status_code=401, detail="Not authenticated")
    principal = data_store.get_user(x_user_id)
    if principal is None:
        raise HTTPException(status_code=401, detail=f"Unknown user: {x_user_id}")
    return principal


def get_admin_principal(principal: Principal = Depends(get_current_principal)) -> Principal:
    if not principal.is_admin:
        raise HTTPException(status_code=403, detail="Admin privileges required")
    return principal


# Application lifespan
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown."""
    configure_logging(settings)
    logger.info("Starting restaurant API")
    yield
    logger.info("Shutting down")


app = FastAPI(
    title="Restaurant Ordering API",
    description="Notifications and cart endpoints for the restaurant ordering client.",
    version="1.0.0",
    lifespan=lifespan,
)


# =============================================================================
# Health Check
# =============================================================================

@app.get("/health", tags=["Health"])
def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "restaurant-api"}


# =============================================================================
# Notifications
# =============================================================================

@app.get("/api/notifications/my", response_model=NotificationPage, tags=["Notifications"])
def get_my_notifications(
    page: int = Query(default=0, ge=0),
    size: int = Query(default=settings.page_size, ge=1, le=settings.max_page_size),
    principal: Principal = Depends(get_current_principal),
    data_store: DataStore = Depends(get_store),
) -> NotificationPage:
    """One page of the signed-in user's notifications, newest first."""
    return data_store.find_notifications_by_user(
        principal.user_id,
        PageRequest(page=page, size=size),
    )


@app.get("/api/notifications/my/unread-count", response_model=UnreadCount, tags=["Notifications"])
def get_my_unread_count(
    principal: Principal = Depends(get_current_principal),
    data_store: DataStore = Depends(get_store),
) -> UnreadCount:
    """Unread notifications for the signed-in user, across all pages."""
    return UnreadCount(count=data_store.count_unread_notifications(principal.user_id))


@app.put("/api/notifications/{notification_id}/read", response_model=Notification, tags=["Notifications"])
def mark_notification_as_read(
    notification_id: int,
    principal: Principal = Depends(get_current_principal),
    data_store: DataStore = Depends(get_store),
) -> Notification:
    """Mark one of the signed-in user's notifications as read."""
    try:
        return data_store.mark_notification_as_read(notification_id, principal.user_id)
    except NotificationNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@app.post("/api/notifications", response_model=Notification, status_code=201, tags=["Notifications"])
def create_notification(
    request: NotificationCreate,
    admin: Principal = Depends(get_admin_principal),
    data_store: DataStore = Depends(get_store),
    broker: MessageBroker = Depends(get_message_broker),
) -> Notification:
    """Create a notification for a user and push it to their topic."""
    publisher = NotificationPublisher(data_store=data_store, broker=broker)
    try:
        notification = publisher.notify_user(
            request.user_id,
            request.type_name,
            request.message,
            broadcast_to_admins=request.broadcast_to_admins,
        )
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))

    logger.info(f"Admin {admin.user_id} notified user {request.user_id}")
    return notification


# =============================================================================
# Cart
# =============================================================================

@app.get("/api/cart/current", response_model=Cart, tags=["Cart"])
def get_current_cart(
    principal: Principal = Depends(get_current_principal),
    data_store: DataStore = Depends(get_store),
) -> Cart:
    """The signed-in user's cart."""
    cart = data_store.get_cart(principal.user_id)
    if cart is None:
        raise HTTPException(status_code=404, detail=f"Cart not found for user: {principal.user_id}")
    return cart
