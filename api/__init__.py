"""
HTTP API for the restaurant ordering platform.

This package provides a single FastAPI application that exposes:
- Paginated notifications and the unread count for the signed-in user
- Mark-as-read
- The current cart
- An admin endpoint to create and push notifications
"""

from api.main import app

__all__ = ["app"]
