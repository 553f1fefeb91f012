"""
Exceptions shared by the server and the client.
"""


class RestaurantError(Exception):
    """Base class for domain errors."""


class CartNotFoundError(RestaurantError):
    """The user has no cart yet."""

    def __init__(self, user_id=None):
        self.user_id = user_id
        super().__init__(f"Cart not found for user: {user_id}")


class NotificationNotFoundError(RestaurantError):
    """The notification does not exist or belongs to someone else."""

    def __init__(self, notification_id):
        self.notification_id = notification_id
        super().__init__(f"Notification not found: {notification_id}")


class MissingContextError(RestaurantError):
    """
    A consumer asked for a service outside a started AppServices.

    This is a programming error and is never caught.
    """


class NotAuthenticatedError(RestaurantError):
    """No user is signed in, or the server did not recognise the user."""

    def __init__(self, detail: str = "Not authenticated"):
        super().__init__(detail)
