"""
Notification service errors.

Only AuthenticationRequiredError is meant to reach callers; StoreError is
raised by the stores and absorbed by the router, which falls back or logs.
"""


class NotificationError(Exception):
    """Base class for notification service errors."""


class AuthenticationRequiredError(NotificationError):
    """An operation that needs a signed-in viewer was called without one."""

    def __init__(self, message: str = "User not authenticated"):
        super().__init__(message)


class StoreError(NotificationError):
    """A notification store could not complete a read or write."""

    def __init__(self, store: str, operation: str, cause: Exception):
        self.store = store
        self.operation = operation
        self.cause = cause
        super().__init__(f"{store} store {operation} failed: {cause}")
