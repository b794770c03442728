# shop_service/errors.py


class ShopError(Exception):
    status_code = 500
    message = "Internal error"

    def __init__(self, message: str = None):
        super().__init__(message or self.message)
        self.message = message or self.message


class InvalidInput(ShopError):
    status_code = 400
    message = "Invalid input"


class NotFound(ShopError):
    status_code = 404
    message = "Not found"


class Unauthorized(ShopError):
    status_code = 401
    message = "Unauthorized"


class StorageError(ShopError):
    """Persistence failure. Callers only ever see the generic message."""

    status_code = 500
    message = "Database error"


class NotificationFailure(ShopError):
    """Raised inside the notification path only; never reaches an HTTP caller."""

    message = "Notification failed"
