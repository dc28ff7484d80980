class NotificationError(Exception):
    """Base exception for notification failures."""


class EmailDeliveryError(NotificationError):
    """Raised when the email service rejects or fails to accept a message."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
