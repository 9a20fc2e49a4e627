class NotificationError(Exception):
    """Raised when an email provider rejects or fails a send."""
