"""Domain errors raised by the progress tracker services.

Every error carries a ``kind`` and a human readable ``message`` so callers can
tell them apart. ``DeliveryFailed`` and ``DeletionFailed`` are recoverable and
may be retried; the others are terminal for the request.
"""

from typing import Optional


class ProgressTrackerError(Exception):
    """Base class for all domain errors."""

    kind = "error"
    status_code = 500
    recoverable = False

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"detail": self.message, "kind": self.kind}


class ValidationError(ProgressTrackerError):
    """A required field is missing or empty."""

    kind = "validation_error"
    status_code = 400


class NotFound(ProgressTrackerError):
    """A referenced record does not exist."""

    kind = "not_found"
    status_code = 404


class AccessDenied(ProgressTrackerError):
    """The actor may not touch the owning project."""

    kind = "access_denied"
    status_code = 403


class AlreadySent(ProgressTrackerError):
    """The reminder has already been delivered."""

    kind = "already_sent"
    status_code = 400


class DeliveryFailed(ProgressTrackerError):
    """The mail transport rejected or failed to deliver a reminder."""

    kind = "delivery_failed"
    status_code = 502
    recoverable = True


class DeletionFailed(ProgressTrackerError):
    """A step of the project cascade delete failed."""

    kind = "deletion_failed"
    status_code = 500
    recoverable = True

    def __init__(self, message: str, step: Optional[str] = None):
        super().__init__(message)
        self.step = step

    def to_dict(self) -> dict:
        payload = super().to_dict()
        payload["step"] = self.step
        return payload


class MailDeliveryError(Exception):
    """Raised by mail transports when a message could not be sent."""
