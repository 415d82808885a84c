"""Data models and exceptions for the notification service.

This module defines result types and custom exceptions used throughout
the notification pipeline.
"""

from dataclasses import dataclass
from typing import Optional


class NotificationError(Exception):
    """Base exception for notification-related errors."""

    pass


class NotificationTemplateError(NotificationError):
    """Raised when template rendering fails due to configuration or missing variables."""

    pass


class SMTPDeliveryError(NotificationError):
    """Raised when SMTP delivery fails after all retry attempts."""

    pass


@dataclass
class NotificationResult:
    """Result of attempting to send a report or error email.

    Notification failures never propagate to the run; callers inspect this
    result instead.

    Attributes:
        kind: Which email was sent ("report" or "error")
        status: Outcome status ("sent" or "failed")
        attempts: Number of send attempts made
        message_id: Message-ID header of the delivered email
        error: Error message if delivery failed
        attachment: File name of the attached export, if any
    """

    kind: str
    status: str  # "sent", "failed"
    attempts: int = 0
    message_id: Optional[str] = None
    error: Optional[str] = None
    attachment: Optional[str] = None

    def is_success(self) -> bool:
        """Check if the email was delivered.

        Returns:
            True if status is "sent", False otherwise
        """
        return self.status == "sent"
