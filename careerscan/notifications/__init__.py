"""Email notifications for run reports and run failures.

This module provides the complete notification pipeline:
- NotificationService: Sends the run report (with CSV attached) and error reports
- NotificationResult: Result data structure for notification outcomes
- TemplateRenderer: Jinja2-based email template rendering
- SMTPClient: SMTP wrapper with TLS/SSL support
- Payload utilities: Context builders for templates
"""

from .models import (
    NotificationError,
    NotificationResult,
    NotificationTemplateError,
    SMTPDeliveryError,
)
from .payloads import build_error_context, build_report_context
from .service import NotificationService
from .smtp_client import (
    SMTPClient,
    build_sender_address,
    parse_recipients,
)
from .templates import TemplateRenderer

__all__ = [
    # Main service
    "NotificationService",
    # Models and results
    "NotificationResult",
    # Exceptions
    "NotificationError",
    "NotificationTemplateError",
    "SMTPDeliveryError",
    # Components
    "TemplateRenderer",
    "SMTPClient",
    # Utilities
    "build_report_context",
    "build_error_context",
    "build_sender_address",
    "parse_recipients",
]
