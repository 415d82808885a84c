"""Notification service for run reports and error reports.

This module provides the NotificationService class that renders the report
and error emails, attaches the CSV export, and delivers them with
retry/backoff. Delivery problems are reported through NotificationResult
and never raised to the caller.
"""

import logging
import time
from email.message import EmailMessage
from email.utils import make_msgid
from pathlib import Path
from typing import Dict, Mapping, Optional, Union

from careerscan.config.environment import EnvironmentConfig
from careerscan.config.models import EmailConfig
from careerscan.logging import get_logger

from .models import NotificationResult, NotificationTemplateError, SMTPDeliveryError
from .payloads import build_error_context, build_report_context
from .smtp_client import SMTPClient, build_sender_address, parse_recipients
from .templates import TemplateRenderer

logger = get_logger(__name__, component="notification")

MAX_RETRY_DELAY_SECONDS = 60.0


class NotificationService:
    """Service for emailing run reports and run failures to the operator.

    Coordinates the notification flow:
    1. Build template context
    2. Render email templates
    3. Build the message (attaching the CSV export when there is one)
    4. Deliver via SMTP with retry/backoff
    """

    def __init__(
        self,
        env_config: EnvironmentConfig,
        email_config: Optional[EmailConfig] = None,
        template_renderer: Optional[TemplateRenderer] = None,
        smtp_client: Optional[SMTPClient] = None,
        logger_instance: Optional[logging.Logger] = None,
    ):
        """Initialize notification service.

        Args:
            env_config: Environment configuration with SMTP settings and recipients
            email_config: Email configuration with retry settings
            template_renderer: Template renderer instance (creates default if None)
            smtp_client: SMTP client instance (creates default if None)
            logger_instance: Logger instance (uses module logger if None)
        """
        self.env_config = env_config
        self.email_config = email_config or EmailConfig()
        self.template_renderer = template_renderer or TemplateRenderer()
        self.smtp_client = smtp_client or SMTPClient(
            env_config, use_tls=self.email_config.use_tls
        )
        self.logger = logger_instance or logger

    def send_report(
        self,
        export_path: Optional[Union[str, Path]],
        relevant_count: int,
        total_count: int,
        counts_by_company: Optional[Mapping[str, int]] = None,
    ) -> NotificationResult:
        """Send the run report.

        The CSV is attached only when ``export_path`` is given and
        ``relevant_count`` is positive. A CSV that cannot be read is logged
        and the report goes out without it.

        Args:
            export_path: CSV written by the run, or None
            relevant_count: Jobs included in the export
            total_count: Unique jobs scraped in the run
            counts_by_company: Relevant jobs per company

        Returns:
            NotificationResult indicating outcome
        """
        try:
            attachment = None
            if export_path is not None and relevant_count > 0:
                attachment = self._read_attachment(Path(export_path))

            context = build_report_context(
                relevant_count=relevant_count,
                total_count=total_count,
                counts_by_company=counts_by_company,
                attachment_name=attachment[0] if attachment else None,
            )
            return self._render_and_deliver("report", context, attachment)
        except Exception as e:
            # Unexpected failure must not reach the pipeline
            self.logger.error(
                f"Unexpected error sending report: {e}",
                exc_info=True,
                extra={"event": "notification.report.error"},
            )
            return NotificationResult(kind="report", status="failed", error=str(e))

    def send_error_report(self, message: str, trace: Optional[str] = None) -> NotificationResult:
        """Send a run failure report with the error message and traceback.

        Returns:
            NotificationResult indicating outcome
        """
        try:
            context = build_error_context(message, trace)
            return self._render_and_deliver("error", context, None)
        except Exception as e:
            self.logger.error(
                f"Unexpected error sending error report: {e}",
                exc_info=True,
                extra={"event": "notification.error_report.error"},
            )
            return NotificationResult(kind="error", status="failed", error=str(e))

    def _read_attachment(self, path: Path) -> Optional[tuple]:
        try:
            data = path.read_bytes()
        except OSError as e:
            self.logger.warning(
                f"Could not attach CSV file {path}: {e}",
                extra={"event": "notification.attachment.skipped", "path": str(path)},
            )
            return None

        self.logger.info(
            f"Attaching CSV file: {path.name}",
            extra={"event": "notification.attachment.added", "size_bytes": len(data)},
        )
        return path.name, data

    def _render_and_deliver(
        self, kind: str, context: Dict, attachment: Optional[tuple]
    ) -> NotificationResult:
        attachment_name = attachment[0] if attachment else None

        # Step 1: Render templates
        try:
            rendered = self.template_renderer.render(context, kind=kind)
        except NotificationTemplateError as e:
            # Template errors are developer misconfiguration; retrying won't help
            error_msg = f"Template rendering failed: {e}"
            self.logger.error(error_msg, extra={"event": "notification.template.error"})
            return NotificationResult(kind=kind, status="failed", error=error_msg)

        # Step 2: Build email message
        try:
            recipients = parse_recipients(self.env_config.alert_to_email)
            sender = build_sender_address(self.env_config)
        except ValueError as e:
            error_msg = f"Failed to build email message: {e}"
            self.logger.error(error_msg, extra={"event": "notification.message.error"})
            return NotificationResult(kind=kind, status="failed", error=error_msg)

        message = EmailMessage()
        message["Subject"] = rendered["subject"]
        message["From"] = sender
        message["To"] = ", ".join(recipients)
        message_id = make_msgid(domain=self.env_config.smtp_host)
        message["Message-ID"] = message_id
        message.set_content(rendered["text_body"])
        message.add_alternative(rendered["html_body"], subtype="html")

        if attachment is not None:
            message.add_attachment(
                attachment[1], maintype="text", subtype="csv", filename=attachment_name
            )

        # Step 3: Send with retry/backoff
        max_attempts = self.email_config.max_retries + 1
        last_error = None

        for attempt in range(1, max_attempts + 1):
            if attempt > 1:
                delay = self.email_config.retry_initial_delay * (
                    self.email_config.retry_backoff_multiplier ** (attempt - 2)
                )
                delay = min(delay, MAX_RETRY_DELAY_SECONDS)
                self.logger.warning(
                    f"Retrying {kind} email (attempt {attempt}/{max_attempts}) after {delay:.1f}s delay",
                    extra={"event": "notification.send.attempt", "kind": kind, "attempt": attempt},
                )
                time.sleep(delay)

            try:
                self.smtp_client.send(message)
            except SMTPDeliveryError as e:
                last_error = str(e)
                retry_remaining = attempt < max_attempts
                self.logger.log(
                    logging.WARNING if retry_remaining else logging.ERROR,
                    f"SMTP delivery of {kind} email failed (attempt {attempt}/{max_attempts}): {e}",
                    extra={
                        "event": "notification.send.failure",
                        "kind": kind,
                        "attempt": attempt,
                        "error_type": type(e).__name__,
                        "retry_remaining": retry_remaining,
                    },
                )
                continue

            self.logger.info(
                f"Sent {kind} email to {', '.join(recipients)} (attempts: {attempt})",
                extra={
                    "event": "notification.send.success",
                    "kind": kind,
                    "attempt": attempt,
                    "message_id": message_id,
                },
            )
            return NotificationResult(
                kind=kind,
                status="sent",
                attempts=attempt,
                message_id=message_id,
                attachment=attachment_name,
            )

        return NotificationResult(
            kind=kind,
            status="failed",
            attempts=max_attempts,
            error=last_error,
            attachment=attachment_name,
        )
