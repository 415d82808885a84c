"""SMTP client wrapper for email delivery.

This module provides a thin wrapper around Python's smtplib with support
for TLS/SSL, authentication, and proper connection lifecycle management.
"""

import smtplib
import ssl
from email.message import EmailMessage
from typing import Callable, List, Optional

from email_validator import EmailNotValidError, validate_email

from careerscan.config.environment import EnvironmentConfig
from careerscan.logging import get_logger

from .models import SMTPDeliveryError

logger = get_logger(__name__, component="smtp")

IMPLICIT_TLS_PORT = 465


class SMTPClient:
    """Wrapper around smtplib bound to one SMTP account.

    Opens a fresh connection per message: reports go out a few times a day,
    so there is nothing to gain from keeping a connection alive between runs.
    Designed to be easily mockable for testing.
    """

    def __init__(
        self,
        env_config: EnvironmentConfig,
        use_tls: bool = True,
        timeout: float = 30.0,
        smtp_factory: Optional[Callable] = None,
        smtp_ssl_factory: Optional[Callable] = None,
    ):
        """Initialize SMTP client with optional factory injection.

        Args:
            env_config: SMTP host, port and credentials
            use_tls: Upgrade plain connections with STARTTLS
            timeout: Socket timeout in seconds
            smtp_factory: Factory function for creating SMTP instances (for mocking)
            smtp_ssl_factory: Factory function for creating SMTP_SSL instances (for mocking)
        """
        self.env_config = env_config
        self.use_tls = use_tls
        self.timeout = timeout
        self.smtp_factory = smtp_factory or smtplib.SMTP
        self.smtp_ssl_factory = smtp_ssl_factory or smtplib.SMTP_SSL

    def _connect(self):
        host, port = self.env_config.smtp_host, self.env_config.smtp_port

        if port == IMPLICIT_TLS_PORT:
            logger.debug(f"Connecting to {host}:{port} with implicit TLS")
            return self.smtp_ssl_factory(
                host, port, timeout=self.timeout, context=ssl.create_default_context()
            )

        logger.debug(f"Connecting to {host}:{port}")
        smtp = self.smtp_factory(host, port, timeout=self.timeout)
        if self.use_tls:
            logger.debug("Upgrading connection with STARTTLS")
            smtp.starttls(context=ssl.create_default_context())
        return smtp

    def send(self, message: EmailMessage) -> None:
        """Send an email message via SMTP.

        Handles connection, TLS/SSL upgrade, authentication, and ensures
        proper cleanup on both success and failure.

        Raises:
            SMTPDeliveryError: If message delivery fails
        """
        smtp = None
        try:
            smtp = self._connect()

            if self.env_config.smtp_user and self.env_config.smtp_pass:
                logger.debug(f"Authenticating as {self.env_config.smtp_user}")
                smtp.login(self.env_config.smtp_user, self.env_config.smtp_pass)

            smtp.send_message(message)
            logger.debug(f"Message sent to {message['To']}")

        except smtplib.SMTPException as e:
            raise SMTPDeliveryError(f"SMTP error during message delivery: {e}") from e
        except OSError as e:
            raise SMTPDeliveryError(f"Network error during SMTP connection: {e}") from e
        finally:
            if smtp is not None:
                try:
                    smtp.quit()
                except (smtplib.SMTPException, OSError) as e:
                    logger.warning(f"Error closing SMTP connection: {e}")


def parse_recipients(recipient_string: str) -> List[str]:
    """Parse and validate comma-separated email addresses.

    Args:
        recipient_string: Comma-separated email addresses

    Returns:
        List of validated email addresses

    Raises:
        ValueError: If any email address is invalid
    """
    recipients = []

    for email in (part.strip() for part in recipient_string.split(",")):
        if not email:
            continue

        try:
            validated = validate_email(email, check_deliverability=False)
            recipients.append(validated.normalized)
        except EmailNotValidError as e:
            raise ValueError(
                f"Invalid email address in ALERT_TO_EMAIL: '{email}' - {e}"
            ) from e

    if not recipients:
        raise ValueError("No valid email addresses found in ALERT_TO_EMAIL")

    return recipients


def build_sender_address(env_config: EnvironmentConfig) -> str:
    """Build the 'From' address for outgoing emails.

    Uses SMTP_SENDER_NAME with SMTP_USER as the mailbox, falling back to a
    noreply address at the SMTP host when no user is configured.

    Returns:
        Formatted sender address (e.g., "Job Scraper Bot <user@example.com>")
    """
    sender_email = env_config.smtp_user or f"noreply@{env_config.smtp_host}"
    return f"{env_config.smtp_sender_name} <{sender_email}>"
