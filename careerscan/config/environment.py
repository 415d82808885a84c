"""Environment variable loading and validation."""

import os
import re
from typing import Optional

from .exceptions import ConfigurationError
from .models import validate_cron_expression

DEFAULT_SMTP_PORT = 587
DEFAULT_SENDER_NAME = "Job Scraper Bot"


class EnvironmentConfig:
    """Secrets and deployment overrides read from the environment."""

    def __init__(
        self,
        smtp_host: str,
        smtp_user: str,
        smtp_pass: str,
        alert_to_email: str,
        smtp_port: int = DEFAULT_SMTP_PORT,
        smtp_sender_name: Optional[str] = None,
        log_level: Optional[str] = None,
        cron_schedule: Optional[str] = None,
        scraping_delay_ms: Optional[int] = None,
    ):
        self.smtp_host = smtp_host
        self.smtp_port = smtp_port
        self.smtp_user = smtp_user
        self.smtp_pass = smtp_pass
        self.alert_to_email = alert_to_email
        self.smtp_sender_name = smtp_sender_name or DEFAULT_SENDER_NAME
        self.log_level = log_level
        self.cron_schedule = cron_schedule
        self.scraping_delay_ms = scraping_delay_ms


def load_environment_config() -> EnvironmentConfig:
    """
    Load and validate environment variables.

    Required environment variables:
    - SMTP_HOST: SMTP server hostname
    - SMTP_USER: SMTP login, also used as the sender address
    - SMTP_PASS: SMTP password
    - ALERT_TO_EMAIL: Comma-separated report recipients

    Optional environment variables:
    - SMTP_PORT: SMTP server port (default 587)
    - SMTP_SENDER_NAME: Display name for the sender
    - LOG_LEVEL: Override log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    - CRON_SCHEDULE: Crontab expression overriding the configured schedule
    - SCRAPING_DELAY: Milliseconds to pause between requests for every source

    Returns:
        EnvironmentConfig object with validated values

    Raises:
        ConfigurationError: If required variables are missing or invalid
    """
    errors = []

    smtp_host = os.getenv("SMTP_HOST")
    smtp_user = os.getenv("SMTP_USER")
    smtp_pass = os.getenv("SMTP_PASS")
    alert_to_email = os.getenv("ALERT_TO_EMAIL")

    smtp_port_str = os.getenv("SMTP_PORT")
    smtp_sender_name = os.getenv("SMTP_SENDER_NAME")
    log_level = os.getenv("LOG_LEVEL")
    cron_schedule = os.getenv("CRON_SCHEDULE")
    delay_str = os.getenv("SCRAPING_DELAY")

    for name, value in (
        ("SMTP_HOST", smtp_host),
        ("SMTP_USER", smtp_user),
        ("SMTP_PASS", smtp_pass),
        ("ALERT_TO_EMAIL", alert_to_email),
    ):
        if not value:
            errors.append(f"Missing required environment variable: {name}")

    smtp_port = DEFAULT_SMTP_PORT
    if smtp_port_str:
        try:
            smtp_port = int(smtp_port_str)
            if smtp_port < 1 or smtp_port > 65535:
                errors.append(
                    f"Invalid SMTP_PORT: {smtp_port}. Must be between 1 and 65535."
                )
        except ValueError:
            errors.append(
                f"Invalid SMTP_PORT: '{smtp_port_str}'. Must be a valid integer."
            )

    if alert_to_email:
        for email in (part.strip() for part in alert_to_email.split(",")):
            if not _is_valid_email(email):
                errors.append(
                    f"Invalid email address format in ALERT_TO_EMAIL: '{email}'"
                )

    if log_level:
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if log_level.upper() not in valid_levels:
            errors.append(
                f"Invalid LOG_LEVEL: '{log_level}'. Must be one of: {', '.join(valid_levels)}"
            )

    if cron_schedule:
        try:
            cron_schedule = validate_cron_expression(cron_schedule)
        except ValueError as e:
            errors.append(f"Invalid CRON_SCHEDULE: {e}")

    scraping_delay_ms = None
    if delay_str:
        try:
            scraping_delay_ms = int(delay_str)
            if scraping_delay_ms < 0:
                errors.append(
                    f"Invalid SCRAPING_DELAY: {scraping_delay_ms}. Must not be negative."
                )
        except ValueError:
            errors.append(
                f"Invalid SCRAPING_DELAY: '{delay_str}'. Must be an integer number of milliseconds."
            )

    if errors:
        raise ConfigurationError(
            "Environment variable validation failed",
            errors=errors,
            suggestions=[
                "Copy .env.example to .env and fill in your SMTP credentials",
                "Ensure all required environment variables are set",
                "Check that email addresses are valid",
                "CRON_SCHEDULE uses five crontab fields, e.g. '0 */4 * * *'",
            ],
        )

    return EnvironmentConfig(
        smtp_host=smtp_host,
        smtp_port=smtp_port,
        smtp_user=smtp_user,
        smtp_pass=smtp_pass,
        alert_to_email=alert_to_email,
        smtp_sender_name=smtp_sender_name,
        log_level=log_level.upper() if log_level else None,
        cron_schedule=cron_schedule,
        scraping_delay_ms=scraping_delay_ms,
    )


def _is_valid_email(email: str) -> bool:
    # Format check only; delivery addresses are normalized by email-validator later
    pattern = r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"
    return bool(re.match(pattern, email))
