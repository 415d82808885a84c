"""Unit tests for SMTP client wrapper.

Tests the SMTPClient for:
- Connection handling (SMTP and SMTP_SSL)
- STARTTLS negotiation
- Authentication (with and without credentials)
- Error wrapping and connection cleanup
- Recipient parsing and sender address building
"""

import smtplib
from email.message import EmailMessage
from unittest.mock import MagicMock, Mock

import pytest

from careerscan.config.environment import EnvironmentConfig
from careerscan.notifications.models import SMTPDeliveryError
from careerscan.notifications.smtp_client import (
    SMTPClient,
    build_sender_address,
    parse_recipients,
)


@pytest.fixture
def env_config_with_auth():
    """Environment config with SMTP authentication."""
    return EnvironmentConfig(
        smtp_host="smtp.example.com",
        smtp_port=587,
        smtp_user="bot@example.com",
        smtp_pass="secret123",
        alert_to_email="operator@example.com",
    )


@pytest.fixture
def env_config_without_auth():
    """Environment config for an open relay."""
    return EnvironmentConfig(
        smtp_host="relay.example.com",
        smtp_port=25,
        smtp_user=None,
        smtp_pass=None,
        alert_to_email="operator@example.com",
        smtp_sender_name="Career Scanner",
    )


@pytest.fixture
def env_config_implicit_tls():
    """Environment config for implicit TLS (port 465)."""
    return EnvironmentConfig(
        smtp_host="smtp.gmail.com",
        smtp_port=465,
        smtp_user="bot@gmail.com",
        smtp_pass="apppassword",
        alert_to_email="operator@example.com",
    )


@pytest.fixture
def sample_message():
    msg = EmailMessage()
    msg["Subject"] = "Job Report - 2025-11-04 (2 Jobs)"
    msg["From"] = "Job Scraper Bot <bot@example.com>"
    msg["To"] = "operator@example.com"
    msg.set_content("Relevant jobs found: 2")
    return msg


def test_default_factories_are_smtplib(env_config_with_auth):
    client = SMTPClient(env_config_with_auth)

    assert client.smtp_factory is smtplib.SMTP
    assert client.smtp_ssl_factory is smtplib.SMTP_SSL


def test_send_with_starttls(env_config_with_auth, sample_message):
    """Port 587 connects in plain text and upgrades with STARTTLS."""
    mock_smtp = MagicMock()
    mock_factory = Mock(return_value=mock_smtp)

    client = SMTPClient(env_config_with_auth, use_tls=True, timeout=10, smtp_factory=mock_factory)
    client.send(sample_message)

    mock_factory.assert_called_once_with("smtp.example.com", 587, timeout=10)
    mock_smtp.starttls.assert_called_once()
    mock_smtp.login.assert_called_once_with("bot@example.com", "secret123")
    mock_smtp.send_message.assert_called_once_with(sample_message)
    mock_smtp.quit.assert_called_once()


def test_send_with_implicit_tls(env_config_implicit_tls, sample_message):
    """Port 465 uses SMTP_SSL and never calls STARTTLS."""
    mock_smtp_ssl = MagicMock()
    mock_ssl_factory = Mock(return_value=mock_smtp_ssl)
    mock_factory = Mock()

    client = SMTPClient(
        env_config_implicit_tls, smtp_factory=mock_factory, smtp_ssl_factory=mock_ssl_factory
    )
    client.send(sample_message)

    mock_factory.assert_not_called()
    args, kwargs = mock_ssl_factory.call_args
    assert args == ("smtp.gmail.com", 465)
    assert "context" in kwargs
    mock_smtp_ssl.starttls.assert_not_called()
    mock_smtp_ssl.login.assert_called_once_with("bot@gmail.com", "apppassword")
    mock_smtp_ssl.send_message.assert_called_once_with(sample_message)
    mock_smtp_ssl.quit.assert_called_once()


def test_send_without_auth(env_config_without_auth, sample_message):
    mock_smtp = MagicMock()

    client = SMTPClient(env_config_without_auth, use_tls=False, smtp_factory=Mock(return_value=mock_smtp))
    client.send(sample_message)

    mock_smtp.starttls.assert_not_called()
    mock_smtp.login.assert_not_called()
    mock_smtp.send_message.assert_called_once_with(sample_message)


def test_smtp_exception_is_wrapped(env_config_with_auth, sample_message):
    mock_smtp = MagicMock()
    mock_smtp.send_message.side_effect = smtplib.SMTPRecipientsRefused({})

    client = SMTPClient(env_config_with_auth, smtp_factory=Mock(return_value=mock_smtp))

    with pytest.raises(SMTPDeliveryError, match="SMTP error"):
        client.send(sample_message)

    # Connection is still closed
    mock_smtp.quit.assert_called_once()


def test_authentication_failure_is_wrapped(env_config_with_auth, sample_message):
    mock_smtp = MagicMock()
    mock_smtp.login.side_effect = smtplib.SMTPAuthenticationError(535, b"Bad credentials")

    client = SMTPClient(env_config_with_auth, smtp_factory=Mock(return_value=mock_smtp))

    with pytest.raises(SMTPDeliveryError):
        client.send(sample_message)

    mock_smtp.send_message.assert_not_called()


def test_network_error_is_wrapped(env_config_with_auth, sample_message):
    client = SMTPClient(
        env_config_with_auth, smtp_factory=Mock(side_effect=ConnectionRefusedError("refused"))
    )

    with pytest.raises(SMTPDeliveryError, match="Network error"):
        client.send(sample_message)


def test_quit_failure_is_not_raised(env_config_with_auth, sample_message):
    mock_smtp = MagicMock()
    mock_smtp.quit.side_effect = smtplib.SMTPServerDisconnected("gone")

    client = SMTPClient(env_config_with_auth, smtp_factory=Mock(return_value=mock_smtp))
    client.send(sample_message)

    mock_smtp.send_message.assert_called_once()


def test_parse_recipients_multiple_with_whitespace():
    recipients = parse_recipients("  a@example.com , b@example.org,  ")

    assert recipients == ["a@example.com", "b@example.org"]


def test_parse_recipients_invalid_email():
    with pytest.raises(ValueError) as exc_info:
        parse_recipients("operator@example.com, not-an-email")

    assert "Invalid email address" in str(exc_info.value)
    assert "not-an-email" in str(exc_info.value)


@pytest.mark.parametrize("value", ["", "   ,  ,  "])
def test_parse_recipients_empty(value):
    with pytest.raises(ValueError, match="No valid email addresses found"):
        parse_recipients(value)


def test_build_sender_address_with_smtp_user(env_config_with_auth):
    assert build_sender_address(env_config_with_auth) == "Job Scraper Bot <bot@example.com>"


def test_build_sender_address_without_smtp_user(env_config_without_auth):
    assert build_sender_address(env_config_without_auth) == "Career Scanner <noreply@relay.example.com>"
