"""Shared fixtures for the Career Portal Scanner test suite."""

from datetime import datetime, timezone
from pathlib import Path

import pytest

from careerscan.config.environment import EnvironmentConfig
from careerscan.config.models import (
    AppConfig,
    EmailConfig,
    ExportConfig,
    ScrapingConfig,
    SelectorConfig,
    SourceConfig,
)
from careerscan.domain.models import JobRecord
from careerscan.logging.context import clear_log_context

from tests.helpers import AMAZON_URL, GENERIC_URL, MICROSOFT_URL

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture(autouse=True)
def _reset_log_context():
    clear_log_context()
    yield
    clear_log_context()


@pytest.fixture
def mock_env_vars(monkeypatch):
    """Set the required environment variables and clear the optional ones."""
    monkeypatch.setenv("SMTP_HOST", "smtp.example.com")
    monkeypatch.setenv("SMTP_USER", "bot@example.com")
    monkeypatch.setenv("SMTP_PASS", "secret")
    monkeypatch.setenv("ALERT_TO_EMAIL", "operator@example.com")
    for name in ("SMTP_PORT", "SMTP_SENDER_NAME", "LOG_LEVEL", "CRON_SCHEDULE", "SCRAPING_DELAY"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def env_config():
    return EnvironmentConfig(
        smtp_host="smtp.example.com",
        smtp_port=587,
        smtp_user="bot@example.com",
        smtp_pass="secret",
        alert_to_email="operator@example.com",
    )


@pytest.fixture
def email_config():
    return EmailConfig(use_tls=True, max_retries=2, retry_initial_delay=1)


@pytest.fixture
def scraping_config():
    """Scraping settings with every wait disabled."""
    return ScrapingConfig(
        settle_delay_ms=0,
        scroll_settle_ms=0,
        generic_settle_ms=0,
        company_delay_ms=0,
        generic_delay_ms=0,
    )


@pytest.fixture
def microsoft_source():
    return SourceConfig(name="Microsoft", search_url=MICROSOFT_URL, strategy="microsoft")


@pytest.fixture
def amazon_source():
    return SourceConfig(name="Amazon", search_url=AMAZON_URL, strategy="amazon")


@pytest.fixture
def generic_source():
    return SourceConfig(
        name="Example Board",
        search_url=GENERIC_URL,
        strategy="generic",
        selectors=SelectorConfig(list_item="li.job", title=".t", company=".company"),
    )


@pytest.fixture
def app_config(tmp_path, scraping_config, microsoft_source, generic_source):
    return AppConfig(
        sources=[microsoft_source, generic_source],
        keywords=["frontend developer", "react developer", "javascript developer"],
        scraping=scraping_config,
        export=ExportConfig(directory=str(tmp_path / "output"), filename_prefix="frontend-jobs"),
    )


@pytest.fixture
def make_record():
    """Factory for job records with sensible defaults."""

    def _make(link="https://x.com/jobs/1", title="Frontend Engineer", company="Acme", source="Example Board"):
        return JobRecord(
            title=title,
            company=company,
            link=link,
            source=source,
            scraped_at=datetime(2025, 11, 4, 10, 30, tzinfo=timezone.utc),
        )

    return _make

