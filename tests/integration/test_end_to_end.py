"""End-to-end tests: fake browser -> adapters -> dedupe -> CSV -> email.

Only the browser and the SMTP connection are faked; configuration,
adapters, orchestrator, export writer, templates and notification service
are the real implementations.
"""

import csv
from unittest.mock import MagicMock, Mock, patch

import pytest

from careerscan.config.models import AppConfig, ExportConfig, ScrapingConfig, SourceConfig
from careerscan.notifications.service import NotificationService
from careerscan.pipeline import ScrapePipeline

from tests.helpers import AMAZON_URL, FakeBrowserSession

SINGLE_AMAZON_JOB = """
<div class="job-tile">
  <a class="job-link" href="en/jobs/3078075/frontend-engineer"><h3>Frontend Engineer</h3></a>
</div>
"""

SINGLE_BOARD_JOB = """
<ul>
  <li class="job"><a href="/jobs/42">React Developer</a></li>
</ul>
<span class="company">Acme</span>
"""

BOARD_URL = "https://board.example.com/search?q=frontend%20developer"


@pytest.fixture
def smtp_client():
    return MagicMock()


@pytest.fixture
def two_source_config(tmp_path):
    return AppConfig(
        sources=[
            SourceConfig(name="Amazon", search_url=AMAZON_URL, strategy="amazon"),
            SourceConfig(
                name="Example Board",
                search_url="https://board.example.com/search?q={keywords}",
                strategy="generic",
                selectors={"list_item": "li.job", "company": ".company"},
            ),
        ],
        keywords=["frontend developer", "react developer"],
        scraping=ScrapingConfig(
            company_keyword_limit=1,
            generic_keyword_limit=1,
            settle_delay_ms=0,
            scroll_settle_ms=0,
            generic_settle_ms=0,
        ),
        export=ExportConfig(directory=str(tmp_path / "output"), filename_prefix="frontend-jobs"),
    )


def build_pipeline(app_config, env_config, email_config, smtp_client, routes, sleep):
    notification_service = NotificationService(env_config, email_config, smtp_client=smtp_client)
    session = FakeBrowserSession(routes)
    pipeline = ScrapePipeline(
        app_config=app_config,
        notification_service=notification_service,
        browser_factory=lambda: session,
        sleep=sleep,
    )
    return pipeline, session


def test_two_sources_one_keyword_each(two_source_config, env_config, email_config, smtp_client):
    sleep = Mock()
    pipeline, session = build_pipeline(
        two_source_config,
        env_config,
        email_config,
        smtp_client,
        {AMAZON_URL: SINGLE_AMAZON_JOB, BOARD_URL: SINGLE_BOARD_JOB},
        sleep,
    )
    notify = patch.object(
        pipeline.notification_service,
        "send_report",
        wraps=pipeline.notification_service.send_report,
    )

    with notify as send_report:
        result = pipeline.run_once()

    assert not result.had_errors
    assert result.relevant_count == 2
    assert session.visited == [AMAZON_URL, BOARD_URL]
    # One pacing pause between the two fetches, with the single-employer delay
    sleep.assert_called_once_with(5.0)

    with open(result.export_path, newline="", encoding="utf-8") as f:
        rows = list(csv.reader(f))
    assert rows[0] == ["Job Title", "Company", "Job Link", "Source", "Scraped At"]
    assert [row[:4] for row in rows[1:]] == [
        ["Frontend Engineer", "Amazon", "https://www.amazon.jobs/en/jobs/3078075/frontend-engineer", "Amazon"],
        ["React Developer", "Acme", "https://board.example.com/jobs/42", "Example Board"],
    ]

    send_report.assert_called_once()
    assert send_report.call_args.args[1] == 2

    message = smtp_client.send.call_args.args[0]
    assert message["Subject"].endswith("(2 Jobs)")
    attachment = next(message.iter_attachments())
    assert attachment.get_filename() == result.export_path.name
    assert result.notification_status == "sent"


def test_duplicate_links_across_sources_are_exported_once(
    two_source_config, env_config, email_config, smtp_client
):
    duplicate = (
        '<li class="job"><a href="https://www.amazon.jobs/en/jobs/3078075/frontend-engineer">'
        "Frontend Engineer (reposted)</a></li>"
    )
    pipeline, _ = build_pipeline(
        two_source_config,
        env_config,
        email_config,
        smtp_client,
        {AMAZON_URL: SINGLE_AMAZON_JOB, BOARD_URL: duplicate},
        Mock(),
    )

    result = pipeline.run_once()

    assert result.raw_count == 2
    assert result.total_count == 1
    with open(result.export_path, newline="", encoding="utf-8") as f:
        rows = list(csv.reader(f))
    # First occurrence (Amazon) wins
    assert rows[1][0] == "Frontend Engineer"
    assert rows[1][3] == "Amazon"


def test_one_failing_source_still_reports_the_other(
    two_source_config, env_config, email_config, smtp_client
):
    pipeline, _ = build_pipeline(
        two_source_config,
        env_config,
        email_config,
        smtp_client,
        {BOARD_URL: SINGLE_BOARD_JOB},
        Mock(),
    )

    result = pipeline.run_once()

    assert not result.had_errors
    assert result.failed_pairs == 1
    assert result.relevant_count == 1
    assert result.counts_by_company == {"Acme": 1}
    smtp_client.send.assert_called_once()


def test_nothing_found_sends_empty_report(two_source_config, env_config, email_config, smtp_client):
    pipeline, _ = build_pipeline(
        two_source_config,
        env_config,
        email_config,
        smtp_client,
        {AMAZON_URL: "<p>No results</p>", BOARD_URL: "<p>No results</p>"},
        Mock(),
    )

    result = pipeline.run_once()

    assert result.export_path is None
    message = smtp_client.send.call_args.args[0]
    assert message["Subject"].endswith("(0 Jobs)")
    assert list(message.iter_attachments()) == []
    text = message.get_body(preferencelist=("plain",)).get_content()
    assert "No company breakdown available for this search cycle." in text


def test_browser_failure_sends_error_email(two_source_config, env_config, email_config, smtp_client):
    notification_service = NotificationService(env_config, email_config, smtp_client=smtp_client)
    pipeline = ScrapePipeline(
        app_config=two_source_config,
        notification_service=notification_service,
        browser_factory=lambda: FakeBrowserSession(fail_launch=True),
        sleep=Mock(),
    )

    result = pipeline.run_once()

    assert result.had_errors
    message = smtp_client.send.call_args.args[0]
    assert message["Subject"].startswith("Job Scraper Error - ")
    text = message.get_body(preferencelist=("plain",)).get_content()
    assert "chromium not installed" in text
    assert "Traceback" in text
