"""Tests for the scrape orchestrator: plan order, budgets, pacing and isolation."""

from unittest.mock import MagicMock, Mock

import pytest

from careerscan.browser import NavigationError
from careerscan.config.models import ScrapingConfig, SourceConfig
from careerscan.logging.context import get_log_context
from careerscan.pipeline import PacingPolicy, ScrapeOrchestrator

from tests.helpers import AMAZON_URL, load_page, make_fetcher


class FakeAdapter:
    """Returns one record per call and remembers the logging context it ran in."""

    def __init__(self, make_record, fail_on=()):
        self.make_record = make_record
        self.fail_on = set(fail_on)
        self.calls = []
        self.contexts = []

    def scrape(self, fetcher, source, keyword):
        self.calls.append((source.name, keyword))
        self.contexts.append(get_log_context())
        if keyword in self.fail_on:
            raise NavigationError(f"Navigation to {source.search_url} timed out", url=source.search_url, timed_out=True)
        slug = keyword.replace(" ", "-")
        return [self.make_record(link=f"https://x.com/{source.name.replace(' ', '')}/{slug}", source=source.name)]


@pytest.fixture
def sleep():
    return Mock()


def make_orchestrator(adapters, sleep, pacing=None):
    return ScrapeOrchestrator(
        scraping_config=ScrapingConfig(),
        pacing=pacing or PacingPolicy(company_delay_ms=5000, generic_delay_ms=2000),
        adapter_factory=lambda source, config: adapters[source.name],
        sleep=sleep,
    )


class TestScrapeOrchestrator:
    def test_plan_is_source_major_and_respects_keyword_limits(
        self, app_config, make_record, sleep
    ):
        adapter = FakeAdapter(make_record)
        orchestrator = make_orchestrator(
            {"Microsoft": adapter, "Example Board": adapter},
            sleep,
            pacing=PacingPolicy(company_keyword_limit=1, generic_keyword_limit=2),
        )

        result = orchestrator.run_all(app_config.get_enabled_sources(), app_config.keywords, Mock())

        assert adapter.calls == [
            ("Microsoft", "frontend developer"),
            ("Example Board", "frontend developer"),
            ("Example Board", "react developer"),
        ]
        assert len(result.records) == 3
        assert [s.keyword for s in result.pair_stats] == [
            "frontend developer",
            "frontend developer",
            "react developer",
        ]

    def test_limit_larger_than_keyword_list(self, app_config, make_record, sleep):
        adapter = FakeAdapter(make_record)
        orchestrator = make_orchestrator({"Microsoft": adapter, "Example Board": adapter}, sleep)

        orchestrator.run_all(app_config.get_enabled_sources(), app_config.keywords, Mock())

        # 3 keywords for Microsoft (limit 3), all 3 for the generic board (limit 5)
        assert len(adapter.calls) == 6

    def test_sleeps_between_pairs_but_not_after_last(self, app_config, make_record, sleep):
        adapter = FakeAdapter(make_record)
        orchestrator = make_orchestrator({"Microsoft": adapter, "Example Board": adapter}, sleep)

        orchestrator.run_all(app_config.get_enabled_sources(), app_config.keywords, Mock())

        delays = [c.args[0] for c in sleep.call_args_list]
        assert delays == [5.0, 5.0, 5.0, 2.0, 2.0]

    def test_delay_override_applies_to_every_strategy(self, app_config, make_record, sleep):
        adapter = FakeAdapter(make_record)
        orchestrator = make_orchestrator(
            {"Microsoft": adapter, "Example Board": adapter},
            sleep,
            pacing=PacingPolicy(delay_override_ms=250),
        )

        orchestrator.run_all(app_config.get_enabled_sources(), app_config.keywords, Mock())

        assert {c.args[0] for c in sleep.call_args_list} == {0.25}

    def test_zero_override_still_paces_between_fetches(self, microsoft_source, make_record, sleep):
        adapter = FakeAdapter(make_record)
        orchestrator = ScrapeOrchestrator(
            scraping_config=ScrapingConfig(delay_override_ms=0),
            adapter_factory=lambda source, config: adapter,
            sleep=sleep,
        )

        orchestrator.run_all([microsoft_source], ["a", "b", "c"], Mock())

        assert len(adapter.calls) == 3
        assert [c.args[0] for c in sleep.call_args_list] == [5.0, 5.0]

    def test_failing_pair_is_isolated(self, app_config, make_record, sleep):
        adapter = FakeAdapter(make_record, fail_on={"react developer"})
        orchestrator = make_orchestrator({"Microsoft": adapter, "Example Board": adapter}, sleep)

        result = orchestrator.run_all(app_config.get_enabled_sources(), app_config.keywords, Mock())

        assert len(adapter.calls) == 6
        assert len(result.records) == 4
        assert result.failed_pairs == 2
        failed = [s for s in result.pair_stats if s.had_errors]
        assert {s.source_name for s in failed} == {"Microsoft", "Example Board"}
        assert failed[0].error_type == "NavigationError"
        assert "timed out" in failed[0].error_message
        assert failed[0].record_count == 0
        # Pacing still happens after a failed attempt
        assert sleep.call_count == 5

    def test_unexpected_exceptions_are_isolated(self, app_config, make_record, sleep):
        broken = MagicMock()
        broken.scrape.side_effect = RuntimeError("selector engine crashed")
        healthy = FakeAdapter(make_record)
        orchestrator = make_orchestrator({"Microsoft": broken, "Example Board": healthy}, sleep)

        result = orchestrator.run_all(app_config.get_enabled_sources(), app_config.keywords, Mock())

        assert result.failed_pairs == 3
        assert len(result.records) == 3

    def test_pairs_run_inside_logging_context(self, app_config, make_record, sleep):
        adapter = FakeAdapter(make_record)
        orchestrator = make_orchestrator({"Microsoft": adapter, "Example Board": adapter}, sleep)

        orchestrator.run_all(app_config.get_enabled_sources(), app_config.keywords[:1], Mock())

        assert adapter.contexts == [
            {"source": "Microsoft", "keyword": "frontend developer"},
            {"source": "Example Board", "keyword": "frontend developer"},
        ]
        assert get_log_context() == {}

    def test_no_sources(self, sleep):
        result = make_orchestrator({}, sleep).run_all([], ["frontend developer"], Mock())

        assert result.records == []
        assert result.pair_stats == []
        sleep.assert_not_called()

    def test_real_adapters_against_fixture_pages(self, amazon_source, scraping_config, sleep):
        fetcher = make_fetcher({AMAZON_URL: load_page("amazon_search.html")})
        orchestrator = ScrapeOrchestrator(scraping_config=scraping_config, sleep=sleep)

        result = orchestrator.run_all([amazon_source], ["frontend developer", "react developer"], fetcher)

        # Static search URL: the same page is scraped once per keyword
        assert len(result.records) == 8
        assert result.failed_pairs == 0
        assert fetcher.session.visited == [AMAZON_URL, AMAZON_URL]
