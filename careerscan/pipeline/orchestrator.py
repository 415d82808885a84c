"""Drives every (source, keyword) pair of a run through its adapter."""

import time
from typing import Callable, List, Optional, Sequence

from careerscan.adapters.base import BaseAdapter
from careerscan.adapters.factory import get_adapter
from careerscan.browser import PageFetcher
from careerscan.config.models import ScrapingConfig, SourceConfig
from careerscan.logging import get_logger
from careerscan.logging.context import log_context

from .models import OrchestrationResult, PairRunStats
from .pacing import PacingPolicy

logger = get_logger(__name__, component="orchestrator")


class ScrapeOrchestrator:
    """
    Runs the adapters sequentially with pacing and per-pair failure isolation.

    Sources are visited in registry order; each source is searched with the
    first ``keyword_limit`` keywords. A failing pair is logged and counted but
    never stops the run. Between two attempts the orchestrator sleeps for the
    delay of the pair just attempted.
    """

    def __init__(
        self,
        scraping_config: Optional[ScrapingConfig] = None,
        pacing: Optional[PacingPolicy] = None,
        adapter_factory: Callable[[SourceConfig, ScrapingConfig], BaseAdapter] = get_adapter,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Initialize the orchestrator.

        Args:
            scraping_config: Browser timing settings handed to adapters
            pacing: Keyword limits and delays (derived from scraping_config if omitted)
            adapter_factory: Builds the adapter for a source
            sleep: Blocking sleep taking seconds (injected in tests)
        """
        self.scraping_config = scraping_config or ScrapingConfig()
        self.pacing = pacing or PacingPolicy.from_config(self.scraping_config)
        self.adapter_factory = adapter_factory
        self._sleep = sleep

    def run_all(
        self,
        sources: Sequence[SourceConfig],
        keywords: Sequence[str],
        fetcher: PageFetcher,
    ) -> OrchestrationResult:
        """
        Scrape every (source, keyword) pair and concatenate the records.

        Args:
            sources: Sources in registry order
            keywords: Ordered keyword list; each source uses a prefix of it
            fetcher: Page fetcher bound to the run's browser session

        Returns:
            OrchestrationResult with records in source-major, keyword-minor order
        """
        plan = []
        for source in sources:
            adapter = self.adapter_factory(source, self.scraping_config)
            limit = self.pacing.keyword_limit(source.strategy)
            for keyword in list(keywords)[:limit]:
                plan.append((source, adapter, keyword))

        logger.info(
            f"Scraping {len(plan)} source/keyword pairs across {len(sources)} sources",
            extra={
                "event": "orchestrator.run.started",
                "pair_count": len(plan),
                "source_count": len(sources),
            },
        )

        result = OrchestrationResult()

        for index, (source, adapter, keyword) in enumerate(plan):
            records, stats = self._run_pair(adapter, fetcher, source, keyword)
            result.records.extend(records)
            result.pair_stats.append(stats)

            if index < len(plan) - 1:
                delay_ms = self.pacing.delay_ms(source.strategy)
                if delay_ms > 0:
                    logger.debug(
                        f"Waiting {delay_ms}ms before next request",
                        extra={"event": "orchestrator.pacing.wait", "delay_ms": delay_ms},
                    )
                    self._sleep(delay_ms / 1000)

        logger.info(
            f"Collected {len(result.records)} raw jobs, {result.failed_pairs} pairs failed",
            extra={
                "event": "orchestrator.run.completed",
                "raw_count": len(result.records),
                "failed_pairs": result.failed_pairs,
            },
        )
        return result

    def _run_pair(
        self,
        adapter: BaseAdapter,
        fetcher: PageFetcher,
        source: SourceConfig,
        keyword: str,
    ):
        stats = PairRunStats(
            source_name=source.name,
            keyword=keyword,
            strategy=source.strategy.value,
        )
        started = time.monotonic()
        records: List = []

        with log_context(source=source.name, keyword=keyword):
            try:
                records = adapter.scrape(fetcher, source, keyword)
                stats.record_count = len(records)
            except Exception as e:
                # Any failure only costs this pair
                records = []
                stats.had_errors = True
                stats.error_type = type(e).__name__
                stats.error_message = str(e)
                logger.error(
                    f"Error scraping {source.name} for '{keyword}': {e}",
                    extra={
                        "event": "orchestrator.pair.failed",
                        "error_type": stats.error_type,
                    },
                    exc_info=True,
                )
            finally:
                stats.duration_seconds = time.monotonic() - started

        return records, stats
