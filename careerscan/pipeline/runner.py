"""Pipeline coordination for a complete scrape run."""

import threading
import time
import traceback
from collections import Counter
from typing import Callable, Dict, List, Optional
from uuid import uuid4

from careerscan.browser import BrowserSession, PageFetcher
from careerscan.config.models import AppConfig
from careerscan.config.registry import SourceRegistry
from careerscan.domain.models import JobRecord
from careerscan.export.writer import ExportWriter
from careerscan.logging import get_logger
from careerscan.logging.context import log_context
from careerscan.notifications.service import NotificationService
from careerscan.utils.timestamps import utc_now

from .dedupe import dedupe, filter_relevant
from .models import PipelineRunResult, PipelineStatus
from .orchestrator import ScrapeOrchestrator

logger = get_logger(__name__, component="pipeline")


class ScrapePipeline:
    """
    Runs one complete scrape: browser, orchestration, dedupe, export, report.

    At most one run is active per pipeline instance. A trigger that arrives
    while a run is in progress is skipped rather than queued.
    """

    def __init__(
        self,
        app_config: AppConfig,
        notification_service: NotificationService,
        registry: Optional[SourceRegistry] = None,
        export_writer: Optional[ExportWriter] = None,
        browser_factory: Optional[Callable[[], BrowserSession]] = None,
        orchestrator: Optional[ScrapeOrchestrator] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Initialize the scrape pipeline.

        Args:
            app_config: Application configuration
            notification_service: Service for the report and error emails
            registry: Sources and keywords (built from app_config if omitted)
            export_writer: CSV writer (built from app_config.export if omitted)
            browser_factory: Creates an unlaunched browser session per run
            orchestrator: Pair runner (built from app_config.scraping if omitted)
            sleep: Blocking sleep used for pacing
        """
        self.app_config = app_config
        self.notification_service = notification_service
        self.registry = registry or SourceRegistry.from_config(app_config)
        self.export_writer = export_writer or ExportWriter(
            app_config.export.directory, app_config.export.filename_prefix
        )
        self.browser_factory = browser_factory or (lambda: BrowserSession(app_config.scraping))
        self.orchestrator = orchestrator or ScrapeOrchestrator(
            scraping_config=app_config.scraping, sleep=sleep
        )
        self._lock = threading.Lock()
        self._state_lock = threading.Lock()
        self._current_started_at = None
        self._last_result: Optional[PipelineRunResult] = None

    @property
    def is_running(self) -> bool:
        return self._lock.locked()

    def run_scheduled(self) -> PipelineRunResult:
        """Entry point for the recurring trigger; same semantics as ``run_once``."""
        logger.info("Scheduled run triggered", extra={"event": "pipeline.run.scheduled"})
        return self.run_once()

    def run_once(self) -> PipelineRunResult:
        """
        Execute a complete scrape of all enabled sources.

        This method:
        1. Acquires a lock to prevent concurrent runs
        2. Launches the browser and scrapes every (source, keyword) pair
        3. Deduplicates and filters the records
        4. Exports the relevant records and emails the report
        5. On a run-level failure, emails an error report instead

        Returns:
            PipelineRunResult with counts, export path and notification outcome

        Raises:
            No exceptions are raised; run-level failures are captured in the
            result with had_errors=True.
        """
        run_started_at = utc_now()
        run_id = uuid4().hex

        # Try to acquire the lock; if already held, skip this run
        if not self._lock.acquire(blocking=False):
            with log_context(run_id=run_id):
                logger.warning(
                    "Pipeline run skipped: previous run still in progress",
                    extra={"event": "pipeline.run.skipped", "reason": "lock_held"},
                )
            return PipelineRunResult(
                run_started_at=run_started_at,
                run_finished_at=utc_now(),
                run_id=run_id,
                skipped=True,
            )

        with self._state_lock:
            self._current_started_at = run_started_at

        result = PipelineRunResult(
            run_started_at=run_started_at, run_finished_at=run_started_at, run_id=run_id
        )
        session = None

        try:
            with log_context(run_id=run_id):
                logger.info(
                    "Pipeline run started",
                    extra={
                        "event": "pipeline.run.started",
                        "source_count": len(self.registry.sources),
                        "keyword_count": len(self.registry.keywords),
                    },
                )

                try:
                    session = self.browser_factory()
                    session.launch()
                    fetcher = PageFetcher(
                        session, default_timeout_ms=self.app_config.scraping.navigation_timeout_ms
                    )

                    orchestration = self.orchestrator.run_all(
                        self.registry.sources, self.registry.keywords, fetcher
                    )
                    result.pair_stats = orchestration.pair_stats
                    result.failed_pairs = orchestration.failed_pairs
                    result.raw_count = len(orchestration.records)

                    unique = dedupe(orchestration.records)
                    relevant = filter_relevant(unique)
                    result.total_count = len(unique)
                    result.relevant_count = len(relevant)

                    logger.info(
                        f"Found {len(unique)} unique jobs ({result.raw_count} before dedupe)",
                        extra={
                            "event": "pipeline.dedupe.completed",
                            "raw_count": result.raw_count,
                            "unique_count": len(unique),
                            "relevant_count": len(relevant),
                        },
                    )

                    self._report(result, relevant)

                except Exception as e:
                    self._handle_run_failure(result, e)

                finally:
                    if session is not None:
                        session.close()

                result.run_finished_at = utc_now()
                result.total_duration_seconds = (
                    result.run_finished_at - result.run_started_at
                ).total_seconds()

                logger.info(
                    "Pipeline run completed",
                    extra={
                        "event": "pipeline.run.completed",
                        "duration_ms": int(result.total_duration_seconds * 1000),
                        "total_count": result.total_count,
                        "relevant_count": result.relevant_count,
                        "failed_pairs": result.failed_pairs,
                        "had_errors": result.had_errors,
                        "notification_status": result.notification_status,
                    },
                )

                return result

        finally:
            with self._state_lock:
                self._current_started_at = None
                self._last_result = result
            self._lock.release()

    def status(self) -> PipelineStatus:
        """Snapshot of the running flag and the last completed run."""
        with self._state_lock:
            last = self._last_result
            running_since = self._current_started_at

        return PipelineStatus(
            is_running=self.is_running,
            last_run_started_at=running_since or (last.run_started_at if last else None),
            last_run_finished_at=last.run_finished_at if last else None,
            last_result=last,
        )

    def _report(self, result: PipelineRunResult, relevant: List[JobRecord]) -> None:
        if relevant:
            artifact = self.export_writer.write(relevant, run_date=result.run_started_at.date())
            result.export_path = artifact.path
            result.counts_by_company = count_by_company(relevant)

            notification = self.notification_service.send_report(
                artifact.path, len(relevant), result.total_count, result.counts_by_company
            )
        else:
            logger.info(
                "No relevant jobs found, sending empty report",
                extra={"event": "pipeline.report.empty"},
            )
            notification = self.notification_service.send_report(None, 0, result.total_count, {})

        result.notification_status = notification.status

    def _handle_run_failure(self, result: PipelineRunResult, error: Exception) -> None:
        result.had_errors = True
        result.error_message = str(error) or type(error).__name__
        trace = "".join(traceback.format_exception(type(error), error, error.__traceback__))

        logger.error(
            f"Pipeline run failed: {error}",
            exc_info=True,
            extra={"event": "pipeline.run.failed", "error_type": type(error).__name__},
        )

        notification = self.notification_service.send_error_report(result.error_message, trace)
        result.notification_status = notification.status


def count_by_company(records: List[JobRecord]) -> Dict[str, int]:
    """Number of records per company, in first-seen order."""
    return dict(Counter(record.company for record in records))
