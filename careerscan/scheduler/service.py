"""Scheduler service for periodic pipeline execution."""

import threading
from datetime import datetime
from typing import Callable, Optional

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger

from careerscan.config.models import DEFAULT_CRON_SCHEDULE
from careerscan.logging import get_logger

logger = get_logger(__name__, component="scheduler")

JOB_ID = "career-scan"


class SchedulerService:
    """
    Wraps APScheduler to trigger the pipeline on a cron schedule.

    Uses BackgroundScheduler to run jobs in a separate thread while
    allowing the main thread to handle signals and coordinate shutdown.
    """

    def __init__(
        self,
        pipeline_callable: Callable[[], object],
        cron_expression: str = DEFAULT_CRON_SCHEDULE,
        timezone: str = "America/New_York",
        shutdown_event: Optional[threading.Event] = None,
        run_on_start: bool = False,
    ):
        """
        Initialize the scheduler service.

        Args:
            pipeline_callable: Function to call on each scheduled run (e.g., pipeline.run_scheduled)
            cron_expression: Five-field crontab expression
            timezone: Timezone the cron fields are interpreted in
            shutdown_event: Optional event to set on shutdown for coordination
            run_on_start: Also run once immediately after start

        Raises:
            ValueError: If the cron expression or timezone is invalid
        """
        self.pipeline_callable = pipeline_callable
        self.cron_expression = cron_expression
        self.timezone = timezone
        self.shutdown_event = shutdown_event
        self.run_on_start = run_on_start

        self.trigger = CronTrigger.from_crontab(cron_expression, timezone=timezone)

        self.scheduler = BackgroundScheduler(
            job_defaults={
                "max_instances": 1,  # Prevent overlapping runs
                "coalesce": True,  # If runs were missed, only execute once
                "misfire_grace_time": 300,
            },
            timezone=self.trigger.timezone,
        )

    def start(self) -> None:
        """Register the pipeline job and start the scheduler."""
        job_kwargs = {}
        if self.run_on_start:
            job_kwargs["next_run_time"] = datetime.now(self.trigger.timezone)

        self.scheduler.add_job(
            func=self.pipeline_callable,
            trigger=self.trigger,
            id=JOB_ID,
            name="Career Portal Scan",
            replace_existing=True,
            **job_kwargs,
        )

        # Start the scheduler (spawns worker threads)
        self.scheduler.start()

        next_run = self.get_next_run_time()
        logger.info(
            f"Scheduler started with cron schedule: {self.cron_expression} ({self.timezone})",
            extra={
                "event": "scheduler.started",
                "cron": self.cron_expression,
                "timezone": self.timezone,
                "next_run_time": next_run.isoformat() if next_run else None,
            },
        )

    def shutdown(self, wait: bool = False) -> None:
        """
        Shutdown the scheduler.

        Args:
            wait: If True, wait for running jobs to complete before returning
        """
        logger.info(
            "Shutting down scheduler",
            extra={"event": "scheduler.stopping", "wait_for_jobs": wait},
        )

        if self.scheduler.running:
            self.scheduler.shutdown(wait=wait)

        if self.shutdown_event:
            self.shutdown_event.set()

        logger.info("Scheduler shutdown complete", extra={"event": "scheduler.stopped"})

    def trigger_now(self):
        """
        Run the pipeline immediately in the current thread.

        Returns:
            Whatever the pipeline callable returns
        """
        logger.info("Triggering immediate pipeline run", extra={"event": "scheduler.trigger_now"})
        return self.pipeline_callable()

    def is_running(self) -> bool:
        return self.scheduler.running

    def get_next_run_time(self) -> Optional[datetime]:
        """
        Get the next scheduled run time.

        Returns:
            Next run time as a datetime, or None if not scheduled
        """
        job = self.scheduler.get_job(JOB_ID)
        return getattr(job, "next_run_time", None) if job else None
