"""HTTP control surface: health, status and manual trigger endpoints."""

import time
from typing import Optional

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from careerscan.config.models import DEFAULT_CRON_SCHEDULE
from careerscan.logging import get_logger
from careerscan.pipeline.runner import ScrapePipeline
from careerscan.scheduler.service import SchedulerService
from careerscan.utils.timestamps import format_timestamp, utc_now

logger = get_logger(__name__, component="web")


def create_app(
    pipeline: ScrapePipeline,
    scheduler_service: Optional[SchedulerService] = None,
    cron_schedule: str = DEFAULT_CRON_SCHEDULE,
) -> FastAPI:
    """
    Build the FastAPI application around a pipeline.

    Endpoints are plain ``def`` handlers, so FastAPI runs them in its
    threadpool and a manual run does not block the event loop.

    Args:
        pipeline: Pipeline triggered by POST /trigger-scrape
        scheduler_service: Scheduler queried for the next run time
        cron_schedule: Schedule reported by GET /status
    """
    app = FastAPI(title="Career Portal Scanner", version="0.1.0")
    started = time.monotonic()

    @app.get("/")
    def index():
        return {
            "status": "Job Scraper is running!",
            "timestamp": format_timestamp(utc_now()),
            "endpoints": {
                "health": "/health",
                "trigger": "/trigger-scrape",
                "status": "/status",
            },
        }

    @app.get("/health")
    def health():
        return {
            "status": "healthy",
            "timestamp": format_timestamp(utc_now()),
            "uptime": round(time.monotonic() - started, 3),
        }

    @app.post("/trigger-scrape")
    def trigger_scrape():
        logger.info("Manual scrape triggered via API", extra={"event": "web.trigger.received"})
        result = pipeline.run_once()
        timestamp = format_timestamp(utc_now())

        if result.skipped:
            return JSONResponse(
                status_code=409,
                content={
                    "status": "skipped",
                    "message": "A scraping run is already in progress",
                    "timestamp": timestamp,
                },
            )

        if result.had_errors:
            return JSONResponse(
                status_code=500,
                content={
                    "status": "error",
                    "message": result.error_message,
                    "result": result.summary(),
                    "timestamp": timestamp,
                },
            )

        return {
            "status": "success",
            "message": "Scraping job completed",
            "result": result.summary(),
            "timestamp": timestamp,
        }

    @app.get("/status")
    def status():
        snapshot = pipeline.status()
        next_run = scheduler_service.get_next_run_time() if scheduler_service else None
        last = snapshot.last_result

        return {
            "status": "running",
            "cron_schedule": cron_schedule,
            "next_run": format_timestamp(next_run) if next_run else None,
            "is_running": snapshot.is_running,
            "last_run": last.summary() if last else None,
            "timestamp": format_timestamp(utc_now()),
        }

    return app
