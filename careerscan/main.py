"""Main entry point for the Career Portal Scanner service."""

from dotenv import load_dotenv
load_dotenv()

import argparse
import os
import signal
import sys
import threading
import time
from pathlib import Path
from typing import Optional, Tuple

import uvicorn

from careerscan.config.environment import EnvironmentConfig
from careerscan.config.exceptions import ConfigurationError
from careerscan.config.loader import load_config
from careerscan.config.models import AppConfig
from careerscan.logging import get_logger
from careerscan.logging.config import configure_logging
from careerscan.notifications.service import NotificationService
from careerscan.pipeline import ScrapePipeline
from careerscan.scheduler import SchedulerService
from careerscan.web import create_app

logger = get_logger(__name__, component="cli")

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 3000


def load_runtime_config(
    config_path: Optional[Path], log_level_override: Optional[str]
) -> Tuple[AppConfig, EnvironmentConfig]:
    """
    Load configuration and apply environment overrides.

    ``CRON_SCHEDULE`` replaces the configured schedule and ``SCRAPING_DELAY``
    replaces every pacing delay.

    Args:
        config_path: Path to configuration file (None to search defaults)
        log_level_override: Log level from CLI (takes precedence)

    Returns:
        Tuple of (AppConfig, EnvironmentConfig) with overrides applied

    Raises:
        ConfigurationError: If configuration is invalid
    """
    app_config, env_config = load_config(config_path)

    updates = {}
    if env_config.cron_schedule:
        updates["schedule"] = app_config.schedule.model_copy(
            update={"cron": env_config.cron_schedule}
        )
    if env_config.scraping_delay_ms is not None:
        updates["scraping"] = app_config.scraping.model_copy(
            update={"delay_override_ms": env_config.scraping_delay_ms}
        )
    if updates:
        app_config = app_config.model_copy(update=updates)

    # Apply log level priority: CLI > Environment > Config
    if log_level_override:
        env_config.log_level = log_level_override
    elif env_config.log_level:
        pass
    elif app_config.logging and app_config.logging.level:
        env_config.log_level = app_config.logging.level
    else:
        env_config.log_level = "INFO"

    return app_config, env_config


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Career Portal Scanner - scrape career portals and email a CSV job report"
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to configuration file (default: config.yaml or config/config.yaml)",
    )
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "--manual-run",
        action="store_true",
        help="Run a single scrape immediately and exit",
    )
    mode.add_argument(
        "--serve",
        action="store_true",
        help="Run the scheduler together with the HTTP control surface",
    )
    parser.add_argument(
        "--host",
        default=DEFAULT_HOST,
        help=f"Bind address for --serve (default: {DEFAULT_HOST})",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help=f"Port for --serve (default: $PORT or {DEFAULT_PORT})",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (overrides config and environment)",
    )
    return parser


def resolve_port(cli_port: Optional[int]) -> int:
    """CLI port, else the PORT environment variable, else the default."""
    if cli_port is not None:
        return cli_port
    raw = os.environ.get("PORT", "").strip()
    if not raw:
        return DEFAULT_PORT
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(
            f"Invalid PORT: {raw}",
            suggestions=["PORT must be an integer between 1 and 65535"],
        )


def main(argv=None) -> int:
    """
    Main entry point for the Career Portal Scanner.

    Returns:
        Exit code (0 for success, non-zero for failure).
    """
    start_time = time.time()
    args = build_parser().parse_args(argv)

    try:
        # Step 1: Load configuration early (before logging for format detection)
        app_config, env_config = load_runtime_config(args.config, args.log_level)

        # Step 2: Configure logging
        log_format = app_config.logging.format if app_config.logging else "key-value"
        environment = os.environ.get("ENVIRONMENT", "local")
        configure_logging(level=env_config.log_level, format_type=log_format, environment=environment)

        mode = "manual" if args.manual_run else "serve" if args.serve else "daemon"
        logger.info(
            "Career Portal Scanner starting",
            extra={
                "event": "service.starting",
                "config_path": str(args.config) if args.config else None,
                "log_level": env_config.log_level,
                "mode": mode,
            },
        )

        enabled_sources = app_config.get_enabled_sources()
        logger.info(
            "Configuration loaded",
            extra={
                "event": "config.loaded",
                "source_count": len(app_config.sources),
                "enabled_source_count": len(enabled_sources),
                "keyword_count": len(app_config.keywords),
                "cron": app_config.schedule.cron,
                "log_format": log_format,
            },
        )

        # Step 3: Build services and pipeline
        notification_service = NotificationService(env_config, app_config.email)
        pipeline = ScrapePipeline(
            app_config=app_config,
            notification_service=notification_service,
        )

        # Step 4: Branch based on mode
        if args.manual_run:
            logger.info("Executing manual scrape", extra={"event": "service.manual_scan.starting"})
            result = pipeline.run_once()

            logger.info(
                f"Manual scrape completed: {result.raw_count} scraped, "
                f"{result.total_count} unique, {result.relevant_count} relevant, "
                f"{result.failed_pairs} failed pairs",
                extra={
                    "event": "service.manual_scan.completed",
                    "duration_seconds": result.total_duration_seconds,
                    "had_errors": result.had_errors,
                    "notification_status": result.notification_status,
                },
            )
            _log_stopping(start_time)

            # Exit with error code if the run failed as a whole
            return 1 if result.had_errors else 0

        shutdown_event = threading.Event()
        scheduler_service = SchedulerService(
            pipeline_callable=pipeline.run_scheduled,
            cron_expression=app_config.schedule.cron,
            timezone=app_config.schedule.timezone,
            shutdown_event=shutdown_event,
        )

        if args.serve:
            port = resolve_port(args.port)
            app = create_app(
                pipeline,
                scheduler_service=scheduler_service,
                cron_schedule=app_config.schedule.cron,
            )
            scheduler_service.start()
            logger.info(
                f"Control surface listening on {args.host}:{port}",
                extra={"event": "service.serve_mode.started", "host": args.host, "port": port},
            )
            try:
                # uvicorn installs its own SIGINT/SIGTERM handlers
                uvicorn.run(app, host=args.host, port=port, log_config=None)
            finally:
                scheduler_service.shutdown(wait=False)
            _log_stopping(start_time)
            return 0

        # Daemon mode: scheduler only
        def signal_handler(signum, frame):
            logger.info(
                f"Received signal {signum}, shutting down",
                extra={"event": "service.signal_received", "signal": signum},
            )
            scheduler_service.shutdown(wait=False)

        signal.signal(signal.SIGINT, signal_handler)
        signal.signal(signal.SIGTERM, signal_handler)

        scheduler_service.start()
        logger.info(
            "Scheduler started. Press Ctrl+C to stop",
            extra={"event": "service.daemon_mode.started"},
        )

        # Block until shutdown event is set
        shutdown_event.wait()
        _log_stopping(start_time)
        return 0

    except ConfigurationError as e:
        # Configuration errors are already formatted nicely
        print(f"Configuration Error: {e}", file=sys.stderr)
        logger.error(
            f"Configuration error: {e}",
            extra={"event": "config.error", "error_type": "ConfigurationError"},
        )
        return 1
    except KeyboardInterrupt:
        print("\nShutdown requested by user", file=sys.stderr)
        return 0
    except Exception as e:
        print(f"Fatal error: {e}", file=sys.stderr)
        logger.critical(
            "Fatal error during startup",
            extra={
                "event": "service.startup.failed",
                "error_type": type(e).__name__,
                "error": str(e),
            },
            exc_info=True,
        )
        return 1


def _log_stopping(start_time: float) -> None:
    logger.info(
        "Career Portal Scanner stopped",
        extra={
            "event": "service.stopping",
            "uptime_seconds": round(time.time() - start_time, 2),
        },
    )


def run() -> None:
    """Console script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    run()
