"""Data models for pipeline execution tracking and reporting."""

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from careerscan.domain.models import JobRecord
from careerscan.utils.timestamps import format_timestamp


@dataclass
class PairRunStats:
    """
    Statistics for a single (source, keyword) attempt within a run.

    Attributes:
        source_name: Name of the source
        keyword: Search term used
        strategy: Extraction strategy of the source
        record_count: Records extracted (0 on failure)
        duration_seconds: Time spent on the attempt, pacing excluded
        had_errors: Whether the attempt failed
        error_type: Exception class name if the attempt failed
        error_message: Exception message if the attempt failed
    """

    source_name: str
    keyword: str
    strategy: str
    record_count: int = 0
    duration_seconds: float = 0.0
    had_errors: bool = False
    error_type: Optional[str] = None
    error_message: Optional[str] = None


@dataclass
class OrchestrationResult:
    """Raw output of one pass over every (source, keyword) pair."""

    records: List[JobRecord] = field(default_factory=list)
    pair_stats: List[PairRunStats] = field(default_factory=list)

    @property
    def failed_pairs(self) -> int:
        return sum(1 for stats in self.pair_stats if stats.had_errors)


@dataclass
class PipelineRunResult:
    """
    Aggregate results from a complete pipeline execution.

    Attributes:
        run_started_at: UTC timestamp when the run began
        run_finished_at: UTC timestamp when the run completed
        run_id: Identifier shared by every log line of the run
        total_duration_seconds: Total time for the entire run
        raw_count: Records extracted before deduplication
        total_count: Unique records after deduplication
        relevant_count: Records that passed the relevance filter
        failed_pairs: (source, keyword) attempts that failed
        pair_stats: Per-pair execution statistics
        counts_by_company: Relevant records per company
        export_path: CSV written by the run, if any
        notification_status: Outcome of the report email ("sent"/"failed")
        had_errors: Whether a run-level failure occurred
        error_message: Run-level failure message
        skipped: Whether the run was skipped (another run was in progress)
    """

    run_started_at: datetime
    run_finished_at: datetime
    run_id: Optional[str] = None
    total_duration_seconds: float = 0.0
    raw_count: int = 0
    total_count: int = 0
    relevant_count: int = 0
    failed_pairs: int = 0
    pair_stats: List[PairRunStats] = field(default_factory=list)
    counts_by_company: Dict[str, int] = field(default_factory=dict)
    export_path: Optional[Path] = None
    notification_status: Optional[str] = None
    had_errors: bool = False
    error_message: Optional[str] = None
    skipped: bool = False

    def __post_init__(self):
        """Compute failed pair count and duration if not already set."""
        if self.pair_stats and self.failed_pairs == 0:
            self.failed_pairs = sum(1 for s in self.pair_stats if s.had_errors)

        if self.total_duration_seconds == 0.0:
            delta = self.run_finished_at - self.run_started_at
            self.total_duration_seconds = delta.total_seconds()

    def summary(self) -> Dict[str, Any]:
        """JSON-friendly overview used by the control surface."""
        return {
            "run_id": self.run_id,
            "started_at": format_timestamp(self.run_started_at),
            "finished_at": format_timestamp(self.run_finished_at),
            "duration_seconds": round(self.total_duration_seconds, 3),
            "skipped": self.skipped,
            "raw_count": self.raw_count,
            "total_count": self.total_count,
            "relevant_count": self.relevant_count,
            "failed_pairs": self.failed_pairs,
            "counts_by_company": dict(self.counts_by_company),
            "export_file": self.export_path.name if self.export_path else None,
            "notification_status": self.notification_status,
            "had_errors": self.had_errors,
            "error_message": self.error_message,
        }


@dataclass(frozen=True)
class PipelineStatus:
    """Point-in-time view of the pipeline for status reporting."""

    is_running: bool
    last_run_started_at: Optional[datetime] = None
    last_run_finished_at: Optional[datetime] = None
    last_result: Optional[PipelineRunResult] = None
