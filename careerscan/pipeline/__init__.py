"""Pipeline orchestration for scraping, deduplication, export and reporting."""

from .dedupe import dedupe, filter_relevant
from .models import OrchestrationResult, PairRunStats, PipelineRunResult, PipelineStatus
from .orchestrator import ScrapeOrchestrator
from .pacing import PacingPolicy
from .runner import ScrapePipeline, count_by_company

__all__ = [
    "ScrapePipeline",
    "ScrapeOrchestrator",
    "PacingPolicy",
    "PipelineRunResult",
    "PipelineStatus",
    "OrchestrationResult",
    "PairRunStats",
    "dedupe",
    "filter_relevant",
    "count_by_company",
]
