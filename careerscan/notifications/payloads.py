"""Payload resolution for notification templates.

This module builds the context dictionaries the report and error email
templates are rendered with.
"""

from datetime import datetime
from typing import Dict, Mapping, Optional

from careerscan.utils.timestamps import format_timestamp, utc_now


def build_report_context(
    relevant_count: int,
    total_count: int,
    counts_by_company: Optional[Mapping[str, int]] = None,
    attachment_name: Optional[str] = None,
    generated_at: Optional[datetime] = None,
) -> Dict:
    """Build template context for the run report.

    Args:
        relevant_count: Jobs included in the export
        total_count: Unique jobs scraped in the run
        counts_by_company: Relevant jobs per company, in first-seen order
        attachment_name: File name of the attached CSV, if any
        generated_at: Report time (defaults to now, UTC)

    Returns:
        Dictionary with all required template context keys:
        - relevant_count, total_count: Run counters
        - has_jobs: Whether any relevant job was found
        - company_counts: List of (company, count) pairs
        - attachment_name: CSV file name or None
        - report_date: YYYY-MM-DD of the report
        - generated_at: ISO formatted report time
    """
    generated_at = generated_at or utc_now()

    return {
        "relevant_count": relevant_count,
        "total_count": total_count,
        "has_jobs": relevant_count > 0,
        "company_counts": list((counts_by_company or {}).items()),
        "attachment_name": attachment_name,
        "report_date": generated_at.date().isoformat(),
        "generated_at": format_timestamp(generated_at),
    }


def build_error_context(
    message: str,
    trace: Optional[str] = None,
    occurred_at: Optional[datetime] = None,
) -> Dict:
    """Build template context for a run failure email."""
    occurred_at = occurred_at or utc_now()

    return {
        "error_message": message,
        "trace": trace or "",
        "report_date": occurred_at.date().isoformat(),
        "occurred_at": format_timestamp(occurred_at),
    }
