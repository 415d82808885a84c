"""Core domain models for scraped job postings and export artifacts.

This module defines the data structures used throughout the application:
- JobRecord: one posting extracted from a career portal
- ExportArtifact: the CSV file written at the end of a run
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional
from urllib.parse import urlparse

from pydantic import BaseModel, Field, field_validator

TITLE_PLACEHOLDER = "Job Title Not Found"
COMPANY_PLACEHOLDER = "Company Not Found"


class JobRecord(BaseModel):
    """A job posting extracted from a rendered listing page.

    The canonical ``link`` is the identity of a posting: two records with
    the same link are the same job regardless of their other fields. It is
    always an absolute http(s) URL.
    """

    title: str = Field(TITLE_PLACEHOLDER, description="Job title or placeholder")
    company: str = Field(COMPANY_PLACEHOLDER, description="Company name or placeholder")
    link: str = Field(..., description="Canonical absolute URL of the posting")
    source: str = Field(..., min_length=1, description="Name of the source that produced it")
    scraped_at: datetime = Field(..., description="When the posting was captured (UTC)")
    job_id: Optional[str] = Field(None, description="Source-native job identifier")

    @field_validator("title")
    @classmethod
    def default_title(cls, v: Optional[str]) -> str:
        stripped = " ".join((v or "").split())
        return stripped or TITLE_PLACEHOLDER

    @field_validator("company")
    @classmethod
    def default_company(cls, v: Optional[str]) -> str:
        stripped = " ".join((v or "").split())
        return stripped or COMPANY_PLACEHOLDER

    @field_validator("link")
    @classmethod
    def require_absolute_link(cls, v: str) -> str:
        stripped = (v or "").strip()
        parsed = urlparse(stripped)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError(f"link must be an absolute http(s) URL, got: {v!r}")
        return stripped

    @field_validator("scraped_at")
    @classmethod
    def ensure_utc(cls, v: datetime) -> datetime:
        """Ensure datetime is timezone-aware and in UTC."""
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v.astimezone(timezone.utc)

    model_config = {"json_schema_extra": {"example": {
        "title": "Software Engineer II",
        "company": "Microsoft",
        "link": "https://jobs.careers.microsoft.com/global/en/job/1234567/",
        "source": "Microsoft",
        "scraped_at": "2025-11-04T10:30:00Z",
        "job_id": "1234567",
    }}}


@dataclass(frozen=True)
class ExportArtifact:
    """A CSV export written to disk.

    Attributes:
        path: Location of the file
        row_count: Number of data rows (header excluded)
    """

    path: Path
    row_count: int

    @property
    def filename(self) -> str:
        return self.path.name
