"""Domain models for the Career Portal Scanner."""

from .models import COMPANY_PLACEHOLDER, TITLE_PLACEHOLDER, ExportArtifact, JobRecord

__all__ = ["JobRecord", "ExportArtifact", "TITLE_PLACEHOLDER", "COMPANY_PLACEHOLDER"]
