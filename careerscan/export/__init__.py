"""CSV export of collected job records."""

from .writer import EXPORT_COLUMNS, ExportError, ExportWriter

__all__ = [
    "ExportWriter",
    "ExportError",
    "EXPORT_COLUMNS",
]
