"""Scheduling module for periodic execution of the scanning pipeline."""

from .service import SchedulerService

__all__ = [
    "SchedulerService",
]
