"""Rendering layer: Playwright-driven fetching and DOM snapshots."""

from .document import RenderedDocument, node_text
from .exceptions import BrowserLaunchError, ExtractionError, NavigationError, ScrapeError
from .session import BrowserSession, PageFetcher, RenderedPage

__all__ = [
    "BrowserSession",
    "PageFetcher",
    "RenderedPage",
    "RenderedDocument",
    "node_text",
    "ScrapeError",
    "BrowserLaunchError",
    "NavigationError",
    "ExtractionError",
]
