"""Exceptions raised by the rendering layer."""

from typing import Optional


class ScrapeError(Exception):
    """Base class for failures while loading or reading a listing page.

    Failures of this family are scoped to one (source, keyword) pair: the
    orchestrator records them and moves on to the next pair.
    """

    pass


class BrowserLaunchError(ScrapeError):
    """The headless browser could not be started.

    Unlike the other scrape errors this one is fatal for the whole run,
    since no page can be fetched without a browser.
    """

    pass


class NavigationError(ScrapeError):
    """Navigation to a page failed or timed out."""

    def __init__(self, message: str, url: str, timed_out: bool = False) -> None:
        """Initialize navigation error.

        Args:
            message: Human-readable error message
            url: URL that could not be loaded
            timed_out: Whether the failure was a navigation timeout
        """
        super().__init__(message)
        self.url = url
        self.timed_out = timed_out


class ExtractionError(ScrapeError):
    """A rendered document could not be read.

    Raised for document-access faults (snapshot failure, invalid selector),
    never for a page that simply has no listings.
    """

    def __init__(self, message: str, url: Optional[str] = None) -> None:
        super().__init__(message)
        self.url = url
