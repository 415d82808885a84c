"""Headless browser session and page fetcher built on Playwright.

One ``BrowserSession`` belongs to one pipeline run. It launches Chromium,
hands out pages, and is closed by the run on every exit path.
"""

from typing import Any, Callable, Optional

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError
from playwright.sync_api import sync_playwright

from careerscan.config.models import ScrapingConfig
from careerscan.logging import get_logger

from .document import RenderedDocument
from .exceptions import BrowserLaunchError, ExtractionError, NavigationError

logger = get_logger(__name__, component="browser")

SCROLL_TO_BOTTOM_JS = "() => window.scrollTo(0, document.body.scrollHeight)"


class BrowserSession:
    """Owns a Playwright driver, a Chromium instance and a browser context.

    Usable as a context manager: entering launches, leaving closes.
    """

    def __init__(
        self,
        scraping_config: ScrapingConfig,
        playwright_factory: Callable[[], Any] = sync_playwright,
    ) -> None:
        """Initialize the session without launching anything.

        Args:
            scraping_config: Browser options (headless, args, user agent, viewport)
            playwright_factory: Returns a Playwright context manager (injected in tests)
        """
        self.config = scraping_config
        self._playwright_factory = playwright_factory
        self._driver = None
        self._browser = None
        self._context = None

    @property
    def is_open(self) -> bool:
        return self._context is not None

    def launch(self) -> "BrowserSession":
        """Start Chromium and create the browser context.

        Raises:
            BrowserLaunchError: If the driver or browser cannot be started
        """
        if self.is_open:
            return self

        try:
            self._driver = self._playwright_factory().start()
            self._browser = self._driver.chromium.launch(
                headless=self.config.headless,
                args=list(self.config.browser_args),
            )
            self._context = self._browser.new_context(
                user_agent=self.config.user_agent,
                viewport={
                    "width": self.config.viewport_width,
                    "height": self.config.viewport_height,
                },
            )
        except Exception as e:
            self.close()
            logger.error(
                f"Failed to launch browser: {e}",
                extra={"event": "browser.launch.failed", "error_type": type(e).__name__},
            )
            raise BrowserLaunchError(f"Failed to launch browser: {e}") from e

        logger.info(
            "Browser launched",
            extra={"event": "browser.launched", "headless": self.config.headless},
        )
        return self

    def new_page(self):
        """Open a new tab in the session's browser context."""
        if not self.is_open:
            raise BrowserLaunchError("Browser session is not open")
        return self._context.new_page()

    def close(self) -> None:
        """Release the context, the browser and the driver. Safe to call twice."""
        was_open = self._driver is not None

        for label, closer in (
            ("context", self._context.close if self._context is not None else None),
            ("browser", self._browser.close if self._browser is not None else None),
            ("driver", self._driver.stop if self._driver is not None else None),
        ):
            if closer is None:
                continue
            try:
                closer()
            except Exception as e:
                logger.warning(
                    f"Error closing browser {label}: {e}",
                    extra={"event": "browser.close.error", "resource": label},
                )

        self._context = None
        self._browser = None
        self._driver = None

        if was_open:
            logger.info("Browser closed", extra={"event": "browser.closed"})

    def __enter__(self) -> "BrowserSession":
        return self.launch()

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


class RenderedPage:
    """A navigated page that adapters can interact with before extraction."""

    def __init__(self, page) -> None:
        self._page = page

    @property
    def url(self) -> str:
        return self._page.url

    def scroll_to_bottom(self) -> None:
        """Scroll the window to the bottom to trigger lazy-loaded listings."""
        self.evaluate(SCROLL_TO_BOTTOM_JS)

    def wait(self, ms: int) -> None:
        """Block for ``ms`` milliseconds while the page keeps running scripts."""
        if ms > 0:
            self._page.wait_for_timeout(ms)

    def evaluate(self, script: str, arg: Any = None) -> Any:
        """Run a JavaScript expression or function in the page.

        Raises:
            ExtractionError: If the page rejects the script
        """
        try:
            if arg is None:
                return self._page.evaluate(script)
            return self._page.evaluate(script, arg)
        except PlaywrightError as e:
            raise ExtractionError(f"Script evaluation failed: {e}", url=self.url) from e

    def document(self) -> RenderedDocument:
        """Snapshot the current DOM.

        Raises:
            ExtractionError: If the page content cannot be read
        """
        try:
            html = self._page.content()
        except PlaywrightError as e:
            raise ExtractionError(f"Failed to read page content: {e}", url=self.url) from e
        return RenderedDocument(html, self._page.url)


class PageFetcher:
    """Navigates a single reusable tab of a ``BrowserSession``."""

    def __init__(self, session: BrowserSession, default_timeout_ms: int = 30000) -> None:
        self.session = session
        self.default_timeout_ms = default_timeout_ms
        self._page = None

    def fetch(
        self,
        url: str,
        wait_until_idle: bool = True,
        timeout_ms: Optional[int] = None,
    ) -> RenderedPage:
        """Navigate to ``url`` and return the rendered page.

        Args:
            url: Page to load
            wait_until_idle: Wait for network idle rather than DOM content loaded
            timeout_ms: Navigation timeout (defaults to ``default_timeout_ms``)

        Raises:
            NavigationError: On timeout or any navigation/network failure
        """
        timeout = timeout_ms if timeout_ms is not None else self.default_timeout_ms
        wait_until = "networkidle" if wait_until_idle else "domcontentloaded"

        if self._page is None:
            self._page = self.session.new_page()

        logger.debug(
            f"Navigating to {url}",
            extra={
                "event": "browser.navigate.started",
                "url": url,
                "wait_until": wait_until,
                "timeout_ms": timeout,
            },
        )

        try:
            self._page.goto(url, wait_until=wait_until, timeout=timeout)
        except PlaywrightTimeoutError as e:
            raise NavigationError(
                f"Navigation to {url} timed out after {timeout}ms", url=url, timed_out=True
            ) from e
        except PlaywrightError as e:
            raise NavigationError(f"Navigation to {url} failed: {e}", url=url) from e

        return RenderedPage(self._page)
