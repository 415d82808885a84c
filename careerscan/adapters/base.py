"""Base adapter class with shared functionality for all extraction adapters.

An adapter knows how to reach one kind of career portal: which URL to load
for a keyword, how to coax the page into rendering its listings, and how to
turn the rendered DOM into ``JobRecord`` objects.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from pydantic import ValidationError

from careerscan.browser import PageFetcher, RenderedDocument, RenderedPage
from careerscan.config.models import ScrapingConfig, SourceConfig
from careerscan.domain.models import JobRecord
from careerscan.logging import get_logger
from careerscan.utils.timestamps import utc_now

logger = get_logger(__name__, component="adapter")


class BaseAdapter(ABC):
    """Base class for all extraction adapters.

    Subclasses implement ``extract``; they may override ``build_search_url``
    and ``prepare``. ``scrape`` chains fetch, prepare, snapshot and extract.

    Attributes:
        config: Browser timing and navigation settings
    """

    ADAPTER_NAME = "base"

    def __init__(self, scraping_config: Optional[ScrapingConfig] = None) -> None:
        self.config = scraping_config or ScrapingConfig()

    def build_search_url(self, source: SourceConfig, keyword: str) -> str:
        """URL to load for ``keyword``. Static portals ignore the keyword."""
        return source.search_url

    def prepare(self, page: RenderedPage) -> None:
        """Let dynamic listings render: settle, scroll to the bottom, settle again."""
        page.wait(self.config.settle_delay_ms)
        page.scroll_to_bottom()
        page.wait(self.config.scroll_settle_ms)

    @abstractmethod
    def extract(
        self, document: RenderedDocument, source: SourceConfig, keyword: str
    ) -> List[JobRecord]:
        """Turn a rendered listing page into job records.

        Missing titles or companies fall back to placeholders; a page with
        no listing nodes yields an empty list.

        Raises:
            ExtractionError: If the document itself cannot be queried
        """
        pass

    def scrape(self, fetcher: PageFetcher, source: SourceConfig, keyword: str) -> List[JobRecord]:
        """Fetch, prepare, snapshot and extract one (source, keyword) pair.

        Raises:
            NavigationError: If the page cannot be loaded
            ExtractionError: If the rendered page cannot be read
        """
        url = self.build_search_url(source, keyword)

        logger.info(
            f"Scraping {source.name} for '{keyword}'",
            extra={
                "event": "adapter.scrape.started",
                "adapter": self.ADAPTER_NAME,
                "url": url,
            },
        )

        page = fetcher.fetch(
            url,
            wait_until_idle=self.config.wait_until_idle,
            timeout_ms=self.config.navigation_timeout_ms,
        )
        self.prepare(page)
        records = self.extract(page.document(), source, keyword)

        logger.info(
            f"Extracted {len(records)} jobs from {source.name}",
            extra={
                "event": "adapter.scrape.completed",
                "adapter": self.ADAPTER_NAME,
                "job_count": len(records),
            },
        )
        return records

    def _build_record(
        self,
        source: SourceConfig,
        link: str,
        title: str,
        company: str,
        scraped_at: datetime,
        job_id: Optional[str] = None,
    ) -> Optional[JobRecord]:
        """Build a record, or None (logged) when the link does not validate."""
        try:
            return JobRecord(
                title=title,
                company=company,
                link=link,
                source=source.name,
                scraped_at=scraped_at,
                job_id=job_id,
            )
        except ValidationError as e:
            logger.warning(
                f"Skipping listing with invalid data: {e.errors()[0]['msg']}",
                extra={
                    "event": "adapter.record.skipped",
                    "adapter": self.ADAPTER_NAME,
                    "link": link,
                },
            )
            return None

    @staticmethod
    def _now() -> datetime:
        return utc_now()
