"""Selector-driven adapter for arbitrary job boards."""

from typing import List, Optional
from urllib.parse import quote

from bs4.element import Tag

from careerscan.browser import RenderedDocument, RenderedPage, node_text
from careerscan.config.models import SourceConfig
from careerscan.domain.models import COMPANY_PLACEHOLDER, TITLE_PLACEHOLDER, JobRecord
from careerscan.logging import get_logger

from .base import BaseAdapter

logger = get_logger(__name__, component="adapter")

KEYWORD_PLACEHOLDER = "{keywords}"


class GenericAdapter(BaseAdapter):
    """Adapter configured entirely by a source's selector bindings.

    Company names are paired with listings by position: the i-th match of
    ``selectors.company`` in the whole document belongs to the i-th listing.
    Boards whose company nodes are not aligned with their listings get
    mismatched companies.
    """

    ADAPTER_NAME = "generic"

    def build_search_url(self, source: SourceConfig, keyword: str) -> str:
        """Substitute the URL-encoded keyword for ``{keywords}``."""
        return source.search_url.replace(KEYWORD_PLACEHOLDER, quote(keyword, safe=""), 1)

    def prepare(self, page: RenderedPage) -> None:
        page.wait(self.config.generic_settle_ms)

    def extract(
        self, document: RenderedDocument, source: SourceConfig, keyword: str
    ) -> List[JobRecord]:
        selectors = source.selectors
        if selectors is None:
            logger.warning(
                f"Source {source.name} has no selectors, nothing to extract",
                extra={"event": "adapter.extract.no_selectors", "adapter": self.ADAPTER_NAME},
            )
            return []

        scraped_at = self._now()
        listings = document.select(selectors.list_item)
        companies = document.select(selectors.company) if selectors.company else []
        records = []

        for index, node in enumerate(listings):
            link = document.resolve(self._href_for(document, node))
            if link is None:
                continue

            title = node_text(node)
            if not title and selectors.title:
                title = node_text(document.select_one(selectors.title, scope=node))

            company = node_text(companies[index]) if index < len(companies) else ""

            record = self._build_record(
                source,
                link=link,
                title=title or TITLE_PLACEHOLDER,
                company=company or COMPANY_PLACEHOLDER,
                scraped_at=scraped_at,
            )
            if record is not None:
                records.append(record)

        return records

    @staticmethod
    def _href_for(document: RenderedDocument, node: Tag) -> Optional[str]:
        href = node.get("href")
        if href and href.strip():
            return href
        anchor = document.select_one("a[href]", scope=node)
        return anchor.get("href") if anchor is not None else None
