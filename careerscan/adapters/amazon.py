"""Amazon Jobs adapter."""

import re
from typing import List, Optional
from urllib.parse import urljoin

from bs4.element import Tag

from careerscan.browser import RenderedDocument, node_text
from careerscan.config.models import SourceConfig
from careerscan.domain.models import TITLE_PLACEHOLDER, JobRecord

from .base import BaseAdapter


class AmazonAdapter(BaseAdapter):
    """Adapter for www.amazon.jobs search results.

    Result anchors carry hrefs relative to the site root
    (``en/jobs/3078075/frontend-engineer-ii``); the job number is the first
    all-digit path segment.
    """

    ADAPTER_NAME = "amazon"
    JOB_LINK_SELECTOR = "a.job-link"
    SITE_ROOT = "https://www.amazon.jobs/"
    JOB_ID_PATTERN = re.compile(r"/(\d+)/")
    COMPANY = "Amazon"

    def extract(
        self, document: RenderedDocument, source: SourceConfig, keyword: str
    ) -> List[JobRecord]:
        scraped_at = self._now()
        records = []

        for anchor in document.select(self.JOB_LINK_SELECTOR):
            href = (anchor.get("href") or "").strip()
            if not href:
                continue

            match = self.JOB_ID_PATTERN.search(href)
            record = self._build_record(
                source,
                link=urljoin(self.SITE_ROOT, href),
                title=self._title_for(document, anchor) or TITLE_PLACEHOLDER,
                company=self.COMPANY,
                scraped_at=scraped_at,
                job_id=match.group(1) if match else None,
            )
            if record is not None:
                records.append(record)

        return records

    @staticmethod
    def _title_for(document: RenderedDocument, anchor: Tag) -> str:
        # h3 inside the anchor, then .job-title, then the h3 of the enclosing tile
        for selector in ("h3", ".job-title"):
            title = node_text(document.select_one(selector, scope=anchor))
            if title:
                return title

        tile: Optional[Tag] = anchor if "job-tile" in (anchor.get("class") or []) else None
        if tile is None:
            tile = anchor.find_parent(class_="job-tile")
        if tile is None:
            return ""
        return node_text(document.select_one("h3", scope=tile))
