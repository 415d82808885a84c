"""Microsoft careers portal adapter."""

import re
from typing import List

from careerscan.browser import RenderedDocument, node_text
from careerscan.config.models import SourceConfig
from careerscan.domain.models import TITLE_PLACEHOLDER, JobRecord
from careerscan.logging import get_logger

from .base import BaseAdapter

logger = get_logger(__name__, component="adapter")


class MicrosoftAdapter(BaseAdapter):
    """Adapter for jobs.careers.microsoft.com.

    Listing tiles carry the job number only in their ``aria-label``
    ("Job item 1234567"). The canonical link is built from that number;
    any anchors inside the tile are ignored.
    """

    ADAPTER_NAME = "microsoft"
    JOB_ITEM_SELECTOR = 'div[aria-label^="Job item"]'
    TITLE_SELECTOR = 'h3[data-automation-id="jobTitle"]'
    COMPANY_SELECTOR = 'span[data-automation-id="companyName"]'
    JOB_ID_PATTERN = re.compile(r"Job item (\d+)")
    JOB_URL_TEMPLATE = "https://jobs.careers.microsoft.com/global/en/job/{job_id}/"
    DEFAULT_COMPANY = "Microsoft"

    def extract(
        self, document: RenderedDocument, source: SourceConfig, keyword: str
    ) -> List[JobRecord]:
        scraped_at = self._now()
        records = []
        skipped = 0

        for item in document.select(self.JOB_ITEM_SELECTOR):
            match = self.JOB_ID_PATTERN.search(item.get("aria-label", ""))
            if not match:
                skipped += 1
                continue

            job_id = match.group(1)
            title = node_text(document.select_one(self.TITLE_SELECTOR, scope=item))
            company = node_text(document.select_one(self.COMPANY_SELECTOR, scope=item))

            record = self._build_record(
                source,
                link=self.JOB_URL_TEMPLATE.format(job_id=job_id),
                title=title or TITLE_PLACEHOLDER,
                company=company or self.DEFAULT_COMPANY,
                scraped_at=scraped_at,
                job_id=job_id,
            )
            if record is not None:
                records.append(record)

        if skipped:
            logger.debug(
                f"Skipped {skipped} job tiles without a job number",
                extra={"event": "adapter.extract.skipped", "adapter": self.ADAPTER_NAME, "count": skipped},
            )

        return records
