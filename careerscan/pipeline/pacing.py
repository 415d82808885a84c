"""Request-budget and pacing policy for the scrape orchestrator."""

from dataclasses import dataclass
from typing import Optional

from careerscan.config.models import ScrapingConfig, StrategyType

COMPANY_SPECIFIC_STRATEGIES = frozenset({StrategyType.MICROSOFT, StrategyType.AMAZON})


@dataclass(frozen=True)
class PacingPolicy:
    """How many keywords a source is searched with and how long to pause after each search.

    Single-employer portals get fewer keywords and longer pauses than
    generic job boards. A positive ``delay_override_ms`` replaces both pauses;
    0 or None keeps the per-strategy pauses.
    """

    company_keyword_limit: int = 3
    generic_keyword_limit: int = 5
    company_delay_ms: int = 5000
    generic_delay_ms: int = 2000
    delay_override_ms: Optional[int] = None

    @classmethod
    def from_config(cls, scraping_config: ScrapingConfig) -> "PacingPolicy":
        return cls(
            company_keyword_limit=scraping_config.company_keyword_limit,
            generic_keyword_limit=scraping_config.generic_keyword_limit,
            company_delay_ms=scraping_config.company_delay_ms,
            generic_delay_ms=scraping_config.generic_delay_ms,
            delay_override_ms=scraping_config.delay_override_ms,
        )

    @staticmethod
    def is_company_specific(strategy) -> bool:
        return StrategyType.coerce(strategy) in COMPANY_SPECIFIC_STRATEGIES

    def keyword_limit(self, strategy) -> int:
        if self.is_company_specific(strategy):
            return self.company_keyword_limit
        return self.generic_keyword_limit

    def delay_ms(self, strategy) -> int:
        if self.delay_override_ms:
            return self.delay_override_ms
        if self.is_company_specific(strategy):
            return self.company_delay_ms
        return self.generic_delay_ms
