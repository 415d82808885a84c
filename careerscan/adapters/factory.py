"""Factory function for instantiating extraction adapters."""

from typing import Dict, Optional, Type

from careerscan.config.models import ScrapingConfig, SourceConfig, StrategyType
from careerscan.logging import get_logger

from .amazon import AmazonAdapter
from .base import BaseAdapter
from .generic import GenericAdapter
from .microsoft import MicrosoftAdapter

logger = get_logger(__name__, component="adapter")

ADAPTER_REGISTRY: Dict[StrategyType, Type[BaseAdapter]] = {
    StrategyType.MICROSOFT: MicrosoftAdapter,
    StrategyType.AMAZON: AmazonAdapter,
    StrategyType.GENERIC: GenericAdapter,
}


def get_adapter(
    source_config: SourceConfig, scraping_config: Optional[ScrapingConfig] = None
) -> BaseAdapter:
    """Factory function to instantiate the adapter for a source's strategy.

    Strategies without a registered adapter fall back to the generic,
    selector-driven adapter.

    Args:
        source_config: Source configuration with its extraction strategy
        scraping_config: Browser timing settings passed to the adapter

    Returns:
        Instantiated adapter for the source

    Example:
        >>> source = SourceConfig(name="Microsoft", search_url="https://...", strategy="microsoft")
        >>> adapter = get_adapter(source, ScrapingConfig())
        >>> records = adapter.scrape(fetcher, source, "frontend developer")
    """
    strategy = StrategyType.coerce(source_config.strategy)
    adapter_class = ADAPTER_REGISTRY.get(strategy, GenericAdapter)

    logger.debug(
        "Creating adapter instance",
        extra={
            "event": "adapter.created",
            "strategy": strategy.value,
            "source": source_config.name,
            "adapter_class": adapter_class.__name__,
        },
    )

    return adapter_class(scraping_config)
