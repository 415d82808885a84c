"""Extraction adapters for career portals.

This module provides one adapter per extraction strategy:
- Microsoft careers: microsoft.MicrosoftAdapter
- Amazon Jobs: amazon.AmazonAdapter
- Any selector-described board: generic.GenericAdapter

Use the factory function to instantiate adapters:
    from careerscan.adapters.factory import get_adapter
    adapter = get_adapter(source_config, scraping_config)
    records = adapter.scrape(fetcher, source_config, keyword)

Per-pair failures surface as the rendering layer's exceptions
(careerscan.browser.NavigationError, careerscan.browser.ExtractionError).
"""

from .amazon import AmazonAdapter
from .base import BaseAdapter
from .factory import ADAPTER_REGISTRY, get_adapter
from .generic import GenericAdapter
from .microsoft import MicrosoftAdapter

__all__ = [
    # Base and factory
    "BaseAdapter",
    "ADAPTER_REGISTRY",
    "get_adapter",
    # Adapters
    "MicrosoftAdapter",
    "AmazonAdapter",
    "GenericAdapter",
]
