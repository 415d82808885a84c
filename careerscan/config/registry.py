"""Source registry: the ordered portals and keywords a run works through."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from .loader import load_app_config
from .models import AppConfig, SourceConfig


@dataclass(frozen=True)
class SourceRegistry:
    """Immutable view of the enabled sources and the keyword list.

    Attributes:
        sources: Enabled sources in configuration order
        keywords: Search terms in configuration order
    """

    sources: Tuple[SourceConfig, ...]
    keywords: Tuple[str, ...]

    @classmethod
    def from_config(cls, app_config: AppConfig) -> "SourceRegistry":
        return cls(
            sources=tuple(app_config.get_enabled_sources()),
            keywords=tuple(app_config.keywords),
        )

    def __len__(self) -> int:
        return len(self.sources)


def load_registry(config_path: Optional[Path] = None) -> SourceRegistry:
    """
    Load the source registry from the YAML configuration.

    Raises:
        ConfigurationError: If the configuration is missing or malformed
    """
    return SourceRegistry.from_config(load_app_config(config_path))
