"""Pre-validation checks that warn about risky but legal configuration."""

import warnings
from typing import Any, Dict, List

from .models import StrategyType

# Pauses shorter than this are likely to get a scraper blocked
MIN_POLITE_DELAY_MS = 1000


def check_for_warnings(config_dict: Dict[str, Any]) -> List[str]:
    """
    Check raw configuration for potential issues and return warnings.

    Args:
        config_dict: Raw configuration dictionary

    Returns:
        List of warning messages
    """
    warning_messages = []

    sources = config_dict.get("sources") or []
    for source in sources:
        if not isinstance(source, dict):
            continue
        name = source.get("name", "Unknown")

        if not source.get("enabled", True):
            warning_messages.append(f"Source '{name}' is disabled and will be skipped")

        strategy = source.get("strategy")
        if strategy is not None and not StrategyType.is_known(strategy):
            warning_messages.append(
                f"Source '{name}' has unknown strategy '{strategy}'; using the generic adapter"
            )

    scraping = config_dict.get("scraping") or {}
    if isinstance(scraping, dict):
        for key in ("company_delay_ms", "generic_delay_ms", "delay_override_ms"):
            value = scraping.get(key)
            if key == "delay_override_ms" and value == 0:
                continue
            if isinstance(value, int) and value < MIN_POLITE_DELAY_MS:
                warning_messages.append(
                    f"Short scraping.{key} ({value}ms) may get requests rate limited or blocked"
                )

    keywords = config_dict.get("keywords") or []
    if isinstance(keywords, list):
        normalized = [k.strip().lower() for k in keywords if isinstance(k, str)]
        duplicates = sorted({k for k in normalized if k and normalized.count(k) > 1})
        if duplicates:
            warning_messages.append(
                f"Duplicate keywords will be searched more than once: {', '.join(duplicates)}"
            )

    return warning_messages


def emit_warnings(warning_messages: List[str]) -> None:
    """Emit warning messages using Python's warnings module."""
    for message in warning_messages:
        warnings.warn(message, UserWarning, stacklevel=2)
