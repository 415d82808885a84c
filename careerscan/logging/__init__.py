"""Structured logging helpers shared by every scanner component."""

import logging
from typing import Optional


class ComponentLoggerAdapter(logging.LoggerAdapter):
    """LoggerAdapter that stamps a ``component`` field on every record.

    Per-call ``extra`` fields win over the adapter's defaults.
    """

    def process(self, msg, kwargs):
        kwargs["extra"] = {**self.extra, **(kwargs.get("extra") or {})}
        return msg, kwargs


def get_logger(name: str, component: Optional[str] = None):
    """Get a logger, optionally bound to a component name.

    Args:
        name: Logger name (typically __name__)
        component: Component identifier injected into all records

    Example:
        >>> logger = get_logger(__name__, component="orchestrator")
        >>> logger.info("Pair scraped", extra={"event": "orchestrator.pair.completed"})
    """
    logger = logging.getLogger(name)

    if component:
        return ComponentLoggerAdapter(logger, {"component": component})

    return logger
