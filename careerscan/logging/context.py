"""Context propagation for structured logging.

Fields pushed here (run_id, source, keyword) are merged into every log
record emitted inside the scope by ``ContextualFilter``. Storage is a
ContextVar, so APScheduler worker threads and request threads each see
their own context.
"""

from contextvars import ContextVar, Token
from typing import Any, Dict, Optional

LogContextVar: ContextVar[Dict[str, Any]] = ContextVar("log_context", default={})


def get_log_context() -> Dict[str, Any]:
    """Return a copy of the fields active in the current context."""
    return dict(LogContextVar.get())


def push_log_context(**fields) -> Token:
    """Layer ``fields`` over the current context.

    Returns:
        Token for ``pop_log_context`` to restore the previous state
    """
    return LogContextVar.set({**LogContextVar.get(), **fields})


def pop_log_context(token: Token) -> None:
    """Restore the context captured by ``push_log_context``."""
    LogContextVar.reset(token)


def clear_log_context() -> None:
    """Drop every context field. Mostly useful in tests."""
    LogContextVar.set({})


class log_context:
    """Context manager for scoped logging context.

    Example:
        >>> with log_context(run_id="abc123", source="Microsoft"):
        ...     logger.info("Scraping source")  # carries run_id and source
    """

    def __init__(self, **fields):
        self.fields = fields
        self.token: Optional[Token] = None

    def __enter__(self):
        self.token = push_log_context(**self.fields)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.token is not None:
            pop_log_context(self.token)
            self.token = None
        return False
