"""Test helper utilities for Career Portal Scanner tests."""

from .fake_browser import FakeBrowserSession, FakePage, load_page, make_fetcher, rendered
from .sources import AMAZON_URL, GENERIC_URL, MICROSOFT_URL

__all__ = [
    "FakeBrowserSession",
    "FakePage",
    "load_page",
    "make_fetcher",
    "rendered",
    "AMAZON_URL",
    "GENERIC_URL",
    "MICROSOFT_URL",
]
