"""Queryable snapshot of a rendered page.

Adapters never talk to the live browser page when extracting; they read a
``RenderedDocument`` built from the page's DOM after scripts have run. The
snapshot is parsed with BeautifulSoup so CSS selectors behave the same in
production and in tests fed with saved HTML.
"""

from typing import List, Optional
from urllib.parse import urljoin, urlparse

from bs4 import BeautifulSoup
from bs4.element import Tag

from .exceptions import ExtractionError


def node_text(node: Optional[Tag]) -> str:
    """Visible text of a node with whitespace collapsed ('' for None)."""
    if node is None:
        return ""
    return " ".join(node.get_text(" ").split())


class RenderedDocument:
    """A parsed DOM snapshot plus the URL it was rendered from.

    Attributes:
        url: Final URL of the page (after redirects)
        base_url: URL relative links resolve against; honours ``<base href>``
    """

    def __init__(self, html: str, url: str) -> None:
        self.url = url
        try:
            self._soup = BeautifulSoup(html or "", "html.parser")
        except Exception as e:
            raise ExtractionError(f"Failed to parse document from {url}: {e}", url=url) from e
        self.base_url = self._compute_base_url()

    def _compute_base_url(self) -> str:
        base_tag = self._soup.find("base", href=True)
        if base_tag is not None:
            return urljoin(self.url, base_tag["href"].strip())
        return self.url

    def select(self, selector: str, scope: Optional[Tag] = None) -> List[Tag]:
        """All nodes matching ``selector`` within ``scope`` (default: whole document).

        Raises:
            ExtractionError: If the selector cannot be evaluated
        """
        root = scope if scope is not None else self._soup
        try:
            return list(root.select(selector))
        except Exception as e:
            raise ExtractionError(
                f"Cannot evaluate selector {selector!r} on {self.url}: {e}", url=self.url
            ) from e

    def select_one(self, selector: str, scope: Optional[Tag] = None) -> Optional[Tag]:
        """First node matching ``selector`` or None."""
        matches = self.select(selector, scope)
        return matches[0] if matches else None

    def resolve(self, href: Optional[str]) -> Optional[str]:
        """Resolve ``href`` against the base URL.

        Returns:
            Absolute http(s) URL, or None when href is empty or resolves to
            another scheme (javascript:, mailto:, ...)
        """
        if not href or not href.strip():
            return None
        absolute = urljoin(self.base_url, href.strip())
        parsed = urlparse(absolute)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            return None
        return absolute

    def __repr__(self) -> str:
        return f"RenderedDocument(url={self.url!r})"
