"""
Link extraction from fetched HTML pages.
"""

import logging
from typing import List

from bs4 import BeautifulSoup

from .urls import resolve_url, is_same_host


class LinkExtractionError(Exception):
    """Raised when a page's HTML cannot be parsed at all."""
    pass


class LinkExtractor:
    """
    Pulls same-host anchor links out of HTML content.

    Links are returned in document order and are not deduplicated; the
    traversal owns deduplication.
    """

    def __init__(self, features: str = 'lxml'):
        self.features = features
        self.logger = logging.getLogger(__name__)

    def parse(self, html_content: str) -> BeautifulSoup:
        """Parse HTML into a document, raising LinkExtractionError on failure."""
        if not isinstance(html_content, str):
            raise LinkExtractionError(
                f"Expected HTML text, got {type(html_content).__name__}"
            )
        try:
            return BeautifulSoup(html_content, self.features)
        except Exception as e:
            raise LinkExtractionError(f"Could not parse HTML: {e}") from e

    def extract_links(self, html_content: str, base_url: str) -> List[str]:
        """
        Extract absolute same-host links from HTML.

        Args:
            html_content: Raw HTML content
            base_url: URL hrefs are resolved against and scoped to

        Returns:
            Absolute URLs sharing base_url's host, in document order
        """
        soup = self.parse(html_content)

        links = []
        for anchor in soup.select('a[href]'):
            href = anchor.get('href')
            if href is None:
                continue

            absolute_url = resolve_url(base_url, href.strip())
            if absolute_url and is_same_host(base_url, absolute_url):
                links.append(absolute_url)

        self.logger.debug(f"Extracted {len(links)} same-host links against {base_url}")
        return links


_default_extractor = LinkExtractor()


def extract_links(html_content: str, base_url: str) -> List[str]:
    """Module-level shortcut using a shared lxml-backed extractor."""
    return _default_extractor.extract_links(html_content, base_url)
