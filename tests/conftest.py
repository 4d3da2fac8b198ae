# Ensure the project root is importable when running without an install
import asyncio
import sys
from pathlib import Path

import pytest

root = Path(__file__).parent.parent
if str(root) not in sys.path:
    sys.path.insert(0, str(root))

from product_crawler.crawler.fetcher import FetchResult


class FakeFetcher:
    """In-memory stand-in for WebFetcher serving a fixed link graph."""

    def __init__(self, pages, failing=(), delay=0.0):
        self.pages = dict(pages)
        self.failing = set(failing)
        self.delay = delay
        self.calls = []
        self.in_flight = 0
        self.peak_in_flight = 0

    async def fetch(self, url):
        self.calls.append(url)
        self.in_flight += 1
        self.peak_in_flight = max(self.peak_in_flight, self.in_flight)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
            if url in self.failing:
                return FetchResult(url=url, status_code=0, error="Client error: connection refused")
            if url not in self.pages:
                return FetchResult(url=url, status_code=404, error=f"failed to fetch {url}: HTTP 404")
            return FetchResult(url=url, status_code=200, content=self.pages[url])
        finally:
            self.in_flight -= 1


def links_page(*hrefs):
    anchors = ''.join(f'<a href="{href}">link</a>' for href in hrefs)
    return f'<html><body>{anchors}</body></html>'


@pytest.fixture
def fake_fetcher():
    return FakeFetcher


@pytest.fixture
def page():
    return links_page
