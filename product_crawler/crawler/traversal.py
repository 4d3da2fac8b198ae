"""
Breadth-first traversal of a single domain.
"""

import asyncio
import time
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Deque, Optional, Protocol, Set

from .admission import AdmissionController
from .classifier import is_product_url
from .fetcher import FetchResult
from .parser import LinkExtractor, LinkExtractionError
from ..storage.product_index import ProductURLIndex
from ..utils.logger import get_crawler_logger
from ..utils.monitoring import CrawlerMonitor


class Fetcher(Protocol):
    async def fetch(self, url: str) -> FetchResult: ...


class TraversalState(Enum):
    """Lifecycle of a domain traversal."""
    IDLE = 'idle'
    RUNNING = 'running'
    DRAINING = 'draining'
    DONE = 'done'


@dataclass
class TraversalStats:
    """Statistics for one domain traversal."""
    start_time: float = field(default_factory=time.time)
    end_time: Optional[float] = None
    pages_fetched: int = 0
    fetch_errors: int = 0
    parse_errors: int = 0
    product_urls: int = 0
    links_enqueued: int = 0

    @property
    def elapsed_time(self) -> float:
        end = self.end_time if self.end_time is not None else time.time()
        return end - self.start_time


class DomainTraversal:
    """
    Crawls one domain breadth-first from https://{domain}.

    The frontier and visited set are private to this traversal; pages are
    fetched one at a time. Every fetch holds a token from the shared
    AdmissionController until the page has been processed and the
    politeness delay has passed. Product URLs go to the shared index and
    are never crawled further.
    """

    def __init__(self, domain: str, fetcher: Fetcher, admission: AdmissionController,
                 index: ProductURLIndex, rate_limit: float = 0.0,
                 link_extractor: Optional[LinkExtractor] = None,
                 monitor: Optional[CrawlerMonitor] = None):
        self.domain = domain
        self.fetcher = fetcher
        self.admission = admission
        self.index = index
        self.rate_limit = rate_limit
        self.link_extractor = link_extractor or LinkExtractor()
        self.monitor = monitor

        self.root_url = f"https://{domain}"
        self.state = TraversalState.IDLE
        self.stats = TraversalStats()
        self.frontier: Deque[str] = deque()
        self.visited: Set[str] = set()

        self.logger = get_crawler_logger(__name__, domain=domain)

    async def run(self) -> TraversalStats:
        """Crawl until the frontier is exhausted."""
        if self.state is not TraversalState.IDLE:
            raise RuntimeError(f"Traversal for {self.domain} already {self.state.value}")

        self.state = TraversalState.RUNNING
        self.stats = TraversalStats()
        self.frontier.append(self.root_url)
        if self.monitor:
            self.monitor.traversal_started()

        try:
            while self.frontier:
                url = self.frontier.popleft()
                if url in self.visited:
                    continue
                self.visited.add(url)

                await self.admission.acquire()
                try:
                    await self._process_url(url)
                finally:
                    self.admission.release()
        finally:
            self.state = TraversalState.DRAINING
            self._finish()

        return self.stats

    async def _process_url(self, url: str):
        """Fetch one page, record its products and queue its other links."""
        self.logger.info(f"Crawling: {url}")

        try:
            result = await self.fetcher.fetch(url)
        except Exception as e:
            self.logger.error(f"Unexpected error fetching {url}: {e}")
            self._record_fetch_error()
            return

        if result.error or result.content is None:
            self.logger.warning(f"Error fetching {url}: {result.error}")
            self._record_fetch_error()
            return

        self.stats.pages_fetched += 1
        if self.monitor:
            self.monitor.record_page_fetched(self.domain, result.fetch_time)

        # Links are scoped and resolved against the domain root
        try:
            links = self.link_extractor.extract_links(result.content, self.root_url)
        except LinkExtractionError as e:
            self.logger.warning(f"Error parsing links on {url}: {e}")
            self.stats.parse_errors += 1
            if self.monitor:
                self.monitor.record_parse_error(self.domain)
            return

        for link in links:
            if is_product_url(link):
                self.index.record(self.domain, link)
                self.stats.product_urls += 1
                if self.monitor:
                    self.monitor.record_product_url(self.domain)
                self.logger.debug(f"Product URL: {link}")
            elif link not in self.visited:
                self.frontier.append(link)
                self.stats.links_enqueued += 1

        await asyncio.sleep(self.rate_limit)

    def _record_fetch_error(self):
        self.stats.fetch_errors += 1
        if self.monitor:
            self.monitor.record_fetch_error(self.domain)

    def _finish(self):
        """Publish final statistics and mark the traversal done."""
        self.stats.end_time = time.time()
        if self.monitor:
            self.monitor.traversal_finished()

        self.logger.info(
            f"Traversal finished: "
            f"Fetched={self.stats.pages_fetched}, "
            f"Products={self.stats.product_urls}, "
            f"FetchErrors={self.stats.fetch_errors}, "
            f"ParseErrors={self.stats.parse_errors}, "
            f"Visited={len(self.visited)}, "
            f"Time={self.stats.elapsed_time:.2f}s"
        )
        self.state = TraversalState.DONE
