"""
Crawl orchestration: one concurrent traversal per configured domain.
"""

import asyncio
import logging
import time
from typing import Dict, List, Optional

from .admission import AdmissionController
from .fetcher import WebFetcher
from .parser import LinkExtractor
from .traversal import DomainTraversal, Fetcher, TraversalStats
from ..storage.product_index import ProductURLIndex
from ..utils.config import CrawlerConfig, validate_crawler_config
from ..utils.monitoring import CrawlerMonitor


class CrawlerScheduler:
    """
    Runs one DomainTraversal per domain concurrently and waits for all of
    them to finish.

    All traversals share a single AdmissionController and a single
    ProductURLIndex. A traversal that fails does not affect the others;
    its domain simply ends up with fewer (or no) product URLs.
    """

    def __init__(self, config: CrawlerConfig, fetcher: Optional[Fetcher] = None,
                 link_extractor: Optional[LinkExtractor] = None,
                 monitor: Optional[CrawlerMonitor] = None):
        validate_crawler_config(config)
        self.config = config
        self.logger = logging.getLogger(__name__)

        self.fetcher = fetcher
        self.link_extractor = link_extractor or LinkExtractor()
        self.monitor = monitor

        self.index = ProductURLIndex()
        self.admission: Optional[AdmissionController] = None
        self.traversals: Dict[str, DomainTraversal] = {}
        self.is_running = False

    async def crawl(self) -> Dict[str, List[str]]:
        """Crawl every configured domain and return the product URL index."""
        if self.is_running:
            raise RuntimeError("Crawler is already running")

        self.is_running = True
        start_time = time.time()

        owns_fetcher = self.fetcher is None
        if owns_fetcher:
            self.fetcher = WebFetcher(
                user_agent=self.config.user_agent,
                request_timeout=self.config.request_timeout,
                max_connections=self.config.concurrency * 2
            )
            await self.fetcher.start()

        self.admission = AdmissionController(
            self.config.concurrency,
            on_change=self.monitor.update_tokens_in_use if self.monitor else None
        )

        try:
            self.traversals = {
                domain: DomainTraversal(
                    domain,
                    fetcher=self.fetcher,
                    admission=self.admission,
                    index=self.index,
                    rate_limit=self.config.rate_limit,
                    link_extractor=self.link_extractor,
                    monitor=self.monitor
                )
                for domain in self.config.domains
            }

            self.logger.info(
                f"Started crawling {len(self.traversals)} domains "
                f"with concurrency {self.config.concurrency}"
            )

            domains = list(self.traversals)
            results = await asyncio.gather(
                *(traversal.run() for traversal in self.traversals.values()),
                return_exceptions=True
            )

            for domain, result in zip(domains, results):
                if isinstance(result, BaseException):
                    self.logger.error(f"Traversal for {domain} failed: {result!r}")

        finally:
            self.is_running = False
            if owns_fetcher:
                await self.fetcher.close()
                self.fetcher = None

        self._log_final_stats(time.time() - start_time)
        return self.index.snapshot()

    def get_stats(self) -> Dict[str, TraversalStats]:
        """Per-domain traversal statistics."""
        return {domain: traversal.stats for domain, traversal in self.traversals.items()}

    def _log_final_stats(self, elapsed: float):
        """Log final crawl statistics."""
        self.logger.info("=== CRAWL COMPLETED ===")
        self.logger.info(f"Domains crawled: {len(self.traversals)}")
        self.logger.info(f"Product URLs found: {self.index.count()}")
        self.logger.info(f"Total time: {elapsed:.2f} seconds")
        if self.admission:
            self.logger.info(
                f"Peak admission tokens in use: {self.admission.peak_in_use}/{self.admission.capacity}"
            )
        for domain, stats in self.get_stats().items():
            self.logger.info(
                f"{domain}: fetched={stats.pages_fetched}, products={stats.product_urls}, "
                f"errors={stats.fetch_errors + stats.parse_errors}"
            )


async def crawl_domains(domains: List[str], rate_limit: float, concurrency: int,
                        request_timeout: float = 10.0,
                        fetcher: Optional[Fetcher] = None,
                        monitor: Optional[CrawlerMonitor] = None) -> Dict[str, List[str]]:
    """Crawl domains from inside a running event loop."""
    config = CrawlerConfig(
        domains=list(domains),
        rate_limit=rate_limit,
        concurrency=concurrency,
        request_timeout=request_timeout
    )
    scheduler = CrawlerScheduler(config, fetcher=fetcher, monitor=monitor)
    return await scheduler.crawl()


def run_crawl(domains: List[str], rate_limit: float, concurrency: int,
              request_timeout: float = 10.0,
              fetcher: Optional[Fetcher] = None,
              monitor: Optional[CrawlerMonitor] = None) -> Dict[str, List[str]]:
    """
    Crawl domains and block until every traversal has finished.

    Args:
        domains: Bare hostnames; each is crawled from https://{domain}
        rate_limit: Politeness delay in seconds held after every page
        concurrency: Run-wide cap on fetches in flight
        request_timeout: Per-fetch timeout in seconds

    Returns:
        Mapping of domain to the product URLs discovered for it
    """
    return asyncio.run(crawl_domains(
        domains, rate_limit, concurrency,
        request_timeout=request_timeout,
        fetcher=fetcher,
        monitor=monitor
    ))
