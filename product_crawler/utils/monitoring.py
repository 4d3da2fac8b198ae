"""
Monitoring and metrics collection for the product crawler.
"""

import time
import logging
from typing import Dict, Optional, Any

from prometheus_client import Counter, Histogram, Gauge, CollectorRegistry, generate_latest
from prometheus_client import start_http_server


class MetricsCollector:
    """Collects crawler metrics into a private Prometheus registry."""

    def __init__(self, prometheus_port: int = 8000):
        self.logger = logging.getLogger(__name__)
        self.prometheus_port = prometheus_port
        self.registry = CollectorRegistry()

        self.pages_fetched = Counter(
            'crawler_pages_fetched_total',
            'Pages fetched successfully',
            ['domain'],
            registry=self.registry
        )
        self.fetch_errors = Counter(
            'crawler_fetch_errors_total',
            'Fetches that failed or returned a non-success status',
            ['domain'],
            registry=self.registry
        )
        self.parse_errors = Counter(
            'crawler_parse_errors_total',
            'Pages whose links could not be extracted',
            ['domain'],
            registry=self.registry
        )
        self.product_urls = Counter(
            'crawler_product_urls_total',
            'Product URLs recorded',
            ['domain'],
            registry=self.registry
        )
        self.fetch_duration = Histogram(
            'crawler_fetch_duration_seconds',
            'Time spent fetching a page',
            registry=self.registry
        )
        self.tokens_in_use = Gauge(
            'crawler_admission_tokens_in_use',
            'Admission tokens currently held',
            registry=self.registry
        )
        self.active_traversals = Gauge(
            'crawler_active_traversals',
            'Domain traversals currently running',
            registry=self.registry
        )

        # In-memory totals for the summary
        self.totals: Dict[str, int] = {
            'pages_fetched': 0,
            'fetch_errors': 0,
            'parse_errors': 0,
            'product_urls': 0,
        }

    def start_server(self):
        """Start the Prometheus exposition HTTP server."""
        try:
            start_http_server(self.prometheus_port, registry=self.registry)
            self.logger.info(f"Prometheus metrics server started on port {self.prometheus_port}")
        except OSError as e:
            self.logger.error(f"Failed to start Prometheus server: {e}")

    def export_text(self) -> bytes:
        """Render the registry in the Prometheus text format."""
        return generate_latest(self.registry)


class CrawlerMonitor:
    """High-level monitoring interface for the crawler."""

    def __init__(self, metrics_collector: Optional[MetricsCollector] = None):
        self.metrics = metrics_collector or MetricsCollector()
        self.logger = logging.getLogger(__name__)
        self.start_time = time.time()

    def record_page_fetched(self, domain: str, fetch_time: float):
        self.metrics.pages_fetched.labels(domain=domain).inc()
        self.metrics.fetch_duration.observe(fetch_time)
        self.metrics.totals['pages_fetched'] += 1

    def record_fetch_error(self, domain: str):
        self.metrics.fetch_errors.labels(domain=domain).inc()
        self.metrics.totals['fetch_errors'] += 1

    def record_parse_error(self, domain: str):
        self.metrics.parse_errors.labels(domain=domain).inc()
        self.metrics.totals['parse_errors'] += 1

    def record_product_url(self, domain: str):
        self.metrics.product_urls.labels(domain=domain).inc()
        self.metrics.totals['product_urls'] += 1

    def update_tokens_in_use(self, count: int):
        self.metrics.tokens_in_use.set(count)

    def traversal_started(self):
        self.metrics.active_traversals.inc()

    def traversal_finished(self):
        self.metrics.active_traversals.dec()

    def get_summary(self) -> Dict[str, Any]:
        """Get a summary of all metrics."""
        runtime = time.time() - self.start_time
        totals = dict(self.metrics.totals)

        return {
            'runtime_seconds': runtime,
            'metrics': totals,
            'rates': {
                'pages_per_second': totals['pages_fetched'] / runtime if runtime > 0 else 0,
            }
        }


def initialize_monitoring(enable_prometheus: bool = False, prometheus_port: int = 8000) -> CrawlerMonitor:
    """Create a monitor, starting the exposition server when enabled."""
    monitor = CrawlerMonitor(MetricsCollector(prometheus_port))
    if enable_prometheus:
        monitor.metrics.start_server()
    return monitor
