#!/usr/bin/env python3
"""
Main entry point for the product crawler.
"""

import asyncio
import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from product_crawler import __version__
from product_crawler.crawler.fetcher import WebFetcher
from product_crawler.crawler.scheduler import CrawlerScheduler
from product_crawler.storage.results import ResultsWriter, ResultsError
from product_crawler.utils.config import load_config, Config, validate_crawler_config
from product_crawler.utils.logger import setup_logging
from product_crawler.utils.monitoring import initialize_monitoring


class CrawlerApp:
    """Main application class for the product crawler."""

    def __init__(self):
        self.scheduler: Optional[CrawlerScheduler] = None
        self.logger = logging.getLogger(__name__)

    def setup_logging(self, config: Config):
        """Setup logging configuration."""
        setup_logging(
            {
                'level': config.logging.level,
                'file': config.logging.file,
                'format': config.logging.format,
            },
            enable_json=config.logging.json
        )

    async def run(self, config: Config, dry_run: bool = False) -> int:
        """Run the crawler and save its results."""
        self.logger.info("=== PRODUCT CRAWLER STARTING ===")
        self.logger.info(f"Domains: {config.crawler.domains}")
        self.logger.info(f"Concurrency: {config.crawler.concurrency}")
        self.logger.info(f"Politeness delay: {config.crawler.rate_limit}s")
        self.logger.info(f"Request timeout: {config.crawler.request_timeout}s")

        if dry_run:
            self.logger.info("DRY RUN MODE: No actual crawling will be performed")
            await self._dry_run(config)
            return 0

        monitor = initialize_monitoring(
            enable_prometheus=config.monitoring.metrics_enabled,
            prometheus_port=config.monitoring.prometheus_port
        )

        try:
            self.scheduler = CrawlerScheduler(config.crawler, monitor=monitor)
            results = await self.scheduler.crawl()
            ResultsWriter().save(results, config.crawler.output_file)

        except ResultsError as e:
            self.logger.error(f"Could not save results: {e}")
            return 1

        except Exception as e:
            self.logger.error(f"Fatal error: {e}", exc_info=True)
            return 1

        finally:
            self.logger.info("=== PRODUCT CRAWLER FINISHED ===")

        self._print_summary(results, config.crawler.output_file)
        return 0

    async def _dry_run(self, config: Config):
        """Test-fetch each domain root without crawling."""
        async with WebFetcher(
            user_agent=config.crawler.user_agent,
            request_timeout=config.crawler.request_timeout
        ) as fetcher:
            for domain in config.crawler.domains:
                result = await fetcher.fetch(f"https://{domain}")
                if result.error:
                    self.logger.warning(f"✗ {domain}: {result.error}")
                else:
                    self.logger.info(f"✓ {domain}: HTTP {result.status_code}")

        self.logger.info("Dry run completed")

    def _print_summary(self, results, output_file: str):
        total_products = sum(len(urls) for urls in results.values())

        print("\n=== Crawl Summary ===")
        print(f"Results file: {output_file}")
        print(f"Total product URLs found: {total_products}")
        for domain, urls in results.items():
            print(f"- {domain}: {len(urls)} product URLs")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Product URL Crawler",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py                                   # Crawl with built-in defaults
  python main.py --config config.yaml              # Crawl with a config file
  python main.py --domains shop.example,x.example  # Override the domain list
  python main.py --serve                           # Start the HTTP API
  python main.py --dry-run                         # Test-fetch each domain root only
        """
    )

    parser.add_argument(
        '--config',
        help='Path to a YAML configuration file (defaults are used when omitted)'
    )

    parser.add_argument(
        '--domains',
        help='Comma-separated hostnames to crawl'
    )

    parser.add_argument(
        '--rate-limit',
        type=float,
        help='Politeness delay in seconds after each page'
    )

    parser.add_argument(
        '--concurrency',
        type=int,
        help='Maximum number of fetches in flight across all domains'
    )

    parser.add_argument(
        '--output',
        help='Path of the JSON results file'
    )

    parser.add_argument(
        '--serve',
        action='store_true',
        help='Run the HTTP API instead of a one-off crawl'
    )

    parser.add_argument(
        '--dry-run',
        action='store_true',
        help='Test configuration without actually crawling'
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'Product Crawler {__version__}'
    )

    return parser


def apply_overrides(config: Config, args: argparse.Namespace) -> Config:
    """Apply command line overrides on top of the loaded configuration."""
    if args.domains:
        config.crawler.domains = [d.strip() for d in args.domains.split(',') if d.strip()]
    if args.rate_limit is not None:
        config.crawler.rate_limit = args.rate_limit
    if args.concurrency is not None:
        config.crawler.concurrency = args.concurrency
    if args.output:
        config.crawler.output_file = args.output

    validate_crawler_config(config.crawler)
    return config


def main(argv=None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    if args.config and not Path(args.config).exists():
        print(f"Error: Configuration file '{args.config}' not found.")
        return 1

    try:
        config = apply_overrides(load_config(args.config), args)
    except ValueError as e:
        print(f"Invalid configuration: {e}")
        return 1

    app = CrawlerApp()
    app.setup_logging(config)

    if args.serve:
        from product_crawler.server import serve

        monitor = initialize_monitoring(
            enable_prometheus=config.monitoring.metrics_enabled,
            prometheus_port=config.monitoring.prometheus_port
        )
        serve(config, monitor=monitor)
        return 0

    try:
        return asyncio.run(app.run(config, dry_run=args.dry_run))
    except KeyboardInterrupt:
        print("\nInterrupted by user")
        return 1


if __name__ == '__main__':
    sys.exit(main())
