"""
Product URL Crawler

Discovers product pages on a set of domains by breadth-first link traversal.
"""

__version__ = "1.0.0"
__description__ = "A concurrent crawler that discovers product page URLs per domain"

from .crawler.scheduler import run_crawl, crawl_domains

__all__ = ['run_crawl', 'crawl_domains', '__version__']
