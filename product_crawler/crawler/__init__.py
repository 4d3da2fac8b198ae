"""
Product crawler core components.
"""

from .urls import resolve_url, is_same_host
from .classifier import is_product_url
from .fetcher import WebFetcher, FetchResult
from .parser import LinkExtractor, LinkExtractionError, extract_links
from .admission import AdmissionController
from .traversal import DomainTraversal, TraversalState, TraversalStats
from .scheduler import CrawlerScheduler, crawl_domains, run_crawl

__all__ = [
    'resolve_url', 'is_same_host', 'is_product_url',
    'WebFetcher', 'FetchResult',
    'LinkExtractor', 'LinkExtractionError', 'extract_links',
    'AdmissionController',
    'DomainTraversal', 'TraversalState', 'TraversalStats',
    'CrawlerScheduler', 'crawl_domains', 'run_crawl'
]
