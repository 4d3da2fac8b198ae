"""
Storage layer for the product crawler.
"""

from .product_index import ProductURLIndex
from .results import ResultsWriter, ResultsError, save_results

__all__ = ['ProductURLIndex', 'ResultsWriter', 'ResultsError', 'save_results']
