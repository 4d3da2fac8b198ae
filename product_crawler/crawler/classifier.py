"""
Heuristic product page detection.
"""

import re
from urllib.parse import urlsplit


PRODUCT_PATH_MARKERS = ('/product/', '/item/', '/p/', '/dp/')

_PRODUCT_PATTERN = re.compile('|'.join(re.escape(marker) for marker in PRODUCT_PATH_MARKERS))


def is_product_url(url: str) -> bool:
    """
    Check whether a URL looks like a product page.

    Only the path is inspected, so markers in the query string or fragment
    do not count. Misses are expected; this is a heuristic.
    """
    try:
        path = urlsplit(url).path
    except ValueError:
        return False
    return _PRODUCT_PATTERN.search(path) is not None
