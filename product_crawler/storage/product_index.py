"""
Shared per-domain index of discovered product URLs.
"""

import threading
from collections import defaultdict
from typing import Dict, List, Optional


class ProductURLIndex:
    """
    Maps each domain to the product URLs its traversal discovered, in
    discovery order.

    This is the only state written by several traversals at once, so every
    read and write happens under one lock. Entries are only ever appended.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._urls: Dict[str, List[str]] = defaultdict(list)

    def record(self, domain: str, url: str):
        """Append url to domain's sequence, creating it on first use."""
        with self._lock:
            self._urls[domain].append(url)

    def snapshot(self) -> Dict[str, List[str]]:
        """Copy of the current contents."""
        with self._lock:
            return {domain: list(urls) for domain, urls in self._urls.items()}

    def count(self, domain: Optional[str] = None) -> int:
        """Number of recorded URLs for one domain, or for all of them."""
        with self._lock:
            if domain is not None:
                return len(self._urls.get(domain, ()))
            return sum(len(urls) for urls in self._urls.values())

    def domains(self) -> List[str]:
        with self._lock:
            return list(self._urls)

    def __len__(self) -> int:
        return self.count()
