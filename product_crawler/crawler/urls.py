"""
URL resolution and same-host checks used when scoping discovered links.
"""

from urllib.parse import urljoin, urlsplit


def _host(url: str) -> str:
    """Host component of a URL: hostname plus optional port, no userinfo."""
    netloc = urlsplit(url).netloc
    return netloc.rpartition('@')[2]


def resolve_url(base_url: str, href: str) -> str:
    """
    Resolve a possibly relative href against base_url.

    Returns an empty string when either input cannot be parsed; callers
    treat that as "no link".
    """
    try:
        urlsplit(base_url)
        urlsplit(href)
        return urljoin(base_url, href)
    except ValueError:
        return ""


def is_same_host(base_url: str, candidate: str) -> bool:
    """True iff both URLs parse and their host components are equal."""
    try:
        return _host(base_url) == _host(candidate)
    except ValueError:
        return False
