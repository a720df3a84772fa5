# site_health/crawler/link_extractor.py
"""
Link extraction and URL normalization utilities for SiteHealth.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Iterable, List, Optional
from urllib.parse import urljoin, urlparse, urlunparse

import tldextract

# Bundled public-suffix snapshot only: no network lookups, no on-disk cache.
_extract = tldextract.TLDExtract(suffix_list_urls=(), cache_dir=None)

_SKIPPED_SCHEMES = ("mailto:", "javascript:", "tel:", "data:")


def normalize_url(url: str) -> str:
    """
    Normalize URL by lowercasing scheme and netloc, dropping the fragment
    and a trailing slash in the path. The root path is kept as ``/``.
    """
    parsed = urlparse(url.strip())
    scheme = parsed.scheme.lower()
    netloc = parsed.netloc.lower()
    path = parsed.path.rstrip("/") or "/"
    return urlunparse((scheme, netloc, path, parsed.params, parsed.query, ""))


def is_http_url(url: str) -> bool:
    parsed = urlparse(url)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


@lru_cache(maxsize=1024)
def registrable_domain(url_or_host: str) -> str:
    """Return the registrable domain (``shop.example.co.uk`` → ``example.co.uk``).

    Hosts without a public suffix (``localhost``, IP addresses) are returned as is.
    """
    host = urlparse(url_or_host).hostname if "://" in url_or_host else url_or_host
    host = (host or "").lower().rstrip(".")
    ext = _extract(host)
    if ext.suffix and ext.domain:
        return f"{ext.domain}.{ext.suffix}"
    return ext.domain or host


def same_registrable_domain(url: str, root_url: str) -> bool:
    return registrable_domain(url) == registrable_domain(root_url)


def resolve_href(href: Optional[str], base_url: str) -> Optional[str]:
    """
    Resolve an ``href`` attribute against *base_url*.

    Ignores mailto:, javascript:, tel:, data: and fragment-only links.
    Returns None for anything that is not an absolute HTTP(S) URL.
    """
    if not isinstance(href, str):
        return None
    raw = href.strip()
    if not raw or raw.startswith("#") or raw.lower().startswith(_SKIPPED_SCHEMES):
        return None
    absolute = urljoin(base_url, raw)
    return absolute if is_http_url(absolute) else None


def unique_normalized(urls: Iterable[str]) -> List[str]:
    """Normalize URLs and drop duplicates, preserving order."""
    return list(dict.fromkeys(normalize_url(u) for u in urls))


__all__ = [
    "normalize_url",
    "is_http_url",
    "registrable_domain",
    "same_registrable_domain",
    "resolve_href",
    "unique_normalized",
]
