# === FILE: site_health/parser/html_parser.py ===
"""Snapshot extraction from rendered HTML.

The render engine hands over the final DOM serialised as HTML together with
the navigation metadata; :func:`extract_snapshot` turns it into a
:class:`~site_health.crawler.models.PageSnapshot`:

* title — stripped ``<title>`` text, ``None`` if the tag is absent.
* meta_description — stripped ``content`` of ``<meta name="description">``.
* h1 / h2 — stripped text of each heading in document order.
* image counters — all ``<img>`` and those with a missing or blank ``alt``.
* link counters — ``<a href>`` split into same-host and other-host targets.
* links — every resolved http(s) target, normalised and unique; the frontier
  decides which of them belong to the site.
* content_length — length of the visible body text.
"""
from __future__ import annotations

from collections.abc import Sequence
from typing import Optional
from urllib.parse import urlparse

from bs4 import BeautifulSoup
from bs4.element import Tag

from site_health.crawler.link_extractor import normalize_url, resolve_href
from site_health.crawler.models import PageSnapshot

__all__: Sequence[str] = ("extract_snapshot",)

_INVISIBLE_TAGS = ["script", "style", "noscript", "template"]


def _meta_description(soup: BeautifulSoup) -> Optional[str]:
    for tag in soup.find_all("meta"):
        if not isinstance(tag, Tag):
            continue
        name = tag.get("name")
        if isinstance(name, str) and name.strip().lower() == "description":
            content = tag.get("content")
            return content.strip() if isinstance(content, str) else None
    return None


def _headings(soup: BeautifulSoup, name: str) -> tuple[str, ...]:
    return tuple(h.get_text(" ", strip=True) for h in soup.find_all(name))


def extract_snapshot(
    html: str,
    *,
    url: str,
    status_code: int,
    load_time_ms: int,
) -> PageSnapshot:
    """Parse rendered *html* of *url* into a :class:`PageSnapshot`."""
    soup = BeautifulSoup(html, "lxml")

    title_tag = soup.find("title")
    title = title_tag.get_text(strip=True) if title_tag else None

    images = soup.find_all("img")
    without_alt = 0
    for img in images:
        alt = img.get("alt")
        if not isinstance(alt, str) or not alt.strip():
            without_alt += 1

    host = urlparse(url).netloc.lower()
    internal = external = 0
    links: list[str] = []
    for tag in soup.find_all("a", href=True):
        absolute = resolve_href(tag.get("href"), url)
        if absolute is None:
            continue
        links.append(normalize_url(absolute))
        if urlparse(absolute).netloc.lower() == host:
            internal += 1
        else:
            external += 1

    # Visible text only (skip <script>, <style>, etc.)
    for element in soup(_INVISIBLE_TAGS):
        element.decompose()
    body = soup.body or soup
    content_length = len(body.get_text(" ", strip=True))

    return PageSnapshot(
        url=url,
        title=title,
        meta_description=_meta_description(soup),
        h1=_headings(soup, "h1"),
        h2=_headings(soup, "h2"),
        image_count=len(images),
        images_without_alt=without_alt,
        internal_links=internal,
        external_links=external,
        content_length=content_length,
        load_time_ms=load_time_ms,
        status_code=status_code,
        links=tuple(dict.fromkeys(links)),
    )
