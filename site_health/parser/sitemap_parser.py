# File: site_health/parser/sitemap_parser.py
"""site_health.parser.sitemap_parser: парсинг sitemap.xml и sitemap index."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from lxml import etree


@dataclass(slots=True)
class SitemapDocument:
    """URL страниц (``<urlset>``) и вложенных sitemap (``<sitemapindex>``)."""

    pages: List[str] = field(default_factory=list)
    sitemaps: List[str] = field(default_factory=list)


def parse_sitemap(xml_content: str | bytes) -> SitemapDocument:
    """Разбирает XML sitemap и возвращает URL из тегов <loc>.

    Args:
        xml_content: содержимое sitemap.xml (str или bytes).

    Returns:
        SitemapDocument: для ``<sitemapindex>`` ссылки попадают в ``sitemaps``,
        иначе в ``pages``. Невалидный или пустой XML даёт пустой документ.

    Пример:
    ```python
    from site_health.parser.sitemap_parser import parse_sitemap

    doc = parse_sitemap(open('sitemap.xml', 'rb').read())
    print(doc.pages)
    ```
    """
    raw = xml_content.encode("utf-8") if isinstance(xml_content, str) else xml_content
    if not raw.strip():
        return SitemapDocument()
    parser = etree.XMLParser(ns_clean=True, recover=True, resolve_entities=False, no_network=True)
    try:
        root = etree.fromstring(raw, parser=parser)
    except etree.XMLSyntaxError:
        return SitemapDocument()
    if root is None:
        return SitemapDocument()
    locs = [loc.text.strip() for loc in root.iterfind(".//{*}loc") if loc.text and loc.text.strip()]
    if etree.QName(root).localname == "sitemapindex":
        return SitemapDocument(sitemaps=locs)
    return SitemapDocument(pages=locs)


__all__ = ["SitemapDocument", "parse_sitemap"]
