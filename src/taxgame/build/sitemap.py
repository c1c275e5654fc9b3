"""Sitemap document for the generated pages."""

from __future__ import annotations

from collections.abc import Iterable
from xml.sax.saxutils import escape

SITEMAP_NAMESPACE = "http://www.sitemaps.org/schemas/sitemap/0.9"


def render_sitemap(urls: Iterable[str], *, changefreq: str = "weekly") -> str:
    """Return a sitemap listing ``urls`` in the given order."""

    lines = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        f'<urlset xmlns="{SITEMAP_NAMESPACE}">',
    ]
    for url in urls:
        lines.append(
            f"    <url><loc>{escape(url)}</loc><changefreq>{escape(changefreq)}</changefreq></url>"
        )
    lines.append("</urlset>")
    return "\n".join(lines) + "\n"


__all__ = ["SITEMAP_NAMESPACE", "render_sitemap"]
