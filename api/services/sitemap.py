"""sitemap.xml generation from the blog index."""

from collections.abc import Iterable
from xml.sax.saxutils import escape

from api.models.blog import Post

SITEMAP_NAMESPACE = "http://www.sitemaps.org/schemas/sitemap/0.9"


def generate_sitemap(posts: Iterable[Post], site_url: str) -> str:
    """Build the full sitemap: the site root, then every post in index order."""
    base = site_url.rstrip("/")
    entries = [
        f"""  <url>
    <loc>{escape(base)}/</loc>
    <changefreq>daily</changefreq>
    <priority>1.0</priority>
  </url>"""
    ]
    for post in posts:
        entries.append(
            f"""  <url>
    <loc>{escape(base + post.url)}</loc>
    <lastmod>{post.date.isoformat()}</lastmod>
    <changefreq>monthly</changefreq>
    <priority>0.7</priority>
  </url>"""
        )

    body = "\n".join(entries)
    return f"""<?xml version="1.0" encoding="UTF-8"?>
<urlset xmlns="{SITEMAP_NAMESPACE}">
{body}
</urlset>
"""
