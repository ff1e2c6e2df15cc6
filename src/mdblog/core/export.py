"""Export pipeline: write the collection as JSON files, an RSS feed, and a sitemap"""

import json
import logging
from datetime import datetime, timezone
from email.utils import format_datetime
from pathlib import Path
from typing import Optional
from xml.sax.saxutils import escape

from mdblog.core.models import Post
from mdblog.core.query import PostQuery, resolve_html


logger = logging.getLogger(__name__)

INDEX_FILE = 'index.json'
RSS_FILE = 'rss.xml'
SITEMAP_FILE = 'sitemap.xml'

RSS_TEMPLATE = """<?xml version="1.0" encoding="UTF-8" ?>
<rss xmlns:content="http://purl.org/rss/1.0/modules/content/" xmlns:atom="http://www.w3.org/2005/Atom" version="2.0">
<channel>
<title>{title}</title>
<description>{description}</description>
<link>{link}</link>
<atom:link href="{feed_url}" rel="self" type="application/rss+xml" />
<lastBuildDate>{build_date}</lastBuildDate>
<language>en-us</language>
{items}</channel>
</rss>
"""

RSS_ITEM = """<item>
<title>{title}</title>
<description>{description}</description>
<link>{link}</link>
<guid>{link}</guid>
<pubDate>{pub_date}</pubDate>
<content:encoded>{content}</content:encoded>
</item>
"""

SITEMAP_TEMPLATE = """<?xml version="1.0" encoding="UTF-8"?>
<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">
{entries}</urlset>
"""

SITEMAP_ENTRY = """<url>
<loc>{loc}</loc>
<lastmod>{lastmod}</lastmod>
<changefreq>{changefreq}</changefreq>
<priority>{priority}</priority>
</url>
"""


def rfc822(dt: datetime) -> str:
    """RSS date, e.g. 'Mon, 01 Jan 2024 00:00:00 GMT'. Naive values are UTC."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return format_datetime(dt.astimezone(timezone.utc), usegmt=True)


def _collection_url(query: PostQuery) -> str:
    return f"{query.settings.base_path.rstrip('/')}/{query.collection.kind}"


def write_index(query: PostQuery, posts: list[Post], output_dir: Path, display_as: Optional[str] = None) -> Path:
    """Write index.json: metadata of every listed post, collection order."""
    output_dir.mkdir(parents=True, exist_ok=True)
    path = output_dir / INDEX_FILE
    data = [query.serialize(p, display_as=display_as, include_html=False) for p in posts]
    path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding='utf-8')
    return path


def write_post(query: PostQuery, post: Post, output_dir: Path, display_as: Optional[str] = None) -> Path:
    """Write <slug>.json with html + metadata."""
    output_dir.mkdir(parents=True, exist_ok=True)
    path = output_dir / f"{post.metadata.slug}.json"
    path.write_text(
        json.dumps(query.serialize(post, display_as=display_as), indent=2, ensure_ascii=False),
        encoding='utf-8',
    )
    return path


def render_rss(query: PostQuery) -> str:
    """RSS 2.0 feed of the published posts, newest first.

    Item links point at the site's own page even when a post declares an
    external canonical URL. The post HTML is carried entity-escaped in
    `content:encoded`.
    """
    settings = query.settings
    link = _collection_url(query)
    items = []
    for post in query.posts(published=True):
        meta = post.metadata
        items.append(RSS_ITEM.format(
            title=escape(meta.title),
            description=escape(meta.description or ''),
            link=escape(query.permalink(meta)),
            pub_date=rfc822(meta.date),
            content=resolve_html(post, html_entities=True),
        ))
    return RSS_TEMPLATE.format(
        title=escape(settings.site_title),
        description=escape(settings.site_description),
        link=escape(link),
        feed_url=escape(f"{link}/{RSS_FILE}"),
        build_date=rfc822(query.collection.built_at.astimezone(timezone.utc)),
        items=''.join(items),
    )


def render_sitemap(query: PostQuery, posts: list[Post]) -> str:
    """Sitemap with the collection page followed by one entry per post."""
    entries = [SITEMAP_ENTRY.format(
        loc=escape(_collection_url(query)),
        lastmod=query.collection.built_at.date().isoformat(),
        changefreq='daily',
        priority='0.8',
    )]
    for post in posts:
        entries.append(SITEMAP_ENTRY.format(
            loc=escape(query.permalink(post.metadata)),
            lastmod=post.metadata.date.date().isoformat(),
            changefreq='daily',
            priority='1.0',
        ))
    return SITEMAP_TEMPLATE.format(entries=''.join(entries))


def write_rss(query: PostQuery, output_dir: Path) -> Path:
    output_dir.mkdir(parents=True, exist_ok=True)
    path = output_dir / RSS_FILE
    path.write_text(render_rss(query), encoding='utf-8')
    logger.info("Wrote RSS feed to %s", path)
    return path


def write_sitemap(query: PostQuery, posts: list[Post], output_dir: Path) -> Path:
    output_dir.mkdir(parents=True, exist_ok=True)
    path = output_dir / SITEMAP_FILE
    path.write_text(render_sitemap(query, posts), encoding='utf-8')
    logger.info("Wrote sitemap to %s", path)
    return path


def run_export(
    query: PostQuery,
    output_dir: Path,
    published: Optional[bool] = None,
    display_as: Optional[str] = None,
    ) -> list[tuple[str, Path]]:
    """Write index, per-post files, rss.xml and sitemap.xml. Returns (slug, json_path) pairs.

    The feed always lists published posts only; the sitemap follows `published`
    like the JSON files do.
    """
    posts = query.posts(published=published)
    write_index(query, posts, output_dir, display_as)
    results = [(p.metadata.slug, write_post(query, p, output_dir, display_as)) for p in posts]
    write_rss(query, output_dir)
    write_sitemap(query, posts, output_dir)
    return results
