"""Query layer over a PostCollection snapshot: lookups and per-field formatting"""

from typing import Any, Optional

from mdblog.config import Settings
from mdblog.core.kinds import get_kind
from mdblog.core.models import Post, PostCollection, PostMetadata
from mdblog.core.utils.dates import human_date, iso_date
from mdblog.core.utils.urls import canonical_url


DISPLAY_HUMAN = 'human'
DISPLAY_ISO = 'iso'


def resolve_html(post: Post, html_entities: bool = False) -> str:
    """Rendered HTML, or the markup itself entity-escaped for embedding as text."""
    if not html_entities:
        return post.html
    return (
        post.html
        .replace('&', '&amp;')
        .replace('<', '&lt;')
        .replace('>', '&gt;')
        .replace('"', '&quot;')
    )


def resolve_date(metadata: PostMetadata, display_as: Optional[str] = None) -> str:
    """'human' -> 'January 1st 2024'; anything else -> ISO 8601."""
    if display_as == DISPLAY_HUMAN:
        return human_date(metadata.date)
    return iso_date(metadata.date)


def resolve_tags(metadata: PostMetadata) -> list[str]:
    return [t.lower() for t in metadata.tags]


class PostQuery:
    """Read operations over one immutable collection snapshot."""

    def __init__(self, collection: PostCollection, settings: Optional[Settings] = None):
        self.collection = collection
        self.settings = settings or Settings()

    def posts(self, published: Optional[bool] = None, first: Optional[int] = None) -> list[Post]:
        """All posts in collection order, optionally filtered by exact published state."""
        posts = list(self.collection.posts)
        if published is not None:
            posts = [p for p in posts if p.metadata.published is published]
        if first is not None:
            posts = posts[:max(first, 0)]
        return posts

    def post(self, slug: str) -> Optional[Post]:
        """The post whose slug matches exactly, or None."""
        return next((p for p in self.collection.posts if p.metadata.slug == slug), None)

    def tags(self) -> list[str]:
        """Distinct lower-cased tags, in order of first appearance."""
        return list(dict.fromkeys(t for p in self.collection.posts for t in resolve_tags(p.metadata)))

    def permalink(self, metadata: PostMetadata) -> str:
        """The post's page on this site, ignoring any declared canonical URL."""
        template = get_kind(self.collection.kind).canonical_url_template(self.settings)
        return canonical_url(template, self.settings.base_path, metadata.slug)

    def resolve_canonical_url(self, metadata: PostMetadata) -> str:
        return metadata.canonical_url or self.permalink(metadata)

    def serialize_metadata(self, metadata: PostMetadata, display_as: Optional[str] = None) -> dict[str, Any]:
        data = dict(metadata.model_extra or {})
        data.update({
            'title': metadata.title,
            'slug': metadata.slug,
            'description': metadata.description,
            'author': metadata.author,
            'date': resolve_date(metadata, display_as),
            'tags': resolve_tags(metadata),
            'banner': metadata.banner,
            'bannerCredit': metadata.banner_credit,
            'published': metadata.published,
            'canonical_url': self.resolve_canonical_url(metadata),
            'folder': metadata.folder,
            'toc': [entry.model_dump() for entry in metadata.toc],
            'outgoing_slugs': list(metadata.outgoing_slugs),
        })
        return data

    def serialize(
        self,
        post: Post,
        html_entities: bool = False,
        display_as: Optional[str] = None,
        include_html: bool = True,
        ) -> dict[str, Any]:
        """JSON-ready dict of a post with field options applied."""
        data: dict[str, Any] = {}
        if include_html:
            data['html'] = resolve_html(post, html_entities)
        data['metadata'] = self.serialize_metadata(post.metadata, display_as)
        return data
