"""Content collection kinds: blog posts, snippets, and bits

All kinds share the walk, frontmatter, and render pipeline. They differ in
content root, page path, heading anchors, and a few derived metadata fields.
"""

from dataclasses import dataclass
from typing import Optional

from mdblog.config import Settings


@dataclass(frozen=True)
class CollectionKind:
    name:            str
    content_setting: str                        # Settings field holding the content root
    path_template:   Optional[str] = None       # None: settings.post_path_template
    anchor_levels:   Optional[frozenset[int]] = None
    page_anchor:     bool = False               # heading links to the page itself, id is the slug
    lower_tags:      bool = False
    resolve_image:   bool = False               # `image` is resolved against base_path; `url` is derived

    def post_path_template(self, settings: Settings) -> str:
        return self.path_template or settings.post_path_template

    def canonical_url_template(self, settings: Settings) -> str:
        if self.path_template:
            return "{base_path}/" + self.path_template
        return settings.canonical_url_template

    def content_dir(self, settings: Settings) -> str:
        return getattr(settings, self.content_setting)


BLOG = CollectionKind(name='blog', content_setting='content_dir')
SNIPPETS = CollectionKind(
    name='snippets',
    content_setting='snippets_dir',
    path_template='snippets/{slug}',
    anchor_levels=frozenset({2}),
    page_anchor=True,
    resolve_image=True,
)
BITS = CollectionKind(
    name='bits',
    content_setting='bits_dir',
    path_template='bits/{slug}',
    lower_tags=True,
)

KINDS: dict[str, CollectionKind] = {k.name: k for k in (BLOG, SNIPPETS, BITS)}


def get_kind(kind) -> CollectionKind:
    """Look up a kind by name; CollectionKind instances pass through."""
    if isinstance(kind, CollectionKind):
        return kind
    try:
        return KINDS[kind]
    except KeyError:
        raise ValueError(f"unknown collection kind '{kind}', expected one of: {', '.join(KINDS)}") from None
