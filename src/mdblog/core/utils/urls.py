"""URL helpers for images, banners, and canonical links"""

import posixpath
import re


ABSOLUTE_URL_RE = re.compile(r'^(?:[a-z][a-z0-9+.\-]*:|//)', re.IGNORECASE)


def is_absolute_url(href: str) -> bool:
    """True for hrefs carrying a URI scheme (http:, data:, ...) or protocol-relative //."""
    return bool(ABSOLUTE_URL_RE.match(href))


def resolve_asset(base_path: str, asset_dir: str, href: str) -> str:
    """Resolve an image/banner href against a document's directory and the site base path.

    Absolute URLs are returned untouched. Site-absolute paths (`/img.png`) ignore
    asset_dir. The result always has exactly one slash between base and path.
    """
    if is_absolute_url(href):
        return href
    href = href.replace('\\', '/')
    if href.startswith('/'):
        path = posixpath.normpath(href)
    else:
        path = posixpath.normpath(posixpath.join('/', asset_dir.replace('\\', '/'), href))
    return base_path.rstrip('/') + path


def post_path(template: str, slug: str) -> str:
    """Site path of a post, e.g. 'blog/{slug}' -> 'blog/my-post'."""
    return template.format(slug=slug)


def canonical_url(template: str, base_path: str, slug: str) -> str:
    """Conventional canonical URL for a post without an explicit canonical_url."""
    return template.format(base_path=base_path.rstrip('/'), slug=slug)
