"""Collection assembly: walk, split, render, and sort posts

The build is a fold over the documents: each one either becomes a Post or a
BuildFailure, so a single malformed file never aborts the collection. Only a
missing content root is fatal.
"""

import logging
from pathlib import Path

from markdown_it import MarkdownIt
from pydantic import ValidationError

from mdblog.config import Settings
from mdblog.core.frontmatter import parse_metadata_block, read_document
from mdblog.core.kinds import BLOG, CollectionKind, get_kind
from mdblog.core.models import BuildFailure, Document, Post, PostCollection, PostMetadata
from mdblog.core.render.markdown import RenderContext, make_parser, render_markdown
from mdblog.core.utils.slug import slugify
from mdblog.core.utils.urls import post_path, resolve_asset
from mdblog.core.walk import discover_files
from mdblog.errors import FrontmatterError, MetadataError


logger = logging.getLogger(__name__)


def _default_slug(document: Document) -> str:
    """Slug for documents without one: folder name for index.md, else the file stem."""
    stem = document.path.stem
    return slugify(document.folder if stem == 'index' else stem)


def load_documents(paths: list[Path], root: Path) -> tuple[list[Document], list[BuildFailure]]:
    """Read and split each file. Returns (documents, failures)."""
    documents: list[Document] = []
    failures: list[BuildFailure] = []
    for p in paths:
        try:
            documents.append(read_document(p, root))
        except FrontmatterError as e:
            logger.warning("Skipping %s: %s", p, e)
            failures.append(BuildFailure(path=p, error=str(e), stage='frontmatter'))
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Skipping unreadable %s: %s", p, e)
            failures.append(BuildFailure(path=p, error=str(e), stage='read'))
    return documents, failures


def build_metadata(document: Document, settings: Settings, kind: CollectionKind = BLOG) -> dict:
    """Parse the raw block and compute the derived fields that do not depend on rendering."""
    meta: dict = dict(parse_metadata_block(document.raw_metadata_block))
    meta['slug'] = meta.get('slug') or _default_slug(document)
    meta['folder'] = document.folder
    if meta.get('banner'):
        meta['banner'] = resolve_asset(settings.base_path, document.asset_dir, meta['banner'])
    if kind.lower_tags and meta.get('tags'):
        meta['tags'] = meta['tags'].lower()
    if kind.resolve_image:
        if meta.get('image'):
            meta['image'] = resolve_asset(settings.base_path, '', meta['image'])
        meta['url'] = '/' + post_path(kind.post_path_template(settings), meta['slug'])
    return meta


def build_post(document: Document, settings: Settings, md: MarkdownIt, kind: CollectionKind = BLOG) -> Post:
    """Render one document into a Post. Raises MetadataError or rendering exceptions."""
    meta = build_metadata(document, settings, kind)
    context = RenderContext(
        slug=meta['slug'],
        post_path=post_path(kind.post_path_template(settings), meta['slug']),
        asset_dir=document.asset_dir,
        base_path=settings.base_path,
        anchor_levels=kind.anchor_levels,
        page_anchor=kind.page_anchor,
    )
    rendered = render_markdown(md, document.raw_body, context)
    meta['toc'] = rendered.toc
    meta['outgoing_slugs'] = rendered.outgoing_slugs

    try:
        metadata = PostMetadata.model_validate(meta)
    except ValidationError as e:
        raise MetadataError(f"{document.path}: invalid metadata: {e}") from e

    return Post(
        html=rendered.html,
        metadata=metadata,
        source_path=document.path,
        warnings=rendered.warnings,
    )


def assemble(
    documents: list[Document],
    settings: Settings,
    kind: CollectionKind = BLOG,
    ) -> tuple[list[Post], list[BuildFailure]]:
    """Build posts from documents, sorted newest first. Returns (posts, failures)."""
    md = make_parser(settings.parser_config)
    posts: list[Post] = []
    failures: list[BuildFailure] = []

    for doc in documents:
        try:
            posts.append(build_post(doc, settings, md, kind))
        except MetadataError as e:
            logger.warning("Skipping %s: %s", doc.path, e)
            failures.append(BuildFailure(path=doc.path, error=str(e), stage='metadata'))
        except Exception as e:
            logger.warning("Failed to render %s: %s", doc.path, e, exc_info=True)
            failures.append(BuildFailure(path=doc.path, error=f"{type(e).__name__}: {e}", stage='render'))

    # sorted() is stable, so equal dates keep file enumeration order
    posts = sorted(posts, key=lambda p: p.metadata.date, reverse=True)
    return posts, failures


def build_collection(settings: Settings, kind=BLOG) -> PostCollection:
    """Walk the content root of `kind` and return a fresh immutable PostCollection."""
    kind = get_kind(kind)
    root = Path(kind.content_dir(settings)).resolve()
    paths = discover_files(root, settings.extension, settings.ignore_dirs)
    documents, read_failures = load_documents(paths, root)
    posts, post_failures = assemble(documents, settings, kind)

    failures = read_failures + post_failures
    logger.info("Built %d %s document(s) from %s, %d failure(s)", len(posts), kind.name, root, len(failures))
    return PostCollection(posts=tuple(posts), failures=tuple(failures), kind=kind.name)
