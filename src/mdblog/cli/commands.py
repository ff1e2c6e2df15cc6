"""CLI command implementations"""

import json
import logging
from pathlib import Path
from typing import Annotated, Optional

import typer

from mdblog.config import Settings, load_config
from mdblog.core.export import RSS_FILE, SITEMAP_FILE, run_export
from mdblog.core.kinds import KINDS, get_kind
from mdblog.core.models import PostCollection
from mdblog.core.pipeline import build_collection
from mdblog.core.query import DISPLAY_HUMAN, DISPLAY_ISO, PostQuery


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(overrides: dict = None) -> Settings:
    """Load config with standard CLI error handling."""
    try:
        return load_config(overrides=overrides)
    except ValueError as e:
        _fail(str(e))


def _build(settings: Settings, kind: str = "blog") -> PostCollection:
    """Build the collection; a missing content root is fatal."""
    try:
        return build_collection(settings, kind)
    except OSError as e:
        _fail("Cannot read content directory", e)


def _check_display(value: Optional[str]) -> Optional[str]:
    if value is not None and value not in (DISPLAY_ISO, DISPLAY_HUMAN):
        raise typer.BadParameter(f"expected '{DISPLAY_ISO}' or '{DISPLAY_HUMAN}'")
    return value


def _check_kind(value: str) -> str:
    if value not in KINDS:
        raise typer.BadParameter(f"expected one of: {', '.join(KINDS)}")
    return value


def _content_override(kind: str, content: Optional[str]) -> dict:
    """Map --content-dir onto the settings field of the selected kind."""
    return {get_kind(kind).content_setting: content}


def main_callback(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging")] = False,
    ):
    """Markdown blog content pipeline."""
    level = logging.DEBUG if verbose else getattr(logging, _settings().log_level)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def build_cmd(
    content: Annotated[Optional[str], typer.Argument(help="Content directory (defaults to the kind's content dir)")] = None,
    base: Annotated[Optional[str], typer.Option("--base-path", help="Site base path for images and banners")] = None,
    kind: Annotated[str, typer.Option("--kind", "-k", callback=_check_kind, help="blog, snippets or bits")] = "blog",
    strict: Annotated[bool, typer.Option("--strict", help="Exit 1 when any document fails")] = False,
    ):
    """Build a collection and report per-document failures."""
    settings = _settings(overrides={**_content_override(kind, content), "base_path": base})
    collection = _build(settings, kind)

    for post in collection.posts:
        for warning in post.warnings:
            typer.echo(f"  warning: {post.metadata.slug}: {warning}")
    for failure in collection.failures:
        typer.echo(f"  failed ({failure.stage}): {failure.path}: {failure.error}", err=True)
    typer.echo(f"Built {len(collection.posts)} post(s), {len(collection.failures)} failure(s)")

    if strict and collection.failures:
        raise typer.Exit(1)


def list_cmd(
    content: Annotated[Optional[str], typer.Option("--content-dir", help="Content directory")] = None,
    kind: Annotated[str, typer.Option("--kind", "-k", callback=_check_kind, help="blog, snippets or bits")] = "blog",
    published: Annotated[Optional[bool], typer.Option("--published/--unpublished", help="Filter by published state")] = None,
    first: Annotated[Optional[int], typer.Option("--first", help="Limit the number of posts")] = None,
    date: Annotated[Optional[str], typer.Option("--date", callback=_check_display, help="iso or human")] = None,
    as_json: Annotated[bool, typer.Option("--json", help="Print metadata as JSON")] = False,
    ):
    """List posts, newest first."""
    settings = _settings(overrides=_content_override(kind, content))
    query = PostQuery(_build(settings, kind), settings)
    posts = query.posts(published=published, first=first)

    if as_json:
        data = [query.serialize(p, display_as=date, include_html=False) for p in posts]
        typer.echo(json.dumps(data, indent=2, ensure_ascii=False))
        return
    if not posts:
        typer.echo("No posts found.")
        return
    for p in posts:
        meta = query.serialize_metadata(p.metadata, display_as=date)
        typer.echo(f"{meta['date']}  {p.metadata.slug}  {p.metadata.title}")


def show_cmd(
    slug: Annotated[str, typer.Argument(help="Post slug")],
    content: Annotated[Optional[str], typer.Option("--content-dir", help="Content directory")] = None,
    kind: Annotated[str, typer.Option("--kind", "-k", callback=_check_kind, help="blog, snippets or bits")] = "blog",
    html_entities: Annotated[bool, typer.Option("--html-entities", help="Entity-escape the HTML")] = False,
    date: Annotated[Optional[str], typer.Option("--date", callback=_check_display, help="iso or human")] = None,
    ):
    """Print one post (html + metadata) as JSON."""
    settings = _settings(overrides=_content_override(kind, content))
    query = PostQuery(_build(settings, kind), settings)
    post = query.post(slug)
    if post is None:
        typer.echo(f"No post found for slug: {slug}", err=True)
        raise typer.Exit(1)
    typer.echo(json.dumps(query.serialize(post, html_entities=html_entities, display_as=date), indent=2, ensure_ascii=False))


def export_cmd(
    content: Annotated[Optional[str], typer.Option("--content-dir", help="Content directory")] = None,
    out: Annotated[Optional[str], typer.Option("--out-dir", help="Output directory")] = None,
    kind: Annotated[str, typer.Option("--kind", "-k", callback=_check_kind, help="blog, snippets or bits")] = "blog",
    published: Annotated[Optional[bool], typer.Option("--published/--unpublished", help="Filter by published state")] = None,
    date: Annotated[Optional[str], typer.Option("--date", callback=_check_display, help="iso or human")] = None,
    ):
    """Write index.json, <slug>.json, rss.xml and sitemap.xml to the output dir."""
    settings = _settings(overrides={**_content_override(kind, content), "output_dir": out})
    query = PostQuery(_build(settings, kind), settings)
    output_dir = Path(settings.output_dir)

    try:
        results = run_export(query, output_dir, published=published, display_as=date)
    except OSError as e:
        _fail("Export failed", e)
    for slug, json_path in results:
        typer.echo(f"  {slug} -> {json_path}")
    typer.echo(f"  feed -> {output_dir / RSS_FILE}")
    typer.echo(f"  sitemap -> {output_dir / SITEMAP_FILE}")
    typer.echo(f"Exported {len(results)} post(s) to {output_dir}/")
