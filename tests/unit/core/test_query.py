"""Unit tests for core/query.py"""

import pytest

from mdblog.core.pipeline import build_collection
from mdblog.core.query import PostQuery, resolve_date, resolve_html


@pytest.fixture(name="query")
def query_fixture(settings):
    return PostQuery(build_collection(settings), settings)


def test_posts_unfiltered_keeps_order(query):
    assert [p.metadata.slug for p in query.posts()] == ["second-post", "draft-post", "first-post"]


def test_posts_published_partition(query):
    published = query.posts(published=True)
    drafts = query.posts(published=False)
    assert all(p.metadata.published is True for p in published)
    assert all(p.metadata.published is False for p in drafts)
    assert len(published) + len(drafts) == len(query.posts(published=None))
    assert [p.metadata.slug for p in drafts] == ["draft-post"]


def test_posts_first(query):
    assert [p.metadata.slug for p in query.posts(first=1)] == ["second-post"]
    assert query.posts(first=0) == []


def test_post_by_slug(query):
    post = query.post("first-post")
    assert post is not None
    assert post.metadata.title == "First Post"


def test_post_missing_slug_is_none(query):
    assert query.post("does-not-exist") is None


def test_resolve_html_entities(query):
    post = query.post("first-post")
    assert resolve_html(post) == post.html
    escaped = resolve_html(post, html_entities=True)
    assert "<" not in escaped and ">" not in escaped and '"' not in escaped
    assert escaped.startswith("&lt;h1 id=&quot;hello-world&quot;&gt;")


def test_resolve_date(query):
    meta = query.post("first-post").metadata
    assert resolve_date(meta) == "2024-01-01T00:00:00"
    assert resolve_date(meta, "iso") == "2024-01-01T00:00:00"
    assert resolve_date(meta, "human") == "January 1st 2024"


def test_canonical_url_default_and_explicit(query):
    assert query.resolve_canonical_url(query.post("first-post").metadata) == "https://example.com/blog/first-post"
    assert query.resolve_canonical_url(query.post("second-post").metadata) == "https://dev.to/second-post"


def test_serialize(query):
    data = query.serialize(query.post("first-post"), display_as="human")
    meta = data["metadata"]
    assert meta["date"] == "January 1st 2024"
    assert meta["tags"] == ["angular", "testing"]
    assert meta["bannerCredit"] == "Photo by Someone"
    assert meta["canonical_url"] == "https://example.com/blog/first-post"
    assert meta["toc"] == [{"description": "Hello World", "level": 1, "slug": "hello-world"}]
    assert "html" in data


def test_serialize_without_html(query):
    assert "html" not in query.serialize(query.post("first-post"), include_html=False)
