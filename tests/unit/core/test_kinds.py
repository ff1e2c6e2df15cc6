"""Unit tests for core/kinds.py and the snippets/bits collections"""

import pytest

from mdblog.config import Settings
from mdblog.core.kinds import BITS, BLOG, SNIPPETS, get_kind
from mdblog.core.pipeline import build_collection
from mdblog.core.query import PostQuery
from mdblog.core.store import PostStore


SNIPPET = """\
---
title: Typed Forms
slug: typed-forms
date: 2024-05-01
tags: Angular, Forms
image: snippets/typed-forms/snippet.png
---

# Not anchored

## Typed Forms {#custom}

```ts
const form = new FormGroup({});
```

### Also not anchored
"""

BIT = """\
---
title: A Small Bit
slug: small-bit
date: 2024-06-01
tags: TypeScript, NgRx
---

## Heading
"""


def _write(root, rel, text):
    path = root / rel
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


@pytest.fixture(name="kind_settings")
def kind_settings_fixture(tmp_path):
    _write(tmp_path / "snippets", "typed-forms/index.md", SNIPPET)
    _write(tmp_path / "bits", "small-bit/index.md", BIT)
    return Settings(
        content_dir=str(tmp_path / "blog"),
        snippets_dir=str(tmp_path / "snippets"),
        bits_dir=str(tmp_path / "bits"),
        base_path="https://example.com",
    )


def test_get_kind():
    assert get_kind("snippets") is SNIPPETS
    assert get_kind(BITS) is BITS
    with pytest.raises(ValueError, match="unknown collection kind"):
        get_kind("pages")


def test_blog_templates_come_from_settings():
    settings = Settings(post_path_template="posts/{slug}", canonical_url_template="{base_path}/posts/{slug}")
    assert BLOG.post_path_template(settings) == "posts/{slug}"
    assert BLOG.canonical_url_template(settings) == "{base_path}/posts/{slug}"
    assert SNIPPETS.canonical_url_template(settings) == "{base_path}/snippets/{slug}"


def test_snippets_anchor_only_level_two_headings(kind_settings):
    collection = build_collection(kind_settings, "snippets")
    assert collection.kind == "snippets"
    html = collection.posts[0].html

    assert "<h1>Not anchored</h1>" in html
    assert "<h3>Also not anchored</h3>" in html
    assert '<h2 id="typed-forms"><a href="snippets/typed-forms" class="anchor" aria-hidden="true">Typed Forms</a></h2>' in html


def test_snippets_resolve_image_and_url(kind_settings):
    meta = build_collection(kind_settings, SNIPPETS).posts[0].metadata
    assert meta.model_extra["image"] == "https://example.com/snippets/typed-forms/snippet.png"
    assert meta.model_extra["url"] == "/snippets/typed-forms"
    assert meta.tags == ["Angular", "Forms"]


def test_bits_lower_case_tags(kind_settings):
    collection = build_collection(kind_settings, "bits")
    assert collection.posts[0].metadata.tags == ["typescript", "ngrx"]
    query = PostQuery(collection, kind_settings)
    assert query.tags() == ["typescript", "ngrx"]


def test_canonical_url_follows_kind(kind_settings):
    query = PostQuery(build_collection(kind_settings, "bits"), kind_settings)
    post = query.post("small-bit")
    assert query.resolve_canonical_url(post.metadata) == "https://example.com/bits/small-bit"


def test_store_per_kind(kind_settings):
    store = PostStore(kind_settings, kind="snippets")
    assert [p.metadata.slug for p in store.query().posts()] == ["typed-forms"]
