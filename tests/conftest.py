"""Root test configuration: sample content tree shared by unit and integration tests"""

import os

import pytest


POSTS = {
    "first-post/index.md": """\
---
title: First Post
slug: first-post
date: 2024-01-01
tags: Angular, Testing
published: true
banner: ./banner.jpg
bannerCredit: Photo by Someone
---

# Hello World

A [link](http://example.com "a title") and an ![diagram](./diagram.png).
""",
    "second-post/index.md": """\
---
title: Second Post
slug: second-post
date: 2024-03-15
tags: ngrx
published: true
canonical_url: https://dev.to/second-post
---

## Intro

```ts
const answer = 42;
```
""",
    "draft/index.md": """\
---
title: Draft Post
slug: draft-post
date: 2024-02-10
tags: wip
published: false
---

Not ready yet.
""",
    "notes.txt": "not markdown",
}


@pytest.fixture(name="content_dir")
def content_dir_fixture(tmp_path):
    """A content root at tmp_path/blog with three posts and one non-markdown file."""
    root = tmp_path / "blog"
    for rel, text in POSTS.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    return root


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep MDBLOG_* variables from the developer's shell out of the tests."""
    for name in list(os.environ):
        if name.startswith("MDBLOG_"):
            monkeypatch.delenv(name)
