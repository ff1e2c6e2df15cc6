"""Data models for documents, posts, and the assembled collection"""

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from mdblog.core.utils.dates import parse_date


@dataclass(frozen=True)
class Document:
    """One markdown file split into its raw frontmatter block and body."""
    path:               Path
    raw_metadata_block: str
    raw_body:           str
    asset_dir:          str     # posix dir relative to the content root's parent, e.g. 'blog/my-post'
    folder:             str     # name of the containing directory


class TocEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    description: str
    level: int
    slug: str


class PostMetadata(BaseModel):
    """Parsed frontmatter. Unknown keys are kept as opaque strings."""
    model_config = ConfigDict(frozen=True, extra='allow', populate_by_name=True)

    title: str
    slug: str
    date: datetime
    tags: list[str] = []
    published: bool = False
    banner: Optional[str] = None
    banner_credit: Optional[str] = Field(default=None, alias='bannerCredit')
    description: Optional[str] = None
    author: Optional[str] = None
    canonical_url: Optional[str] = None
    folder: Optional[str] = None
    toc: list[TocEntry] = []
    outgoing_slugs: list[str] = []

    @field_validator('date', mode='before')
    @classmethod
    def _parse_date(cls, value: Any) -> datetime:
        return parse_date(value)

    @field_validator('tags', mode='before')
    @classmethod
    def _split_tags(cls, value: Any) -> list[str]:
        if value is None:
            return []
        if isinstance(value, str):
            value = value.split(',')
        return [str(t).strip() for t in value if str(t).strip()]

    @field_validator('published', mode='before')
    @classmethod
    def _literal_true(cls, value: Any) -> bool:
        if isinstance(value, bool):
            return value
        return str(value).strip() == 'true'


class Post(BaseModel):
    """A rendered, queryable post."""
    model_config = ConfigDict(frozen=True)

    html: str
    metadata: PostMetadata
    source_path: Path
    warnings: list[str] = []


@dataclass(frozen=True)
class BuildFailure:
    """A document excluded from the collection, with the stage it failed in."""
    path:  Path
    error: str
    stage: str      # read | frontmatter | metadata | render


@dataclass(frozen=True)
class PostCollection:
    """Immutable snapshot of one collection kind, newest first."""
    posts:    tuple[Post, ...] = ()
    failures: tuple[BuildFailure, ...] = ()
    kind:     str = 'blog'
    built_at: datetime = field(default_factory=datetime.now)

    def __len__(self) -> int:
        return len(self.posts)

    def __iter__(self):
        return iter(self.posts)
