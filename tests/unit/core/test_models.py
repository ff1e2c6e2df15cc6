"""Unit tests for core/models.py metadata coercion"""

from datetime import datetime

import pytest
from pydantic import ValidationError

from mdblog.core.frontmatter import parse_metadata_block
from mdblog.core.models import PostMetadata


def test_metadata_scenario():
    raw = parse_metadata_block("title: Foo\nslug: foo\ndate: 2024-01-01\ntags: a, b\npublished: true")
    meta = PostMetadata.model_validate(raw)
    assert meta.title == "Foo"
    assert meta.slug == "foo"
    assert meta.date == datetime(2024, 1, 1)
    assert meta.tags == ["a", "b"]
    assert meta.published is True


@pytest.mark.parametrize("value,expected", [("true", True), ("false", False), ("True", False), ("yes", False), ("1", False)])
def test_published_only_literal_true(value, expected):
    meta = PostMetadata.model_validate({"title": "T", "slug": "t", "date": "2024-01-01", "published": value})
    assert meta.published is expected


def test_published_defaults_false():
    meta = PostMetadata.model_validate({"title": "T", "slug": "t", "date": "2024-01-01"})
    assert meta.published is False


def test_tags_trimmed_and_empty_dropped():
    meta = PostMetadata.model_validate({"title": "T", "slug": "t", "date": "2024-01-01", "tags": " Angular , ,NgRx,"})
    assert meta.tags == ["Angular", "NgRx"]


def test_extra_fields_pass_through():
    meta = PostMetadata.model_validate({
        "title": "T", "slug": "t", "date": "2024-01-01",
        "publisher": "dev.to", "bannerCredit": "Photo by X",
    })
    assert meta.model_extra == {"publisher": "dev.to"}
    assert meta.banner_credit == "Photo by X"


def test_invalid_date_rejected():
    with pytest.raises(ValidationError):
        PostMetadata.model_validate({"title": "T", "slug": "t", "date": "someday"})


def test_missing_title_rejected():
    with pytest.raises(ValidationError):
        PostMetadata.model_validate({"slug": "t", "date": "2024-01-01"})


def test_metadata_is_frozen():
    meta = PostMetadata.model_validate({"title": "T", "slug": "t", "date": "2024-01-01"})
    with pytest.raises(ValidationError):
        meta.title = "changed"
