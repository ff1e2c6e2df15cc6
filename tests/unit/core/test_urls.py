"""Unit tests for core/utils/urls.py and core/utils/dates.py"""

from datetime import datetime

import pytest

from mdblog.core.utils.dates import human_date, parse_date
from mdblog.core.utils.urls import canonical_url, is_absolute_url, resolve_asset


@pytest.mark.parametrize("href,expected", [
    ("http://example.com/a.png", True),
    ("https://example.com/a.png", True),
    ("data:image/png;base64,AAAA", True),
    ("//cdn.example.com/a.png", True),
    ("./a.png", False),
    ("images/a.png", False),
    ("/static/a.png", False),
])
def test_is_absolute_url(href, expected):
    assert is_absolute_url(href) is expected


@pytest.mark.parametrize("base,href,expected", [
    ("https://example.com", "./banner.jpg", "https://example.com/blog/my-post/banner.jpg"),
    ("https://example.com/", "banner.jpg", "https://example.com/blog/my-post/banner.jpg"),
    ("", "./banner.jpg", "/blog/my-post/banner.jpg"),
    ("", "../shared/a.png", "/blog/shared/a.png"),
    ("", "images\\a.png", "/blog/my-post/images/a.png"),
    ("https://example.com", "/static/a.png", "https://example.com/static/a.png"),
    ("https://example.com", "http://other.com/a.png", "http://other.com/a.png"),
])
def test_resolve_asset(base, href, expected):
    assert resolve_asset(base, "blog/my-post", href) == expected


def test_resolve_asset_never_doubles_slashes():
    assert "//" not in resolve_asset("", "blog/my-post", "./banner.jpg")


def test_canonical_url():
    assert canonical_url("{base_path}/blog/{slug}", "https://example.com/", "foo") == "https://example.com/blog/foo"


def test_parse_date_variants():
    assert parse_date("2024-01-01") == datetime(2024, 1, 1)
    assert parse_date("2024-01-01T10:30:00") == datetime(2024, 1, 1, 10, 30)
    assert parse_date("2024-01-01T10:30:00+02:00") == datetime(2024, 1, 1, 8, 30)


@pytest.mark.parametrize("text", [
    "January 31, 2024",
    "Jan 31, 2024",
    "31 January 2024",
    "2024/01/31",
])
def test_parse_date_long_hand_forms(text):
    assert parse_date(text) == datetime(2024, 1, 31)


def test_parse_date_rfc822():
    assert parse_date("Wed, 31 Jan 2024 10:00:00 +0100") == datetime(2024, 1, 31, 9, 0)


def test_parse_date_invalid():
    with pytest.raises(ValueError, match="use ISO 8601"):
        parse_date("first of january")


@pytest.mark.parametrize("dt,expected", [
    (datetime(2024, 1, 1), "January 1st 2024"),
    (datetime(2024, 2, 2), "February 2nd 2024"),
    (datetime(2024, 3, 3), "March 3rd 2024"),
    (datetime(2024, 4, 11), "April 11th 2024"),
    (datetime(2024, 5, 22), "May 22nd 2024"),
    (datetime(2024, 6, 13), "June 13th 2024"),
])
def test_human_date(dt, expected):
    assert human_date(dt) == expected
