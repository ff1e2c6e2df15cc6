"""Shared fixtures for core unit tests"""

import pytest

from mdblog.config import Settings
from mdblog.core.render.markdown import RenderContext, make_parser


@pytest.fixture(name="parser")
def parser_fixture():
    return make_parser("gfm-like")


@pytest.fixture(name="context")
def context_fixture():
    return RenderContext(slug="my-post", post_path="blog/my-post", asset_dir="blog/my-post", base_path="")


@pytest.fixture(name="settings")
def settings_fixture(content_dir):
    return Settings(content_dir=str(content_dir), base_path="https://example.com")
