"""Application configuration: settings schema and config.yaml loader"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator


CONFIG_FILE = "config.yaml"


class Settings(BaseModel):
    app_name:        str = "mdblog"
    content_dir:     str = Field(default="content/blog", description="Root directory of the markdown posts")
    snippets_dir:    str = Field(default="content/snippets", description="Root directory of the snippets")
    bits_dir:        str = Field(default="content/bits",     description="Root directory of the bits")
    base_path:       str = Field(default="",             description="Site base URL prefixed to image and banner paths")
    extension:       str = Field(default=".md",          description="File suffix of content files")
    ignore_dirs:     list[str] = Field(default=["node_modules"], description="Directory names skipped by the walk")
    parser_config:   str = Field(default="gfm-like",     description="MarkdownIt parser preset name")
    post_path_template:     str = Field(default="blog/{slug}",             description="Post path used by heading anchors")
    canonical_url_template: str = Field(default="{base_path}/blog/{slug}", description="Fallback canonical URL")
    output_dir:      str = Field(default="dist",         description="Directory for exported JSON files")
    site_title:      str = Field(default="Blog",         description="RSS channel title")
    site_description: str = Field(default="",            description="RSS channel description")
    log_level:       str = Field(default="WARNING", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")

    @field_validator("ignore_dirs", mode="before")
    @classmethod
    def _split_ignore_dirs(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [d.strip() for d in value.split(",") if d.strip()]
        return value


def load_config(overrides: dict[str, Any] = None) -> Settings:
    """Load Settings from config.yaml, then MDBLOG_<FIELD> env vars, then non-None CLI overrides."""
    data: dict[str, Any] = {}
    if Path(CONFIG_FILE).exists():
        try:
            data = yaml.safe_load(Path(CONFIG_FILE).read_text()) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid {CONFIG_FILE}: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Invalid {CONFIG_FILE}: expected a mapping, got {type(data).__name__}")

    for name in Settings.model_fields:
        if val := os.getenv(f"MDBLOG_{name.upper()}"):
            data[name] = val

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    return Settings(**data)
