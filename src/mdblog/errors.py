"""Exception types raised while building the post collection"""

from pathlib import Path
from typing import Optional


class MdblogError(Exception):
    """Base class for mdblog build errors."""


class FrontmatterError(MdblogError, ValueError):
    """A content file has no leading `---` fenced metadata block."""

    def __init__(self, message: str, path: Optional[Path] = None):
        self.path = path
        super().__init__(f"{path}: {message}" if path else message)


class MetadataError(MdblogError, ValueError):
    """A frontmatter value could not be converted (e.g. an unparseable date)."""
