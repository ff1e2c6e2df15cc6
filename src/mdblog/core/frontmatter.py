"""Frontmatter extraction: `---` fenced block split and line-based key/value parsing"""

import re
from pathlib import Path, PurePosixPath
from typing import Optional

from mdblog.core.models import Document
from mdblog.errors import FrontmatterError


FRONTMATTER_RE = re.compile(r'\A\ufeff?---[ \t]*\r?\n(.*?)^---[ \t]*\r?$\n?', re.DOTALL | re.MULTILINE)


def split_frontmatter(text: str, path: Optional[Path] = None) -> tuple[str, str]:
    """Return (raw_metadata_block, body). Raises FrontmatterError when the fences are missing."""
    m = FRONTMATTER_RE.match(text)
    if not m:
        raise FrontmatterError("missing '---' fenced frontmatter block", path)
    return m.group(1).rstrip('\r\n'), text[m.end():]


def parse_metadata_block(block: str) -> dict[str, str]:
    """Parse `key: value` lines, splitting on the first colon only.

    Blank lines and lines without a colon are ignored; later keys win.
    """
    data: dict[str, str] = {}
    for line in block.splitlines():
        key, sep, value = line.partition(':')
        if not sep or not key.strip():
            continue
        data[key.strip()] = value.strip()
    return data


def extract(text: str) -> tuple[dict[str, str], str]:
    """Return (metadata_dict, body) for a full markdown document."""
    block, body = split_frontmatter(text)
    return parse_metadata_block(block), body


def read_document(path: Path, root: Path) -> Document:
    """Read a markdown file and split off its frontmatter block."""
    path, root = Path(path), Path(root)
    raw = path.read_text(encoding='utf-8')
    block, body = split_frontmatter(raw, path)
    rel_parts = path.parent.relative_to(root).parts
    return Document(
        path=path,
        raw_metadata_block=block,
        raw_body=body,
        asset_dir=str(PurePosixPath(root.name, *rel_parts)),
        folder=path.parent.name,
    )
