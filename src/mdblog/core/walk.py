"""Content discovery: recursive walk of the content root"""

from pathlib import Path
from typing import Iterable


def discover_files(
    root: Path,
    extension: str = '.md',
    ignore_dirs: Iterable[str] = ('node_modules',),
    ) -> list[Path]:
    """Return sorted absolute paths of files under root whose suffix equals extension.

    Fails fast when root is missing or not a directory. Symlinked directories
    are not descended into.
    """
    root = Path(root)
    if not root.exists():
        raise FileNotFoundError(f"Content root does not exist: {root}")
    if not root.is_dir():
        raise NotADirectoryError(f"Content root is not a directory: {root}")

    root = root.resolve()
    ignored = set(ignore_dirs)
    files = []
    for p in root.rglob('*'):
        if ignored.intersection(p.relative_to(root).parts[:-1]):
            continue
        if p.suffix == extension and p.is_file():
            files.append(p)
    return sorted(files)
