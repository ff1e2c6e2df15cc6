"""Slug generation for heading anchors and post identifiers"""

import re


_ACCENTED = 'àáäâãåăæçèéëêǵḧìíïîḿńǹñòóöôœøṕŕßśșțùúüûǘẃẍÿź·/_,:;'
_FOLDED   = 'aaaaaaaaceeeeghiiiimnnnooooooprssstuuuuuwxyz------'
_FOLD_TABLE = str.maketrans(_ACCENTED, _FOLDED)


def slugify(text: str) -> str:
    """Convert text to a lowercase, hyphen-separated, ASCII-only anchor slug."""
    text = str(text).lower()
    text = re.sub(r'\s+', '-', text)
    text = text.translate(_FOLD_TABLE)
    text = text.replace('&', '-and-')
    text = re.sub(r'[^\w-]+', '', text, flags=re.ASCII)
    text = re.sub(r'-{2,}', '-', text)
    return text.strip('-')
