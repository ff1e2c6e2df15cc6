"""Fenced code highlighting with Pygments and a fixed language alias table"""

import logging
import re
from dataclasses import dataclass
from typing import Optional

from markdown_it.common.utils import escapeHtml
from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound


logger = logging.getLogger(__name__)

# fence tag -> Pygments lexer name
LANGUAGE_ALIASES: dict[str, str] = {
    'bash':    'bash',
    'sh':      'bash',
    'ps':      'powershell',
    'html':    'html',
    'sv':      'html',
    'svelte':  'html',
    'xml':     'xml',
    'js':      'javascript',
    'ts':      'typescript',
    'json':    'json',
    'css':     'css',
    'txt':     'text',
    'graphql': 'graphql',
    'yml':     'yaml',
    'yaml':    'yaml',
    'diff':    'diff',
    'cs':      'csharp',
    'sql':     'sql',
    'md':      'markdown',
}

DEFAULT_LANGUAGE = 'txt'
_LINES_RE = re.compile(r'\{([^}]*)\}')


@dataclass(frozen=True)
class FenceInfo:
    """Parsed fence info string: `lang[:file][{1,3-5}]`."""
    language: str
    file: str = ''
    lines: tuple[int, ...] = ()


@dataclass(frozen=True)
class HighlightResult:
    """Rendered `<pre>` block; `fallback` is set when the language had no grammar."""
    html: str
    grammar: str
    fallback: bool = False
    warning: Optional[str] = None


def _parse_line_ranges(ranges: str) -> list[int]:
    lines = []
    for part in ranges.split(','):
        part = part.strip()
        if not part:
            continue
        lo, _, hi = part.partition('-')
        if not lo.strip().isdigit() or (hi and not hi.strip().isdigit()):
            continue
        start = int(lo)
        lines.extend(range(start, int(hi or start) + 1))
    return lines


def parse_fence_info(info: str) -> FenceInfo:
    """Split a fence info string into language, optional file name, and highlighted lines."""
    info = (info or '').strip()
    lines: list[int] = []
    for m in _LINES_RE.finditer(info):
        lines.extend(_parse_line_ranges(m.group(1)))
    info = _LINES_RE.sub('', info).strip()
    language, _, file = info.partition(':')
    language = language.split()[0] if language.strip() else DEFAULT_LANGUAGE
    return FenceInfo(language=language, file=file.strip(), lines=tuple(lines))


def _wrap(grammar: str, code_html: str, file: str) -> str:
    heading = f'<div class="code-heading">{escapeHtml(file)}</div>' if file else ''
    return f'<pre class="language-{grammar}">{heading}<code>{code_html}</code></pre>\n'


def highlight_code(source: str, info: str) -> HighlightResult:
    """Highlight fenced source; unknown languages degrade to escaped plain text with a warning."""
    fence = parse_fence_info(info)
    grammar = LANGUAGE_ALIASES.get(fence.language.lower())

    lexer = None
    if grammar:
        try:
            lexer = get_lexer_by_name(grammar)
        except ClassNotFound:
            lexer = None

    if lexer is None:
        warning = f"no syntax grammar for code fence language '{fence.language}'"
        logger.warning(warning)
        return HighlightResult(
            html=_wrap('text', escapeHtml(source), fence.file),
            grammar='text',
            fallback=True,
            warning=warning,
        )

    formatter = HtmlFormatter(nowrap=True, hl_lines=list(fence.lines))
    code_html = highlight(source, lexer, formatter)
    return HighlightResult(html=_wrap(grammar, code_html, fence.file), grammar=grammar)
