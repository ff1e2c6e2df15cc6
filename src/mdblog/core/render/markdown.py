"""Markdown -> HTML rendering with custom markdown-it render rules

Overrides the default output for links, images, fenced code, inline code, and
headings. Per-document state (asset dir, post path, diagnostics) travels in the
markdown-it `env` dict so one parser instance serves a whole build.
"""

import re
from dataclasses import dataclass, field
from typing import Optional
from urllib.parse import urlparse

from markdown_it import MarkdownIt
from markdown_it.common.utils import escapeHtml

from mdblog.core.render.highlight import highlight_code
from mdblog.core.utils.slug import slugify
from mdblog.core.utils.urls import resolve_asset


ANCHOR_OVERRIDE_RE = re.compile(r'\s*\{#([^}]+)\}\s*$')
LEADING_TABS_RE = re.compile(r'^\t+', re.MULTILINE)


@dataclass(frozen=True)
class RenderContext:
    """Per-document inputs to the render rules."""
    slug: str
    post_path: str          # e.g. 'blog/my-post'; heading anchors link to post_path#fragment
    asset_dir: str = ''
    base_path: str = ''
    anchor_levels: Optional[frozenset[int]] = None      # None anchors every heading level
    page_anchor: bool = False   # anchors link to post_path itself and use the slug as id


@dataclass
class RenderedMarkdown:
    html: str
    warnings: list[str] = field(default_factory=list)
    toc: list[dict] = field(default_factory=list)
    outgoing_slugs: list[str] = field(default_factory=list)


def normalize_tabs(text: str) -> str:
    """Replace leading tabs with two spaces each (list indentation assumes spaces)."""
    return LEADING_TABS_RE.sub(lambda m: '  ' * len(m.group(0)), text)


def _plain_text(inline) -> str:
    parts = []
    for child in inline.children or []:
        if child.type in ('text', 'code_inline'):
            parts.append(child.content)
        elif child.type in ('softbreak', 'hardbreak'):
            parts.append(' ')
        elif child.type == 'image':
            parts.append(_plain_text(child))
    return ''.join(parts)


def _unique(slug: str, seen: set[str]) -> str:
    """Suffix repeated slugs within a document: foo, foo-1, foo-2, ...

    Every returned slug is reserved, so a heading that slugifies to an earlier
    suffixed slug gets a suffix of its own.
    """
    candidate, n = slug, 0
    while candidate in seen:
        n += 1
        candidate = f"{slug}-{n}"
    seen.add(candidate)
    return candidate


def _take_override(inline) -> Optional[str]:
    """Strip a trailing `{#id}` from the heading text and return the id.

    Only plain trailing text counts; `{#id}` inside a code span stays literal.
    """
    last = inline.children[-1] if inline.children else None
    if last is None or last.type != 'text':
        return None
    m = ANCHOR_OVERRIDE_RE.search(last.content)
    if not m:
        return None
    last.content = last.content[:m.start()]
    inline.content = ANCHOR_OVERRIDE_RE.sub('', inline.content)
    return m.group(1).strip()


def _heading_anchors(state) -> None:
    """Core rule: assign an id to anchored headings and collect the table of contents."""
    env = state.env
    seen = env.setdefault('slugs', set())
    toc = env.setdefault('toc', [])
    levels = env.get('anchor_levels')
    tokens = state.tokens

    for i, tok in enumerate(tokens):
        if tok.type != 'heading_open':
            continue
        inline = tokens[i + 1]
        level = int(tok.tag[1])
        override = _take_override(inline)
        if levels is not None and level not in levels:
            continue
        if env.get('page_anchor'):
            slug = env.get('slug', '')
        else:
            slug = override or slugify(_plain_text(inline))
        if not slug:
            continue
        slug = _unique(slug, seen)
        tok.attrSet('id', slug)
        toc.append({'description': _plain_text(inline).strip(), 'level': level, 'slug': slug})


def _render_heading_open(self, tokens, idx, options, env) -> str:
    tok = tokens[idx]
    slug = tok.attrGet('id')
    if not slug:
        return f'<{tok.tag}>'
    href = env.get('post_path', '')
    if not env.get('page_anchor'):
        href = f"{href}#{slug}"
    return (
        f'<{tok.tag} id="{escapeHtml(slug)}">'
        f'<a href="{escapeHtml(href)}" class="anchor" aria-hidden="true">'
    )


def _render_heading_close(self, tokens, idx, options, env) -> str:
    tok = tokens[idx]
    opened = tokens[idx - 2] if idx >= 2 else None
    if opened is not None and opened.type == 'heading_open' and opened.attrGet('id'):
        return f'</a></{tok.tag}>\n'
    return f'</{tok.tag}>\n'


def _record_outgoing(href: str, env: dict) -> None:
    """Track slugs of internal (site-absolute) links to other posts."""
    if not href.startswith('/') or href.startswith('//'):
        return
    target = urlparse(href).path.rstrip('/').split('/')[-1]
    outgoing = env.setdefault('outgoing_slugs', [])
    if target and target not in ('blog', env.get('slug')) and target not in outgoing:
        outgoing.append(target)


def _render_link_open(self, tokens, idx, options, env) -> str:
    tok = tokens[idx]
    href = str(tok.attrGet('href') or '')
    attrs = [f'href="{escapeHtml(href)}"']
    title = tok.attrGet('title')
    if title:
        attrs.append(f'title="{escapeHtml(str(title))}"')
    _record_outgoing(href, env)
    return f"<a {' '.join(attrs)}>"


def _render_image(self, tokens, idx, options, env) -> str:
    tok = tokens[idx]
    src = resolve_asset(env.get('base_path', ''), env.get('asset_dir', ''), str(tok.attrGet('src') or ''))
    alt = self.renderInlineAsText(tok.children or [], options, env)
    title = tok.attrGet('title')
    title_attr = f' title="{escapeHtml(str(title))}"' if title else ''
    return f'<img src="{escapeHtml(src)}" alt="{escapeHtml(alt)}"{title_attr} loading="lazy">'


def _render_fence(self, tokens, idx, options, env) -> str:
    tok = tokens[idx]
    result = highlight_code(tok.content, tok.info)
    if result.warning:
        env.setdefault('warnings', []).append(result.warning)
    return result.html


def _render_code_inline(self, tokens, idx, options, env) -> str:
    return f'<code class="language-text">{escapeHtml(tokens[idx].content)}</code>'


def make_parser(preset: str = 'gfm-like') -> MarkdownIt:
    """Build a MarkdownIt instance with the blog's render rules installed."""
    md = MarkdownIt(preset, options_update={"linkify": False})
    md.core.ruler.push('heading_anchors', _heading_anchors)
    md.add_render_rule('heading_open', _render_heading_open)
    md.add_render_rule('heading_close', _render_heading_close)
    md.add_render_rule('link_open', _render_link_open)
    md.add_render_rule('image', _render_image)
    md.add_render_rule('fence', _render_fence)
    md.add_render_rule('code_inline', _render_code_inline)
    return md


def render_markdown(md: MarkdownIt, body: str, context: RenderContext) -> RenderedMarkdown:
    """Render a markdown body to HTML, returning diagnostics alongside the markup."""
    env = {
        'slug': context.slug,
        'post_path': context.post_path,
        'asset_dir': context.asset_dir,
        'base_path': context.base_path,
        'anchor_levels': context.anchor_levels,
        'page_anchor': context.page_anchor,
        'warnings': [],
        'toc': [],
        'slugs': set(),
        'outgoing_slugs': [],
    }
    html = md.render(normalize_tabs(body), env)
    return RenderedMarkdown(
        html=html,
        warnings=env['warnings'],
        toc=env['toc'],
        outgoing_slugs=env['outgoing_slugs'],
    )
