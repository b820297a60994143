"""HTML renderer for DFM tokens on top of markdown-it's RendererHTML"""

from collections.abc import Sequence

from markdown_it.common.utils import escapeHtml
from markdown_it.renderer import RendererHTML
from markdown_it.token import Token
from markdown_it.utils import EnvType, OptionsDict

from dfmark.core.context import get_context
from dfmark.core.extract.code import CodeExtractor
from dfmark.core.include import InclusionResolver
from dfmark.core.models import Fences, Include, Note, Section, payload
from dfmark.core.split import child_blocks, matching_close, split_blockquote


def error_fragment(message: str, block: bool) -> str:
    if block:
        return f'<div class="dfm-error">{escapeHtml(message)}</div>\n'
    return f'<span class="dfm-error">{escapeHtml(message)}</span>'


def _attr(name: str, value: str | None) -> str:
    return "" if value is None else f' {name}="{escapeHtml(value)}"'


class DfmRenderer(RendererHTML):
    """Renders the DFM token kinds; everything else falls through to RendererHTML.

    Rules are looked up by token type (see RendererHTML.__init__), so each
    public method below is named after the TokenKind value it renders. The
    helpers it shares are stateless and safe to use from concurrent renders.
    """

    def __init__(self, parser=None):
        super().__init__(parser)
        self._md = parser
        self._resolver = InclusionResolver()
        self._extractor = CodeExtractor()

    def render(self, tokens: Sequence[Token], options: OptionsDict, env: EnvType) -> str:
        result = ""
        idx = 0
        while idx < len(tokens):
            token = tokens[idx]
            if token.type == "blockquote_open":
                close = matching_close(tokens, idx)
                result += self._render_blockquote(tokens[idx + 1:close], options, env)
                idx = close + 1
                continue
            if token.type == "inline":
                if token.children:
                    result += self.renderInline(token.children, options, env)
            elif token.type in self.rules:
                result += self.rules[token.type](tokens, idx, options, env)
            else:
                result += self.renderToken(tokens, idx, options, env)
            idx += 1
        return result

    def _render_blockquote(self, children: Sequence[Token], options: OptionsDict, env: EnvType) -> str:
        content = ""
        for group in split_blockquote(child_blocks(list(children))):
            inner = "".join(self.render(block, options, env) for block in group.inner)
            data = payload(group.token) if group.token is not None else None
            if isinstance(data, Section):
                attrs = "".join(_attr(k, v) for k, v in data.attributes)
                content += f"<div{attrs}>{inner}</div>\n"
            elif isinstance(data, Note):
                label = escapeHtml(data.note_type)
                content += f'<div class="{label}"><h5>{label}</h5>{inner}</div>\n'
            else:
                content += f"<blockquote>{inner}</blockquote>\n"
        return content

    def dfm_xref(self, tokens: Sequence[Token], idx: int, options: OptionsDict, env: EnvType) -> str:
        xref = payload(tokens[idx])
        result = "<xref"
        result += _attr("href", xref.href)
        result += _attr("title", xref.title)
        result += ">"
        if xref.name is not None:
            result += escapeHtml(xref.name)
        return result + "</xref>"

    def dfm_yaml_header(self, tokens: Sequence[Token], idx: int, options: OptionsDict, env: EnvType) -> str:
        content = payload(tokens[idx]).content
        if not content:
            return ""
        return f"<yamlheader>{escapeHtml(content)}</yamlheader>"

    def dfm_include_block(self, tokens: Sequence[Token], idx: int, options: OptionsDict, env: EnvType) -> str:
        return self._include(payload(tokens[idx]), env, inline=False)

    def dfm_include_inline(self, tokens: Sequence[Token], idx: int, options: OptionsDict, env: EnvType) -> str:
        return self._include(payload(tokens[idx]), env, inline=True)

    def _include(self, include: Include, env: EnvType, inline: bool) -> str:
        result = self._resolver.load(include.src, include.raw, get_context(env), self._md, inline=inline)
        if result.succeeded:
            return result.html
        return error_fragment(result.error, block=not inline)

    def dfm_fences(self, tokens: Sequence[Token], idx: int, options: OptionsDict, env: EnvType) -> str:
        fences: Fences = payload(tokens[idx])
        result = self._extractor.extract(fences, get_context(env))
        lang = f"{options.langPrefix}{fences.lang}" if fences.lang else None
        attrs = _attr("class", lang) + _attr("name", fences.name) + _attr("title", fences.title)
        attrs += _attr("data-src", fences.path)
        if result.succeeded:
            body = escapeHtml("\n".join(result.lines))
        else:
            attrs += ' data-error="true"'
            body = escapeHtml(result.error)
        return f"<pre><code{attrs}>{body}\n</code></pre>\n"

    # Grouping already wrapped note and section runs; their bodies render as a bare paragraph.

    def dfm_note_open(self, tokens: Sequence[Token], idx: int, options: OptionsDict, env: EnvType) -> str:
        return _body_open(tokens, idx)

    def dfm_note_close(self, tokens: Sequence[Token], idx: int, options: OptionsDict, env: EnvType) -> str:
        return _body_close(tokens, idx)

    def dfm_section_open(self, tokens: Sequence[Token], idx: int, options: OptionsDict, env: EnvType) -> str:
        return _body_open(tokens, idx)

    def dfm_section_close(self, tokens: Sequence[Token], idx: int, options: OptionsDict, env: EnvType) -> str:
        return _body_close(tokens, idx)


def _body_open(tokens: Sequence[Token], idx: int) -> str:
    return "<p>" if idx + 1 < len(tokens) and tokens[idx + 1].type == "inline" else ""


def _body_close(tokens: Sequence[Token], idx: int) -> str:
    return "</p>\n" if idx > 0 and tokens[idx - 1].type == "inline" else ""
