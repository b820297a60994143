"""Block-level DFM rules: YAML header, block include, code snippet, note, section"""

import re

import yaml
from markdown_it.rules_block import StateBlock

from dfmark.core.models import (
    CLOSING, NOTE_TYPES, Fences, Include, Note, Section, TokenKind, YamlHeader,
)
from dfmark.core.utils.paths import split_reference


INCLUDE_RE = re.compile(
    r'^\[!include\s*\[(?P<name>[^\]]*)\]\((?P<src>[^)"\'\s]*)'
    r'(?:\s+(?P<q>["\'])(?P<title>.*?)(?P=q))?\s*\)\]', re.IGNORECASE)
FENCES_RE = re.compile(
    r'^\[!code(?:-(?P<lang>[\w#+.-]+))?\s*\[(?P<name>[^\]]*)\]\((?P<path>[^)"\'\s]+)'
    r'(?:\s+(?P<q>["\'])(?P<title>.*?)(?P=q))?\s*\)\]\s*$', re.IGNORECASE)
NOTE_RE = re.compile(rf'^\[!({"|".join(NOTE_TYPES)})\]\s*(.*)$', re.IGNORECASE)
SECTION_RE = re.compile(r'^\[!div(?P<attrs>(?:\s+[\w-]+\s*=\s*"[^"]*")*)\s*\]\s*(?P<rest>.*)$', re.IGNORECASE)
ATTR_RE = re.compile(r'([\w-]+)\s*=\s*"([^"]*)"')
YAML_FENCE = '---'


def _line(state: StateBlock, line: int) -> str:
    return state.src[state.bMarks[line] + state.tShift[line]:state.eMarks[line]]


def _is_code_indented(state: StateBlock, line: int) -> bool:
    return state.sCount[line] - state.blkIndent >= 4


def include_from_match(m: re.Match, raw: str) -> Include:
    return Include(
        src=m.group('src') or None,
        raw=raw,
        title=m.group('title'),
        name=m.group('name') or None,
    )


_YAML_HEADER_RE = re.compile(r'\A---[ \t]*\r?\n(?P<content>.*?)^---[ \t]*(?:\r?\n|\Z)', re.DOTALL | re.MULTILINE)


def _is_yaml_mapping(content: str) -> bool:
    try:
        return isinstance(yaml.safe_load(content), dict)
    except yaml.YAMLError:
        return False


def strip_yaml_header(text: str) -> str:
    """Return text without a leading '---' YAML mapping '---' block."""
    m = _YAML_HEADER_RE.match(text)
    if m and _is_yaml_mapping(m.group('content')):
        return text[m.end():]
    return text


def yaml_header_rule(state: StateBlock, startLine: int, endLine: int, silent: bool) -> bool:
    """Match '---' YAML '---' on the first line of a document; body must be a YAML mapping."""
    if startLine != 0 or state.level != 0 or _line(state, startLine).rstrip() != YAML_FENCE:
        return False

    close = next(
        (i for i in range(startLine + 1, endLine) if _line(state, i).rstrip() == YAML_FENCE),
        None,
    )
    if close is None:
        return False

    content = state.getLines(startLine + 1, close, 0, True)
    if not _is_yaml_mapping(content):
        return False

    if silent:
        return True
    token = state.push(TokenKind.yaml_header.value, "", 0)
    token.block = True
    token.content = content
    token.map = [startLine, close + 1]
    token.meta = {"dfm": YamlHeader(content=content.rstrip("\n"))}
    state.line = close + 1
    return True


def include_block_rule(state: StateBlock, startLine: int, endLine: int, silent: bool) -> bool:
    """[!INCLUDE[name](src "title")] alone on a line."""
    if _is_code_indented(state, startLine):
        return False
    line = _line(state, startLine).strip()
    m = INCLUDE_RE.match(line)
    if not m or m.end() != len(line):
        return False
    if silent:
        return True
    token = state.push(TokenKind.include_block.value, "", 0)
    token.block = True
    token.content = line
    token.map = [startLine, startLine + 1]
    token.meta = {"dfm": include_from_match(m, line)}
    state.line = startLine + 1
    return True


def fences_rule(state: StateBlock, startLine: int, endLine: int, silent: bool) -> bool:
    """[!code-lang[name](path?query#fragment "title")] alone on a line."""
    if _is_code_indented(state, startLine):
        return False
    line = _line(state, startLine).strip()
    m = FENCES_RE.match(line)
    if not m:
        return False
    if silent:
        return True
    path, query, fragment = split_reference(m.group('path'))
    token = state.push(TokenKind.fences.value, "code", 0)
    token.block = True
    token.content = line
    token.info = m.group('lang') or ""
    token.map = [startLine, startLine + 1]
    token.meta = {"dfm": Fences(
        path=path,
        raw=line,
        lang=m.group('lang'),
        name=m.group('name') or None,
        title=m.group('title'),
        query=query,
        fragment=fragment,
    )}
    state.line = startLine + 1
    return True


def _is_marker(text: str) -> bool:
    return bool(NOTE_RE.match(text) or SECTION_RE.match(text))


def in_blockquote(state: StateBlock) -> bool:
    """True when the innermost still-open container token is a blockquote."""
    closed = 0
    for token in reversed(state.tokens):
        if token.nesting < 0:
            closed += 1
        elif token.nesting > 0:
            if not closed:
                return token.type == "blockquote_open"
            closed -= 1
    return False


def _push_marker(state: StateBlock, startLine: int, endLine: int, kind: TokenKind, payload, first: str) -> None:
    """Push open/inline/close tokens; the body runs to the next blank line or marker.

    The inline token is left for the core inline rule, so the body sees every
    reference definition in the document. An empty body pushes no inline token.
    """
    body = [first] if first else []
    nextLine = startLine + 1
    while nextLine < endLine and not state.isEmpty(nextLine):
        text = _line(state, nextLine)
        if _is_marker(text):
            break
        body.append(text)
        nextLine += 1

    token = state.push(kind.value, "div", 1)
    token.block = True
    token.map = [startLine, nextLine]
    token.meta = {"dfm": payload}

    if body:
        token = state.push("inline", "", 0)
        token.content = "\n".join(body)
        token.map = [startLine, nextLine]
        token.children = []

    state.push(CLOSING[kind].value, "div", -1)
    state.line = nextLine


def note_rule(state: StateBlock, startLine: int, endLine: int, silent: bool) -> bool:
    """> [!NOTE] body ... ; only inside a blockquote."""
    if _is_code_indented(state, startLine) or not in_blockquote(state):
        return False
    m = NOTE_RE.match(_line(state, startLine))
    if not m:
        return False
    if silent:
        return True
    _push_marker(state, startLine, endLine, TokenKind.note, Note(note_type=m.group(1).upper()), m.group(2).strip())
    return True


def section_rule(state: StateBlock, startLine: int, endLine: int, silent: bool) -> bool:
    """> [!div class="x"] body ... ; only inside a blockquote."""
    if _is_code_indented(state, startLine) or not in_blockquote(state):
        return False
    m = SECTION_RE.match(_line(state, startLine))
    if not m:
        return False
    if silent:
        return True
    attributes = tuple((k.lower(), v) for k, v in ATTR_RE.findall(m.group('attrs')))
    _push_marker(state, startLine, endLine, TokenKind.section, Section(attributes=attributes), m.group('rest').strip())
    return True
