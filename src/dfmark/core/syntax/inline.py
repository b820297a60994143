"""Inline DFM rules: inline include and the three cross-reference forms"""

import re

from markdown_it.rules_inline import StateInline

from dfmark.core.models import TokenKind, Xref
from dfmark.core.syntax.blocks import INCLUDE_RE, include_from_match


XREF_LINK_RE = re.compile(
    r'\[(?P<name>[^\]]*)\]\(\s*xref:(?P<href>[^)"\'\s]+)'
    r'(?:\s+(?P<q>["\'])(?P<title>.*?)(?P=q))?\s*\)', re.IGNORECASE)
XREF_AUTOLINK_RE = re.compile(r'<xref:(?P<href>[^>\s]+)>', re.IGNORECASE)
XREF_SHORTCUT_RE = re.compile(
    r'@(?:"(?P<dq>[^"\n]+)"|\'(?P<sq>[^\'\n]+)\'|(?P<uid>[A-Za-z](?:[\w.*()\-,:%#~`/]*[\w*)/])?))')


def _push_xref(state: StateInline, m: re.Match, xref: Xref) -> None:
    token = state.push(TokenKind.xref.value, "xref", 0)
    token.content = m.group(0)
    token.meta = {"dfm": xref}


def include_inline_rule(state: StateInline, silent: bool) -> bool:
    """[!INCLUDE[name](src)] inside paragraph text."""
    if state.src[state.pos] != '[':
        return False
    m = INCLUDE_RE.match(state.src[state.pos:state.posMax])
    if not m:
        return False
    if not silent:
        token = state.push(TokenKind.include_inline.value, "", 0)
        token.content = m.group(0)
        token.meta = {"dfm": include_from_match(m, m.group(0))}
    state.pos += m.end()
    return True


def xref_link_rule(state: StateInline, silent: bool) -> bool:
    """[name](xref:uid "title")"""
    if state.src[state.pos] != '[':
        return False
    m = XREF_LINK_RE.match(state.src, state.pos, state.posMax)
    if not m:
        return False
    if not silent:
        _push_xref(state, m, Xref(href=m.group('href'), title=m.group('title'), name=m.group('name')))
    state.pos = m.end()
    return True


def xref_autolink_rule(state: StateInline, silent: bool) -> bool:
    """<xref:uid>"""
    if state.src[state.pos] != '<':
        return False
    m = XREF_AUTOLINK_RE.match(state.src, state.pos, state.posMax)
    if not m:
        return False
    if not silent:
        _push_xref(state, m, Xref(href=m.group('href')))
    state.pos = m.end()
    return True


def xref_shortcut_rule(state: StateInline, silent: bool) -> bool:
    """@uid or @"uid with spaces"; an @ directly after a letter or digit is an e-mail address."""
    if state.src[state.pos] != '@':
        return False
    if state.pos > 0 and state.src[state.pos - 1].isalnum():
        return False
    m = XREF_SHORTCUT_RE.match(state.src, state.pos, state.posMax)
    if not m:
        return False
    if not silent:
        href = m.group('dq') or m.group('sq') or m.group('uid')
        _push_xref(state, m, Xref(href=href))
    state.pos = m.end()
    return True
