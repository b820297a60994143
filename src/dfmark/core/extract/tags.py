"""Tag-delimited regions in source files, keyed by comment style"""

import re
import textwrap


# Line-comment prefixes (regex-escaped) by snippet language.
_C_LIKE = ("//",)
COMMENT_STYLES: dict[str, tuple[str, ...]] = {
    'cs': _C_LIKE, 'csharp': _C_LIKE, 'c#': _C_LIKE,
    'cpp': _C_LIKE, 'c++': _C_LIKE, 'c': _C_LIKE,
    'java': _C_LIKE, 'js': _C_LIKE, 'javascript': _C_LIKE,
    'ts': _C_LIKE, 'typescript': _C_LIKE, 'go': _C_LIKE,
    'fs': _C_LIKE, 'fsharp': _C_LIKE, 'rust': _C_LIKE,
    'kotlin': _C_LIKE, 'swift': _C_LIKE, 'scala': _C_LIKE,
    'python': ('#',), 'py': ('#',), 'ruby': ('#',), 'rb': ('#',),
    'powershell': ('#',), 'ps': ('#',), 'bash': ('#',), 'sh': ('#',),
    'yaml': ('#',), 'yml': ('#',), 'perl': ('#',), 'r': ('#',),
    'sql': ('--',), 'lua': ('--',), 'haskell': ('--',),
    'vb': ("'",), 'vbnet': ("'",), 'vbscript': ("'",),
    'batchfile': ('REM', '::'), 'bat': ('REM', '::'),
    'matlab': ('%',), 'erlang': ('%',), 'tex': ('%',),
    'ini': (';',), 'lisp': (';',), 'clojure': (';',),
}
_ALL_LINE_COMMENTS = ("//", "#", "--", "'", "REM", "::", "%", ";")
_XML_LANGS = {'xml', 'html', 'xaml', 'markdown', 'md', 'aspx', 'cshtml', 'vbhtml'}
_REGION_LANGS = {'cs', 'csharp', 'c#', 'vb', 'vbnet'}


def _line_comment_patterns(prefix: str, name: str) -> tuple[re.Pattern, re.Pattern]:
    p = re.escape(prefix)
    n = re.escape(name)
    start = re.compile(rf'^\s*{p}\s*<\s*{n}\s*>\s*$', re.IGNORECASE)
    end = re.compile(rf'^\s*{p}\s*<\s*/\s*{n}\s*>\s*$', re.IGNORECASE)
    return start, end


def _xml_patterns(name: str) -> tuple[re.Pattern, re.Pattern]:
    n = re.escape(name)
    start = re.compile(rf'^\s*<!--\s*<\s*{n}\s*>\s*-->\s*$', re.IGNORECASE)
    end = re.compile(rf'^\s*<!--\s*<\s*/\s*{n}\s*>\s*-->\s*$', re.IGNORECASE)
    return start, end


def _region_patterns(name: str) -> tuple[re.Pattern, re.Pattern]:
    start = re.compile(rf'^\s*#\s*region\s+{re.escape(name)}\s*$', re.IGNORECASE)
    end = re.compile(r'^\s*#\s*end\s*region\b.*$', re.IGNORECASE)
    return start, end


def marker_patterns(name: str, lang: str | None) -> list[tuple[re.Pattern, re.Pattern]]:
    """Return (start, end) marker regex pairs to try for a tag in the given language."""
    key = (lang or '').lower()
    if key in _XML_LANGS:
        return [_xml_patterns(name)]
    prefixes = COMMENT_STYLES.get(key)
    if prefixes is None:
        pairs = [_line_comment_patterns(p, name) for p in _ALL_LINE_COMMENTS]
        return pairs + [_xml_patterns(name), _region_patterns(name)]
    pairs = [_line_comment_patterns(p, name) for p in prefixes]
    if key in _REGION_LANGS:
        pairs.append(_region_patterns(name))
    return pairs


_ANY_TAG_RE = re.compile(
    r'^\s*(?:(?://|#|--|\'|REM|::|%|;)\s*<\s*/?\s*[\w.-]+\s*>|<!--\s*<\s*/?\s*[\w.-]+\s*>\s*-->)\s*$',
    re.IGNORECASE,
)


def is_tag_line(line: str) -> bool:
    """True when line is a start or end marker for any tag."""
    return bool(_ANY_TAG_RE.match(line))


def find_region(lines: list[str], name: str, lang: str | None = None) -> list[str] | None:
    """Return the lines strictly between a tag's start and end markers, or None if unmatched.

    Nested marker lines for other tags are dropped and the block is dedented.
    """
    for start_re, end_re in marker_patterns(name, lang):
        start = next((i for i, line in enumerate(lines) if start_re.match(line)), None)
        if start is None:
            continue
        end = next((i for i in range(start + 1, len(lines)) if end_re.match(lines[i])), None)
        if end is None:
            return None
        body = [line for line in lines[start + 1:end] if not is_tag_line(line)]
        return dedent(body)
    return None


def dedent(lines: list[str]) -> list[str]:
    """Remove the common leading whitespace of a block of lines."""
    if not lines:
        return []
    return textwrap.dedent("\n".join(lines)).split("\n")
