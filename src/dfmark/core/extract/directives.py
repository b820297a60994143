"""Parse code snippet extraction directives from a reference's query and fragment"""

import re
from dataclasses import dataclass
from typing import Optional
from urllib.parse import parse_qs


_LINE_FRAGMENT_RE = re.compile(r'^L(\d+)(?:-L(\d+))?$', re.IGNORECASE)
_RANGE_RE = re.compile(r'^\s*(\d+)\s*(?:(-)\s*(\d*)\s*)?$')


class DirectiveError(ValueError):
    """Raised when a query or fragment does not describe a valid selection."""


@dataclass(frozen=True)
class LineRange:
    start: int                   # 1-based, inclusive
    end:   Optional[int] = None  # inclusive; None means to end of file

    def __str__(self) -> str:
        if self.end == self.start:
            return str(self.start)
        return f"{self.start}-{self.end if self.end is not None else ''}"


@dataclass(frozen=True)
class Directive:
    """What to select from a file: a tag region, line ranges, or (neither) the whole file."""
    tag:    Optional[str] = None
    ranges: tuple[LineRange, ...] = ()

    @property
    def whole_file(self) -> bool:
        return self.tag is None and not self.ranges


def _parse_range(text: str) -> LineRange:
    m = _RANGE_RE.match(text)
    if not m:
        raise DirectiveError(f"Invalid range '{text}'")
    start = int(m.group(1))
    if m.group(2) is None:
        end = start
    else:
        end = int(m.group(3)) if m.group(3) else None
    if start < 1 or (end is not None and end < start):
        raise DirectiveError(f"Invalid range '{text}'")
    return LineRange(start, end)


def parse_ranges(value: str) -> tuple[LineRange, ...]:
    """Parse '1-3,7,10-' into LineRanges."""
    parts = [p for p in value.split(',') if p.strip()]
    if not parts:
        raise DirectiveError(f"Invalid range '{value}'")
    return tuple(_parse_range(p) for p in parts)


def parse_directive(query: str | None, fragment: str | None) -> Directive:
    """Build a Directive from the '?...' and '#...' parts of a snippet path.

    Fragment forms: '#L3', '#L3-L9', '#tagname'.
    Query forms: 'name=tag', 'range=1-3,7', 'start=3&end=9'.
    """
    if fragment:
        m = _LINE_FRAGMENT_RE.match(fragment)
        if m:
            start = int(m.group(1))
            end = int(m.group(2)) if m.group(2) else start
            if start < 1 or end < start:
                raise DirectiveError(f"Invalid line range '#{fragment}'")
            return Directive(ranges=(LineRange(start, end),))
        return Directive(tag=fragment)

    if not query:
        return Directive()

    params = {k.lower(): v[-1] for k, v in parse_qs(query, keep_blank_values=True).items()}
    if params.get('name'):
        return Directive(tag=params['name'])
    if 'range' in params:
        return Directive(ranges=parse_ranges(params['range']))
    if 'start' in params or 'end' in params:
        try:
            start = int(params.get('start') or 1)
            end = int(params['end']) if params.get('end') else None
        except ValueError:
            raise DirectiveError(f"Invalid start/end in '?{query}'") from None
        if start < 1 or (end is not None and end < start):
            raise DirectiveError(f"Invalid start/end in '?{query}'")
        return Directive(ranges=(LineRange(start, end),))
    return Directive()
