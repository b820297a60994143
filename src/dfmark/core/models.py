"""Token payloads and result types for the DFM render pipeline"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class TokenKind(str, Enum):
    """markdown-it token types produced by the DFM syntax rules"""
    xref = "dfm_xref"
    include_block = "dfm_include_block"
    include_inline = "dfm_include_inline"
    yaml_header = "dfm_yaml_header"
    fences = "dfm_fences"
    note = "dfm_note_open"
    note_close = "dfm_note_close"
    section = "dfm_section_open"
    section_close = "dfm_section_close"


# closing token type for each container kind
CLOSING = {TokenKind.note: TokenKind.note_close, TokenKind.section: TokenKind.section_close}


NOTE_TYPES = ("NOTE", "TIP", "WARNING", "IMPORTANT", "CAUTION")


@dataclass(frozen=True)
class Xref:
    href:  Optional[str] = None
    title: Optional[str] = None
    name:  Optional[str] = None


@dataclass(frozen=True)
class Include:
    src:   Optional[str]
    raw:   str
    title: Optional[str] = None
    name:  Optional[str] = None


@dataclass(frozen=True)
class YamlHeader:
    content: Optional[str]


@dataclass(frozen=True)
class Fences:
    """A code snippet reference; query/fragment carry the extraction directive."""
    path:     str
    raw:      str
    lang:     Optional[str] = None
    name:     Optional[str] = None
    title:    Optional[str] = None
    query:    Optional[str] = None
    fragment: Optional[str] = None


@dataclass(frozen=True)
class Note:
    note_type: str


@dataclass(frozen=True)
class Section:
    attributes: tuple[tuple[str, str], ...] = ()


def payload(token):
    """Return the DFM payload attached to a markdown-it token, or None."""
    return token.meta.get("dfm") if token.meta else None


@dataclass(frozen=True)
class ExtractionResult:
    """Selected code lines, or a human-readable reason why nothing was selected."""
    lines: tuple[str, ...] = ()
    error: Optional[str] = None

    def __post_init__(self):
        if bool(self.lines) == bool(self.error):
            raise ValueError("ExtractionResult needs either lines or an error, not both")

    @classmethod
    def ok(cls, lines) -> "ExtractionResult":
        return cls(lines=tuple(lines))

    @classmethod
    def fail(cls, error: str) -> "ExtractionResult":
        return cls(error=error)

    @property
    def succeeded(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class IncludeResult:
    """Rendered HTML of an included file, or the reason the include failed."""
    html:  str = ""
    error: Optional[str] = None

    def __post_init__(self):
        if self.error is not None and self.html:
            raise ValueError("IncludeResult cannot carry both html and an error")

    @classmethod
    def ok(cls, html: str) -> "IncludeResult":
        return cls(html=html)

    @classmethod
    def fail(cls, error: str) -> "IncludeResult":
        return cls(error=error)

    @property
    def succeeded(self) -> bool:
        return self.error is None


@dataclass
class SplitToken:
    """One run of blockquote children sharing a kind; token is None for plain runs."""
    token: Optional[object]
    inner: list[list] = field(default_factory=list)   # child blocks, each a list of markdown-it tokens


@dataclass
class RenderedDoc:
    """Output of rendering one document: HTML plus every file it pulled in."""
    path:         str
    html:         str
    dependencies: list[str] = field(default_factory=list)
