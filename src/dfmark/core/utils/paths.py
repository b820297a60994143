"""Relative path helpers for references between documents"""

import posixpath
import re


_DRIVE_RE = re.compile(r'^[A-Za-z]:[\\/]')
_SCHEME_RE = re.compile(r'^[A-Za-z][A-Za-z0-9+.-]*://')


def normalize(path: str) -> str:
    """Return path with forward slashes and redundant segments collapsed."""
    return posixpath.normpath(path.replace('\\', '/'))


def is_relative(path: str | None) -> bool:
    """True when path is a relative file reference (not rooted, drive-qualified, or a URL)."""
    if not path:
        return False
    return not (
        path.startswith(('/', '\\', '~'))
        or _DRIVE_RE.match(path)
        or _SCHEME_RE.match(path)
    )


def resolve_path(path: str, base: str | None) -> str:
    """Resolve a relative path against the directory of base (a file path)."""
    directory = posixpath.dirname(normalize(base)) if base else ''
    return normalize(posixpath.join(directory, normalize(path)))


def is_outside_root(path: str) -> bool:
    """True when a resolved path climbs above the working root."""
    return path == '..' or path.startswith('../')


def split_reference(ref: str) -> tuple[str, str | None, str | None]:
    """Split a reference into (path, query, fragment); empty parts become None."""
    path, _, fragment = ref.partition('#')
    path, _, query = path.partition('?')
    return path, query or None, fragment or None
