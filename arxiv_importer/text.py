"""Small text helpers: whitespace normalization and filename-safe titles."""
from __future__ import annotations

import re

DEFAULT_TITLE_MAX_CHARS = 96
FALLBACK_STEM = "paper"

_ILLEGAL_CHARS_RE = re.compile(r'[/?<>\\:*|"\x00-\x1f\x80-\x9f]')
_RESERVED_NAME_RE = re.compile(r"^(con|prn|aux|nul|com[0-9]|lpt[0-9])(\..*)?$", re.IGNORECASE)
_DOTS_ONLY_RE = re.compile(r"^\.+$")
_TRAILING_RE = re.compile(r"[. ]+$")


def compact_text(value: str | None) -> str:
    """Collapse runs of whitespace into single spaces and trim the ends."""
    if not value:
        return ""
    return " ".join(value.split())


def strip_illegal_filename_chars(name: str) -> str:
    """Remove characters and names that are not valid as a path component
    on common filesystems (Windows being the strictest)."""
    name = _ILLEGAL_CHARS_RE.sub("", name)
    if _DOTS_ONLY_RE.match(name) or _RESERVED_NAME_RE.match(name):
        return ""
    return _TRAILING_RE.sub("", name)


def sanitize_title(title: str | None, max_chars: int = DEFAULT_TITLE_MAX_CHARS) -> str:
    """Turn a paper title into a bounded, filesystem-safe filename fragment.

    Words are joined with underscores, the result is cut to ``max_chars``
    characters and cleaned of illegal characters. Never returns an empty
    string; titles with nothing usable left become ``"paper"``.
    """
    compact = compact_text(title)
    spaced = compact.replace("/", " ").replace("\\", " ")
    joined = "_".join(spaced.split())
    truncated = joined[:max_chars]
    cleaned = strip_illegal_filename_chars(truncated)
    return cleaned or FALLBACK_STEM
