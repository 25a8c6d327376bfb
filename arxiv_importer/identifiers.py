"""Parsing of user-supplied arXiv references.

Accepts a bare identifier (``1706.03762``, ``hep-th/9901001v2``) or an
``arxiv.org`` abstract/PDF URL and reduces it to a :class:`PaperIdentity`.
Matching is exact: anything that is not one of the accepted shapes is
rejected instead of being searched for an id-looking substring.
"""
from __future__ import annotations

import re
from typing import Optional
from urllib.parse import urlparse

from .models import PaperIdentity

_ARXIV_HOSTS = {"arxiv.org", "www.arxiv.org"}

_BASE_ID_RE = re.compile(r"^(?:[A-Za-z.\-]+/[0-9]{7}|[0-9]{4}\.[0-9]{4,5})$")
_PLAIN_ID_RE = re.compile(
    r"^(?P<base>[A-Za-z.\-]+/[0-9]{7}|[0-9]{4}\.[0-9]{4,5})(?:v(?P<version>[0-9]+))?$"
)


def parse_plain_id(value: str) -> Optional[PaperIdentity]:
    """Parse an identifier with an optional ``vN`` suffix."""
    m = _PLAIN_ID_RE.fullmatch(value)
    if not m:
        return None
    version = m.group("version")
    return PaperIdentity(
        base_id=m.group("base").lower(),
        version=int(version) if version is not None else None,
    )


def parse_arxiv_input(value: str) -> Optional[PaperIdentity]:
    """Parse a bare arXiv id or an arxiv.org ``abs``/``pdf`` URL.

    Returns ``None`` for blank input, foreign hosts, unsupported URL paths
    and identifiers that match neither the legacy nor the modern scheme.
    """
    trimmed = (value or "").strip()
    if not trimmed:
        return None

    parsed = urlparse(trimmed)
    if parsed.scheme and parsed.netloc:
        host = (parsed.hostname or "").lower()
        if host not in _ARXIV_HOSTS:
            return None

        path = parsed.path.strip("/")
        if path.startswith("abs/"):
            return parse_plain_id(path[len("abs/"):])
        if path.startswith("pdf/"):
            candidate = path[len("pdf/"):]
            if candidate.endswith(".pdf"):
                candidate = candidate[: -len(".pdf")]
            return parse_plain_id(candidate)
        return None

    return parse_plain_id(trimmed)


def is_valid_base_id(base_id: str) -> bool:
    return bool(_BASE_ID_RE.match(base_id))


def versioned_id(base_id: str, version: int) -> str:
    return f"{base_id}v{version}"


def safe_stem_id(versioned: str) -> str:
    """Make a versioned id usable as a filename prefix (legacy ids contain ``/``)."""
    return versioned.replace("/", "_")
