"""arXiv metadata feed client.

Fetches the Atom feed of the arXiv query API for a single identifier and
turns its first entry into a :class:`PaperMetadata`. Failures are reported
as one of two exceptions so callers can map them onto outcome reasons:

- :class:`FeedNetworkError` for transport failures and non-2xx responses
- :class:`PaperNotFoundError` when the feed has no usable entry
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional

import feedparser
import httpx

from .config import ImporterConfig, load_config
from .identifiers import parse_arxiv_input, versioned_id
from .models import PaperMetadata
from .text import compact_text

logger = logging.getLogger(__name__)


class FeedError(Exception):
    def __init__(self, base_id: str, message: str = "") -> None:
        super().__init__(message or base_id)
        self.base_id = base_id


class FeedNetworkError(FeedError):
    pass


class PaperNotFoundError(FeedError):
    pass


def new_client(config: ImporterConfig) -> httpx.AsyncClient:
    """Create the HTTP client used for both metadata and PDF requests."""
    return httpx.AsyncClient(
        timeout=config.timeout,
        headers={"User-Agent": config.user_agent},
        follow_redirects=True,
    )


def _entry_version(href: Optional[str], base_id: str) -> Optional[int]:
    if not href:
        return None
    identity = parse_arxiv_input(href)
    if identity is None or identity.base_id != base_id or identity.version is None:
        return None
    return max(identity.version, 1)


def resolve_latest_version(entry: Any, base_id: str) -> int:
    """Find the newest version advertised by a feed entry.

    The entry ``id`` wins; the entry links are only consulted when the id
    carries no version for ``base_id``. Defaults to 1.
    """
    version = _entry_version(entry.get("id"), base_id)
    if version is not None:
        return version

    for link in entry.get("links", []):
        version = _entry_version(link.get("href"), base_id)
        if version is not None:
            return version
    return 1


def entry_to_metadata(
    entry: Any,
    base_id: str,
    requested_version: Optional[int] = None,
    config: Optional[ImporterConfig] = None,
) -> PaperMetadata:
    config = config or load_config()
    if requested_version is not None:
        version = max(requested_version, 1)
    else:
        version = resolve_latest_version(entry, base_id)
    id_with_version = versioned_id(base_id, version)

    title = compact_text(entry.get("title")) or f"arXiv {id_with_version}"
    authors = [compact_text(a.get("name")) for a in entry.get("authors", [])]

    return PaperMetadata(
        arxiv_id=base_id,
        version=version,
        title=title,
        authors=[name for name in authors if name],
        summary=compact_text(entry.get("summary")),
        published=entry.get("published", "") or "",
        updated=entry.get("updated", "") or "",
        abs_url=config.abs_url(id_with_version),
        pdf_url=config.pdf_url(id_with_version),
    )


async def fetch_metadata(
    base_id: str,
    requested_version: Optional[int] = None,
    *,
    client: Optional[httpx.AsyncClient] = None,
    config: Optional[ImporterConfig] = None,
) -> PaperMetadata:
    """Fetch and decode the metadata of ``base_id`` with a single request.

    Raises:
        FeedNetworkError: the request failed or returned a non-2xx status.
        PaperNotFoundError: the feed contains no entry or could not be decoded.
    """
    config = config or load_config()
    close_client = False
    if client is None:
        client = new_client(config)
        close_client = True

    try:
        try:
            resp = await asyncio.wait_for(
                client.get(config.api_url, params={"id_list": base_id}),
                timeout=config.timeout,
            )
        except (httpx.HTTPError, asyncio.TimeoutError) as exc:
            logger.warning("Failed to fetch arXiv metadata for %s: %r", base_id, exc)
            raise FeedNetworkError(base_id, f"metadata request failed: {exc}") from exc

        if not resp.is_success:
            logger.warning("arXiv metadata API returned status %s for %s", resp.status_code, base_id)
            raise FeedNetworkError(base_id, f"metadata request returned {resp.status_code}")

        feed = feedparser.parse(resp.content)
        if not feed.entries:
            if feed.get("bozo"):
                logger.warning("Failed to parse arXiv metadata feed for %s: %r", base_id, feed.get("bozo_exception"))
            raise PaperNotFoundError(base_id, f"no feed entry for {base_id}")

        return entry_to_metadata(feed.entries[0], base_id, requested_version, config)

    finally:
        if close_client:
            await client.aclose()
