"""Downloader utilities for arxiv-importer.

Single-attempt PDF fetching and an atomic file writer. No retries: a
failed request is reported once to the caller.
"""
from __future__ import annotations

import asyncio
import logging
import os
from pathlib import Path
from typing import Optional

import aiofiles
import httpx

from .config import load_config
from .feed import new_client
from .models import SkipReason

logger = logging.getLogger(__name__)


class DownloadError(Exception):
    def __init__(self, reason: SkipReason, message: str) -> None:
        super().__init__(message)
        self.reason = reason


async def _read_pdf(client: httpx.AsyncClient, url: str) -> bytes:
    async with client.stream("GET", url) as resp:
        if resp.status_code == 404:
            logger.warning("arXiv PDF not found at %s", url)
            raise DownloadError(SkipReason.PAPER_NOT_FOUND, f"{url} returned 404")
        if not resp.is_success:
            logger.warning("arXiv PDF request to %s returned status %s", url, resp.status_code)
            raise DownloadError(SkipReason.NETWORK_ERROR, f"{url} returned {resp.status_code}")

        chunks = []
        async for chunk in resp.aiter_bytes():
            chunks.append(chunk)
        return b"".join(chunks)


async def fetch_pdf(url: str, client: Optional[httpx.AsyncClient] = None, timeout: Optional[float] = None) -> bytes:
    """Download the PDF at `url` and return its bytes.

    `timeout` bounds the whole request, body included. Raises DownloadError
    with reason ``paper_not_found`` on 404 and ``network_error`` on any
    other failure.
    """
    config = load_config()
    if timeout is None:
        timeout = config.timeout
    close_client = False
    if client is None:
        client = new_client(config)
        close_client = True

    try:
        return await asyncio.wait_for(_read_pdf(client, url), timeout=timeout)

    except (httpx.HTTPError, asyncio.TimeoutError) as exc:
        logger.warning("Failed to download arXiv PDF from %s: %r", url, exc)
        raise DownloadError(SkipReason.NETWORK_ERROR, f"failed to download {url}: {exc}") from exc

    finally:
        if close_client:
            await client.aclose()


async def write_file(dest: Path, data: bytes) -> Path:
    """Write `data` to `dest` via a temporary `.part` file.

    The destination is replaced in one step, so readers never observe a
    half-written file. Raises OSError on failure.
    """
    tmp = dest.with_suffix(dest.suffix + ".part")
    try:
        async with aiofiles.open(tmp, "wb") as f:
            await f.write(data)
        os.replace(str(tmp), str(dest))
    except OSError:
        tmp.unlink(missing_ok=True)
        raise
    return dest
