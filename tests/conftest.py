import asyncio
from typing import Callable, List, Optional

import httpx
import pytest

ATOM_HEADER = (
    '<?xml version="1.0" encoding="UTF-8"?>\n'
    '<feed xmlns="http://www.w3.org/2005/Atom" xmlns:arxiv="http://arxiv.org/schemas/atom">\n'
    "  <title>arXiv Query: id_list</title>\n"
)


def build_entry(
    entry_id: Optional[str],
    title: str = "Test Paper",
    authors: Optional[List[str]] = None,
    summary: str = "An abstract.",
    links: Optional[List[str]] = None,
    published: str = "2017-06-12T17:57:34Z",
    updated: str = "2023-08-02T00:41:18Z",
) -> str:
    parts = ["  <entry>"]
    if entry_id is not None:
        parts.append(f"    <id>{entry_id}</id>")
    parts.append(f"    <updated>{updated}</updated>")
    parts.append(f"    <published>{published}</published>")
    parts.append(f"    <title>{title}</title>")
    parts.append(f"    <summary>{summary}</summary>")
    for name in authors or []:
        parts.append(f"    <author><name>{name}</name></author>")
    for href in links or []:
        parts.append(f'    <link href="{href}" rel="alternate" type="text/html"/>')
    parts.append("  </entry>")
    return "\n".join(parts)


def build_feed(*entries: str) -> bytes:
    return (ATOM_HEADER + "\n".join(entries) + "\n</feed>\n").encode("utf-8")


@pytest.fixture
def make_feed() -> Callable[..., bytes]:
    """Build an Atom feed with a single entry."""

    def _make(entry_id: Optional[str], **kwargs) -> bytes:
        return build_feed(build_entry(entry_id, **kwargs))

    return _make


class BrokenPdfStream(httpx.AsyncByteStream):
    """Response body that drops the connection after the first chunk."""

    async def __aiter__(self):
        yield b"%PDF-1.4 partial"
        raise httpx.ReadError("connection reset by peer")


class StalledPdfStream(httpx.AsyncByteStream):
    """Response body that keeps the connection open without sending more data."""

    async def __aiter__(self):
        yield b"%PDF-1.4 "
        await asyncio.sleep(30)
        yield b"never sent"


class ArxivStub:
    """In-memory stand-in for the arXiv API and PDF endpoints."""

    def __init__(
        self,
        feed: bytes = b"",
        pdf: bytes = b"%PDF-1.4 FAKEPDF",
        feed_status: int = 200,
        pdf_status: int = 200,
        pdf_stream: Optional[httpx.AsyncByteStream] = None,
    ):
        self.feed = feed
        self.pdf = pdf
        self.feed_status = feed_status
        self.pdf_status = pdf_status
        self.pdf_stream = pdf_stream
        self.requests: List[httpx.Request] = []

    @property
    def calls(self) -> int:
        return len(self.requests)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.host == "export.arxiv.org":
            return httpx.Response(self.feed_status, content=self.feed)
        if request.url.path.startswith("/pdf/"):
            if self.pdf_stream is not None:
                return httpx.Response(self.pdf_status, stream=self.pdf_stream)
            return httpx.Response(self.pdf_status, content=self.pdf)
        return httpx.Response(404)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))
