"""arxiv_importer package

Public importable API for programmatic usage. Prefer importing the
high-level helpers from the package root::

	from arxiv_importer import import_arxiv_paper, parse_arxiv_input, ImportOutcome

Use ``asyncio.run`` (or the ``*_sync`` wrappers below) to call the async
helpers from synchronous code.
"""

__version__ = "0.1.0"

from .models import ImportOutcome, PaperIdentity, PaperMetadata, SkipReason
from .identifiers import parse_arxiv_input
from .text import sanitize_title
from .feed import FeedError, FeedNetworkError, PaperNotFoundError, fetch_metadata
from .downloader import DownloadError
from .importer import import_arxiv_paper
from .library import LibraryError, scan_directory_for_pdfs

__all__ = [
	"ImportOutcome",
	"PaperIdentity",
	"PaperMetadata",
	"SkipReason",
	"FeedError",
	"FeedNetworkError",
	"PaperNotFoundError",
	"DownloadError",
	"LibraryError",
	"parse_arxiv_input",
	"sanitize_title",
	"fetch_metadata",
	"import_arxiv_paper",
	"scan_directory_for_pdfs",
]


def import_arxiv_paper_sync(*args, **kwargs):
	"""Synchronous wrapper for `import_arxiv_paper`.

	Example: import_arxiv_paper_sync("https://arxiv.org/abs/1706.03762", "downloads")
	"""
	import asyncio

	return asyncio.run(import_arxiv_paper(*args, **kwargs))


def fetch_metadata_sync(*args, **kwargs):
	"""Synchronous wrapper for `fetch_metadata`."""
	import asyncio

	return asyncio.run(fetch_metadata(*args, **kwargs))
