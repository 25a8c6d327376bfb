from __future__ import annotations

from pathlib import Path

from . import import_arxiv_paper_sync
from .library import scan_directory_for_pdfs
from .models import ImportOutcome, ScanResult


class ArxivImporterClient:
    """Lightweight synchronous client wrapping common operations.

    Examples:
        client = ArxivImporterClient(output_dir="downloads")
        client.import_paper("https://arxiv.org/abs/1706.03762")
    """

    def __init__(self, output_dir: str | Path = "downloads") -> None:
        self.output_dir = str(output_dir)

    def import_paper(self, link: str) -> ImportOutcome:
        return import_arxiv_paper_sync(link, self.output_dir, "skip")

    def scan(self, recursive: bool = False) -> ScanResult:
        return scan_directory_for_pdfs(self.output_dir, recursive=recursive)
