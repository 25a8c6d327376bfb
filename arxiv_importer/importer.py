"""Import pipeline for a single arXiv paper.

`import_arxiv_paper` runs the whole flow for one user request:
parse link -> prepare directory -> fetch metadata -> check for an existing
download -> fetch PDF -> write PDF and sidecar JSON.

Every failure is turned into a skipped :class:`ImportOutcome` with a reason
code; the underlying error is only logged. Once metadata has been resolved
it is attached to the outcome, including on later failures.

The existence check and the writes are not locked: two concurrent imports
of the same paper version may both download it, and the last write wins.
"""
from __future__ import annotations

import json
import logging
import time
from pathlib import Path
from typing import Optional, Tuple

import httpx

from .config import ImporterConfig, load_config
from .downloader import DownloadError, fetch_pdf, write_file
from .feed import FeedNetworkError, PaperNotFoundError, fetch_metadata, new_client
from .identifiers import parse_arxiv_input, safe_stem_id, versioned_id
from .models import ConflictPolicy, ImportOutcome, PaperMetadata, SkipReason
from .text import sanitize_title

logger = logging.getLogger(__name__)


def unix_timestamp_string() -> str:
    now = time.time()
    if now < 0:
        return "0"
    return str(int(now))


def artifact_paths(target: Path, paper: PaperMetadata, title_max_chars: int = 96) -> Tuple[Path, Path]:
    """Return the ``(pdf_path, metadata_path)`` pair for `paper` inside `target`."""
    stem_id = safe_stem_id(versioned_id(paper.arxiv_id, paper.version))
    stem = f"{stem_id}_{sanitize_title(paper.title, title_max_chars)}"
    return target / f"{stem}.pdf", target / f"{stem}.metadata.json"


def build_sidecar(paper: PaperMetadata, pdf_path: Path, source: str = "arxiv") -> dict:
    return {
        "source": source,
        "arxiv_id": paper.arxiv_id,
        "version": paper.version,
        "title": paper.title,
        "authors": list(paper.authors),
        "summary": paper.summary,
        "published": paper.published,
        "updated": paper.updated,
        "abs_url": paper.abs_url,
        "pdf_url": paper.pdf_url,
        "downloaded_at": unix_timestamp_string(),
        "pdf_path": str(pdf_path),
    }


def _prepare_target(target_dir: str | Path) -> Optional[Path]:
    if not str(target_dir).strip():
        return None

    target = Path(target_dir)
    if not target.exists():
        try:
            target.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            logger.warning("Failed to create target directory %s: %r", target, exc)
            return None

    if not target.is_dir():
        logger.warning("Target path %s is not a directory", target)
        return None
    return target


async def import_arxiv_paper(
    input_url_or_id: str,
    target_dir: str | Path,
    conflict_policy: str = ConflictPolicy.SKIP.value,
    *,
    client: Optional[httpx.AsyncClient] = None,
    config: Optional[ImporterConfig] = None,
) -> ImportOutcome:
    """Import one arXiv paper into `target_dir`.

    `input_url_or_id` may be a bare id (``1706.03762``, ``1706.03762v5``,
    ``hep-th/9901001``) or an ``arxiv.org/abs/...`` or ``arxiv.org/pdf/...``
    URL. Only the ``"skip"`` conflict policy is supported.

    Never raises for network or filesystem failures; check ``outcome.status``
    and ``outcome.reason`` instead.
    """
    if conflict_policy != ConflictPolicy.SKIP.value:
        return ImportOutcome.skipped_with(SkipReason.INVALID_CONFLICT_POLICY)

    identity = parse_arxiv_input(input_url_or_id)
    if identity is None:
        return ImportOutcome.skipped_with(SkipReason.INVALID_LINK)

    target = _prepare_target(target_dir)
    if target is None:
        return ImportOutcome.skipped_with(SkipReason.WRITE_FAILED)

    config = config or load_config()
    close_client = False
    if client is None:
        client = new_client(config)
        close_client = True

    try:
        try:
            paper = await fetch_metadata(identity.base_id, identity.version, client=client, config=config)
        except FeedNetworkError:
            return ImportOutcome.skipped_with(SkipReason.NETWORK_ERROR)
        except PaperNotFoundError:
            return ImportOutcome.skipped_with(SkipReason.PAPER_NOT_FOUND)

        pdf_path, metadata_path = artifact_paths(target, paper, config.title_max_chars)

        try:
            pdf_exists = pdf_path.exists()
            sidecar_exists = pdf_exists and metadata_path.exists()
        except OSError as exc:
            # e.g. ENAMETOOLONG for long multi-byte titles
            logger.warning("Cannot check target path %s: %r", pdf_path, exc)
            return ImportOutcome.skipped_with(SkipReason.WRITE_FAILED, paper)

        if pdf_exists:
            logger.info("Skipping %s: %s already exists", paper.arxiv_id, pdf_path)
            return ImportOutcome(
                status="skipped",
                reason=SkipReason.FILE_EXISTS,
                pdf_path=str(pdf_path),
                metadata_path=str(metadata_path) if sidecar_exists else None,
                paper=paper,
            )

        try:
            pdf_bytes = await fetch_pdf(paper.pdf_url, client=client, timeout=config.timeout)
        except DownloadError as exc:
            return ImportOutcome.skipped_with(exc.reason, paper)

        try:
            await write_file(pdf_path, pdf_bytes)
        except OSError as exc:
            logger.warning("Failed to write downloaded PDF %s: %r", pdf_path, exc)
            return ImportOutcome.skipped_with(SkipReason.WRITE_FAILED, paper)

        try:
            sidecar = json.dumps(build_sidecar(paper, pdf_path, config.source_tag), indent=2, ensure_ascii=False)
            await write_file(metadata_path, sidecar.encode("utf-8"))
        except (TypeError, ValueError, OSError) as exc:
            logger.warning("Failed to write metadata file %s: %r", metadata_path, exc)
            return ImportOutcome.skipped_with(SkipReason.WRITE_FAILED, paper)

        logger.info("Imported %sv%s into %s", paper.arxiv_id, paper.version, pdf_path)
        return ImportOutcome(
            status="downloaded",
            pdf_path=str(pdf_path),
            pdf_size=len(pdf_bytes),
            metadata_path=str(metadata_path),
            paper=paper,
        )

    finally:
        if close_client:
            await client.aclose()
