"""Local paper library helpers: PDF discovery and simple file operations."""
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterable, List, Tuple

from .models import FileMetadata, PdfFile, ScanResult

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 10


class LibraryError(Exception):
    pass


def require_directory(dir_path: str | Path) -> Path:
    path = Path(dir_path)
    if not path.exists():
        raise LibraryError(f"Directory does not exist: {dir_path}")
    if not path.is_dir():
        raise LibraryError(f"Path is not a directory: {dir_path}")
    return path


def is_pdf_path(path: str | Path) -> bool:
    return Path(path).suffix.lower() == ".pdf"


def scan_directory_for_pdfs(dir_path: str | Path, recursive: bool = False, max_depth: int = DEFAULT_MAX_DEPTH) -> ScanResult:
    """List the PDF files below `dir_path`, sorted case-insensitively by name.

    Without `recursive` only the directory itself is scanned. With it,
    files up to `max_depth` levels below `dir_path` are included. Files
    whose metadata cannot be read are reported in ``errors`` rather than
    aborting the scan.
    """
    root = require_directory(dir_path)
    depth_limit = max_depth if recursive else 1

    files: List[PdfFile] = []
    errors: List[str] = []

    for dirpath, dirnames, filenames in os.walk(root):
        depth = len(Path(dirpath).relative_to(root).parts)
        if depth + 1 >= depth_limit:
            dirnames.clear()
        if depth + 1 > depth_limit:
            continue

        for name in filenames:
            entry = Path(dirpath) / name
            if not is_pdf_path(entry) or not entry.is_file():
                continue
            try:
                size = entry.stat().st_size
            except OSError as exc:
                errors.append(f"Failed to read metadata for {entry}: {exc}")
                continue
            files.append(PdfFile(name=name, path=str(entry), size=size))

    files.sort(key=lambda f: f.name.lower())
    if errors:
        logger.debug("Scan of %s finished with %d errors", root, len(errors))
    return ScanResult(files=files, total_count=len(files), error_count=len(errors), errors=errors)


def get_file_metadata(file_path: str | Path) -> FileMetadata:
    path = Path(file_path)
    if not path.exists():
        raise LibraryError(f"File does not exist: {file_path}")
    try:
        stat = path.stat()
    except OSError as exc:
        raise LibraryError(f"Failed to read file metadata: {exc}") from exc
    return FileMetadata(name=path.name, path=str(file_path), size=stat.st_size, modified=int(stat.st_mtime))


def verify_files_exist(file_paths: Iterable[str]) -> List[Tuple[str, bool]]:
    return [(p, Path(p).exists()) for p in file_paths]


def rename_file(old_path: str | Path, new_name: str) -> str:
    """Rename a file in place, keeping its extension.

    Refuses to overwrite an existing file. Returns the new path.
    """
    path = Path(old_path)
    if not path.exists():
        raise LibraryError(f"File does not exist: {old_path}")
    if not path.is_file():
        raise LibraryError(f"Path is not a file: {old_path}")

    new_filename = f"{new_name}{path.suffix}" if path.suffix else new_name
    new_path = path.parent / new_filename
    if new_path.exists():
        raise LibraryError(f"A file named '{new_filename}' already exists in this location")

    try:
        path.rename(new_path)
    except OSError as exc:
        raise LibraryError(f"Failed to rename file: {exc}") from exc
    return str(new_path)
