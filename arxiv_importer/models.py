from __future__ import annotations

from enum import Enum
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class SkipReason(str, Enum):
    """Machine-readable reasons attached to a skipped import."""

    INVALID_CONFLICT_POLICY = "invalid_conflict_policy"
    INVALID_LINK = "invalid_link"
    WRITE_FAILED = "write_failed"
    NETWORK_ERROR = "network_error"
    PAPER_NOT_FOUND = "paper_not_found"
    FILE_EXISTS = "file_exists"


class ConflictPolicy(str, Enum):
    SKIP = "skip"


class PaperIdentity(BaseModel):
    """Canonical arXiv id plus the version the caller asked for, if any."""

    model_config = ConfigDict(frozen=True)

    base_id: str
    version: Optional[int] = None


class PaperMetadata(BaseModel):
    """Normalized metadata for one arXiv paper, built from a single feed entry."""

    model_config = ConfigDict(frozen=True)

    arxiv_id: str
    version: int
    title: str
    authors: List[str] = []
    summary: str = ""
    published: str = ""
    updated: str = ""
    abs_url: str
    pdf_url: str


class ImportOutcome(BaseModel):
    """Result of importing a single paper.

    ``status`` is either ``downloaded`` or ``skipped``; a skipped outcome
    always carries a ``reason``. ``paper`` is set whenever metadata was
    resolved, even if a later step failed.
    """

    status: Literal["downloaded", "skipped"]
    reason: Optional[SkipReason] = None
    pdf_path: Optional[str] = None
    pdf_size: Optional[int] = None
    metadata_path: Optional[str] = None
    paper: Optional[PaperMetadata] = None

    @classmethod
    def skipped_with(cls, reason: SkipReason, paper: Optional[PaperMetadata] = None) -> "ImportOutcome":
        return cls(status="skipped", reason=reason, paper=paper)

    @property
    def downloaded(self) -> bool:
        return self.status == "downloaded"

    @property
    def skipped(self) -> bool:
        return self.status == "skipped"


class PdfFile(BaseModel):
    name: str
    path: str
    size: int


class ScanResult(BaseModel):
    files: List[PdfFile] = []
    total_count: int = 0
    error_count: int = 0
    errors: List[str] = []


class FileMetadata(BaseModel):
    name: str
    path: str
    size: int
    modified: Optional[int] = None


class FolderEvent(BaseModel):
    """A PDF appearing inside a watched folder."""

    model_config = ConfigDict(populate_by_name=True)

    watch_id: str = Field(alias="watchId")
    folder_path: str = Field(alias="folderPath")
    event_type: Literal["created"] = Field(default="created", alias="eventType")
    file_path: str = Field(alias="filePath")
