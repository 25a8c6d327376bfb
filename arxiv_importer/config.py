"""Runtime configuration for arxiv-importer.

Defaults target the public arXiv endpoints. A handful of values can be
overridden from the environment, which is mostly useful for pointing the
importer at a mirror or a local test server.
"""
from __future__ import annotations

import logging
import math
import os

from pydantic import BaseModel

from . import __version__

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://export.arxiv.org/api/query"
DEFAULT_USER_AGENT = f"arxiv-importer/{__version__} arXiv importer"


class ImporterConfig(BaseModel):
    api_url: str = DEFAULT_API_URL
    abs_base_url: str = "https://arxiv.org/abs/"
    pdf_base_url: str = "https://arxiv.org/pdf/"
    user_agent: str = DEFAULT_USER_AGENT
    timeout: float = 45.0
    title_max_chars: int = 96
    source_tag: str = "arxiv"

    def abs_url(self, versioned_id: str) -> str:
        return f"{self.abs_base_url}{versioned_id}"

    def pdf_url(self, versioned_id: str) -> str:
        return f"{self.pdf_base_url}{versioned_id}.pdf"


def load_config() -> ImporterConfig:
    """Build the configuration, applying ``ARXIV_IMPORTER_*`` overrides.

    An unusable ``ARXIV_IMPORTER_TIMEOUT`` is ignored with a warning.
    """
    overrides = {}
    if api_url := os.getenv("ARXIV_IMPORTER_API_URL"):
        overrides["api_url"] = api_url
    if user_agent := os.getenv("ARXIV_IMPORTER_USER_AGENT"):
        overrides["user_agent"] = user_agent
    if timeout := os.getenv("ARXIV_IMPORTER_TIMEOUT"):
        try:
            value = float(timeout)
        except ValueError:
            value = 0.0
        if value > 0 and math.isfinite(value):
            overrides["timeout"] = value
        else:
            logger.warning("Ignoring invalid ARXIV_IMPORTER_TIMEOUT=%r", timeout)
    return ImporterConfig(**overrides)
