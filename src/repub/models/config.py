"""Resolved configuration for a single build."""

import logging
from pathlib import Path

from pydantic import BaseModel, Field

from repub.models.book import BookMetadata

log = logging.getLogger(__name__)

DEFAULT_TOC_LEVEL = 2


def coerce_toc_level(raw: str | int | None) -> tuple[int, str | None]:
    """Parse a table-of-contents collapse depth.

    Returns the level and a warning message when the value was rejected and
    the default used instead.
    """
    if raw is None or raw == "":
        return DEFAULT_TOC_LEVEL, None
    try:
        level = int(raw)
    except (TypeError, ValueError):
        level = 0
    if level < 1:
        warning = (
            f"Invalid toc level {raw!r}, using default {DEFAULT_TOC_LEVEL}"
        )
        log.warning(warning)
        return DEFAULT_TOC_LEVEL, warning
    return level, None


class BuildConfig(BaseModel):
    """Everything the assembler needs; no value here is prompted for."""

    source: Path
    metadata: BookMetadata
    vertical: bool = False
    stylesheet: Path | None = None
    toc_level: int = Field(default=DEFAULT_TOC_LEVEL, ge=1)
    keep_intermediate: bool = False
    output_dir: Path = Field(default_factory=Path.cwd)
    use_zip_command: bool = False
    warnings: list[str] = Field(default_factory=list)
