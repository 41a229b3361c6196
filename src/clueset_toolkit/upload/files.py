"""
Module: upload.files

Purpose:
    Describe an uploaded file and run the pre-parse checks on it: file
    type, size bounds and the suggested clue set name.

Key Functions:
    - validate_upload_file(): Check type/size and suggest a name

Key Classes:
    - UploadFile: Uploaded file name, declared type and raw content
    - FileValidationResult: Outcome of validate_upload_file()

Used By:
    - upload.orchestrator: VALIDATING_FILE step
    - cli: Builds UploadFile from a path
"""

from __future__ import annotations

import logging
import mimetypes
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from clueset_toolkit.common.naming import suggest_upload_name

from .config import UploadConfig, DEFAULT_UPLOAD_CONFIG

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UploadFile:
    """
    An uploaded file (immutable).

    Attributes:
        name: Original file name, e.g. "trivia-night.csv"
        content: Raw bytes
        content_type: Declared MIME type, may be empty
    """
    name: str
    content: bytes
    content_type: str = ""

    @property
    def size(self) -> int:
        return len(self.content)

    def read_text(self, encoding: str = "utf-8") -> str:
        return self.content.decode(encoding)

    @classmethod
    def from_path(cls, path: Path) -> UploadFile:
        """Read a file from disk, guessing its content type from the name."""
        path = Path(path)
        content_type, _ = mimetypes.guess_type(path.name)
        return cls(name=path.name, content=path.read_bytes(), content_type=content_type or "")


@dataclass(frozen=True)
class FileValidationResult:
    """
    Result of checking an uploaded file.

    Attributes:
        is_valid: Whether the upload may continue
        error: User-facing reason when invalid
        suggested_name: Cleaned-up name when valid
    """
    is_valid: bool
    error: Optional[str] = None
    suggested_name: Optional[str] = None


def validate_upload_file(
    upload: UploadFile,
    config: UploadConfig = DEFAULT_UPLOAD_CONFIG,
) -> FileValidationResult:
    """
    Check an uploaded file before it is parsed.

    Checks, in order:
    1. Declared content type mentions CSV, or the name ends in .csv
    2. Size does not exceed the configured ceiling
    3. File is not empty

    Args:
        upload: The uploaded file
        config: Upload settings

    Returns:
        FileValidationResult with either an error or a suggested name
    """
    lower_name = upload.name.lower()
    is_csv = (
        config.content_type_marker in upload.content_type.lower()
        or lower_name.endswith(config.allowed_extensions)
    )
    if not is_csv:
        return FileValidationResult(
            is_valid=False,
            error="Please select a CSV file. Only .csv files are supported.",
        )

    if upload.size > config.max_size_bytes:
        limit_mb = config.max_size_bytes / (1024 * 1024)
        return FileValidationResult(
            is_valid=False,
            error=f"File is too large. Please select a file smaller than {limit_mb:g}MB.",
        )

    if upload.size == 0:
        return FileValidationResult(
            is_valid=False,
            error="File appears to be empty. Please select a valid CSV file.",
        )

    suggested = suggest_upload_name(upload.name, config.default_name)
    logger.debug(f"File {upload.name!r} accepted ({upload.size} bytes), suggesting {suggested!r}")
    return FileValidationResult(is_valid=True, suggested_name=suggested)
