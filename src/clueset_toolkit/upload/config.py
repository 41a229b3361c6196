"""
Module: upload.config

Purpose:
    Configuration for the clue set upload workflow: accepted file types,
    size ceiling, fallback name and the game format uploads are checked
    against.

Key Classes:
    - UploadConfig: Immutable upload settings

Used By:
    - upload.files: File checks and suggested names
    - upload.orchestrator: Whole upload workflow
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple

from clueset_toolkit.ingest.config import GameFormat, DEFAULT_GAME_FORMAT


MAX_UPLOAD_BYTES = 10 * 1024 * 1024  # 10 MiB


@dataclass(frozen=True)
class UploadConfig:
    """
    Settings for one upload workflow (immutable).

    Attributes:
        max_size_bytes: Largest accepted file; larger files are rejected
        allowed_extensions: Lower-case file extensions accepted as CSV
        content_type_marker: Substring of a declared content type that marks CSV
        default_name: Suggested name when the file name has nothing usable
        cancel_message: Error returned when the user backs out
        encoding: Text encoding used to decode uploaded content
        game_format: Cardinality contract applied while parsing

    Example:
        >>> config = UploadConfig(max_size_bytes=1024)
        >>> config.default_name
        'Untitled Clue Set'
    """

    max_size_bytes: int = MAX_UPLOAD_BYTES
    allowed_extensions: Tuple[str, ...] = (".csv",)
    content_type_marker: str = "csv"
    default_name: str = "Untitled Clue Set"
    cancel_message: str = "Upload cancelled by user"
    encoding: str = "utf-8"
    game_format: GameFormat = field(default_factory=lambda: DEFAULT_GAME_FORMAT)

    def __post_init__(self) -> None:
        if self.max_size_bytes <= 0:
            raise ValueError(f"max_size_bytes must be positive: {self.max_size_bytes}")
        if not self.allowed_extensions:
            raise ValueError("allowed_extensions must not be empty")
        if not self.default_name.strip():
            raise ValueError("default_name must not be blank")


DEFAULT_UPLOAD_CONFIG = UploadConfig()
