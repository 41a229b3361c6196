"""
Module: upload

Purpose:
    Upload workflow for clue set CSV files: file checks, name collection,
    duplicate handling and persistence through a Clue Store.

Key Functions:
    - handle_upload(): Run one upload end to end
    - validate_upload_file(): Type/size checks and suggested name
    - check_duplicate_name(): Case-insensitive lookup, fails open

Key Classes:
    - UploadOrchestrator, UploadState, UploadAttempt, UploadResult
    - UploadConfig, UploadFile, FileValidationResult
    - ClueStore, InMemoryClueStore, JsonDirectoryClueStore, StoreError
"""

from .config import UploadConfig, DEFAULT_UPLOAD_CONFIG
from .files import UploadFile, FileValidationResult, validate_upload_file
from .store import (
    ClueStore,
    StoredClueSet,
    ClueSetSummary,
    InMemoryClueStore,
    JsonDirectoryClueStore,
    StoreError,
)
from .orchestrator import (
    UploadOrchestrator,
    UploadState,
    UploadAttempt,
    UploadResult,
    DuplicateCheckResult,
    check_duplicate_name,
    handle_upload,
    OVERWRITE,
    CANCEL,
)

__all__ = [
    # Config
    "UploadConfig",
    "DEFAULT_UPLOAD_CONFIG",
    # Files
    "UploadFile",
    "FileValidationResult",
    "validate_upload_file",
    # Store
    "ClueStore",
    "StoredClueSet",
    "ClueSetSummary",
    "InMemoryClueStore",
    "JsonDirectoryClueStore",
    "StoreError",
    # Orchestration
    "UploadOrchestrator",
    "UploadState",
    "UploadAttempt",
    "UploadResult",
    "DuplicateCheckResult",
    "check_duplicate_name",
    "handle_upload",
    "OVERWRITE",
    "CANCEL",
]
