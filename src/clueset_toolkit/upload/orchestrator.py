"""
Module: upload.orchestrator

Purpose:
    Orchestrate a clue set upload from dropped file to stored clue set.
    Validate file -> Collect name -> Check duplicate -> (Resolve conflict)
    -> Parse -> Persist. Steps run strictly in sequence for one upload;
    nothing is written to the store before the PERSISTING step.

Key Functions:
    - handle_upload(): Main entry point for one upload
    - check_duplicate_name(): Case-insensitive name lookup (fails open)

Key Classes:
    - UploadOrchestrator: Runs the state machine against a store
    - UploadState: States of one upload
    - UploadAttempt: Transient state carried between steps
    - UploadResult: Success with an id, or failure with a message

Dependencies:
    - ingest.pipeline: Parsing step
    - upload.files: File checks
    - upload.store: ClueStore protocol

Used By:
    - cli: `upload` command
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional

from clueset_toolkit.core.models import ClueSetDocument
from clueset_toolkit.ingest import (
    load_clue_set_from_text,
    ParseError,
    StructureError,
    BuildError,
)

from .config import UploadConfig, DEFAULT_UPLOAD_CONFIG
from .files import UploadFile, FileValidationResult, validate_upload_file
from .store import ClueStore, StoreError

logger = logging.getLogger(__name__)


OVERWRITE = "overwrite"
CANCEL = "cancel"

NamePrompt = Callable[[str], Optional[str]]
ConflictPrompt = Callable[[str], Optional[str]]


class UploadState(str, Enum):
    """States of a single upload."""
    VALIDATING_FILE = "validating_file"
    COLLECTING_NAME = "collecting_name"
    CHECKING_DUPLICATE = "checking_duplicate"
    RESOLVING_CONFLICT = "resolving_conflict"
    PARSING = "parsing"
    PERSISTING = "persisting"
    DONE = "done"
    ABORTED = "aborted"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class DuplicateCheckResult:
    """
    Result of looking for an existing clue set with the same name.

    Attributes:
        is_duplicate: Whether a same-named clue set exists for the owner
        existing_id: Id of that clue set
        existing_name: Its stored name (may differ in case)
    """
    is_duplicate: bool
    existing_id: Optional[str] = None
    existing_name: Optional[str] = None


@dataclass(frozen=True)
class UploadResult:
    """
    Outcome of an upload: exactly one of clue_set_id or error is set.

    Example:
        >>> result = handle_upload(store, upload, "user-1", ask_name, ask_conflict)
        >>> result.success, result.clue_set_id
        (True, '3f2a...')
    """
    success: bool
    clue_set_id: Optional[str] = None
    error: Optional[str] = None

    def __post_init__(self) -> None:
        if self.success and (self.clue_set_id is None or self.error is not None):
            raise ValueError("Successful upload needs a clue_set_id and no error")
        if not self.success and (self.error is None or self.clue_set_id is not None):
            raise ValueError("Failed upload needs an error and no clue_set_id")

    @classmethod
    def ok(cls, clue_set_id: str) -> UploadResult:
        return cls(success=True, clue_set_id=clue_set_id)

    @classmethod
    def failed(cls, error: str) -> UploadResult:
        return cls(success=False, error=error)


@dataclass
class UploadAttempt:
    """
    Mutable state of one upload, owned by a single orchestrator run.

    Attributes:
        upload: The uploaded file
        owner_id: Acting user
        state: Current state
        validation: File check result
        name: Confirmed display name
        duplicate: Duplicate lookup result
        conflict_choice: Raw answer from the conflict prompt
        document: Parsed clue set
        history: Every state entered, in order
    """
    upload: UploadFile
    owner_id: str
    state: UploadState = UploadState.VALIDATING_FILE
    validation: Optional[FileValidationResult] = None
    name: Optional[str] = None
    duplicate: Optional[DuplicateCheckResult] = None
    conflict_choice: Optional[str] = None
    document: Optional[ClueSetDocument] = None
    history: List[UploadState] = field(default_factory=lambda: [UploadState.VALIDATING_FILE])

    @property
    def overwrite_id(self) -> Optional[str]:
        """Id of the clue set to delete before saving, if overwriting."""
        if self.conflict_choice == OVERWRITE and self.duplicate is not None:
            return self.duplicate.existing_id
        return None

    def advance(self, state: UploadState) -> None:
        logger.debug(f"Upload {self.upload.name!r}: {self.state} -> {state}")
        self.state = state
        self.history.append(state)


class UploadAborted(Exception):
    """Ends an upload early with a user-facing message."""
    pass


def check_duplicate_name(store: ClueStore, name: str, owner_id: str) -> DuplicateCheckResult:
    """
    Look for an existing clue set of owner_id whose name matches, ignoring case.

    A failing lookup is reported as "no duplicate" so a store hiccup never
    blocks an upload; the error is logged.

    Args:
        store: Clue Store to query
        name: Candidate display name
        owner_id: Acting user

    Returns:
        DuplicateCheckResult
    """
    try:
        existing = store.list_clue_sets(owner_id)
    except Exception as e:
        logger.warning(f"Duplicate check failed, assuming no duplicate: {e}", exc_info=True)
        return DuplicateCheckResult(is_duplicate=False)

    wanted = name.lower()
    for entry in existing:
        if entry.name.lower() == wanted:
            return DuplicateCheckResult(
                is_duplicate=True,
                existing_id=entry.id,
                existing_name=entry.name,
            )
    return DuplicateCheckResult(is_duplicate=False)


class UploadOrchestrator:
    """
    Runs the upload state machine for one store.

    The orchestrator keeps no state between runs; each call to run()
    creates its own UploadAttempt, so one instance may serve concurrent
    uploads.

    Example:
        >>> orchestrator = UploadOrchestrator(JsonDirectoryClueStore(Path("store")))
        >>> result = orchestrator.run(upload, "user-1", input_name, input_conflict)
    """

    def __init__(self, store: ClueStore, config: UploadConfig = DEFAULT_UPLOAD_CONFIG):
        self.store = store
        self.config = config

    def run(
        self,
        upload: UploadFile,
        owner_id: str,
        on_name_prompt: NamePrompt,
        on_conflict_prompt: ConflictPrompt,
    ) -> UploadResult:
        """
        Run one upload end to end.

        Args:
            upload: The uploaded file
            owner_id: Acting user
            on_name_prompt: Called with the suggested name; returns the
                chosen name, or None/"" to cancel
            on_conflict_prompt: Called with the existing clue set's name;
                returns "overwrite", "cancel" or None to abort

        Returns:
            UploadResult; never raises for expected failures
        """
        attempt = UploadAttempt(upload=upload, owner_id=owner_id)
        logger.info(f"Starting upload of {upload.name!r} for {owner_id}")

        try:
            self._validate_file(attempt)
            self._collect_name(attempt, on_name_prompt)
            self._check_duplicate(attempt)
            if attempt.duplicate is not None and attempt.duplicate.is_duplicate:
                self._resolve_conflict(attempt, on_conflict_prompt)
            self._parse(attempt)
            clue_set_id = self._persist(attempt)
        except UploadAborted as e:
            logger.info(f"Upload of {upload.name!r} aborted during {attempt.state}: {e}")
            attempt.advance(UploadState.ABORTED)
            return UploadResult.failed(str(e))

        attempt.advance(UploadState.DONE)
        logger.info(f"Uploaded {upload.name!r} as {attempt.name!r} ({clue_set_id})")
        return UploadResult.ok(clue_set_id)

    # ─────────────────────────────────────────────────────────────────────────
    # Steps
    # ─────────────────────────────────────────────────────────────────────────

    def _validate_file(self, attempt: UploadAttempt) -> None:
        attempt.validation = validate_upload_file(attempt.upload, self.config)
        if not attempt.validation.is_valid:
            raise UploadAborted(attempt.validation.error)

    def _collect_name(self, attempt: UploadAttempt, on_name_prompt: NamePrompt) -> None:
        attempt.advance(UploadState.COLLECTING_NAME)
        name = on_name_prompt(attempt.validation.suggested_name)
        if not name:
            raise UploadAborted(self.config.cancel_message)
        attempt.name = name

    def _check_duplicate(self, attempt: UploadAttempt) -> None:
        attempt.advance(UploadState.CHECKING_DUPLICATE)
        attempt.duplicate = check_duplicate_name(self.store, attempt.name, attempt.owner_id)

    def _resolve_conflict(self, attempt: UploadAttempt, on_conflict_prompt: ConflictPrompt) -> None:
        attempt.advance(UploadState.RESOLVING_CONFLICT)
        choice = on_conflict_prompt(attempt.duplicate.existing_name)
        if not choice:
            raise UploadAborted(self.config.cancel_message)
        attempt.conflict_choice = choice
        if choice != OVERWRITE:
            logger.info(f"Keeping existing clue set {attempt.duplicate.existing_id}; saving a new copy")

    def _parse(self, attempt: UploadAttempt) -> None:
        attempt.advance(UploadState.PARSING)
        try:
            text = attempt.upload.read_text(self.config.encoding)
        except UnicodeDecodeError as e:
            raise UploadAborted(f"File is not valid {self.config.encoding} text: {e}") from e

        try:
            attempt.document = load_clue_set_from_text(
                text,
                name=attempt.name,
                source=attempt.upload.name,
                game_format=self.config.game_format,
            )
        except (ParseError, StructureError, BuildError) as e:
            raise UploadAborted(str(e)) from e

    def _persist(self, attempt: UploadAttempt) -> str:
        attempt.advance(UploadState.PERSISTING)
        try:
            if attempt.overwrite_id is not None:
                self.store.delete_clue_set(attempt.overwrite_id, attempt.owner_id)
            return self.store.create_clue_set(attempt.document, attempt.owner_id)
        except StoreError as e:
            raise UploadAborted(str(e)) from e


def handle_upload(
    store: ClueStore,
    upload: UploadFile,
    owner_id: str,
    on_name_prompt: NamePrompt,
    on_conflict_prompt: ConflictPrompt,
    *,
    config: UploadConfig = DEFAULT_UPLOAD_CONFIG,
) -> UploadResult:
    """
    Handle one clue set upload.

    Convenience wrapper around UploadOrchestrator(store, config).run(...).
    """
    return UploadOrchestrator(store, config).run(
        upload, owner_id, on_name_prompt, on_conflict_prompt
    )
