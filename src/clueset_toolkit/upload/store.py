"""
Module: upload.store

Purpose:
    The Clue Store boundary: where finished clue sets are persisted and
    read back. The upload workflow only talks to the ClueStore protocol;
    two implementations are provided.

Key Classes:
    - ClueStore: Protocol the upload workflow depends on
    - StoredClueSet: Listing entry (id, name, owner)
    - ClueSetSummary: Category names per round for one stored clue set
    - InMemoryClueStore: Process-local store
    - JsonDirectoryClueStore: One JSON file per clue set plus a locked index
    - StoreError: Any store failure

Dependencies:
    - core.utils.serialization: JSON round trip with validation
    - upload.file_locking: Index locking (portalocker)

Used By:
    - upload.orchestrator: Duplicate lookup, delete, create
    - cli: list/show/delete commands
"""

from __future__ import annotations

import logging
import threading
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Protocol, Tuple

from clueset_toolkit.core.models import Round, ClueSetDocument
from clueset_toolkit.core.schemas.validator import ValidationError
from clueset_toolkit.core.utils.serialization import load_clue_set_json, save_clue_set_json

from .file_locking import locked_read_json, locked_read_modify_write_json

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """Clue Store operation failed."""
    pass


@dataclass(frozen=True)
class StoredClueSet:
    """
    One clue set as listed by the store.

    Attributes:
        id: Store-assigned identifier
        name: Display name
        owner_id: Owning user
        created_at: ISO-8601 UTC timestamp
        filename: Originating file name
    """
    id: str
    name: str
    owner_id: str
    created_at: str
    filename: str = ""


@dataclass(frozen=True)
class ClueSetSummary:
    """Name and category names of a stored clue set, for previews."""
    id: str
    name: str
    created_at: str
    jeopardy_categories: Tuple[str, ...]
    double_categories: Tuple[str, ...]
    final_category: str

    @classmethod
    def from_document(cls, entry: StoredClueSet, document: ClueSetDocument) -> ClueSetSummary:
        return cls(
            id=entry.id,
            name=entry.name,
            created_at=entry.created_at,
            jeopardy_categories=tuple(document.category_names(Round.JEOPARDY)),
            double_categories=tuple(document.category_names(Round.DOUBLE)),
            final_category=document.final.name,
        )


class ClueStore(Protocol):
    """
    Persistence boundary used by the upload workflow.

    Every method may raise StoreError. Implementations hold no per-upload
    state; one store may serve many concurrent uploads.
    """

    def list_clue_sets(self, owner_id: str) -> List[StoredClueSet]:
        """All clue sets owned by owner_id, newest first."""
        ...

    def delete_clue_set(self, clue_set_id: str, owner_id: str) -> None:
        """Delete a clue set; only its owner may delete it."""
        ...

    def create_clue_set(self, document: ClueSetDocument, owner_id: str) -> str:
        """Persist a new clue set and return its id."""
        ...

    def load_clue_set(self, clue_set_id: str) -> ClueSetDocument:
        """Read a persisted clue set back."""
        ...

    def summarize_clue_set(self, clue_set_id: str) -> ClueSetSummary:
        """Category names per round for a persisted clue set."""
        ...


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _new_id() -> str:
    return uuid.uuid4().hex


class InMemoryClueStore:
    """
    Clue Store kept in a process-local dict.

    Example:
        >>> store = InMemoryClueStore()
        >>> clue_set_id = store.create_clue_set(document, "user-1")
        >>> [c.name for c in store.list_clue_sets("user-1")]
        ['Trivia Night']
    """

    def __init__(self) -> None:
        self._entries: Dict[str, StoredClueSet] = {}
        self._documents: Dict[str, ClueSetDocument] = {}
        self._lock = threading.Lock()

    def list_clue_sets(self, owner_id: str) -> List[StoredClueSet]:
        with self._lock:
            owned = [e for e in self._entries.values() if e.owner_id == owner_id]
        return sorted(owned, key=lambda e: e.created_at, reverse=True)

    def delete_clue_set(self, clue_set_id: str, owner_id: str) -> None:
        with self._lock:
            entry = self._entries.get(clue_set_id)
            _check_owner(entry, clue_set_id, owner_id)
            del self._entries[clue_set_id]
            del self._documents[clue_set_id]
        logger.info(f"Deleted clue set {clue_set_id}")

    def create_clue_set(self, document: ClueSetDocument, owner_id: str) -> str:
        clue_set_id = _new_id()
        entry = StoredClueSet(
            id=clue_set_id,
            name=document.name,
            owner_id=owner_id,
            created_at=_now_iso(),
            filename=document.filename,
        )
        with self._lock:
            self._entries[clue_set_id] = entry
            self._documents[clue_set_id] = document
        logger.info(f"Created clue set {clue_set_id} ({document.name!r})")
        return clue_set_id

    def load_clue_set(self, clue_set_id: str) -> ClueSetDocument:
        with self._lock:
            document = self._documents.get(clue_set_id)
        if document is None:
            raise StoreError(f"Failed to load clue set: {clue_set_id} not found")
        return document

    def summarize_clue_set(self, clue_set_id: str) -> ClueSetSummary:
        with self._lock:
            entry = self._entries.get(clue_set_id)
            document = self._documents.get(clue_set_id)
        if entry is None or document is None:
            raise StoreError(f"Failed to retrieve clue set: {clue_set_id} not found")
        return ClueSetSummary.from_document(entry, document)


class JsonDirectoryClueStore:
    """
    Clue Store backed by a directory of JSON files.

    Layout:
        <root>/index.json              id -> listing entry
        <root>/clue_sets/<id>.json     serialized ClueSetDocument

    The index is updated under an exclusive file lock. Documents are
    validated against the clue set schema when read back.
    """

    INDEX_NAME = "index.json"
    DOCUMENTS_DIR = "clue_sets"

    def __init__(self, root: Path) -> None:
        self.root = Path(root)

    @property
    def index_path(self) -> Path:
        return self.root / self.INDEX_NAME

    def document_path(self, clue_set_id: str) -> Path:
        return self.root / self.DOCUMENTS_DIR / f"{clue_set_id}.json"

    @staticmethod
    def _empty_index() -> dict:
        return {"clue_sets": {}}

    def _read_entries(self) -> Dict[str, StoredClueSet]:
        try:
            index = locked_read_json(self.index_path, self._empty_index)
        except (OSError, ValueError) as e:
            raise StoreError(f"Failed to retrieve clue sets: {e}") from e
        return {
            clue_set_id: StoredClueSet(id=clue_set_id, **fields)
            for clue_set_id, fields in index.get("clue_sets", {}).items()
        }

    def list_clue_sets(self, owner_id: str) -> List[StoredClueSet]:
        owned = [e for e in self._read_entries().values() if e.owner_id == owner_id]
        return sorted(owned, key=lambda e: e.created_at, reverse=True)

    def delete_clue_set(self, clue_set_id: str, owner_id: str) -> None:
        def remove(index: dict) -> dict:
            fields = index.setdefault("clue_sets", {}).get(clue_set_id)
            entry = StoredClueSet(id=clue_set_id, **fields) if fields else None
            _check_owner(entry, clue_set_id, owner_id)
            del index["clue_sets"][clue_set_id]
            return index

        try:
            locked_read_modify_write_json(self.index_path, remove, self._empty_index)
            self.document_path(clue_set_id).unlink(missing_ok=True)
        except (OSError, ValueError) as e:
            raise StoreError(f"Failed to delete clue set: {e}") from e
        logger.info(f"Deleted clue set {clue_set_id}")

    def create_clue_set(self, document: ClueSetDocument, owner_id: str) -> str:
        clue_set_id = _new_id()
        fields = {
            "name": document.name,
            "owner_id": owner_id,
            "created_at": _now_iso(),
            "filename": document.filename,
        }

        def add(index: dict) -> dict:
            index.setdefault("clue_sets", {})[clue_set_id] = fields
            return index

        path = self.document_path(clue_set_id)
        try:
            save_clue_set_json(document, path)
        except OSError as e:
            raise StoreError(f"Failed to create clue set: {e}") from e

        try:
            locked_read_modify_write_json(self.index_path, add, self._empty_index)
        except (OSError, ValueError) as e:
            # Not listed in the index, so the document file would be unreachable.
            path.unlink(missing_ok=True)
            raise StoreError(f"Failed to create clue set: {e}") from e
        logger.info(f"Created clue set {clue_set_id} ({document.name!r})")
        return clue_set_id

    def load_clue_set(self, clue_set_id: str) -> ClueSetDocument:
        path = self.document_path(clue_set_id)
        try:
            return load_clue_set_json(path)
        except FileNotFoundError as e:
            raise StoreError(f"Failed to load clue set: {clue_set_id} not found") from e
        except (OSError, ValidationError) as e:
            raise StoreError(f"Failed to load clue set {clue_set_id}: {e}") from e

    def summarize_clue_set(self, clue_set_id: str) -> ClueSetSummary:
        entry = self._read_entries().get(clue_set_id)
        if entry is None:
            raise StoreError(f"Failed to retrieve clue set: {clue_set_id} not found")
        return ClueSetSummary.from_document(entry, self.load_clue_set(clue_set_id))


def _check_owner(entry: StoredClueSet | None, clue_set_id: str, owner_id: str) -> None:
    if entry is None:
        raise StoreError(f"Clue set not found: {clue_set_id}")
    if entry.owner_id != owner_id:
        raise StoreError(f"Clue set {clue_set_id} does not belong to {owner_id}")
