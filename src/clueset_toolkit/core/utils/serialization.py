"""
Serialization Utilities

To/from JSON helpers for ClueSetDocument.

- `serialize_clue_set()` adds the schema version to `to_dict()` output
- `deserialize_clue_set()` validates before rebuilding the frozen models
- `load_clue_set_json()` / `save_clue_set_json()` wrap file access
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from ..models.clue_sets import ClueSetDocument
from ..schemas.validator import validate_clue_set, ValidationError, CLUE_SET_SCHEMA_VERSION


def serialize_clue_set(document: ClueSetDocument) -> dict[str, Any]:
    """
    Serialize a ClueSetDocument to a dictionary.

    The output can be written to JSON and will pass schema validation.

    Args:
        document: Clue set to serialize

    Returns:
        Dictionary suitable for JSON serialization
    """
    data = {"schema_version": CLUE_SET_SCHEMA_VERSION}
    data.update(document.to_dict())
    return data


def deserialize_clue_set(
    data: dict[str, Any],
    *,
    validate: bool = True,
    strict: bool = False,
) -> ClueSetDocument:
    """
    Deserialize a ClueSetDocument from a dictionary.

    Args:
        data: Dictionary from JSON
        validate: Whether to validate first
        strict: Use full JSON Schema validation when validating

    Returns:
        ClueSetDocument instance

    Raises:
        ValidationError: If validation fails or the models reject the data
    """
    if validate:
        validate_clue_set(data, strict=strict)

    try:
        return ClueSetDocument.from_dict(data)
    except (KeyError, TypeError, ValueError) as e:
        raise ValidationError(f"Cannot rebuild clue set: {e}", errors=[str(e)]) from e


def load_clue_set_json(path: Path, *, strict: bool = True) -> ClueSetDocument:
    """
    Load a clue set from a JSON file.

    Raises:
        FileNotFoundError: If file doesn't exist
        ValidationError: If the file is not valid JSON or fails validation
    """
    if not path.exists():
        raise FileNotFoundError(f"Clue set file not found: {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ValidationError(f"Invalid JSON in {path}: {e}", path=str(path)) from e

    return deserialize_clue_set(data, strict=strict)


def save_clue_set_json(document: ClueSetDocument, path: Path) -> None:
    """Save a clue set to a JSON file, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w", encoding="utf-8") as f:
        json.dump(serialize_clue_set(document), f, indent=2, ensure_ascii=False)
