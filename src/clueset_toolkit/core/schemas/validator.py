"""
Schema Validation Utilities

Validates serialized clue set dictionaries before they are turned back
into ClueSetDocument objects.

Two levels:
- Basic checks (always): required keys, types, non-negative values,
  positions, exactly one final clue
- Strict mode: full JSON Schema validation with `jsonschema`
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema


CLUE_SET_SCHEMA_VERSION = 1

_SCHEMAS: dict[str, dict] = {}


def _load_schema(name: str) -> dict:
    """Load a schema from the schemas directory."""
    if name not in _SCHEMAS:
        schema_path = Path(__file__).parent / f"{name}.schema.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")
        with open(schema_path, "r", encoding="utf-8") as f:
            _SCHEMAS[name] = json.load(f)
    return _SCHEMAS[name]


class ValidationError(Exception):
    """Raised when data fails schema validation."""

    def __init__(self, message: str, path: str = "", errors: list[str] | None = None):
        super().__init__(message)
        self.path = path
        self.errors = errors or []


def validate_clue_set(data: dict[str, Any], *, strict: bool = False) -> None:
    """
    Validate a serialized clue set.

    Args:
        data: Clue set dictionary as produced by ClueSetDocument.to_dict()
        strict: If True, also validate against clue_set.schema.json

    Raises:
        ValidationError: If data is invalid
    """
    required = ["name", "rounds"]
    missing = [f for f in required if f not in data]
    if missing:
        raise ValidationError(
            f"Missing required fields: {missing}",
            path="",
            errors=[f"Missing field: {f}" for f in missing],
        )

    version = data.get("schema_version", CLUE_SET_SCHEMA_VERSION)
    if version != CLUE_SET_SCHEMA_VERSION:
        raise ValidationError(
            f"Unsupported clue set schema version: {version} (expected {CLUE_SET_SCHEMA_VERSION})",
            path="schema_version",
        )

    if not isinstance(data["name"], str) or not data["name"].strip():
        raise ValidationError(f"Invalid name: {data['name']!r}", path="name")

    rounds = data["rounds"]
    if not isinstance(rounds, dict):
        raise ValidationError("rounds must be a dict", path="rounds")

    missing_rounds = [r for r in ("jeopardy", "double", "final") if r not in rounds]
    if missing_rounds:
        raise ValidationError(
            f"Missing rounds: {missing_rounds}",
            path="rounds",
            errors=[f"Missing round: {r}" for r in missing_rounds],
        )

    for round_key in ("jeopardy", "double"):
        categories = rounds[round_key]
        if not isinstance(categories, list):
            raise ValidationError(
                f"{round_key} must be a list of categories",
                path=f"rounds.{round_key}",
            )
        for i, category in enumerate(categories):
            _validate_category(category, f"rounds.{round_key}[{i}]")

    _validate_category(rounds["final"], "rounds.final")
    final_clues = rounds["final"]["clues"]
    if len(final_clues) != 1:
        raise ValidationError(
            f"Final round must have exactly 1 clue, found {len(final_clues)}",
            path="rounds.final.clues",
        )

    if strict:
        schema = _load_schema("clue_set")
        try:
            jsonschema.validate(data, schema)
        except jsonschema.ValidationError as e:
            raise ValidationError(
                f"Schema validation failed: {e.message}",
                path=".".join(str(p) for p in e.absolute_path),
                errors=[e.message],
            ) from e


def _validate_category(data: Any, path: str) -> None:
    """Validate a category node and its clues."""
    if not isinstance(data, dict):
        raise ValidationError("category must be a dict", path=path)

    missing = [f for f in ("name", "clues") if f not in data]
    if missing:
        raise ValidationError(
            f"Category missing required fields: {missing}",
            path=path,
            errors=[f"Missing field: {f}" for f in missing],
        )

    clues = data["clues"]
    if not isinstance(clues, list):
        raise ValidationError("clues must be a list", path=f"{path}.clues")

    for i, clue in enumerate(clues):
        _validate_clue(clue, f"{path}.clues[{i}]")


def _validate_clue(data: Any, path: str) -> None:
    """Validate a single clue entry."""
    if not isinstance(data, dict):
        raise ValidationError("clue must be a dict", path=path)

    required = ["value", "prompt", "response", "position"]
    missing = [f for f in required if f not in data]
    if missing:
        raise ValidationError(
            f"Clue missing required fields: {missing}",
            path=path,
            errors=[f"Missing field: {f}" for f in missing],
        )

    value = data["value"]
    if not isinstance(value, int) or isinstance(value, bool) or value < 0:
        raise ValidationError(
            f"Invalid value: {value!r} (must be non-negative integer)",
            path=f"{path}.value",
        )

    position = data["position"]
    if not isinstance(position, int) or isinstance(position, bool) or position < 0:
        raise ValidationError(
            f"Invalid position: {position!r} (must be non-negative integer)",
            path=f"{path}.position",
        )
