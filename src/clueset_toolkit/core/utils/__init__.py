"""Serialization helpers for core models."""

from .serialization import (
    serialize_clue_set,
    deserialize_clue_set,
    load_clue_set_json,
    save_clue_set_json,
)

__all__ = [
    "serialize_clue_set",
    "deserialize_clue_set",
    "load_clue_set_json",
    "save_clue_set_json",
]
