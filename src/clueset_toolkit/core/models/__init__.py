"""
Core Models Package

Immutable data models shared by the ingest pipeline and the upload flow.

All models are frozen dataclasses: records are created once per parse and
the clue set hierarchy is created once per build. Nothing downstream
mutates them.

| Model | Lifetime |
|-------|----------|
| `ClueRecord` | Between parse and hierarchy build |
| `ClueEntry` / `CategoryGroup` | Owned by their `ClueSetDocument` |
| `ClueSetDocument` | Until handed to a Clue Store or discarded |
"""

from .records import Round, ClueRecord, MAIN_ROUNDS
from .clue_sets import ClueEntry, CategoryGroup, ClueSetDocument

__all__ = [
    "Round",
    "ClueRecord",
    "MAIN_ROUNDS",
    "ClueEntry",
    "CategoryGroup",
    "ClueSetDocument",
]
