"""
Clue Set Toolkit Core Package

Shared data models, schema validation and serialization used by both the
CSV ingest pipeline and the upload workflow.

1. **Immutable Data Models**
   - Records, categories and documents are frozen dataclasses.

2. **Calculated Counts (Never Stored)**
   - `clue_count` is always derived from the category tree.

3. **Validated Round Trips**
   - Stored JSON is checked before it becomes a `ClueSetDocument` again.
"""

from .models import Round, ClueRecord, ClueEntry, CategoryGroup, ClueSetDocument

__all__ = [
    "Round",
    "ClueRecord",
    "ClueEntry",
    "CategoryGroup",
    "ClueSetDocument",
]
