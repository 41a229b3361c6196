"""
Schemas Package

JSON schema definition and validation for serialized clue sets.
"""

from .validator import (
    validate_clue_set,
    ValidationError,
    CLUE_SET_SCHEMA_VERSION,
)

__all__ = [
    "validate_clue_set",
    "ValidationError",
    "CLUE_SET_SCHEMA_VERSION",
]
