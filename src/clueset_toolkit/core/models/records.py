"""
Module: records

Purpose:
    Provides the Round enum and the ClueRecord dataclass - one clue exactly
    as it was read from a CSV row, before it is grouped into a clue set.

Key Classes:
    - Round: The three rounds of a game (jeopardy, double, final)
    - ClueRecord: Flat, typed clue row

Dependencies:
    - dataclasses (std)
    - enum (std)

Used By:
    - ingest.parser: Creates ClueRecords from CSV lines
    - ingest.structure: Counts records per round/category
    - ingest.tree_builder: Groups records into CategoryGroups
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Round(str, Enum):
    """Round a clue belongs to."""
    JEOPARDY = "jeopardy"  # First main round
    DOUBLE = "double"      # Second main round, doubled values
    FINAL = "final"        # Single closing clue

    def __str__(self) -> str:
        return self.value

    @property
    def display_name(self) -> str:
        """Human-readable round name used in error messages."""
        return _DISPLAY_NAMES[self]

    @classmethod
    def from_token(cls, token: str) -> Round | None:
        """
        Look up a round by its exact CSV token.

        Matching is case-sensitive and does not trim whitespace.

        Args:
            token: Raw round field from a CSV row

        Returns:
            Matching Round, or None if the token is not recognised
        """
        for member in cls:
            if member.value == token:
                return member
        return None


_DISPLAY_NAMES = {
    Round.JEOPARDY: "Jeopardy",
    Round.DOUBLE: "Double Jeopardy",
    Round.FINAL: "Final Jeopardy",
}

MAIN_ROUNDS: tuple[Round, ...] = (Round.JEOPARDY, Round.DOUBLE)


@dataclass(frozen=True, slots=True)
class ClueRecord:
    """
    A single parsed clue row (immutable).

    Attributes:
        round: Round the clue belongs to
        category: Category label, trimmed (may be empty)
        value: Point value, non-negative
        prompt: Clue text shown to players, trimmed
        response: Correct response, trimmed

    Example:
        >>> ClueRecord(Round.JEOPARDY, "SCIENCE", 200, "H2O", "What is water?")
        ClueRecord(jeopardy, 'SCIENCE', 200)
    """

    round: Round
    category: str
    value: int
    prompt: str
    response: str

    def __post_init__(self) -> None:
        if self.value < 0:
            raise ValueError(f"Clue value cannot be negative: {self.value}")

    def __repr__(self) -> str:
        return f"ClueRecord({self.round}, {self.category!r}, {self.value})"
