"""
Module: clue_sets

Purpose:
    Provides the hierarchical clue set models: ClueEntry (one board cell),
    CategoryGroup (one board column) and ClueSetDocument (the whole game,
    three rounds). All models are frozen; the hierarchy builder creates them
    once and nothing mutates them afterwards.

Key Functions:
    - ClueSetDocument.categories(round): Categories for a round
    - ClueSetDocument.clue_count: Calculated total number of clues
    - ClueSetDocument.to_dict() / ClueSetDocument.from_dict(): Serialization

Dependencies:
    - dataclasses (std)
    - functools (std)
    - .records.Round

Used By:
    - ingest.tree_builder: Builds documents from records
    - core.utils.serialization: JSON storage
    - upload.store: Persistence boundary
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import cached_property
from typing import Iterator

from .records import Round


@dataclass(frozen=True, slots=True)
class ClueEntry:
    """
    A clue placed on the board (immutable).

    Attributes:
        value: Point value
        prompt: Clue text
        response: Correct response
        position: Board row, value // unit for the round (1 for final);
            1-based for standard board values, 0 below the unit
    """

    value: int
    prompt: str
    response: str
    position: int

    def __post_init__(self) -> None:
        if self.value < 0:
            raise ValueError(f"Clue value cannot be negative: {self.value}")
        if self.position < 0:
            raise ValueError(f"Clue position cannot be negative: {self.position}")

    def to_dict(self) -> dict:
        return {
            "value": self.value,
            "prompt": self.prompt,
            "response": self.response,
            "position": self.position,
        }

    @classmethod
    def from_dict(cls, data: dict) -> ClueEntry:
        return cls(
            value=int(data["value"]),
            prompt=str(data["prompt"]),
            response=str(data["response"]),
            position=int(data["position"]),
        )


@dataclass(frozen=True, slots=True)
class CategoryGroup:
    """
    A named category and its clues for one round (immutable).

    Attributes:
        name: Category label as it appeared in the CSV
        clues: Clues sorted ascending by value

    Invariants:
        - clues are in ascending value order
    """

    name: str
    clues: tuple[ClueEntry, ...] = ()

    def __post_init__(self) -> None:
        values = [clue.value for clue in self.clues]
        if values != sorted(values):
            raise ValueError(
                f"Clues in category {self.name!r} must be sorted by value: {values}"
            )

    @property
    def values(self) -> list[int]:
        """Clue values in board order."""
        return [clue.value for clue in self.clues]

    def __len__(self) -> int:
        return len(self.clues)

    def __iter__(self) -> Iterator[ClueEntry]:
        return iter(self.clues)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "clues": [clue.to_dict() for clue in self.clues],
        }

    @classmethod
    def from_dict(cls, data: dict) -> CategoryGroup:
        return cls(
            name=str(data["name"]),
            clues=tuple(ClueEntry.from_dict(c) for c in data.get("clues", [])),
        )


@dataclass(frozen=True)
class ClueSetDocument:
    """
    Complete clue set for one game (immutable).

    Attributes:
        name: Display name chosen for the clue set
        filename: Originating file name (or other source identifier)
        jeopardy: Categories of the first round, in first-seen order
        double: Categories of the second round, in first-seen order
        final: The single Final Jeopardy category

    Invariants:
        - final holds exactly one clue
        - clue_count is always calculated, never stored

    Example:
        >>> doc = build_clue_set(records, name="Trivia Night", source="trivia.csv")
        >>> len(doc.jeopardy), doc.clue_count
        (6, 61)
    """

    name: str
    filename: str
    jeopardy: tuple[CategoryGroup, ...]
    double: tuple[CategoryGroup, ...]
    final: CategoryGroup

    def __post_init__(self) -> None:
        if len(self.final.clues) != 1:
            raise ValueError(
                f"Final Jeopardy should have exactly 1 clue, found {len(self.final.clues)}"
            )

    # ─────────────────────────────────────────────────────────────────────────
    # Calculated Properties (NEVER stored)
    # ─────────────────────────────────────────────────────────────────────────

    @cached_property
    def clue_count(self) -> int:
        """Total clues across all three rounds."""
        return sum(len(group) for round_ in Round for group in self.categories(round_))

    # ─────────────────────────────────────────────────────────────────────────
    # Query Methods
    # ─────────────────────────────────────────────────────────────────────────

    def categories(self, round_: Round) -> tuple[CategoryGroup, ...]:
        """
        Get the categories for a round.

        The final round is returned as a one-element tuple so callers can
        treat every round the same way.
        """
        if round_ is Round.JEOPARDY:
            return self.jeopardy
        if round_ is Round.DOUBLE:
            return self.double
        return (self.final,)

    def category_names(self, round_: Round) -> list[str]:
        return [group.name for group in self.categories(round_)]

    # ─────────────────────────────────────────────────────────────────────────
    # Serialization
    # ─────────────────────────────────────────────────────────────────────────

    def to_dict(self) -> dict:
        """
        Serialize to dictionary for JSON storage.

        Note: clue_count is NOT stored.
        """
        return {
            "name": self.name,
            "filename": self.filename,
            "rounds": {
                Round.JEOPARDY.value: [g.to_dict() for g in self.jeopardy],
                Round.DOUBLE.value: [g.to_dict() for g in self.double],
                Round.FINAL.value: self.final.to_dict(),
            },
        }

    @classmethod
    def from_dict(cls, data: dict) -> ClueSetDocument:
        rounds = data["rounds"]
        return cls(
            name=str(data["name"]),
            filename=str(data.get("filename", "")),
            jeopardy=tuple(CategoryGroup.from_dict(g) for g in rounds[Round.JEOPARDY.value]),
            double=tuple(CategoryGroup.from_dict(g) for g in rounds[Round.DOUBLE.value]),
            final=CategoryGroup.from_dict(rounds[Round.FINAL.value]),
        )

    def __repr__(self) -> str:
        return (
            f"ClueSetDocument({self.name!r}, filename={self.filename!r}, "
            f"clues={self.clue_count})"
        )
