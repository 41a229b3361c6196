"""
Module: ingest.tree_builder

Purpose:
    Builds immutable ClueSetDocument trees from validated records. Converts
    the flat record list into round -> category -> clue, assigns each clue
    its board position and orders clues by value.

Key Functions:
    - build_clue_set(): Build a ClueSetDocument from records
    - clue_position(): Board row for a clue value in a round

Key Classes:
    - BuildError: Contract violation from a caller that skipped validation

Dependencies:
    - core.models: Round, ClueRecord, ClueEntry, CategoryGroup, ClueSetDocument
    - ingest.structure: Category grouping

Used By:
    - ingest.pipeline: Final stage of loading a clue set
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Sequence, Tuple

from clueset_toolkit.core.models import (
    Round,
    ClueRecord,
    ClueEntry,
    CategoryGroup,
    ClueSetDocument,
)

from .config import GameFormat, DEFAULT_GAME_FORMAT
from .structure import group_by_category, records_for_round

logger = logging.getLogger(__name__)


class BuildError(Exception):
    """Records cannot be turned into a clue set."""
    pass


@dataclass
class CategoryBuilder:
    """
    Mutable builder for one category.

    Collects entries in input order; freeze() sorts them by value and
    produces the immutable CategoryGroup.
    """
    name: str
    entries: List[ClueEntry] = field(default_factory=list)

    def add(self, entry: ClueEntry) -> None:
        self.entries.append(entry)

    def freeze(self) -> CategoryGroup:
        ordered = sorted(self.entries, key=lambda entry: entry.value)
        return CategoryGroup(name=self.name, clues=tuple(ordered))


def clue_position(
    value: int,
    round_: Round,
    game_format: GameFormat = DEFAULT_GAME_FORMAT,
) -> int:
    """
    Derive the board row of a clue from its value.

    Jeopardy: 200, 400, ... 1000 -> 1..5. Double: 400, 800, ... 2000 -> 1..5.
    Final is always 1.

    Main-round positions are `value // unit` with no clamping or
    de-duplication. A value below the unit gives position 0, and values
    that are not multiples of the unit can share a position (200 and 300
    both give 1). Clue order within a category is by value, so positions
    are informational only.

    Raises:
        BuildError: If the round has no value unit configured
    """
    if round_ is Round.FINAL:
        return 1

    unit = game_format.value_units.get(round_)
    if unit is None:
        raise BuildError(f"Unknown round type: {round_}")
    return value // unit


def build_clue_set(
    records: Sequence[ClueRecord],
    *,
    name: str,
    source: str,
    game_format: GameFormat = DEFAULT_GAME_FORMAT,
) -> ClueSetDocument:
    """
    Build a ClueSetDocument from validated records.

    Categories keep first-seen order; clues inside a category are sorted
    ascending by value (not by position).

    Args:
        records: Records that passed validate_game_structure()
        name: Display name for the clue set
        source: Originating file name
        game_format: Value units for position derivation

    Returns:
        Immutable ClueSetDocument

    Raises:
        BuildError: If the final round does not hold exactly one record
    """
    jeopardy = _build_round(records_for_round(records, Round.JEOPARDY), Round.JEOPARDY, game_format)
    double = _build_round(records_for_round(records, Round.DOUBLE), Round.DOUBLE, game_format)
    final = _build_final(records_for_round(records, Round.FINAL))

    document = ClueSetDocument(
        name=name,
        filename=source,
        jeopardy=jeopardy,
        double=double,
        final=final,
    )
    logger.debug(
        f"Built clue set {name!r}: {len(jeopardy)} + {len(double)} categories, "
        f"{document.clue_count} clues"
    )
    return document


def _build_round(
    rows: Sequence[ClueRecord],
    round_: Round,
    game_format: GameFormat,
) -> Tuple[CategoryGroup, ...]:
    """Group one main round into categories."""
    builders = []
    for category, clues in group_by_category(rows).items():
        builder = CategoryBuilder(category)
        for record in clues:
            builder.add(ClueEntry(
                value=record.value,
                prompt=record.prompt,
                response=record.response,
                position=clue_position(record.value, round_, game_format),
            ))
        builders.append(builder)
    return tuple(builder.freeze() for builder in builders)


def _build_final(rows: Sequence[ClueRecord]) -> CategoryGroup:
    if len(rows) != 1:
        raise BuildError(f"Final Jeopardy should have exactly 1 clue, found {len(rows)}")

    record = rows[0]
    return CategoryGroup(
        name=record.category,
        clues=(ClueEntry(
            value=record.value,
            prompt=record.prompt,
            response=record.response,
            position=1,
        ),),
    )
