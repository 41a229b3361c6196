"""
Module: ingest.structure

Purpose:
    Check that a flat list of ClueRecords forms exactly one legal game:
    two main rounds of K categories x M clues and a single final clue.
    Fails on the first violated rule; never mutates its input.

Key Functions:
    - validate_game_structure(): Run every cardinality rule in order
    - group_by_category(): First-seen-ordered grouping shared with the builder

Key Classes:
    - StructureError: Cardinality violation with round/category context

Dependencies:
    - core.models.records: Round, ClueRecord
    - ingest.config: GameFormat

Used By:
    - ingest.pipeline: Between parsing and building
    - ingest.tree_builder: Category grouping
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence

from clueset_toolkit.core.models.records import Round, ClueRecord, MAIN_ROUNDS

from .config import GameFormat, DEFAULT_GAME_FORMAT

logger = logging.getLogger(__name__)


class StructureError(Exception):
    """Clue records do not satisfy the cardinality contract."""

    def __init__(
        self,
        message: str,
        *,
        round_name: str,
        expected: int,
        actual: int,
        category: Optional[str] = None,
    ):
        super().__init__(message)
        self.round_name = round_name
        self.expected = expected
        self.actual = actual
        self.category = category


def group_by_category(records: Sequence[ClueRecord]) -> Dict[str, List[ClueRecord]]:
    """
    Group records by exact category label.

    Keys are inserted in first-seen order, and Python dicts preserve
    insertion order, so iterating the result follows the input's category
    order. Labels are compared exactly: "Science" and "SCIENCE" are two
    categories.
    """
    groups: Dict[str, List[ClueRecord]] = {}
    for record in records:
        groups.setdefault(record.category, []).append(record)
    return groups


def records_for_round(records: Sequence[ClueRecord], round_: Round) -> List[ClueRecord]:
    return [record for record in records if record.round is round_]


def validate_game_structure(
    records: Sequence[ClueRecord],
    *,
    game_format: GameFormat = DEFAULT_GAME_FORMAT,
) -> None:
    """
    Validate that records encode exactly one legal game.

    Rules, in order:
    1. Jeopardy round has K x M records
    2. Double Jeopardy round has K x M records
    3. Final Jeopardy has exactly 1 record
    4. Each main round has exactly K distinct categories
    5. Each main-round category has exactly M records

    Args:
        records: Parsed records
        game_format: Cardinality contract

    Raises:
        StructureError: For the first rule that fails
    """
    by_round = {round_: records_for_round(records, round_) for round_ in Round}

    for round_ in Round:
        _check_round_count(round_, by_round[round_], game_format)

    for round_ in MAIN_ROUNDS:
        _check_round_categories(round_, by_round[round_], game_format)

    logger.debug(
        f"Structure valid: {len(records)} records, "
        f"{game_format.categories_per_round} categories per round"
    )


def _check_round_count(
    round_: Round,
    rows: Sequence[ClueRecord],
    game_format: GameFormat,
) -> None:
    expected = game_format.expected_count(round_)
    if len(rows) == expected:
        return

    if round_ is Round.FINAL:
        message = f"{round_.display_name} should have {expected} clue, found {len(rows)}"
    else:
        message = f"{round_.display_name} round should have {expected} clues, found {len(rows)}"
    raise StructureError(
        message,
        round_name=round_.display_name,
        expected=expected,
        actual=len(rows),
    )


def _check_round_categories(
    round_: Round,
    rows: Sequence[ClueRecord],
    game_format: GameFormat,
) -> None:
    groups = group_by_category(rows)

    expected_categories = game_format.categories_per_round
    if len(groups) != expected_categories:
        raise StructureError(
            f"{round_.display_name} should have {expected_categories} categories, "
            f"found {len(groups)}",
            round_name=round_.display_name,
            expected=expected_categories,
            actual=len(groups),
        )

    expected_clues = game_format.clues_per_category
    for category, clues in groups.items():
        if len(clues) != expected_clues:
            raise StructureError(
                f'Category "{category}" in {round_.display_name} should have '
                f"{expected_clues} clues, found {len(clues)}",
                round_name=round_.display_name,
                expected=expected_clues,
                actual=len(clues),
                category=category,
            )
