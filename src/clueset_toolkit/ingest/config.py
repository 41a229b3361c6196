"""
Module: ingest.config

Purpose:
    Game format configuration for the CSV ingest pipeline. Holds the
    cardinality contract (categories per round, clues per category) and
    the per-round value units used to derive board positions.

Key Classes:
    - GameFormat: Immutable cardinality and layout settings

Dependencies:
    - dataclasses (std)
    - core.models.records.Round

Used By:
    - ingest.parser: Expected field count
    - ingest.structure: Cardinality checks
    - ingest.tree_builder: Position derivation
    - upload.config: Embedded in UploadConfig
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict

from clueset_toolkit.core.models.records import Round


CSV_COLUMNS = ("round", "category", "value", "prompt", "response")


def _default_value_units() -> Dict[Round, int]:
    # 200..1000 -> rows 1..5; 400..2000 -> rows 1..5
    return {Round.JEOPARDY: 200, Round.DOUBLE: 400}


@dataclass(frozen=True)
class GameFormat:
    """
    Cardinality contract for a legal game (immutable).

    Attributes:
        categories_per_round: Categories in each main round (K)
        clues_per_category: Clues in each main-round category (M)
        final_clue_count: Clues in the final round
        value_units: Value step per main round; position = value // unit
        delimiter: Field separator for CSV rows
        quote_char: Quote character for CSV fields

    Example:
        >>> fmt = GameFormat()
        >>> fmt.clues_per_round, fmt.total_clues
        (30, 61)
    """

    categories_per_round: int = 6
    clues_per_category: int = 5
    final_clue_count: int = 1
    value_units: Dict[Round, int] = field(default_factory=_default_value_units)
    delimiter: str = ","
    quote_char: str = '"'

    def __post_init__(self) -> None:
        if self.categories_per_round <= 0:
            raise ValueError(
                f"categories_per_round must be positive: {self.categories_per_round}"
            )
        if self.clues_per_category <= 0:
            raise ValueError(
                f"clues_per_category must be positive: {self.clues_per_category}"
            )
        if self.final_clue_count != 1:
            raise ValueError(f"final_clue_count must be 1: {self.final_clue_count}")
        for round_ in (Round.JEOPARDY, Round.DOUBLE):
            unit = self.value_units.get(round_)
            if unit is None or unit <= 0:
                raise ValueError(f"value unit for {round_} must be positive: {unit}")
        if len(self.delimiter) != 1 or len(self.quote_char) != 1:
            raise ValueError("delimiter and quote_char must be single characters")
        if self.delimiter == self.quote_char:
            raise ValueError("delimiter and quote_char must differ")

    @property
    def expected_fields(self) -> int:
        """Fields every data row must have."""
        return len(CSV_COLUMNS)

    @property
    def clues_per_round(self) -> int:
        """Clues in each main round (K x M)."""
        return self.categories_per_round * self.clues_per_category

    @property
    def total_clues(self) -> int:
        """Clues in a complete game (2 x K x M + final)."""
        return 2 * self.clues_per_round + self.final_clue_count

    def expected_count(self, round_: Round) -> int:
        """Number of records a round must contain."""
        if round_ is Round.FINAL:
            return self.final_clue_count
        return self.clues_per_round


DEFAULT_GAME_FORMAT = GameFormat()
