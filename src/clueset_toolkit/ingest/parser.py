"""
Module: ingest.parser

Purpose:
    Parse clue set CSV text into typed ClueRecord rows. The first line is a
    header and is never inspected; blank lines are skipped; every other
    line must be a complete, well-typed row or parsing stops.

Key Functions:
    - parse_clue_rows(): Parse full CSV text into ClueRecords

Key Classes:
    - ParseError: Exception for malformed input

Dependencies:
    - ingest.tokenizer: Line splitting
    - core.models.records: Round, ClueRecord

Used By:
    - ingest.pipeline: First stage of loading a clue set
"""

from __future__ import annotations

import logging
import re
from typing import List, Optional

from clueset_toolkit.core.models.records import Round, ClueRecord

from .config import GameFormat, DEFAULT_GAME_FORMAT
from .tokenizer import tokenize_line

logger = logging.getLogger(__name__)


_INTEGER_RE = re.compile(r"[+-]?[0-9]+")


class ParseError(Exception):
    """Malformed CSV input."""

    def __init__(self, message: str, row: Optional[int] = None):
        super().__init__(message)
        self.row = row


def parse_clue_rows(
    text: str,
    *,
    game_format: GameFormat = DEFAULT_GAME_FORMAT,
) -> List[ClueRecord]:
    """
    Parse CSV text into clue records.

    Validates:
    - Each data row has exactly 5 fields
    - The round field is exactly "jeopardy", "double" or "final"
    - The value field is a base-10, non-negative integer

    Row numbers in errors count lines after surrounding whitespace is
    trimmed from the whole text: the first remaining line is the header
    (row 1) and skipped blank lines still count. Leading blank lines in
    the file are not counted.

    Lines are split on "\\n" only; a trailing "\\r" is removed with the rest
    of the line's surrounding whitespace. Other Unicode line separators
    are ordinary characters inside a field.

    Args:
        text: Full CSV content, header included
        game_format: Delimiter, quote and field count settings

    Returns:
        Records in input order

    Raises:
        ParseError: On the first malformed row, or if the text is empty

    Example:
        >>> rows = parse_clue_rows("round,category,value,prompt,response\\n"
        ...                        "final,GEOGRAPHY,0,Largest country,Russia")
        >>> rows[0].round
        <Round.FINAL: 'final'>
    """
    content = text.strip()
    if not content:
        raise ParseError("CSV file is empty")

    lines = content.split("\n")
    records: List[ClueRecord] = []

    for row_number, raw_line in enumerate(lines[1:], start=2):
        line = raw_line.strip()
        if not line:
            continue
        records.append(_parse_row(line, row_number, game_format))

    logger.debug(f"Parsed {len(records)} clue rows from {len(lines)} lines")
    return records


def _parse_row(line: str, row_number: int, game_format: GameFormat) -> ClueRecord:
    """Convert one non-blank data line into a ClueRecord."""
    fields = tokenize_line(line, game_format.delimiter, game_format.quote_char)

    expected = game_format.expected_fields
    if len(fields) != expected:
        raise ParseError(
            f"Row {row_number} has {len(fields)} fields, expected {expected}",
            row=row_number,
        )

    round_token, category, value_text, prompt, response = fields

    round_ = Round.from_token(round_token)
    if round_ is None:
        raise ParseError(
            f'Invalid round type "{round_token}" in row {row_number}. '
            "Expected: jeopardy, double, or final",
            row=row_number,
        )

    value = _parse_value(value_text, row_number)

    return ClueRecord(
        round=round_,
        category=category.strip(),
        value=value,
        prompt=prompt.strip(),
        response=response.strip(),
    )


def _parse_value(value_text: str, row_number: int) -> int:
    """Parse the value column as a non-negative base-10 integer."""
    stripped = value_text.strip()
    if not _INTEGER_RE.fullmatch(stripped):
        raise ParseError(
            f'Invalid value "{value_text}" in row {row_number}. Expected a number',
            row=row_number,
        )

    value = int(stripped, 10)
    if value < 0:
        raise ParseError(
            f'Invalid value "{value_text}" in row {row_number}. '
            "Expected a non-negative number",
            row=row_number,
        )
    return value
