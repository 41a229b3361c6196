"""
Module: ingest.pipeline

Purpose:
    Run the full CSV ingest pipeline: parse -> validate structure -> build.
    Each stage fails fast; nothing partial is returned.

Key Functions:
    - load_clue_set_from_text(): Pipeline over in-memory CSV text
    - load_clue_set_from_file(): Pipeline over a CSV file on disk

Key Classes:
    - ClueSetLoadError: File could not be read

Dependencies:
    - ingest.parser, ingest.structure, ingest.tree_builder
    - common.naming: Default display names

Used By:
    - upload.orchestrator: Parsing step of an upload
    - cli: `validate` command
"""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Optional

from clueset_toolkit.common.naming import filename_to_display_name
from clueset_toolkit.core.models import ClueSetDocument

from .config import GameFormat, DEFAULT_GAME_FORMAT
from .parser import parse_clue_rows
from .structure import validate_game_structure
from .tree_builder import build_clue_set

logger = logging.getLogger(__name__)


class ClueSetLoadError(Exception):
    """Error reading a clue set file."""
    pass


def load_clue_set_from_text(
    text: str,
    *,
    name: str,
    source: str,
    game_format: GameFormat = DEFAULT_GAME_FORMAT,
) -> ClueSetDocument:
    """
    Parse, validate and build a clue set from CSV text.

    Pipeline:
    1. Parse rows (ParseError on malformed input)
    2. Validate cardinalities (StructureError on a bad layout)
    3. Build the round -> category -> clue tree

    Args:
        text: Full CSV content including header
        name: Display name for the clue set
        source: Originating file name, kept on the document
        game_format: Cardinality contract

    Returns:
        ClueSetDocument

    Raises:
        ParseError, StructureError, BuildError: From the failing stage

    Example:
        >>> doc = load_clue_set_from_text(csv_text, name="Trivia", source="trivia.csv")
        >>> doc.clue_count
        61
    """
    start_time = time.perf_counter()

    records = parse_clue_rows(text, game_format=game_format)
    validate_game_structure(records, game_format=game_format)
    document = build_clue_set(records, name=name, source=source, game_format=game_format)

    elapsed_ms = (time.perf_counter() - start_time) * 1000
    logger.info(f"Loaded clue set {name!r} from {source}: {len(records)} clues ({elapsed_ms:.1f} ms)")
    return document


def load_clue_set_from_file(
    path: Path,
    name: Optional[str] = None,
    *,
    encoding: str = "utf-8",
    game_format: GameFormat = DEFAULT_GAME_FORMAT,
) -> ClueSetDocument:
    """
    Load a clue set from a CSV file.

    Args:
        path: CSV file path
        name: Display name; derived from the file name when omitted
        encoding: Text encoding of the file
        game_format: Cardinality contract

    Raises:
        ClueSetLoadError: If the file is missing or cannot be decoded
        ParseError, StructureError, BuildError: From the pipeline
    """
    path = Path(path)
    try:
        text = path.read_text(encoding=encoding)
    except FileNotFoundError as e:
        raise ClueSetLoadError(f"Clue set file not found: {path}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise ClueSetLoadError(f"Failed to read {path}: {e}") from e

    return load_clue_set_from_text(
        text,
        name=name or filename_to_display_name(path),
        source=path.name,
        game_format=game_format,
    )
