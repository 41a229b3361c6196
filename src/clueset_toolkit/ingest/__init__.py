"""
Module: ingest

Purpose:
    CSV ingest pipeline for clue sets. Tokenizes and parses CSV rows,
    validates the game's cardinality contract and builds the immutable
    round -> category -> clue hierarchy.

Key Functions:
    - tokenize_line(): Quote-aware CSV line splitting
    - parse_clue_rows(): CSV text -> ClueRecords
    - validate_game_structure(): Cardinality checks
    - build_clue_set(): ClueRecords -> ClueSetDocument
    - load_clue_set_from_text() / load_clue_set_from_file(): Whole pipeline

Key Classes:
    - GameFormat: Cardinality contract and value units
    - ParseError, StructureError, BuildError, ClueSetLoadError

Used By:
    - clueset_toolkit.upload: Parsing step of an upload
    - clueset_toolkit.cli: `validate` command
"""

from .config import GameFormat, DEFAULT_GAME_FORMAT
from .tokenizer import tokenize_line
from .parser import parse_clue_rows, ParseError
from .structure import validate_game_structure, StructureError
from .tree_builder import build_clue_set, clue_position, BuildError
from .pipeline import load_clue_set_from_text, load_clue_set_from_file, ClueSetLoadError

__all__ = [
    # Config
    "GameFormat",
    "DEFAULT_GAME_FORMAT",
    # Stages
    "tokenize_line",
    "parse_clue_rows",
    "validate_game_structure",
    "build_clue_set",
    "clue_position",
    # Pipeline
    "load_clue_set_from_text",
    "load_clue_set_from_file",
    # Errors
    "ParseError",
    "StructureError",
    "BuildError",
    "ClueSetLoadError",
]
