"""Display-name utilities.

Turns CSV file names into human-friendly clue set names, both for the
plain loader and for the upload flow's suggested name.
"""

from __future__ import annotations

import re
from pathlib import Path


_CSV_SUFFIX_RE = re.compile(r"\.csv$", re.IGNORECASE)
_UNSAFE_CHARS_RE = re.compile(r"[^A-Za-z0-9\s_-]")
_WHITESPACE_RE = re.compile(r"\s+")


def filename_to_display_name(filename: str | Path) -> str:
    """Convert a CSV file name to a title-cased display name.

    Args:
        filename: File name or Path; directories are ignored.

    Returns:
        Display name with separators turned into spaces.

    Examples:
        >>> filename_to_display_name("test-game-1.csv")
        'Test Game 1'
        >>> filename_to_display_name("world_capitals_easy.csv")
        'World Capitals Easy'
        >>> filename_to_display_name("before-and-after_2024.csv")
        'Before And After 2024'
    """
    if isinstance(filename, Path):
        filename = filename.name

    name = _CSV_SUFFIX_RE.sub("", filename)
    name = re.sub(r"[-_]", " ", name)
    return " ".join(word[:1].upper() + word[1:] for word in name.lower().split(" "))


def suggest_upload_name(filename: str, default: str) -> str:
    """Suggest a clue set name for an uploaded file.

    Strips the .csv extension, drops characters outside letters, digits,
    whitespace, underscore and hyphen, and collapses whitespace.

    Args:
        filename: Name of the uploaded file.
        default: Label returned when nothing usable remains.

    Examples:
        >>> suggest_upload_name("My Game!.csv", "Untitled Clue Set")
        'My Game'
        >>> suggest_upload_name("???.csv", "Untitled Clue Set")
        'Untitled Clue Set'
    """
    name = _CSV_SUFFIX_RE.sub("", filename)
    name = _UNSAFE_CHARS_RE.sub("", name)
    name = _WHITESPACE_RE.sub(" ", name).strip()
    return name or default
