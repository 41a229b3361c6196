import pytest
import sys
from pathlib import Path

# Add src to sys.path so we can import clueset_toolkit
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

from clueset_toolkit.upload import InMemoryClueStore, UploadFile


CSV_HEADER = "round,category,value,prompt,response"


def build_game_lines(categories: int = 6, clues: int = 5) -> list[str]:
    """Header plus a complete, legal game: two main rounds and a final clue."""
    lines = [CSV_HEADER]
    for round_token, unit, label in (("jeopardy", 200, "J"), ("double", 400, "D")):
        for c in range(1, categories + 1):
            for n in range(1, clues + 1):
                value = unit * n
                lines.append(
                    f"{round_token},{label}-Category {c},{value},"
                    f"{label}{c} clue for {value},{label}{c} response {n}"
                )
    lines.append('final,WORLD CAPITALS,0,"This capital sits on the Tiber, in Italy",What is Rome?')
    return lines


# Common test fixtures
@pytest.fixture
def game_lines() -> list[str]:
    """Return the lines of a valid clue set CSV (mutable copy per test)."""
    return build_game_lines()


@pytest.fixture
def game_csv(game_lines) -> str:
    """Return a valid clue set CSV as text."""
    return "\n".join(game_lines) + "\n"


@pytest.fixture
def memory_store() -> InMemoryClueStore:
    """Return an empty in-memory Clue Store."""
    return InMemoryClueStore()


@pytest.fixture
def csv_upload(game_csv) -> UploadFile:
    """Return a valid CSV upload."""
    return UploadFile(name="trivia-night.csv", content=game_csv.encode("utf-8"), content_type="text/csv")


@pytest.fixture
def make_game_lines():
    """Return the game line builder for custom category/clue counts."""
    return build_game_lines
