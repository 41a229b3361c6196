"""
Tests for the clueset command-line interface.
"""

import logging

import pytest

from clueset_toolkit.cli import main


@pytest.fixture(autouse=True)
def restore_root_logging():
    """main() reconfigures the root logger; put it back afterwards."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def csv_path(tmp_path, game_csv):
    path = tmp_path / "trivia-night.csv"
    path.write_text(game_csv, encoding="utf-8")
    return path


@pytest.fixture
def store_dir(tmp_path):
    return tmp_path / "store"


def _upload(csv_path, store_dir, *extra):
    return main(["upload", str(csv_path), "--store", str(store_dir), "--owner", "u1", *extra])


def _uploaded_id(capsys):
    return capsys.readouterr().out.strip().split()[-1]


class TestValidateCommand:
    """Tests for `clueset validate`."""

    def test_validate_when_valid_then_prints_rounds(self, csv_path, capsys):
        assert main(["validate", str(csv_path)]) == 0

        out = capsys.readouterr().out
        assert out.startswith("Trivia Night (trivia-night.csv): 61 clues")
        assert "  Double Jeopardy:" in out
        assert "    WORLD CAPITALS [0]" in out

    def test_validate_when_name_given_then_used(self, csv_path, capsys):
        main(["validate", str(csv_path), "--name", "Quiz"])

        assert capsys.readouterr().out.startswith("Quiz (trivia-night.csv)")

    def test_validate_when_bad_row_then_exit_one(self, tmp_path, game_lines, capsys):
        game_lines[1] = "jeopardy,SCIENCE,200,only four"
        path = tmp_path / "bad.csv"
        path.write_text("\n".join(game_lines), encoding="utf-8")

        assert main(["validate", str(path)]) == 1
        assert "Invalid clue set: Row 2 has 4 fields, expected 5" in capsys.readouterr().err

    def test_validate_when_missing_file_then_exit_one(self, tmp_path, capsys):
        assert main(["validate", str(tmp_path / "nope.csv")]) == 1
        assert "Clue set file not found" in capsys.readouterr().err


class TestUploadCommand:
    """Tests for `clueset upload`."""

    def test_upload_when_name_given_then_stored(self, csv_path, store_dir, capsys):
        assert _upload(csv_path, store_dir, "--name", "Game") == 0
        clue_set_id = _uploaded_id(capsys)

        main(["list", "--store", str(store_dir), "--owner", "u1"])

        assert f"{clue_set_id}  Game" in capsys.readouterr().out

    def test_upload_when_empty_answer_then_suggested_name(self, csv_path, store_dir, capsys, monkeypatch):
        monkeypatch.setattr("builtins.input", lambda prompt: "")

        assert _upload(csv_path, store_dir) == 0
        capsys.readouterr()

        main(["list", "--store", str(store_dir), "--owner", "u1"])
        assert "  trivia-night  " in capsys.readouterr().out

    def test_upload_when_input_closed_then_cancelled(self, csv_path, store_dir, capsys, monkeypatch):
        def closed(prompt):
            raise EOFError

        monkeypatch.setattr("builtins.input", closed)

        assert _upload(csv_path, store_dir) == 1
        err = capsys.readouterr().err
        assert "Upload failed: Upload cancelled by user" in err
        assert "Starting upload of 'trivia-night.csv' for u1" in err

    def test_upload_when_overwrite_flag_then_replaces(self, csv_path, store_dir, capsys):
        _upload(csv_path, store_dir, "--name", "Game")
        first_id = _uploaded_id(capsys)

        assert _upload(csv_path, store_dir, "--name", "game", "--overwrite") == 0
        second_id = _uploaded_id(capsys)

        main(["list", "--store", str(store_dir), "--owner", "u1"])
        out = capsys.readouterr().out
        assert second_id in out
        assert first_id not in out

    def test_upload_when_keep_both_flag_then_two_entries(self, csv_path, store_dir, capsys):
        _upload(csv_path, store_dir, "--name", "Game")
        _upload(csv_path, store_dir, "--name", "Game", "--keep-both")
        capsys.readouterr()

        main(["list", "--store", str(store_dir), "--owner", "u1"])

        assert len(capsys.readouterr().out.strip().splitlines()) == 2

    @pytest.mark.parametrize("answer, expected_code", [("o", 0), ("k", 0), ("c", 1)])
    def test_upload_when_conflict_answered_then_follows_choice(
        self, csv_path, store_dir, capsys, monkeypatch, answer, expected_code
    ):
        _upload(csv_path, store_dir, "--name", "Game")
        monkeypatch.setattr("builtins.input", lambda prompt: answer)

        assert _upload(csv_path, store_dir, "--name", "Game") == expected_code

    def test_upload_when_not_csv_then_exit_one(self, tmp_path, store_dir, capsys):
        path = tmp_path / "notes.txt"
        path.write_text("hello", encoding="utf-8")

        assert _upload(path, store_dir, "--name", "Game") == 1
        assert "Only .csv files are supported" in capsys.readouterr().err


class TestStoreCommands:
    """Tests for list/show/delete."""

    def test_list_when_empty_then_message(self, store_dir, capsys):
        assert main(["list", "--store", str(store_dir), "--owner", "u1"]) == 0
        assert "No clue sets for u1" in capsys.readouterr().out

    def test_show_when_stored_then_prints_categories(self, csv_path, store_dir, capsys):
        _upload(csv_path, store_dir, "--name", "Game")
        clue_set_id = _uploaded_id(capsys)

        assert main(["show", clue_set_id, "--store", str(store_dir)]) == 0

        out = capsys.readouterr().out
        assert out.startswith("Game (created ")
        assert "  Jeopardy: J-Category 1, J-Category 2" in out
        assert "  Final Jeopardy: WORLD CAPITALS" in out

    def test_show_when_unknown_then_exit_one(self, store_dir, capsys):
        assert main(["show", "missing", "--store", str(store_dir)]) == 1

    def test_delete_when_owner_then_removed(self, csv_path, store_dir, capsys):
        _upload(csv_path, store_dir, "--name", "Game")
        clue_set_id = _uploaded_id(capsys)

        assert main(["delete", clue_set_id, "--store", str(store_dir), "--owner", "u1"]) == 0
        capsys.readouterr()

        main(["list", "--store", str(store_dir), "--owner", "u1"])
        assert "No clue sets" in capsys.readouterr().out

    def test_delete_when_other_owner_then_exit_one(self, csv_path, store_dir, capsys):
        _upload(csv_path, store_dir, "--name", "Game")
        clue_set_id = _uploaded_id(capsys)

        assert main(["delete", clue_set_id, "--store", str(store_dir), "--owner", "u2"]) == 1
        assert "does not belong to u2" in capsys.readouterr().err

    def test_version_when_requested_then_exits_zero(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])

        assert exc_info.value.code == 0
        assert capsys.readouterr().out.startswith("clueset ")
