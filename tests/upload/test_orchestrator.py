"""
Tests for the upload orchestrator.

Covers the happy path, every abort route, duplicate handling and the
ordering of store calls when overwriting.
"""

from unittest.mock import MagicMock

import pytest

from clueset_toolkit.upload import (
    InMemoryClueStore,
    JsonDirectoryClueStore,
    StoreError,
    StoredClueSet,
    UploadAttempt,
    UploadConfig,
    UploadFile,
    UploadOrchestrator,
    UploadResult,
    UploadState,
    check_duplicate_name,
    handle_upload,
    OVERWRITE,
    CANCEL,
)
from clueset_toolkit.ingest import load_clue_set_from_text


def _accept(name):
    return name


def _never(_):
    raise AssertionError("prompt should not be called")


def _mock_store(existing=None):
    store = MagicMock()
    store.list_clue_sets.return_value = existing or []
    store.create_clue_set.return_value = "new-id"
    return store


class TestUploadResult:
    """Tests for UploadResult invariants."""

    def test_ok_when_created_then_has_id_only(self):
        result = UploadResult.ok("abc")

        assert result.success is True
        assert result.clue_set_id == "abc"
        assert result.error is None

    def test_init_when_success_without_id_then_raises_error(self):
        with pytest.raises(ValueError):
            UploadResult(success=True)

    def test_init_when_failure_with_id_then_raises_error(self):
        with pytest.raises(ValueError):
            UploadResult(success=False, clue_set_id="abc", error="boom")


class TestCheckDuplicateName:
    """Tests for check_duplicate_name."""

    def test_check_when_name_matches_ignoring_case_then_duplicate(self):
        store = _mock_store([StoredClueSet("id-1", "Existing Game", "u1", "2024-01-01T00:00:00")])

        result = check_duplicate_name(store, "existing game", "u1")

        assert result.is_duplicate is True
        assert result.existing_id == "id-1"
        assert result.existing_name == "Existing Game"

    def test_check_when_no_match_then_not_duplicate(self):
        store = _mock_store([StoredClueSet("id-1", "Other", "u1", "2024-01-01T00:00:00")])

        assert check_duplicate_name(store, "Existing Game", "u1").is_duplicate is False

    def test_check_when_lookup_fails_then_fails_open(self, caplog):
        """A store failure must not block the upload."""
        store = MagicMock()
        store.list_clue_sets.side_effect = RuntimeError("network down")

        result = check_duplicate_name(store, "Anything", "u1")

        assert result.is_duplicate is False
        assert "Duplicate check failed" in caplog.text


class TestUploadOrchestratorHappyPath:
    """Tests for successful uploads."""

    def test_run_when_valid_upload_then_persists_document(self, memory_store, csv_upload):
        result = handle_upload(memory_store, csv_upload, "u1", _accept, _never)

        assert result.success is True
        stored = memory_store.list_clue_sets("u1")
        assert [s.name for s in stored] == ["trivia-night"]
        document = memory_store.load_clue_set(result.clue_set_id)
        assert document.filename == "trivia-night.csv"
        assert document.clue_count == 61

    def test_run_when_name_prompt_then_receives_suggestion(self, memory_store, csv_upload):
        seen = []

        def ask_name(suggested):
            seen.append(suggested)
            return "Friday Quiz"

        result = handle_upload(memory_store, csv_upload, "u1", ask_name, _never)

        assert seen == ["trivia-night"]
        assert memory_store.load_clue_set(result.clue_set_id).name == "Friday Quiz"

    def test_run_when_content_type_missing_then_extension_accepted(self, memory_store, game_csv):
        upload = UploadFile(name="game.CSV", content=game_csv.encode("utf-8"))

        assert handle_upload(memory_store, upload, "u1", _accept, _never).success is True


class TestUploadOrchestratorCancellation:
    """Tests for user cancellation."""

    @pytest.mark.parametrize("answer", [None, ""])
    def test_run_when_name_prompt_cancelled_then_no_store_calls(self, csv_upload, answer):
        """Cancelling at the name prompt touches nothing in the store."""
        store = _mock_store()

        result = handle_upload(store, csv_upload, "u1", lambda _: answer, _never)

        assert result == UploadResult(success=False, error="Upload cancelled by user")
        store.list_clue_sets.assert_not_called()
        store.delete_clue_set.assert_not_called()
        store.create_clue_set.assert_not_called()

    def test_run_when_conflict_prompt_dismissed_then_aborts(self, csv_upload):
        store = _mock_store([StoredClueSet("old-id", "Existing Game", "u1", "2024-01-01T00:00:00")])

        result = handle_upload(store, csv_upload, "u1", lambda _: "Existing Game", lambda _: None)

        assert result.error == "Upload cancelled by user"
        store.delete_clue_set.assert_not_called()
        store.create_clue_set.assert_not_called()

    def test_run_when_custom_cancel_message_then_used(self, csv_upload):
        config = UploadConfig(cancel_message="Stopped")

        result = handle_upload(_mock_store(), csv_upload, "u1", lambda _: None, _never, config=config)

        assert result.error == "Stopped"


class TestUploadOrchestratorConflicts:
    """Tests for duplicate name handling."""

    def test_run_when_overwrite_then_delete_precedes_create(self, csv_upload):
        """The existing clue set is removed before the new one is created."""
        store = _mock_store([StoredClueSet("old-id", "Existing Game", "u1", "2024-01-01T00:00:00")])
        prompts = []

        def ask_conflict(existing_name):
            prompts.append(existing_name)
            return OVERWRITE

        result = handle_upload(store, csv_upload, "u1", lambda _: "existing game", ask_conflict)

        assert result == UploadResult.ok("new-id")
        assert prompts == ["Existing Game"]
        calls = [c[0] for c in store.method_calls]
        assert calls.index("delete_clue_set") < calls.index("create_clue_set")
        store.delete_clue_set.assert_called_once_with("old-id", "u1")

    def test_run_when_cancel_answer_then_keeps_both(self, memory_store, csv_upload):
        first = handle_upload(memory_store, csv_upload, "u1", lambda _: "Game", _never)

        second = handle_upload(memory_store, csv_upload, "u1", lambda _: "Game", lambda _: CANCEL)

        assert second.success is True
        assert second.clue_set_id != first.clue_set_id
        assert len(memory_store.list_clue_sets("u1")) == 2

    def test_run_when_overwrite_in_memory_then_single_entry(self, memory_store, csv_upload):
        first = handle_upload(memory_store, csv_upload, "u1", lambda _: "Game", _never)

        second = handle_upload(memory_store, csv_upload, "u1", lambda _: "GAME", lambda _: OVERWRITE)

        stored = memory_store.list_clue_sets("u1")
        assert [s.id for s in stored] == [second.clue_set_id]
        assert stored[0].name == "GAME"
        assert first.clue_set_id != second.clue_set_id

    def test_run_when_same_name_other_owner_then_no_conflict(self, memory_store, csv_upload):
        handle_upload(memory_store, csv_upload, "u1", lambda _: "Game", _never)

        result = handle_upload(memory_store, csv_upload, "u2", lambda _: "Game", _never)

        assert result.success is True

    def test_run_when_lookup_fails_then_upload_continues(self, csv_upload):
        store = _mock_store()
        store.list_clue_sets.side_effect = StoreError("index unreadable")

        result = handle_upload(store, csv_upload, "u1", _accept, _never)

        assert result.success is True
        store.create_clue_set.assert_called_once()


class TestUploadOrchestratorFailures:
    """Tests for file, parse and store failures."""

    def test_run_when_not_csv_then_type_error(self, memory_store):
        upload = UploadFile(name="notes.txt", content=b"hello", content_type="text/plain")

        result = handle_upload(memory_store, upload, "u1", _never, _never)

        assert result.error == "Please select a CSV file. Only .csv files are supported."

    def test_run_when_too_large_then_size_error(self, memory_store, csv_upload):
        config = UploadConfig(max_size_bytes=10)

        result = handle_upload(memory_store, csv_upload, "u1", _never, _never, config=config)

        assert result.error.startswith("File is too large.")

    def test_run_when_empty_then_empty_error(self, memory_store):
        upload = UploadFile(name="empty.csv", content=b"", content_type="text/csv")

        result = handle_upload(memory_store, upload, "u1", _never, _never)

        assert result.error == "File appears to be empty. Please select a valid CSV file."

    def test_run_when_parse_error_then_message_verbatim(self, memory_store, game_lines):
        game_lines[3] = "jeopardy,SCIENCE,abc,q,a"
        upload = UploadFile(name="bad.csv", content="\n".join(game_lines).encode("utf-8"))

        result = handle_upload(memory_store, upload, "u1", _accept, _never)

        assert result.error == 'Invalid value "abc" in row 4. Expected a number'
        assert memory_store.list_clue_sets("u1") == []

    def test_run_when_structure_error_then_message_verbatim(self, memory_store, make_game_lines):
        lines = make_game_lines(categories=5)
        upload = UploadFile(name="short.csv", content="\n".join(lines).encode("utf-8"))

        result = handle_upload(memory_store, upload, "u1", _accept, _never)

        assert result.error == "Jeopardy round should have 30 clues, found 25"

    def test_run_when_not_utf8_then_decode_error(self, memory_store):
        upload = UploadFile(name="latin.csv", content=b"round\xff", content_type="text/csv")

        result = handle_upload(memory_store, upload, "u1", _accept, _never)

        assert result.error.startswith("File is not valid utf-8 text")

    def test_run_when_create_fails_then_store_message_returned(self, csv_upload):
        store = _mock_store()
        store.create_clue_set.side_effect = StoreError("Failed to create clue set: disk full")

        result = handle_upload(store, csv_upload, "u1", _accept, _never)

        assert result == UploadResult.failed("Failed to create clue set: disk full")

    def test_run_when_overwrite_delete_fails_then_create_not_called(self, csv_upload):
        """A failed delete ends the upload before anything is created."""
        store = _mock_store([StoredClueSet("old-id", "Existing Game", "u1", "2024-01-01T00:00:00")])
        store.delete_clue_set.side_effect = StoreError("Failed to delete clue set: locked")

        result = handle_upload(store, csv_upload, "u1", lambda _: "Existing Game", lambda _: OVERWRITE)

        assert result == UploadResult.failed("Failed to delete clue set: locked")
        store.delete_clue_set.assert_called_once_with("old-id", "u1")
        store.create_clue_set.assert_not_called()

    def test_run_when_store_index_corrupt_then_failure_result(self, tmp_path, csv_upload):
        """Store failures come back as a result, never as an exception."""
        (tmp_path / "index.json").write_text("{not json", encoding="utf-8")
        store = JsonDirectoryClueStore(tmp_path)

        result = handle_upload(store, csv_upload, "u1", _accept, _never)

        assert result.success is False
        assert result.error.startswith("Failed to create clue set")


class TestUploadStates:
    """Tests for the state sequence of one upload."""

    def test_attempt_when_created_then_validating_file(self, csv_upload):
        attempt = UploadAttempt(upload=csv_upload, owner_id="u1")

        assert attempt.state is UploadState.VALIDATING_FILE
        assert attempt.history == [UploadState.VALIDATING_FILE]
        assert attempt.overwrite_id is None

    def test_run_when_duplicate_then_visits_conflict_state(self, memory_store, csv_upload, monkeypatch):
        """Record the attempt's history through its advance() hook."""
        handle_upload(memory_store, csv_upload, "u1", lambda _: "Game", _never)
        visited = []
        original_advance = UploadAttempt.advance

        def recording_advance(self, state):
            visited.append(state)
            original_advance(self, state)

        monkeypatch.setattr(UploadAttempt, "advance", recording_advance)

        UploadOrchestrator(memory_store).run(csv_upload, "u1", lambda _: "Game", lambda _: OVERWRITE)

        assert visited == [
            UploadState.COLLECTING_NAME,
            UploadState.CHECKING_DUPLICATE,
            UploadState.RESOLVING_CONFLICT,
            UploadState.PARSING,
            UploadState.PERSISTING,
            UploadState.DONE,
        ]

    def test_run_when_aborted_then_ends_in_aborted(self, memory_store, csv_upload, monkeypatch):
        visited = []
        original_advance = UploadAttempt.advance

        def recording_advance(self, state):
            visited.append(state)
            original_advance(self, state)

        monkeypatch.setattr(UploadAttempt, "advance", recording_advance)

        UploadOrchestrator(memory_store).run(csv_upload, "u1", lambda _: None, _never)

        assert visited == [UploadState.COLLECTING_NAME, UploadState.ABORTED]

    def test_overwrite_id_when_keep_both_then_none(self, csv_upload, game_csv):
        attempt = UploadAttempt(upload=csv_upload, owner_id="u1")
        store = InMemoryClueStore()
        store.create_clue_set(load_clue_set_from_text(game_csv, name="Game", source="g.csv"), "u1")
        attempt.duplicate = check_duplicate_name(store, "Game", "u1")

        attempt.conflict_choice = CANCEL
        assert attempt.overwrite_id is None

        attempt.conflict_choice = OVERWRITE
        assert attempt.overwrite_id == attempt.duplicate.existing_id
