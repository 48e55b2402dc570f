"""Tests for the session: effects, persistence and the quit policy."""

import json

import pytest

from termban.config import Settings
from termban.errors import IndexOutOfRange, PersistenceError
from termban.model.loader import load_board
from termban.session import EXIT_OK, EXIT_SAVE_FAILED, Session
from termban.state import Cursor, DeleteTask, EditTask, Mode, MoveTask, UiState


@pytest.fixture
def session(make_board, snapshot_path):
    return Session(make_board(["a", "b"], ["c"]), snapshot_path)


def feed(session, events):
    for event in events:
        session.handle(event)


def on_disk(path):
    """Task titles per column as saved."""
    data = json.loads(path.read_text())
    return [[t["title"] for t in column["tasks"]] for column in data["columns"]]


def test_open_missing_file(snapshot_path):
    session = Session.open(Settings(save_path=snapshot_path))
    assert session.board.task_count() == 0
    assert session.state.error is None
    assert not snapshot_path.exists()


def test_open_existing_file(make_board, snapshot_path, keys):
    Session(make_board(["a"]), snapshot_path).save()
    session = Session.open(Settings(save_path=snapshot_path, show_help=False))
    assert [t.title for t in session.board.columns[0].tasks] == ["a"]
    assert session.state.show_help is False


def test_open_malformed_file(snapshot_path):
    """A broken snapshot is reported but does not stop startup."""
    snapshot_path.write_text("{broken")
    session = Session.open(Settings(save_path=snapshot_path))
    assert session.board.task_count() == 0
    assert session.state.error.startswith("load failed:")
    assert session.running


def test_open_naive_year_9999_timestamp(snapshot_path):
    task = {"id": 1, "title": "far", "created_at": "9999-12-31T23:59:59"}
    snapshot_path.write_text(json.dumps({"columns": [{"id": 1, "title": "To Do", "tasks": [task]}]}))
    session = Session.open(Settings(save_path=snapshot_path))
    assert session.state.error is None
    assert session.board.columns[0].tasks[0].created_at.year == 9999


def test_open_deeply_nested_file(snapshot_path):
    snapshot_path.write_text("[" * 100_000)
    session = Session.open(Settings(save_path=snapshot_path))
    assert session.running
    assert session.board.task_count() == 0
    assert session.state.error.startswith("load failed:")


def test_open_naive_year_one_timestamp(snapshot_path):
    task = {"id": 1, "title": "old", "created_at": "0001-01-01T00:00:00"}
    snapshot_path.write_text(json.dumps({"columns": [{"id": 1, "title": "To Do", "tasks": [task]}]}))
    session = Session.open(Settings(save_path=snapshot_path))
    assert session.state.error is None
    assert session.board.columns[0].tasks[0].created_at.year == 1


def test_add_persists(session, snapshot_path, keys):
    feed(session, keys("a", "new one", "enter"))
    assert on_disk(snapshot_path) == [["a", "b", "new one"], ["c"], []]
    assert session.board.columns[0].tasks[-1].id == 4


def test_move_persists(session, snapshot_path, keys):
    feed(session, keys("j", "]"))
    assert on_disk(snapshot_path) == [["a"], ["c", "b"], []]
    assert session.state.cursor == Cursor(1, 1)


def test_delete_persists(session, snapshot_path, keys):
    feed(session, keys("d", "y"))
    assert on_disk(snapshot_path) == [["b"], ["c"], []]


def test_delete_declined_does_not_save(session, snapshot_path, keys):
    feed(session, keys("d", "n"))
    assert not snapshot_path.exists()
    assert session.board.task_count() == 3


def test_edit_persists(session, snapshot_path, keys):
    feed(session, keys("l", "e", " (edited)", "enter"))
    assert on_disk(snapshot_path) == [["a", "b"], ["c (edited)"], []]


def test_navigation_does_not_save(session, snapshot_path, keys):
    feed(session, keys("j", "l", "h", "?", "a", "escape", "escape"))
    assert not snapshot_path.exists()


def test_edit_target_resolved_by_id(session):
    """The bound task is looked up again at commit time."""
    session.state = UiState(mode=Mode.EDITING, target=3, cursor=Cursor(0, 0))
    session._apply(EditTask(3, "renamed"))
    assert session.board.columns[1].tasks[0].title == "renamed"
    assert session.board.columns[0].tasks[0].title == "a"


def test_vanished_target_is_skipped(session, snapshot_path):
    session._apply(DeleteTask(99))
    session._apply(EditTask(99, "ghost"))
    assert session.board.task_count() == 3
    assert not snapshot_path.exists()


def test_contract_violation_propagates(session):
    """A move out of an empty column is a bug, not a UI error."""
    with pytest.raises(IndexOutOfRange):
        session._apply(MoveTask(2, 0, 1))


def test_write_spec_scenario(snapshot_path, keys):
    session = Session.open(Settings(save_path=snapshot_path))
    feed(session, keys("a", "Write spec", "enter"))
    task = session.board.columns[0].tasks[0]
    assert (task.id, task.title) == (1, "Write spec")

    feed(session, keys("]", "]"))
    assert session.board.columns[2].tasks == [task]
    assert session.state.cursor == Cursor(2, 0)

    feed(session, keys("d", "y"))
    assert session.board.task_count() == 0
    reloaded = load_board(snapshot_path)
    assert reloaded.columns == session.board.columns
    # the high-water mark is rebuilt from the (now empty) snapshot
    assert reloaded.last_id == 0
    assert session.board.last_id == 1
    assert on_disk(snapshot_path) == [[], [], []]


def test_quit_saves_and_stops(session, snapshot_path, keys):
    assert session.handle(keys("q")[0]) is False
    assert session.exit_code == EXIT_OK
    assert on_disk(snapshot_path) == [["a", "b"], ["c"], []]


def test_interrupt_while_typing_quits(session, snapshot_path, keys):
    feed(session, keys("a", "half"))
    assert session.handle(keys("ctrl+c")[0]) is False
    assert on_disk(snapshot_path) == [["a", "b"], ["c"], []]


# --- Save failures ---


@pytest.fixture
def broken_session(make_board, tmp_path):
    """A session whose snapshot directory does not exist."""
    return Session(make_board(["a"]), tmp_path / "missing" / "board.json")


def test_failed_save_is_shown_not_raised(broken_session, keys):
    feed(broken_session, keys("a", "x", "enter"))
    assert broken_session.running
    assert "cannot save" in broken_session.state.error
    # the change is kept in memory
    assert [t.title for t in broken_session.board.columns[0].tasks] == ["a", "x"]


def test_successful_save_clears_error(broken_session, tmp_path, keys):
    feed(broken_session, keys("a", "x", "enter"))
    (tmp_path / "missing").mkdir()
    feed(broken_session, keys("]"))
    assert broken_session.state.error is None
    assert on_disk(broken_session.path) == [["x"], ["a"], []]


def test_failed_quit_stays_open(broken_session, keys):
    assert broken_session.handle(keys("q")[0]) is True
    assert "quit again" in broken_session.state.error


def test_second_failed_quit_exits(broken_session, keys):
    broken_session.handle(keys("q")[0])
    assert broken_session.handle(keys("q")[0]) is False
    assert broken_session.exit_code == EXIT_SAVE_FAILED


def test_other_key_resets_quit_policy(broken_session, keys):
    broken_session.handle(keys("q")[0])
    broken_session.handle(keys("j")[0])
    assert broken_session.handle(keys("q")[0]) is True


def test_quit_retry_succeeds(broken_session, tmp_path, keys):
    broken_session.handle(keys("q")[0])
    (tmp_path / "missing").mkdir()
    assert broken_session.handle(keys("q")[0]) is False
    assert broken_session.exit_code == EXIT_OK


def test_save_failure_sets_error(monkeypatch, session):
    def explode(board, path):
        raise PersistenceError("disk on fire")

    monkeypatch.setattr("termban.session.save_board", explode)
    assert session.save() is False
    assert session.state.error == "disk on fire"
