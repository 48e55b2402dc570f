"""Shared fixtures for termban tests."""

import logging
from datetime import datetime, timezone

import pytest

from termban.keys import KeyEvent
from termban.model.board import Board, Task, default_board

STAMP = datetime(2024, 3, 1, 9, 30, tzinfo=timezone.utc)

NAMED_KEYS = {
    "up",
    "down",
    "left",
    "right",
    "home",
    "end",
    "enter",
    "escape",
    "backspace",
    "delete",
    "tab",
}


def _keys(*names: str) -> list[KeyEvent]:
    events = []
    for name in names:
        if len(name) == 1 or name in NAMED_KEYS or name.startswith("ctrl+"):
            events.append(KeyEvent(name))
        else:
            events.extend(KeyEvent(ch) for ch in name)
    return events


@pytest.fixture
def keys():
    """Build key events. Key names stay whole, other strings are typed out.

    keys("a", "Buy milk", "enter") -> a, B, u, y, ' ', m, i, l, k, enter
    """
    return _keys


@pytest.fixture
def make_board():
    """Build a board from task titles, one list per column.

    make_board(["one", "two"], [], ["three"]) gives ids 1, 2, 3 in that order.
    """

    def _make(*columns: list[str]) -> Board:
        board = default_board()
        task_id = 0
        for column, titles in zip(board.columns, columns):
            for title in titles:
                task_id += 1
                column.tasks.append(Task(id=task_id, title=title, description="", created_at=STAMP))
        board.last_id = task_id
        return board

    return _make


@pytest.fixture
def snapshot_path(tmp_path):
    """Path to a (not yet existing) snapshot file."""
    return tmp_path / ".kanban.json"


@pytest.fixture
def restore_logging():
    """Put the root logger back after a test reconfigures it."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
