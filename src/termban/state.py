"""Interaction state machine for the board.

The whole UI state is one immutable ``UiState`` value. ``transition`` maps a
state, the current board and a key press to the next state plus the effects
the session has to apply. It only reads the board; every change to the board
is expressed as an effect, so the machine can be driven without a terminal.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Callable

from termban import keys
from termban.keys import KeyEvent
from termban.model.board import Board
from termban.model.task import clamp_index


class Mode(Enum):
    BROWSING = "browsing"
    CONFIRMING_DELETE = "confirming_delete"
    EDITING = "editing"
    ADDING_NEW = "adding_new"


class Entry(Enum):
    """Sub-state of the two text-entry modes."""

    INSERT = "insert"
    NORMAL = "normal"


TEXT_MODES = frozenset({Mode.EDITING, Mode.ADDING_NEW})


@dataclass(frozen=True)
class Cursor:
    """Selected position: column index and task index within that column."""

    column: int = 0
    task: int = 0

    def is_valid(self, board: Board) -> bool:
        if not 0 <= self.column < len(board.columns):
            return False
        return 0 <= self.task < max(1, len(board.columns[self.column].tasks))


@dataclass(frozen=True)
class TextBuffer:
    """Single-line text being typed into a dialog, with its caret position."""

    text: str = ""
    position: int = 0

    @classmethod
    def of(cls, text: str) -> TextBuffer:
        """Buffer holding text with the caret at the end."""
        return cls(text, len(text))

    def feed(self, event: KeyEvent) -> TextBuffer:
        """Apply one key press. Keys that don't edit text leave it unchanged."""
        text, pos = self.text, self.position
        if event.is_printable:
            return TextBuffer(text[:pos] + event.key + text[pos:], pos + 1)
        key = event.key
        if key == "backspace" and pos > 0:
            return TextBuffer(text[: pos - 1] + text[pos:], pos - 1)
        if key == "delete" and pos < len(text):
            return TextBuffer(text[:pos] + text[pos + 1 :], pos)
        if key == "left":
            return TextBuffer(text, max(0, pos - 1))
        if key == "right":
            return TextBuffer(text, min(len(text), pos + 1))
        if key == "home":
            return TextBuffer(text, 0)
        if key == "end":
            return TextBuffer(text, len(text))
        if key == "ctrl+u":
            return TextBuffer()
        return self


# -- Effects --


@dataclass(frozen=True)
class AddTask:
    column: int
    title: str


@dataclass(frozen=True)
class EditTask:
    task_id: int
    title: str


@dataclass(frozen=True)
class DeleteTask:
    task_id: int


@dataclass(frozen=True)
class MoveTask:
    column: int
    index: int
    target: int


@dataclass(frozen=True)
class Quit:
    pass


Effect = AddTask | EditTask | DeleteTask | MoveTask | Quit
MUTATIONS = (AddTask, EditTask, DeleteTask, MoveTask)


@dataclass(frozen=True)
class UiState:
    """Everything the UI knows besides the board itself.

    ``target`` is the ID of the task a delete or edit dialog is bound to.
    It is resolved against the board again when the dialog commits.
    """

    mode: Mode = Mode.BROWSING
    entry: Entry = Entry.INSERT
    cursor: Cursor = field(default_factory=Cursor)
    buffer: TextBuffer = field(default_factory=TextBuffer)
    target: int | None = None
    show_help: bool = True
    error: str | None = None


@dataclass(frozen=True)
class Transition:
    state: UiState
    effects: tuple[Effect, ...] = ()


def _browsing(state: UiState, **changes) -> UiState:
    """Return to browsing, dropping any dialog context."""
    return replace(
        state,
        mode=Mode.BROWSING,
        entry=Entry.INSERT,
        buffer=TextBuffer(),
        target=None,
        **changes,
    )


def _move(state: UiState, board: Board, step: int) -> Transition:
    cursor = state.cursor
    target = cursor.column + step
    if not board.columns[cursor.column].tasks or not 0 <= target < len(board.columns):
        return Transition(state)
    # the task is appended, so it lands at the current length of the target
    landing = Cursor(target, len(board.columns[target].tasks))
    return Transition(replace(state, cursor=landing), (MoveTask(cursor.column, cursor.task, target),))


def _browse(state: UiState, board: Board, event: KeyEvent) -> Transition:
    key = event.key
    cursor = state.cursor
    tasks = board.columns[cursor.column].tasks

    if key in keys.UP:
        return Transition(replace(state, cursor=Cursor(cursor.column, max(0, cursor.task - 1))))
    if key in keys.DOWN:
        return Transition(replace(state, cursor=Cursor(cursor.column, clamp_index(cursor.task + 1, len(tasks)))))
    if key in keys.LEFT:
        if cursor.column > 0:
            return Transition(replace(state, cursor=Cursor(cursor.column - 1, 0)))
        return Transition(state)
    if key in keys.RIGHT:
        if cursor.column < len(board.columns) - 1:
            return Transition(replace(state, cursor=Cursor(cursor.column + 1, 0)))
        return Transition(state)
    if key in keys.MOVE_LEFT:
        return _move(state, board, -1)
    if key in keys.MOVE_RIGHT:
        return _move(state, board, 1)
    if key == keys.DELETE and tasks:
        return Transition(replace(state, mode=Mode.CONFIRMING_DELETE, target=tasks[cursor.task].id))
    if key == keys.ADD:
        return Transition(replace(state, mode=Mode.ADDING_NEW, entry=Entry.INSERT, buffer=TextBuffer()))
    if key == keys.EDIT and tasks:
        task = tasks[cursor.task]
        return Transition(
            replace(
                state,
                mode=Mode.EDITING,
                entry=Entry.INSERT,
                buffer=TextBuffer.of(task.title),
                target=task.id,
            )
        )
    if key == keys.HELP:
        return Transition(replace(state, show_help=not state.show_help))
    if key == keys.QUIT:
        return Transition(state, (Quit(),))
    return Transition(state)


def _confirm_delete(state: UiState, board: Board, event: KeyEvent) -> Transition:
    key = event.key
    if key in keys.CONFIRM_YES:
        cursor = state.cursor
        tasks = board.columns[cursor.column].tasks
        remaining = len(tasks) - sum(1 for t in tasks if t.id == state.target)
        done = _browsing(state, cursor=Cursor(cursor.column, clamp_index(cursor.task, remaining)))
        effects = (DeleteTask(state.target),) if state.target is not None else ()
        return Transition(done, effects)
    if key in keys.CONFIRM_NO:
        return Transition(_browsing(state))
    return Transition(state)


def _commit(state: UiState) -> Transition:
    """Finish a text dialog. A blank buffer cancels instead of committing."""
    title = state.buffer.text.strip()
    done = _browsing(state)
    if not title:
        return Transition(done)
    if state.mode is Mode.ADDING_NEW:
        return Transition(done, (AddTask(state.cursor.column, title),))
    if state.target is None:
        return Transition(done)
    return Transition(done, (EditTask(state.target, title),))


def _text_entry(state: UiState, board: Board, event: KeyEvent) -> Transition:
    key = event.key
    if key == keys.ENTER:
        return _commit(state)
    if state.entry is Entry.INSERT:
        if key == keys.ESCAPE:
            return Transition(replace(state, entry=Entry.NORMAL))
        return Transition(replace(state, buffer=state.buffer.feed(event)))
    # normal entry: no character input
    if key == keys.INSERT:
        return Transition(replace(state, entry=Entry.INSERT))
    if key == keys.ESCAPE:
        return Transition(_browsing(state))
    return Transition(state)


Handler = Callable[[UiState, Board, KeyEvent], Transition]

_HANDLERS: dict[Mode, Handler] = {
    Mode.BROWSING: _browse,
    Mode.CONFIRMING_DELETE: _confirm_delete,
    Mode.EDITING: _text_entry,
    Mode.ADDING_NEW: _text_entry,
}


def transition(state: UiState, board: Board, event: KeyEvent) -> Transition:
    """Compute the next state and the effects of a key press.

    The interrupt key quits from any mode; everything else is dispatched on
    the current mode.
    """
    if event.key == keys.INTERRUPT:
        return Transition(state, (Quit(),))
    return _HANDLERS[state.mode](state, board, event)
