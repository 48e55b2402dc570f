"""Applies state machine transitions to the board and the snapshot file."""

from __future__ import annotations

import logging
from dataclasses import replace
from pathlib import Path

from termban.config import Settings
from termban.errors import PersistenceError
from termban.keys import KeyEvent
from termban.model.board import Board, default_board
from termban.model.loader import load_board
from termban.model.task import add_task, delete_task, edit_task, find_task, move_task
from termban.model.writer import save_board
from termban.state import (
    MUTATIONS,
    AddTask,
    DeleteTask,
    EditTask,
    Effect,
    MoveTask,
    Quit,
    UiState,
    transition,
)

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_SAVE_FAILED = 1


class Session:
    """One running board: the model, the UI state and where it is saved.

    Each key press is handled to completion: transition, mutation, save.
    Saving happens synchronously after every mutating effect.
    """

    def __init__(self, board: Board, path: str | Path, state: UiState | None = None):
        self.board = board
        self.path = Path(path)
        self.state = state or UiState()
        self.running = True
        self.exit_code = EXIT_OK
        self._quit_failed = False

    @classmethod
    def open(cls, settings: Settings) -> Session:
        """Load the board for settings.

        A snapshot that cannot be loaded does not stop startup: the session
        starts with an empty board and shows the load error.
        """
        state = UiState(show_help=settings.show_help)
        try:
            board = load_board(settings.save_path)
        except PersistenceError as e:
            logger.warning("load failed: %s", e)
            board = default_board()
            state = replace(state, error=f"load failed: {e}")
        return cls(board, settings.save_path, state)

    def handle(self, event: KeyEvent) -> bool:
        """Process one key press. Returns False once the session should end."""
        result = transition(self.state, self.board, event)
        self.state = result.state
        quitting = False
        for effect in result.effects:
            if isinstance(effect, Quit):
                quitting = True
            else:
                self._apply(effect)
        if quitting:
            self.quit()
        else:
            self._quit_failed = False
        return self.running

    def _apply(self, effect: Effect) -> None:
        board = self.board
        if isinstance(effect, AddTask):
            add_task(board, effect.column, effect.title)
        elif isinstance(effect, MoveTask):
            move_task(board, effect.column, effect.index, effect.target)
        elif isinstance(effect, (EditTask, DeleteTask)):
            position = find_task(board, effect.task_id)
            if position is None:
                logger.warning("task %s vanished before %s", effect.task_id, type(effect).__name__)
                return
            column, index = position
            if isinstance(effect, EditTask):
                edit_task(board.columns[column].tasks[index], effect.title)
            else:
                delete_task(board, column, index)
        if isinstance(effect, MUTATIONS):
            self.save()

    def save(self) -> bool:
        """Write the snapshot. Failures are shown in the UI, not raised."""
        try:
            save_board(self.board, self.path)
        except PersistenceError as e:
            logger.warning("save failed: %s", e)
            self.state = replace(self.state, error=str(e))
            return False
        if self.state.error is not None:
            self.state = replace(self.state, error=None)
        return True

    def quit(self) -> None:
        """Save and stop.

        If the save fails the session stays open so the error can be seen.
        Quitting again straight away exits anyway, with a failure exit code.
        """
        if self.save():
            self.running = False
            self.exit_code = EXIT_OK
            return
        if self._quit_failed:
            logger.error("exiting without saving to %s", self.path)
            self.running = False
            self.exit_code = EXIT_SAVE_FAILED
            return
        self._quit_failed = True
        self.state = replace(self.state, error=f"{self.state.error} (quit again to exit without saving)")
