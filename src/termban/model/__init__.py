"""Board model: data types, mutations and persistence."""

from termban.model.board import COLUMN_COUNT, COLUMN_TITLES, Board, Column, Task, default_board
from termban.model.loader import board_from_dict, load_board
from termban.model.task import add_task, clamp_index, delete_task, edit_task, find_task, move_task
from termban.model.writer import board_to_dict, ensure_writable, save_board

__all__ = [
    "COLUMN_COUNT",
    "COLUMN_TITLES",
    "Board",
    "Column",
    "Task",
    "add_task",
    "board_from_dict",
    "board_to_dict",
    "clamp_index",
    "default_board",
    "delete_task",
    "edit_task",
    "ensure_writable",
    "find_task",
    "load_board",
    "move_task",
    "save_board",
]
