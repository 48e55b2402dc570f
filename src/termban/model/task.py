"""Task mutation operations for termban boards."""

from termban.errors import IndexOutOfRange, InvalidInput
from termban.ids import next_id
from termban.model.board import Board, Column, Task, now


def _column(board: Board, index: int) -> Column:
    if not 0 <= index < len(board.columns):
        raise IndexOutOfRange(f"no column at index {index}")
    return board.columns[index]


def _check_title(title: str) -> str:
    if not title or not title.strip():
        raise InvalidInput("task title must not be empty")
    return title


def clamp_index(index: int, length: int) -> int:
    """Clamp a task index into a sequence of the given length.

    Stays as close to ``index`` as possible, moving down when it falls off the
    end, and never goes below 0 (an empty column keeps index 0).
    """
    return max(0, min(index, length - 1))


def add_task(board: Board, column: int, title: str, description: str = "") -> Task:
    """Create a new task at the bottom of a column.

    Returns the created Task. The ID counter is only advanced on success.
    """
    col = _column(board, column)
    _check_title(title)
    task_id = next_id(board.last_id)
    task = Task(id=task_id, title=title, description=description, created_at=now())
    board.last_id = task_id
    col.tasks.append(task)
    return task


def delete_task(board: Board, column: int, index: int) -> Task:
    """Remove and return the task at index in a column."""
    col = _column(board, column)
    if not 0 <= index < len(col.tasks):
        raise IndexOutOfRange(f"no task {index} in column {col.title!r}")
    return col.tasks.pop(index)


def edit_task(task: Task, title: str) -> None:
    """Replace a task's title in place."""
    task.title = _check_title(title)


def move_task(board: Board, source: int, index: int, target: int) -> Task:
    """Move a task to the bottom of another column.

    The task keeps its identity. Its position among its old siblings is
    lost: moved tasks always land last in the target column.
    """
    if source == target:
        raise IndexOutOfRange(f"task already in column {source}")
    dest = _column(board, target)
    task = delete_task(board, source, index)
    dest.tasks.append(task)
    return task


def find_task(board: Board, task_id: int) -> tuple[int, int] | None:
    """Find the (column, index) position of a task by ID."""
    for column_index, col in enumerate(board.columns):
        for task_index, task in enumerate(col.tasks):
            if task.id == task_id:
                return column_index, task_index
    return None
