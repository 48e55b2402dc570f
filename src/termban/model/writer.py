"""Save a termban board to its JSON snapshot file."""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from termban.errors import PersistenceError
from termban.model.board import Board, Task

logger = logging.getLogger(__name__)

FILE_MODE = 0o644


def _task_to_dict(task: Task) -> dict[str, Any]:
    return {
        "id": task.id,
        "title": task.title,
        "description": task.description,
        "created_at": task.created_at.isoformat(),
    }


def board_to_dict(board: Board) -> dict[str, Any]:
    """Convert a Board to plain data in snapshot layout."""
    return {
        "columns": [
            {
                "id": column.id,
                "title": column.title,
                "tasks": [_task_to_dict(t) for t in column.tasks],
            }
            for column in board.columns
        ]
    }


def save_board(board: Board, path: str | Path) -> None:
    """Write the whole board to path, replacing the previous snapshot.

    Content goes to a temporary file next to the target, which is then
    renamed over it, so readers see either the old or the new snapshot.
    A symlinked path is followed, so the link itself is kept.
    """
    path = Path(path).resolve()
    content = json.dumps(board_to_dict(board), indent=2, ensure_ascii=False) + "\n"
    try:
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(content)
            os.chmod(tmp_name, FILE_MODE)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
    except OSError as e:
        raise PersistenceError(f"cannot save {path}: {e.strerror or e}") from e
    logger.debug("saved %d tasks to %s", board.task_count(), path)


def ensure_writable(path: str | Path) -> None:
    """Check that the snapshot can be written, raising PersistenceError if not."""
    directory = Path(path).resolve().parent
    if not directory.is_dir():
        raise PersistenceError(f"directory {directory} does not exist")
    if not os.access(directory, os.W_OK):
        raise PersistenceError(f"directory {directory} is not writable")
