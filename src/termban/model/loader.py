"""Load a termban board from its JSON snapshot file."""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any

from termban.errors import PersistenceError
from termban.ids import max_id
from termban.model.board import COLUMN_COUNT, Board, Column, Task, default_column, now

logger = logging.getLogger(__name__)


def _require(value: Any, kind: type, what: str) -> Any:
    """Return value if it is an instance of kind, else raise PersistenceError."""
    # bool is an int subclass, but true/false are never valid ids
    if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
        raise PersistenceError(f"{what} must be {kind.__name__}, got {type(value).__name__}")
    return value


def _parse_created_at(raw: Any, what: str) -> datetime:
    """Parse an ISO 8601 timestamp. Missing timestamps become now."""
    if raw is None:
        return now()
    _require(raw, str, what)
    try:
        stamp = datetime.fromisoformat(raw)
    except ValueError as e:
        raise PersistenceError(f"{what} is not a timestamp: {raw!r}") from e
    if stamp.tzinfo is None:
        # attach the local offset as is; converting can overflow at the year bounds
        stamp = stamp.replace(tzinfo=now().tzinfo)
    return stamp


def _parse_task(raw: Any, where: str) -> Task:
    _require(raw, dict, where)
    task_id = _require(raw.get("id"), int, f"{where}.id")
    if task_id < 1:
        raise PersistenceError(f"{where}.id must be positive, got {task_id}")
    return Task(
        id=task_id,
        title=_require(raw.get("title", ""), str, f"{where}.title"),
        description=_require(raw.get("description") or "", str, f"{where}.description"),
        created_at=_parse_created_at(raw.get("created_at"), f"{where}.created_at"),
    )


def _parse_column(raw: Any, index: int) -> Column:
    where = f"columns[{index}]"
    _require(raw, dict, where)
    fallback = default_column(index)
    tasks = _require(raw.get("tasks") or [], list, f"{where}.tasks")
    return Column(
        id=_require(raw.get("id", fallback.id), int, f"{where}.id"),
        title=_require(raw.get("title", fallback.title), str, f"{where}.title"),
        tasks=[_parse_task(t, f"{where}.tasks[{i}]") for i, t in enumerate(tasks)],
    )


def board_from_dict(data: Any) -> Board:
    """Build a Board from decoded snapshot data.

    Missing trailing columns are filled from the defaults. The ID high-water
    mark is always recomputed from the tasks themselves.
    """
    _require(data, dict, "snapshot")
    raw_columns = _require(data.get("columns") or [], list, "columns")
    if len(raw_columns) > COLUMN_COUNT:
        raise PersistenceError(f"expected at most {COLUMN_COUNT} columns, got {len(raw_columns)}")

    columns = [_parse_column(raw, i) for i, raw in enumerate(raw_columns)]
    for i in range(len(columns), COLUMN_COUNT):
        columns.append(default_column(i))

    board = Board(columns=columns)
    ids = [task.id for task in board.all_tasks()]
    if len(set(ids)) != len(ids):
        raise PersistenceError("duplicate task ids in snapshot")
    board.last_id = max_id(ids)
    return board


def load_board(path: str | Path) -> Board:
    """Load the board from path.

    A missing file is not an error: the empty default board is returned.
    Unreadable or malformed files raise PersistenceError.
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        logger.debug("no snapshot at %s, starting with an empty board", path)
        return board_from_dict({})
    except (OSError, UnicodeDecodeError) as e:
        raise PersistenceError(f"cannot read {path}: {e}") from e

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise PersistenceError(f"{path} is not valid JSON: {e}") from e
    except RecursionError as e:
        raise PersistenceError(f"{path} is nested too deeply") from e

    board = board_from_dict(data)
    logger.debug("loaded %d tasks from %s", board.task_count(), path)
    return board
