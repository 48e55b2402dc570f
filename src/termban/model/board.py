"""Data models for termban boards."""

from dataclasses import dataclass, field
from datetime import datetime

COLUMN_TITLES = ("To Do", "In Progress", "Done")
COLUMN_COUNT = len(COLUMN_TITLES)


def now() -> datetime:
    """Current local time, timezone-aware."""
    return datetime.now().astimezone()


@dataclass
class Task:
    """A single task on the board."""

    id: int
    title: str
    description: str = ""
    created_at: datetime = field(default_factory=now)


@dataclass
class Column:
    """One of the three fixed columns."""

    id: int
    title: str
    tasks: list[Task] = field(default_factory=list)


@dataclass
class Board:
    """The full board state.

    ``last_id`` is the high-water mark for task IDs. It is derived from the
    tasks on load and only moves forward.
    """

    columns: list[Column] = field(default_factory=list)
    last_id: int = 0

    def all_tasks(self) -> list[Task]:
        """Every task on the board, column by column."""
        return [task for column in self.columns for task in column.tasks]

    def task_count(self) -> int:
        return sum(len(column.tasks) for column in self.columns)


def default_column(index: int) -> Column:
    """Build the empty column for a fixed slot (0-based)."""
    return Column(id=index + 1, title=COLUMN_TITLES[index])


def default_board() -> Board:
    """Create an empty three-column board."""
    return Board(columns=[default_column(i) for i in range(COLUMN_COUNT)])
