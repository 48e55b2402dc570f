"""Task ID high-water mark and generation."""

from collections.abc import Iterable


def max_id(ids: Iterable[int]) -> int:
    """Find the highest ID, or 0 if there are none."""
    return max(ids, default=0)


def next_id(current_max: int) -> int:
    """Generate the next ID after current_max.

    IDs start at 1 and only ever grow, so deleted IDs are never handed out
    again during a session.
    """
    if current_max < 0:
        raise ValueError(f"negative id high-water mark: {current_max}")
    return current_max + 1
