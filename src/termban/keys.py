"""Normalized key events and the key sets the board responds to."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from textual.events import Key


@dataclass(frozen=True)
class KeyEvent:
    """A single key press.

    ``key`` is the printable character itself for character keys ("a", "[",
    "?", " ") and a lowercase name for everything else ("enter", "escape",
    "up", "backspace", "ctrl+c").
    """

    key: str

    @property
    def is_printable(self) -> bool:
        return len(self.key) == 1 and self.key.isprintable()

    @classmethod
    def from_textual(cls, event: Key) -> KeyEvent:
        """Normalize a Textual key event."""
        if event.is_printable and event.character:
            return cls(event.character)
        return cls(event.key)


INTERRUPT = "ctrl+c"
ENTER = "enter"
ESCAPE = "escape"

UP = frozenset({"up", "k"})
DOWN = frozenset({"down", "j"})
LEFT = frozenset({"left", "h"})
RIGHT = frozenset({"right", "l"})
MOVE_LEFT = frozenset({"[", "{"})
MOVE_RIGHT = frozenset({"]", "}"})
ADD = "a"
EDIT = "e"
DELETE = "d"
HELP = "?"
QUIT = "q"
INSERT = "i"

CONFIRM_YES = frozenset({"y", "Y"})
CONFIRM_NO = frozenset({"n", "N", ESCAPE})
