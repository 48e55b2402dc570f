"""Lay out the board, cursor and dialogs as one text frame.

Rendering is done with rich: every part of the screen is rendered to lines of
segments at a known width, the columns are joined side by side, and dialogs
are spliced over the middle of the result.
"""

from __future__ import annotations

import io
from dataclasses import dataclass

from rich import box
from rich.console import Console, ConsoleOptions, Group, RenderableType, RenderResult
from rich.panel import Panel
from rich.rule import Rule
from rich.segment import Segment
from rich.style import Style
from rich.text import Text

from termban.model.board import Board, Column
from termban.model.task import find_task
from termban.state import TEXT_MODES, Entry, Mode, UiState

SUBTLE = "#383838"
HIGHLIGHT = "#7D56F4"
SPECIAL = "#73F59F"
MUTED = "#626262"

TITLE_STYLE = Style(bold=True, color="#FFFFFF", bgcolor=HIGHLIGHT)
HEADER_STYLE = Style(bold=True, color=HIGHLIGHT)
SELECTED_STYLE = Style(color=SPECIAL)
PLACEHOLDER_STYLE = Style(color=MUTED, italic=True)
HELP_STYLE = Style(color=MUTED)
ERROR_STYLE = Style(color="red", bold=True)

TITLE = " KANBAN BOARD "
SELECTED_MARKER = "❯ "
UNSELECTED_MARKER = "  "
EMPTY_COLUMN = "No tasks"
INPUT_PLACEHOLDER = "Add a new task..."
HELP_TEXT = (
    "a: add task • e: edit task • d: delete task • [/]: move task left/right • "
    "arrow keys: navigate • ?: toggle help • q: quit"
)
CONFIRM_HINT = "y: yes • n: no"

HEADER_HEIGHT = 2
COLUMN_HEADER_HEIGHT = 2  # title + rule
ROW_HEIGHT = 1
BORDER = 2
MIN_WIDTH = 36
MIN_HEIGHT = 10
DIALOG_WIDTH = 50


@dataclass(frozen=True)
class Frame:
    """An immutable rendered screen: ``height`` lines of ``width`` cells."""

    lines: tuple[tuple[Segment, ...], ...]
    width: int

    @property
    def height(self) -> int:
        return len(self.lines)

    @property
    def plain(self) -> str:
        """The frame as unstyled text, trailing spaces removed."""
        return "\n".join("".join(seg.text for seg in line).rstrip() for line in self.lines)

    def __rich_console__(self, console: Console, options: ConsoleOptions) -> RenderResult:
        new_line = Segment.line()
        for line in self.lines:
            yield from line
            yield new_line


def scroll_offset(offset: int, selected: int | None, count: int, visible: int) -> int:
    """Adjust a scroll offset so the selected row is inside the window.

    The result is clamped so the window never runs past the last row.
    """
    if selected is not None:
        if selected < offset:
            offset = selected
        elif selected >= offset + visible:
            offset = selected - visible + 1
    return max(0, min(offset, count - visible))


def _console(width: int, height: int) -> Console:
    return Console(
        width=width,
        height=height,
        file=io.StringIO(),
        force_terminal=True,
        color_system="truecolor",
        legacy_windows=False,
    )


def _render(console: Console, renderable: RenderableType, width: int, height: int | None = None) -> list[list[Segment]]:
    """Render to lines padded to exactly width cells (and height lines, if given)."""
    options = console.options.update(width=width, height=height)
    return console.render_lines(renderable, options, pad=True)


def _one_line(text: str, style: Style | str = "") -> Text:
    return Text(text, style=style, no_wrap=True, overflow="ellipsis")


class Viewport:
    """Turns the board and UI state into frames.

    The only thing it remembers between frames is the scroll offset of each
    column, which is recomputed on every render.
    """

    def __init__(self) -> None:
        self.offsets: dict[int, int] = {}

    def render(self, board: Board, state: UiState, width: int, height: int) -> Frame:
        if width <= 0 or height <= 0:
            return Frame(((Segment("Loading..."),),), max(width, 0))
        console = _console(width, height)
        if width < MIN_WIDTH or height < MIN_HEIGHT:
            notice = _one_line(f"Terminal too small ({width}x{height})", ERROR_STYLE)
            return Frame(tuple(tuple(line) for line in _render(console, notice, width, height)), width)

        footer = self._footer(state)
        board_height = height - HEADER_HEIGHT - len(footer)

        header = Group(Text.assemble(" ", (TITLE, TITLE_STYLE), no_wrap=True), Text(""))
        lines = _render(console, header, width, HEADER_HEIGHT)
        lines += self._columns(console, board, state, width, board_height)
        if footer:
            lines += _render(console, Group(*footer), width, len(footer))

        dialog_width = min(DIALOG_WIDTH, width)
        dialog = self._dialog(board, state, dialog_width - BORDER - 2)
        if dialog is not None:
            self._overlay(console, lines, dialog, dialog_width, height)

        return Frame(tuple(tuple(line) for line in lines[:height]), width)

    # -- Columns --

    def _columns(self, console: Console, board: Board, state: UiState, width: int, height: int) -> list[list[Segment]]:
        count = len(board.columns)
        base = width // count
        widths = [base] * (count - 1) + [width - base * (count - 1)]
        visible = max(1, (height - BORDER - COLUMN_HEADER_HEIGHT) // ROW_HEIGHT)

        rendered = []
        for index, (column, col_width) in enumerate(zip(board.columns, widths)):
            selected = state.cursor.task if index == state.cursor.column else None
            offset = scroll_offset(self.offsets.get(index, 0), selected, len(column.tasks), visible)
            self.offsets[index] = offset
            panel = self._column_panel(column, selected, offset, visible, height)
            rendered.append(_render(console, panel, col_width, height))

        return [[seg for col_lines in row for seg in col_lines] for row in zip(*rendered)]

    def _column_panel(self, column: Column, selected: int | None, offset: int, visible: int, height: int) -> Panel:
        rows: list[RenderableType] = [
            _one_line(column.title, HEADER_STYLE),
            Rule(style=HIGHLIGHT),
        ]
        if not column.tasks:
            rows.append(_one_line(f"{UNSELECTED_MARKER}{EMPTY_COLUMN}", PLACEHOLDER_STYLE))
        for index in range(offset, min(offset + visible, len(column.tasks))):
            title = column.tasks[index].title
            if index == selected:
                rows.append(Text.assemble((SELECTED_MARKER + title, SELECTED_STYLE), no_wrap=True, overflow="ellipsis"))
            else:
                rows.append(_one_line(UNSELECTED_MARKER + title))
        return Panel(Group(*rows), box=box.ROUNDED, border_style=SUBTLE, padding=(0, 1), height=height)

    # -- Footer --

    def _footer(self, state: UiState) -> list[Text]:
        lines = []
        if state.error:
            lines.append(_one_line(f"Error: {state.error}", ERROR_STYLE))
        if state.show_help:
            lines.append(_one_line(HELP_TEXT, HELP_STYLE))
        if lines:
            lines.insert(0, Text(""))
        return lines

    # -- Dialogs --

    def _dialog(self, board: Board, state: UiState, inner: int) -> Panel | None:
        if state.mode is Mode.CONFIRMING_DELETE:
            position = find_task(board, state.target) if state.target is not None else None
            title = board.columns[position[0]].tasks[position[1]].title if position else ""
            body = Group(_one_line(f'Delete "{title}"?'), Text(""), _one_line(CONFIRM_HINT, HELP_STYLE))
            return Panel(body, box=box.ROUNDED, border_style=HIGHLIGHT, padding=(0, 1), title="Confirm")
        if state.mode in TEXT_MODES:
            if state.mode is Mode.ADDING_NEW:
                prompt = f"New task in {board.columns[state.cursor.column].title}:"
            else:
                prompt = "Edit task:"
            hint = "-- INSERT --" if state.entry is Entry.INSERT else "-- NORMAL --"
            body = Group(_one_line(prompt), self._buffer_line(state, inner), Text(""), _one_line(hint, HELP_STYLE))
            return Panel(body, box=box.ROUNDED, border_style=HIGHLIGHT, padding=(0, 1))
        return None

    def _buffer_line(self, state: UiState, inner: int) -> Text:
        """The text being typed, scrolled so the caret stays in view."""
        text, pos = state.buffer.text, state.buffer.position
        start = max(0, pos - inner + 1)
        caret = Style(reverse=True) if state.entry is Entry.INSERT else Style(underline=True)
        line = Text(no_wrap=True, overflow="crop")
        line.append(text[start:pos])
        line.append(text[pos] if pos < len(text) else " ", caret)
        line.append(text[pos + 1 :])
        if not text:
            line.append(INPUT_PLACEHOLDER, PLACEHOLDER_STYLE)
        return line

    def _overlay(
        self, console: Console, lines: list[list[Segment]], dialog: Panel, dialog_width: int, height: int
    ) -> None:
        """Splice the dialog over the centre of lines, in place."""
        width = console.width
        dialog_lines = _render(console, dialog, dialog_width)
        top = max(0, (height - len(dialog_lines)) // 2)
        left = (width - dialog_width) // 2
        for offset, dialog_line in enumerate(dialog_lines):
            row = top + offset
            if row >= len(lines):
                break
            before, _, after = Segment.divide(lines[row], [left, left + dialog_width, width])
            lines[row] = before + dialog_line + after
