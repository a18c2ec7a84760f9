"""Multi-line text editing for the code editor and chat input."""

import logging
import unicodedata
from dataclasses import dataclass, field
from enum import Enum

from .errors import InvalidInput
from .scroller import ScrollState

logger = logging.getLogger(__name__)

INDENT = "    "


class Direction(Enum):
    """Cursor movement direction."""
    LEFT = "left"
    RIGHT = "right"
    UP = "up"
    DOWN = "down"


def _is_control(ch: str) -> bool:
    return unicodedata.category(ch) == "Cc"


@dataclass
class TextBuffer:
    """Editable lines plus a cursor that always addresses a valid insertion point.

    ``lines`` is never empty. The cursor satisfies
    ``0 <= row < len(lines)`` and ``0 <= col <= len(lines[row])``.
    """

    lines: list[str] = field(default_factory=lambda: [""])
    row: int = 0
    col: int = 0

    @property
    def cursor(self) -> tuple[int, int]:
        return self.row, self.col

    @property
    def current_line(self) -> str:
        return self.lines[self.row]

    @property
    def text(self) -> str:
        return "\n".join(self.lines)

    @property
    def is_blank(self) -> bool:
        return not self.text.strip()

    @property
    def cursor_on_last_line(self) -> bool:
        return self.row == len(self.lines) - 1

    def insert_char(self, ch: str) -> None:
        """Insert a single printable character (or tab) at the cursor."""
        if len(ch) != 1:
            raise InvalidInput(f"expected a single character, got {ch!r}")
        if ch != "\t" and _is_control(ch):
            raise InvalidInput(f"control character {ch!r} cannot be inserted")
        line = self.current_line
        self.lines[self.row] = line[:self.col] + ch + line[self.col:]
        self.col += 1

    def insert_text(self, text: str) -> None:
        """Insert pasted text; ``\\n`` splits lines, ``\\r`` is dropped."""
        chars = [ch for ch in text if ch != "\r"]
        for ch in chars:
            if ch not in ("\n", "\t") and _is_control(ch):
                raise InvalidInput(f"control character {ch!r} cannot be inserted")
        for ch in chars:
            if ch == "\n":
                self.newline()
            else:
                self.insert_char(ch)

    def newline(self) -> None:
        """Split the current line at the cursor."""
        line = self.current_line
        self.lines[self.row] = line[:self.col]
        self.lines.insert(self.row + 1, line[self.col:])
        self.row += 1
        self.col = 0

    def backspace(self) -> None:
        """Delete the character before the cursor, merging lines at column 0."""
        if self.col > 0:
            line = self.current_line
            self.lines[self.row] = line[:self.col - 1] + line[self.col:]
            self.col -= 1
        elif self.row > 0:
            previous_len = len(self.lines[self.row - 1])
            self.lines[self.row - 1] += self.lines.pop(self.row)
            self.row -= 1
            self.col = previous_len

    def delete(self) -> None:
        """Delete the character under the cursor, joining the next line at end of line."""
        line = self.current_line
        if self.col < len(line):
            self.lines[self.row] = line[:self.col] + line[self.col + 1:]
        elif self.row < len(self.lines) - 1:
            self.lines[self.row] += self.lines.pop(self.row + 1)

    def indent(self) -> None:
        self.lines[self.row] = INDENT + self.current_line
        self.col += len(INDENT)

    def outdent(self) -> None:
        line = self.current_line
        leading = len(line) - len(line.lstrip(" "))
        removed = min(leading, len(INDENT))
        if removed:
            self.lines[self.row] = line[removed:]
            self.col = max(0, self.col - removed)

    def move_cursor(self, direction: Direction) -> None:
        if direction is Direction.LEFT:
            if self.col > 0:
                self.col -= 1
            elif self.row > 0:
                self.row -= 1
                self.col = len(self.current_line)
        elif direction is Direction.RIGHT:
            if self.col < len(self.current_line):
                self.col += 1
            elif self.row < len(self.lines) - 1:
                self.row += 1
                self.col = 0
        elif direction is Direction.UP:
            if self.row > 0:
                self.row -= 1
                self.col = min(self.col, len(self.current_line))
        elif direction is Direction.DOWN:
            if self.row < len(self.lines) - 1:
                self.row += 1
                self.col = min(self.col, len(self.current_line))

    def submit(self) -> str | None:
        """Return the trimmed text and reset, or None (unchanged) if blank."""
        text = self.text.strip()
        if not text:
            return None
        self.reset()
        return text

    def reset(self) -> None:
        self.lines = [""]
        self.row = 0
        self.col = 0


class EditorPane:
    """A text buffer shown through a fixed-height window that tracks the cursor."""

    def __init__(self, height: int) -> None:
        self.buffer = TextBuffer()
        self.scroll = ScrollState(window_size=height)

    @property
    def height(self) -> int:
        return self.scroll.window_size

    def visible_lines(self) -> list[tuple[int, str]]:
        """Return ``(line_number, text)`` pairs inside the window."""
        start, end = self.scroll.range(len(self.buffer.lines))
        return [(i, self.buffer.lines[i]) for i in range(start, end)]

    @property
    def lines_above(self) -> int:
        return self.scroll.range(len(self.buffer.lines))[0]

    @property
    def lines_below(self) -> int:
        return len(self.buffer.lines) - self.scroll.range(len(self.buffer.lines))[1]

    def edit(self, operation, *args) -> bool:
        """Apply a buffer operation, then scroll the cursor row into view.

        Returns False if the buffer rejected the edit.
        """
        try:
            operation(*args)
        except InvalidInput as e:
            logger.debug(f"Ignored edit: {e}")
            return False
        self.follow_cursor()
        return True

    def follow_cursor(self) -> None:
        self.scroll.follow(self.buffer.row, len(self.buffer.lines))

    def page(self, pages: int) -> None:
        """Scroll by whole windows without moving the cursor."""
        self.scroll.scroll(pages * self.height, len(self.buffer.lines))

    def submit(self) -> str | None:
        text = self.buffer.submit()
        if text is not None:
            self.scroll.reset()
        return text

    def reset(self) -> None:
        self.buffer.reset()
        self.scroll.reset()
