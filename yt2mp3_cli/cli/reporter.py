"""
Colour-coded console status lines, with support for overwriting an
in-progress line once its work has finished.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from rich.cells import cell_len
from rich.console import Console
from rich.control import Control, ControlType
from rich.text import Text


class Level(str, Enum):
    INFO = "INFO"
    WARNING = "WARNING"
    SUCCESS = "SUCCESS"
    ERROR = "ERROR"
    FATAL = "FATAL"
    DEBUG = "DEBUG"
    LOG = "LOG"


LEVEL_STYLES = {
    Level.SUCCESS: "green",
    Level.WARNING: "yellow",
    Level.ERROR: "red",
    Level.FATAL: "magenta",
    Level.INFO: "blue",
    Level.DEBUG: "bright_black",
    Level.LOG: "",
}


@dataclass(frozen=True)
class CursorMark:
    """Column of the open status line at the time it was captured."""

    column: int


class Reporter:
    """
    Prints status messages. FATAL is only a colour here, terminating the
    program is left to the caller.
    """

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console(highlight=False)
        self._column = 0

    def alert(
        self,
        message: str,
        level: Level = Level.LOG,
        newline: bool = True,
        show_level: bool = False,
    ) -> None:
        if show_level:
            message = f"[{level.value}] {message}"
        self.console.print(
            Text(message, style=LEVEL_STYLES[level]),
            end="\n" if newline else "",
            soft_wrap=True,
        )
        if newline:
            self._column = 0
        elif "\n" in message:
            self._column = cell_len(message.rsplit("\n", 1)[-1])
        else:
            self._column += cell_len(message)

    def capture_cursor(self) -> CursorMark:
        return CursorMark(self._column)

    def restore_cursor(self, mark: CursorMark) -> None:
        """
        Moves back to `mark` on the current line and clears everything after it.
        Consoles that cannot move the cursor get a fresh line instead, unless
        nothing was written since the mark.
        """
        if self.console.is_terminal:
            self.console.control(
                Control.move_to_column(mark.column),
                Control((ControlType.ERASE_IN_LINE, 0)),
            )
            self._column = mark.column
        elif self._column != mark.column:
            self.console.print()
            self._column = 0
