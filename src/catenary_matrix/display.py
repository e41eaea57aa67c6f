"""Terminal surface for the departure board: painting and key input."""

from __future__ import annotations

import logging
import os
import select
import sys
import termios
import tty

from rich.console import Console, RenderableType
from rich.live import Live
from rich.text import Text

logger = logging.getLogger(__name__)

ESCAPE = "\x1b"

# Sequence bodies (after ESC [ or ESC O) the board reacts to
SEQUENCE_KEYS = {
    "A": "up",
    "B": "down",
    "5~": "pageup",
    "6~": "pagedown",
    "H": "home",
    "F": "end",
}


def parse_keys(data: str) -> list[str]:
    """Split raw terminal input into key names.

    Printable characters map to themselves and a lone ESC to "escape".
    Cursor and paging sequences (ESC [ ... or ESC O ...) are named via
    SEQUENCE_KEYS; any other sequence is dropped so a function key is
    never mistaken for escape.
    """
    keys: list[str] = []
    i = 0
    while i < len(data):
        ch = data[i]
        if ch == ESCAPE:
            if i + 1 < len(data) and data[i + 1] in "[O":
                # Read up to the final byte of the sequence (a letter or ~)
                start = i + 2
                i = start
                while i < len(data) and not (data[i].isalpha() or data[i] == "~"):
                    i += 1
                name = SEQUENCE_KEYS.get(data[start:i + 1])
                if name:
                    keys.append(name)
                i += 1
                continue
            keys.append("escape")
        elif ch in "\r\n":
            keys.append("return")
        elif ch == "\t":
            keys.append("tab")
        elif ch.isprintable():
            keys.append(ch.lower())
        i += 1
    return keys


class TerminalDisplay:
    """Full-screen rich Live surface with non-blocking key reads."""

    def __init__(self, console: Console | None = None) -> None:
        """Take over the terminal.

        The alternate screen is used so the shell scrollback is restored on
        exit. stdin is switched to cbreak mode (when it is a terminal) so
        single key presses arrive without Enter.
        """
        self.console = console or Console()
        self._fd: int | None = None
        self._saved_attrs = None
        if sys.stdin.isatty():
            self._fd = sys.stdin.fileno()
            self._saved_attrs = termios.tcgetattr(self._fd)
            tty.setcbreak(self._fd)
        self._live = Live(
            Text(""),
            console=self.console,
            screen=True,
            auto_refresh=False,
            transient=True,
        )
        self._live.start()
        width, height = self.size
        logger.info("Terminal display initialized (%dx%d)", width, height)

    @property
    def size(self) -> tuple[int, int]:
        """Current terminal (width, height) in characters."""
        return self.console.size.width, self.console.size.height

    def update(self, renderable: RenderableType) -> None:
        """Replace the screen contents."""
        self._live.update(renderable, refresh=True)

    def read_keys(self) -> list[str]:
        """Return keys pressed since the last call, without blocking."""
        if self._fd is None:
            return []
        chunks = []
        while select.select([self._fd], [], [], 0)[0]:
            data = os.read(self._fd, 64)
            if not data:
                break
            chunks.append(data.decode(errors="ignore"))
        return parse_keys("".join(chunks))

    def close(self) -> None:
        """Restore the terminal."""
        logger.info("Closing terminal display")
        self._live.stop()
        if self._fd is not None and self._saved_attrs is not None:
            termios.tcsetattr(self._fd, termios.TCSADRAIN, self._saved_attrs)
            self._fd = None
