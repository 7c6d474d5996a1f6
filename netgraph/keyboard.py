"""Non-blocking keyboard input in cbreak mode."""

from __future__ import annotations

import os
import select
import sys
import termios
import tty
from contextlib import contextmanager
from typing import Iterator, TextIO

# Key constants
KEY_UP = "\x1b[A"
KEY_DOWN = "\x1b[B"
KEY_LEFT = "\x1b[D"
KEY_ESCAPE = "\x1b"

ESCAPE_TIMEOUT_S = 0.05


class TerminalError(RuntimeError):
    """The controlling terminal cannot be put into cbreak mode."""


class KeyboardHandler:
    """Single keypresses from stdin without waiting for Enter."""

    def __init__(self, stream: TextIO | None = None):
        self.stream = stream or sys.stdin
        self.old_settings = None

    def enable_raw_mode(self) -> None:
        if not self.stream.isatty():
            raise TerminalError("stdin is not a terminal")
        try:
            fd = self.stream.fileno()
            self.old_settings = termios.tcgetattr(fd)
            tty.setcbreak(fd)
        except termios.error as exc:
            raise TerminalError(f"cannot configure terminal: {exc}") from exc

    def disable_raw_mode(self) -> None:
        """Restore the settings saved by enable_raw_mode()."""
        if self.old_settings is None:
            return
        termios.tcsetattr(self.stream.fileno(), termios.TCSADRAIN, self.old_settings)
        self.old_settings = None

    @contextmanager
    def raw_mode(self) -> Iterator[KeyboardHandler]:
        self.enable_raw_mode()
        try:
            yield self
        finally:
            self.disable_raw_mode()

    def get_key(self, timeout: float = 0.1) -> str | None:
        """
        Wait up to `timeout` seconds for a keypress.

        Returns:
            The key (arrow keys as their escape sequence), or None.
        """
        if not select.select([self.stream], [], [], max(0.0, timeout))[0]:
            return None
        key = self._read(1)
        if key == KEY_ESCAPE and select.select([self.stream], [], [], ESCAPE_TIMEOUT_S)[0]:
            key += self._read(2)
        return key or None

    def _read(self, n: int) -> str:
        # os.read bypasses the TextIOWrapper buffer, so the rest of an escape
        # sequence stays visible to select()
        return os.read(self.stream.fileno(), n).decode(errors="replace")
