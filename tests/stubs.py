# tests/stubs.py
"""Test stubs for panedit editor tests.

Stub collaborators for the cursor controller and a helper that builds a
controller over given lines with a fixed viewport.
"""

from typing import Any, Optional

from panedit.core.CursorController import CursorController
from panedit.core.errors import CollaboratorError
from panedit.core.TextBuffer import TextBuffer
from panedit.integrations.Indentation import IndentationProvider


class StubClipboard:
    """Clipboard returning fixed text, or failing when `error` is set."""

    def __init__(self, text: str = "", error: Optional[str] = None) -> None:
        self.text = text
        self.error = error
        self.reads = 0

    def read(self) -> str:
        self.reads += 1
        if self.error:
            raise CollaboratorError(self.error)
        return self.text


class StubIndentation(IndentationProvider):
    """Indentation provider with a fixed stop width and a call log."""

    def __init__(self, width: int = 4) -> None:
        super().__init__({"editor": {"tab_size": width, "indent_size": width}})
        self.width = width
        self.calls: list[int] = []

    def indentation_for(self, column: int) -> str:
        self.calls.append(column)
        return " " * (self.width - column % self.width)


def make_controller(lines: list[str], height: int = 10, width: int = 80, **kwargs: Any) -> CursorController:
    """Builds a controller over `lines` with a `height` x `width` viewport."""
    ctrl = CursorController(TextBuffer("t.txt", lines), **kwargs)
    ctrl.set_viewport_size(height, width)
    return ctrl
