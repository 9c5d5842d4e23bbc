# panedit/core/errors.py
"""panedit.core.errors
=====================

Exception taxonomy shared by the editing core.

- ``OutOfBoundsError``: a buffer or cursor index outside the document.
  Raised by ``TextBuffer``; callers are expected to validate first.
- ``PatternConversionError``: a highlight pattern that cannot be translated
  into a Python regular expression. Recovered locally by the rule loader.
- ``CollaboratorError``: persistence or clipboard failure. Caught at the
  call site, logged and shown as a transient pane message.
- ``InvariantViolation``: the buffer lost its last line or the cursor went
  negative. Raised only when ``editor.strict_invariants`` is enabled;
  otherwise the state is clamped and a warning is logged.
"""


class PaneditError(Exception):
    """Base class for all editor errors."""


class OutOfBoundsError(PaneditError, IndexError):
    """A row or column does not address an existing position."""

    def __init__(self, message: str, row: int, column: int | None = None) -> None:
        super().__init__(message)
        self.row = row
        self.column = column


class PatternConversionError(PaneditError, ValueError):
    """A nanorc pattern could not be converted to a Python regex."""

    def __init__(self, pattern: str, reason: str) -> None:
        super().__init__(f"cannot convert pattern {pattern!r}: {reason}")
        self.pattern = pattern
        self.reason = reason


class CollaboratorError(PaneditError):
    """A file, clipboard or other external service failed."""


class InvariantViolation(PaneditError, AssertionError):
    """Internal state broke one of the buffer/cursor invariants."""
