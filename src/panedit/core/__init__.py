# src/panedit/core/__init__.py
"""Public facade for panedit.core: re-export main classes from CamelCase modules."""

from .CursorController import Cursor, CursorController, KeyEvent, Viewport  # noqa: F401
from .Editor import Editor  # noqa: F401
from .errors import (  # noqa: F401
    CollaboratorError,
    InvariantViolation,
    OutOfBoundsError,
    PaneditError,
    PatternConversionError,
)
from .Highlighter import HighlightRule, HighlightRuleSet, SyntaxHighlighter  # noqa: F401
from .TextBuffer import TextBuffer  # noqa: F401


__all__ = [
    "Cursor",
    "CursorController",
    "KeyEvent",
    "Viewport",
    "Editor",
    "CollaboratorError",
    "InvariantViolation",
    "OutOfBoundsError",
    "PaneditError",
    "PatternConversionError",
    "HighlightRule",
    "HighlightRuleSet",
    "SyntaxHighlighter",
    "TextBuffer",
]
