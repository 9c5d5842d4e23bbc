# panedit/integrations/Clipboard.py
"""Clipboard.py
===============
Clipboard collaborator used by paste.

The system clipboard is reached through ``pyperclip`` when
``editor.use_system_clipboard`` is enabled and a clipboard utility is
present (xclip, xsel, wl-clipboard, pbcopy, ...). Otherwise paste reads an
empty clipboard.
"""

import logging
from typing import Any, Optional

import pyperclip

from panedit.core.errors import CollaboratorError


class ClipboardProvider:
    """Reads clipboard text for paste.

    Attributes:
        use_system_clipboard (bool): Whether pyperclip is consulted at all.
    """

    def __init__(self, config: Optional[dict[str, Any]] = None) -> None:
        editor_cfg = (config or {}).get("editor", {})
        self.use_system_clipboard: bool = bool(editor_cfg.get("use_system_clipboard", True))
        if self.use_system_clipboard:
            self.use_system_clipboard = self._check_pyclip_availability()

    def _check_pyclip_availability(self) -> bool:
        """Checks once whether pyperclip can reach a system clipboard."""
        try:
            pyperclip.paste()
            logging.debug("pyperclip and system clipboard utilities appear to be available.")
            return True
        except pyperclip.PyperclipException as e:
            logging.warning(
                f"System clipboard unavailable via pyperclip: {e}. "
                "Paste will see an empty clipboard."
            )
            return False
        except Exception as e:
            logging.warning(
                f"Unexpected error while checking the system clipboard: {e}. "
                "Paste will see an empty clipboard.",
                exc_info=True,
            )
            return False

    def read(self) -> str:
        """Returns the clipboard text, possibly empty.

        Raises:
            CollaboratorError: if the system clipboard fails while enabled.
        """
        if not self.use_system_clipboard:
            return ""
        try:
            return pyperclip.paste() or ""
        except pyperclip.PyperclipException as e:
            raise CollaboratorError(f"clipboard read failed: {e}") from e

