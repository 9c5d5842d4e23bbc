# panedit/ui/KeyBinder.py
"""KeyBinder.py
==================
Translates raw curses input into logical ``KeyEvent`` objects and resolves
the editor's global keybindings.

Every key the editor sees has a lowercase logical name: ``"up"``,
``"pagedown"``, ``"enter"``, ``"ctrl+v"``, ``"f6"``, ``"alt+x"`` or the
typed character itself. Curses key codes, control characters and raw
escape sequences (read after a lone ESC) are all normalised to these names.

Global actions (quit, save, next pane, ...) are configured in the
``[keybindings]`` section as key specs, e.g. ``save_file = "ctrl+s"`` or
``next_pane = ["f6", "alt+n"]``. Keys not bound there are routed to the
focused pane.
"""

import curses
import logging
import re
from typing import Any, Optional

from panedit.core.CursorController import KeyEvent
from panedit.utils.logging_config import KEY_LOGGER


KEY_ALIASES: dict[str, str] = {
    "del": "delete",
    "pgup": "pageup",
    "pgdn": "pagedown",
    "esc": "escape",
    "return": "enter",
    "ins": "insert",
}

DEFAULT_KEYBINDINGS: dict[str, list[str]] = {
    "quit": ["ctrl+q"],
    "save_file": ["ctrl+s"],
    "new_file": ["f2"],
    "close_pane": ["ctrl+w"],
    "next_pane": ["f6"],
    "help": ["f1"],
}


def normalize_keyspec(spec: str) -> str:
    """Canonical form of a key spec: lowercase, ``+`` separated, aliases resolved.

    ``"Ctrl+S"`` -> ``"ctrl+s"``, ``"alt-x"`` -> ``"alt+x"``, ``"PgDn"`` -> ``"pagedown"``.
    Single printable characters keep their case.

    Raises:
        ValueError: for an empty spec.
    """
    raw = spec.strip()
    if not raw:
        raise ValueError("Key string cannot be empty.")
    if len(raw) == 1:
        return raw
    s = raw.lower()
    if s.startswith("alt-"):
        s = "alt+" + s[4:]
    parts = [KEY_ALIASES.get(part, part) for part in s.split("+") if part]
    return "+".join(parts)


# ==================== KeyBinder Class ====================
class KeyBinder:
    """Class KeyBinder
    ====================
    Reads keys from curses and maps them to logical names and global actions.

    Attributes:
        config (dict[str, Any]): Editor configuration.
        stdscr: The curses window used for input.
        keybindings (dict[str, list[str]]): Action -> normalised key names.
        action_for_key (dict[str, str]): Key name -> action.
    """

    # Keys do NOT include the leading ESC; get_key_input() reads after it.
    ESCAPE_SEQUENCE_MAP: dict[str, str] = {
        # Arrows (CSI and SS3)
        "[A": "up", "[B": "down", "[C": "right", "[D": "left",
        "OA": "up", "OB": "down", "OC": "right", "OD": "left",

        # Home/End (CSI/SS3 and tilde variants)
        "[H": "home", "[F": "end", "OH": "home", "OF": "end",
        "[1~": "home", "[4~": "end", "[7~": "home", "[8~": "end",

        # Insert/Delete/PageUp/PageDown (~ style)
        "[2~": "insert", "[3~": "delete", "[5~": "pageup", "[6~": "pagedown",

        # Function keys (SS3 and tilde variants)
        "OP": "f1", "OQ": "f2", "OR": "f3", "OS": "f4",
        "[11~": "f1", "[12~": "f2", "[13~": "f3", "[14~": "f4",
        "[15~": "f5", "[17~": "f6", "[18~": "f7", "[19~": "f8",
        "[20~": "f9", "[21~": "f10", "[23~": "f11", "[24~": "f12",
    }

    CONTROL_CHAR_NAMES: dict[int, str] = {
        8: "backspace",
        9: "tab",
        10: "enter",
        13: "enter",
        27: "escape",
        127: "backspace",
    }

    def __init__(self, config: Optional[dict[str, Any]] = None, stdscr: Any = None) -> None:
        self.config = config or {}
        self.stdscr = stdscr
        self.curses_key_names = self._build_curses_key_names()
        self.keybindings = self._load_keybindings()
        self.action_for_key: dict[str, str] = {}
        for action, keys in self.keybindings.items():
            for key in keys:
                if key in self.action_for_key:
                    logging.warning(
                        f"Keybinding for action '{action}' (key: {key}) is overwriting "
                        f"the mapping for '{self.action_for_key[key]}'."
                    )
                self.action_for_key[key] = action
        logging.debug("KeyBinder initialized with bindings: %s", self.action_for_key)

    @staticmethod
    def _build_curses_key_names() -> dict[int, str]:
        names = {
            curses.KEY_UP: "up",
            curses.KEY_DOWN: "down",
            curses.KEY_LEFT: "left",
            curses.KEY_RIGHT: "right",
            curses.KEY_HOME: "home",
            getattr(curses, "KEY_END", curses.KEY_LL): "end",
            curses.KEY_PPAGE: "pageup",
            curses.KEY_NPAGE: "pagedown",
            curses.KEY_DC: "delete",
            curses.KEY_IC: "insert",
            curses.KEY_BACKSPACE: "backspace",
            curses.KEY_ENTER: "enter",
            curses.KEY_RESIZE: "resize",
        }
        for number in range(1, 13):
            names[curses.KEY_F0 + number] = f"f{number}"
        return names

    def _load_keybindings(self) -> dict[str, list[str]]:
        """Merges ``[keybindings]`` from the config over the defaults."""
        user_bindings: dict[str, Any] = self.config.get("keybindings", {})
        parsed: dict[str, list[str]] = {}

        for action in {**DEFAULT_KEYBINDINGS, **user_bindings}:
            spec = user_bindings.get(action, DEFAULT_KEYBINDINGS.get(action))
            if not spec:
                logging.debug("Keybinding for action %r is disabled or empty.", action)
                continue
            if isinstance(spec, str):
                specs = [s.strip() for s in spec.split("|")] if "|" in spec else [spec]
            elif isinstance(spec, list):
                specs = spec
            else:
                logging.error("Keybinding for action %r has unsupported type %s", action, type(spec).__name__)
                continue

            keys: list[str] = []
            for item in specs:
                try:
                    key = normalize_keyspec(str(item))
                except ValueError as e:
                    logging.error("Error parsing keybinding %r for action %r: %s", item, action, e)
                    continue
                if key not in keys:
                    keys.append(key)
            if keys:
                parsed[action] = keys
        return parsed

    # --- Translation ---

    def translate(self, raw: int | str) -> Optional[KeyEvent]:
        """Converts a curses key (code or ``get_wch`` string) into a ``KeyEvent``."""
        if isinstance(raw, str):
            if len(raw) != 1:
                return KeyEvent(normalize_keyspec(raw)) if raw.strip() else None
            code = ord(raw)
            if code >= 32 and code != 127:
                return KeyEvent.char(raw)
            raw = code

        if raw in self.curses_key_names:
            return KeyEvent(self.curses_key_names[raw])
        if raw in self.CONTROL_CHAR_NAMES:
            return KeyEvent(self.CONTROL_CHAR_NAMES[raw])
        if 1 <= raw <= 26:
            return KeyEvent(f"ctrl+{chr(raw + 96)}")
        if raw >= 32:
            try:
                ch = chr(raw)
            except (ValueError, OverflowError):
                logging.warning(f"Invalid ordinal for chr(): {raw}. Cannot convert.")
                return None
            if ch.isprintable():
                return KeyEvent.char(ch)
        logging.debug("Untranslatable key code %r", raw)
        return None

    def lookup(self, event: Optional[KeyEvent]) -> Optional[str]:
        """Returns the global action bound to ``event``, if any."""
        if event is None or not event.name:
            return None
        return self.action_for_key.get(event.name)

    def _read_escape_sequence(self, target: Any) -> Optional[KeyEvent]:
        seq = ""
        target.nodelay(True)
        try:
            while True:
                nx = target.getch()
                if nx == curses.ERR:
                    break
                if 0 <= nx <= 255:
                    seq += chr(nx)
                else:
                    seq += f"<{nx}>"
        finally:
            target.nodelay(False)

        if not seq:
            return KeyEvent("escape")
        if seq[0] == "\x1b":
            seq = seq[1:]

        # Alt chord: ESC + single printable -> "alt+<char>"
        if len(seq) == 1 and seq.isprintable():
            return KeyEvent(f"alt+{seq.lower()}")

        mapped = self.ESCAPE_SEQUENCE_MAP.get(seq)
        if not mapped:
            cleaned = "".join(re.findall(r"[\[O0-9;~A-Za-z]", seq))
            mapped = self.ESCAPE_SEQUENCE_MAP.get(cleaned)
        if mapped:
            return KeyEvent(mapped)

        logging.warning("get_key_input: unknown escape sequence: ESC + %r", seq)
        return KeyEvent("escape")

    def get_key_input(self, window: Any = None) -> Optional[KeyEvent]:
        """Reads one key (or escape sequence) and returns its ``KeyEvent``.

        Returns None when no usable key was read (timeout or curses error).
        """
        target = window or self.stdscr
        try:
            raw = target.get_wch()
        except curses.error:
            return None

        if raw == "\x1b" or raw == 27:
            event = self._read_escape_sequence(target)
        else:
            event = self.translate(raw)
        KEY_LOGGER.debug("raw %r -> %r", raw, event)
        return event
