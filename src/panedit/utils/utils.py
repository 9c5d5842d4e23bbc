# panedit/utils/utils.py
"""
panedit.utils.utils
===================

Configuration helpers for the panedit editor.

- Built-in defaults: ``DEFAULT_CONFIG`` always lets the editor start, even
  when the user configuration is missing or broken.
- First run: ``ensure_user_config_exists`` creates ``~/.config/panedit``
  with a ``config.toml`` rendered from the defaults, a ``.env`` template
  and an empty ``nanorc/`` rules directory.
- Loading: ``load_config`` deep-merges the user's ``config.toml`` over the
  defaults; a parse error is logged and the defaults are used.
- ``hex_to_xterm`` turns configured hex colors into xterm-256 indices.
"""

import copy
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import toml

logger = logging.getLogger("panedit")

# --- Constants ---
WHITE_FG_IDX = 255

ENV_TEMPLATE = """# panedit environment
# Set to 1 to trace every key event to keytrace.log.
PANEDIT_KEYTRACE=
# Directory with *.nanorc syntax files (overrides [highlight] rules_dir).
PANEDIT_NANORC_DIR=
"""

DEFAULT_CONFIG: Dict[str, Any] = {
    "editor": {
        "tab_size": 4,
        "indent_size": 4,
        "use_spaces": True,
        "use_system_clipboard": True,
        "insert_mode": True,
        "expand_tabs_on_open": True,
        "strict_invariants": False,
    },
    "layout": {"border_width": 1, "status_bar": True},
    "highlight": {"rules_dir": "~/.config/panedit/nanorc", "builtin_rules": True},
    "colors": {
        "status_fg": "#ffffff",
        "status_bg": "#303030",
        "border": "#5f87af",
        "focused_border": "#ffd75f",
    },
    "keybindings": {
        "quit": "ctrl+q",
        "save_file": "ctrl+s",
        "new_file": "f2",
        "close_pane": "ctrl+w",
        "next_pane": "f6",
        "help": "f1",
    },
    "logging": {
        "file_level": "DEBUG",
        "console_level": "WARNING",
        "log_to_console": False,
        "separate_error_log": False,
        "log_file": "~/.config/panedit/logs/editor.log",
    },
}


# --- Helper Functions ---

def get_config_dir() -> Path:
    return Path.home() / ".config" / "panedit"


def ensure_user_config_exists() -> None:
    """Creates the user config directory and its templates if missing."""
    try:
        config_dir = get_config_dir()
        user_config_path = config_dir / "config.toml"
        user_env_path = config_dir / ".env"

        (config_dir / "nanorc").mkdir(parents=True, exist_ok=True)

        if not user_config_path.exists():
            user_config_path.write_text(toml.dumps(DEFAULT_CONFIG), encoding="utf-8")
            logger.info("Wrote default config to %s", user_config_path)

        if not user_env_path.exists():
            user_env_path.write_text(ENV_TEMPLATE, encoding="utf-8")
            logger.info("Wrote .env template to %s", user_env_path)

    except OSError as e:
        logger.critical("Cannot prepare config directory %s: %s", get_config_dir(), e, exc_info=True)


def load_config(user_config_path: Optional[Path] = None) -> Dict[str, Any]:
    """Loads the defaults and merges the user's ``config.toml`` over them."""
    final_config = copy.deepcopy(DEFAULT_CONFIG)
    logger.debug("Starting from built-in defaults.")

    if user_config_path is None:
        ensure_user_config_exists()
        user_config_path = get_config_dir() / "config.toml"

    if user_config_path.is_file():
        try:
            user_config = toml.load(user_config_path)
            final_config = deep_merge(final_config, user_config)
            logger.info("Merged user config %s", user_config_path)
        except (toml.TomlDecodeError, OSError) as e:
            logger.error("Ignoring unreadable config %s: %s", user_config_path, e)

    return final_config


def deep_merge(base: Dict, override: Dict) -> Dict:
    """
    Returns a copy of `base` with `override` applied, merging nested tables.
    """
    result = base.copy()
    for key, value in override.items():
        if isinstance(result.get(key), dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def hex_to_xterm(hex_color: str) -> int:
    """
    Maps ``#rrggbb`` to the closest xterm-256 index (grey ramp or 6x6x6 cube).
    Malformed input maps to ``WHITE_FG_IDX``.
    """
    hex_color = hex_color.lstrip("#")
    if len(hex_color) != 6:
        return WHITE_FG_IDX
    try:
        r, g, b = (int(hex_color[i:i+2], 16) for i in (0, 2, 4))
    except ValueError:
        return WHITE_FG_IDX

    if r == g == b:
        if r < 8:
            return 16
        if r > 248:
            return 231
        return round(((r - 8) / 247) * 24) + 232

    return int(
        16
        + (36 * round(r / 255 * 5))
        + (6 * round(g / 255 * 5))
        + round(b / 255 * 5)
    )
