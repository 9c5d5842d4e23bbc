# panedit/utils/logging_config.py
"""panedit.utils.logging_config
==============================

Logging configuration for the panedit editor.

Defines the global logger objects and ``setup_logging``, which attaches the
application handlers according to the ``[logging]`` section of the config:

    - Rotating file log (``editor.log`` by default) for all editor events.
    - Optional console output to stderr.
    - Optional rotating ``error.log`` receiving ERROR and CRITICAL only.
    - Optional ``keytrace.log`` for raw key events, enabled by the
      ``PANEDIT_KEYTRACE`` environment variable.

Log directories are created on demand, falling back to the system temp
directory. ``setup_logging`` never raises: problems are printed to stderr
and logging continues with whatever could be configured. Calling it again
replaces the handlers instead of duplicating them.

Globals:
    logger: Main application logger ("panedit").
    KEY_LOGGER: Logger for key-press trace events ("panedit.keyevents").
"""

import logging
import logging.handlers
import os
import sys
import tempfile
from typing import Any, Optional


# --- Loggers ---
# Unconfigured until ``setup_logging()`` attaches handlers.
logger = logging.getLogger("panedit")
KEY_LOGGER = logging.getLogger("panedit.keyevents")

FILE_FORMAT = "%(asctime)s - %(levelname)-8s - %(name)-15s - %(message)s (%(filename)s:%(lineno)d)"
CONSOLE_FORMAT = "%(levelname)-8s - %(name)-12s - %(message)s"


def keytrace_enabled() -> bool:
    return os.environ.get("PANEDIT_KEYTRACE", "").lower() in {"1", "true", "yes"}


def _prepare_log_path(filename: str, fallback_name: str) -> str:
    """Creates the directory of ``filename``; returns a temp path if that fails."""
    filename = os.path.expanduser(filename)
    log_dir = os.path.dirname(filename)
    if log_dir and not os.path.exists(log_dir):
        try:
            os.makedirs(log_dir)
        except OSError as e_mkdir:
            print(f"Error creating log directory '{log_dir}': {e_mkdir}", file=sys.stderr)
            filename = os.path.join(tempfile.gettempdir(), fallback_name)
            print(f"Logging to temporary file: '{filename}'", file=sys.stderr)
    return filename


def _rotating_handler(
    filename: str, max_bytes: int, backup_count: int, formatter: logging.Formatter, level: int
) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        filename, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
    )
    handler.setFormatter(formatter)
    handler.setLevel(level)
    return handler


# --- Logging Setup Function ---
def setup_logging(config: Optional[dict[str, Any]] = None) -> None:
    """Configures application-wide logging handlers and log levels.

    Args:
        config (dict | None): Application configuration. Only the
            ``["logging"]`` section is read:

            - ``file_level`` (str): Level for the main log. Default ``"DEBUG"``.
            - ``console_level`` (str): Level for stderr. Default ``"WARNING"``.
            - ``log_to_console`` (bool): Enable the stderr handler. Default ``True``.
            - ``separate_error_log`` (bool): Create ``error.log``. Default ``False``.
            - ``log_file`` (str): Path of the main log. Default ``"editor.log"``.
              ``error.log`` and ``keytrace.log`` are written next to it.

    Side Effects:
        - Replaces all handlers on the root logger.
        - Configures ``panedit.keyevents`` to not propagate and to be
          disabled unless ``PANEDIT_KEYTRACE`` is ``1``/``true``/``yes``.
    """
    if config is None:
        config = {}
    logging_config = config.get("logging", {})
    log_file_level_str = str(logging_config.get("file_level", "DEBUG")).upper()
    log_file_level = getattr(logging, log_file_level_str, logging.DEBUG)

    log_filename = _prepare_log_path(logging_config.get("log_file", "editor.log"), "panedit.log")
    log_dir = os.path.dirname(log_filename)

    file_formatter = logging.Formatter(FILE_FORMAT)
    file_handler = None
    try:
        file_handler = _rotating_handler(log_filename, 2 * 1024 * 1024, 5, file_formatter, log_file_level)
    except Exception as e_fh:
        print(
            f"Cannot open log file {log_filename!r}: {e_fh}",
            file=sys.stderr,
        )

    # Console Handler
    console_handler = None
    if logging_config.get("log_to_console", True):
        console_level_str = str(logging_config.get("console_level", "WARNING")).upper()
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
        console_handler.setLevel(getattr(logging, console_level_str, logging.WARNING))

    # error.log
    error_file_handler = None
    error_log_filename = os.path.join(log_dir, "error.log")
    if logging_config.get("separate_error_log", False):
        try:
            error_file_handler = _rotating_handler(
                error_log_filename, 1 * 1024 * 1024, 3, file_formatter, logging.ERROR
            )
        except Exception as e_efh:
            print(
                f"Cannot open error log {error_log_filename!r}: {e_efh}",
                file=sys.stderr,
            )

    root_logger = logging.getLogger()
    root_logger.handlers = []

    for handler in (file_handler, console_handler, error_file_handler):
        if handler:
            root_logger.addHandler(handler)
    root_logger.setLevel(log_file_level)

    # Key Event Logger
    KEY_LOGGER.propagate = False
    KEY_LOGGER.setLevel(logging.DEBUG)
    KEY_LOGGER.handlers = []

    if keytrace_enabled():
        key_trace_filename = os.path.join(log_dir, "keytrace.log")
        try:
            KEY_LOGGER.addHandler(
                _rotating_handler(
                    key_trace_filename,
                    1 * 1024 * 1024,
                    3,
                    logging.Formatter("%(asctime)s - %(message)s"),
                    logging.DEBUG,
                )
            )
            KEY_LOGGER.disabled = False
            logging.info("Key event tracing enabled, logging to '%s'.", key_trace_filename)
        except Exception as e_keytrace:
            logging.error(f"Failed to set up key trace logging: {e_keytrace}", exc_info=True)
            KEY_LOGGER.disabled = True
    else:
        KEY_LOGGER.addHandler(logging.NullHandler())
        KEY_LOGGER.disabled = True
        logging.debug("Key event tracing is disabled.")

    logging.info(
        "Logging ready (root level %s).",
        logging.getLevelName(root_logger.level),
    )
    for handler in root_logger.handlers:
        target = getattr(handler, "baseFilename", "stderr")
        logging.info("  %s -> %s", logging.getLevelName(handler.level), target)
