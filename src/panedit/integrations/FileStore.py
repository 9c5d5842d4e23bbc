# panedit/integrations/FileStore.py
"""FileStore.py
===============
Persistence collaborator: reads documents into lines and writes them back.

Reading mirrors the editor's historical open path: a sample of the file is
run through ``chardet``; the detected encoding is tried first when the
confidence is high, then UTF-8, Latin-1 and finally UTF-8 with replacement.
Tabs are expanded with the indentation collaborator when configured.

Every failure is raised as ``CollaboratorError``. The caller decides what
to do: opening falls back to an empty buffer, saving reports the error.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Any, Optional

import chardet

from panedit.core.TextBuffer import split_lines
from panedit.core.errors import CollaboratorError
from panedit.integrations.Indentation import IndentationProvider


CHARDET_SAMPLE_SIZE = 1024 * 20
CHARDET_MIN_CONFIDENCE = 0.75


@dataclass
class FileContents:
    """Decoded lines of a file and the encoding that decoded them."""

    lines: list[str] = field(default_factory=lambda: [""])
    encoding: str = "utf-8"


class FileStore:
    """Reads and writes text documents for editor buffers."""

    def __init__(
        self,
        config: Optional[dict[str, Any]] = None,
        indentation: Optional[IndentationProvider] = None,
    ) -> None:
        editor_cfg = (config or {}).get("editor", {})
        self.expand_tabs_on_open: bool = bool(editor_cfg.get("expand_tabs_on_open", True))
        self.indentation = indentation or IndentationProvider(config)

    def _candidate_encodings(self, sample: bytes) -> list[tuple[str, str]]:
        detected = chardet.detect(sample) if sample else {}
        guess = detected.get("encoding")
        confidence = detected.get("confidence") or 0.0
        logging.debug("chardet detected %r with confidence %.2f", guess, confidence)

        candidates: list[tuple[str, str]] = []
        if guess and confidence >= CHARDET_MIN_CONFIDENCE:
            candidates.append((guess, "strict"))
        for pair in (("utf-8", "strict"), ("latin-1", "strict"), ("utf-8", "replace")):
            if pair not in candidates:
                candidates.append(pair)
        return candidates

    def read_file(self, path: str) -> FileContents:
        """Reads ``path`` and returns its lines without terminators.

        Raises:
            CollaboratorError: if the file is missing, a directory, unreadable
                or cannot be decoded.
        """
        if not os.path.exists(path):
            raise CollaboratorError(f"file not found: {path}")
        if os.path.isdir(path):
            raise CollaboratorError(f"'{path}' is a directory")

        try:
            with open(path, "rb") as f_binary:
                raw = f_binary.read()
        except OSError as e:
            raise CollaboratorError(f"cannot read '{path}': {e}") from e

        if not raw:
            return FileContents()

        for encoding, errors in self._candidate_encodings(raw[:CHARDET_SAMPLE_SIZE]):
            try:
                text = raw.decode(encoding, errors=errors)
            except (UnicodeDecodeError, LookupError) as e:
                logging.warning(f"Failed to decode '{path}' as {encoding} ({errors}): {e}")
                continue
            lines = split_lines(text)
            if self.expand_tabs_on_open:
                lines = [self.indentation.expand_tabs(line) for line in lines]
            logging.info(f"Read '{path}' using encoding '{encoding}' ({len(lines)} lines).")
            return FileContents(lines, encoding)

        raise CollaboratorError(f"could not decode '{path}'")

    def write_file(self, path: str, lines: list[str], encoding: str = "utf-8") -> None:
        """Writes ``lines`` joined by ``\\n`` to ``path``.

        Raises:
            CollaboratorError: on any I/O or encoding failure.
        """
        try:
            directory = os.path.dirname(os.path.abspath(path))
            os.makedirs(directory, exist_ok=True)
            with open(path, "w", encoding=encoding, newline="") as f_text:
                f_text.write("\n".join(lines))
        except (OSError, UnicodeEncodeError, LookupError) as e:
            raise CollaboratorError(f"cannot write '{path}': {e}") from e
        logging.info(f"Wrote {len(lines)} lines to '{path}' ({encoding}).")
