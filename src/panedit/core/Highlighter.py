# panedit/core/Highlighter.py
"""panedit.core.Highlighter
==========================

Regex-driven syntax highlighting from nanorc rule files.

Rule files use the nanorc format::

    syntax "python" "\\.pyw?$"
    color brightcyan "\\<(def|class|return)\\>"
    icolor green "\\<0x[0-9a-f]+\\>"

Patterns are written in nano's POSIX dialect (``[[:alpha:]]`` classes and
``\\<`` / ``\\>`` word boundaries) and are converted to Python ``re``
syntax when loaded. A pattern that cannot be converted is logged and
replaced by the bare-word pattern ``\\b\\w+\\b``; loading always continues.

Highlighting a line is a pure function of the line and the resolved
ruleset (``find_spans``): every rule is run over the line, zero-length
matches are dropped, matches are ordered by start then by descending length
and accepted greedily when they do not overlap an accepted span. The result
is rendered either as ``{color-fg}text{/color-fg}`` markup (applied from the
rightmost span to the leftmost) or as a segment list for the curses surface.
"""

from __future__ import annotations

import glob
import logging
import os
import re
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

from pygments.lexers import get_lexer_for_filename
from pygments.util import ClassNotFound

from panedit.core.errors import PatternConversionError


FALLBACK_PATTERN = r"\b\w+\b"

# Colors the curses surface cannot show reliably on 8/16-color terminals.
COLOR_SUBSTITUTIONS: dict[str, str] = {
    "brightwhite": "white",
    "brightcyan": "cyan",
    "brightblue": "blue",
    "brightred": "red",
    "brightgreen": "green",
    "brightyellow": "yellow",
    "brightmagenta": "magenta",
    "brightblack": "black",
}

POSIX_CLASSES: dict[str, str] = {
    "alpha": "a-zA-Z",
    "digit": "0-9",
    "alnum": "a-zA-Z0-9",
    "upper": "A-Z",
    "lower": "a-z",
    "space": r"\s",
    "blank": r" \t",
    "xdigit": "0-9A-Fa-f",
    "punct": r"!-/:-@\[-`{-~",
    "cntrl": r"\x00-\x1f\x7f",
    "print": r"\x20-\x7e",
    "graph": r"\x21-\x7e",
    "word": r"\w",
}

_POSIX_CLASS_RE = re.compile(r"\[:(\w+):\]")
# A quoted nanorc argument ends at a quote followed by whitespace or end of line.
_QUOTED_RE = re.compile(r'"(.*?)"(?=\s|$)')
_SYNTAX_RE = re.compile(r'^syntax\s+(?:"([^"]+)"|(\S+))\s*(.*)$')
_COLOR_RE = re.compile(r"^(i?color)\s+(\S+)\s+(.*)$")


## ==================== Data types ====================
@dataclass(frozen=True)
class HighlightRule:
    """One compiled ``color`` rule."""

    pattern: str
    color: str
    ignore_case: bool = False
    regex: re.Pattern = field(init=False, compare=False, repr=False)

    def __post_init__(self) -> None:
        flags = re.IGNORECASE if self.ignore_case else 0
        object.__setattr__(self, "regex", re.compile(self.pattern, flags))


@dataclass
class HighlightRuleSet:
    """Ordered rules selected by a filename regex."""

    name: str
    file_pattern: str
    rules: list[HighlightRule] = field(default_factory=list)
    source: str = "<string>"

    def matches_filename(self, basename: str) -> bool:
        if not self.file_pattern:
            return False
        try:
            return re.search(self.file_pattern, basename) is not None
        except re.error as e:
            logging.warning(f"Invalid file pattern {self.file_pattern!r} in {self.source}: {e}")
            return False


@dataclass(frozen=True)
class HighlightSpan:
    """A half-open character range ``[start, end)`` painted with ``color``."""

    start: int
    end: int
    color: str


## ==================== Pure helpers ====================
def map_color(color: str) -> str:
    """Maps a nanorc color name to one the render surface supports."""
    color = color.lower()
    return COLOR_SUBSTITUTIONS.get(color, color)


def convert_pattern(pattern: str) -> str:
    """Converts a nanorc (POSIX extended) regex to Python ``re`` syntax.

    Raises:
        PatternConversionError: for empty patterns, unknown POSIX classes or
            results that Python's ``re`` rejects.
    """
    if not pattern:
        raise PatternConversionError(pattern, "empty pattern")

    def _posix(match: re.Match) -> str:
        name = match.group(1)
        if name not in POSIX_CLASSES:
            raise PatternConversionError(pattern, f"unknown character class [:{name}:]")
        return POSIX_CLASSES[name]

    converted = _POSIX_CLASS_RE.sub(_posix, pattern)

    out: list[str] = []
    i = 0
    while i < len(converted):
        ch = converted[i]
        if ch == "\\" and i + 1 < len(converted):
            nxt = converted[i + 1]
            out.append(r"\b" if nxt in "<>" else ch + nxt)
            i += 2
            continue
        out.append(ch)
        i += 1
    result = "".join(out)

    try:
        re.compile(result)
    except re.error as e:
        raise PatternConversionError(pattern, str(e)) from e
    return result


def compile_rule(pattern: str, color: str, ignore_case: bool = False, source: str = "<string>") -> HighlightRule:
    """Builds a rule, substituting ``FALLBACK_PATTERN`` when conversion fails."""
    try:
        converted = convert_pattern(pattern)
    except PatternConversionError as e:
        logging.warning(f"{source}: {e}; using fallback pattern {FALLBACK_PATTERN!r}")
        converted = FALLBACK_PATTERN
    return HighlightRule(converted, color.lower(), ignore_case)


def _convert_file_pattern(pattern: str, source: str) -> str:
    try:
        return convert_pattern(pattern)
    except PatternConversionError as e:
        logging.warning(f"{source}: {e}; keeping the file pattern as written")
        return pattern


def parse_rules(text: str, source: str = "<string>") -> list[HighlightRuleSet]:
    """Parses nanorc text into rulesets, in file order.

    Only ``syntax``, ``color`` and ``icolor`` lines are interpreted. Other
    nanorc directives and ``start=``/``end=`` region rules are skipped.
    """
    rulesets: list[HighlightRuleSet] = []
    current: Optional[HighlightRuleSet] = None

    for lineno, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue

        syntax = _SYNTAX_RE.match(line)
        if syntax:
            name = syntax.group(1) or syntax.group(2)
            file_patterns = [
                _convert_file_pattern(p, f"{source}:{lineno}")
                for p in _QUOTED_RE.findall(syntax.group(3))
            ]
            if len(file_patterns) > 1:
                file_pattern = "|".join(f"(?:{p})" for p in file_patterns)
            else:
                file_pattern = file_patterns[0] if file_patterns else ""
            current = HighlightRuleSet(name, file_pattern, [], source)
            rulesets.append(current)
            logging.debug(f"{source}:{lineno}: syntax {name!r} for {file_pattern!r}")
            continue

        color_line = _COLOR_RE.match(line)
        if color_line:
            if current is None:
                logging.warning(f"{source}:{lineno}: color rule outside of a syntax block, skipped")
                continue
            keyword, colorspec, rest = color_line.groups()
            if "start=" in rest:
                logging.debug(f"{source}:{lineno}: multi-line region rules are not supported")
                continue
            foreground = colorspec.split(",", 1)[0] or "normal"
            for pattern in _QUOTED_RE.findall(rest):
                current.rules.append(
                    compile_rule(pattern, foreground, keyword == "icolor", f"{source}:{lineno}")
                )
            continue

        logging.debug(f"{source}:{lineno}: ignoring directive {line.split()[0]!r}")

    return rulesets


def find_spans(line: str, rules: Iterable[HighlightRule]) -> list[HighlightSpan]:
    """Returns the accepted, non-overlapping spans of ``line`` sorted by start."""
    candidates: list[HighlightSpan] = []
    for rule in rules:
        color = map_color(rule.color)
        for match in rule.regex.finditer(line):
            start, end = match.span()
            if end > start:
                candidates.append(HighlightSpan(start, end, color))

    # Stable sort keeps rule order for identical (start, length) matches.
    candidates.sort(key=lambda span: (span.start, span.start - span.end))

    accepted: list[HighlightSpan] = []
    last_end = 0
    for span in candidates:
        if span.start >= last_end:
            accepted.append(span)
            last_end = span.end
    return accepted


def apply_markup(line: str, spans: list[HighlightSpan]) -> str:
    """Wraps each span in ``{color-fg}...{/color-fg}`` tags."""
    styled = line
    for span in sorted(spans, key=lambda s: s.start, reverse=True):
        text = styled[span.start : span.end]
        styled = (
            styled[: span.start]
            + f"{{{span.color}-fg}}{text}{{/{span.color}-fg}}"
            + styled[span.end :]
        )
    return styled


def split_segments(line: str, spans: list[HighlightSpan]) -> list[tuple[str, Optional[str]]]:
    """Splits ``line`` into ``(text, color)`` runs; uncolored runs carry ``None``."""
    segments: list[tuple[str, Optional[str]]] = []
    position = 0
    for span in spans:
        if span.start > position:
            segments.append((line[position : span.start], None))
        segments.append((line[span.start : span.end], span.color))
        position = span.end
    if position < len(line) or not segments:
        segments.append((line[position:], None))
    return segments


## ==================== Built-in rules ====================
BUILTIN_NANORC = r'''
## Python
syntax "python" "\.pyw?$"
color brightwhite "\.[[:alpha:]_][[:alnum:]_]*"
color brightblue "\<(and|as|assert|async|await|break|class|continue|def|del|elif|else|except|finally|for|from|global|if|import|in|is|lambda|nonlocal|not|or|pass|raise|return|try|while|with|yield)\>"
color cyan "\<(True|False|None|self|cls|print|len|range|isinstance|super|dict|list|set|tuple|str|int|float|bool)\>"
color brightmagenta "\<[0-9]+(\.[0-9]+)?\>"
color yellow "@[[:alpha:]_][[:alnum:]_.]*"
color green "'[^']*'"
color green ""[^"]*""
color brightblack "#.*$"

## JavaScript
syntax "javascript" "\.(js|jsx|mjs|cjs)$"
color yellow "\<(const|let|var|function|class|extends|return|if|else|for|while|do|switch|case|break|continue|try|catch|finally|throw|new|delete|typeof|instanceof|void|this|super)\>"
color cyan "\<(Array|Boolean|Date|Error|Function|JSON|Math|Number|Object|RegExp|String|Promise|Map|Set|Symbol|console|window|document|null|undefined|NaN|Infinity)\>"
color brightcyan "\<(true|false)\>"
color green ""[^"]*""
color green "'[^']*'"
color green "`[^`]*`"
color magenta "\<0x[0-9a-fA-F]+\>" "\<[0-9]+(\.[0-9]+)?\>"
color blue "//.*$" "/\*.*\*/"
color red "[;:,<>()[\]{}=+*/%&|^!~?-]"
color brightwhite "\.[[:alpha:]][[:alnum:]_]*"
'''


## ==================== SyntaxHighlighter Class ====================
class SyntaxHighlighter:
    """Class SyntaxHighlighter
    =========================
    Holds the loaded rulesets and highlights lines for a given filename.

    Rulesets are keyed by file pattern in load order; loading a ruleset for
    a pattern that is already known replaces it in place. Filename
    resolution is cached per basename (including negative results) and the
    cache is dropped whenever rulesets change.

    Attributes:
        rulesets (dict[str, HighlightRuleSet]): File pattern -> ruleset.
    """

    def __init__(self, config: Optional[dict[str, Any]] = None) -> None:
        hl_cfg = (config or {}).get("highlight", {})
        self.rulesets: dict[str, HighlightRuleSet] = {}
        self._resolution_cache: dict[str, Optional[HighlightRuleSet]] = {}

        rules_dir = os.environ.get("PANEDIT_NANORC_DIR") or hl_cfg.get("rules_dir")
        if rules_dir:
            self.load_directory(os.path.expanduser(rules_dir))
        if hl_cfg.get("builtin_rules", True):
            self.load_builtin_rules()

    # --- Loading ---

    def add_ruleset(self, ruleset: HighlightRuleSet) -> None:
        previous = self.rulesets.get(ruleset.file_pattern)
        if previous is not None:
            logging.debug(
                f"Ruleset for {ruleset.file_pattern!r} from {ruleset.source} "
                f"overrides the one from {previous.source}"
            )
        self.rulesets[ruleset.file_pattern] = ruleset
        self._resolution_cache.clear()

    def load_text(self, text: str, source: str = "<string>") -> int:
        """Parses and adds every ruleset in ``text``. Returns how many were added."""
        parsed = parse_rules(text, source)
        for ruleset in parsed:
            self.add_ruleset(ruleset)
        return len(parsed)

    def load_directory(self, path: str) -> int:
        """Loads every ``*.nanorc`` file of ``path`` in sorted order."""
        if not os.path.isdir(path):
            logging.debug(f"Nanorc directory '{path}' does not exist, skipping.")
            return 0
        count = 0
        for rc_path in sorted(glob.glob(os.path.join(path, "*.nanorc"))):
            try:
                with open(rc_path, encoding="utf-8", errors="replace") as f:
                    content = f.read()
            except OSError as e:
                logging.error(f"Cannot read rule file '{rc_path}': {e}")
                continue
            count += self.load_text(content, os.path.basename(rc_path))
        logging.info(f"Loaded {count} syntax definitions from '{path}'.")
        return count

    def load_builtin_rules(self) -> None:
        """Adds the embedded rulesets whose syntax name is not loaded yet."""
        known = {rs.name.lower() for rs in self.rulesets.values()}
        for ruleset in parse_rules(BUILTIN_NANORC, "<builtin>"):
            if ruleset.name.lower() not in known:
                self.add_ruleset(ruleset)

    # --- Resolution ---

    def resolve(self, filename: Optional[str]) -> Optional[HighlightRuleSet]:
        """Returns the ruleset for ``filename`` or None if nothing applies."""
        if not filename:
            return None
        basename = os.path.basename(filename)
        if basename in self._resolution_cache:
            return self._resolution_cache[basename]

        ruleset = self._match_by_pattern(basename) or self._match_by_extension(basename)
        if ruleset is None:
            logging.debug(f"No syntax rules match '{basename}'")
        else:
            logging.debug(f"Using rules '{ruleset.name}' from {ruleset.source} for '{basename}'")
        self._resolution_cache[basename] = ruleset
        return ruleset

    def _match_by_pattern(self, basename: str) -> Optional[HighlightRuleSet]:
        for ruleset in self.rulesets.values():
            if ruleset.matches_filename(basename):
                return ruleset
        return None

    def _match_by_extension(self, basename: str) -> Optional[HighlightRuleSet]:
        extension = os.path.splitext(basename)[1][1:].lower()
        if extension:
            literal = re.compile(rf"(?<![A-Za-z0-9]){re.escape(extension)}(?![A-Za-z0-9])")
            for ruleset in self.rulesets.values():
                if literal.search(ruleset.file_pattern.lower()):
                    return ruleset

        try:
            lexer = get_lexer_for_filename(basename)
        except ClassNotFound:
            return None
        names = {alias.lower() for alias in lexer.aliases}
        names.add(lexer.name.lower())
        for ruleset in self.rulesets.values():
            if ruleset.name.lower() in names:
                return ruleset
        return None

    # --- Highlighting ---

    def spans_for(self, line: str, filename: Optional[str]) -> list[HighlightSpan]:
        ruleset = self.resolve(filename)
        if ruleset is None or not ruleset.rules:
            return []
        return find_spans(line, ruleset.rules)

    def highlight(self, line: str, filename: Optional[str]) -> str:
        """Returns ``line`` with color markup, or unchanged when nothing matches."""
        spans = self.spans_for(line, filename)
        return apply_markup(line, spans) if spans else line

    def segments(self, line: str, filename: Optional[str]) -> list[tuple[str, Optional[str]]]:
        return split_segments(line, self.spans_for(line, filename))
