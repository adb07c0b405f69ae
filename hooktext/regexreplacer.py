"""Regular-expression replacement driven by a saved ``|REGEX|...|BECOMES|...|MODIFIER|...|END|`` file."""

from __future__ import annotations

import re
import threading
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from hooktext.blockmarkup import read_blocks

REPLACE_SAVE_FILE = "SavedRegexReplacements.txt"
DELIMITERS = ("|REGEX|", "|BECOMES|", "|MODIFIER|")
_DIGITS = "0123456789"


def _expand(template: str, match: re.Match, prefix: str) -> str:
    """Expand a ``$``-style replacement format for one match."""
    out = []
    size = len(template)
    i = 0
    while i < size:
        ch = template[i]
        if ch != "$" or i + 1 >= size:
            out.append(ch)
            i += 1
            continue
        nxt = template[i + 1]
        if nxt == "$":
            out.append("$")
            i += 2
        elif nxt == "&":
            out.append(match.group(0))
            i += 2
        elif nxt == "`":
            out.append(prefix)
            i += 2
        elif nxt == "'":
            out.append(match.string[match.end():])
            i += 2
        elif nxt in _DIGITS:
            number = int(nxt)
            j = i + 2
            if j < size and template[j] in _DIGITS:
                number = number * 10 + int(template[j])
                j += 1
            if number <= match.re.groups:
                out.append(match.group(number) or "")
            i = j
        else:
            out.append("$")
            i += 1
    return "".join(out)


@dataclass(frozen=True)
class Replacement:
    """One compiled rule: pattern, ``$``-style replacement, and whether to replace every match."""

    pattern: re.Pattern
    replacement: str
    replace_all: bool = True

    def apply(self, text: str) -> str:
        out = []
        last = 0
        for match in self.pattern.finditer(text):
            prefix = text[last:match.start()]
            out.append(prefix)
            out.append(_expand(self.replacement, match, prefix))
            last = match.end()
            if not self.replace_all:
                break
        out.append(text[last:])
        return "".join(out)


def parse_replacements(text: str) -> list[Replacement]:
    """Read rules from markup text; ``i`` ignores case, ``g`` replaces all. Invalid regexes are skipped."""
    replacements = []
    for regex, replacement, modifier in read_blocks(text, DELIMITERS):
        flags = re.IGNORECASE if "i" in modifier else 0
        try:
            pattern = re.compile(regex, flags)
        except re.error:
            continue
        replacements.append(Replacement(pattern, replacement, "g" in modifier))
    return replacements


class RegexReplacer:
    """Applies the rules saved in a UTF-16 file, reloading them when it changes."""

    def __init__(self, path=REPLACE_SAVE_FILE):
        self.path = Path(path)
        self.replacements: list[Replacement] = []
        self._last_write: int | None = None
        self._lock = threading.Lock()

    def update(self) -> bool:
        """Reload the rules if the file changed; return whether they were reloaded."""
        try:
            mtime = self.path.stat().st_mtime_ns
        except OSError:
            self._last_write = None
            return False
        with self._lock:
            if mtime == self._last_write:
                return False
            try:
                raw = self.path.read_bytes()
            except OSError:
                self._last_write = None
                return False
            self._last_write = mtime
            self.replacements = parse_replacements(raw.decode("utf-16-le", errors="replace"))
        return True

    def process(self, sentence: str, info: Mapping[str, int]) -> str:
        self.update()
        with self._lock:
            replacements = list(self.replacements)
        for replacement in replacements:
            sentence = replacement.apply(sentence)
        return sentence