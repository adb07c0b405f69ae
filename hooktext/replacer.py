"""Literal text replacement driven by a saved ``|ORIG|...|BECOMES|...|END|`` script."""

from __future__ import annotations

import threading
from collections.abc import Mapping
from pathlib import Path

from hooktext.blockmarkup import read_blocks

REPLACE_SAVE_FILE = "SavedReplacements.txt"
DELIMITERS = ("|ORIG|", "|BECOMES|")
WILDCARD = "^"


def _ignored(ch: str) -> bool:
    return ord(ch) <= 0x20 or ch.isspace()


class _Node:
    __slots__ = ("children", "value")

    def __init__(self) -> None:
        self.children: dict[str, _Node] = {}
        self.value: str | None = None


class Trie:
    """Prefix tree of replacements.

    Whitespace and control characters are skipped both in the patterns and
    in the text being replaced; ``^`` in a pattern matches any one character.
    The longest matching pattern wins.
    """

    def __init__(self, script: str = ""):
        self._root = _Node()
        for pattern, replacement in read_blocks(script, DELIMITERS):
            node = self._root
            for ch in pattern:
                if not _ignored(ch):
                    node = node.children.setdefault(ch, _Node())
            if node is not self._root:
                node.value = replacement

    def replace(self, sentence: str) -> str:
        """Return the sentence with every matched pattern replaced."""
        result = []
        size = len(sentence)
        i = 0
        while i < size:
            replacement = sentence[i]
            length = 1
            node: _Node | None = self._root
            j = i
            while node is not None and j <= size:
                if node.value is not None:
                    replacement = node.value
                    length = j - i
                if j < size and not _ignored(sentence[j]):
                    children = node.children
                    node = children.get(sentence[j]) or children.get(WILDCARD)
                j += 1
            result.append(replacement)
            i += length
        return "".join(result)

    def __bool__(self) -> bool:
        return bool(self._root.children)


class Replacer:
    """Applies the replacement script saved in a UTF-16 file, reloading it when it changes."""

    def __init__(self, path=REPLACE_SAVE_FILE):
        self.path = Path(path)
        self.trie = Trie()
        self._last_write: int | None = None
        self._lock = threading.Lock()

    def update(self) -> bool:
        """Reload the script if the file changed; return whether it was reloaded."""
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
            self.trie = Trie(raw.decode("utf-16-le", errors="replace"))
        return True

    def process(self, sentence: str, info: Mapping[str, int]) -> str:
        self.update()
        with self._lock:
            trie = self.trie
        return trie.replace(sentence)