"""Small sentence filters: extra newlines, thread linking and a per-process regex filter."""

from __future__ import annotations

import re
import threading
from collections.abc import Callable, Mapping
from pathlib import Path

from hooktext.blockmarkup import read_markup_file
from hooktext.regexreplacer import Replacement

REGEX_SAVE_FILE = "SavedRegexFilters.txt"
FILTER_DELIMITERS = ("|PROCESS|", "|FILTER|")
FILTER_REPLACEMENT = "$1"


def extra_newlines(sentence: str, info: Mapping[str, int]) -> str | None:
    """Append a newline to every sentence not from the console."""
    if info["text number"] == 0:
        return None
    return sentence + "\n"


class ThreadLinker:
    """Copies the text of one thread into other threads.

    A link whose source is None applies to every thread numbered above 1.
    """

    def __init__(self, separate_sentences: bool = False):
        self.separate_sentences = separate_sentences
        self._links: dict[int, set[int]] = {}
        self._universal: set[int] = set()
        self._lock = threading.Lock()

    def link(self, source: int | None, target: int) -> bool:
        """Add a link; return False if it already existed."""
        with self._lock:
            targets = self._universal if source is None else self._links.setdefault(source, set())
            if target in targets:
                return False
            targets.add(target)
            return True

    def unlink(self, source: int | None, target: int) -> bool:
        """Remove a link; return whether it existed."""
        with self._lock:
            targets = self._universal if source is None else self._links.get(source, set())
            if target not in targets:
                return False
            targets.discard(target)
            return True

    def process(
        self,
        sentence: str,
        info: Mapping[str, int],
        add_text: Callable[[int, str, bool], None],
    ) -> None:
        """Send the sentence to every linked thread.

        ``add_text(target, text, as_sentence)`` delivers it; ``as_sentence`` is
        the linker's ``separate_sentences`` setting. The sentence itself is unchanged.
        """
        number = info["text number"]
        with self._lock:
            targets = [*self._links.get(number, ()), *(self._universal if number > 1 else ())]
        for target in targets:
            add_text(target, sentence, self.separate_sentences)
        return None


class RegexFilter:
    """Replaces each match of a regex with its first group; filters can be saved per process."""

    def __init__(self, path=REGEX_SAVE_FILE):
        self.path = Path(path)
        self.pattern = ""
        self._regex: re.Pattern | None = None
        self._lock = threading.RLock()

    @property
    def regex(self) -> re.Pattern | None:
        return self._regex

    def set_regex(self, pattern: str) -> None:
        """Use a new pattern; an empty one turns the filter off.

        Raises re.error for an invalid pattern, keeping the previous one.
        """
        compiled = re.compile(pattern) if pattern else None
        with self._lock:
            self.pattern = pattern
            self._regex = compiled

    def save(self, process_name: str) -> None:
        """Append the current pattern for the process to the save file."""
        record = f"\ufeff|PROCESS|{process_name}|FILTER|{self.pattern}|END|\r\n"
        with self.path.open("ab") as file:
            file.write(record.encode("utf-16-le"))

    def load_for(self, process_name: str) -> str | None:
        """Use the pattern last saved for the process; return it, or None if there is none."""
        patterns = [
            pattern
            for name, pattern in read_markup_file(self.path, FILTER_DELIMITERS, "utf-16-le")
            if name == process_name
        ]
        if not patterns:
            return None
        self.set_regex(patterns[-1])
        return patterns[-1]

    def process(self, sentence: str, info: Mapping[str, int], process_name: str | None = None) -> str | None:
        if info["text number"] == 0:
            return None
        with self._lock:
            if self._regex is None and process_name:
                try:
                    self.load_for(process_name)
                except re.error:
                    pass
            regex = self._regex
        if regex is None:
            return sentence
        return Replacement(regex, FILTER_REPLACEMENT).apply(sentence)