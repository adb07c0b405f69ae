"""A stream of text from one hook, cut into sentences."""

from __future__ import annotations

import codecs
import itertools
import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass

from hooktext.hookcode import HookParam, HookType

SHIFT_JIS = 932
INVALID_CODEPAGE = "Textractor: couldn't convert text (invalid codepage?)"

_log = logging.getLogger(__name__)

_CODEPAGE_CODECS = {
    65001: "utf-8",
    1200: "utf-16-le",
    1201: "utf-16-be",
    20127: "ascii",
    20932: "euc-jp",
    28591: "latin-1",
    50220: "iso2022-jp",
    51949: "euc-kr",
    54936: "gb18030",
}
_DBCS_CODEPAGES = frozenset({932, 936, 949, 950, 1361})


@dataclass(frozen=True)
class ThreadParam:
    """Identifies a text thread: process, hook address and two contexts."""

    process_id: int = 0
    addr: int = 0
    ctx: int = 0
    ctx2: int = 0


def _codec(codepage: int) -> str | None:
    try:
        return codecs.lookup(_CODEPAGE_CODECS.get(codepage, f"cp{codepage}")).name
    except LookupError:
        return None


def _is_lead_byte(codepage: int, byte: int) -> bool:
    if codepage not in _DBCS_CODEPAGES:
        return False
    name = _codec(codepage)
    if name is None:
        return False
    try:
        return codecs.getincrementaldecoder(name)().decode(bytes([byte]), final=False) == ""
    except UnicodeDecodeError:
        return False


def _now_ms() -> float:
    return time.monotonic() * 1000


def remove_repetition(text: str) -> str | None:
    """Reduce text ending in three copies of a phrase (over six characters) to one copy.

    Repeats until no such ending is left. Returns None if there was none.
    """
    found = False
    while True:
        size = len(text)
        for length in range(size // 3, 6, -1):
            first = text[size - 3 * length:size - 2 * length]
            if first == text[size - 2 * length:size - length] and first == text[size - length:]:
                text = text[size - length:]
                found = True
                break
        else:
            return text if found else None


Output = Callable[["TextThread", str], "str | None"]


class TextThread:
    """Collects text pushed by a hook and hands out complete sentences.

    ``output(thread, sentence)`` receives each sentence on flush and returns
    the text to keep in the thread's storage, or None to keep nothing.
    """

    filter_repetition = False
    flush_delay = 500
    max_buffer_size = 3000
    max_history_size = 10_000_000
    default_codepage = SHIFT_JIS

    _counter = itertools.count()

    def __init__(self, tp: ThreadParam, hp: HookParam, name: str | None = None, output: Output | None = None):
        self.handle = next(TextThread._counter)
        self.name = name if name is not None else hp.name
        self.tp = tp
        self.hp = hp
        self.output = output
        self.storage = ""
        self._buffer = ""
        self._lead_byte: int | None = None
        self._repeating_chars: set[str] = set()
        self._last_push_time = 0.0
        self._queue: list[str] = []
        self._buffer_lock = threading.Lock()
        self._queue_lock = threading.Lock()
        self._storage_lock = threading.Lock()

    def add_sentence(self, sentence: str) -> None:
        """Queue a complete sentence for the next flush."""
        with self._queue_lock:
            self._queue.append(sentence)

    def _codepage(self) -> int:
        return self.hp.codepage or self.default_codepage

    def _decode(self, data: bytes) -> str | None:
        if self.hp.type & HookType.HEX_DUMP:
            return "".join(
                f"{int.from_bytes(data[i:i + 2].ljust(2, b'\0'), 'little'):04X} "
                for i in range(0, len(data), 2)
            )
        if self.hp.type & HookType.USING_UNICODE:
            usable = len(data) - len(data) % 2
            return data[:usable].decode("utf-16-le", errors="surrogatepass")
        name = _codec(self._codepage())
        if name is None:
            return None
        return data.decode(name, errors="replace")

    def push_bytes(self, data: bytes) -> None:
        """Append raw text bytes read by the hook."""
        data = bytes(data)
        with self._buffer_lock:
            if len(data) == 1:
                if self._lead_byte is not None:
                    data = bytes([self._lead_byte]) + data
                    self._lead_byte = None
                elif _is_lead_byte(self._codepage(), data[0]):
                    self._lead_byte = data[0]
                    data = b""

            decoded = self._decode(data)
            if decoded is None:
                _log.warning(INVALID_CODEPAGE)
            else:
                self._buffer += decoded
            if self.hp.type & HookType.FULL_STRING:
                self._buffer += "\n"
            self._last_push_time = _now_ms()

            if self.filter_repetition:
                if all(ch in self._repeating_chars for ch in self._buffer):
                    self._buffer = ""
                reduced = remove_repetition(self._buffer)
                if reduced is not None:
                    self._repeating_chars = set(reduced)
                    self.add_sentence(reduced)
                    self._buffer = ""

            if self.flush_delay == 0 and self.hp.type & HookType.FULL_STRING:
                self.add_sentence(self._buffer)
                self._buffer = ""

    def push_text(self, text: str) -> None:
        """Append already decoded text."""
        with self._buffer_lock:
            self._last_push_time = _now_ms()
            self._buffer += text

    def flush(self) -> None:
        """Output queued sentences and queue the buffer if it is full or stale."""
        with self._storage_lock:
            excess = len(self.storage) - self.max_history_size
            if excess > 0:
                self.storage = self.storage[excess:]

        with self._queue_lock:
            sentences, self._queue = self._queue, []
        for sentence in sentences:
            sentence = sentence.replace("\0", "")
            kept = sentence if self.output is None else self.output(self, sentence)
            if kept is not None:
                with self._storage_lock:
                    self.storage += kept

        with self._buffer_lock:
            if not self._buffer:
                return
            if len(self._buffer) > self.max_buffer_size or _now_ms() - self._last_push_time > self.flush_delay:
                self.add_sentence(self._buffer)
                self._buffer = ""