"""Reader for the ``|TAG|value|TAG|value|END|`` block markup used by saved files."""

from __future__ import annotations

import io
from collections.abc import Iterator, Sequence
from pathlib import Path
from typing import TextIO

END = "|END|"
DEFAULT_BLOCK_SIZE = 0x1000 // 2

_BOMS = (
    (b"\xff\xfe", "utf-16"),
    (b"\xfe\xff", "utf-16"),
    (b"\xef\xbb\xbf", "utf-8-sig"),
)


class BlockMarkupReader:
    """Pulls records out of a text stream, reading it block by block.

    A record starts at the first delimiter; each following delimiter (and
    finally ``|END|``) closes one field. Text outside records is ignored.
    """

    def __init__(self, stream: TextIO, delimiters: Sequence[str], block_size: int = DEFAULT_BLOCK_SIZE):
        if not delimiters or not all(delimiters):
            raise ValueError("at least one non-empty delimiter is required")
        if block_size < 1:
            raise ValueError("block size must be positive")
        self._stream = stream
        self._delimiters = tuple(delimiters)
        self._block_size = block_size
        self._buffer = ""

    def next(self) -> tuple[str, ...] | None:
        """Return the next record's fields, or None when no complete record is left."""
        if self._find(self._delimiters[0], discard=True) is None:
            return None
        fields = []
        for terminator in (*self._delimiters[1:], END):
            field = self._find(terminator, discard=False)
            if field is None:
                return None
            fields.append(field)
        return tuple(fields)

    def __iter__(self) -> Iterator[tuple[str, ...]]:
        while (record := self.next()) is not None:
            yield record

    def _find(self, delimiter: str, discard: bool) -> str | None:
        start = 0
        while True:
            pos = self._buffer.find(delimiter, start)
            if pos >= 0:
                found = self._buffer[:pos]
                self._buffer = self._buffer[pos + len(delimiter):]
                return "" if discard else found
            chunk = self._stream.read(self._block_size)
            if not chunk:
                return None
            start = max(0, len(self._buffer) - len(delimiter))
            self._buffer += chunk
            if discard:
                self._buffer = self._buffer[start:]
                start = 0


def read_blocks(text: str, delimiters: Sequence[str]) -> list[tuple[str, ...]]:
    """Return every complete record found in ``text``."""
    return list(BlockMarkupReader(io.StringIO(text), delimiters))


def _decode(raw: bytes, encoding: str | None) -> str:
    if encoding is not None:
        return raw.decode(encoding, errors="replace")
    for bom, name in _BOMS:
        if raw.startswith(bom):
            return raw.decode(name, errors="replace")
    return raw.decode("utf-8", errors="replace")


def read_markup_file(path, delimiters: Sequence[str], encoding: str | None = None) -> list[tuple[str, ...]]:
    """Read every record of a markup file; a missing file holds no records.

    Without an explicit encoding, a byte-order mark selects UTF-16 or UTF-8,
    and UTF-8 is assumed otherwise.
    """
    try:
        raw = Path(path).read_bytes()
    except FileNotFoundError:
        return []
    return read_blocks(_decode(raw, encoding), delimiters)