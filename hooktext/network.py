"""HTTP requests and the small text escaping and JSON helpers used with them."""

from __future__ import annotations

import http.client
import re
import string
from collections.abc import Mapping

DEFAULT_AGENT = "Mozilla/5.0"
MAX_DEPTH = 25

_HTML_ENTITIES = {
    "lt": "<",
    "gt": ">",
    "apos": "'",
    "#39": "'",
    "#x27": "'",
    "#X27": "'",
    "quot": '"',
    "amp": "&",
}
_HTML_PATTERN = re.compile("&(" + "|".join(re.escape(name) for name in _HTML_ENTITIES) + ");")

_JSON_ESCAPES = {"\n": "\\n", "\t": "\\t", "\r": "\\r", "\\": "\\\\", '"': '\\"'}
_STRING_ESCAPES = {"b": "\b", "f": "\f", "n": "\n", "r": "\r", "t": "\t"}
_NUMBER_CHARS = frozenset("0123456789-+eE.")
_NUMBER_PREFIX = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_WHITESPACE = " \n\r\t"


class JsonError(ValueError):
    """The text is not JSON this parser accepts."""


def html_unescape(text: str) -> str:
    """Replace the common HTML character entities, in one left-to-right pass."""
    return _HTML_PATTERN.sub(lambda match: _HTML_ENTITIES[match.group(1)], text)


def json_escape(text: str) -> str:
    """Escape text for a JSON string literal, dropping other control characters."""
    escaped = "".join(_JSON_ESCAPES.get(ch, ch) for ch in text)
    return "".join(ch for ch in escaped if ord(ch) >= 0x20 and ord(ch) != 0x7F)


def url_escape(text: str | bytes) -> str:
    """Percent-encode every byte of the UTF-8 form of the text."""
    data = text.encode("utf-8") if isinstance(text, str) else bytes(text)
    return "".join(f"%{byte:02X}" for byte in data)


class _Parser:
    def __init__(self, text: str):
        self.text = text
        self.pos = 0

    def current(self) -> str | None:
        while self.pos < len(self.text) and self.text[self.pos] in _WHITESPACE:
            self.pos += 1
        return self.text[self.pos] if self.pos < len(self.text) else None

    def value(self, depth: int):
        if depth > MAX_DEPTH:
            raise JsonError("nesting too deep")
        ch = self.current()
        if ch is None:
            raise JsonError("unexpected end of input")
        for literal, result in (("null", None), ("true", True), ("false", False)):
            if ch == literal[0]:
                if not self.text.startswith(literal, self.pos):
                    raise JsonError(f"invalid literal at {self.pos}")
                self.pos += len(literal)
                return result
        if ch == "-" or "0" <= ch <= "9":
            return self.number()
        if ch == '"':
            return self.string()
        if ch == "[":
            return self.array(depth)
        if ch == "{":
            return self.object(depth)
        raise JsonError(f"unexpected character {ch!r} at {self.pos}")

    def number(self) -> float:
        start = self.pos
        while self.pos < len(self.text) and self.text[self.pos] in _NUMBER_CHARS:
            self.pos += 1
        match = _NUMBER_PREFIX.match(self.text, start, self.pos)
        return float(match.group()) if match else 0.0

    def string(self) -> str:
        text = self.text
        out = []
        self.pos += 1
        while self.pos < len(text):
            ch = text[self.pos]
            if ch == '"':
                self.pos += 1
                break
            if ch == "\\":
                if self.pos + 1 >= len(text):
                    self.pos = len(text)
                    break
                escape = text[self.pos + 1]
                digits = text[self.pos + 2:self.pos + 6]
                if escape == "u" and len(digits) == 4 and all(d in string.hexdigits for d in digits):
                    out.append(chr(int(digits, 16)))
                    self.pos += 6
                    continue
                out.append(_STRING_ESCAPES.get(escape, escape))
                self.pos += 2
                continue
            out.append(ch)
            self.pos += 1
        result = "".join(out)
        try:
            return result.encode("utf-16-le", "surrogatepass").decode("utf-16-le")
        except UnicodeDecodeError:
            return result

    def array(self, depth: int) -> list:
        items = []
        while True:
            self.pos += 1
            ch = self.current()
            if ch is None:
                raise JsonError("unterminated array")
            if ch == "]":
                self.pos += 1
                return items
            items.append(self.value(depth + 1))
            ch = self.current()
            if ch is None:
                raise JsonError("unterminated array")
            if ch == "]":
                self.pos += 1
                return items
            if ch != ",":
                raise JsonError(f"expected ',' at {self.pos}")

    def object(self, depth: int) -> dict:
        members = {}
        while True:
            self.pos += 1
            ch = self.current()
            if ch is None:
                raise JsonError("unterminated object")
            if ch == "}":
                self.pos += 1
                return members
            if ch != '"':
                raise JsonError(f"expected key at {self.pos}")
            key = self.string()
            if self.current() != ":":
                raise JsonError(f"expected ':' at {self.pos}")
            self.pos += 1
            members[key] = self.value(depth + 1)
            ch = self.current()
            if ch is None:
                raise JsonError("unterminated object")
            if ch == "}":
                self.pos += 1
                return members
            if ch != ",":
                raise JsonError(f"expected ',' at {self.pos}")


def parse_json(text: str):
    """Parse the first JSON value in the text; numbers come back as floats.

    Text after the value is ignored. Raises JsonError when no value can be read.
    """
    return _Parser(text).value(0)


def http_request(
    server: str,
    method: str,
    path: str,
    body: str | bytes = "",
    headers: Mapping[str, str] | None = None,
    port: int | None = None,
    secure: bool = True,
    agent: str = DEFAULT_AGENT,
) -> str:
    """Send one HTTP request and return the response body as text.

    Connection failures raise OSError.
    """
    connection_class = http.client.HTTPSConnection if secure else http.client.HTTPConnection
    connection = connection_class(server, port, timeout=30)
    try:
        data = body.encode("utf-8") if isinstance(body, str) else body
        connection.request(method, path, body=data or None, headers={"User-Agent": agent, **(headers or {})})
        return connection.getresponse().read().decode("utf-8", errors="replace")
    finally:
        connection.close()