"""Parsing and generating the textual hook codes (``H...`` and ``R...``)."""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass, field

MAX_MODULE_SIZE = 120


class HookType(enum.IntFlag):
    """Flags describing how a hook reads its text."""

    USING_STRING = enum.auto()
    USING_UNICODE = enum.auto()
    BIG_ENDIAN = enum.auto()
    DATA_INDIRECT = enum.auto()
    USING_SPLIT = enum.auto()
    SPLIT_INDIRECT = enum.auto()
    MODULE_OFFSET = enum.auto()
    FUNCTION_OFFSET = enum.auto()
    USING_UTF8 = enum.auto()
    NO_CONTEXT = enum.auto()
    DIRECT_READ = enum.auto()
    FULL_STRING = enum.auto()
    HEX_DUMP = enum.auto()
    HOOK_ENGINE = enum.auto()


@dataclass
class HookParam:
    """Everything needed to place a hook and read text from it."""

    address: int = 0
    offset: int = 0
    index: int = 0
    split: int = 0
    split_index: int = 0
    padding: int = 0
    null_length: int = 0
    codepage: int = 0
    length_offset: int = 0
    type: HookType = field(default_factory=lambda: HookType(0))
    module: str = ""
    function: str = ""
    name: str = ""
    has_callbacks: bool = False


class _InvalidCode(ValueError):
    pass


_R_TYPES = {
    "S": HookType(0),
    "Q": HookType.USING_UNICODE,
    "V": HookType.USING_UTF8,
    "M": HookType.USING_UNICODE | HookType.HEX_DUMP,
}

# letter -> (flags, length_offset)
_H_TYPES = {
    "A": (HookType.BIG_ENDIAN, 1),
    "B": (HookType(0), 1),
    "W": (HookType.USING_UNICODE, 1),
    "H": (HookType.USING_UNICODE | HookType.HEX_DUMP, 1),
    "S": (HookType.USING_STRING, 0),
    "Q": (HookType.USING_STRING | HookType.USING_UNICODE, 0),
    "V": (HookType.USING_STRING | HookType.USING_UTF8, 0),
    "M": (HookType.USING_STRING | HookType.USING_UNICODE | HookType.HEX_DUMP, 0),
}

_NULL_LENGTH = re.compile(r"([0-9]+)<")
_CODEPAGE = re.compile(r"([0-9]+)#")
_PADDING = re.compile(r"([0-9A-Fa-f]+)\+")
_HEX_INT = re.compile(r"[ \t\n\v\f\r]*([+-]?)(?:0[xX](?=[0-9A-Fa-f]))?([0-9A-Fa-f]+)")
_R_ADDRESS = re.compile(r"@([0-9A-Fa-f]+)")
_ANY = r"[^\n\r\u2028\u2029]"
_H_ADDRESS = re.compile(rf"@([0-9A-Fa-f]+)(:{_ANY}+?)?(:{_ANY}+)?")

_INT_MIN, _INT_MAX = -(2**31), 2**31 - 1


def _int(digits: str, base: int = 10) -> int:
    value = int(digits, base)
    if not _INT_MIN <= value <= _INT_MAX:
        raise _InvalidCode(f"number out of range: {digits}")
    return value


def _consume_hex(code: str) -> tuple[int, str]:
    match = _HEX_INT.match(code)
    if match is None:
        return 0, code
    value = _int(match.group(2), 16)
    if match.group(1) == "-":
        value = -value
    return value, code[match.end():]


def _take_prefix(pattern: re.Pattern, code: str) -> tuple[str | None, str]:
    match = pattern.match(code)
    if match is None:
        return None, code
    return match.group(1), code[match.end():]


def _parse_r(code: str) -> HookParam | None:
    if not code or code[0] not in _R_TYPES:
        return None
    hp = HookParam(type=HookType.DIRECT_READ | _R_TYPES[code[0]])
    code = code[1:]

    null_length, code = _take_prefix(_NULL_LENGTH, code)
    if null_length is not None:
        hp.null_length = _int(null_length)
    codepage, code = _take_prefix(_CODEPAGE, code)
    if codepage is not None:
        hp.codepage = _int(codepage)

    match = _R_ADDRESS.fullmatch(code)
    if match is None:
        return None
    hp.address = int(match.group(1), 16)
    return hp


def _parse_h(code: str) -> HookParam | None:
    if not code or code[0] not in _H_TYPES:
        return None
    flags, length_offset = _H_TYPES[code[0]]
    hp = HookParam(type=flags, length_offset=length_offset)
    code = code[1:]

    if hp.type & HookType.USING_STRING:
        if code.startswith("F"):
            hp.type |= HookType.FULL_STRING
            code = code[1:]
        null_length, code = _take_prefix(_NULL_LENGTH, code)
        if null_length is not None:
            hp.null_length = _int(null_length)

    if code.startswith("N"):
        hp.type |= HookType.NO_CONTEXT
        code = code[1:]

    codepage, code = _take_prefix(_CODEPAGE, code)
    if codepage is not None:
        hp.codepage = _int(codepage)

    padding, code = _take_prefix(_PADDING, code)
    if padding is not None:
        hp.padding = int(padding, 16)

    hp.offset, code = _consume_hex(code)

    if code.startswith("*"):
        hp.type |= HookType.DATA_INDIRECT
        hp.index, code = _consume_hex(code[1:])

    if code.startswith(":"):
        hp.type |= HookType.USING_SPLIT
        hp.split, code = _consume_hex(code[1:])
        if code.startswith("*"):
            hp.type |= HookType.SPLIT_INDIRECT
            hp.split_index, code = _consume_hex(code[1:])

    match = _H_ADDRESS.fullmatch(code)
    if match is None:
        return None
    hp.address = int(match.group(1), 16)
    if match.group(2) is not None:
        hp.type |= HookType.MODULE_OFFSET
        hp.module = match.group(2)[1:][: MAX_MODULE_SIZE - 1]
    if match.group(3) is not None:
        hp.type |= HookType.FUNCTION_OFFSET
        hp.function = match.group(3)[1:][: MAX_MODULE_SIZE - 1]

    # registers are numbered 4 apart from the older code convention
    if hp.offset < 0:
        hp.offset -= 4
    if hp.split < 0:
        hp.split -= 4
    return hp


def parse(code: str) -> HookParam | None:
    """Parse a hook code; return None when it is not a valid code.

    A leading ``/`` is accepted for compatibility with older codes.
    """
    if code.startswith("/"):
        code = code[1:]
    try:
        if code.startswith("R"):
            return _parse_r(code[1:])
        if code.startswith("H"):
            return _parse_h(code[1:])
    except _InvalidCode:
        return None
    return None


def hex_string(num: int) -> str:
    """Upper-case hexadecimal with a leading minus sign for negative numbers."""
    if num < 0:
        return f"-{-num:X}"
    return f"{num:X}"


def _generate_r(hp: HookParam) -> str:
    parts = ["R"]
    if hp.type & HookType.USING_UNICODE:
        parts.append("M" if hp.type & HookType.HEX_DUMP else "Q")
        if hp.null_length:
            parts.append(f"{hp.null_length}<")
    else:
        parts.append("S")
        if hp.null_length:
            parts.append(f"{hp.null_length}<")
        if hp.codepage:
            parts.append(f"{hp.codepage}#")
    parts.append("@" + hex_string(hp.address))
    return "".join(parts)


def _generate_h(hp: HookParam) -> str:
    t = hp.type
    parts = ["H"]
    if t & HookType.USING_UNICODE:
        if t & HookType.HEX_DUMP:
            parts.append("M" if t & HookType.USING_STRING else "H")
        else:
            parts.append("Q" if t & HookType.USING_STRING else "W")
    elif t & HookType.USING_STRING:
        parts.append("S")
    elif t & HookType.BIG_ENDIAN:
        parts.append("A")
    else:
        parts.append("B")

    if t & HookType.FULL_STRING:
        parts.append("F")
    if hp.null_length:
        parts.append(f"{hp.null_length}<")
    if t & HookType.NO_CONTEXT:
        parts.append("N")
    if hp.has_callbacks:
        parts.append("X")
    if hp.codepage and not t & HookType.USING_UNICODE:
        parts.append(f"{hp.codepage}#")
    if hp.padding:
        parts.append(hex_string(hp.padding) + "+")

    offset = hp.offset + 4 if hp.offset < 0 else hp.offset
    split = hp.split + 4 if hp.split < 0 else hp.split
    parts.append(hex_string(offset))
    if t & HookType.DATA_INDIRECT:
        parts.append("*" + hex_string(hp.index))
    if t & HookType.USING_SPLIT:
        parts.append(":" + hex_string(split))
    if t & HookType.SPLIT_INDIRECT:
        parts.append("*" + hex_string(hp.split_index))

    parts.append("@" + hex_string(hp.address))
    if t & HookType.MODULE_OFFSET:
        parts.append(":" + hp.module)
    if t & HookType.FUNCTION_OFFSET:
        parts.append(":" + hp.function)
    return "".join(parts)


def generate(hp: HookParam) -> str:
    """Return the hook code describing a hook."""
    return _generate_r(hp) if hp.type & HookType.DIRECT_READ else _generate_h(hp)