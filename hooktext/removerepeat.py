"""Filters that strip repeated characters, phrases and sentences."""

from __future__ import annotations

import re
import threading
import time
from collections import defaultdict
from collections.abc import Mapping

ERASED = "\uf246"
TIMEOUT_SECONDS = 30.0
DEFAULT_CACHE_SIZE = 30


def remove_repeated_chars(sentence: str, info: Mapping[str, int]) -> str | None:
    """Collapse characters that are each repeated the same number of times."""
    if info["text number"] == 0:
        return None

    run_counts = [0] * (len(sentence) + 1)
    run_start = 0
    for i, ch in enumerate(sentence):
        if i + 1 == len(sentence) or sentence[i + 1] != ch:
            run_counts[i + 1 - run_start] += 1
            run_start = i + 1
    best = max(run_counts)
    repeat = max(length for length, count in enumerate(run_counts) if count == best)
    if repeat < 2:
        return None

    result = []
    i = 0
    while i < len(sentence):
        ch = sentence[i]
        result.append(ch)
        end = i
        while end < len(sentence) and sentence[end] == ch:
            end += 1
        i += repeat if (end - i) % repeat == 0 else 1
    return "".join(result)


def generate_suffix_array(text: str) -> list[int]:
    """Return the suffix start positions ordered from the greatest suffix to the least."""
    n = len(text)
    if n == 0:
        return []
    rank = [ord(ch) for ch in text]
    order = list(range(n))
    step = 1
    while True:
        keys = [(r, rank[i + step] if i + step < n else -1) for i, r in enumerate(rank)]
        order.sort(key=keys.__getitem__)
        new_rank = [0] * n
        for previous, current in zip(order, order[1:]):
            new_rank[current] = new_rank[previous] + (keys[current] != keys[previous])
        rank = new_rank
        if rank[order[-1]] == n - 1:
            break
        step *= 2
    order.reverse()
    return order


def _common_prefix(chars: list[str], first: int, second: int) -> int:
    length = 0
    while (
        second + length < len(chars)
        and first + length < len(chars)
        and chars[first + length] != ERASED
        and chars[first + length] == chars[second + length]
    ):
        length += 1
    return length


def remove_repeated_phrases(sentence: str, info: Mapping[str, int]) -> str | None:
    """Erase regions made of a repeated substring longer than six characters.

    Where that removes every copy of the substring, one copy is put back at
    the last place it occurred.
    """
    if info["text number"] == 0:
        return None

    deadline = time.monotonic() + TIMEOUT_SECONDS
    suffixes = generate_suffix_array(sentence)
    chars = list(sentence)
    for first, second in zip(suffixes, suffixes[1:]):
        if time.monotonic() >= deadline:
            break
        length = _common_prefix(chars, first, second)
        if length <= 6:
            continue
        substring = "".join(chars[first:first + length])
        alphabet = set(substring)
        region = 0
        for j, ch in enumerate([*chars, ""]):
            if ch in alphabet:
                region += 1
            elif region >= length * 2:
                chars[j - region:j] = [ERASED] * region
                region = 0
            else:
                region = 0
        if substring not in "".join(chars):
            start = max(first, second)
            chars[start:start + length] = substring
    return "".join(ch for ch in chars if ch != ERASED)


def remove_repeated_prefix(sentence: str, info: Mapping[str, int]) -> str | None:
    """Drop leading text whose every prefix chunk reappears later in the sentence."""
    if info["text number"] == 0:
        return None

    deadline = time.monotonic() + TIMEOUT_SECONDS
    skip = count = 0
    end = len(sentence)
    while end > skip and time.monotonic() < deadline:
        junk_length = end - skip
        if sentence.find(sentence[skip:end], end) >= 0:
            if count and junk_length < min(skip // count, 4):
                break
            skip += junk_length
            count += 1
            end = len(sentence)
        end -= 1
    if count and skip // count >= 3:
        return sentence[skip:]
    return None


class RepeatedSentenceFilter:
    """Drops a sentence already seen among a thread's recent sentences."""

    def __init__(self, cache_size: int = DEFAULT_CACHE_SIZE):
        self.cache_size = cache_size
        self._history: defaultdict[int, list[str]] = defaultdict(list)
        self._lock = threading.Lock()

    def process(self, sentence: str, info: Mapping[str, int]) -> str | None:
        text_number = info["text number"]
        if text_number == 0:
            return None
        with self._lock:
            previous = self._history[text_number]
            previous.append(sentence)
            repeated = previous.index(sentence) != len(previous) - 1
            if repeated:
                previous.remove(sentence)
            if len(previous) > self.cache_size:
                del previous[0]
        return "" if repeated else None


_CACHE_SIZE_PATTERN = re.compile(r"Remove\s*([+-]?\d+)")


def cache_size_from_filename(filename: str) -> int:
    """Read N from a file named like ``Remove N Repeated Sentences``; 30 otherwise."""
    name = re.split(r"[\\/]", filename)[-1]
    match = _CACHE_SIZE_PATTERN.match(name)
    return int(match.group(1)) if match else DEFAULT_CACHE_SIZE