"""Wraps a translation function with filtering, caching and rate limiting."""

from __future__ import annotations

import dataclasses
import heapq
import threading
import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from pathlib import Path

from hooktext.blockmarkup import read_markup_file

CACHE_DELIMITERS = ("|SENTENCE|", "|TRANSLATION|")
TOO_MANY_TRANS_REQUESTS = "Too many translation requests: refuse to make more"
TRANSLATION_SEPARATOR = "\u200b \n"
CACHE_SAVE_THRESHOLD = 50


@dataclass(frozen=True)
class TranslationParam:
    """Target and source language names and an optional API key."""

    translate_to: str = "English"
    translate_from: str = "?"
    auth_key: str = ""


class RateLimiter:
    """Allows at most ``token_count`` requests in any ``timespan_ms`` window."""

    def __init__(self, token_count: int = 30, timespan_ms: int = 60000, clock: Callable[[], float] | None = None):
        self.token_count = token_count
        self.timespan_ms = timespan_ms
        self._clock = clock or (lambda: time.monotonic() * 1000)
        self._tokens: list[float] = []
        self._lock = threading.Lock()

    def request(self) -> bool:
        """Take a token if one is available; return whether one was."""
        with self._lock:
            current = self._clock()
            while self._tokens and self._tokens[0] <= current - self.timespan_ms:
                heapq.heappop(self._tokens)
            available = len(self._tokens) < self.token_count
            if available:
                heapq.heappush(self._tokens, current)
            return available


@dataclass
class TranslationCache:
    """Translations already made, saved as UTF-16 block markup."""

    path: Path | None = None
    entries: dict[str, str] = field(default_factory=dict)
    saved_size: int = 0

    def __post_init__(self) -> None:
        if self.path is not None:
            self.path = Path(self.path)
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self.entries)

    def load(self, path=None) -> None:
        """Replace the entries with those in the file; a missing file holds none."""
        if path is not None:
            self.path = Path(path)
        if self.path is None:
            raise ValueError("no cache file given")
        records = read_markup_file(self.path, CACHE_DELIMITERS, "utf-16-le")
        with self._lock:
            self.entries = {}
            for sentence, translation in records:
                self.entries.setdefault(sentence, translation)
            self.saved_size = len(self.entries)

    def save(self, path=None) -> None:
        """Write every entry to the file, replacing its contents."""
        if path is not None:
            self.path = Path(path)
        if self.path is None:
            raise ValueError("no cache file given")
        with self._lock:
            text = "\ufeff" + "".join(
                f"|SENTENCE|{sentence}|TRANSLATION|{translation}|END|\r\n"
                for sentence, translation in self.entries.items()
            )
            self.saved_size = len(self.entries)
        self.path.write_bytes(text.encode("utf-16-le", errors="surrogatepass"))

    def get(self, sentence: str) -> str | None:
        with self._lock:
            return self.entries.get(sentence)

    def add(self, sentence: str, translation: str) -> bool:
        """Store a translation unless the sentence already has one; return whether it was stored."""
        with self._lock:
            if sentence in self.entries:
                return False
            self.entries[sentence] = translation
            return True


Translate = Callable[[str, TranslationParam], "tuple[bool, str]"]


def _filter_sentence(text: str) -> str:
    return "".join(ch for ch in text.strip() if ch >= " " or ch == "\n")


class TranslateWrapper:
    """Appends a translation to each sentence.

    ``translate(text, param)`` returns ``(success, text)``; only successful
    translations are cached.
    """

    def __init__(self, translate: Translate, param: TranslationParam | None = None, cache: TranslationCache | None = None):
        self.translate = translate
        self.param = param or TranslationParam()
        self.cache = cache if cache is not None else TranslationCache()
        self.rate_limiter = RateLimiter()
        self.translate_selected_only = True
        self.use_rate_limiter = True
        self.rate_limit_selected = False
        self.use_cache = True
        self.use_filter = True
        self.max_sentence_size = 2500

    def process(self, sentence: str, info: Mapping[str, int]) -> str | None:
        if info["text number"] == 0 or len(sentence) > self.max_sentence_size:
            return None

        if self.use_filter:
            sentence = _filter_sentence(sentence)
        if not sentence:
            return ""

        translation = ""
        if self.use_cache:
            translation = self.cache.get(sentence) or ""

        selected = bool(info["current select"])
        succeeded = False
        if not translation and (not self.translate_selected_only or selected):
            allowed = (
                self.rate_limiter.request()
                or not self.use_rate_limiter
                or (not self.rate_limit_selected and selected)
            )
            if allowed:
                succeeded, translation = self.translate(sentence, dataclasses.replace(self.param))
            else:
                translation = TOO_MANY_TRANS_REQUESTS

        if self.use_filter:
            translation = translation.strip()
        if succeeded:
            self.cache.add(sentence, translation)
            if self.cache.path is not None and len(self.cache) > self.cache.saved_size + CACHE_SAVE_THRESHOLD:
                self.cache.save()

        translation = translation.replace("\r\n", "\u200b\n")
        if translation:
            sentence += TRANSLATION_SEPARATOR + translation
        return sentence