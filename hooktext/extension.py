"""The sentence-processing interface shared by all text extensions."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Mapping


class SentenceInfo(Mapping):
    """Read-only named integer properties describing a sentence.

    When a name occurs more than once, the first occurrence wins.
    """

    def __init__(self, items: Mapping[str, int] | Iterable[tuple[str, int]] = ()):
        pairs = items.items() if isinstance(items, Mapping) else items
        self._values: dict[str, int] = {}
        for name, value in pairs:
            self._values.setdefault(name, int(value))

    def __getitem__(self, name: str) -> int:
        try:
            return self._values[name]
        except KeyError:
            raise KeyError(f"no sentence property named {name!r}") from None

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"SentenceInfo({self._values!r})"


class SkipSentence(Exception):
    """Raised by an extension to drop the current sentence."""


def skip() -> None:
    """Drop the sentence being processed."""
    raise SkipSentence()


ProcessSentence = Callable[[str, Mapping[str, int]], "str | None"]


def apply_extension(process_sentence: ProcessSentence, sentence: str, info) -> str:
    """Run one extension and return the resulting sentence.

    The extension returns the new sentence, or None to leave it unchanged.
    An empty result means the sentence is dropped.
    """
    if not isinstance(info, SentenceInfo):
        info = SentenceInfo(info)
    try:
        result = process_sentence(sentence, info)
    except SkipSentence:
        return ""
    return sentence if result is None else result