# hooktext

Tools for cleaning up, rewriting and translating sentences that arrive a
piece at a time from a running program: sentence filters, a reader for the
`|TAG|...|END|` block markup their save files use, hook-code parsing and
generation, and a text thread that buffers incoming text into sentences.
The package has no dependencies beyond the standard library.

## Installation

```
pip install hooktext
```

To run the tests:

```
pip install "hooktext[test]"
pytest
```

## Sentence filters

A filter is called as `filter(sentence, info)`, where `info` is a
`hooktext.extension.SentenceInfo` (a read-only mapping of property names to
integers, such as `"text number"` and `"current select"`). It returns the new
sentence, or `None` to leave it unchanged; an empty string drops it. Thread
number 0 is the console, which most filters leave alone.

```python
from hooktext.extension import SentenceInfo, apply_extension
from hooktext.removerepeat import remove_repeated_chars, remove_repeated_phrases

info = SentenceInfo({"text number": 1})
remove_repeated_chars("aabbccddeeff", info)   # "abcdef"
remove_repeated_phrases("Name: '_abcdefg_abcdefg_abcdefg_abcdefg_abcdefg'", info)
# "Name: '_abcdefg'"

apply_extension(remove_repeated_chars, "hello", {"text number": 1})  # "hello"
```

`apply_extension` runs a filter as a host would: `None` keeps the sentence,
and a filter may call `hooktext.extension.skip()` to drop it (the result is
then `""`).

Available filters:

- `hooktext.removerepeat`
  - `remove_repeated_chars`: collapses characters that are each repeated the
    same number of times.
  - `remove_repeated_phrases`: erases regions made of a repeated substring
    longer than six characters (uses `generate_suffix_array`).
  - `remove_repeated_prefix`: drops leading text whose chunks reappear later.
  - `RepeatedSentenceFilter(cache_size=30).process`: drops a sentence already
    among the thread's recent sentences. `cache_size_from_filename` reads the
    size from a name like `Remove 50 Repeated Sentences`.
- `hooktext.filters`
  - `extra_newlines`: appends `"\n"`.
  - `ThreadLinker`: `link(source, target)` / `unlink(source, target)`; its
    `process(sentence, info, add_text)` calls `add_text(target, text,
    as_sentence)` for each linked thread. A source of `None` links every
    thread numbered above 1.
  - `RegexFilter(path="SavedRegexFilters.txt")`: replaces each match with its
    first group. `set_regex`, `save(process_name)` and `load_for(process_name)`
    keep one pattern per process in a UTF-16 file.
- `hooktext.replacer.Replacer(path="SavedReplacements.txt")`: applies
  `|ORIG|...|BECOMES|...|END|` rules from a UTF-16 file, reloading it when it
  changes. Whitespace is ignored in both rules and sentences, `^` matches any
  one character, and the longest match wins. The underlying `Trie` can be
  built from a script string directly.
- `hooktext.regexreplacer.RegexReplacer(path="SavedRegexReplacements.txt")`:
  applies `|REGEX|...|BECOMES|...|MODIFIER|...|END|` rules (`i` ignores case,
  `g` replaces every match; replacements use `$1`, `$&` and the like).
  `parse_replacements` reads the rules from text.

## Block markup

```python
from hooktext.blockmarkup import read_blocks, read_markup_file

read_blocks("junk|ORIG|a|BECOMES|b|END|", ["|ORIG|", "|BECOMES|"])
# [("a", "b")]
```

`BlockMarkupReader` reads records from a stream block by block;
`read_markup_file` reads a file, choosing UTF-16 or UTF-8 from its byte-order
mark unless an encoding is given, and returns no records for a missing file.

## Translation

`hooktext.translate.TranslateWrapper(translate, param, cache)` wraps any
function `translate(text, TranslationParam) -> (ok, translation)`. Its
`process` method trims and filters the sentence, looks it up in a
`TranslationCache`, limits requests with a `RateLimiter` (30 per 60 seconds by
default) and appends the translation after `"\u200b \n"`. Only successful
translations are cached; a cache with a path is saved as UTF-16 block markup
once more than 50 new entries have been added.

`hooktext.languages.get_table("deepl" | "papago" | "systran")` returns a
`LanguageTable` of language names and the codes each provider uses
(`table.code("?")` is the provider's auto-detect code).

## Network helpers

`hooktext.network` has `html_unescape`, `json_escape`, `url_escape` (percent
encodes every UTF-8 byte), a small `parse_json` that raises `JsonError`, and
`http_request(server, method, path, ...)`, which returns the response body.

## Hook codes

```python
from hooktext import hookcode

hp = hookcode.parse("HB4@0")   # HookParam, or None if the code is invalid
hookcode.generate(hp)          # "HB4@0"
hookcode.hex_string(-12)       # "-C"
```

## Text threads

`hooktext.textthread.TextThread(tp, hp, name=None, output=None)` collects text
given to `push_bytes` (decoded by the hook's code page, Shift-JIS by default)
or `push_text`. Each `flush()` passes queued sentences to
`output(thread, sentence)`, which returns the text to keep in
`thread.storage` or `None`, and queues the buffer once it is older than
`flush_delay` milliseconds or longer than `max_buffer_size`. With
`filter_repetition` set, text ending in three copies of a phrase is reduced to
one (see `remove_repetition`).

## What this package does not do

It does not attach to processes, install hooks or receive text from them: the
hook codes are parsed and generated only, and text reaches a `TextThread`
only through its `push_*` methods, with `flush()` called by you. It has no
windows or command-line program, and it does not itself talk to any
translation website; you supply the translate function.