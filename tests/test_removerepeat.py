import random

import pytest

from hooktext.extension import SentenceInfo, apply_extension
from hooktext.removerepeat import (
    RepeatedSentenceFilter,
    cache_size_from_filename,
    generate_suffix_array,
    remove_repeated_chars,
    remove_repeated_phrases,
    remove_repeated_prefix,
)

NON_CONSOLE = SentenceInfo({"text number": 1})
CONSOLE = SentenceInfo({"text number": 0})
NORMAL = "This is a normal sentence. はい"


def test_repeated_chars():
    repeated = apply_extension(remove_repeated_chars, "aaaaaaaaaaaabbbbbbcccdddaabbbcccddd", NON_CONSOLE)
    some = apply_extension(remove_repeated_chars, "abcdefaabbccddeeff", NON_CONSOLE)
    assert repeated.startswith("aaaabbcd")
    assert some == "abcdefabcdef"


@pytest.mark.parametrize("text", ["", " ", NORMAL])
def test_repeated_chars_leaves_normal_text(text):
    assert apply_extension(remove_repeated_chars, text, NON_CONSOLE) == text


def test_console_is_untouched():
    for extension in (remove_repeated_chars, remove_repeated_phrases, remove_repeated_prefix):
        assert apply_extension(extension, "aabbccdd", CONSOLE) == "aabbccdd"


@pytest.mark.parametrize(
    "text",
    [
        "Name: '_abcdefg_abcdefg_abcdefg_abcdefg_abcdefg'",
        "Name: '__a_ab_abc_abcd_abcde_abcdef_abcdefg'",
        "Name: '_abcdefg_abcdef_abcde_abcd_abc_ab_a_'",
    ],
)
def test_repeated_phrases(text):
    assert apply_extension(remove_repeated_phrases, text, NON_CONSOLE) == "Name: '_abcdefg'"


@pytest.mark.parametrize("text", ["", " ", NORMAL])
def test_repeated_phrases_leaves_normal_text(text):
    assert apply_extension(remove_repeated_phrases, text, NON_CONSOLE) == text


@pytest.mark.parametrize(
    "text",
    ["_abcde_abcdef_abcdefg_abcdefg_abcdefg_abcdefg_abcdefg", "__a_ab_abc_abcd_abcde_abcdef_abcdefg"],
)
def test_repeated_prefix(text):
    assert apply_extension(remove_repeated_prefix, text, NON_CONSOLE) == "_abcdefg"


@pytest.mark.parametrize("text", ["", " ", NORMAL])
def test_repeated_prefix_leaves_normal_text(text):
    assert apply_extension(remove_repeated_prefix, text, NON_CONSOLE) == text


@pytest.mark.parametrize("seed", range(5))
def test_suffix_array_is_strictly_descending(seed):
    rng = random.Random(seed)
    text = "".join(rng.choice("abc") for _ in range(rng.randint(1, 60)))
    suffixes = generate_suffix_array(text)
    assert sorted(suffixes) == list(range(len(text)))
    assert all(text[a:] > text[b:] for a, b in zip(suffixes, suffixes[1:]))


def test_suffix_array_empty():
    assert generate_suffix_array("") == []


def test_repeated_sentence_is_dropped():
    filt = RepeatedSentenceFilter()
    assert apply_extension(filt.process, "hello", NON_CONSOLE) == "hello"
    assert apply_extension(filt.process, "hello", NON_CONSOLE) == ""


def test_threads_are_independent():
    filt = RepeatedSentenceFilter()
    apply_extension(filt.process, "hello", NON_CONSOLE)
    other = SentenceInfo({"text number": 2})
    assert apply_extension(filt.process, "hello", other) == "hello"


def test_old_sentences_are_forgotten():
    filt = RepeatedSentenceFilter(cache_size=1)
    apply_extension(filt.process, "first", NON_CONSOLE)
    apply_extension(filt.process, "second", NON_CONSOLE)
    assert apply_extension(filt.process, "first", NON_CONSOLE) == "first"


def test_cache_size_from_filename():
    assert cache_size_from_filename("C:\\extensions\\Remove 5 Repeated Sentences.xdll") == 5
    assert cache_size_from_filename("C:\\extensions\\Remove Repeated Sentences.xdll") == 30