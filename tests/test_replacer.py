import os

from hooktext.replacer import Replacer, Trie

INFO = {"text number": 1}

SCRIPT = (
    "\n|ORIG|さよなら|BECOMES|goodbye |END|Ignore this text\n"
    "And this text ツ\u3000\u3000\n"
    "|ORIG|バカ|BECOMES|idiot|END|\n"
    "|ORIG|こんにちは |BECOMES| hello|END||ORIG|delet^this|BECOMES||END|"
)


def _write(path, text, mtime_ns):
    path.write_bytes(("\ufeff" + text).encode("utf-16-le"))
    os.utime(path, ns=(mtime_ns, mtime_ns))


def test_source_script():
    original = "Don't replace this\u3000\n さよなら バカ こんにちは delete this"
    assert Trie(SCRIPT).replace(original) == "Don't replace thisgoodbye idiot hello"


def test_empty_trie_is_false():
    assert not Trie()
    assert not Trie("|ORIG|   |BECOMES|x|END|")
    assert Trie("|ORIG|a|BECOMES|x|END|")


def test_whitespace_in_sentence_is_ignored():
    trie = Trie("|ORIG|ab|BECOMES|X|END|")
    assert trie.replace("a b") == "X"
    assert trie.replace("ab") == "X"


def test_wildcard_matches_any_character():
    trie = Trie("|ORIG|a^c|BECOMES|X|END|")
    assert trie.replace("abc") == "X"
    assert trie.replace("adc") == "X"


def test_longest_match_wins():
    trie = Trie("|ORIG|ab|BECOMES|1|END||ORIG|abc|BECOMES|2|END|")
    assert trie.replace("abc") == "2"
    assert trie.replace("ab") == "1"


def test_unmatched_text_is_unchanged():
    trie = Trie("|ORIG|zz|BECOMES|X|END|")
    assert trie.replace("hello") == "hello"
    assert trie.replace("") == ""


def test_replacer_reads_utf16_file(tmp_path):
    path = tmp_path / "replace.txt"
    _write(path, "|ORIG|cat|BECOMES|dog|END|", 1_000_000_000)
    replacer = Replacer(path)
    assert replacer.process("cat", INFO) == "dog"


def test_replacer_reloads_changed_file(tmp_path):
    path = tmp_path / "replace.txt"
    _write(path, "|ORIG|cat|BECOMES|dog|END|", 1_000_000_000)
    replacer = Replacer(path)
    assert replacer.process("cat", INFO) == "dog"
    _write(path, "|ORIG|cat|BECOMES|bird|END|", 2_000_000_000)
    assert replacer.process("cat", INFO) == "bird"
    assert replacer.update() is False


def test_replacer_missing_file(tmp_path):
    replacer = Replacer(tmp_path / "absent.txt")
    assert replacer.process("cat", INFO) == "cat"
    assert replacer.update() is False