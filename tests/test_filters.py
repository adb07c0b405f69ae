import re

import pytest

from hooktext.filters import RegexFilter, ThreadLinker, extra_newlines

INFO = {"text number": 1}
CONSOLE = {"text number": 0}


def test_extra_newlines():
    assert extra_newlines("hi", INFO) == "hi\n"
    assert extra_newlines("hi", CONSOLE) is None


def _collector():
    calls = []
    return calls, lambda target, text, as_sentence: calls.append((target, text, as_sentence))


def test_link_reports_new_links():
    linker = ThreadLinker()
    assert linker.link(1, 2) is True
    assert linker.link(1, 2) is False
    assert linker.unlink(1, 2) is True
    assert linker.unlink(1, 2) is False


def test_linked_thread_receives_text():
    linker = ThreadLinker()
    linker.link(3, 7)
    calls, add_text = _collector()
    assert linker.process("s", {"text number": 3}, add_text) is None
    assert calls == [(7, "s", False)]


def test_universal_link_skips_low_threads():
    linker = ThreadLinker(separate_sentences=True)
    assert linker.link(None, 5) is True
    calls, add_text = _collector()
    assert linker.process("s", {"text number": 1}, add_text) is None
    assert calls == []
    assert linker.process("s", {"text number": 4}, add_text) is None
    assert calls == [(5, "s", True)]


def test_unlinked_thread_receives_nothing():
    linker = ThreadLinker()
    assert linker.link(3, 7) is True
    assert linker.unlink(3, 7) is True
    calls, add_text = _collector()
    assert linker.process("s", {"text number": 3}, add_text) is None
    assert calls == []


def test_regex_filter_keeps_first_group(tmp_path):
    regex_filter = RegexFilter(tmp_path / "filters.txt")
    regex_filter.set_regex("x(y)")
    assert regex_filter.process("xy", INFO) == "y"
    assert regex_filter.process("xy", CONSOLE) is None


def test_invalid_regex_keeps_previous(tmp_path):
    regex_filter = RegexFilter(tmp_path / "filters.txt")
    regex_filter.set_regex("x(y)")
    with pytest.raises(re.error):
        regex_filter.set_regex("(")
    assert regex_filter.pattern == "x(y)"
    assert regex_filter.process("xy", INFO) == "y"


def test_empty_regex_turns_filter_off(tmp_path):
    regex_filter = RegexFilter(tmp_path / "filters.txt")
    regex_filter.set_regex("x(y)")
    regex_filter.set_regex("")
    assert regex_filter.regex is None
    assert regex_filter.process("xy", INFO) == "xy"


def test_save_writes_utf16_with_bom(tmp_path):
    path = tmp_path / "filters.txt"
    regex_filter = RegexFilter(path)
    regex_filter.set_regex("x(y)")
    regex_filter.save("game.exe")
    data = path.read_bytes()
    assert data[:2] == b"\xff\xfe"
    assert "|PROCESS|game.exe|FILTER|x(y)|END|" in data.decode("utf-16-le")


def test_saved_filter_loaded_for_process(tmp_path):
    path = tmp_path / "filters.txt"
    writer = RegexFilter(path)
    writer.set_regex("a(b)")
    writer.save("game.exe")
    writer.set_regex("x(y)")
    writer.save("game.exe")
    writer.set_regex("q(r)")
    writer.save("other.exe")

    reader = RegexFilter(path)
    assert reader.process("xy", INFO, "game.exe") == "y"
    assert reader.pattern == "x(y)"


def test_load_for_unknown_process(tmp_path):
    path = tmp_path / "filters.txt"
    writer = RegexFilter(path)
    writer.set_regex("x(y)")
    writer.save("game.exe")
    reader = RegexFilter(path)
    assert reader.load_for("unknown.exe") is None
    assert reader.regex is None
    assert reader.process("xy", INFO, "unknown.exe") == "xy"