import os
import re

from hooktext.regexreplacer import RegexReplacer, Replacement, parse_replacements

INFO = {"text number": 1}


def _write(path, text, mtime_ns):
    path.write_bytes(("\ufeff" + text).encode("utf-16-le"))
    os.utime(path, ns=(mtime_ns, mtime_ns))


def test_parse_reads_fields():
    [rule] = parse_replacements("junk|REGEX|a+|BECOMES|b|MODIFIER|gi|END|junk")
    assert rule.pattern.pattern == "a+"
    assert rule.pattern.flags & re.IGNORECASE
    assert rule.replacement == "b"
    assert rule.replace_all is True


def test_invalid_regex_is_skipped():
    text = "|REGEX|(|BECOMES|x|MODIFIER||END||REGEX|y|BECOMES|z|MODIFIER||END|"
    rules = parse_replacements(text)
    assert [rule.pattern.pattern for rule in rules] == ["y"]


def test_global_replaces_every_match():
    [rule] = parse_replacements("|REGEX|a|BECOMES|b|MODIFIER|g|END|")
    result = rule.apply("a x a")
    assert "a" not in result
    assert result.count("b") == 2


def test_without_global_replaces_first_only():
    [rule] = parse_replacements("|REGEX|a|BECOMES|b|MODIFIER||END|")
    result = rule.apply("a x a")
    assert result.count("a") == 1
    assert result.startswith("b")


def test_case_modifier():
    [insensitive] = parse_replacements("|REGEX|a|BECOMES|b|MODIFIER|i|END|")
    [sensitive] = parse_replacements("|REGEX|a|BECOMES|b|MODIFIER||END|")
    assert insensitive.apply("A") == "b"
    assert sensitive.apply("A") == "A"


def test_format_groups_and_specials():
    assert Replacement(re.compile("(a)(b)"), "$2$1").apply("ab") == "ba"
    assert Replacement(re.compile("a"), "$&$&").apply("a") == "aa"
    assert Replacement(re.compile("a"), "$$").apply("a") == "$"


def test_missing_group_expands_to_nothing():
    assert Replacement(re.compile("a"), "$1").apply("a") == ""


def test_rules_apply_in_order(tmp_path):
    path = tmp_path / "rules.txt"
    _write(path, "|REGEX|a|BECOMES|b|MODIFIER|g|END|\r\n|REGEX|b|BECOMES|c|MODIFIER|g|END|", 1_000_000_000)
    assert RegexReplacer(path).process("a", INFO) == "c"


def test_reload_on_change(tmp_path):
    path = tmp_path / "rules.txt"
    _write(path, "|REGEX|a|BECOMES|b|MODIFIER|g|END|", 1_000_000_000)
    replacer = RegexReplacer(path)
    assert replacer.process("a", INFO) == "b"
    _write(path, "|REGEX|a|BECOMES|z|MODIFIER|g|END|", 2_000_000_000)
    assert replacer.process("a", INFO) == "z"


def test_missing_file_leaves_sentence(tmp_path):
    replacer = RegexReplacer(tmp_path / "absent.txt")
    assert replacer.process("abc", INFO) == "abc"
    assert replacer.replacements == []