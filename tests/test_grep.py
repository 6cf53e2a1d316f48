import io

import pytest

from xvkit.grep import grep, main, match


@pytest.mark.parametrize(
    "re, text",
    [
        ("^ab", "abc"),
        ("a.c", "xabcx"),
        ("ab*c", "ac"),
        ("ab*c", "abbbc"),
        ("c$", "abc"),
        ("", "anything"),
        (".*", ""),
        ("^$", ""),
        ("^a.*z$", "abcz"),
    ],
)
def test_matches(re, text):
    assert match(re, text)


@pytest.mark.parametrize(
    "re, text",
    [
        ("^ab", "cab"),
        ("c$", "abcd"),
        ("^$", "a"),
        ("a.c", "ac"),
        ("xyz", "xy"),
        ("^a.*z$", "abcza"),
    ],
)
def test_non_matches(re, text):
    assert not match(re, text)


def test_long_text_does_not_overflow():
    assert match("b$", "a" * 5000 + "b")


def test_grep_selects_lines():
    lines = list(grep("foo", io.StringIO("foo\nbar\nfood\n")))
    assert lines == ["foo\n", "food\n"]


def test_unterminated_last_line_ignored():
    assert list(grep("x", io.StringIO("x\nx"))) == ["x\n"]


def test_main_with_file(tmp_path, capsys):
    path = tmp_path / "in.txt"
    path.write_text("alpha\nbeta\ngamma\n")
    assert main(["a$", str(path)]) == 0
    assert capsys.readouterr().out == "alpha\nbeta\ngamma\n"


def test_main_usage(capsys):
    assert main([]) == 1
    assert "usage: grep pattern" in capsys.readouterr().err


def test_main_missing_file(tmp_path, capsys):
    missing = str(tmp_path / "nope")
    assert main(["x", missing]) == 1
    assert capsys.readouterr().out == f"grep: cannot open {missing}\n"