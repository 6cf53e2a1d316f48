import io

import pytest

from xvkit.printf import format_int, printf, sprintf


@pytest.mark.parametrize("value", [0, 7, 42, -42, 2147483647, -2147483648, 123456])
def test_decimal_matches_python(value):
    assert format_int(value, 10, True) == str(value)


@pytest.mark.parametrize("value", [0, 1, 255, 4096, -1, -4096, 0x7FFFFFFF])
def test_hex_round_trip(value):
    text = format_int(value, 16, False)
    assert int(text, 16) == value & 0xFFFFFFFF
    assert text == text.upper()


def test_hex_uses_upper_case_digits():
    assert format_int(255, 16, False) == "FF"


def test_unsigned_negative_shows_bit_pattern():
    assert format_int(-1, 16, False) == "FFFFFFFF"


def test_bad_base():
    with pytest.raises(ValueError):
        format_int(5, 1, True)


def test_null_string():
    assert sprintf("%s", None) == "(null)"


def test_conversions_combined():
    assert sprintf("%d %s!", 7, "x") == "7 x!"


def test_pointer_matches_hex():
    assert sprintf("%p", 4096) == sprintf("%x", 4096)


def test_char_conversion():
    assert sprintf("%c", ord("z")) == "z"


def test_percent_escape():
    assert sprintf("100%%") == "100%"


def test_unknown_conversion_copied():
    assert sprintf("%q") == "%q"


def test_trailing_percent_dropped():
    assert sprintf("ab%") == "ab"


def test_missing_argument():
    with pytest.raises(ValueError):
        sprintf("%d %d", 1)


def test_printf_writes_to_stream():
    out = io.StringIO()
    printf(out, "%s=%d\n", "n", -3)
    assert out.getvalue() == sprintf("%s=%d\n", "n", -3)