import pytest

from custasm.syntax.excerpt import (
    excerpt_as_bigint,
    excerpt_as_string_contents,
    excerpt_as_usize,
)
from custasm.util.source import AsmError, Span


@pytest.mark.parametrize(
    "literal,expected",
    [
        ('"abc"', "abc"),
        ('""', ""),
        ('"a\\nb"', "a\nb"),
        ('"\\t\\r\\0"', "\t\r\0"),
        ('"\\"q\\""', '"q"'),
        ("'\\'\\\\'", "'\\"),
        ('"\\u{1f600}"', chr(0x1F600)),
        ('"\\u{41}"', chr(0x41)),
        ('"\\x7f"', chr(0x7F)),
    ],
)
def test_string_contents(literal, expected):
    assert excerpt_as_string_contents(literal) == expected


def test_hex_escape():
    assert excerpt_as_string_contents('"\\x41"') == "A"


@pytest.mark.parametrize(
    "literal",
    [
        '"\\q"',
        '"\\"',
        '"\\x8"',
        '"\\x80"',
        '"\\xzz"',
        '"\\u41"',
        '"\\u{41"',
        '"\\u{1234567}"',
        '"\\u{d800}"',
        '"\\u{110000}"',
        '"\\u{g}"',
    ],
)
def test_invalid_escapes(literal):
    span = Span(1, 0, len(literal))
    with pytest.raises(AsmError) as info:
        excerpt_as_string_contents(literal, span)
    assert info.value.message == "invalid escape sequence"
    assert info.value.span == span


def test_six_digit_unicode_escape_allowed():
    assert excerpt_as_string_contents('"\\u{01f600}"') == chr(0x1F600)


@pytest.mark.parametrize("digits", ["0", "ff", "1234", "DEADbeef", "0001"])
def test_bigint_hex(digits):
    for prefix in ("0x", "$"):
        result = excerpt_as_bigint(prefix + digits)
        assert result.value == int(digits, 16)
        assert result.size == 4 * len(digits)


@pytest.mark.parametrize("digits", ["0", "1", "1011", "00000001"])
def test_bigint_binary(digits):
    for prefix in ("0b", "%"):
        result = excerpt_as_bigint(prefix + digits)
        assert result.value == int(digits, 2)
        assert result.size == len(digits)


def test_bigint_octal():
    result = excerpt_as_bigint("0o755")
    assert result.value == int("755", 8)
    assert result.size == 3 * 3


@pytest.mark.parametrize("text", ["0", "7", "123456789012345678901234567890"])
def test_bigint_decimal_is_unsized(text):
    result = excerpt_as_bigint(text)
    assert result.value == int(text)
    assert result.size is None


def test_bigint_underscores_are_ignored():
    result = excerpt_as_bigint("0b1010_1010")
    assert result.value == int("10101010", 2)
    assert result.size == len("10101010")


def test_bigint_without_digits():
    with pytest.raises(AsmError) as info:
        excerpt_as_bigint("0x__")
    assert info.value.message == "invalid value"


@pytest.mark.parametrize("text", ["12a", "0b102", "0o8", "$xyz"])
def test_bigint_invalid_digits(text):
    with pytest.raises(AsmError) as info:
        excerpt_as_bigint(text)
    assert info.value.message == "invalid digits"


def test_usize_values():
    assert excerpt_as_usize("0x_ff") == int("ff", 16)
    assert excerpt_as_usize("%1_0") == int("10", 2)
    assert excerpt_as_usize("18446744073709551615") == 2**64 - 1


def test_usize_too_large():
    with pytest.raises(AsmError) as info:
        excerpt_as_usize("18446744073709551616")
    assert info.value.message == "value is too large"


def test_usize_invalid_digits():
    with pytest.raises(AsmError) as info:
        excerpt_as_usize("0xfg")
    assert info.value.message == "invalid digits"


def test_empty_number_excerpt_rejected():
    with pytest.raises(ValueError):
        excerpt_as_usize("")