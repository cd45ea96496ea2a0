"""Interpretation of string and number literals from source text."""

from __future__ import annotations

import string

from custasm.util.bigint import USIZE_MAX, BigInt
from custasm.util.source import AsmError, Span

_SIMPLE_ESCAPES = {
    "0": "\0",
    "t": "\t",
    "r": "\r",
    "n": "\n",
    "'": "'",
    '"': '"',
    "\\": "\\",
}

_RADIX_BITS = {2: 1, 8: 3, 16: 4}

_INVALID_ESCAPE = "invalid escape sequence"


def _hex_digit(c: str | None) -> int | None:
    if c is not None and c in string.hexdigits:
        return int(c, 16)
    return None


def _digit(c: str, radix: int) -> int | None:
    value = _hex_digit(c)
    if value is None or value >= radix:
        return None
    return value


def excerpt_as_string_contents(excerpt: str, span: Span | None = None) -> str:
    """Unescape a quoted string literal, dropping its delimiters."""
    if len(excerpt) < 2:
        raise ValueError("string excerpt must include its delimiters")

    chars = iter(excerpt[1:-1])
    result = []
    for c in chars:
        if c != "\\":
            result.append(c)
            continue

        kind = next(chars, None)
        if kind in _SIMPLE_ESCAPES:
            result.append(_SIMPLE_ESCAPES[kind])
        elif kind == "x":
            byte = 0
            for _ in range(2):
                digit = _hex_digit(next(chars, None))
                if digit is None:
                    raise AsmError(_INVALID_ESCAPE, span)
                byte = (byte << 4) + digit
            if byte > 0x7F:
                raise AsmError(_INVALID_ESCAPE, span)
            result.append(chr(byte))
        elif kind == "u":
            result.append(_parse_unicode_escape(chars, span))
        else:
            raise AsmError(_INVALID_ESCAPE, span)

    return "".join(result)


def _parse_unicode_escape(chars, span: Span | None) -> str:
    if next(chars, None) != "{":
        raise AsmError(_INVALID_ESCAPE, span)

    codepoint = 0
    for _ in range(7):
        c = next(chars, None)
        if c == "}":
            break
        digit = _hex_digit(c)
        if digit is None:
            raise AsmError(_INVALID_ESCAPE, span)
        codepoint = (codepoint << 4) + digit
    else:
        raise AsmError(_INVALID_ESCAPE, span)

    if codepoint > 0x10FFFF or 0xD800 <= codepoint <= 0xDFFF:
        raise AsmError(_INVALID_ESCAPE, span)
    return chr(codepoint)


def _parse_radix(excerpt: str) -> tuple[int, str]:
    if excerpt[0] == "0" and len(excerpt) > 1:
        prefixed = {"b": 2, "o": 8, "x": 16}.get(excerpt[1])
        if prefixed is not None:
            return prefixed, excerpt[2:]
        return 10, excerpt
    if excerpt[0] == "%":
        return 2, excerpt[1:]
    if excerpt[0] == "$":
        return 16, excerpt[1:]
    return 10, excerpt


def _digits(excerpt: str, span: Span | None):
    if not excerpt:
        raise ValueError("number excerpt must not be empty")
    radix, body = _parse_radix(excerpt)
    digits = []
    for c in body:
        if c == "_":
            continue
        digit = _digit(c, radix)
        if digit is None:
            raise AsmError("invalid digits", span)
        digits.append(digit)
    return radix, digits


def excerpt_as_usize(excerpt: str, span: Span | None = None) -> int:
    """Parse a number literal that must fit an unsigned 64-bit integer."""
    radix, digits = _digits(excerpt, span)
    value = 0
    for digit in digits:
        value = value * radix + digit
        if value > USIZE_MAX:
            raise AsmError("value is too large", span)
    return value


def excerpt_as_bigint(excerpt: str, span: Span | None = None) -> BigInt:
    """Parse a number literal; binary, octal and hex literals get a size."""
    radix, digits = _digits(excerpt, span)
    if not digits:
        raise AsmError("invalid value", span)

    value = 0
    for digit in digits:
        value = value * radix + digit

    radix_bits = _RADIX_BITS.get(radix)
    size = None if radix_bits is None else radix_bits * len(digits)
    return BigInt(value, size)