"""Token kinds and the tokenizer that decides the next token in source text."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

from custasm.util.source import Span


class TokenKind(Enum):
    """The kinds of token the assembler syntax is made of."""

    ERROR = auto()
    WHITESPACE = auto()
    COMMENT = auto()
    LINE_BREAK = auto()
    IDENTIFIER = auto()
    NUMBER = auto()
    STRING = auto()
    KEYWORD_ASM = auto()
    KEYWORD_TRUE = auto()
    KEYWORD_FALSE = auto()
    PAREN_OPEN = auto()
    PAREN_CLOSE = auto()
    BRACKET_OPEN = auto()
    BRACKET_CLOSE = auto()
    BRACE_OPEN = auto()
    BRACE_CLOSE = auto()
    DOT = auto()
    COMMA = auto()
    COLON = auto()
    COLON_COLON = auto()
    ARROW_RIGHT = auto()
    ARROW_LEFT = auto()
    HEAVY_ARROW_RIGHT = auto()
    HASH = auto()
    EQUAL = auto()
    PLUS = auto()
    MINUS = auto()
    ASTERISK = auto()
    SLASH = auto()
    PERCENT = auto()
    QUESTION = auto()
    EXCLAMATION = auto()
    AMPERSAND = auto()
    VERTICAL_BAR = auto()
    CIRCUMFLEX = auto()
    TILDE = auto()
    GRAVE = auto()
    AT = auto()
    DOUBLE_AMPERSAND = auto()
    DOUBLE_VERTICAL_BAR = auto()
    DOUBLE_EQUAL = auto()
    EXCLAMATION_EQUAL = auto()
    LESS_THAN = auto()
    DOUBLE_LESS_THAN = auto()
    LESS_THAN_EQUAL = auto()
    GREATER_THAN = auto()
    DOUBLE_GREATER_THAN = auto()
    TRIPLE_GREATER_THAN = auto()
    GREATER_THAN_EQUAL = auto()

    def is_ignorable(self) -> bool:
        return self in _IGNORABLE

    def is_allowed_pattern_token(self) -> bool:
        return self in _PATTERN_TOKENS

    def printable(self) -> str:
        """Return a human-readable description used in messages."""
        return _PRINTABLE[self]


_IGNORABLE = frozenset({TokenKind.WHITESPACE, TokenKind.COMMENT, TokenKind.LINE_BREAK})

_PATTERN_TOKENS = frozenset({
    TokenKind.IDENTIFIER,
    TokenKind.NUMBER,
    TokenKind.KEYWORD_ASM,
    TokenKind.KEYWORD_TRUE,
    TokenKind.KEYWORD_FALSE,
    TokenKind.PAREN_OPEN,
    TokenKind.PAREN_CLOSE,
    TokenKind.BRACKET_OPEN,
    TokenKind.BRACKET_CLOSE,
    TokenKind.DOT,
    TokenKind.COMMA,
    TokenKind.ARROW_LEFT,
    TokenKind.ARROW_RIGHT,
    TokenKind.HASH,
    TokenKind.PLUS,
    TokenKind.MINUS,
    TokenKind.ASTERISK,
    TokenKind.SLASH,
    TokenKind.PERCENT,
    TokenKind.EXCLAMATION,
    TokenKind.AMPERSAND,
    TokenKind.VERTICAL_BAR,
    TokenKind.CIRCUMFLEX,
    TokenKind.TILDE,
    TokenKind.AT,
    TokenKind.LESS_THAN,
    TokenKind.GREATER_THAN,
})

_PRINTABLE = {
    TokenKind.ERROR: "error",
    TokenKind.WHITESPACE: "whitespace",
    TokenKind.COMMENT: "comment",
    TokenKind.LINE_BREAK: "line break",
    TokenKind.IDENTIFIER: "identifier",
    TokenKind.NUMBER: "number",
    TokenKind.STRING: "string",
    TokenKind.KEYWORD_ASM: "`asm` keyword",
    TokenKind.KEYWORD_TRUE: "`true` keyword",
    TokenKind.KEYWORD_FALSE: "`false` keyword",
    TokenKind.PAREN_OPEN: "`(`",
    TokenKind.PAREN_CLOSE: "`)`",
    TokenKind.BRACKET_OPEN: "`[`",
    TokenKind.BRACKET_CLOSE: "`]`",
    TokenKind.BRACE_OPEN: "`{`",
    TokenKind.BRACE_CLOSE: "`}`",
    TokenKind.DOT: "`.`",
    TokenKind.COMMA: "`,`",
    TokenKind.COLON: "`:`",
    TokenKind.COLON_COLON: "`::`",
    TokenKind.ARROW_RIGHT: "`->`",
    TokenKind.ARROW_LEFT: "`<-`",
    TokenKind.HEAVY_ARROW_RIGHT: "`=>`",
    TokenKind.HASH: "`#`",
    TokenKind.EQUAL: "`=`",
    TokenKind.PLUS: "`+`",
    TokenKind.MINUS: "`-`",
    TokenKind.ASTERISK: "`*`",
    TokenKind.SLASH: "`/`",
    TokenKind.PERCENT: "`%`",
    TokenKind.QUESTION: "`?`",
    TokenKind.EXCLAMATION: "`!`",
    TokenKind.AMPERSAND: "`&`",
    TokenKind.VERTICAL_BAR: "`|`",
    TokenKind.CIRCUMFLEX: "`^`",
    TokenKind.TILDE: "`~`",
    TokenKind.AT: "`@`",
    TokenKind.GRAVE: "```",
    TokenKind.DOUBLE_AMPERSAND: "`&&`",
    TokenKind.DOUBLE_VERTICAL_BAR: "`||`",
    TokenKind.DOUBLE_EQUAL: "`==`",
    TokenKind.EXCLAMATION_EQUAL: "`!=`",
    TokenKind.LESS_THAN: "`<`",
    TokenKind.DOUBLE_LESS_THAN: "`<<`",
    TokenKind.LESS_THAN_EQUAL: "`<=`",
    TokenKind.GREATER_THAN: "`>`",
    TokenKind.DOUBLE_GREATER_THAN: "`>>`",
    TokenKind.TRIPLE_GREATER_THAN: "`>>>`",
    TokenKind.GREATER_THAN_EQUAL: "`>=`",
}


@dataclass(frozen=True)
class Token:
    """A token of a given kind covering a span of source."""

    span: Span
    kind: TokenKind


_LOWER = frozenset("abcdefghijklmnopqrstuvwxyz")
_UPPER = frozenset("ABCDEFGHIJKLMNOPQRSTUVWXYZ")
_DIGITS = frozenset("0123456789")
_IDENT_START = _LOWER | _UPPER | {"_"}
_IDENT_MID = _IDENT_START | _DIGITS
_NUMBER_MID = _IDENT_MID
_HEX_MID = _DIGITS | frozenset("abcdefABCDEF_")
_BIN_MID = frozenset("01_")

_KEYWORDS = {
    "asm": TokenKind.KEYWORD_ASM,
    "true": TokenKind.KEYWORD_TRUE,
    "false": TokenKind.KEYWORD_FALSE,
}

_SPECIAL_TOKENS = (
    ("\n", TokenKind.LINE_BREAK),
    ("(", TokenKind.PAREN_OPEN),
    (")", TokenKind.PAREN_CLOSE),
    ("[", TokenKind.BRACKET_OPEN),
    ("]", TokenKind.BRACKET_CLOSE),
    ("{", TokenKind.BRACE_OPEN),
    ("}", TokenKind.BRACE_CLOSE),
    (".", TokenKind.DOT),
    (",", TokenKind.COMMA),
    ("::", TokenKind.COLON_COLON),
    (":", TokenKind.COLON),
    ("->", TokenKind.ARROW_RIGHT),
    ("<-", TokenKind.ARROW_LEFT),
    ("=>", TokenKind.HEAVY_ARROW_RIGHT),
    ("#", TokenKind.HASH),
    ("+", TokenKind.PLUS),
    ("-", TokenKind.MINUS),
    ("*", TokenKind.ASTERISK),
    ("/", TokenKind.SLASH),
    ("%", TokenKind.PERCENT),
    ("^", TokenKind.CIRCUMFLEX),
    ("~", TokenKind.TILDE),
    ("@", TokenKind.AT),
    ("`", TokenKind.GRAVE),
    ("&&", TokenKind.DOUBLE_AMPERSAND),
    ("&", TokenKind.AMPERSAND),
    ("||", TokenKind.DOUBLE_VERTICAL_BAR),
    ("|", TokenKind.VERTICAL_BAR),
    ("==", TokenKind.DOUBLE_EQUAL),
    ("=", TokenKind.EQUAL),
    ("?", TokenKind.QUESTION),
    ("!=", TokenKind.EXCLAMATION_EQUAL),
    ("!", TokenKind.EXCLAMATION),
    ("<=", TokenKind.LESS_THAN_EQUAL),
    ("<<", TokenKind.DOUBLE_LESS_THAN),
    ("<", TokenKind.LESS_THAN),
    (">=", TokenKind.GREATER_THAN_EQUAL),
    (">>>", TokenKind.TRIPLE_GREATER_THAN),
    (">>", TokenKind.DOUBLE_GREATER_THAN),
    (">", TokenKind.GREATER_THAN),
)


def is_whitespace(c: str) -> bool:
    return c in (" ", "\t", "\r")


def _span_while(src: str, pos: int, allowed) -> int:
    """Return the first index at or after ``pos`` whose char is not allowed."""
    while pos < len(src) and src[pos] in allowed:
        pos += 1
    return pos


def _check_whitespace(src: str):
    end = 0
    while end < len(src) and is_whitespace(src[end]):
        end += 1
    return (TokenKind.WHITESPACE, end) if end else None


def _check_comment(src: str):
    if not src.startswith(";"):
        return None

    if not src.startswith("*", 1):
        newline = src.find("\n", 1)
        return (TokenKind.COMMENT, len(src) if newline < 0 else newline)

    pos = 2
    nesting = 0
    while pos < len(src):
        if src.startswith(";*", pos):
            pos += 2
            nesting += 1
        elif src.startswith("*;", pos):
            pos += 2
            if nesting == 0:
                break
            nesting -= 1
        else:
            pos += 1
    return (TokenKind.COMMENT, pos)


def _check_number(src: str):
    if not src:
        return None
    first = src[0]
    if first in _DIGITS:
        return (TokenKind.NUMBER, _span_while(src, 1, _NUMBER_MID))
    if first == "$":
        end = _span_while(src, 1, _HEX_MID)
        return (TokenKind.NUMBER, end) if end > 1 else None
    if first == "%":
        end = _span_while(src, 1, _BIN_MID)
        return (TokenKind.NUMBER, end) if end > 1 else None
    return None


def _check_identifier(src: str):
    if not src:
        return None
    if src[0] == "$":
        return (TokenKind.IDENTIFIER, 1)
    if src[0] not in _IDENT_START:
        return None
    length = _span_while(src, 1, _IDENT_MID)
    return (_KEYWORDS.get(src[:length], TokenKind.IDENTIFIER), length)


def _check_special(src: str):
    for text, kind in _SPECIAL_TOKENS:
        if src.startswith(text):
            return (kind, len(text))
    return None


def _check_string(src: str):
    if not src.startswith('"'):
        return None
    closing = src.find('"', 1)
    if closing < 0:
        return None
    return (TokenKind.STRING, closing + 1)


_CHECKS = (
    _check_whitespace,
    _check_comment,
    _check_number,
    _check_identifier,
    _check_special,
    _check_string,
)


def decide_next_token(src: str) -> tuple[TokenKind, int]:
    """Return the kind of the token at the start of ``src`` and its length."""
    for check in _CHECKS:
        found = check(src)
        if found is not None:
            return found
    return (TokenKind.ERROR, 1)