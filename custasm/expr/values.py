"""Expression values and the expression tree."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Any

from custasm.util.bigint import BigInt
from custasm.util.source import AsmError, Span


class UnaryOp(Enum):
    NEG = auto()
    NOT = auto()


class BinaryOp(Enum):
    ASSIGN = auto()
    ADD = auto()
    SUB = auto()
    MUL = auto()
    DIV = auto()
    MOD = auto()
    SHL = auto()
    SHR = auto()
    AND = auto()
    OR = auto()
    XOR = auto()
    EQ = auto()
    NE = auto()
    LT = auto()
    LE = auto()
    GT = auto()
    GE = auto()
    LAZY_AND = auto()
    LAZY_OR = auto()
    CONCAT = auto()


def _ascii_bytes(s: str) -> bytes:
    return bytes(ord(c) if ord(c) < 0x100 else 0 for c in s)


_ENCODERS = {
    "utf8": lambda s: s.encode("utf-8"),
    "utf16be": lambda s: s.encode("utf-16-be"),
    "utf16le": lambda s: s.encode("utf-16-le"),
    "utf32be": lambda s: s.encode("utf-32-be"),
    "utf32le": lambda s: s.encode("utf-32-le"),
    "ascii": _ascii_bytes,
}


@dataclass(frozen=True)
class ExprString:
    """A string value together with the encoding it is emitted in."""

    utf8_contents: str
    encoding: str

    def to_bigint(self) -> BigInt:
        """Encode the string and read the bytes as a sized big-endian value."""
        encoder = _ENCODERS.get(self.encoding)
        if encoder is None:
            raise ValueError(f"invalid string encoding `{self.encoding}`")
        return BigInt.from_bytes_be(encoder(self.utf8_contents))


class Value:
    """Base class of every value an expression can produce."""

    __slots__ = ()

    def is_unknown(self) -> bool:
        return isinstance(self, UnknownValue)

    def should_propagate(self) -> bool:
        """Whether evaluation should stop and hand this value upward."""
        return isinstance(self, (UnknownValue, FailedConstraint))

    def make_literal(self) -> LiteralExpr:
        return LiteralExpr(Span(), self)

    def get_bigint(self) -> BigInt | None:
        """Return an integer view of the value, if it has one."""
        return None

    def coalesce_to_integer(self) -> Value:
        """Return strings converted to integers, and anything else unchanged."""
        return self

    def expect_bigint(self, span: Span | None = None) -> BigInt:
        if isinstance(self, IntegerValue):
            return self.bigint
        if isinstance(self, UnknownValue):
            raise AsmError("value is unknown", span)
        raise AsmError("expected integer", span)

    def expect_sized_bigint(self, span: Span | None = None) -> BigInt:
        bigint = self.expect_bigint(span)
        if bigint.size is None:
            raise AsmError("expected integer with definite size", span)
        return bigint

    def expect_sized_integerlike(self, span: Span | None = None) -> tuple[BigInt, int]:
        """Return the integer view and its size, accepting strings too."""
        bigint = self.coalesce_to_integer().get_bigint()
        if bigint is None:
            raise AsmError("expected integer-like value with definite size", span)
        if bigint.size is None:
            raise AsmError("value has no definite size", span)
        return bigint, bigint.size

    def expect_error_or_bigint(self, span: Span | None = None) -> Value:
        value = self.coalesce_to_integer()
        if value.should_propagate() or isinstance(value, IntegerValue):
            return value
        raise AsmError("expected integer", span)

    def expect_error_or_sized_bigint(self, span: Span | None = None) -> Value:
        value = self.coalesce_to_integer()
        if value.should_propagate():
            return value
        if isinstance(value, IntegerValue) and value.bigint.size is not None:
            return value
        raise AsmError("expected integer with definite size", span)

    def expect_error_or_bool(self, span: Span | None = None) -> Value:
        value = self.coalesce_to_integer()
        if value.should_propagate() or isinstance(value, BoolValue):
            return value
        raise AsmError("expected boolean", span)

    def as_usize(self) -> int | None:
        if isinstance(self, IntegerValue):
            return self.bigint.to_usize()
        return None

    def expect_usize(self, span: Span | None = None) -> int:
        if isinstance(self, IntegerValue):
            return self.bigint.checked_usize(span)
        if isinstance(self, UnknownValue):
            raise AsmError("value is unknown", span)
        raise AsmError("expected non-negative integer", span)

    def expect_error_or_usize(self, span: Span | None = None) -> Value:
        if self.should_propagate():
            return self
        if isinstance(self, IntegerValue):
            self.bigint.checked_usize(span)
            return self
        raise AsmError("expected non-negative integer", span)

    def expect_nonzero_usize(self, span: Span | None = None) -> int:
        if isinstance(self, IntegerValue):
            return self.bigint.checked_nonzero_usize(span)
        if isinstance(self, UnknownValue):
            raise AsmError("value is unknown", span)
        raise AsmError("expected positive integer", span)

    def expect_bool(self, span: Span | None = None) -> bool:
        if isinstance(self, BoolValue):
            return self.value
        raise AsmError("expected boolean", span)

    def expect_string(self, span: Span | None = None) -> ExprString:
        if isinstance(self, StringValue):
            return self.string
        raise AsmError("expected string", span)


@dataclass(frozen=True)
class UnknownValue(Value):
    """A value that cannot be determined yet."""


@dataclass(frozen=True)
class FailedConstraint(Value):
    """The result of a failed assertion, carrying its error."""

    error: AsmError


@dataclass(frozen=True)
class VoidValue(Value):
    """The absence of a value."""


@dataclass(frozen=True)
class IntegerValue(Value):
    bigint: BigInt

    def get_bigint(self) -> BigInt:
        return BigInt(self.bigint.value, self.bigint.size)


@dataclass(frozen=True)
class StringValue(Value):
    string: ExprString

    def get_bigint(self) -> BigInt:
        return self.string.to_bigint()

    def coalesce_to_integer(self) -> Value:
        return IntegerValue(self.string.to_bigint())


@dataclass(frozen=True)
class BoolValue(Value):
    value: bool


@dataclass(frozen=True)
class ExprBuiltinFunction(Value):
    name: str


@dataclass(frozen=True)
class AsmBuiltinFunction(Value):
    name: str


@dataclass(frozen=True)
class FunctionValue(Value):
    index: int


def make_integer(value: int | BigInt) -> IntegerValue:
    if isinstance(value, BigInt):
        return IntegerValue(value)
    return IntegerValue(BigInt(value))


def make_bool(value: bool) -> BoolValue:
    return BoolValue(bool(value))


def make_string(value: str, encoding: str) -> StringValue:
    return StringValue(ExprString(value, encoding))


class Expr:
    """Base class of expression tree nodes; every node has a ``span``."""

    span: Span


@dataclass
class LiteralExpr(Expr):
    span: Span
    value: Value


@dataclass
class VariableExpr(Expr):
    span: Span
    hierarchy_level: int
    hierarchy: list[str]


@dataclass
class UnaryOpExpr(Expr):
    span: Span
    op_span: Span
    op: UnaryOp
    inner: Expr


@dataclass
class BinaryOpExpr(Expr):
    span: Span
    op_span: Span
    op: BinaryOp
    lhs: Expr
    rhs: Expr


@dataclass
class TernaryOpExpr(Expr):
    span: Span
    cond: Expr
    true_branch: Expr
    false_branch: Expr


@dataclass
class SliceExpr(Expr):
    span: Span
    slice_span: Span
    left: Expr
    right: Expr
    inner: Expr


@dataclass
class SliceShortExpr(Expr):
    span: Span
    size_span: Span
    size: Expr
    inner: Expr


@dataclass
class BlockExpr(Expr):
    span: Span
    exprs: list[Expr]


@dataclass
class CallExpr(Expr):
    span: Span
    target: Expr
    args: list[Expr]


@dataclass
class AsmExpr(Expr):
    span: Span
    ast: Any