"""Arbitrary-precision integers that optionally carry a bit width."""

from __future__ import annotations

import functools

from custasm.util.source import AsmError, Span

BIGINT_MAX_BITS = 8 * 100_000_000
USIZE_MAX = 2**64 - 1
U32_MAX = 2**32 - 1

_OUT_OF_RANGE = "value is out of supported range"


def _to_signed_bytes_be(value: int) -> bytes:
    if value == 0:
        return b"\x00"
    magnitude_bits = value.bit_length() if value > 0 else (~value).bit_length()
    length = magnitude_bits // 8 + 1
    return value.to_bytes(length, "big", signed=True)


def _mask(bits: int) -> int:
    return (1 << bits) - 1


def _value_of(other: object) -> int | None:
    if isinstance(other, BigInt):
        return other.value
    if isinstance(other, int) and not isinstance(other, bool):
        return other
    return None


@functools.total_ordering
class BigInt:
    """An integer value together with an optional definite size in bits.

    Equality and ordering consider only the numeric value.
    """

    __slots__ = ("value", "size")

    def __init__(self, value: int = 0, size: int | None = None) -> None:
        self.value = int(value)
        self.size = size

    @classmethod
    def from_bytes_be(cls, data: bytes) -> BigInt:
        """Interpret bytes as a signed big-endian value sized to the input."""
        return cls(int.from_bytes(bytes(data), "big", signed=True), len(data) * 8)

    def as_string(self) -> str:
        return _to_signed_bytes_be(self.value).decode("utf-8", errors="replace")

    def get_bit(self, index: int) -> bool:
        return bool((self.value >> index) & 1)

    def set_bit(self, index: int, value: bool) -> None:
        if value:
            self.value |= 1 << index
        else:
            self.value &= ~(1 << index)

    def min_size(self) -> int:
        """Return the fewest bits that represent the value."""
        if self.value == 0:
            return 1
        if self.value < 0:
            return (self.value + 1).bit_length() + 1
        return self.value.bit_length()

    def size_or_min_size(self) -> int:
        return self.size if self.size is not None else self.min_size()

    def sign(self) -> int:
        return (self.value > 0) - (self.value < 0)

    def to_usize(self) -> int | None:
        """Return the value if it fits an unsigned 64-bit integer."""
        if 0 <= self.value <= USIZE_MAX:
            return self.value
        return None

    def checked_usize(self, span: Span | None = None) -> int:
        result = self.to_usize()
        if result is None:
            raise AsmError(_OUT_OF_RANGE, span)
        return result

    def checked_nonzero_usize(self, span: Span | None = None) -> int:
        result = self.to_usize()
        if not result:
            raise AsmError(_OUT_OF_RANGE, span)
        return result

    def _largest_bits(self, rhs: BigInt) -> int:
        return max(self.value.bit_length(), rhs.value.bit_length())

    def checked_add(self, rhs: BigInt, span: Span | None = None) -> BigInt:
        if self._largest_bits(rhs) >= BIGINT_MAX_BITS - 1:
            raise AsmError(_OUT_OF_RANGE, span)
        return BigInt(self.value + rhs.value)

    def checked_sub(self, rhs: BigInt, span: Span | None = None) -> BigInt:
        if self._largest_bits(rhs) >= BIGINT_MAX_BITS - 2:
            raise AsmError(_OUT_OF_RANGE, span)
        return BigInt(self.value - rhs.value)

    def checked_mul(self, rhs: BigInt, span: Span | None = None) -> BigInt:
        if self._largest_bits(rhs) >= BIGINT_MAX_BITS // 2:
            raise AsmError(_OUT_OF_RANGE, span)
        return BigInt(self.value * rhs.value)

    def checked_div(self, rhs: BigInt, span: Span | None = None) -> BigInt:
        """Divide, truncating toward zero."""
        if rhs.value == 0:
            raise AsmError("division by zero", span)
        quotient = abs(self.value) // abs(rhs.value)
        if (self.value < 0) != (rhs.value < 0):
            quotient = -quotient
        return BigInt(quotient)

    def checked_mod(self, rhs: BigInt, span: Span | None = None) -> BigInt:
        """Remainder taking the sign of the dividend."""
        if rhs.value == 0:
            raise AsmError("modulo by zero", span)
        remainder = abs(self.value) % abs(rhs.value)
        return BigInt(-remainder if self.value < 0 else remainder)

    def checked_shl(self, rhs: BigInt, span: Span | None = None) -> BigInt:
        amount = rhs.value
        if not 0 <= amount <= U32_MAX or self.value.bit_length() + amount >= BIGINT_MAX_BITS:
            raise AsmError(_OUT_OF_RANGE, span)
        return BigInt(self.value << amount)

    def checked_shr(self, rhs: BigInt, span: Span | None = None) -> BigInt:
        amount = rhs.to_usize()
        if amount is None:
            raise AsmError(_OUT_OF_RANGE, span)
        return BigInt(self.value >> amount)

    def slice(self, left: int, right: int) -> BigInt:
        """Return bits ``right`` up to (excluding) ``left`` as a sized value."""
        if left < right:
            raise ValueError("invalid slice range")
        if self.size is not None and self.value >= 0 and left == self.size and right == 0:
            return BigInt(self.value, self.size)
        width = left - right
        return BigInt((self.value >> right) & _mask(width), width)

    def checked_slice(self, left: int, right: int, span: Span | None = None) -> BigInt:
        if left < right:
            raise AsmError("invalid slice range", span)
        return self.slice(left, right)

    def concat(
        self,
        lhs_slice: tuple[int, int],
        rhs: BigInt,
        rhs_slice: tuple[int, int],
    ) -> BigInt:
        lhs_size = lhs_slice[0] - lhs_slice[1]
        rhs_size = rhs_slice[0] - rhs_slice[1]
        high = (self.value >> lhs_slice[1]) & _mask(lhs_size)
        low = (rhs.value >> rhs_slice[1]) & _mask(rhs_size)
        return BigInt((high << rhs_size) | low, lhs_size + rhs_size)

    def convert_le(self) -> BigInt:
        """Reverse the byte order of a sized value."""
        if self.size is None:
            raise ValueError("attempting `le` conversion on an unsized value")
        value = self.slice(self.size, 0).value
        length = max(1, (value.bit_length() + 7) // 8, self.size // 8)
        swapped = int.from_bytes(value.to_bytes(length, "little"), "big")
        return BigInt(swapped, self.size)

    def __invert__(self) -> BigInt:
        return BigInt(~self.value)

    def __neg__(self) -> BigInt:
        return BigInt(-self.value)

    def __and__(self, other: BigInt) -> BigInt:
        return BigInt(self.value & other.value)

    def __or__(self, other: BigInt) -> BigInt:
        return BigInt(self.value | other.value)

    def __xor__(self, other: BigInt) -> BigInt:
        return BigInt(self.value ^ other.value)

    def __eq__(self, other: object) -> bool:
        value = _value_of(other)
        if value is None:
            return NotImplemented
        return self.value == value

    def __lt__(self, other: object) -> bool:
        value = _value_of(other)
        if value is None:
            return NotImplemented
        return self.value < value

    def __hash__(self) -> int:
        return hash(self.value)

    def __repr__(self) -> str:
        text = format(self.value, "#x")
        if self.size is not None:
            text += f"`{self.size}"
        return text

    def __format__(self, spec: str) -> str:
        return format(self.value, spec)