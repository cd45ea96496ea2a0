"""A growable sequence of bits with provenance spans."""

from __future__ import annotations

from dataclasses import dataclass, field

from custasm.util.bigint import BigInt
from custasm.util.source import Span


def _mask(bits: int) -> int:
    return (1 << bits) - 1


@dataclass
class BitVecSpan:
    """A region of output, with the logical address and source it came from."""

    addr: BigInt
    offset: int | None
    size: int
    span: Span


@dataclass
class BitVecBlock:
    """A contiguous run of written output bits."""

    offset: int
    size: int


@dataclass
class BitVec:
    """Bits indexed from 0; index 0 is the first bit of the output."""

    spans: list[BitVecSpan] = field(default_factory=list)
    _data: int = 0
    _len: int = 0

    def write_bit(self, index: int, value: bool) -> None:
        if value:
            self._data |= 1 << index
        else:
            self._data &= ~(1 << index)
        self._len = max(self._len, index + 1)

    def read_bit(self, index: int) -> bool:
        return bool((self._data >> index) & 1)

    def __len__(self) -> int:
        return self._len

    def write_bigint(self, index: int, bigint: BigInt) -> None:
        """Write a sized value at ``index``, most significant bit first."""
        size = bigint.size
        if size is None:
            raise ValueError("cannot write a value without a definite size")
        if size > 0:
            msb_first = format(bigint.value & _mask(size), f"0{size}b")
            chunk = int(msb_first[::-1], 2) << index
            region = _mask(size) << index
            self._data = (self._data & ~region) | chunk
        self._len = max(self._len, index + size)

    def write_bigint_with_span(
        self,
        span: Span,
        offset: int,
        addr: BigInt,
        bigint: BigInt,
    ) -> None:
        self.write_bigint(offset, bigint)
        self.mark_span(offset, bigint.size, addr, span)

    def mark_span(self, offset: int | None, size: int, addr: BigInt, span: Span) -> None:
        self.spans.append(BitVecSpan(addr=addr, offset=offset, size=size, span=span))

    def to_bigint(self) -> BigInt:
        """Return the whole vector as a value whose top bit is bit 0."""
        if self._len == 0:
            return BigInt(0, 0)
        lsb_first = format(self._data & _mask(self._len), f"0{self._len}b")[::-1]
        return BigInt(int(lsb_first, 2), self._len)

    def sorted_spans(self) -> list[BitVecSpan]:
        """Return the spans ordered by offset, spans without one first."""
        return sorted(
            self.spans,
            key=lambda s: (s.offset is not None, s.offset or 0),
        )

    def get_blocks(self) -> list[BitVecBlock]:
        """Merge adjacent spans with offsets into contiguous blocks."""
        result: list[BitVecBlock] = []
        origin: int | None = None
        current_size = 0

        for span in self.sorted_spans():
            if span.offset is None:
                continue
            if origin is not None and span.offset != origin + current_size:
                if current_size != 0:
                    result.append(BitVecBlock(origin, current_size))
                origin = None
            if origin is None:
                origin = span.offset
                current_size = 0
            current_size += span.size

        if origin is not None and current_size != 0:
            result.append(BitVecBlock(origin, current_size))
        return result

    def __format__(self, spec: str) -> str:
        if spec != "x":
            return super().__format__(spec)
        digits = []
        for start in range(0, self._len, 4):
            digit = 0
            for i in range(start, start + 4):
                digit = (digit << 1) | self.read_bit(i)
            digits.append(format(digit, "x"))
        return "".join(digits)