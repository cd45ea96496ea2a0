"""Renderings of assembled output in the supported file formats."""

from __future__ import annotations

from custasm.util.bitvec import BitVec, BitVecSpan
from custasm.util.fileserver import FileServer
from custasm.util.source import CharCounter

_NO_FILE = object()


def _read_bits(bits: BitVec, start: int, count: int) -> int:
    """Read ``count`` bits from ``start``, the first bit becoming the most significant."""
    value = 0
    for index in range(start, start + count):
        value = (value << 1) | bits.read_bit(index)
    return value


def _digit_char(digit: int) -> str:
    if digit < 10:
        return chr(ord("0") + digit)
    return chr(ord("a") + digit - 10)


def _bytes(bits: BitVec):
    """Yield ``(index_after, byte)`` for each 8-bit chunk of the output."""
    for start in range(0, len(bits), 8):
        yield start + 8, _read_bits(bits, start, 8)


def _byte_count(bits: BitVec) -> int:
    count = (len(bits) + 7) // 8
    if count == 0:
        raise ValueError("cannot format empty output")
    return count


def _format_byte(byte: int, radix: int) -> str:
    if radix == 10:
        return str(byte)
    if radix == 16:
        return f"0x{byte:02x}"
    raise ValueError("invalid radix")


def format_binary(bits: BitVec) -> bytes:
    """Return the output as raw bytes, padding the last byte with zeros."""
    return bytes(byte for _, byte in _bytes(bits))


def format_binstr(bits: BitVec) -> str:
    return format_str(bits, 1)


def format_hexstr(bits: BitVec) -> str:
    return format_str(bits, 4)


def format_str(bits: BitVec, bits_per_digit: int) -> str:
    """Return the output as a string of digits of ``bits_per_digit`` bits each."""
    return "".join(
        _digit_char(_read_bits(bits, start, bits_per_digit))
        for start in range(0, len(bits), bits_per_digit)
    )


def format_bindump(bits: BitVec) -> str:
    return format_dump(bits, 1, 8, 8)


def format_hexdump(bits: BitVec) -> str:
    return format_dump(bits, 4, 8, 16)


def format_dump(bits: BitVec, digit_bits: int, byte_bits: int, bytes_per_line: int) -> str:
    """Return a dump with addresses, digit columns and, for bytes, an ASCII column."""
    length = len(bits)
    line_bits = byte_bits * bytes_per_line
    line_start = 0
    line_end = (length + (bytes_per_line - 1) * byte_bits) // line_bits
    if length < byte_bits:
        line_end = line_start + 1

    addr_max_width = len(format((line_end - 1) * bytes_per_line, "x"))
    parts: list[str] = []

    for line_index in range(line_start, line_end):
        parts.append(f" {line_index * bytes_per_line:0{addr_max_width}x} | ")

        for byte_index in range(bytes_per_line):
            for digit_index in range(byte_bits // digit_bits):
                first_bit = (
                    (line_index * bytes_per_line + byte_index) * byte_bits
                    + digit_index * digit_bits
                )
                if first_bit >= length:
                    parts.append(".")
                else:
                    parts.append(_digit_char(_read_bits(bits, first_bit, digit_bits)))
            parts.append(" ")
            if byte_index % 4 == 3 and byte_index < bytes_per_line - 1:
                parts.append(" ")

        parts.append("| ")

        if byte_bits == 8:
            for byte_index in range(bytes_per_line):
                first_bit = (line_index * bytes_per_line + byte_index) * byte_bits
                if first_bit >= length:
                    parts.append(".")
                    continue
                byte = _read_bits(bits, first_bit, byte_bits) & 0xFF
                c = chr(byte)
                if c in " \t\r\n":
                    parts.append(" ")
                elif byte >= 0x80 or c < " " or c == "|":
                    parts.append(".")
                else:
                    parts.append(c)
            parts.append(" |")

        parts.append("\n")

    return "".join(parts)


def format_mif(bits: BitVec) -> str:
    """Return the output as a memory initialization file."""
    byte_num = _byte_count(bits)
    addr_max_width = len(format(byte_num - 1, "x"))

    parts = [
        f"DEPTH = {byte_num};\n",
        "WIDTH = 8;\n",
        "ADDRESS_RADIX = HEX;\n",
        "DATA_RADIX = HEX;\n",
        "\n",
        "CONTENT\n",
        "BEGIN\n",
    ]
    for start in range(0, len(bits), 8):
        byte = _read_bits(bits, start, 8)
        parts.append(f" {start // 8:{addr_max_width}X}: {byte:02X};\n")
    parts.append("END;")
    return "".join(parts)


def _intelhex_record(address: int, data: list[int]) -> str:
    addr_hi = (address >> 8) & 0xFF
    addr_lo = address & 0xFF
    length = len(data) & 0xFF
    checksum = (length + addr_hi + addr_lo + sum(data)) & 0xFF
    body = "".join(f"{byte:02X}" for byte in data)
    return f":{length:02X}{addr_hi:02X}{addr_lo:02X}00{body}{(-checksum) & 0xFF:02X}\n"


def format_intelhex(bits: BitVec, address_unit: int) -> str:
    """Return the written blocks as Intel HEX records of up to 32 bytes."""
    parts: list[str] = []

    for block in bits.get_blocks():
        end = block.offset + block.size
        read_index = block.offset
        accum_index = block.offset
        accum: list[int] = []

        def flush() -> None:
            nonlocal accum, accum_index
            if accum:
                parts.append(_intelhex_record(accum_index // address_unit, accum))
            accum = []
            accum_index = read_index

        while read_index < end:
            accum.append(_read_bits(bits, read_index, 8))
            read_index += 8
            if len(accum) >= 32:
                flush()
        flush()

    parts.append(":00000001FF")
    return "".join(parts)


def format_separator(bits: BitVec, radix: int, separator: str) -> str:
    """Return the bytes in ``radix`` joined by ``separator``, 16 per line."""
    if radix not in (10, 16):
        raise ValueError("invalid radix")
    parts: list[str] = []
    length = len(bits)
    for index, byte in _bytes(bits):
        parts.append(_format_byte(byte, radix))
        if index < length:
            parts.append(separator)
            if (index // 8) % 16 == 0:
                parts.append("\n")
    return "".join(parts)


def format_c_array(bits: BitVec, radix: int) -> str:
    """Return the bytes as a C array definition."""
    if radix not in (10, 16):
        raise ValueError("invalid radix")
    byte_num = _byte_count(bits)
    addr_max_width = len(format(byte_num - 1, "x"))
    length = len(bits)

    parts = ["const unsigned char data[] = {\n", f"\t/* 0x{0:0{addr_max_width}x} */ "]
    for index, byte in _bytes(bits):
        parts.append(_format_byte(byte, radix))
        if index < length:
            parts.append(", ")
            if (index // 8) % 16 == 0:
                parts.append(f"\n\t/* 0x{index // 8:0{addr_max_width}x} */ ")
    parts.append("\n};")
    return "".join(parts)


def format_logisim(bits: BitVec, bits_per_chunk: int) -> str:
    """Return the output as a Logisim raw memory image."""
    parts = ["v2.0 raw\n"]
    width = bits_per_chunk // 4
    for start in range(0, len(bits), bits_per_chunk):
        value = _read_bits(bits, start, bits_per_chunk) & 0xFFFF
        index = start + bits_per_chunk
        parts.append(f"{value:0{width}x} ")
        if (index // 8) % 16 == 0:
            parts.append("\n")
    return "".join(parts)


class _Layout:
    """Column widths shared by the annotated formats."""

    def __init__(self, bits: BitVec, base: int, digits_per_group: int) -> None:
        self.bits_per_digit = bin(base - 1).count("1")
        self.bits_per_group = digits_per_group * self.bits_per_digit
        self.outp_width = 2
        self.outp_bit_width = 1
        self.addr_width = 4
        self.content_width = digits_per_group
        self.spans = bits.sorted_spans()

        for span in self.spans:
            if span.offset is None:
                continue
            self.outp_width = max(
                self.outp_width, len(format(span.offset // self.bits_per_group, "x"))
            )
            self.outp_bit_width = max(
                self.outp_bit_width, len(format(span.offset % self.bits_per_group, "x"))
            )
            self.addr_width = max(self.addr_width, len(format(span.addr, "x")))
            data_digits = self.digit_count(span)
            this_width = data_digits + data_digits // digits_per_group
            if 1 < this_width <= (digits_per_group + 1) * 5:
                self.content_width = max(self.content_width, this_width - 1)

    def digit_count(self, span: BitVecSpan) -> int:
        return -(-span.size // self.bits_per_digit)

    def header(self) -> str:
        return (
            f" {'outp':>{self.outp_width + self.outp_bit_width + 1}} |"
            f" {'addr':>{self.addr_width}} |"
        )

    def position(self, span: BitVecSpan) -> str:
        if span.offset is None:
            return f" {'--':>{self.outp_width}}:{'-':>{self.outp_bit_width}} | "
        return (
            f" {span.offset // self.bits_per_group:{self.outp_width}x}"
            f":{span.offset % self.bits_per_group:{self.outp_bit_width}x} | "
        )

    def digits(self, bits: BitVec, span: BitVecSpan) -> list[str]:
        count = self.digit_count(span)
        if count and span.offset is None:
            raise ValueError("span has no output offset")
        return [
            _digit_char(
                _read_bits(
                    bits, span.offset + i * self.bits_per_digit, self.bits_per_digit
                )
            )
            for i in range(count)
        ]


class _ExcerptReader:
    """Reads source excerpts, re-reading a file only when the file changes."""

    def __init__(self, fileserver: FileServer) -> None:
        self._fileserver = fileserver
        self._handle: object = _NO_FILE
        self._chars = ""

    def excerpt(self, span: BitVecSpan) -> str:
        handle = span.span.file_handle
        if handle != self._handle:
            self._handle = handle
            self._chars = self._fileserver.get_str(handle)
        location = span.span.location()
        if location is None:
            raise ValueError("span has no location")
        return CharCounter(self._chars).get_excerpt(*location)


def format_annotated(
    bits: BitVec, fileserver: FileServer, base: int, digits_per_group: int
) -> str:
    """Return each span's output digits next to the source it came from."""
    layout = _Layout(bits, base, digits_per_group)
    reader = _ExcerptReader(fileserver)
    parts = [layout.header(), f" data (base {base})\n\n"]

    for span in layout.spans:
        parts.append(layout.position(span))
        parts.append(f"{span.addr:{layout.addr_width}x} | ")

        contents = []
        for i, c in enumerate(layout.digits(bits, span)):
            if i > 0 and i % digits_per_group == 0:
                contents.append(" ")
            contents.append(c)

        excerpt = reader.excerpt(span)
        parts.append(f"{''.join(contents):<{layout.content_width}}")
        parts.append(f" ; {excerpt}\n")

    return "".join(parts)


def format_tcgame(
    bits: BitVec, fileserver: FileServer, base: int, digits_per_group: int
) -> str:
    """Return annotated output with ``#`` comments and prefixed digit groups."""
    if base not in (2, 16):
        raise ValueError("base must be 2 or 16")
    prefix = "0b" if base == 2 else "0x"
    comment = "#"

    layout = _Layout(bits, base, digits_per_group)
    reader = _ExcerptReader(fileserver)
    parts = [comment, layout.header(), f" data (base {base})\n\n"]

    for span in layout.spans:
        parts.append(f"{comment} ")
        parts.append(layout.position(span))
        parts.append(f"{span.addr:{layout.addr_width}x} \n")
        parts.append(f"{comment} {reader.excerpt(span)}\n")

        contents = []
        for i, c in enumerate(layout.digits(bits, span)):
            if i % digits_per_group == 0:
                if i > 0:
                    contents.append(" ")
                contents.append(prefix)
            contents.append(c)
        parts.append(f"{''.join(contents):<{layout.content_width}}\n")

    return "".join(parts)


def format_addrspan(bits: BitVec, fileserver: FileServer) -> str:
    """Return a table mapping output positions to source line and column ranges."""
    parts = [
        "; ",
        "physical address : bit offset | ",
        "logical address | ",
        "file : line start : column start : line end : column end\n",
    ]

    for span in bits.sorted_spans():
        if span.offset is not None:
            parts.append(f"{span.offset // 8:x}:{span.offset % 8:x} | ")
        else:
            parts.append("-:- | ")

        parts.append(f"{span.addr:x} | ")

        location = span.span.location()
        if location is not None:
            counter = CharCounter(fileserver.get_str(span.span.file_handle))
            line_start, col_start = counter.get_line_column_at_index(location[0])
            line_end, col_end = counter.get_line_column_at_index(location[1])
            filename = fileserver.get_filename(span.span.file_handle)
            parts.append(f"{filename}:{line_start}:{col_start}:{line_end}:{col_end}")
        else:
            parts.append(f"{span.span.file_handle}:-:-:-:-")

        parts.append("\n")

    return "".join(parts)