import pytest

from custasm.util.bigint import BigInt
from custasm.util.source import AsmError, Span


def test_from_bytes_be_is_signed_and_sized():
    value = BigInt.from_bytes_be(b"\x12\x34")
    assert value == 0x1234
    assert value.size == 16
    assert BigInt.from_bytes_be(b"\xff") == -1


def test_as_string_round_trip():
    assert BigInt.from_bytes_be("hi".encode()).as_string() == "hi"


@pytest.mark.parametrize("n", [1, 2, 7, 8, 255, 256, 12345])
def test_min_size_positive_matches_bit_length(n):
    assert BigInt(n).min_size() == n.bit_length()


@pytest.mark.parametrize("n", [-1, -2, -128, -129, -1000])
def test_min_size_negative_is_minimal_twos_complement(n):
    m = BigInt(n).min_size()
    assert -(1 << (m - 1)) <= n
    assert not (m > 1 and -(1 << (m - 2)) <= n)


def test_min_size_zero_is_one():
    assert BigInt(0).min_size() == 1


def test_size_or_min_size_prefers_size():
    assert BigInt(3, 16).size_or_min_size() == 16
    assert BigInt(3).size_or_min_size() == BigInt(3).min_size()


def test_sign():
    assert [BigInt(-4).sign(), BigInt(0).sign(), BigInt(9).sign()] == [-1, 0, 1]


def test_division_truncates_toward_zero():
    assert BigInt(-7).checked_div(BigInt(2)) == -3


@pytest.mark.parametrize("a,b", [(7, 2), (-7, 2), (7, -2), (-7, -2), (6, 3)])
def test_div_mod_invariant(a, b):
    q = BigInt(a).checked_div(BigInt(b)).value
    r = BigInt(a).checked_mod(BigInt(b)).value
    assert q * b + r == a
    assert abs(r) < abs(b)
    assert r == 0 or (r < 0) == (a < 0)


def test_division_by_zero_raises():
    span = Span(0, 1, 2)
    with pytest.raises(AsmError) as info:
        BigInt(1).checked_div(BigInt(0), span)
    assert info.value.message == "division by zero"
    assert info.value.span == span


def test_modulo_by_zero_raises():
    with pytest.raises(AsmError, match="modulo by zero"):
        BigInt(1).checked_mod(BigInt(0))


def test_add_sub_mul():
    assert BigInt(5).checked_add(BigInt(3)) == 8
    assert BigInt(5).checked_sub(BigInt(3)) == 2
    assert BigInt(5).checked_mul(BigInt(3)) == 15


def test_shift_round_trip():
    shifted = BigInt(0x5A).checked_shl(BigInt(12))
    assert shifted.checked_shr(BigInt(12)) == 0x5A


def test_shl_with_huge_amount_raises():
    with pytest.raises(AsmError, match="value is out of supported range"):
        BigInt(1).checked_shl(BigInt(2**40))


def test_shr_with_negative_amount_raises():
    with pytest.raises(AsmError, match="value is out of supported range"):
        BigInt(1).checked_shr(BigInt(-1))


def test_slice_extracts_bits():
    result = BigInt(0b10110110).slice(8, 4)
    assert result == 0b1011
    assert result.size == 4


def test_slice_of_negative_is_unsigned():
    result = BigInt(-1).slice(8, 0)
    assert result == 0xFF
    assert result.size == 8


def test_slice_full_sized_value_is_unchanged():
    original = BigInt(0x3C, 8)
    result = original.slice(8, 0)
    assert result == original and result.size == 8


def test_slice_invalid_range():
    with pytest.raises(ValueError):
        BigInt(1).slice(0, 3)
    with pytest.raises(AsmError, match="invalid slice range"):
        BigInt(1).checked_slice(0, 3)


def test_concat():
    result = BigInt(0xAB, 8).concat((8, 0), BigInt(0xCD, 8), (8, 0))
    assert result == 0xABCD
    assert result.size == 16


def test_convert_le_swaps_bytes():
    assert BigInt(0x1234, 16).convert_le() == 0x3412


@pytest.mark.parametrize("value,size", [(0x1234, 16), (0x01, 24), (-2, 32), (0, 8)])
def test_convert_le_is_an_involution(value, size):
    once = BigInt(value, size).convert_le()
    assert once.size == size
    assert once.convert_le() == BigInt(value, size).slice(size, 0)


def test_convert_le_requires_size():
    with pytest.raises(ValueError):
        BigInt(5).convert_le()


@pytest.mark.parametrize("n", [0, 5, -6, 255, -256])
def test_invert_is_bitwise_not(n):
    assert ~BigInt(n) == ~n
    assert ~~BigInt(n) == n


def test_bit_operators_and_negation():
    assert (BigInt(0b1100) & BigInt(0b1010)) == (0b1100 & 0b1010)
    assert (BigInt(0b1100) | BigInt(0b1010)) == (0b1100 | 0b1010)
    assert (BigInt(0b1100) ^ BigInt(0b1010)) == (0b1100 ^ 0b1010)
    assert -BigInt(4) == -4


def test_equality_ignores_size():
    assert BigInt(7, 8) == BigInt(7, 16)
    assert hash(BigInt(7, 8)) == hash(BigInt(7))


def test_ordering():
    assert BigInt(1) < BigInt(2)
    assert BigInt(3) >= BigInt(3, 4)


def test_set_and_get_bit():
    value = BigInt(0)
    value.set_bit(5, True)
    assert value.get_bit(5)
    value.set_bit(5, False)
    assert value == 0


def test_repr_shows_size():
    assert repr(BigInt(0xFF, 8)) == "0xff`8"
    assert repr(BigInt(16)) == "0x10"


def test_format_hex():
    assert f"{BigInt(255):x}" == "ff"


def test_usize_conversions():
    assert BigInt(-1).to_usize() is None
    assert BigInt(10).checked_usize() == 10
    with pytest.raises(AsmError):
        BigInt(-1).checked_usize()
    with pytest.raises(AsmError):
        BigInt(0).checked_nonzero_usize()