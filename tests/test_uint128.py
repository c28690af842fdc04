import pytest

from web3lite.uint128 import UInt128

MAX = (1 << 128) - 1


def test_wraps_on_construction_and_subtraction():
    assert int(UInt128(-1)) == MAX
    assert UInt128(0) - 1 == UInt128(MAX)


def test_addition_overflow_wraps_to_zero():
    assert UInt128(MAX) + 1 == 0


@pytest.mark.parametrize(
    "a,b",
    [(0, 0), (1, MAX), (1 << 64, (1 << 64) - 1), (0xDEADBEEF, 0xCAFEBABE12345678)],
)
def test_arithmetic_matches_modular_int(a, b):
    x, y = UInt128(a), UInt128(b)
    assert int(x + y) == (a + b) % (1 << 128)
    assert int(x - y) == (a - b) % (1 << 128)
    assert int(x * y) == (a * b) % (1 << 128)
    assert int(x & y) == a & b
    assert int(x | y) == a | b
    assert int(x ^ y) == a ^ b


def test_invert_and_negate():
    x = UInt128(12345)
    assert ~x + x == UInt128(MAX)
    assert -x + x == 0


def test_shifts_at_boundaries():
    one = UInt128(1)
    assert one << 127 == 1 << 127
    assert one << 128 == 0
    assert UInt128(MAX) >> 128 == 0
    assert UInt128(MAX) >> 64 == (1 << 64) - 1
    assert (UInt128(1 << 100) >> 36) << 36 == 1 << 100


def test_divmod_invariant():
    a = UInt128(0x123456789ABCDEF0123456789ABCDEF)
    b = UInt128(0xFEDCBA987)
    q, r = a.divmod(b)
    assert q * b + r == a
    assert r < b
    assert divmod(a, b) == (q, r)
    assert a // b == q
    assert a % b == r


def test_divmod_special_cases():
    a = UInt128(999)
    assert a.divmod(1) == (a, UInt128(0))
    assert a.divmod(999) == (UInt128(1), UInt128(0))
    assert a.divmod(1000) == (UInt128(0), a)


def test_division_by_zero_raises():
    with pytest.raises(ZeroDivisionError):
        UInt128(5).divmod(0)
    with pytest.raises(ZeroDivisionError):
        UInt128(5) % 0


def test_bits():
    assert UInt128(0).bits() == 0
    assert UInt128(1).bits() == 1
    assert UInt128(1 << 64).bits() == 65
    assert UInt128(MAX).bits() == 128


def test_to_string_round_trips_in_every_base():
    value = UInt128(0xFEDCBA9876543210FEDCBA9876543210)
    for base in range(2, 17):
        assert int(value.to_string(base), base) == int(value)


def test_to_string_zero_and_padding():
    assert UInt128(0).to_string(10) == "0"
    padded = UInt128(255).to_string(16, 8)
    assert len(padded) == 8
    assert padded.lstrip("0") == UInt128(255).to_string(16)
    assert str(UInt128(42)) == "42"


@pytest.mark.parametrize("base", [0, 1, 17, 36])
def test_to_string_rejects_bad_base(base):
    with pytest.raises(ValueError):
        UInt128(1).to_string(base)


def test_export_bits_is_big_endian():
    assert UInt128(1).export_bits() == bytes(15) + b"\x01"
    value = UInt128(0x0102030405060708090A0B0C0D0E0F10)
    assert int.from_bytes(value.export_bits(), "big") == int(value)
    assert len(UInt128(MAX).export_bits()) == 16


def test_from_hex_full_width_round_trip():
    value = UInt128(0x0123456789ABCDEF0011223344556677)
    text = value.to_string(16, 32)
    assert UInt128.from_hex(text) == value
    assert UInt128.from_hex("0x" + text) == value
    assert UInt128.from_hex("x" + text.upper()) == value


def test_from_hex_halves():
    value = UInt128.from_hex("ffffffffffffffff0000000000000001")
    assert value.upper == (1 << 64) - 1
    assert value.lower == 1


def test_from_hex_reads_left_aligned_field():
    value = UInt128.from_hex("12")
    assert value.upper == 0x12
    assert value.lower == 0


def test_from_hex_empty_is_zero():
    assert UInt128.from_hex("") == 0
    assert UInt128.from_hex(None) == 0


def test_comparisons_and_hash():
    a, b = UInt128(3), UInt128(7)
    assert a < b and b > a and a <= 3 and b >= 7
    assert a == 3
    assert hash(UInt128(3)) == hash(3)
    assert not UInt128(0)
    assert UInt128(1)


def test_reflected_operators():
    assert 10 - UInt128(3) == 7
    assert 2 * UInt128(5) == 10
    assert 1 << UInt128(4) == 16


def test_rejects_non_integer_operand():
    with pytest.raises(TypeError):
        UInt128(1) + 1.5