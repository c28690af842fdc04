"""Unsigned 128-bit integer with wrap-around arithmetic."""

from __future__ import annotations

from typing import Union

_BITS = 128
_MASK = (1 << _BITS) - 1
_MASK64 = (1 << 64) - 1
_DIGITS = "0123456789abcdef"
_HEX_CHARS = frozenset("0123456789abcdefABCDEF")

IntLike = Union[int, "UInt128"]


def _read_hex_half(field: str) -> int:
    """Read up to 16 hex digits, stopping at the first non-hex character."""
    value = 0
    for char in field[:16]:
        if char not in _HEX_CHARS:
            break
        value = (value << 4) | int(char, 16)
    return value


class UInt128:
    """An immutable unsigned 128-bit integer.

    All arithmetic wraps modulo 2**128. Operands may be ``UInt128`` values
    or plain ``int``; plain integers are reduced modulo 2**128 first.
    """

    __slots__ = ("_value",)

    def __init__(self, value: IntLike = 0) -> None:
        self._value = int(value) & _MASK

    @classmethod
    def from_hex(cls, text: str | None) -> "UInt128":
        """Parse a 32-digit hex field, optionally prefixed by ``0x`` or ``x``.

        The first 16 digits form the upper half and the next 16 the lower
        half; each half stops at its first non-hex character. An empty or
        missing string gives zero.
        """
        if not text:
            return cls(0)
        if len(text) > 1 and text[1] == "x":
            text = text[2:]
        elif text[0] == "x":
            text = text[1:]
        upper = _read_hex_half(text[:16])
        lower = _read_hex_half(text[16:32])
        return cls((upper << 64) | lower)

    @property
    def upper(self) -> int:
        """The most significant 64 bits."""
        return self._value >> 64

    @property
    def lower(self) -> int:
        """The least significant 64 bits."""
        return self._value & _MASK64

    def bits(self) -> int:
        """Number of significant bits (0 for zero)."""
        return self._value.bit_length()

    def divmod(self, other: IntLike) -> tuple["UInt128", "UInt128"]:
        """Return quotient and remainder; raises ZeroDivisionError on zero."""
        divisor = _coerce(other)
        if divisor == 0:
            raise ZeroDivisionError("division or modulus by 0")
        quotient, remainder = divmod(self._value, divisor)
        return UInt128(quotient), UInt128(remainder)

    def to_string(self, base: int = 10, length: int = 0) -> str:
        """Render in ``base`` (2 to 16), left-padded with zeros to ``length``."""
        if not 2 <= base <= 16:
            raise ValueError("base must be in the range [2, 16]")
        value = self._value
        digits = []
        while True:
            value, digit = divmod(value, base)
            digits.append(_DIGITS[digit])
            if not value:
                break
        return "".join(reversed(digits)).rjust(length, "0")

    def export_bits(self) -> bytes:
        """The value as 16 big-endian bytes."""
        return self._value.to_bytes(16, "big")

    # conversions

    def __int__(self) -> int:
        return self._value

    def __index__(self) -> int:
        return self._value

    def __bool__(self) -> bool:
        return self._value != 0

    def __hash__(self) -> int:
        return hash(self._value)

    def __repr__(self) -> str:
        return f"UInt128({self._value:#x})"

    def __str__(self) -> str:
        return self.to_string(10)

    # comparison

    def __eq__(self, other: object) -> bool:
        if isinstance(other, (int, UInt128)):
            return self._value == _coerce(other)
        return NotImplemented

    def __lt__(self, other: IntLike) -> bool:
        return self._value < _coerce(other)

    def __le__(self, other: IntLike) -> bool:
        return self._value <= _coerce(other)

    def __gt__(self, other: IntLike) -> bool:
        return self._value > _coerce(other)

    def __ge__(self, other: IntLike) -> bool:
        return self._value >= _coerce(other)

    # bitwise

    def __and__(self, other: IntLike) -> "UInt128":
        return UInt128(self._value & _coerce(other))

    __rand__ = __and__

    def __or__(self, other: IntLike) -> "UInt128":
        return UInt128(self._value | _coerce(other))

    __ror__ = __or__

    def __xor__(self, other: IntLike) -> "UInt128":
        return UInt128(self._value ^ _coerce(other))

    __rxor__ = __xor__

    def __invert__(self) -> "UInt128":
        return UInt128(~self._value)

    def __lshift__(self, other: IntLike) -> "UInt128":
        shift = _coerce(other)
        if shift >= _BITS:
            return UInt128(0)
        return UInt128(self._value << shift)

    def __rlshift__(self, other: int) -> "UInt128":
        return UInt128(other) << self

    def __rshift__(self, other: IntLike) -> "UInt128":
        shift = _coerce(other)
        if shift >= _BITS:
            return UInt128(0)
        return UInt128(self._value >> shift)

    def __rrshift__(self, other: int) -> "UInt128":
        return UInt128(other) >> self

    # arithmetic

    def __add__(self, other: IntLike) -> "UInt128":
        return UInt128(self._value + _coerce(other))

    __radd__ = __add__

    def __sub__(self, other: IntLike) -> "UInt128":
        return UInt128(self._value - _coerce(other))

    def __rsub__(self, other: int) -> "UInt128":
        return UInt128(_coerce(other) - self._value)

    def __mul__(self, other: IntLike) -> "UInt128":
        return UInt128(self._value * _coerce(other))

    __rmul__ = __mul__

    def __floordiv__(self, other: IntLike) -> "UInt128":
        return self.divmod(other)[0]

    def __rfloordiv__(self, other: int) -> "UInt128":
        return UInt128(other).divmod(self)[0]

    def __mod__(self, other: IntLike) -> "UInt128":
        return self.divmod(other)[1]

    def __rmod__(self, other: int) -> "UInt128":
        return UInt128(other).divmod(self)[1]

    def __divmod__(self, other: IntLike) -> tuple["UInt128", "UInt128"]:
        return self.divmod(other)

    def __rdivmod__(self, other: int) -> tuple["UInt128", "UInt128"]:
        return UInt128(other).divmod(self)

    def __pos__(self) -> "UInt128":
        return self

    def __neg__(self) -> "UInt128":
        return UInt128(-self._value)


def _coerce(value: IntLike) -> int:
    if isinstance(value, UInt128):
        return value._value
    if isinstance(value, int):
        return value & _MASK
    raise TypeError(f"unsupported operand type: {type(value).__name__}")