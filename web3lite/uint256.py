"""Unsigned 256-bit integer with wrap-around arithmetic."""

from __future__ import annotations

from typing import Union

from web3lite.uint128 import UInt128

_BITS = 256
_MASK = (1 << _BITS) - 1
_MASK128 = (1 << 128) - 1
_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"
_HEX_WIDTH = 64

IntLike = Union[int, UInt128, "UInt256"]


class UInt256:
    """An immutable unsigned 256-bit integer.

    All arithmetic wraps modulo 2**256. Operands may be ``UInt256``,
    ``UInt128`` or plain ``int``; plain integers are reduced modulo 2**256.
    """

    __slots__ = ("_value",)

    def __init__(self, value: IntLike = 0) -> None:
        self._value = int(value) & _MASK

    @classmethod
    def from_hex(cls, text: str | None) -> "UInt256":
        """Parse up to 64 hex digits, optionally prefixed by ``0x`` or ``x``.

        Shorter strings are left-padded with zeros. Each 16-digit quarter of
        the padded field stops at its first non-hex character. A missing or
        empty string gives zero.
        """
        if not text:
            return cls(0)
        if len(text) > 1 and text[1] == "x":
            text = text[2:]
        elif text[0] == "x":
            text = text[1:]
        if len(text) > _HEX_WIDTH:
            raise ValueError(f"hex value longer than {_HEX_WIDTH} digits")
        field = text.rjust(_HEX_WIDTH, "0")
        upper = UInt128.from_hex(field[:32])
        lower = UInt128.from_hex(field[32:])
        return cls.from_halves(upper, lower)

    @classmethod
    def from_halves(cls, upper: IntLike, lower: IntLike) -> "UInt256":
        """Build a value from its upper and lower 128-bit halves."""
        return cls(((int(upper) & _MASK128) << 128) | (int(lower) & _MASK128))

    @property
    def upper(self) -> UInt128:
        """The most significant 128 bits."""
        return UInt128(self._value >> 128)

    @property
    def lower(self) -> UInt128:
        """The least significant 128 bits."""
        return UInt128(self._value & _MASK128)

    def bits(self) -> int:
        """Number of significant bits (0 for zero)."""
        return self._value.bit_length()

    def divmod(self, other: IntLike) -> tuple["UInt256", "UInt256"]:
        """Return quotient and remainder; raises ZeroDivisionError on zero."""
        divisor = _coerce(other)
        if divisor == 0:
            raise ZeroDivisionError("division or modulus by 0")
        quotient, remainder = divmod(self._value, divisor)
        return UInt256(quotient), UInt256(remainder)

    def to_string(self, base: int = 10, length: int = 0) -> str:
        """Render in ``base`` (2 to 36), left-padded with zeros to ``length``."""
        if not 2 <= base <= 36:
            raise ValueError("base must be in the range [2, 36]")
        value = self._value
        digits = []
        while True:
            value, digit = divmod(value, base)
            digits.append(_DIGITS[digit])
            if not value:
                break
        return "".join(reversed(digits)).rjust(length, "0")

    def export_bits(self) -> bytes:
        """The value as 32 big-endian bytes."""
        return self._value.to_bytes(32, "big")

    def export_bits_truncate(self) -> bytes:
        """The big-endian bytes of the value with leading zero bytes removed."""
        return self.export_bits().lstrip(b"\x00")

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
        return f"UInt256({self._value:#x})"

    def __str__(self) -> str:
        return self.to_string(10)

    # comparison

    def __eq__(self, other: object) -> bool:
        if isinstance(other, (int, UInt128, UInt256)):
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

    def __and__(self, other: IntLike) -> "UInt256":
        return UInt256(self._value & _coerce(other))

    __rand__ = __and__

    def __or__(self, other: IntLike) -> "UInt256":
        return UInt256(self._value | _coerce(other))

    __ror__ = __or__

    def __xor__(self, other: IntLike) -> "UInt256":
        return UInt256(self._value ^ _coerce(other))

    __rxor__ = __xor__

    def __invert__(self) -> "UInt256":
        return UInt256(~self._value)

    def __lshift__(self, other: IntLike) -> "UInt256":
        shift = _coerce(other)
        if shift >= _BITS:
            return UInt256(0)
        return UInt256(self._value << shift)

    def __rlshift__(self, other: int) -> "UInt256":
        return UInt256(other) << self

    def __rshift__(self, other: IntLike) -> "UInt256":
        shift = _coerce(other)
        if shift >= _BITS:
            return UInt256(0)
        return UInt256(self._value >> shift)

    def __rrshift__(self, other: int) -> "UInt256":
        return UInt256(other) >> self

    # arithmetic

    def __add__(self, other: IntLike) -> "UInt256":
        return UInt256(self._value + _coerce(other))

    __radd__ = __add__

    def __sub__(self, other: IntLike) -> "UInt256":
        return UInt256(self._value - _coerce(other))

    def __rsub__(self, other: IntLike) -> "UInt256":
        return UInt256(_coerce(other) - self._value)

    def __mul__(self, other: IntLike) -> "UInt256":
        return UInt256(self._value * _coerce(other))

    __rmul__ = __mul__

    def __floordiv__(self, other: IntLike) -> "UInt256":
        return self.divmod(other)[0]

    def __rfloordiv__(self, other: IntLike) -> "UInt256":
        return UInt256(other).divmod(self)[0]

    def __mod__(self, other: IntLike) -> "UInt256":
        return self.divmod(other)[1]

    def __rmod__(self, other: IntLike) -> "UInt256":
        return UInt256(other).divmod(self)[1]

    def __divmod__(self, other: IntLike) -> tuple["UInt256", "UInt256"]:
        return self.divmod(other)

    def __rdivmod__(self, other: IntLike) -> tuple["UInt256", "UInt256"]:
        return UInt256(other).divmod(self)

    def __pos__(self) -> "UInt256":
        return self

    def __neg__(self) -> "UInt256":
        return UInt256(-self._value)


def _coerce(value: IntLike) -> int:
    if isinstance(value, UInt256):
        return value._value
    if isinstance(value, UInt128):
        return int(value)
    if isinstance(value, int):
        return value & _MASK
    raise TypeError(f"unsupported operand type: {type(value).__name__}")