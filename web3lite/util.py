"""Hex, RLP, ABI-result and unit-conversion helpers for Ethereum JSON-RPC work."""

from __future__ import annotations

import json
import logging
from typing import Union

from web3lite.uint256 import UInt256

BytesLike = Union[bytes, bytearray, memoryview]

_log = logging.getLogger(__name__)

_WORD_CHARS = 64
_SHORT_LIMIT = 55
_HEX_VALUES = {c: int(c, 16) for c in "0123456789abcdefABCDEF"}


def _length_bytes(length: int) -> bytes:
    return length.to_bytes(max(1, (length.bit_length() + 7) // 8), "big")


def rlp_encode_whole_header(total_len: int) -> bytes:
    """RLP list header for a payload of ``total_len`` bytes."""
    if total_len < 0:
        raise ValueError("length must not be negative")
    if total_len < _SHORT_LIMIT:
        return bytes([0xC0 + total_len])
    encoded = _length_bytes(total_len)
    return bytes([0xF7 + len(encoded)]) + encoded


def rlp_encode_item(data: BytesLike) -> bytes:
    """RLP encoding of a single byte string."""
    data = bytes(data)
    if len(data) == 1 and data[0] == 0x00:
        return b"\x80"
    if len(data) == 1 and data[0] < 0x80:
        return data
    if len(data) <= _SHORT_LIMIT:
        return bytes([0x80 + len(data)]) + data
    encoded = _length_bytes(len(data))
    return bytes([0xB7 + len(encoded)]) + encoded + data


def number_to_bytes(value: int) -> bytes:
    """Minimal big-endian bytes of a non-negative integer; zero is one zero byte."""
    if value < 0:
        raise ValueError("value must not be negative")
    return _length_bytes(value)


def _parse_hex_prefix(text: str) -> int:
    """Value of the longest leading run of hex digits, 0 if there is none."""
    value = 0
    for char in text:
        digit = _HEX_VALUES.get(char)
        if digit is None:
            break
        value = (value << 4) | digit
    return value


def _strip_0x(text: str) -> str:
    return text[2:] if text.startswith("0x") else text


def hex_to_bytes(text: str) -> bytes:
    """Decode a hex string, ``0x`` optional; an odd-length string gets a leading nibble."""
    text = _strip_0x(text)
    out = bytearray()
    start = 0
    if len(text) % 2 == 1:
        out.append(_parse_hex_prefix(text[0]))
        start = 1
    out.extend(_parse_hex_prefix(text[i:i + 2]) for i in range(start, len(text), 2))
    return bytes(out)


def hex_digit_value(char: str) -> int:
    """Value of one hex digit; any other character counts as 0."""
    return _HEX_VALUES.get(char, 0)


def bytes_to_hex(data: BytesLike) -> str:
    """``0x``-prefixed upper-case hex of ``data``."""
    return "0x" + plain_bytes_to_hex(data)


def plain_bytes_to_hex(data: BytesLike) -> str:
    """Upper-case hex of ``data`` without a prefix."""
    return bytes(data).hex().upper()


def int32_to_hex(value: int) -> str:
    """Eight upper-case hex digits of a 32-bit two's-complement integer."""
    return f"{value & 0xFFFFFFFF:08X}"


def hex_to_fixed_bytes(text: str, length: int) -> bytes:
    """Decode exactly ``length`` bytes from a hex string, ``0x`` optional."""
    text = _strip_0x(text)
    if len(text) < 2 * length:
        raise ValueError(f"hex string too short for {length} bytes")
    return bytes(
        hex_digit_value(text[2 * i]) << 4 | hex_digit_value(text[2 * i + 1])
        for i in range(length)
    )


def _alnum_value(char: str) -> int:
    if "0" <= char <= "9":
        return ord(char) - ord("0")
    if "A" <= char <= "Z":
        return 10 + ord(char) - ord("A")
    if "a" <= char <= "z":
        return 10 + ord(char) - ord("a")
    raise ValueError(f"invalid digit: {char!r}")


def convert_base(from_base: int, to_base: int, digits: str | None) -> str:
    """Re-express ``digits`` from one base (2 to 36) in another.

    Output letters are upper case and leading zeros are dropped, so a value
    of zero gives an empty string.
    """
    if digits is None:
        return ""
    if not (2 <= from_base <= 36 and 2 <= to_base <= 36):
        raise ValueError("bases must be in the range [2, 36]")
    digits = _strip_0x(digits)
    value = 0
    for char in digits:
        digit = _alnum_value(char)
        if digit >= from_base:
            raise ValueError(f"digit {char!r} out of range for base {from_base}")
        value = value * from_base + digit
    out = []
    while value:
        value, digit = divmod(value, to_base)
        out.append(chr(ord("0") + digit) if digit < 10 else chr(ord("A") + digit - 10))
    return "".join(reversed(out))


def convert_decimal(decimals: int, digits: str) -> str:
    """Place a decimal point ``decimals`` digits from the right of ``digits``."""
    location = len(digits) - decimals
    if location <= 0:
        return "0." + "0" * (-location) + digits
    return digits[:location] + "." + digits[location:]


def hex_to_ascii(text: str) -> str:
    """Decode hex text to a string, skipping leading ``0``/``x`` and stopping at a zero byte."""
    index = 0
    while index < len(text) and text[index] in "0x":
        index += 1
    out = bytearray()
    high: int | None = None
    for char in text[index:]:
        if high is None:
            high = hex_digit_value(char) * 16
            continue
        byte = (high + hex_digit_value(char)) & 0xFF
        if byte == 0:
            break
        out.append(byte)
        high = None
    return out.decode("utf-8", errors="replace")


def split_words(text: str) -> list[str]:
    """Split hex text (``0x`` optional) into its whole 64-digit words."""
    if len(text) < _WORD_CHARS:
        return []
    text = _strip_0x(text)
    whole = len(text) - len(text) % _WORD_CHARS
    return [text[i:i + _WORD_CHARS] for i in range(0, whole, _WORD_CHARS)]


def json_result(response: str) -> str:
    """The ``result`` member of a JSON-RPC response as text, or ``""``."""
    start = response.find("{")
    end = response.rfind("}")
    if start < 0 or end < start:
        return ""
    try:
        document = json.loads(response[start:end + 1])
    except ValueError:
        return ""
    if not isinstance(document, dict):
        return ""
    result = document.get("result")
    if result is None:
        return ""
    if isinstance(result, str):
        return result
    return json.dumps(result)


def result_to_array(response: str) -> list[str]:
    """The ``result`` of a JSON-RPC response split into 64-digit ABI words."""
    return hex_to_abi_array(json_result(response))


def hex_to_abi_array(text: str) -> list[str]:
    """Split hex text into 64-digit chunks after an optional ``x`` or ``0x``."""
    if not text:
        raise ValueError("empty hex string")
    if text[0] == "x":
        start = 1
    elif len(text) > 1 and text[1] == "x":
        start = 2
    else:
        start = 0
    return [text[i:i + _WORD_CHARS] for i in range(start, len(text), _WORD_CHARS)]


def interpret_string_result(text: str | None) -> str:
    """Decode an ABI-encoded dynamic string from hex text, ``""`` if it is not one."""
    if not text:
        return ""
    words = split_words(text)
    if len(words) <= 2 or int(words[0], 16) != 32:
        return ""
    length = int(words[1], 16)
    body = _strip_0x(text)[2 * _WORD_CHARS:]
    return hex_to_ascii(body[:length * 2])


def interpret_vector_result(response: str) -> list[str]:
    """The words of an ABI-encoded dynamic array held in a JSON-RPC response."""
    value = json_result(response)
    if not value:
        return []
    words = split_words(value)
    if len(words) <= 2 or int(words[0], 16) != 32:
        return []
    length = int(words[1], 16)
    if len(words) != length + 2:
        _log.warning("bad array result data: %s", words)
    return words[2:]


def pad_forward(text: str, size: int) -> str:
    """Prefix ``text`` with ``2 * size - len(text) % size`` zeros."""
    return "0" * (size * 2 - len(text) % size) + text


def to_wei(value: float, decimals: int) -> UInt256:
    """Scale ``value`` by ``10**decimals`` and truncate; negatives count as zero."""
    if value < 0:
        value = 0
    scaled = f"{value * pow(10.0, decimals):f}"
    whole = scaled.split(".", 1)[0]
    return UInt256.from_hex(convert_base(10, 16, whole))


def wei_to_eth_string(wei: Union[int, UInt256], decimals: int) -> str:
    """Decimal text of ``wei`` with the point placed ``decimals`` digits from the right."""
    raw = UInt256(wei).export_bits_truncate()
    amount = convert_base(16, 10, bytes_to_hex(raw)).rjust(_WORD_CHARS, "0")
    if not 0 <= decimals < len(amount):
        raise ValueError(f"decimals out of range: {decimals}")
    point = len(amount) - decimals
    amount = amount[:point] + "." + amount[point:]
    for i, char in enumerate(amount):
        if char == ".":
            return amount[i - 1:]
        if char != "0":
            return amount[i:]
    return amount


def eth_to_wei(eth: float) -> str:
    """Upper-case hex of the wei amount for ``eth`` ether (empty for zero)."""
    if eth < 0:
        eth = 0
    text = f"{eth * pow(10.0, 18):.32g}"
    whole = text.rsplit(".", 1)[0] if "." in text else text
    return convert_base(10, 16, whole)


def int_to_hex(value: int) -> str:
    """Lower-case hex of a 32-bit integer, negatives as two's complement."""
    return f"{value & 0xFFFFFFFF:x}"