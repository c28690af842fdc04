import json

import pytest

from web3lite.uint256 import UInt256
from web3lite.util import (
    bytes_to_hex,
    convert_base,
    convert_decimal,
    eth_to_wei,
    hex_digit_value,
    hex_to_abi_array,
    hex_to_ascii,
    hex_to_bytes,
    hex_to_fixed_bytes,
    int32_to_hex,
    int_to_hex,
    interpret_string_result,
    interpret_vector_result,
    json_result,
    number_to_bytes,
    pad_forward,
    plain_bytes_to_hex,
    result_to_array,
    rlp_encode_item,
    rlp_encode_whole_header,
    split_words,
    to_wei,
    wei_to_eth_string,
)


def _abi_string(text: str) -> str:
    body = text.encode().hex()
    padded = body.ljust(((len(body) + 63) // 64) * 64 or 64, "0")
    return "0x" + format(32, "064x") + format(len(text), "064x") + padded


def _response(result) -> str:
    return json.dumps({"jsonrpc": "2.0", "id": 0, "result": result})


def test_rlp_item_single_small_byte_is_itself():
    assert rlp_encode_item(b"\x7f") == b"\x7f"


def test_rlp_item_zero_byte_and_empty():
    assert rlp_encode_item(b"\x00") == b"\x80"
    assert rlp_encode_item(b"") == b"\x80"


def test_rlp_item_short_string():
    data = b"dog"
    encoded = rlp_encode_item(data)
    assert encoded[0] == 0x80 + len(data)
    assert encoded[1:] == data


def test_rlp_item_long_strings():
    data = bytes(range(100))
    encoded = rlp_encode_item(data)
    assert encoded[0] == 0xB7 + 1
    assert encoded[1] == len(data)
    assert encoded[2:] == data

    big = bytes(300)
    encoded = rlp_encode_item(big)
    assert encoded[0] == 0xB7 + 2
    assert int.from_bytes(encoded[1:3], "big") == len(big)
    assert encoded[3:] == big


def test_rlp_whole_header():
    assert rlp_encode_whole_header(10) == bytes([0xC0 + 10])
    header = rlp_encode_whole_header(55)
    assert header[0] == 0xF7 + 1 and header[1] == 55
    header = rlp_encode_whole_header(1000)
    assert header[0] == 0xF7 + 2
    assert int.from_bytes(header[1:], "big") == 1000


def test_rlp_whole_header_negative():
    with pytest.raises(ValueError):
        rlp_encode_whole_header(-1)


@pytest.mark.parametrize("value", [1, 255, 256, 65535, 2**40 + 7, 2**64 - 1])
def test_number_to_bytes_round_trip(value):
    encoded = number_to_bytes(value)
    assert int.from_bytes(encoded, "big") == value
    assert encoded[0] != 0


def test_number_to_bytes_zero_and_negative():
    assert number_to_bytes(0) == b"\x00"
    with pytest.raises(ValueError):
        number_to_bytes(-5)


def test_hex_to_bytes_round_trip():
    data = bytes(range(0, 256, 7))
    assert hex_to_bytes("0x" + data.hex()) == data
    assert hex_to_bytes(data.hex().upper()) == data
    assert hex_to_bytes(bytes_to_hex(data)) == data


def test_hex_to_bytes_odd_length():
    assert hex_to_bytes("0xabc") == bytes.fromhex("0abc")


def test_hex_digit_value():
    assert [hex_digit_value(c) for c in "0aF9"] == [0, 10, 15, 9]
    assert hex_digit_value("z") == 0


def test_bytes_to_hex_forms():
    data = b"\x01\xab\xff"
    assert bytes_to_hex(data) == "0x" + data.hex().upper()
    assert plain_bytes_to_hex(data) == data.hex().upper()


def test_int32_to_hex():
    assert int32_to_hex(-1) == "FFFFFFFF"
    result = int32_to_hex(123456)
    assert len(result) == 8
    assert int(result, 16) == 123456


def test_hex_to_fixed_bytes():
    data = bytes(range(20))
    assert hex_to_fixed_bytes("0x" + data.hex(), 20) == data
    assert hex_to_fixed_bytes(data.hex(), 4) == data[:4]
    with pytest.raises(ValueError):
        hex_to_fixed_bytes("0xabcd", 3)


@pytest.mark.parametrize("value", [1, 15, 16, 255, 10**18, 2**200 + 3])
def test_convert_base_matches_python(value):
    hex_text = convert_base(10, 16, str(value))
    assert hex_text == format(value, "X")
    assert convert_base(16, 10, "0x" + hex_text) == str(value)
    assert convert_base(10, 2, str(value)) == format(value, "b")


def test_convert_base_zero_is_empty():
    assert convert_base(10, 16, "0") == ""
    assert convert_base(10, 16, None) == ""


def test_convert_base_errors():
    with pytest.raises(ValueError):
        convert_base(1, 10, "1")
    with pytest.raises(ValueError):
        convert_base(10, 37, "1")
    with pytest.raises(ValueError):
        convert_base(10, 16, "12A")
    with pytest.raises(ValueError):
        convert_base(16, 10, "12-")


def test_convert_decimal():
    assert convert_decimal(2, "12345") == "123.45"
    assert convert_decimal(5, "12345") == "0.12345"
    result = convert_decimal(7, "12345")
    assert result.startswith("0.") and result.endswith("12345")
    assert float(result) == 12345 / 10**7


def test_hex_to_ascii():
    assert hex_to_ascii("0x" + b"Hello".hex()) == "Hello"
    assert hex_to_ascii(b"Hi".hex() + "00" + b"X".hex()) == "Hi"


def test_split_words():
    text = "0x" + "a" * 64 + "b" * 64
    assert split_words(text) == ["a" * 64, "b" * 64]
    assert split_words("0x1234") == []


def test_json_result():
    assert json_result(_response("0x1f")) == "0x1f"
    assert json_result(json.dumps({"id": 0})) == ""
    assert json_result("not json") == ""
    assert json.loads(json_result(_response(True))) is True


def test_hex_to_abi_array():
    words = ["1" * 64, "2" * 64]
    assert hex_to_abi_array("0x" + "".join(words)) == words
    assert hex_to_abi_array("x" + "".join(words)) == words
    assert hex_to_abi_array("".join(words) + "ab") == words + ["ab"]
    with pytest.raises(ValueError):
        hex_to_abi_array("")


def test_result_to_array():
    words = ["3" * 64, "4" * 64, "5" * 64]
    assert result_to_array(_response("0x" + "".join(words))) == words


@pytest.mark.parametrize("text", ["Hi", "Token Name", "x" * 40])
def test_interpret_string_result(text):
    assert interpret_string_result(_abi_string(text)) == text


def test_interpret_string_result_not_a_string():
    assert interpret_string_result("") == ""
    assert interpret_string_result("0x" + format(64, "064x") * 3) == ""


def test_interpret_vector_result():
    items = [format(7, "064x"), format(9, "064x")]
    payload = "0x" + format(32, "064x") + format(len(items), "064x") + "".join(items)
    assert interpret_vector_result(_response(payload)) == items
    assert interpret_vector_result(_response("0x")) == []


def test_pad_forward():
    result = pad_forward("abc", 32)
    assert result.endswith("abc")
    assert set(result[:-3]) == {"0"}
    assert len(result) == 64


def test_to_wei():
    assert int(to_wei(2, 3)) == 2000
    assert int(to_wei(1.5, 18)) == 15 * 10**17
    assert to_wei(-4, 18) == 0
    assert to_wei(0, 18) == 0


def test_wei_to_eth_string_round_trip():
    assert wei_to_eth_string(to_wei(1.5, 18), 18) == "1.5" + "0" * 17
    zero = wei_to_eth_string(UInt256(0), 18)
    assert zero == "0." + "0" * 18
    assert float(wei_to_eth_string(123456, 3)) == 123.456


def test_wei_to_eth_string_bad_decimals():
    with pytest.raises(ValueError):
        wei_to_eth_string(1, 64)


def test_eth_to_wei():
    assert int(eth_to_wei(2.0), 16) == 2 * 10**18
    assert eth_to_wei(1.0) == format(10**18, "X")
    assert eth_to_wei(-1.0) == ""


def test_int_to_hex():
    assert int_to_hex(255) == format(255, "x")
    assert int_to_hex(-1) == "f" * 8
    assert int(int_to_hex(4096), 16) == 4096