"""A small Ethereum JSON-RPC client and helpers for reading its responses."""

from __future__ import annotations

import json
import re
import urllib.error
import urllib.request
from typing import Any, Callable, Optional

from web3lite.uint256 import UInt256
from web3lite.util import hex_to_abi_array, hex_to_ascii, json_result

Transport = Callable[[str, str], str]

_WORD_BYTES = 32
_HEX_INT = re.compile(r"\s*([+-]?)(?:0[xX])?([0-9a-fA-F]*)")
_HEX_FLOAT = re.compile(r"\s*[+-]?0[xX][0-9a-fA-F]*(?:\.[0-9a-fA-F]*)?(?:[pP][+-]?\d+)?")
_DEC_FLOAT = re.compile(r"\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def _http_post(url: str, body: str) -> str:
    """POST ``body`` as JSON to ``url`` and return the response text."""
    request = urllib.request.Request(
        url,
        data=body.encode("utf-8"),
        headers={"Content-Type": "application/json"},
        method="POST",
    )
    try:
        with urllib.request.urlopen(request) as response:
            return response.read().decode("utf-8", errors="replace")
    except (urllib.error.URLError, OSError) as exc:
        raise ConnectionError(f"unable to reach {url}: {exc}") from exc


def _parse_hex_int(text: str) -> int:
    """Leading hex integer of ``text`` (``0x`` optional), 0 if there is none."""
    match = _HEX_INT.match(text)
    sign, digits = match.group(1), match.group(2)
    if not digits:
        return 0
    value = int(digits, 16)
    return -value if sign == "-" else value


def _parse_float(text: str) -> float:
    """Leading decimal or hex floating-point number of ``text``, 0.0 if none."""
    match = _HEX_FLOAT.match(text)
    if match and re.search(r"[0-9a-fA-F]", match.group(0)[match.group(0).lower().index("x") + 1:]):
        return float.fromhex(match.group(0).strip())
    match = _DEC_FLOAT.match(text)
    if match:
        return float(match.group(0))
    return 0.0


class Web3Client:
    """JSON-RPC client for an Ethereum node reached at ``url``.

    ``transport`` is called with the URL and the request body and returns
    the response body; by default an HTTP POST is made.
    """

    def __init__(self, chain_id: int, url: str, transport: Optional[Transport] = None) -> None:
        if not url:
            raise ValueError(f"no RPC endpoint given for chain id {chain_id}")
        self.chain_id = chain_id
        self.url = url
        self._transport: Transport = transport or _http_post

    def build_request(self, method: str, params: Any) -> str:
        """The JSON-RPC request body for ``method`` with ``params``."""
        return (
            '{"jsonrpc":"2.0","method":"'
            + method
            + '","params":'
            + json.dumps(params, separators=(",", ":"))
            + ',"id":0}'
        )

    def _call(self, method: str, params: Any) -> str:
        return self._transport(self.url, self.build_request(method, params))

    # node information

    def web3_client_version(self) -> str:
        return self.get_string(self._call("web3_clientVersion", []))

    def web3_sha3(self, data: str) -> str:
        return self.get_string(self._call("web3_sha3", [data]))

    def net_version(self) -> int:
        return self.get_int(self._call("net_version", []))

    def net_listening(self) -> bool:
        return self._get_bool(self._call("net_listening", []))

    def net_peer_count(self) -> int:
        return self.get_int(self._call("net_peerCount", []))

    def eth_protocol_version(self) -> float:
        return self._get_double(self._call("eth_protocolVersion", []))

    def eth_syncing(self) -> bool:
        return self._get_bool(self._call("eth_syncing", []))

    def eth_mining(self) -> bool:
        return self._get_bool(self._call("eth_mining", []))

    def eth_hashrate(self) -> float:
        return self._get_double(self._call("eth_hashrate", []))

    def eth_gas_price(self) -> int:
        return self.get_long_long(self._call("eth_gasPrice", []))

    def eth_block_number(self) -> int:
        return self.get_int(self._call("eth_blockNumber", []))

    # accounts and calls

    def eth_get_balance(self, address: str) -> UInt256:
        return self.get_uint256(self._call("eth_getBalance", [address, "latest"]))

    def eth_get_transaction_count(self, address: str) -> int:
        # "pending" so several transactions can be pushed in a row
        return self.get_int(self._call("eth_getTransactionCount", [address, "pending"]))

    def eth_view_call(self, data: str, to: str) -> str:
        return self._call("eth_call", [{"data": data, "to": to}, "latest"])

    def eth_call(self, sender: str, to: str, data: str) -> str:
        return self._call("eth_call", [{"from": sender, "to": to, "data": data}, "latest"])

    def eth_send_signed_transaction(self, data: str) -> str:
        return self._call("eth_sendRawTransaction", [data])

    def eth_get_transaction_receipt(self, tx_hash: str) -> str:
        return self._call("eth_getTransactionReceipt", [tx_hash])

    # response readers

    def get_int(self, response: str) -> int:
        """The ``result`` read as a hex integer."""
        return _parse_hex_int(json_result(response))

    def get_long_long(self, response: str) -> int:
        """The ``result`` read as a hex integer."""
        return _parse_hex_int(json_result(response))

    def get_uint256(self, response: str) -> UInt256:
        """The ``result`` read as a 256-bit hex value."""
        return UInt256.from_hex(json_result(response))

    def _get_double(self, response: str) -> float:
        return _parse_float(json_result(response))

    def _get_bool(self, response: str) -> bool:
        text = json_result(response)
        if text == "true":
            return True
        if text == "false":
            return False
        return _parse_hex_int(text) > 0

    def get_result(self, response: str) -> str:
        """The ``result`` text with a leading ``x`` or ``0x`` removed."""
        result = json_result(response)
        if not result:
            return ""
        if result[0] == "x":
            return result[1:]
        if len(result) > 1 and result[1] == "x":
            return result[2:]
        return result

    def get_string(self, response: str) -> str:
        """Decode an ABI-encoded string held in the ``result``."""
        result = json_result(response)
        if not result:
            return ""
        words = hex_to_abi_array(result)
        if len(words) < 2:
            raise ValueError("result is not an ABI-encoded string")
        length = int(UInt256.from_hex(words[1]))
        word_count = -(-length // _WORD_BYTES)
        body = words[2:2 + word_count]
        if len(body) < word_count:
            raise ValueError("ABI string shorter than its declared length")
        return hex_to_ascii("".join(body)[: length * 2])