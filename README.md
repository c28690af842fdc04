# web3lite

A small toolkit with no dependencies. It talks to Ethereum-style JSON-RPC
nodes and handles the data they return.

## What is inside

- `web3lite.sha3`: Keccak and SHA-3 hashing. It provides `keccak_256`,
  `keccak_512`, `sha3_256` and `sha3_512`, plus the incremental `Sha3`
  class. `Sha3(bits, keccak)` accepts 224, 256, 384 or 512 bits and has
  `update`, `digest`, `hexdigest` and `copy`.
- `web3lite.uint128` and `web3lite.uint256`: fixed-width unsigned integers
  `UInt128` and `UInt256`. Arithmetic on them wraps modulo 2**128 or
  2**256. You can build them from hex text with `from_hex`, or with
  `UInt256.from_halves`. Render them with `to_string(base, length)`
  (base 2 to 16 for `UInt128`, 2 to 36 for `UInt256`). Export them as
  big-endian bytes with `export_bits` or `export_bits_truncate`.
- `web3lite.util`: RLP headers and items (`rlp_encode_whole_header`,
  `rlp_encode_item`), hex and byte conversions (`hex_to_bytes`,
  `bytes_to_hex`, `plain_bytes_to_hex`, `hex_to_fixed_bytes`), base
  conversion (`convert_base`) and ABI result decoding (`split_words`,
  `hex_to_abi_array`, `interpret_string_result`,
  `interpret_vector_result`, `result_to_array`). It also covers
  wei/ether formatting (`to_wei`, `wei_to_eth_string`, `eth_to_wei`,
  `convert_decimal`).
- `web3lite.web3`: `Web3Client`, a JSON-RPC client. It builds requests
  and decodes the `result` field for the common `eth_`, `net_` and
  `web3_` methods.
- `web3lite.udp_bridge`: `UdpBridge`, the client side of a UDP bridge
  protocol. It runs a session handshake, has the session token signed,
  answers API calls (`ApiCall`) through a callback you supply, and keeps
  the link alive with pings.

## Installation

```
pip install web3lite
```

To run the test suite:

```
pip install "web3lite[test]"
pytest
```

## Examples

Hashing:

```python
from web3lite.sha3 import keccak_256

print(keccak_256(b"").hex())
```

256-bit arithmetic:

```python
from web3lite.uint256 import UInt256

value = UInt256.from_hex("0xde0b6b3a7640000")
print(value.to_string(10, 0))   # 1000000000000000000
print(value.export_bits_truncate().hex())
```

Unit conversion and encoding:

```python
from web3lite.uint256 import UInt256
from web3lite.util import bytes_to_hex, rlp_encode_item, wei_to_eth_string

print(wei_to_eth_string(UInt256.from_hex("0xde0b6b3a7640000"), 18))
print(bytes_to_hex(rlp_encode_item(b"dog")))   # 0x83646F67
```

Querying a node. By default `Web3Client` sends an HTTP POST to the URL
you give it. You can pass your own transport instead. A transport is any
callable that takes the URL and the request body and returns the
response body:

```python
from web3lite.web3 import Web3Client

client = Web3Client(1, "https://node.example.com/")
print(client.eth_block_number())

def transport(url: str, body: str) -> str:
    return '{"jsonrpc":"2.0","id":0,"result":"0x10"}'

offline = Web3Client(1, "https://node.example.com/", transport)
print(offline.eth_block_number())   # 16
```

The UDP bridge does no I/O of its own. It needs three things from you:

- a signer, with `has_recovered_key()`, `generate_private_key(rng)` and
  `sign(data)` returning 65 bytes;
- a transport, with `bind(port)`, `send(data, host, port)` and
  `receive()`;
- optionally, a clock in milliseconds.

Call `check_client_api(callback)` repeatedly. The callback receives an
`ApiCall` and returns the reply text.

## What it does not do

- It does not hold or derive private keys, and it does not sign
  transactions. `UdpBridge` relies on the signer you pass in, and
  `eth_send_signed_transaction` expects an already signed transaction.
- It has no built-in list of node URLs or TLS certificates per chain.
  You pass the endpoint URL to `Web3Client` yourself.
- It has no command-line program.

## Errors

Failures raise standard Python exceptions. They are not reported through
sentinel return values:

- division by zero raises `ZeroDivisionError`;
- malformed hex, unsupported bases and oversized packets raise
  `ValueError`;
- an unreachable node raises `ConnectionError`.