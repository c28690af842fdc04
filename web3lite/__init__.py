"""Ethereum JSON-RPC client, Keccak hashing, fixed-width integers, RLP helpers and a UDP API bridge."""

__version__ = "0.1.0"
__all__ = ["sha3", "uint128", "uint256", "util", "web3", "udp_bridge"]