[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "web3lite"
version = "0.1.0"
description = "Lightweight Ethereum JSON-RPC client, Keccak hashing, 256-bit integers, RLP helpers and a UDP API bridge"
requires-python = ">=3.10"
keywords = ["ethereum", "web3", "json-rpc", "keccak", "rlp", "uint256"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries",
    "Topic :: Security :: Cryptography",
]
dependencies = []

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["web3lite"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
