"""UDP bridge that lets a remote proxy call named APIs on this device.

The bridge performs a session handshake with the proxy (fetch a random
session token, sign it, wait for confirmation), keeps the session alive
with pings and answers API calls through a user supplied callback.
"""

from __future__ import annotations

import enum
import logging
import random
import time
from dataclasses import dataclass, field
from typing import Callable, Optional, Protocol, Union

BytesLike = Union[bytes, bytearray, memoryview]

_log = logging.getLogger(__name__)

DEFAULT_PORT = 8003
TOP_PORT = 8003
DEFAULT_HOST = "scriptproxy.smarttokenlabs.com"

PACKET_BUFFER_SIZE = 512
SESSION_LENGTH = 8
SIGNATURE_LENGTH = 65

CHECK_INTERVAL_MS = 2000
CONFIRMED_TICKS = 60
COMMS_TIMEOUT_MS = 30 * 1000
PORT_ROTATE_MS = 180 * 1000

_NO_SESSION = bytes(SESSION_LENGTH)

_TYPE_SESSION = 0x00
_TYPE_SIGNATURE = 0x01
_TYPE_API = 0x02
_TYPE_PING = 0x03


class ConnectionStage(enum.Enum):
    """Where the bridge is in its session handshake."""

    UNCONNECTED = 0
    HANDSHAKE = 1
    HAVE_TOKEN = 2
    CONFIRMED = 3


@dataclass
class ApiCall:
    """A named API call with its string parameters."""

    api_name: str = ""
    params: dict[str, str] = field(default_factory=dict)


class Signer(Protocol):
    """The key holder the bridge signs session tokens with."""

    def has_recovered_key(self) -> bool: ...

    def generate_private_key(self, rng: random.Random) -> None: ...

    def sign(self, data: bytes) -> bytes: ...


class Transport(Protocol):
    """A datagram socket as the bridge needs it."""

    def bind(self, port: int) -> None: ...

    def send(self, data: bytes, host: str, port: int) -> None: ...

    def receive(self) -> Optional[bytes]: ...


Callback = Callable[[ApiCall], str]


def _default_clock() -> int:
    return int(time.monotonic() * 1000)


def _byte_at(packet: BytesLike, index: int) -> int:
    if index >= len(packet):
        raise ValueError("truncated argument in API packet")
    return packet[index]


def read_arg(packet: BytesLike, index: int, payload_length: int) -> tuple[str, int]:
    """Read one length-prefixed argument starting at ``index``.

    The length is a run of bytes summed together, continuing while a byte
    is 0xFF. The text stops at ``payload_length``. Returns the text and the
    index just after it.
    """
    part = _byte_at(packet, index)
    index += 1
    arg_len = part
    while part == 0xFF:
        part = _byte_at(packet, index)
        index += 1
        arg_len += part
    end = min(index + arg_len, payload_length, len(packet))
    end = max(end, index)
    text = bytes(packet[index:end]).decode("latin-1")
    return text, end


def parse_api_call(payload: BytesLike, payload_length: int) -> ApiCall:
    """Decode an API name followed by key/value pairs from ``payload``."""
    name, index = read_arg(payload, 0, payload_length)
    call = ApiCall(api_name=name)
    _log.debug("API: %s", name)
    while index < payload_length:
        key, index = read_arg(payload, index, payload_length)
        value, index = read_arg(payload, index, payload_length)
        call.params[key] = value
        _log.debug("PAIR: %s     %s", key, value)
    return call


class UdpBridge:
    """Client side of the UDP API bridge.

    ``clock`` returns the current time in milliseconds.
    """

    def __init__(
        self,
        signer: Signer,
        transport: Transport,
        clock: Optional[Callable[[], int]] = None,
    ) -> None:
        self.signer = signer
        self.transport = transport
        self.clock = clock or _default_clock
        self.server_name = DEFAULT_HOST
        self.port = DEFAULT_PORT
        self.state = ConnectionStage.HANDSHAKE
        self.session = _NO_SESSION
        self.verified_session = _NO_SESSION
        self.rng = random.Random()
        self._random_seeded = False
        self._pong_count = 0
        self._countdown = 0
        self._last_check = 0
        self._last_comms = 0
        self._current_query_id: Optional[int] = None
        self._last_reply = b""
        _log.info("Starting UDP Bridge")

    # configuration and status

    def setup_connection(self, server_name: str, port: int) -> None:
        """Use ``server_name`` and ``port`` instead of the defaults."""
        self.server_name = server_name
        self.port = port

    def start_connection(self) -> None:
        """Bind the transport to the configured port."""
        self.transport.bind(self.port)

    @property
    def connection_status(self) -> int:
        """Ticks left before the confirmed session expires (0 if none)."""
        return self._countdown

    @property
    def pong_count(self) -> int:
        return self._pong_count

    # incoming traffic

    def check_client_api(self, callback: Callback) -> None:
        """Run one round: keep the session alive and handle one packet if any."""
        self.maintain_comms()
        packet = self.transport.receive()
        if packet:
            self.handle_packet(packet, callback)

    def handle_packet(self, packet: BytesLike, callback: Callback) -> None:
        """Process one received datagram."""
        data = bytes(packet)
        if not data:
            return
        padded = data.ljust(2 + 2 * SESSION_LENGTH, b"\x00")
        kind = padded[0]
        length = padded[1]
        self._last_comms = self.clock()
        if length == 0:
            return

        token = padded[2:2 + SESSION_LENGTH]
        if kind == _TYPE_SESSION:
            if self._is_new_session(padded):
                self.session = token
                if not self.signer.has_recovered_key():
                    self._seed_random(token)
                    self.signer.generate_private_key(self.rng)
                elif not self._random_seeded:
                    self._seed_random(token)
                    _log.debug("Refresh random")
                    self._random_seeded = True
                self.state = ConnectionStage.HAVE_TOKEN
        elif kind == _TYPE_SIGNATURE:
            if length == SESSION_LENGTH and self._countdown == 0 and token == self.session:
                self.state = ConnectionStage.CONFIRMED
                self._countdown = CONFIRMED_TICKS
                self.session = token
                self.verified_session = token
        elif kind == _TYPE_API:
            if length == self._current_query_id:
                self._resend()
            else:
                self._current_query_id = length
                payload_length = padded[2]
                call = parse_api_call(data[3:], payload_length)
                self._send_response(callback(call), length)
        elif kind == _TYPE_PING:
            self._last_comms = self.clock()
            self._pong_count = (self._pong_count + 1) & 0xFF

    def _is_new_session(self, packet: bytes) -> bool:
        offered = packet[2:2 + SESSION_LENGTH]
        echoed = packet[2 + SESSION_LENGTH:2 + 2 * SESSION_LENGTH]
        return offered != self.session and echoed == self.session

    def _seed_random(self, token: bytes) -> None:
        micros = time.perf_counter_ns() // 1000 & 0xFFFFFFFF
        self.rng.seed(int.from_bytes(token + micros.to_bytes(4, "little"), "little"))

    # keep-alive

    def maintain_comms(self) -> None:
        """Advance the handshake and keep-alive timers, sending as needed."""
        now = self.clock()
        if now <= self._last_check + CHECK_INTERVAL_MS:
            return
        self._last_check = now

        if self.state is ConnectionStage.HANDSHAKE:
            self._countdown = 0
            self._send_refresh_request()
            self._pong_count = 0
        elif self.state is ConnectionStage.HAVE_TOKEN:
            self._send_signature()
        elif self.state is ConnectionStage.CONFIRMED:
            self._countdown -= 1
            if self._countdown <= 0:
                self._reset_session()
            if self._countdown % 2 == 0:
                self._send_ping()

        if self.state is not ConnectionStage.HANDSHAKE and now > self._last_comms + COMMS_TIMEOUT_MS:
            self._reset_session()

        if now > self._last_comms + PORT_ROTATE_MS:
            self._last_comms = now
            self.port += 1
            if self.port > TOP_PORT:
                self.port = DEFAULT_PORT
            self.transport.bind(self.port)

    def _reset_session(self) -> None:
        self.state = ConnectionStage.HANDSHAKE
        self.session = _NO_SESSION

    # outgoing traffic

    def _send(self, data: bytes) -> None:
        self.transport.send(data, self.server_name, self.port)

    def _resend(self) -> None:
        self._send(self._last_reply)

    def _send_refresh_request(self) -> None:
        self._send(bytes([_TYPE_SESSION]) + self.session + b"\x01\x00")

    def _send_signature(self) -> None:
        signature = bytes(self.signer.sign(self.session))
        if len(signature) != SIGNATURE_LENGTH:
            raise ValueError(f"signature must be {SIGNATURE_LENGTH} bytes, got {len(signature)}")
        packet = bytes([_TYPE_SIGNATURE]) + self.session + bytes([SIGNATURE_LENGTH]) + signature
        self._last_reply = packet
        self._send(packet)

    def _send_response(self, response: str, query_id: int) -> None:
        body = response.encode("utf-8")
        packet = (
            bytes([_TYPE_API])
            + self.verified_session
            + bytes([(len(body) + 1) & 0xFF, query_id & 0xFF])
            + body
        )
        if len(packet) > PACKET_BUFFER_SIZE:
            raise ValueError(f"response too long for a {PACKET_BUFFER_SIZE}-byte packet")
        self._last_reply = packet
        self._send(packet)

    def _send_ping(self) -> None:
        self._send(bytes([_TYPE_PING]) + self.verified_session)