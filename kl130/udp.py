import socket
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Tuple, Union

from .constants import BULB_PORT, DEFAULT_TIMEOUT, RECV_BUFFER_SIZE
from .crypto import decrypt, encrypt, serialize
from .errors import MalformedPayloadError, ReplyTimeoutError, TransmissionError
from .log import debug, recv, send


@dataclass(frozen=True)
class DeviceEndpoint:
    ip: str
    port: int = BULB_PORT

    def __str__(self) -> str:
        return f"{self.ip}:{self.port}"


class ExchangeState(Enum):
    IDLE = "idle"
    SENDING = "sending"
    AWAITING_REPLY = "awaiting_reply"
    DONE = "done"
    DECODED = "decoded"
    TIMED_OUT = "timed_out"
    FAILED = "failed"


@dataclass(frozen=True)
class Completed:
    """A fire-and-forget command was sent; nothing was waited for."""


@dataclass(frozen=True)
class Reply:
    payload: Any
    sender: Tuple[str, int]


ExchangeResult = Union[Completed, Reply]


class UdpExchange:
    """One send (and optional single receive) against a bulb.

    An exchange owns exactly one socket, created in run() and closed on every
    exit path. Instances are single-shot: run() may only be called once.
    """

    def __init__(
        self,
        endpoint: DeviceEndpoint,
        timeout: float = DEFAULT_TIMEOUT,
        socket_factory: Callable[..., socket.socket] = socket.socket,
    ):
        self.endpoint = endpoint
        self.timeout = timeout
        self._socket_factory = socket_factory
        self.state = ExchangeState.IDLE

    def run(self, command: dict, expect_reply: bool = False) -> ExchangeResult:
        if self.state is not ExchangeState.IDLE:
            raise RuntimeError(f"Exchange already ran (state: {self.state.value})")

        self.state = ExchangeState.SENDING
        try:
            with self._socket_factory(socket.AF_INET, socket.SOCK_DGRAM) as s:
                if expect_reply:
                    # Listen before sending so a fast reply can't be missed
                    s.settimeout(self.timeout)
                    s.bind(("", 0))

                send("UDP", serialize(command))
                s.sendto(encrypt(command), (self.endpoint.ip, self.endpoint.port))

                if not expect_reply:
                    self.state = ExchangeState.DONE
                    return Completed()

                self.state = ExchangeState.AWAITING_REPLY
                try:
                    data, sender = s.recvfrom(RECV_BUFFER_SIZE)
                except socket.timeout as e:
                    self.state = ExchangeState.TIMED_OUT
                    raise ReplyTimeoutError(
                        f"No reply from {self.endpoint} within {self.timeout}s"
                    ) from e
        except OSError as e:
            self.state = ExchangeState.FAILED
            raise TransmissionError(f"UDP exchange with {self.endpoint} failed: {e}") from e

        debug(f"Received {len(data)} bytes from {sender[0]}:{sender[1]}")
        try:
            payload = decrypt(data)
        except MalformedPayloadError:
            self.state = ExchangeState.FAILED
            raise
        recv("UDP", serialize(payload))
        self.state = ExchangeState.DECODED
        return Reply(payload=payload, sender=sender)
