"""
High-level control of a single KL130 bulb.

BulbClient turns the four supported operations into UDP exchanges and pushes
the resulting state to a host-provided sink.
"""

import socket
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional, Protocol

from .color import ColorRGB, rgb_to_hsb
from .commands import build_color_cmd, build_power_cmd, build_sysinfo_cmd, extract_on_off
from .constants import BULB_PORT, COLOR_PATHS, DEFAULT_TIMEOUT, LEVEL_PATH
from .errors import InvalidColorError, UnrecognizedCommandError
from .log import debug, warn
from .udp import DeviceEndpoint, Reply, UdpExchange


class PropertySink(Protocol):
    def set(self, path: str, value: Any) -> None:
        ...


class NullSink:
    """Sink used when the host does not track state."""

    def set(self, path: str, value: Any) -> None:
        pass


@dataclass(frozen=True)
class BulbStatus:
    """Outcome of a status query. is_on is None when the reply carried no on/off field."""

    is_on: Optional[bool]
    raw: Any


def coerce_rgb(value) -> ColorRGB:
    """Accept a ColorRGB, a mapping with red/green/blue keys, or any 3-sequence."""
    if isinstance(value, ColorRGB):
        return value
    try:
        if isinstance(value, Mapping):
            return ColorRGB(int(value["red"]), int(value["green"]), int(value["blue"]))
        red, green, blue = value
        return ColorRGB(int(red), int(green), int(blue))
    except (KeyError, TypeError, ValueError) as e:
        raise InvalidColorError(f"Not an RGB colour: {value!r}") from e


class BulbClient:
    def __init__(
        self,
        ip: str,
        sink: Optional[PropertySink] = None,
        timeout: float = DEFAULT_TIMEOUT,
        port: int = BULB_PORT,
        socket_factory: Callable[..., socket.socket] = socket.socket,
    ):
        self.endpoint = DeviceEndpoint(ip, port)
        self.sink = sink if sink is not None else NullSink()
        self.timeout = timeout
        self._socket_factory = socket_factory

    def _exchange(self, command: dict, expect_reply: bool = False):
        exchange = UdpExchange(
            self.endpoint, timeout=self.timeout, socket_factory=self._socket_factory
        )
        return exchange.run(command, expect_reply=expect_reply)

    def power_on(self) -> None:
        self._exchange(build_power_cmd(True))
        self.sink.set(LEVEL_PATH, "on")

    def power_off(self) -> None:
        self._exchange(build_power_cmd(False))
        self.sink.set(LEVEL_PATH, "off")

    def set_exact_color(self, rgb) -> None:
        """Set the bulb to an RGB colour.

        The sink receives the caller's RGB values rather than the rounded
        HSB-derived colour the bulb actually shows.
        """
        rgb = coerce_rgb(rgb)
        hsb = rgb_to_hsb(rgb)
        debug(f"RGB {tuple(rgb)} -> HSB {tuple(hsb)}")
        self._exchange(build_color_cmd(hsb))
        self.sink.set(LEVEL_PATH, "on")
        for path, channel in zip(COLOR_PATHS, rgb):
            self.sink.set(path, channel)

    def query_status(self) -> BulbStatus:
        outcome = self._exchange(build_sysinfo_cmd(), expect_reply=True)
        on_off = extract_on_off(outcome.payload)
        if on_off is None:
            debug(f"No light_state.on_off in reply from {self.endpoint}")
            return BulbStatus(is_on=None, raw=outcome.payload)

        is_on = on_off == 1
        self.sink.set(LEVEL_PATH, "on" if is_on else "off")
        return BulbStatus(is_on=is_on, raw=outcome.payload)

    def send_raw(self, payload: dict, expect_reply: bool = False) -> Optional[Any]:
        """Send an arbitrary JSON object. No state is pushed to the sink."""
        outcome = self._exchange(payload, expect_reply=expect_reply)
        if isinstance(outcome, Reply):
            return outcome.payload
        return None

    def handle(self, command: str, args=None):
        """Dispatch a command label the way the host framework names them."""
        if command == "on":
            return self.power_on()
        elif command == "off":
            return self.power_off()
        elif command == "exact":
            return self.set_exact_color(args)
        elif command == "update":
            return self.query_status()

        warn(f"KL130 {self.endpoint.ip} received unknown command '{command}'")
        raise UnrecognizedCommandError(command)

    def __repr__(self) -> str:
        return f"BulbClient({self.endpoint})"
