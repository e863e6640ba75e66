"""
Command handling functionality for KL130 bulbs.
Maps parsed CLI arguments onto BulbClient operations.
"""

import json
import sys
from typing import Any

from .client import BulbClient, BulbStatus
from .errors import KL130Error
from .log import info, warn, success, result, set_indent
from .utils import get_bulb_ip, normalize_ip


class ConsoleSink:
    """Prints optimistic and confirmed state changes as the client reports them."""

    def set(self, path: str, value: Any) -> None:
        result(f"{path} = {value}", extra_indent=2)


def resolve_target_ip(args) -> str:
    """Pick the bulb IP from --ip or a saved --bulb alias. Exits with code 2 if neither works."""
    if getattr(args, "ip", None):
        try:
            return normalize_ip(args.ip)
        except ValueError as e:
            warn(f"Invalid --ip: {e}")
            sys.exit(2)

    if getattr(args, "bulb", None):
        ip = get_bulb_ip(args.bulb)
        if not ip:
            warn(f"No saved bulb named '{args.bulb}' (use --ip IP --save NAME first)")
            sys.exit(2)
        return ip

    warn("A target is required: use --ip or --bulb")
    sys.exit(2)


def parse_color(values) -> tuple:
    try:
        r, g, b = (int(v) for v in values)
    except (TypeError, ValueError) as e:
        warn(f"Could not convert input to integer for --color: {values}. Exception: {e}")
        sys.exit(2)
    if not all(0 <= val <= 255 for val in (r, g, b)):
        warn("Color values must be between 0 and 255")
        sys.exit(2)
    return r, g, b


def report_status(status: BulbStatus) -> None:
    if status.is_on is None:
        info("Bulb replied without a power state")
    else:
        success(f"Bulb is {'on' if status.is_on else 'off'}")


class CommandHandler:
    def __init__(self, args, client: BulbClient):
        self.args = args
        self.client = client

    def handle_udp_commands(self):
        """Handle UDP commands for direct bulb control."""
        try:
            self._dispatch()
        except KL130Error as e:
            warn(str(e))
            sys.exit(1)

    def _dispatch(self):
        set_indent(0)
        if self.args.on:
            self.client.handle("on")
            success("Power ON sent")
        elif self.args.off:
            self.client.handle("off")
            success("Power OFF sent")
        elif self.args.color:
            rgb = parse_color(self.args.color)
            self.client.handle("exact", {"red": rgb[0], "green": rgb[1], "blue": rgb[2]})
            success(f"Color {rgb[0]}:{rgb[1]}:{rgb[2]} sent")
        elif self.args.status:
            report_status(self.client.handle("update"))
        elif self.args.json:
            try:
                custom = json.loads(self.args.json)
            except json.JSONDecodeError:
                warn("Invalid JSON for --json")
                sys.exit(2)
            if not isinstance(custom, dict):
                warn("--json must be a JSON object")
                sys.exit(2)
            reply = self.client.send_raw(custom, expect_reply=self.args.wait)
            if reply is not None:
                result(json.dumps(reply, indent=2))
            else:
                success("Payload sent")
        else:
            warn("No command specified. Use --on, --off, --color, --status or --json")
            sys.exit(2)
