#!/usr/bin/env python3
"""
KL130 Local Control Tool
Controls TP-Link KL130 colour bulbs over the local UDP protocol (port 9999).
"""

import argparse
import sys

from kl130.client import BulbClient
from kl130.command_handler import CommandHandler, ConsoleSink, resolve_target_ip
from kl130.constants import BULB_PORT, DEFAULT_TIMEOUT
from kl130.log import configure, info, say, success, warn
from kl130.utils import load_bulbs, normalize_ip, save_bulb


def _list_bulbs() -> None:
    bulbs = load_bulbs()
    if not bulbs:
        info("No saved bulbs.")
        return
    for name, entry in sorted(bulbs.items()):
        say(f"{name:<20} {entry.get('ip', '?')}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="KL130 Local Control Tool",
        formatter_class=argparse.RawTextHelpFormatter,
    )

    target_group = parser.add_argument_group("Target")
    target_group.add_argument("--ip", help="IP address of the bulb.")
    target_group.add_argument("--bulb", help="Name of a bulb saved with --save.")
    target_group.add_argument(
        "--save", metavar="NAME", help="Save --ip under NAME for later use with --bulb."
    )
    target_group.add_argument(
        "--list", action="store_true", help="List saved bulbs and exit."
    )
    target_group.add_argument(
        "--port", type=int, default=BULB_PORT, help=f"UDP port (default: {BULB_PORT})."
    )

    control_group = parser.add_argument_group("Bulb Control (UDP)")
    actions = control_group.add_mutually_exclusive_group()
    actions.add_argument("--on", action="store_true", help="Turn the bulb on.")
    actions.add_argument("--off", action="store_true", help="Turn the bulb off.")
    actions.add_argument(
        "--color", nargs=3, metavar=("R", "G", "B"), help="Set color (0-255 for each)."
    )
    actions.add_argument(
        "--status", action="store_true", help="Query the bulb and print its power state."
    )
    actions.add_argument("--json", help="Send a custom JSON payload.")
    control_group.add_argument(
        "--wait", action="store_true", help="With --json, wait for and print the reply."
    )

    parser.add_argument(
        "--timeout",
        type=float,
        default=DEFAULT_TIMEOUT,
        help=f"Seconds to wait for a reply (default: {DEFAULT_TIMEOUT}).",
    )
    parser.add_argument(
        "--verbose", action="store_true", help="Show debug logs and payloads"
    )
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    configure(verbose=args.verbose)

    if args.list:
        _list_bulbs()
        return

    if args.save:
        if not args.ip:
            warn("--save requires --ip")
            sys.exit(2)
        try:
            ip = normalize_ip(args.ip)
        except ValueError as e:
            warn(f"Invalid --ip: {e}")
            sys.exit(2)
        save_bulb(args.save, ip)
        success(f"Saved {args.save} -> {ip}")
        if not any([args.on, args.off, args.color, args.status, args.json]):
            return

    ip = resolve_target_ip(args)
    client = BulbClient(ip, sink=ConsoleSink(), timeout=args.timeout, port=args.port)
    CommandHandler(args, client).handle_udp_commands()


if __name__ == "__main__":
    if sys.version_info < (3, 8):
        print("This tool requires Python 3.8+. On Linux/macOS run with 'python3'. On Windows use 'py -3' or ensure 'python' is Python 3.")
        sys.exit(1)
    main()
