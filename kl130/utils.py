import ipaddress
import json
from pathlib import Path
from typing import Dict, Optional


def get_config_dir() -> Path:
    """Gets the configuration directory for the application."""
    return Path.home() / ".kl130"


def load_bulbs() -> Dict[str, Dict]:
    """Loads saved bulb aliases from the configuration file."""
    bulbs_file = get_config_dir() / "bulbs.json"
    if not bulbs_file.exists():
        return {}
    with open(bulbs_file, "r") as f:
        return json.load(f)


def save_bulb(name: str, ip: str):
    """Saves a bulb's IP address under a friendly name."""
    config_dir = get_config_dir()
    config_dir.mkdir(parents=True, exist_ok=True)
    bulbs_file = config_dir / "bulbs.json"
    bulbs = load_bulbs()
    bulbs[name] = {"ip": ip}
    with open(bulbs_file, "w") as f:
        json.dump(bulbs, f, indent=2)


def get_bulb_ip(name: str) -> Optional[str]:
    """Retrieves the IP address saved under a given name."""
    bulbs = load_bulbs()
    return bulbs.get(name, {}).get("ip")


def normalize_ip(ip: str) -> str:
    """Return the IPv4 address in canonical dotted form.

    Raises ValueError if input is empty or not an IPv4 address.
    """
    if not ip:
        raise ValueError("IP address cannot be empty")
    try:
        return str(ipaddress.IPv4Address(ip.strip()))
    except ipaddress.AddressValueError as e:
        raise ValueError(f"Invalid IP address: {ip}") from e
