"""
Builders for the JSON commands understood by KL130 bulbs.

Each call returns a fresh dict; callers may mutate the result without
affecting later commands.
"""

from .color import ColorHSB
from .constants import LIGHTING_SERVICE, SYSTEM_SERVICE


def build_light_state_cmd(**state) -> dict:
    light_state = {"ignore_default": 1, "transition_period": 0}
    light_state.update(state)
    return {LIGHTING_SERVICE: {"transition_light_state": light_state}}


def build_power_cmd(on: bool) -> dict:
    return build_light_state_cmd(on_off=1 if on else 0)


def build_color_cmd(hsb: ColorHSB) -> dict:
    return build_light_state_cmd(
        on_off=1,
        hue=hsb.hue,
        saturation=hsb.saturation,
        brightness=hsb.brightness,
        color_temp=0,
    )


def build_sysinfo_cmd() -> dict:
    return {SYSTEM_SERVICE: {"get_sysinfo": {}}}


def extract_on_off(response):
    """Return the light_state.on_off value from a get_sysinfo reply, or None if absent."""
    try:
        light_state = response[SYSTEM_SERVICE]["get_sysinfo"]["light_state"]
        return light_state["on_off"]
    except (KeyError, TypeError):
        return None
