import logging
from typing import Any, Optional, Tuple

from homeassistant.components.light import (
    ATTR_RGB_COLOR,
    ColorMode,
    LightEntity,
)
from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.helpers.entity_platform import AddEntitiesCallback

from kl130.client import BulbClient
from kl130.constants import COLOR_PATHS, LEVEL_PATH
from kl130.errors import KL130Error

_LOGGER = logging.getLogger(__name__)


async def async_setup_entry(
    hass: HomeAssistant,
    config_entry: ConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up the KL130 UDP light platform."""
    host = config_entry.data["host"]
    name = config_entry.data.get("name", "KL130 Bulb")

    light = KL130Light(host, name, config_entry.entry_id)
    async_add_entities([light], update_before_add=True)


class _EntitySink:
    """Applies the client's metrics:* paths to the entity's cached state."""

    def __init__(self, light: "KL130Light") -> None:
        self._light = light

    def set(self, path: str, value: Any) -> None:
        if path == LEVEL_PATH:
            self._light._is_on = value == "on"
        elif path in COLOR_PATHS:
            rgb = list(self._light._rgb_color)
            rgb[COLOR_PATHS.index(path)] = int(value)
            self._light._rgb_color = tuple(rgb)
        else:
            _LOGGER.debug(f"Ignoring unknown state path {path}={value}")


class KL130Light(LightEntity):
    """Representation of a KL130 bulb controlled over local UDP."""

    def __init__(self, host: str, name: str, unique_id: str) -> None:
        """Initialize the light."""
        self._host = host
        self._is_on = False
        self._rgb_color: Tuple[int, int, int] = (0, 0, 0)
        self._client = BulbClient(host, sink=_EntitySink(self))

        self._attr_name = name
        self._attr_unique_id = unique_id
        self._attr_available = True
        self._attr_color_mode = ColorMode.RGB
        self._attr_supported_color_modes = {ColorMode.RGB}

    @property
    def is_on(self) -> bool:
        """Return true if light is on."""
        return self._is_on

    @property
    def rgb_color(self) -> Optional[Tuple[int, int, int]]:
        """Return the last colour set through this entity."""
        return self._rgb_color

    async def async_update(self) -> None:
        """Fetch the power state from the bulb."""
        try:
            status = await self.hass.async_add_executor_job(self._client.query_status)
        except KL130Error as e:
            if self._attr_available:
                _LOGGER.warning(f"Status query to {self._host} failed: {e}")
            self._attr_available = False
            return

        self._attr_available = True
        if status.is_on is None:
            _LOGGER.debug(f"Reply from {self._host} carried no power state")

    async def async_turn_on(self, **kwargs: Any) -> None:
        """Turn on the light, optionally at a given colour."""
        try:
            if ATTR_RGB_COLOR in kwargs:
                await self.hass.async_add_executor_job(
                    self._client.set_exact_color, kwargs[ATTR_RGB_COLOR]
                )
            else:
                await self.hass.async_add_executor_job(self._client.power_on)
        except KL130Error as e:
            _LOGGER.error(f"Error sending command to {self._host}: {e}")
            return
        self.async_write_ha_state()

    async def async_turn_off(self, **kwargs: Any) -> None:
        """Turn off the light."""
        try:
            await self.hass.async_add_executor_job(self._client.power_off)
        except KL130Error as e:
            _LOGGER.error(f"Error sending command to {self._host}: {e}")
            return
        self.async_write_ha_state()
