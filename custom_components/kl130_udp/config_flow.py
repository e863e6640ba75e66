import voluptuous as vol
from homeassistant import config_entries
import homeassistant.helpers.config_validation as cv

from kl130.client import BulbClient
from kl130.errors import KL130Error

DOMAIN = "kl130_udp"
DEFAULT_NAME = "KL130 Bulb"


class KL130ConfigFlow(config_entries.ConfigFlow, domain=DOMAIN):
    """Handle a config flow for KL130 UDP."""

    VERSION = 1

    async def async_step_user(self, user_input=None):
        """Handle the initial step."""
        errors = {}

        if user_input is not None:
            await self.async_set_unique_id(user_input["host"])
            self._abort_if_unique_id_configured()
            try:
                await self._test_connection(user_input["host"])
            except KL130Error:
                errors["base"] = "cannot_connect"
            else:
                return self.async_create_entry(
                    title=f"{user_input.get('name', DEFAULT_NAME)} ({user_input['host']})",
                    data=user_input,
                )

        data_schema = vol.Schema(
            {
                vol.Required("host"): cv.string,
                vol.Optional("name", default=DEFAULT_NAME): cv.string,
            }
        )

        return self.async_show_form(
            step_id="user",
            data_schema=data_schema,
            errors=errors,
        )

    async def _test_connection(self, host: str):
        """Ask the bulb for its sysinfo; any decoded reply counts as reachable."""
        client = BulbClient(host)
        await self.hass.async_add_executor_job(client.query_status)
