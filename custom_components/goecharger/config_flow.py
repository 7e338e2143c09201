"""Config flow for go-e Charger integration."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import aiohttp
import voluptuous as vol

from homeassistant import config_entries
from homeassistant.core import callback
from homeassistant.data_entry_flow import FlowResult
from homeassistant.components.zeroconf import ZeroconfServiceInfo

from .api import GoeChargerApi
from .const import (
    CONF_ADDRESS,
    CONF_DRIVER,
    CONF_SERIAL,
    DEBUG_LOG,
    DEFAULT_DRIVER,
    DISCOVERY_DEVICETYPE,
    DOMAIN,
    DRIVER_V1,
    DRIVER_V2,
    DRIVERS,
    MAX_POLL_INTERVAL,
    MIN_POLL_INTERVAL,
    OPTION_DEBUG_LOG,
    OPTION_POLL_INTERVAL,
    POLL_INTERVAL,
)
from .errors import DeviceUnreachable, InvalidSettings
from .models import DiscoveryResult
from .runtime import async_update_entry_data
from .utils import describe_error

_LOGGER = logging.getLogger(__name__)


async def _async_validate_charger(address: str, driver: str) -> None:
    """Check that a charger answers at `address`.

    Raises:
        DeviceUnreachable: if it does not
    """
    async with aiohttp.ClientSession() as session:
        api = GoeChargerApi(session, address, driver)
        await api.async_get_info()


def _driver_for_devicetype(devicetype: str | None) -> str:
    """Pick the API generation from the announced device type."""
    if devicetype and any(tag in devicetype.lower() for tag in ("v3", "v4", "gemini", "v2")):
        return DRIVER_V2
    return DRIVER_V1


def _discovery_from_zeroconf(discovery_info: ZeroconfServiceInfo) -> DiscoveryResult | None:
    properties = {
        str(key): str(value) for key, value in (discovery_info.properties or {}).items()
    }
    devicetype = properties.get(DISCOVERY_DEVICETYPE)
    if not devicetype or not devicetype.lower().startswith("go-e"):
        return None
    serial = properties.get("serial") or discovery_info.name.split(".", 1)[0]
    return DiscoveryResult(
        id=serial,
        address=discovery_info.host,
        name=discovery_info.name,
        txt=properties,
    )


class GoeChargerConfigFlow(config_entries.ConfigFlow, domain=DOMAIN):  # type: ignore[call-arg]
    """Handle config flow for go-e Charger."""

    VERSION = 1

    def __init__(self) -> None:
        self._discovery: Optional[DiscoveryResult] = None

    async def async_step_user(self, user_input: Optional[Dict[str, Any]] = None) -> FlowResult:
        errors: Dict[str, str] = {}
        placeholders: Dict[str, str] = {}

        if user_input is not None:
            address = user_input[CONF_ADDRESS].strip()
            driver = user_input.get(CONF_DRIVER, DEFAULT_DRIVER)
            await self.async_set_unique_id(address)
            self._abort_if_unique_id_configured()
            try:
                await _async_validate_charger(address, driver)
            except DeviceUnreachable as err:
                _LOGGER.debug("Charger validation failed for %s: %s", address, err)
                errors["base"] = "cannot_connect"
                placeholders["error"] = describe_error(err)
            else:
                return self.async_create_entry(
                    title=f"go-e Charger {address}",
                    data={CONF_ADDRESS: address, CONF_DRIVER: driver},
                )

        return self.async_show_form(
            step_id="user",
            data_schema=vol.Schema(
                {
                    vol.Required(CONF_ADDRESS): str,
                    vol.Required(CONF_DRIVER, default=DEFAULT_DRIVER): vol.In(DRIVERS),
                }
            ),
            errors=errors,
            description_placeholders=placeholders or None,
        )

    async def async_step_zeroconf(self, discovery_info: ZeroconfServiceInfo) -> FlowResult:
        """Handle a charger announced on the network."""
        discovery = _discovery_from_zeroconf(discovery_info)
        if discovery is None:
            return self.async_abort(reason="not_goe_charger")

        await self.async_set_unique_id(discovery.id)
        await self._async_forward_to_device(discovery)
        self._abort_if_unique_id_configured(updates={CONF_ADDRESS: discovery.address})

        self._discovery = discovery
        self.context["title_placeholders"] = {"name": discovery.name or discovery.id}
        return await self.async_step_zeroconf_confirm()

    async def _async_forward_to_device(self, discovery: DiscoveryResult) -> None:
        """Let an already loaded charger follow its announced address."""
        entry = next(
            (
                e
                for e in self._async_current_entries(include_ignore=False)
                if e.unique_id == discovery.id
            ),
            None,
        )
        if entry is None:
            return
        runtime = self.hass.data.get(DOMAIN, {}).get(entry.entry_id)
        if runtime is None or not runtime.device.matches_discovery(discovery):
            return
        if entry.data.get(CONF_ADDRESS) != discovery.address:
            await runtime.device.async_on_discovery_address_changed(discovery)
        else:
            await runtime.device.async_on_discovery_available(discovery)

    async def async_step_zeroconf_confirm(
        self, user_input: Optional[Dict[str, Any]] = None
    ) -> FlowResult:
        discovery = self._discovery
        if discovery is None:
            return self.async_abort(reason="unknown")

        if user_input is not None:
            return self.async_create_entry(
                title=f"go-e Charger {discovery.id}",
                data={
                    CONF_ADDRESS: discovery.address,
                    CONF_DRIVER: user_input.get(
                        CONF_DRIVER, _driver_for_devicetype(discovery.devicetype)
                    ),
                    CONF_SERIAL: discovery.id,
                },
            )

        return self.async_show_form(
            step_id="zeroconf_confirm",
            data_schema=vol.Schema(
                {
                    vol.Required(
                        CONF_DRIVER, default=_driver_for_devicetype(discovery.devicetype)
                    ): vol.In(DRIVERS),
                }
            ),
            description_placeholders={
                "name": discovery.name or discovery.id,
                "address": discovery.address,
            },
        )

    @staticmethod
    @callback
    def async_get_options_flow(
        config_entry: config_entries.ConfigEntry,
    ) -> config_entries.OptionsFlow:
        return GoeChargerOptionsFlowHandler(config_entry)


class GoeChargerOptionsFlowHandler(config_entries.OptionsFlow):
    """Edit the charger address and polling options."""

    def __init__(self, config_entry: config_entries.ConfigEntry) -> None:
        self._config_entry = config_entry

    def _get_runtime(self):
        return self.hass.data.get(DOMAIN, {}).get(self._config_entry.entry_id)

    async def _async_apply_address(self, address: str) -> None:
        """Validate a new address against the charger.

        Raises:
            InvalidSettings: if no charger answers there
        """
        runtime = self._get_runtime()
        if runtime is not None:
            await runtime.device.async_apply_settings(address)
            return
        driver = self._config_entry.data.get(CONF_DRIVER, DEFAULT_DRIVER)
        try:
            await _async_validate_charger(address, driver)
        except DeviceUnreachable as err:
            raise InvalidSettings(f"No charger answering at {address}: {err}") from err

    async def async_step_init(self, user_input: Optional[Dict[str, Any]] = None) -> FlowResult:
        entry = self._config_entry
        errors: Dict[str, str] = {}
        placeholders: Dict[str, str] = {}
        current_address = entry.data.get(CONF_ADDRESS, "")
        options = dict(entry.options) if entry.options else {}

        if user_input is not None:
            address = user_input[CONF_ADDRESS].strip()
            try:
                if address != current_address:
                    await self._async_apply_address(address)
            except InvalidSettings as err:
                _LOGGER.warning("Rejected new address %s: %s", address, err)
                errors["base"] = "cannot_connect"
                placeholders["error"] = describe_error(err)
            else:
                if address != current_address:
                    await async_update_entry_data(self.hass, entry, {CONF_ADDRESS: address})
                return self.async_create_entry(
                    title="",
                    data={
                        OPTION_POLL_INTERVAL: user_input[OPTION_POLL_INTERVAL],
                        OPTION_DEBUG_LOG: user_input[OPTION_DEBUG_LOG],
                    },
                )

        return self.async_show_form(
            step_id="init",
            data_schema=vol.Schema(
                {
                    vol.Required(CONF_ADDRESS, default=current_address): str,
                    vol.Required(
                        OPTION_POLL_INTERVAL,
                        default=options.get(OPTION_POLL_INTERVAL, POLL_INTERVAL),
                    ): vol.All(
                        vol.Coerce(int),
                        vol.Range(min=MIN_POLL_INTERVAL, max=MAX_POLL_INTERVAL),
                    ),
                    vol.Required(
                        OPTION_DEBUG_LOG,
                        default=options.get(OPTION_DEBUG_LOG, DEBUG_LOG),
                    ): bool,
                }
            ),
            errors=errors,
            description_placeholders=placeholders or None,
        )
