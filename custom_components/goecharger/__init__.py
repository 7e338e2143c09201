"""go-e Charger integration for Home Assistant."""

from __future__ import annotations

import logging
from functools import partial

import aiohttp
from homeassistant.config_entries import ConfigEntry
from homeassistant.const import Platform
from homeassistant.core import HomeAssistant
from homeassistant.exceptions import ConfigEntryNotReady
from homeassistant.helpers import device_registry as dr
from homeassistant.helpers.storage import Store

from .api import GoeChargerApi
from .capability_store import CapabilityStore
from .const import (
    CAPABILITY_STORE_KEY,
    CAPABILITY_STORE_VERSION,
    CONF_ADDRESS,
    CONF_DRIVER,
    DEBUG_LOG,
    DEFAULT_DRIVER,
    DOMAIN,
    DRIVERS,
    MAX_POLL_INTERVAL,
    MIN_POLL_INTERVAL,
    OPTION_DEBUG_LOG,
    OPTION_POLL_INTERVAL,
    POLL_INTERVAL,
)
from .debug import set_debug_enabled
from .device import GoeChargerDevice
from .runtime import GoeChargerRuntimeData, async_update_entry_data
from .utils import async_cancel_task, validate_and_clamp_option

_LOGGER = logging.getLogger(__name__)

PLATFORMS: list[Platform] = [
    Platform.SENSOR,
    Platform.BINARY_SENSOR,
    Platform.SWITCH,
    Platform.NUMBER,
]


def _make_options_listener(initial_options: dict):
    """Create an update listener that reloads only when options change."""
    prev_options = dict(initial_options)

    async def _listener(hass: HomeAssistant, entry: ConfigEntry) -> None:
        nonlocal prev_options
        current = dict(entry.options) if entry.options else {}
        if current != prev_options:
            prev_options = current
            await hass.config_entries.async_reload(entry.entry_id)

    return _listener


async def _async_initialize_device(device: GoeChargerDevice) -> None:
    """Run the device startup sequence, reporting failures as unavailability."""
    try:
        await device.async_initialize()
    except Exception as err:
        _LOGGER.exception("%s: initialization failed", device.name)
        device.availability.set_unavailable(err)


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Set up a go-e Charger from a config entry."""
    hass.data.setdefault(DOMAIN, {})

    _LOGGER.debug("Setting up go-e Charger entry %s", entry.entry_id)

    session: aiohttp.ClientSession | None = None
    setup_succeeded = False

    try:
        session = aiohttp.ClientSession()
        data = entry.data
        options = dict(entry.options) if entry.options else {}

        debug_option = options.get(OPTION_DEBUG_LOG)
        set_debug_enabled(DEBUG_LOG if debug_option is None else bool(debug_option))

        poll_interval = validate_and_clamp_option(
            options.get(OPTION_POLL_INTERVAL, POLL_INTERVAL),
            min_val=MIN_POLL_INTERVAL,
            max_val=MAX_POLL_INTERVAL,
            default=POLL_INTERVAL,
            option_name="poll_interval",
        )

        address = data.get(CONF_ADDRESS)
        if not address:
            raise ConfigEntryNotReady("No charger address configured")

        driver = data.get(CONF_DRIVER, DEFAULT_DRIVER)
        if driver not in DRIVERS:
            _LOGGER.warning("Unknown driver %s, falling back to %s", driver, DEFAULT_DRIVER)
            driver = DEFAULT_DRIVER

        device_key = entry.unique_id or entry.entry_id
        store = await CapabilityStore.async_create(hass, entry.entry_id, device_key)

        device_entry = dr.async_get(hass).async_get_or_create(
            config_entry_id=entry.entry_id,
            identifiers={(DOMAIN, device_key)},
            manufacturer="go-e",
            model=driver,
            name=entry.title,
        )

        api = GoeChargerApi(session, address, driver)
        device = GoeChargerDevice(
            hass,
            entry_id=entry.entry_id,
            device_id=device_key,
            name=entry.title,
            api=api,
            store=store,
            settings_writer=partial(async_update_entry_data, hass, entry),
            registry_device_id=device_entry.id,
            poll_interval=poll_interval,
        )

        runtime = GoeChargerRuntimeData(session=session, api=api, store=store, device=device)
        hass.data[DOMAIN][entry.entry_id] = runtime

        # Platforms first: entities follow capabilities attached later by the reconciler
        await hass.config_entries.async_forward_entry_setups(entry, PLATFORMS)

        runtime.init_task = hass.loop.create_task(_async_initialize_device(device))
        entry.async_on_unload(entry.add_update_listener(_make_options_listener(options)))

        setup_succeeded = True
        return True

    except Exception:
        runtime = hass.data.get(DOMAIN, {}).pop(entry.entry_id, None)
        if runtime:
            await async_cancel_task(runtime.init_task)
            await runtime.device.async_shutdown()
        raise

    finally:
        if not setup_succeeded and session is not None and not session.closed:
            await session.close()


async def async_unload_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Unload a config entry."""
    domain_data = hass.data.get(DOMAIN)
    if not domain_data or entry.entry_id not in domain_data:
        return True

    unload_ok = await hass.config_entries.async_unload_platforms(entry, PLATFORMS)
    if not unload_ok:
        return False

    data: GoeChargerRuntimeData = domain_data.pop(entry.entry_id)

    await async_cancel_task(data.init_task)
    await data.device.async_shutdown()
    await data.store.async_flush()
    await data.session.close()

    if not domain_data:
        hass.data.pop(DOMAIN, None)

    return True


async def async_remove_entry(hass: HomeAssistant, entry: ConfigEntry) -> None:
    """Drop the persisted capability model of a removed charger."""
    store: Store = Store(
        hass,
        CAPABILITY_STORE_VERSION,
        f"{DOMAIN}_{entry.entry_id}_{CAPABILITY_STORE_KEY}",
    )
    await store.async_remove()
    _LOGGER.debug("Config entry %s removed", entry.entry_id)
