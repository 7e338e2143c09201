"""Runtime data container for go-e Charger config entries."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, Optional

import aiohttp

from .api import GoeChargerApi
from .capability_store import CapabilityStore
from .device import GoeChargerDevice

if TYPE_CHECKING:
    from homeassistant.config_entries import ConfigEntry
    from homeassistant.core import HomeAssistant

_LOGGER = logging.getLogger(__name__)


@dataclass
class GoeChargerRuntimeData:
    """Runtime data for a go-e Charger integration entry."""

    session: aiohttp.ClientSession
    api: GoeChargerApi
    store: CapabilityStore
    device: GoeChargerDevice
    init_task: Optional[asyncio.Task] = None

    # Lock to protect concurrent config entry updates
    _entry_update_lock: asyncio.Lock | None = None

    def __post_init__(self) -> None:
        if self._entry_update_lock is None:
            self._entry_update_lock = asyncio.Lock()

    @property
    def entry_update_lock(self) -> asyncio.Lock | None:
        """Get the entry update lock."""
        return self._entry_update_lock


# Module-level lock used during setup before runtime is available
_setup_update_lock = asyncio.Lock()


async def async_update_entry_data(
    hass: "HomeAssistant",
    entry: "ConfigEntry",
    updates: Dict[str, Any],
) -> None:
    """Safely update config entry data with lock to prevent race conditions.

    Args:
        hass: Home Assistant instance
        entry: Config entry to update
        updates: Dictionary of key-value pairs to merge into entry.data
    """
    from .const import DOMAIN

    runtime: GoeChargerRuntimeData | None = hass.data.get(DOMAIN, {}).get(entry.entry_id)

    lock = (
        runtime.entry_update_lock
        if runtime and runtime.entry_update_lock
        else _setup_update_lock
    )

    async with lock:
        merged = dict(entry.data)
        if all(merged.get(key) == value for key, value in updates.items()):
            return
        merged.update(updates)
        _LOGGER.debug("Updating entry %s settings: %s", entry.entry_id, updates)
        hass.config_entries.async_update_entry(entry, data=merged)
