"""Base entity and platform helpers for the go-e Charger integration."""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant, callback
from homeassistant.helpers.device_registry import DeviceInfo
from homeassistant.helpers.dispatcher import async_dispatcher_connect
from homeassistant.helpers.entity import Entity
from homeassistant.helpers.entity_platform import AddEntitiesCallback

from .const import CAPABILITY_PLATFORMS, CAPABILITY_TITLES, DOMAIN
from .device import GoeChargerDevice
from .runtime import GoeChargerRuntimeData

_LOGGER = logging.getLogger(__name__)


class GoeChargerEntity(Entity):
    """Entity mirroring one capability of a charger."""

    _attr_should_poll = False
    _attr_has_entity_name = True

    def __init__(self, device: GoeChargerDevice, capability: str) -> None:
        self._device = device
        self._store = device.store
        self._capability = capability
        self._attr_unique_id = device.store.unique_id_for(capability)
        self._attr_name = self._format_name()
        self._attr_device_info = DeviceInfo(
            identifiers={(DOMAIN, device.device_id)},
            manufacturer="go-e",
            name=device.name,
        )
        self._unsubs: list[Callable[[], None]] = []
        self._update_from_store()

    def _format_name(self) -> str:
        title = CAPABILITY_TITLES.get(self._capability)
        if title:
            return title
        parts = self._capability.replace(".", " ").replace("_", " ").split()
        return " ".join(p.capitalize() for p in parts)

    @property
    def capability(self) -> str:
        return self._capability

    @property
    def capability_value(self) -> Any:
        return self._store.get_value(self._capability)

    @property
    def available(self) -> bool:
        return self._device.availability.available

    @property
    def extra_state_attributes(self) -> dict:
        reason = self._device.availability.reason
        if reason and not self.available:
            return {"unavailable_reason": reason}
        return {}

    def _update_from_store(self) -> None:
        """Copy the cached capability value into entity attributes."""

    async def async_added_to_hass(self) -> None:
        await super().async_added_to_hass()
        self._unsubs.append(
            async_dispatcher_connect(
                self.hass, self._store.signal_update, self._handle_capability_update
            )
        )
        self._unsubs.append(
            async_dispatcher_connect(
                self.hass, self._store.signal_removed, self._handle_capability_removed
            )
        )
        self._unsubs.append(
            self._device.availability.add_listener(self._handle_availability)
        )
        # Values written between construction and registration
        self._update_from_store()

    async def async_will_remove_from_hass(self) -> None:
        while self._unsubs:
            self._unsubs.pop()()
        await super().async_will_remove_from_hass()

    @callback
    def _handle_capability_update(self, capability: str) -> None:
        if capability != self._capability:
            return
        self._update_from_store()
        self.async_write_ha_state()

    @callback
    def _handle_capability_removed(self, capability: str) -> None:
        if capability != self._capability:
            return
        self.hass.async_create_task(self.async_remove(force_remove=True))

    @callback
    def _handle_availability(self) -> None:
        if self.hass is not None and self.entity_id:
            self.async_write_ha_state()


async def async_setup_capability_platform(
    hass: HomeAssistant,
    entry: ConfigEntry,
    async_add_entities: AddEntitiesCallback,
    platform: str,
    factory: Callable[[GoeChargerDevice, str], Optional[GoeChargerEntity]],
) -> None:
    """Create entities for attached capabilities of `platform` and follow new ones."""
    runtime: GoeChargerRuntimeData = hass.data[DOMAIN][entry.entry_id]
    device = runtime.device
    store = runtime.store
    created: set[str] = set()

    @callback
    def ensure_entity(capability: str) -> None:
        if capability in created or CAPABILITY_PLATFORMS.get(capability) != platform:
            return
        entity = factory(device, capability)
        if entity is None:
            return
        created.add(capability)
        async_add_entities([entity])
        _LOGGER.debug("Added %s entity for %s", platform, capability)

    @callback
    def forget_entity(capability: str) -> None:
        created.discard(capability)

    for capability in store.get_capabilities():
        ensure_entity(capability)

    entry.async_on_unload(
        async_dispatcher_connect(hass, store.signal_added, ensure_entity)
    )
    entry.async_on_unload(
        async_dispatcher_connect(hass, store.signal_removed, forget_entity)
    )
