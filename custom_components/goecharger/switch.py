"""Switch platform for go-e Charger."""

from __future__ import annotations

from typing import Any

from homeassistant.components.switch import SwitchEntity
from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.helpers.entity_platform import AddEntitiesCallback

from .entity import GoeChargerEntity, async_setup_capability_platform


class GoeChargerSwitch(GoeChargerEntity, SwitchEntity):
    """Switch allowing or blocking charging."""

    _attr_icon = "mdi:ev-plug-type2"

    def _update_from_store(self) -> None:
        value = self.capability_value
        self._attr_is_on = value if isinstance(value, bool) else None

    async def async_turn_on(self, **kwargs: Any) -> None:
        await self._store.async_request_value(self.capability, True)

    async def async_turn_off(self, **kwargs: Any) -> None:
        await self._store.async_request_value(self.capability, False)


async def async_setup_entry(
    hass: HomeAssistant,
    entry: ConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up switches for a config entry."""
    await async_setup_capability_platform(
        hass, entry, async_add_entities, "switch", GoeChargerSwitch
    )
