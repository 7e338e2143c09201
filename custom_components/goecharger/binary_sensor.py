"""Binary sensor platform for go-e Charger."""

from __future__ import annotations

from homeassistant.components.binary_sensor import (
    BinarySensorDeviceClass,
    BinarySensorEntity,
)
from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.helpers.entity_platform import AddEntitiesCallback

from .const import CAP_ALARM_DEVICE, CAP_IS_CHARGING, CAP_IS_CONNECTED
from .device import GoeChargerDevice
from .entity import GoeChargerEntity, async_setup_capability_platform

_DEVICE_CLASSES = {
    CAP_IS_CONNECTED: BinarySensorDeviceClass.PLUG,
    CAP_ALARM_DEVICE: BinarySensorDeviceClass.PROBLEM,
    CAP_IS_CHARGING: BinarySensorDeviceClass.BATTERY_CHARGING,
}


class GoeChargerBinarySensor(GoeChargerEntity, BinarySensorEntity):
    """Binary sensor for a boolean charger capability."""

    def __init__(self, device: GoeChargerDevice, capability: str) -> None:
        self._attr_device_class = _DEVICE_CLASSES.get(capability)
        super().__init__(device, capability)

    def _update_from_store(self) -> None:
        value = self.capability_value
        self._attr_is_on = value if isinstance(value, bool) else None


async def async_setup_entry(
    hass: HomeAssistant,
    entry: ConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up binary sensors for a config entry."""
    await async_setup_capability_platform(
        hass, entry, async_add_entities, "binary_sensor", GoeChargerBinarySensor
    )
