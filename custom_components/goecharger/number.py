"""Number platform for go-e Charger."""

from __future__ import annotations

from homeassistant.components.number import NumberDeviceClass, NumberEntity, NumberMode
from homeassistant.config_entries import ConfigEntry
from homeassistant.const import UnitOfElectricCurrent
from homeassistant.core import HomeAssistant
from homeassistant.helpers.entity_platform import AddEntitiesCallback

from .const import CURRENT_LIMIT_DEFAULT_MAX, CURRENT_LIMIT_MIN
from .entity import GoeChargerEntity, async_setup_capability_platform


class GoeChargerCurrentLimit(GoeChargerEntity, NumberEntity):
    """Number entity for the charging current limit.

    The upper bound follows the `max` option the synchronizer keeps equal to
    the charger's reported maximum current.
    """

    _attr_icon = "mdi:current-ac"
    _attr_device_class = NumberDeviceClass.CURRENT
    _attr_native_unit_of_measurement = UnitOfElectricCurrent.AMPERE
    _attr_native_min_value = CURRENT_LIMIT_MIN
    _attr_native_step = 1
    _attr_mode = NumberMode.SLIDER

    def _update_from_store(self) -> None:
        self._attr_native_value = self.capability_value
        bound = self._store.get_options(self.capability).get("max")
        self._attr_native_max_value = (
            bound if isinstance(bound, (int, float)) and bound > 0 else CURRENT_LIMIT_DEFAULT_MAX
        )

    async def async_set_native_value(self, value: float) -> None:
        await self._store.async_request_value(self.capability, round(value))


async def async_setup_entry(
    hass: HomeAssistant,
    entry: ConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up number entities for a config entry."""
    await async_setup_capability_platform(
        hass, entry, async_add_entities, "number", GoeChargerCurrentLimit
    )
