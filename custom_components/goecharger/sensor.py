"""Sensor platform for go-e Charger."""

from __future__ import annotations

from homeassistant.components.sensor import (
    SensorDeviceClass,
    SensorEntity,
    SensorStateClass,
)
from homeassistant.config_entries import ConfigEntry
from homeassistant.const import (
    UnitOfElectricCurrent,
    UnitOfElectricPotential,
    UnitOfEnergy,
    UnitOfPower,
    UnitOfTemperature,
)
from homeassistant.core import HomeAssistant
from homeassistant.helpers.entity import EntityCategory
from homeassistant.helpers.entity_platform import AddEntitiesCallback

from .const import (
    CAP_CURRENT_MAX,
    CAP_ENERGY_TOTAL,
    CAP_MEASURE_CURRENT,
    CAP_MEASURE_POWER,
    CAP_MEASURE_TEMPERATURE,
    CAP_MEASURE_TEMPERATURE_PORT,
    CAP_MEASURE_VOLTAGE,
    CAP_METER_POWER,
    CAP_STATUS,
)
from .device import GoeChargerDevice
from .entity import GoeChargerEntity, async_setup_capability_platform
from .models import ChargerStatus

# capability -> (device class, unit, state class)
_SENSOR_TYPES: dict[str, tuple[SensorDeviceClass | None, str | None, SensorStateClass | None]] = {
    CAP_MEASURE_POWER: (SensorDeviceClass.POWER, UnitOfPower.WATT, SensorStateClass.MEASUREMENT),
    CAP_MEASURE_CURRENT: (
        SensorDeviceClass.CURRENT,
        UnitOfElectricCurrent.AMPERE,
        SensorStateClass.MEASUREMENT,
    ),
    CAP_MEASURE_VOLTAGE: (
        SensorDeviceClass.VOLTAGE,
        UnitOfElectricPotential.VOLT,
        SensorStateClass.MEASUREMENT,
    ),
    CAP_MEASURE_TEMPERATURE: (
        SensorDeviceClass.TEMPERATURE,
        UnitOfTemperature.CELSIUS,
        SensorStateClass.MEASUREMENT,
    ),
    CAP_MEASURE_TEMPERATURE_PORT: (
        SensorDeviceClass.TEMPERATURE,
        UnitOfTemperature.CELSIUS,
        SensorStateClass.MEASUREMENT,
    ),
    CAP_METER_POWER: (
        SensorDeviceClass.ENERGY,
        UnitOfEnergy.KILO_WATT_HOUR,
        SensorStateClass.TOTAL_INCREASING,
    ),
    CAP_ENERGY_TOTAL: (
        SensorDeviceClass.ENERGY,
        UnitOfEnergy.KILO_WATT_HOUR,
        SensorStateClass.TOTAL_INCREASING,
    ),
    CAP_CURRENT_MAX: (SensorDeviceClass.CURRENT, UnitOfElectricCurrent.AMPERE, None),
    CAP_STATUS: (SensorDeviceClass.ENUM, None, None),
}


class GoeChargerSensor(GoeChargerEntity, SensorEntity):
    """Sensor for a measured or enumerated charger capability."""

    _attr_native_value: float | int | str | None = None

    def __init__(self, device: GoeChargerDevice, capability: str) -> None:
        device_class, unit, state_class = _SENSOR_TYPES.get(capability, (None, None, None))
        self._attr_device_class = device_class
        self._attr_native_unit_of_measurement = unit
        self._attr_state_class = state_class
        if capability == CAP_STATUS:
            self._attr_options = [status.value for status in ChargerStatus]
            self._attr_icon = "mdi:ev-station"
        if capability == CAP_CURRENT_MAX:
            self._attr_entity_category = EntityCategory.DIAGNOSTIC
        super().__init__(device, capability)

    def _update_from_store(self) -> None:
        self._attr_native_value = self.capability_value


async def async_setup_entry(
    hass: HomeAssistant,
    entry: ConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up sensors for a config entry."""
    await async_setup_capability_platform(
        hass, entry, async_add_entities, "sensor", GoeChargerSensor
    )
