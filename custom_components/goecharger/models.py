"""Data model for the go-e Charger integration."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .const import (
    CAP_ALARM_DEVICE,
    CAP_CHARGING_ALLOWED,
    CAP_CURRENT_LIMIT,
    CAP_CURRENT_MAX,
    CAP_ENERGY_TOTAL,
    CAP_IS_CONNECTED,
    CAP_MEASURE_CURRENT,
    CAP_MEASURE_POWER,
    CAP_MEASURE_TEMPERATURE,
    CAP_MEASURE_TEMPERATURE_PORT,
    CAP_MEASURE_VOLTAGE,
    CAP_METER_POWER,
)


class ChargerStatus(Enum):
    """Charger status as exposed through the status capability."""

    STATION_IDLE = "station_idle"
    CAR_CHARGING = "car_charging"
    CAR_WAITING = "car_waiting"
    CAR_FINISHED = "car_finished"
    ERROR = "error"
    UNKNOWN = "unknown"

    @classmethod
    def from_code(cls, code: Any) -> ChargerStatus:
        """Map the device's numeric `car` field to a status."""
        try:
            number = int(code)
        except (TypeError, ValueError):
            return cls.UNKNOWN
        return _STATUS_CODES.get(number, cls.UNKNOWN)


_STATUS_CODES = {
    1: ChargerStatus.STATION_IDLE,
    2: ChargerStatus.CAR_CHARGING,
    3: ChargerStatus.CAR_WAITING,
    4: ChargerStatus.CAR_FINISHED,
    5: ChargerStatus.ERROR,
}


@dataclass(frozen=True)
class TelemetrySnapshot:
    """One point-in-time read of every field the charger reports."""

    measure_power: float
    measure_current: float
    measure_voltage: float
    measure_temperature: float | None
    charge_port_temperature: float | None
    meter_power: float
    energy_total: float
    charging_allowed: bool
    current_limit: int
    current_max: int
    is_connected: bool
    alarm_device: bool
    status: ChargerStatus

    def capability_values(self) -> list[tuple[str, Any]]:
        """Return (capability, value) pairs in synchronization order.

        The status capability is left out; it is written separately so the
        derived charging state can be computed against the previous status.
        """
        return [
            (CAP_MEASURE_POWER, self.measure_power),
            (CAP_MEASURE_CURRENT, self.measure_current),
            (CAP_MEASURE_VOLTAGE, self.measure_voltage),
            (CAP_MEASURE_TEMPERATURE, self.measure_temperature),
            (CAP_MEASURE_TEMPERATURE_PORT, self.charge_port_temperature),
            (CAP_METER_POWER, self.meter_power),
            (CAP_CHARGING_ALLOWED, self.charging_allowed),
            (CAP_CURRENT_LIMIT, self.current_limit),
            (CAP_CURRENT_MAX, self.current_max),
            (CAP_IS_CONNECTED, self.is_connected),
            (CAP_ALARM_DEVICE, self.alarm_device),
            (CAP_ENERGY_TOTAL, self.energy_total),
        ]


@dataclass(frozen=True)
class DiscoveryResult:
    """A charger announcement received through network discovery."""

    id: str
    address: str
    name: str | None = None
    txt: dict[str, str] = field(default_factory=dict)

    @property
    def devicetype(self) -> str | None:
        return self.txt.get("devicetype")
