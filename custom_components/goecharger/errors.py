"""Exceptions raised by the go-e Charger integration."""

from __future__ import annotations

from homeassistant.exceptions import HomeAssistantError


class GoeChargerError(HomeAssistantError):
    """Base class for go-e Charger errors."""


class DeviceUnreachable(GoeChargerError):
    """Raised when the charger does not answer or answers with garbage."""


class InvalidSettings(GoeChargerError):
    """Raised when new device settings fail validation against the charger."""


class CapabilityUpdateFailure(GoeChargerError):
    """Raised when a capability cannot be attached to or detached from the device."""


class CommandRejected(GoeChargerError):
    """Raised when the charger refuses a write."""

    def __init__(self, key: str, value: object, status: int | None = None) -> None:
        detail = f" (status {status})" if status is not None else ""
        super().__init__(f"Charger rejected {key}={value}{detail}")
        self.key = key
        self.value = value
        self.status = status
