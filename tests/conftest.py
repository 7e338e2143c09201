# Copyright (c) 2025, go-e Charger integration contributors
# All rights reserved.
#
# Redistribution and use in source and binary forms, with or without
# modification, are permitted provided that the following conditions are met:
#
# 1. Redistributions of source code must retain the above copyright notice,
#    this list of conditions and the following disclaimer.
#
# 2. Redistributions in binary form must reproduce the above copyright notice,
#    this list of conditions and the following disclaimer in the documentation
#    and/or other materials provided with the distribution.
#
# THIS SOFTWARE IS PROVIDED BY THE COPYRIGHT HOLDERS AND CONTRIBUTORS "AS IS"
# AND ANY EXPRESS OR IMPLIED WARRANTIES, INCLUDING, BUT NOT LIMITED TO, THE
# IMPLIED WARRANTIES OF MERCHANTABILITY AND FITNESS FOR A PARTICULAR PURPOSE
# ARE DISCLAIMED. IN NO EVENT SHALL THE COPYRIGHT HOLDER OR CONTRIBUTORS BE
# LIABLE FOR ANY DIRECT, INDIRECT, INCIDENTAL, SPECIAL, EXEMPLARY, OR
# CONSEQUENTIAL DAMAGES (INCLUDING, BUT NOT LIMITED TO, PROCUREMENT OF
# SUBSTITUTE GOODS OR SERVICES; LOSS OF USE, DATA, OR PROFITS; OR BUSINESS
# INTERRUPTION) HOWEVER CAUSED AND ON ANY THEORY OF LIABILITY, WHETHER IN
# CONTRACT, STRICT LIABILITY, OR TORT (INCLUDING NEGLIGENCE OR OTHERWISE)
# ARISING IN ANY WAY OUT OF THE USE OF THIS SOFTWARE, EVEN IF ADVISED OF THE
# POSSIBILITY OF SUCH DAMAGE.

"""Shared test configuration for the go-e Charger integration."""

from __future__ import annotations

from dataclasses import replace
from typing import Any
from unittest.mock import MagicMock

import pytest

from custom_components.goecharger.const import CAPABILITY_PLATFORMS
from custom_components.goecharger.errors import CapabilityUpdateFailure, GoeChargerError
from custom_components.goecharger.models import ChargerStatus, TelemetrySnapshot

pytest_plugins = "pytest_homeassistant_custom_component"


@pytest.fixture(autouse=True)
def auto_enable_custom_integrations(enable_custom_integrations):
    """Enable loading this custom integration in all tests."""
    yield


BASE_SNAPSHOT = TelemetrySnapshot(
    measure_power=0.0,
    measure_current=0.0,
    measure_voltage=230.0,
    measure_temperature=21.0,
    charge_port_temperature=None,
    meter_power=0.0,
    energy_total=100.0,
    charging_allowed=True,
    current_limit=10,
    current_max=16,
    is_connected=False,
    alarm_device=False,
    status=ChargerStatus.STATION_IDLE,
)


def make_snapshot(**changes: Any) -> TelemetrySnapshot:
    """Return a telemetry snapshot with selected fields overridden."""
    return replace(BASE_SNAPSHOT, **changes)


class FakeCapabilityStore:
    """In-memory stand-in for the capability store that records every call."""

    def __init__(self, capabilities=(), values=None) -> None:
        self.capabilities: list[str] = list(capabilities)
        self.values: dict[str, Any] = dict(values or {})
        self.options: dict[str, dict[str, Any]] = {}
        self.listeners: dict[str, Any] = {}
        self.calls: list[tuple] = []
        self.fail_remove: set[str] = set()
        self.fail_add: set[str] = set()
        self.entry_id = "entry"
        self.device_key = "device"

    signal_update = "goecharger_entry_capability_update"
    signal_added = "goecharger_entry_capability_added"
    signal_removed = "goecharger_entry_capability_removed"

    def unique_id_for(self, capability: str) -> str:
        return f"{self.device_key}_{capability}"

    def get_capabilities(self) -> list[str]:
        return list(self.capabilities)

    def has_capability(self, capability: str) -> bool:
        return capability in self.capabilities

    async def async_add_capability(self, capability: str) -> None:
        self.calls.append(("add", capability))
        if capability in self.fail_add or capability not in CAPABILITY_PLATFORMS:
            raise CapabilityUpdateFailure(f"cannot add {capability}")
        if capability not in self.capabilities:
            self.capabilities.append(capability)

    async def async_remove_capability(self, capability: str) -> None:
        self.calls.append(("remove", capability))
        if capability in self.fail_remove or capability not in self.capabilities:
            raise CapabilityUpdateFailure(f"cannot remove {capability}")
        self.capabilities.remove(capability)
        self.values.pop(capability, None)

    def get_value(self, capability: str) -> Any:
        return self.values.get(capability)

    async def async_set_value(self, capability: str, value: Any) -> None:
        self.calls.append(("set", capability, value))
        self.values[capability] = value

    def get_options(self, capability: str) -> dict[str, Any]:
        return dict(self.options.get(capability, {}))

    async def async_set_options(self, capability: str, options: dict[str, Any]) -> None:
        self.calls.append(("options", capability, dict(options)))
        self.options.setdefault(capability, {}).update(options)

    def register_capability_listener(self, capability: str, listener) -> None:
        self.listeners[capability] = listener

    def has_listener(self, capability: str) -> bool:
        return capability in self.listeners

    async def async_request_value(self, capability: str, value: Any) -> Any:
        listener = self.listeners.get(capability)
        if listener is None:
            raise GoeChargerError(f"no listener for {capability}")
        return await listener(value)

    async def async_flush(self) -> None:
        self.calls.append(("flush",))

    def set_calls(self) -> list[tuple]:
        return [call for call in self.calls if call[0] == "set"]


@pytest.fixture
def mock_hass():
    """Minimal hass double exposing the event bus."""
    hass = MagicMock()
    hass.bus = MagicMock()
    hass.bus.async_fire = MagicMock()
    return hass


def fired_triggers(hass) -> list[str]:
    """Return the trigger ids fired on the mocked bus, in order."""
    return [call.args[1]["type"] for call in hass.bus.async_fire.call_args_list]
