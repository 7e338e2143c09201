"""Automation triggers fired on boolean capability transitions."""

from __future__ import annotations

import logging
from typing import Any, Iterable

from homeassistant.core import HomeAssistant

from .const import EVENT_TRIGGER, FLOW_TRIGGERS, TRIGGER_SUFFIX

_LOGGER = logging.getLogger(__name__)


def trigger_id_for(capability: str) -> str:
    """Return the trigger id derived from a capability id."""
    return f"{capability.replace('.', '_')}{TRIGGER_SUFFIX}"


def build_trigger_bindings(
    capabilities: Iterable[str], registry: Iterable[str] = FLOW_TRIGGERS
) -> dict[str, str]:
    """Map each capability with a registered trigger to that trigger's id."""
    registered = set(registry)
    bindings: dict[str, str] = {}
    for capability in capabilities:
        trigger_id = trigger_id_for(capability)
        if trigger_id in registered:
            bindings[capability] = trigger_id
    return bindings


class TriggerDispatcher:
    """Resolve and fire the trigger bound to a capability."""

    def __init__(
        self,
        hass: HomeAssistant,
        entry_id: str,
        capabilities: Iterable[str],
        *,
        device_id: str | None = None,
        name: str = "charger",
    ) -> None:
        self.hass = hass
        self.entry_id = entry_id
        self.device_id = device_id
        self._name = name
        self._bindings = build_trigger_bindings(capabilities)

    @property
    def bindings(self) -> dict[str, str]:
        return dict(self._bindings)

    def resolve(self, capability: str) -> str | None:
        return self._bindings.get(capability)

    def fire(self, capability: str, value: Any) -> bool:
        """Fire the trigger bound to `capability`; return whether one fired.

        Failures are logged and never propagate to the caller.
        """
        trigger_id = self._bindings.get(capability)
        if trigger_id is None:
            return False
        try:
            self.hass.bus.async_fire(
                EVENT_TRIGGER,
                {
                    "entry_id": self.entry_id,
                    "device_id": self.device_id,
                    "type": trigger_id,
                    "capability": capability,
                    "value": value,
                },
            )
        except Exception as err:
            _LOGGER.error("%s: failed to fire %s: %s", self._name, trigger_id, err)
            return False
        _LOGGER.debug(
            "%s: triggered %s (%s | %s)", self._name, trigger_id, capability, value
        )
        return True
